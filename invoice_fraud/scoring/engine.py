"""Trust scoring over an extracted invoice field set.

Starts from 100 and subtracts weighted indicator severities:

    math checks        x2
    business checks    x1.5
    OCR confidence     flat 10 (16 below 50%)
    format checks      x1
    integrity signals  x1.2

The score is clamped to [0, 100]. Scoring is a pure function of its inputs
plus the clock, so re-scoring edited fields is always safe.
"""

import re
from collections.abc import Callable, Iterable
from datetime import date, datetime

from invoice_fraud.fields.models import FieldSet
from invoice_fraud.logging.logger import Log
from invoice_fraud.scoring.amounts import parse_amount, parse_date, parse_year
from invoice_fraud.scoring.models import FraudAssessment, Indicator, IndicatorType, RiskLevel

MATH_WEIGHT = 2.0
BUSINESS_WEIGHT = 1.5
FORMAT_WEIGHT = 1.0
INTEGRITY_WEIGHT = 1.2

LOW_CONFIDENCE_THRESHOLD = 70
VERY_LOW_CONFIDENCE_THRESHOLD = 50
LOW_CONFIDENCE_PENALTY = 10
VERY_LOW_CONFIDENCE_PENALTY = 16

BALANCE_TOLERANCE = 1.0
GST_RATE_RANGE = (8.0, 12.0)
VEHICLE_PRICE_RANGE = (1000.0, 500000.0)
EARLIEST_INVOICE_DATE = date(2010, 1, 1)
EARLIEST_VEHICLE_YEAR = 1990
KM_PER_YEAR = 25000
MIN_PLAUSIBLE_ODOMETER = 100

LOW_RISK_SCORE = 80
MEDIUM_RISK_SCORE = 50

_PHONE_RE = re.compile(r"[\d\s+()\-]{8,}")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_POSTCODE_RE = re.compile(r"\d{4}")
_ABN_RE = re.compile(r"\d{11}")


class FraudScoringEngine:
    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        *,
        low_confidence_threshold: float = LOW_CONFIDENCE_THRESHOLD,
    ) -> None:
        self._clock = clock
        self._low_confidence_threshold = low_confidence_threshold

    def score(
        self,
        fields: FieldSet,
        extraction_confidence: float | None = None,
        integrity_indicators: Iterable[Indicator] = (),
    ) -> FraudAssessment:
        today = self._clock().date()
        indicators: list[Indicator] = []
        score = 100.0

        for group, weight in (
            (self._check_math(fields), MATH_WEIGHT),
            (self._check_business_rules(fields, today), BUSINESS_WEIGHT),
        ):
            indicators.extend(group)
            score -= sum(indicator.severity for indicator in group) * weight

        if (
            extraction_confidence is not None
            and extraction_confidence < self._low_confidence_threshold
        ):
            very_low = extraction_confidence < VERY_LOW_CONFIDENCE_THRESHOLD
            indicators.append(
                Indicator(
                    type=IndicatorType.WARNING,
                    field="general",
                    message=(
                        f"Low OCR confidence ({extraction_confidence:g}%) - "
                        "document quality may be poor or tampered"
                    ),
                    severity=8 if very_low else 5,
                )
            )
            score -= VERY_LOW_CONFIDENCE_PENALTY if very_low else LOW_CONFIDENCE_PENALTY

        format_issues = self._check_formats(fields)
        indicators.extend(format_issues)
        score -= sum(indicator.severity for indicator in format_issues) * FORMAT_WEIGHT

        integrity = list(integrity_indicators)
        indicators.extend(integrity)
        score -= sum(indicator.severity for indicator in integrity) * INTEGRITY_WEIGHT

        fraud_score = max(0.0, min(100.0, score))
        assessment = FraudAssessment(
            fraud_score=fraud_score,
            fraud_indicators=indicators,
            risk_level=risk_level_for(fraud_score),
        )
        Log.info(
            "Fraud score computed",
            score=round(fraud_score, 2),
            risk=assessment.risk_level.value,
            indicators=len(indicators),
        )
        return assessment

    @staticmethod
    def field_risk_level(field: str, indicators: Iterable[Indicator]) -> RiskLevel:
        """Risk tier of a single field from the worst indicator raised on it."""
        severities = [indicator.severity for indicator in indicators if indicator.field == field]
        if not severities:
            return RiskLevel.LOW
        worst = max(severities)
        if worst >= 8:
            return RiskLevel.HIGH
        if worst >= 5:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    @staticmethod
    def _check_math(fields: FieldSet) -> list[Indicator]:
        indicators: list[Indicator] = []
        total = parse_amount(fields.total_cost)
        deposit = parse_amount(fields.deposit)
        trade_in = parse_amount(fields.trade_in_value)
        balance = parse_amount(fields.balance_owing)
        gst = parse_amount(fields.gst_amount)

        if total is not None and balance is not None:
            expected = total - (deposit or 0.0) - (trade_in or 0.0)
            if abs(balance - expected) > BALANCE_TOLERANCE:
                indicators.append(
                    Indicator(
                        type=IndicatorType.CRITICAL,
                        field="balanceOwing",
                        message=(
                            f"Balance calculation error: Expected {expected:.2f}, "
                            f"found {balance:.2f}"
                        ),
                        severity=10,
                    )
                )

        if gst is not None and total is not None and total > 0:
            gst_rate = gst / total * 100
            low, high = GST_RATE_RANGE
            if not low <= gst_rate <= high:
                indicators.append(
                    Indicator(
                        type=IndicatorType.WARNING,
                        field="gstAmount",
                        message=f"Unusual GST rate: {gst_rate:.1f}% (expected ~10%)",
                        severity=6,
                    )
                )

        if total is not None:
            low, high = VEHICLE_PRICE_RANGE
            if not low <= total <= high:
                indicators.append(
                    Indicator(
                        type=IndicatorType.WARNING,
                        field="totalCost",
                        message="Vehicle price outside typical range",
                        severity=4,
                    )
                )
        return indicators

    @staticmethod
    def _check_business_rules(fields: FieldSet, today: date) -> list[Indicator]:
        indicators: list[Indicator] = []

        if fields.vin and len(fields.vin) != 17:
            indicators.append(
                Indicator(
                    type=IndicatorType.CRITICAL,
                    field="vin",
                    message="Invalid VIN length (should be 17 characters)",
                    severity=9,
                )
            )

        if fields.vendor_abn and not _ABN_RE.fullmatch("".join(fields.vendor_abn.split())):
            indicators.append(
                Indicator(
                    type=IndicatorType.WARNING,
                    field="vendorAbn",
                    message="ABN format appears invalid",
                    severity=5,
                )
            )

        purchase_date = parse_date(fields.purchase_date)
        if purchase_date is not None:
            if purchase_date > today:
                indicators.append(
                    Indicator(
                        type=IndicatorType.CRITICAL,
                        field="purchaseDate",
                        message="Invoice date is in the future",
                        severity=8,
                    )
                )
            if purchase_date < EARLIEST_INVOICE_DATE:
                indicators.append(
                    Indicator(
                        type=IndicatorType.WARNING,
                        field="purchaseDate",
                        message="Very old invoice date",
                        severity=3,
                    )
                )

        year = parse_year(fields.vehicle_year)
        if year is not None and not EARLIEST_VEHICLE_YEAR <= year <= today.year + 1:
            indicators.append(
                Indicator(
                    type=IndicatorType.WARNING,
                    field="vehicleYear",
                    message="Vehicle year outside expected range",
                    severity=4,
                )
            )

        odometer = parse_amount(fields.odometer)
        if odometer is not None and year is not None:
            age = today.year - year
            if odometer > 2 * age * KM_PER_YEAR:
                indicators.append(
                    Indicator(
                        type=IndicatorType.WARNING,
                        field="odometer",
                        message="Unusually high odometer reading for vehicle age",
                        severity=5,
                    )
                )
            if odometer < MIN_PLAUSIBLE_ODOMETER and age > 1:
                indicators.append(
                    Indicator(
                        type=IndicatorType.WARNING,
                        field="odometer",
                        message="Suspiciously low odometer reading",
                        severity=6,
                    )
                )
        return indicators

    @staticmethod
    def _check_formats(fields: FieldSet) -> list[Indicator]:
        indicators: list[Indicator] = []
        if fields.phone and not _PHONE_RE.fullmatch(fields.phone):
            indicators.append(
                Indicator(
                    type=IndicatorType.INFO,
                    field="phone",
                    message="Phone number format may be unusual",
                    severity=2,
                )
            )
        if fields.email and not _EMAIL_RE.fullmatch(fields.email):
            indicators.append(
                Indicator(
                    type=IndicatorType.WARNING,
                    field="email",
                    message="Email format appears invalid",
                    severity=3,
                )
            )
        if fields.postcode and not _POSTCODE_RE.fullmatch(fields.postcode):
            indicators.append(
                Indicator(
                    type=IndicatorType.INFO,
                    field="postcode",
                    message="Postcode format may be invalid (should be 4 digits)",
                    severity=2,
                )
            )
        return indicators


def risk_level_for(score: float) -> RiskLevel:
    if score >= LOW_RISK_SCORE:
        return RiskLevel.LOW
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH

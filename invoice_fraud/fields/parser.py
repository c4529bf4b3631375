"""Deterministic regex extraction of invoice fields.

Used only when AI extraction is unavailable. Every rule is independent of the
others; a field stays empty when its pattern does not match.
"""

import re
from collections.abc import Callable
from datetime import date
from typing import ClassVar

from invoice_fraud.fields.models import FieldSet
from invoice_fraud.logging.logger import Log

_AMOUNT = r"\$?\s*(\d[\d,]*(?:\.\d{1,2})?)"

AUSTRALIAN_STATES = ("NSW", "VIC", "QLD", "WA", "SA", "TAS", "NT", "ACT")

VEHICLE_BRANDS = (
    "Toyota", "Holden", "Ford", "Mazda", "Honda", "Nissan", "Hyundai", "Kia",
    "Subaru", "Mitsubishi", "BMW", "Mercedes-Benz", "Mercedes", "Audi",
    "Volkswagen", "Tesla", "Volvo", "Lexus", "Jeep", "Isuzu", "Suzuki",
    "Skoda", "Peugeot", "Renault", "Land Rover", "Porsche", "MG",
)
BODY_TYPES = (
    "Station Wagon", "Cab Chassis", "Dual Cab", "People Mover", "Hatchback",
    "Sedan", "Wagon", "SUV", "Utility", "Ute", "Coupe", "Convertible", "Van",
)
TRANSMISSIONS = (
    "Sports Automatic", "Semi-Automatic", "Automatic", "Manual", "Auto", "CVT", "DCT",
)
FUEL_TYPES = (
    "Premium Unleaded", "Unleaded Petrol", "Unleaded", "Plug-in Hybrid",
    "Petrol", "Diesel", "Hybrid", "Electric", "LPG",
)
VENDOR_SUFFIXES = ("Motors", "Automotive", "Cars", "Dealership", "Pty Ltd", "Ltd")

FALLBACK_CONFIDENCE = 60


def _alternation(words: tuple[str, ...]) -> str:
    return "|".join(re.escape(word).replace(r"\ ", r"\s+") for word in words)


def _canonical(vocabulary: tuple[str, ...]) -> Callable[[str], str]:
    lookup = {re.sub(r"\s+", " ", word).lower(): word for word in vocabulary}

    def canonicalize(value: str) -> str:
        return lookup.get(re.sub(r"\s+", " ", value).lower(), value)

    return canonicalize


_canonical_brand = _canonical(VEHICLE_BRANDS)


def _strip_amount(value: str) -> str:
    return value.rstrip(",")


def _compact(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


class FieldParser:
    """Extracts a partial FieldSet from raw invoice text with fixed patterns."""

    _SIMPLE_RULES: ClassVar[list[tuple[str, re.Pattern[str], Callable[[str], str]]]] = [
        (
            "vendorAbn",
            re.compile(r"\bABN[:\s]*(\d{2}\s\d{3}\s\d{3}\s\d{3})", re.I),
            _compact,
        ),
        (
            "gstAmount",
            re.compile(
                r"(?<![A-Za-z])(?<!inc\s)(?<!incl\s)(?<!incl\.\s)(?<!including\s)"
                r"(?<!ex\s)(?<!excl\s)(?<!excluding\s)"
                r"GST(?:\s+amount)?(?:\s*\(?10\s?%\)?)?[:\s]*" + _AMOUNT,
                re.I,
            ),
            _strip_amount,
        ),
        (
            "totalCost",
            re.compile(
                r"(?<![A-Za-z])(?<!sub\s)(?<!sub-)"
                r"(?:total(?:\s+(?:cost|amount|price|payable|due))?|amount\s+due)"
                r"(?:\s*\(?(?:inc|incl\.?|including)\s+GST\)?)?[:\s]*" + _AMOUNT,
                re.I,
            ),
            _strip_amount,
        ),
        (
            "purchasePrice",
            re.compile(
                r"\bsub[\s-]?total(?:\s*\(?(?:ex|excl\.?|excluding)\s+GST\)?)?[:\s]*" + _AMOUNT,
                re.I,
            ),
            _strip_amount,
        ),
        (
            "deposit",
            re.compile(r"\bdeposit(?:\s+paid)?[:\s]*" + _AMOUNT, re.I),
            _strip_amount,
        ),
        (
            "tradeInValue",
            re.compile(r"\btrade[\s-]?in(?:\s+(?:value|allowance))?[:\s]*" + _AMOUNT, re.I),
            _strip_amount,
        ),
        (
            "balanceOwing",
            re.compile(r"\bbalance(?:\s+(?:owing|due|payable))?[:\s]*" + _AMOUNT, re.I),
            _strip_amount,
        ),
        (
            "invoiceNumber",
            re.compile(
                r"\b(?:Tax\s+)?Invoice\s*(?:Number|No\.?|#)?[:\s#]*"
                r"([A-Z0-9-]*\d[A-Z0-9-]*)\b",
                re.I,
            ),
            str.upper,
        ),
        (
            "vin",
            re.compile(
                r"\b(?:VIN|Chassis)(?:\s*(?:Number|No\.?|#))?[:\s#]*([A-Z0-9]{17})\b",
                re.I,
            ),
            str.upper,
        ),
        (
            "vehicleYear",
            re.compile(r"\b(20\d{2})\b"),
            str,
        ),
        (
            "bodyType",
            re.compile(r"\bBody(?:\s+Type)?[:\s]+(" + _alternation(BODY_TYPES) + r")\b", re.I),
            _canonical(BODY_TYPES),
        ),
        (
            "transmission",
            re.compile(
                r"\b(?:Transmission|Trans\.?)[:\s]+(" + _alternation(TRANSMISSIONS) + r")\b",
                re.I,
            ),
            _canonical(TRANSMISSIONS),
        ),
        (
            "fuelType",
            re.compile(r"\bFuel(?:\s+Type)?[:\s]+(" + _alternation(FUEL_TYPES) + r")\b", re.I),
            _canonical(FUEL_TYPES),
        ),
        (
            "color",
            re.compile(
                r"\bColou?r[:\s]+([A-Za-z]+(?:[ \t](?!(?:engine|rego|registration|vin|body"
                r"|fuel|trans|odometer|year|make|model)\b)[A-Za-z]+)?)",
                re.I,
            ),
            str.title,
        ),
        (
            "engineNumber",
            re.compile(r"\bEngine\s*(?:Number|No\.?|#)[:\s#]*([A-Z0-9-]{5,20})\b", re.I),
            str.upper,
        ),
        (
            "registration",
            re.compile(
                r"\b(?:Registration|Rego|Reg\.?)\s*(?:Number|No\.?|Plate|#)?[:\s#]*"
                r"(?=[A-Z-]*\d)([A-Z0-9]{1,4}-?[A-Z0-9]{1,4})\b",
                re.I,
            ),
            str.upper,
        ),
        (
            "odometer",
            re.compile(r"\b(?:Odometer|Odo|Kilometres|Kms)[:\s]*(\d[\d,]*)", re.I),
            _strip_amount,
        ),
        (
            "vendorName",
            re.compile(
                r"\b([A-Z][a-z]+(?:\s+[A-Z][A-Za-z&']*){0,3}\s+(?:"
                + _alternation(VENDOR_SUFFIXES)
                + r"))\b"
            ),
            _compact,
        ),
        (
            "email",
            re.compile(r"\b([\w.+-]+@[\w-]+(?:\.[\w-]+)+)\b"),
            str.lower,
        ),
        (
            "phone",
            re.compile(r"\b(?:Ph|Phone|Tel|Telephone|Mobile|Mob)[:.\s]*(\+?[\d()][\d\s()-]{6,}\d)", re.I),
            _compact,
        ),
        (
            "bsb",
            re.compile(r"\bBSB[:\s#]*(\d{3}[-\s]?\d{3})\b", re.I),
            _compact,
        ),
        (
            "accountNumber",
            re.compile(
                r"\b(?:Account|Acc|A/C)\s*(?:Number|No\.?|#)[:\s#]*(\d[\d\s-]{4,14}\d)\b",
                re.I,
            ),
            _compact,
        ),
    ]

    _STATE_LABEL_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\bState[:\s]+(" + "|".join(AUSTRALIAN_STATES) + r")\b", re.I
    )
    _STATE_ADDRESS_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\b(" + "|".join(AUSTRALIAN_STATES) + r")[,\s]+(\d{4})\b"
    )
    _DATE_RE: ClassVar[re.Pattern[str]] = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{4})\b")
    _VEHICLE_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\b(" + _alternation(VEHICLE_BRANDS) + r")[ \t]+"
        r"([A-Za-z0-9][A-Za-z0-9-]*(?:[ \t]+[A-Za-z0-9][A-Za-z0-9-]*){0,2})",
        re.I,
    )

    def parse(self, text: str) -> FieldSet:
        """Extract whatever fields the patterns can find; the rest stay empty."""
        found: dict[str, str] = {}
        for key, pattern, clean in self._SIMPLE_RULES:
            match = pattern.search(text)
            if match:
                found[key] = clean(match.group(1))

        found.update(self._parse_vehicle(text))
        found.update(self._parse_state_and_postcode(text))
        purchase_date = self._parse_date(text)
        if purchase_date:
            found["purchaseDate"] = purchase_date

        Log.info(f"Regex fallback extracted {len(found)} fields")
        return FieldSet.from_mapping(found)

    @staticmethod
    def low_confidence_fields(fields: FieldSet) -> list[str]:
        """Fallback-parsed fields whose value is too short to trust."""
        return [key for key, value in fields.present().items() if len(value) < 2]

    def _parse_vehicle(self, text: str) -> dict[str, str]:
        match = self._VEHICLE_RE.search(text)
        if not match:
            return {}
        return {
            "vehicleMake": _canonical_brand(match.group(1)),
            "vehicleModel": _compact(match.group(2)),
        }

    def _parse_state_and_postcode(self, text: str) -> dict[str, str]:
        result: dict[str, str] = {}
        address = self._STATE_ADDRESS_RE.search(text)
        if address:
            result["state"] = address.group(1)
            result["postcode"] = address.group(2)
        labelled = self._STATE_LABEL_RE.search(text)
        if labelled:
            result["state"] = labelled.group(1).upper()
        return result

    def _parse_date(self, text: str) -> str | None:
        """First DD/MM/YYYY (or DD-MM-YYYY) date, reformatted as YYYY-MM-DD."""
        for match in self._DATE_RE.finditer(text):
            day, month, year = (int(part) for part in match.groups())
            try:
                return date(year, month, day).isoformat()
            except ValueError:
                continue
        return None

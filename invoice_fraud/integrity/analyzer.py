"""Document-level tamper heuristics.

The analyzer looks only at the file itself (info dictionary, fonts, layout,
annotations, file timestamps), never at extracted field values. Each rule
contributes at most one indicator and rules do not depend on each other.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from statistics import pvariance

from invoice_fraud.documents.models import Document
from invoice_fraud.integrity.exceptions import IntegrityAnalysisFailed
from invoice_fraud.integrity.models import FontProfile, IntegrityAnalysis, Position
from invoice_fraud.logging.logger import Log
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.exceptions import PdfReadError
from invoice_fraud.pdf.models import DocumentMetadata, PageLayout, TextRun
from invoice_fraud.scoring.models import Indicator, IndicatorType

SUSPICIOUS_SOFTWARE = (
    "pdf editor", "ilovepdf", "smallpdf", "sejda", "pdftk", "foxit phantom",
    "adobe acrobat dc", "nitro pro", "pdfcreator", "cutepdf", "bullzip",
    "pdf24", "pdf architect", "wondershare", "pdfelement", "docusign",
    "hellosign", "pandadoc", "adobe sign",
)
PLACEHOLDER_TITLES = ("untitled", "document", "invoice", "receipt", "temp", "test")
COMMON_FONTS = ("times", "arial", "helvetica", "calibri", "georgia")

MAX_CREATION_TO_MODIFICATION = timedelta(hours=24)
RECENT_EDIT_WINDOW = timedelta(seconds=60)
MAX_DISTINCT_FONTS = 5
MIN_OCCURRENCES_FOR_ALIGNMENT = 10
MAX_Y_VARIANCE = 100.0
MAX_LISTED_FONTS = 3


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class DocumentIntegrityAnalyzer:
    """Produces tamper indicators from document metadata and layout."""

    def __init__(
        self,
        pdf_reader: BasePdfReader,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._pdf_reader = pdf_reader
        self._clock = clock

    def analyze(self, document: Document) -> IntegrityAnalysis:
        """Analyze a document. Never raises for unreadable files.

        A failed analysis yields a single generic indicator instead of the
        rule set.
        """
        try:
            if document.is_pdf:
                analysis = self._analyze_pdf(document)
            else:
                analysis = self._analyze_image(document)
        except IntegrityAnalysisFailed as exc:
            Log.warning(f"Integrity analysis failed: {exc}")
            return IntegrityAnalysis(
                indicators=[
                    Indicator(
                        type=IndicatorType.METADATA_TAMPERING,
                        field="general",
                        message=(
                            "Could not analyze document metadata - file may be "
                            "corrupted or protected"
                        ),
                        severity=4,
                    )
                ]
            )
        Log.info(f"Integrity analysis found {len(analysis.indicators)} indicators")
        return analysis

    def _analyze_pdf(self, document: Document) -> IntegrityAnalysis:
        try:
            metadata = self._pdf_reader.read_metadata(document.content)
            layout = self._pdf_reader.first_page_layout(document.content)
        except PdfReadError as exc:
            raise IntegrityAnalysisFailed(str(exc)) from exc

        now = _aware(self._clock())
        indicators = self._check_metadata(metadata, now)
        font_profiles = build_font_profiles(layout.text_runs)
        has_text_layer = bool(layout.text_runs)
        if has_text_layer:
            indicators.extend(self._check_fonts(font_profiles))
        indicators.extend(self._check_annotations(layout))

        return IntegrityAnalysis(
            metadata=metadata,
            has_text_layer=has_text_layer,
            text_layer_text=" ".join(run.text for run in layout.text_runs) or None,
            font_profiles=font_profiles,
            indicators=indicators,
        )

    def _analyze_image(self, document: Document) -> IntegrityAnalysis:
        if document.last_modified is None:
            return IntegrityAnalysis()
        modified = _aware(document.last_modified)
        metadata = DocumentMetadata(creation_date=modified, modification_date=modified)
        indicators: list[Indicator] = []
        if _aware(self._clock()) - modified < RECENT_EDIT_WINDOW:
            indicators.append(
                Indicator(
                    type=IndicatorType.METADATA_TAMPERING,
                    field="file-timestamp",
                    message="File was modified very recently - may indicate recent editing",
                    severity=5,
                )
            )
        return IntegrityAnalysis(metadata=metadata, indicators=indicators)

    @staticmethod
    def _check_metadata(metadata: DocumentMetadata, now: datetime) -> list[Indicator]:
        indicators: list[Indicator] = []
        created = metadata.creation_date and _aware(metadata.creation_date)
        modified = metadata.modification_date and _aware(metadata.modification_date)

        if created and modified and modified - created > MAX_CREATION_TO_MODIFICATION:
            days = round((modified - created) / timedelta(days=1))
            indicators.append(
                Indicator(
                    type=IndicatorType.METADATA_TAMPERING,
                    field="modification-date",
                    message=f"Document was modified {days} days after creation",
                    severity=6,
                )
            )

        if modified and modified > now:
            indicators.append(
                Indicator(
                    type=IndicatorType.METADATA_TAMPERING,
                    field="modification-date",
                    message="Document modification date is in the future",
                    severity=8,
                )
            )

        software_indicator = _check_software(metadata)
        if software_indicator is not None:
            indicators.append(software_indicator)

        if not created and not modified:
            indicators.append(
                Indicator(
                    type=IndicatorType.METADATA_TAMPERING,
                    field="missing-metadata",
                    message="Document has no creation or modification timestamps",
                    severity=4,
                )
            )

        title = (metadata.title or "").lower()
        if title and any(word in title for word in PLACEHOLDER_TITLES):
            indicators.append(
                Indicator(
                    type=IndicatorType.METADATA_TAMPERING,
                    field="document-title",
                    message=f'Generic document title: "{metadata.title}"',
                    severity=3,
                )
            )
        return indicators

    @staticmethod
    def _check_fonts(profiles: list[FontProfile]) -> list[Indicator]:
        indicators: list[Indicator] = []
        font_names = list(dict.fromkeys(profile.font_name for profile in profiles))

        if len(font_names) > MAX_DISTINCT_FONTS:
            indicators.append(
                Indicator(
                    type=IndicatorType.VISUAL_INCONSISTENCY,
                    field="font-variety",
                    message=f"Document uses {len(font_names)} different fonts - may indicate editing",
                    severity=5,
                )
            )

        uncommon = [
            name for name in font_names
            if not any(common in name.lower() for common in COMMON_FONTS)
        ]
        if uncommon:
            indicators.append(
                Indicator(
                    type=IndicatorType.VISUAL_INCONSISTENCY,
                    field="font-type",
                    message=f"Unusual fonts detected: {', '.join(uncommon[:MAX_LISTED_FONTS])}",
                    severity=4,
                )
            )

        misaligned = [
            profile.font_name
            for profile in profiles
            if profile.count > MIN_OCCURRENCES_FOR_ALIGNMENT
            and pvariance([position.y for position in profile.positions]) > MAX_Y_VARIANCE
        ]
        if misaligned:
            indicators.append(
                Indicator(
                    type=IndicatorType.VISUAL_INCONSISTENCY,
                    field="text-alignment",
                    message=f"Inconsistent text alignment detected for {', '.join(misaligned[:MAX_LISTED_FONTS])}",
                    severity=4,
                )
            )
        return indicators

    @staticmethod
    def _check_annotations(layout: PageLayout) -> list[Indicator]:
        if layout.annotation_count <= 0:
            return []
        return [
            Indicator(
                type=IndicatorType.VISUAL_INCONSISTENCY,
                field="document-structure",
                message=(
                    f"Document contains {layout.annotation_count} annotation(s) - "
                    "may indicate editing"
                ),
                severity=3,
            )
        ]


def _check_software(metadata: DocumentMetadata) -> Indicator | None:
    for software in (metadata.creator, metadata.producer):
        if not software:
            continue
        lowered = software.lower()
        match = next((tool for tool in SUSPICIOUS_SOFTWARE if tool in lowered), None)
        if match is None:
            continue
        return Indicator(
            type=IndicatorType.METADATA_TAMPERING,
            field="software-signature",
            message=f"Document created/modified with {software} - commonly used for editing PDFs",
            severity=7 if "editor" in match or "sign" in match else 5,
        )
    return None


def build_font_profiles(text_runs: list[TextRun]) -> list[FontProfile]:
    """Group text runs by (font name, rounded font size)."""
    profiles: dict[tuple[str, int], FontProfile] = {}
    for run in text_runs:
        if not run.font_name:
            continue
        key = (run.font_name, round(run.font_size))
        profile = profiles.setdefault(key, FontProfile(font_name=key[0], font_size=key[1]))
        profile.count += 1
        profile.positions.append(
            Position(x=run.x, y=run.y, width=run.width, height=run.height)
        )
    return list(profiles.values())

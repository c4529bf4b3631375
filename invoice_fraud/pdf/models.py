from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class DocumentMetadata:
    """Snapshot of a document's info dictionary (or file timestamps for images)."""

    creation_date: datetime | None = None
    modification_date: datetime | None = None
    creator: str | None = None
    producer: str | None = None
    title: str | None = None
    subject: str | None = None
    author: str | None = None
    keywords: str | None = None


@dataclass(frozen=True)
class TextRun:
    """A positioned run of text with its font, in page coordinates."""

    text: str
    font_name: str
    font_size: float
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PageLayout:
    """Text runs and annotation count of a single page."""

    text_runs: list[TextRun] = field(default_factory=list)
    annotation_count: int = 0

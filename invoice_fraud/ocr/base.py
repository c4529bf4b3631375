from abc import ABC, abstractmethod
from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class OcrPageResult:
    """Recognized text of one image with the engine's mean word confidence (0-100)."""

    text: str
    confidence: float


class BaseOcrEngine(ABC):
    """Contract for OCR engine handles.

    An engine is a long-lived resource: `start()` acquires it (a no-op when
    already running) and `stop()` releases it. Implementations do no internal
    locking, so one recognition call may be in flight per instance.
    """

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the engine has been started and not yet stopped."""

    @abstractmethod
    def start(self) -> None:
        """Initialize the engine.

        Raises:
            ExtractionFailed: if the engine cannot be initialized.
        """

    @abstractmethod
    def stop(self) -> None:
        """Release the engine. Safe to call when not running."""

    @abstractmethod
    def recognize(self, image: Image.Image) -> OcrPageResult:
        """Recognize text in an image.

        Raises:
            ExtractionFailed: if the engine errors.
        """

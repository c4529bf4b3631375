class ExtractionFailed(Exception):
    """Raised when OCR or text-layer extraction of a document fails.

    The original engine error is always chained as ``__cause__``.
    """

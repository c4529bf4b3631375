class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class FileReadError(ProcessorError):
    """Raised when a file cannot be read from disk."""


class UnsupportedDocumentTypeError(ProcessorError):
    """Raised when a file is neither a PDF nor an image."""

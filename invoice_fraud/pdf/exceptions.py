class PdfReadError(Exception):
    """Raised when a PDF cannot be opened, parsed, or rendered."""

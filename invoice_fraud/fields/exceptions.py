class InvalidFieldSetError(Exception):
    """Raised when a field mapping contains unknown keys or non-string values."""

class IntegrityAnalysisFailed(Exception):
    """Raised when document metadata or layout cannot be analyzed."""

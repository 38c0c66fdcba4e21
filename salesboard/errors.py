"""
Errors that stop the pipeline before any row is processed.

Row-level validation failures are never raised; see ``salesboard.cleaner``.
"""


class SourceError(ValueError):
    """
    Raised when the input source cannot be turned into text rows.
    """


class SourceUnavailableError(SourceError):
    """
    Raised when the source file is missing or unreadable.
    """


class EmptySourceError(SourceError):
    """
    Raised when the source holds no header line.
    """

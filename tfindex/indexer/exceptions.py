"""Custom exceptions for scanning and emission.

Unreadable packages are recovered by the scanner; write failures abort
the emission run.
"""


class TfIndexError(Exception):
    """Base class for tfindex errors.

    Attributes:
        message: Human-readable error description
        details: Dict with context for debugging (paths, counts, causes)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PackageLoadError(TfIndexError):
    """Raised when a package directory cannot be listed, read or parsed."""


class StorageWriteError(TfIndexError):
    """Raised by a storage backend when a single write fails."""


class EmissionError(TfIndexError):
    """Raised when index emission aborts on its first failed write."""

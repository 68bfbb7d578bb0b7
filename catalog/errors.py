from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for every failure raised by the ingestion engine."""
    pass


class ArchiveNotFound(CatalogError):
    """Raised when the spreadsheet archive path does not exist."""
    pass


class MalformedArchive(CatalogError):
    """Raised when the archive is not a ZIP file or lacks its content entry."""
    pass


class TransportFailure(CatalogError):
    """Raised when a remote chunk cannot be fetched or returns a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResult(CatalogError):
    """Raised when a source tier produced no usable records."""
    pass


class SourcesExhausted(CatalogError):
    """Raised when every tier of a fallback chain failed."""
    pass

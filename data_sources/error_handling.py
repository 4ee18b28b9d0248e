"""
Error types for the Urban Metrics engine

Only the import path can fail. The calculators never raise: missing or
degenerate inputs resolve to 0 with a "low" confidence grade instead.
"""

from typing import Optional


class UrbanMetricsError(Exception):
    """Base exception for Urban Metrics errors."""
    pass


class IndexImportError(UrbanMetricsError):
    """Base exception for failures while importing an external index."""

    error_type = "import_error"

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "error_type": self.error_type, "message": str(self)}


class EmptyFileError(IndexImportError):
    """Raised when a file has no header row or no data row."""

    error_type = "empty_file"


class MissingColumnError(IndexImportError):
    """Raised when a required column is absent from the header."""

    error_type = "missing_column"

    def __init__(self, column: str, headers: Optional[list] = None):
        super().__init__(f'Value column "{column}" not found in CSV')
        self.column = column
        self.headers = list(headers or [])

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["column"] = self.column
        return payload


class NoValidRowsError(IndexImportError):
    """Raised when no row survives numeric and key validation."""

    error_type = "no_valid_rows"


class ImporterStateError(UrbanMetricsError):
    """Raised when importer operations are called out of order."""
    pass

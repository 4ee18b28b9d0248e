"""
External Index Importer
Turns a delimited text file (CSV / semicolon / TSV) into an ExternalIndex

Lifecycle:
    UNINGESTED --parse()--> PARSED --import_index()--> IMPORTED
                    \\                      \\
                     `--> FAILED             `--> FAILED

Rows with an unparsable value or no usable key are dropped silently; the
import only fails when no row survives.
"""

import csv
import math
import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from logging_config import get_logger, log_error
from .error_handling import (
    EmptyFileError,
    ImporterStateError,
    IndexImportError,
    MissingColumnError,
    NoValidRowsError,
)
from .models import ExternalIndex

logger = get_logger(__name__)


LAT_PATTERNS = [
    re.compile(r"^lat$", re.IGNORECASE),
    re.compile(r"^latitude$", re.IGNORECASE),
    re.compile(r"^lat_", re.IGNORECASE),
    re.compile(r"_lat$", re.IGNORECASE),
    re.compile(r"^y$", re.IGNORECASE),
    re.compile(r"^lat\d*$", re.IGNORECASE),
]

LON_PATTERNS = [
    re.compile(r"^lon$", re.IGNORECASE),
    re.compile(r"^lng$", re.IGNORECASE),
    re.compile(r"^longitude$", re.IGNORECASE),
    re.compile(r"^long$", re.IGNORECASE),
    re.compile(r"^lon_", re.IGNORECASE),
    re.compile(r"_lon$", re.IGNORECASE),
    re.compile(r"^x$", re.IGNORECASE),
    re.compile(r"^lng\d*$", re.IGNORECASE),
    re.compile(r"^lon\d*$", re.IGNORECASE),
]

COORDINATE_PRECISION = 6


class ImportState(Enum):
    UNINGESTED = "uningested"
    PARSED = "parsed"
    IMPORTED = "imported"
    FAILED = "failed"


@dataclass
class ImportConfig:
    """Column selection and labelling for one import."""
    name: str
    value_column: str
    area_column: Optional[str] = None
    lat_column: Optional[str] = None
    lon_column: Optional[str] = None
    unit: str = ""
    description: Optional[str] = None
    detect_coordinates: bool = True


@dataclass
class ParsedTable:
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)
    delimiter: str = ","
    skipped_rows: int = 0


def detect_delimiter(first_line: str) -> str:
    """
    Pick the delimiter from the header line.

    Tab wins if present; semicolon only when there is no comma; comma otherwise.
    """
    if "\t" in first_line:
        return "\t"
    if ";" in first_line and "," not in first_line:
        return ";"
    return ","


def _clean_field(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def _split_line(line: str, delimiter: str) -> List[str]:
    """One line into cleaned fields. Quotes never span lines or delimiters."""
    values = next(csv.reader([line], delimiter=delimiter, quoting=csv.QUOTE_NONE), [])
    return [_clean_field(value) for value in values]


def _parse_number(raw: Optional[str]) -> Optional[float]:
    """Finite float or None."""
    if raw is None:
        return None
    try:
        number = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def detect_coordinate_columns(headers: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Guess latitude / longitude columns from header names.

    Returns:
        (lat_column, lon_column); either may be None
    """
    lat_column = next(
        (h for h in headers if any(p.search(h.strip()) for p in LAT_PATTERNS)), None
    )
    lon_column = next(
        (h for h in headers if any(p.search(h.strip()) for p in LON_PATTERNS)), None
    )
    return lat_column, lon_column


def coordinate_key(lat: float, lon: float) -> str:
    return f"{lat:.{COORDINATE_PRECISION}f},{lon:.{COORDINATE_PRECISION}f}"


class ExternalIndexImporter:
    """
    Two-step importer: parse the text, then import one value column.

    An importer handles one file. Calling import_index() before parse(), or
    parse() twice, raises ImporterStateError.
    """

    def __init__(self, filename: str = "upload.csv"):
        self.filename = filename
        self.state = ImportState.UNINGESTED
        self.table: Optional[ParsedTable] = None
        self.index: Optional[ExternalIndex] = None
        self.error: Optional[IndexImportError] = None

    @property
    def headers(self) -> List[str]:
        return list(self.table.headers) if self.table else []

    def _fail(self, error: IndexImportError) -> IndexImportError:
        self.state = ImportState.FAILED
        self.error = error
        log_error(logger, error.error_type, f"❌ Import of {self.filename} failed: {error}",
                  index_name=self.filename)
        return error

    def parse(self, text: str) -> ParsedTable:
        """
        Split the text into headers and rows.

        Raises:
            EmptyFileError: fewer than a header line and one data line
        """
        if self.state is not ImportState.UNINGESTED:
            raise ImporterStateError(f"parse() called in state {self.state.value}")

        lines = [line for line in (text or "").strip().splitlines() if line.strip()]
        if len(lines) < 2:
            raise self._fail(EmptyFileError("CSV must have at least a header row and one data row"))

        delimiter = detect_delimiter(lines[0])
        headers = _split_line(lines[0], delimiter)

        rows: List[Dict[str, str]] = []
        skipped = 0
        for line in lines[1:]:
            values = _split_line(line, delimiter)
            if len(values) != len(headers):
                skipped += 1
                continue
            rows.append(dict(zip(headers, values)))

        if skipped:
            logger.debug(f"Skipped {skipped} rows with a field count different from the header",
                         extra={"index_name": self.filename})

        self.table = ParsedTable(headers=headers, rows=rows, delimiter=delimiter, skipped_rows=skipped)
        self.state = ImportState.PARSED
        logger.info(f"📄 Parsed {self.filename}: {len(headers)} columns, {len(rows)} rows",
                    extra={"index_name": self.filename, "row_count": len(rows)})
        return self.table

    def _row_key(self, row: Dict[str, str], config: ImportConfig, kept: int) -> Optional[str]:
        """Area column, else rounded lat/lon, else row-N. None drops the row."""
        if config.area_column and row.get(config.area_column):
            return row[config.area_column]

        if config.lat_column and config.lon_column:
            lat = _parse_number(row.get(config.lat_column))
            lon = _parse_number(row.get(config.lon_column))
            if lat is None or lon is None:
                return None
            return coordinate_key(lat, lon)

        return f"row-{kept}"

    def import_index(self, config: ImportConfig) -> ExternalIndex:
        """
        Build the ExternalIndex from the parsed rows.

        Raises:
            MissingColumnError: value column absent from the header
            NoValidRowsError: no row had a finite value and a key
        """
        if self.state is not ImportState.PARSED:
            raise ImporterStateError(f"import_index() called in state {self.state.value}")

        headers = self.table.headers
        if config.value_column not in headers:
            raise self._fail(MissingColumnError(config.value_column, headers))

        for optional_column in (config.area_column, config.lat_column, config.lon_column):
            if optional_column and optional_column not in headers:
                logger.warning(f"⚠️  Column {optional_column!r} not in {self.filename}, falling back",
                               extra={"index_name": config.name})

        if config.detect_coordinates and not (config.lat_column or config.lon_column):
            lat_column, lon_column = detect_coordinate_columns(headers)
            if lat_column and lon_column:
                logger.info(f"📍 Using detected coordinate columns {lat_column!r}, {lon_column!r}",
                            extra={"index_name": config.name})
                config = replace(config, lat_column=lat_column, lon_column=lon_column)

        values: Dict[str, float] = {}
        for row in self.table.rows:
            value = _parse_number(row.get(config.value_column))
            if value is None:
                continue
            key = self._row_key(row, config, len(values))
            if key is None:
                continue
            values[key] = value

        if not values:
            raise self._fail(NoValidRowsError("No valid numeric values found in CSV"))

        self.index = ExternalIndex(
            id=f"index-{uuid.uuid4().hex[:12]}",
            name=config.name,
            source=f"Imported from {self.filename}",
            description=config.description,
            values=values,
            min=min(values.values()),
            max=max(values.values()),
            unit=config.unit,
            imported_at=datetime.now(timezone.utc),
        )
        self.state = ImportState.IMPORTED
        logger.info(f"✅ Imported index {config.name!r}: {len(values)} values "
                    f"(range {self.index.min:g}–{self.index.max:g})",
                    extra={"index_name": config.name, "row_count": len(values)})
        return self.index


def import_index_from_text(text: str, config: ImportConfig,
                           filename: str = "upload.csv") -> ExternalIndex:
    """Parse and import in one call."""
    importer = ExternalIndexImporter(filename)
    importer.parse(text)
    return importer.import_index(config)


def lookup_index_value(index: ExternalIndex, area_name: Optional[str] = None,
                       lat: Optional[float] = None, lon: Optional[float] = None) -> Optional[float]:
    """
    Find an imported value for an area, by name first, then by coordinates.
    """
    if area_name is not None and area_name in index.values:
        return index.values[area_name]
    if lat is not None and lon is not None:
        return index.values.get(coordinate_key(lat, lon))
    return None


def normalize_index_value(index: ExternalIndex, value: float) -> float:
    """Position of value within [min, max] as 0-1. A flat index maps to 0.5."""
    span = index.max - index.min
    if span == 0:
        return 0.5
    return max(0.0, min(1.0, (value - index.min) / span))

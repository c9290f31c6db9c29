"""Parse and validate uploaded people CSVs.

The header row is matched loosely against the three required fields, every
data row is sanitized and checked, and rows that fail are reported back
instead of aborting the whole upload. Only batch-level problems (size,
missing columns, no surviving rows) raise :class:`CSVValidationError`.
"""
from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

logger = logging.getLogger(__name__)


# Header keywords are matched as substrings of the lowercased header cell.
COLUMN_KEYWORDS = {
    "name": ("name",),
    "postal_code": ("postal", "zip", "postcode"),
    "birthday": ("birth", "dob"),
}

MAX_NAME_LENGTH = 100
MAX_POSTAL_CODE_LENGTH = 20
MIN_BIRTH_YEAR = 1900

NAME_PATTERN = re.compile(r"^[^\W\d_](?:[^\W\d_]|[ '.\-])*$")
POSTAL_CODE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 \-]*$")
BIRTHDAY_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


class CSVValidationError(ValueError):
    """The upload as a whole cannot be imported."""


@dataclass(frozen=True)
class CSVRow:
    name: str
    postal_code: str
    birthday: str  # ISO date, YYYY-MM-DD


@dataclass(frozen=True)
class RowError:
    line: int
    message: str


@dataclass
class ParsedCSV:
    rows: List[CSVRow] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)


# -------------------------
# FIELD HELPERS
# -------------------------
def sanitize_value(value: Optional[str]) -> str:
    if value is None:
        return ""
    cleaned = _WHITESPACE.sub(" ", value).strip()
    cleaned = _SURROUNDING_QUOTES.sub("", cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    return cleaned.strip()


def validate_name(value: str) -> str:
    if not value:
        raise ValueError("name is required")
    if len(value) > MAX_NAME_LENGTH:
        raise ValueError(f"name must be at most {MAX_NAME_LENGTH} characters")
    if not NAME_PATTERN.match(value):
        raise ValueError("name contains invalid characters")
    return value


def validate_postal_code(value: str) -> str:
    if not value:
        raise ValueError("postal_code is required")
    if len(value) > MAX_POSTAL_CODE_LENGTH:
        raise ValueError(f"postal_code must be at most {MAX_POSTAL_CODE_LENGTH} characters")
    if not POSTAL_CODE_PATTERN.match(value):
        raise ValueError("postal_code contains invalid characters")
    return value


def validate_birthday(value: str, today: Optional[date] = None) -> str:
    if not BIRTHDAY_PATTERN.match(value):
        raise ValueError("birthday must use the YYYY-MM-DD format")
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValueError("birthday is not a valid calendar date")

    current_year = (today or date.today()).year
    if parsed.year < MIN_BIRTH_YEAR or parsed.year > current_year:
        raise ValueError(f"birthday year must be between {MIN_BIRTH_YEAR} and {current_year}")
    return value


# -------------------------
# HEADER RESOLUTION
# -------------------------
def resolve_columns(header: List[str]) -> dict:
    """Map each required field to the index of the first matching header cell."""
    normalized = [sanitize_value(cell).lower() for cell in header]

    positions = {}
    for field_name, keywords in COLUMN_KEYWORDS.items():
        for index, cell in enumerate(normalized):
            if index in positions.values():
                continue
            if any(keyword in cell for keyword in keywords):
                positions[field_name] = index
                break

    missing = [name for name in COLUMN_KEYWORDS if name not in positions]
    if missing:
        raise CSVValidationError(
            f"CSV is missing required column(s): {', '.join(missing)}"
        )
    return positions


# -------------------------
# PARSE
# -------------------------
def parse_csv(
    csv_content: str,
    max_rows: int = 1000,
    max_bytes: int = 1024 * 1024,
    today: Optional[date] = None,
) -> ParsedCSV:
    if csv_content is None or not csv_content.strip():
        raise CSVValidationError("No CSV content provided")

    size = len(csv_content.encode("utf-8"))
    if size > max_bytes:
        raise CSVValidationError(
            f"CSV is too large ({size} bytes); the limit is {max_bytes} bytes"
        )

    text = csv_content.lstrip("\ufeff").strip()
    reader = csv.reader(io.StringIO(text))

    lines = []
    try:
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            lines.append((reader.line_num, cells))
    except csv.Error as exc:
        raise CSVValidationError(f"CSV could not be parsed: {exc}")

    if len(lines) < 2:
        raise CSVValidationError("CSV must contain headers and at least one data row")

    data_lines = lines[1:]
    if len(data_lines) > max_rows:
        raise CSVValidationError(
            f"CSV has {len(data_lines)} data rows; the limit is {max_rows}"
        )

    positions = resolve_columns(lines[0][1])
    required_width = max(positions.values()) + 1

    result = ParsedCSV()
    for line_no, cells in data_lines:
        if len(cells) < required_width:
            result.errors.append(
                RowError(line_no, f"expected at least {required_width} columns, got {len(cells)}")
            )
            continue

        try:
            row = CSVRow(
                name=validate_name(sanitize_value(cells[positions["name"]])),
                postal_code=validate_postal_code(sanitize_value(cells[positions["postal_code"]])),
                birthday=validate_birthday(sanitize_value(cells[positions["birthday"]]), today=today),
            )
        except ValueError as exc:
            result.errors.append(RowError(line_no, str(exc)))
            continue

        result.rows.append(row)

    if not result.rows:
        details = "; ".join(f"line {e.line}: {e.message}" for e in result.errors[:5])
        message = "No valid rows found in CSV"
        raise CSVValidationError(f"{message} ({details})" if details else message)

    logger.debug("Parsed %s valid rows, %s rejected", len(result.rows), len(result.errors))
    return result

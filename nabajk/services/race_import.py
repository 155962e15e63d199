"""Race import — parse pasted or uploaded race tables into validated rows.

Accepts spreadsheet pastes (tab separated) and CSV exports (comma separated,
double quotes around fields that contain commas). Columns are
``Date, Type, Name[, Link]``. Bad lines are reported, never fatal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Substrings that mark the first line as a header (Slovenian and English)
HEADER_MARKERS = ("datum", "tip", "date", "type")

_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
_DAY_RANGE = re.compile(r"^(\d{1,2})\.\s*-\s*(\d{1,2})\.(\d{1,2})\.(\d{4})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ImportRow:
    """One validated race line."""
    date: str
    type: str
    name: str
    link: str = ""

    def to_record(self) -> dict:
        """Payload for the ``races`` table."""
        return {
            "name": self.name,
            "race_date": self.date,
            "race_type": self.type or None,
            "link": normalize_url(self.link),
        }


@dataclass(frozen=True)
class RowError:
    line_number: int
    message: str


@dataclass(frozen=True)
class ImportBatchResult:
    rows: tuple[ImportRow, ...] = field(default_factory=tuple)
    parse_errors: tuple[RowError, ...] = field(default_factory=tuple)

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.parse_errors]


def normalize_url(value: str) -> str | None:
    """Blank -> None; add ``https://`` when no scheme is given."""
    trimmed = (value or "").strip()
    if not trimmed:
        return None
    if trimmed.startswith(("http://", "https://")):
        return trimmed
    return "https://" + trimmed


def normalize_date(value: str) -> str | None:
    """Return ``YYYY-MM-DD`` for a supported date shape, else None.

    ``01.03.2026`` -> ``2026-03-01``; ``05.-06.09.2026`` -> ``2026-09-05``
    (races store only a start date); ``2026-03-01`` passes through.
    """
    text = value.replace("–", "-").replace("—", "-").strip()

    m = _DAY_MONTH_YEAR.match(text)
    if m:
        day, month, year = m.groups()
        return f"{year}-{int(month):02d}-{int(day):02d}"

    m = _DAY_RANGE.match(text)
    if m:
        first_day, _last_day, month, year = m.groups()
        return f"{year}-{int(month):02d}-{int(first_day):02d}"

    if _ISO_DATE.match(text):
        return text

    return None


def split_csv_line(line: str) -> list[str]:
    """Split on commas outside double quotes. Quote characters are dropped."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    fields.append("".join(current).strip())
    return fields


def split_fields(line: str) -> list[str]:
    """Tab separated when the line has a tab, otherwise comma separated."""
    if "\t" in line:
        return [f.strip() for f in line.split("\t")]
    return split_csv_line(line)


def is_header(line: str) -> bool:
    lowered = line.lower()
    return any(marker in lowered for marker in HEADER_MARKERS)


def parse_line(line: str, line_number: int) -> ImportRow | RowError:
    """Validate one trimmed, non-empty line."""
    fields = split_fields(line)
    if len(fields) < 3:
        return RowError(
            line_number,
            f"Row {line_number}: Not enough columns (need at least Date, Type, Name)",
        )

    raw_date, race_type, name = fields[0], fields[1], fields[2]
    link = fields[3] if len(fields) > 3 else ""

    date = normalize_date(raw_date)
    if date is None:
        return RowError(
            line_number,
            f'Row {line_number}: Invalid date format "{raw_date}" (expected DD.MM.YYYY)',
        )

    if not name:
        return RowError(line_number, f"Row {line_number}: Name is required")

    return ImportRow(date=date, type=race_type, name=name, link=link)


def parse_race_table(text: str) -> ImportBatchResult:
    """Parse a whole table. Every non-empty, non-header line yields a row or an error."""
    numbered = [
        (i, line.strip())
        for i, line in enumerate(text.split("\n"), start=1)
        if line.strip()
    ]
    if numbered and is_header(numbered[0][1]):
        numbered = numbered[1:]

    rows: list[ImportRow] = []
    errors: list[RowError] = []
    for line_number, line in numbered:
        parsed = parse_line(line, line_number)
        if isinstance(parsed, RowError):
            errors.append(parsed)
        else:
            rows.append(parsed)

    return ImportBatchResult(rows=tuple(rows), parse_errors=tuple(errors))

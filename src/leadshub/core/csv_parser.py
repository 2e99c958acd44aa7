from __future__ import annotations

import csv
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

# Checked in order; a header column maps to the first field whose needle it contains.
LEAD_COLUMNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("first_name", ("first name",)),
    ("last_name", ("last name",)),
    ("designation", ("designation",)),
    ("profile_link", ("profile link",)),
    ("email", ("email",)),
    ("company_name", ("company name",)),
    ("company_link", ("company link",)),
    ("job_title", ("job title",)),
    ("job_link", ("job link",)),
    ("location", ("city", "location")),
)

LEAD_FIELDS: tuple[str, ...] = tuple(name for name, _ in LEAD_COLUMNS)

HeaderMap = dict[str, int]


class FormatError(ValueError):
    """Raised when a CSV source has no header or no data rows."""


@dataclass(frozen=True, slots=True)
class RawRow:
    first_name: str = ""
    last_name: str = ""
    designation: str = ""
    profile_link: str = ""
    email: str = ""
    company_name: str = ""
    company_link: str = ""
    job_title: str = ""
    job_link: str = ""
    location: str = ""
    # physical 1-based line in the source file; the header is line 1
    line_number: int = 0

    def values(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in LEAD_FIELDS}

    def is_blank(self) -> bool:
        return not any(value.strip() for value in self.values().values())


def build_header_map(header: Sequence[str]) -> HeaderMap:
    mapping: HeaderMap = {}
    for index, column in enumerate(header):
        normalized = column.strip().lower()
        for field_name, needles in LEAD_COLUMNS:
            if any(needle in normalized for needle in needles):
                mapping.setdefault(field_name, index)
                break
    return mapping


def split_csv_line(line: str) -> list[str]:
    for values in csv.reader([line], skipinitialspace=True):
        return [value.strip() for value in values]
    return []


def parse_leads_csv(text: str) -> list[RawRow]:
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = [
        (number, line.strip())
        for number, line in enumerate(text.split("\n"), start=1)
        if line.strip()
    ]
    if len(lines) < 2:
        raise FormatError("CSV file must have at least a header and one data row")

    _, header_line = lines[0]
    header_map = build_header_map(split_csv_line(header_line))

    rows: list[RawRow] = []
    for number, line in lines[1:]:
        values = split_csv_line(line)
        fields = {
            name: values[index] if index < len(values) else ""
            for name, index in header_map.items()
        }
        row = RawRow(**fields, line_number=number)
        if row.is_blank():
            continue
        rows.append(row)
    return rows


def read_leads_csv(path: str | Path) -> list[RawRow]:
    return parse_leads_csv(Path(path).read_text(encoding="utf-8-sig"))

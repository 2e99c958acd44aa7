from __future__ import annotations

from dataclasses import dataclass

from leadshub.core.csv_parser import RawRow
from leadshub.core.results import Skipped
from leadshub.types import LeadData

IMPORT_SOURCE_TAG = "CSV Import"
LAST_NAME_PLACEHOLDER = "N/A"

# Evaluated in order; the first missing field names the skip reason.
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("first_name", "Missing first name"),
    ("email", "Missing email"),
    ("company_name", "Missing company name"),
    ("designation", "Missing designation"),
)


@dataclass(frozen=True, slots=True)
class ValidatedLead:
    first_name: str
    last_name: str
    designation: str
    email: str
    company_name: str
    profile_link: str | None = None
    location: str | None = None
    company_link: str | None = None
    job_title: str | None = None
    job_link: str | None = None
    source: str = IMPORT_SOURCE_TAG

    def to_lead_data(self) -> LeadData:
        return LeadData(
            first_name=self.first_name,
            last_name=self.last_name,
            designation=self.designation,
            email=self.email,
            company_name=self.company_name,
            profile_link=self.profile_link,
            location=self.location,
            company_link=self.company_link,
            job_title=self.job_title,
            job_link=self.job_link,
            source=self.source,
        )


def _optional(value: str) -> str | None:
    return value.strip() or None


def validate_row(row: RawRow, *, source: str = IMPORT_SOURCE_TAG) -> ValidatedLead | Skipped:
    for field_name, reason in REQUIRED_FIELDS:
        if not getattr(row, field_name).strip():
            return Skipped(row=row, reason=reason)

    return ValidatedLead(
        first_name=row.first_name.strip(),
        last_name=row.last_name.strip() or LAST_NAME_PLACEHOLDER,
        designation=row.designation.strip(),
        email=row.email.strip().lower(),
        company_name=row.company_name.strip().lower(),
        profile_link=_optional(row.profile_link),
        location=_optional(row.location),
        company_link=_optional(row.company_link),
        job_title=_optional(row.job_title),
        job_link=_optional(row.job_link),
        source=source,
    )

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from leadshub.core.csv_parser import LEAD_FIELDS
from leadshub.core.results import SkippedRow
from leadshub.db.models import Lead

logger = logging.getLogger(__name__)

FIELD_HEADERS: tuple[str, ...] = (
    "First Name",
    "Last Name",
    "Designation",
    "Profile Link",
    "Email",
    "Company Name",
    "Company Link",
    "Job Title",
    "Job Link",
    "City or Location",
)

SKIP_REPORT_HEADERS: tuple[str, ...] = ("Row Number", *FIELD_HEADERS, "Skip Reason")
EXPORT_HEADERS: tuple[str, ...] = (*FIELD_HEADERS, "Source")


def _render(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def skipped_row_values(item: SkippedRow) -> list[str]:
    values = item.row.values()
    return [str(item.row_number), *(values[name] for name in LEAD_FIELDS), item.reason]


def render_skip_report(skipped: Sequence[SkippedRow]) -> str:
    return _render(SKIP_REPORT_HEADERS, (skipped_row_values(item) for item in skipped))


def write_skip_report(skipped: Sequence[SkippedRow], path: str | Path) -> Path | None:
    if not skipped:
        logger.info("No skipped leads to write.")
        return None

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(render_skip_report(skipped), encoding="utf-8")
    logger.info("Skipped leads written to: %s", destination)
    return destination


def lead_export_values(lead: Lead) -> list[str]:
    return [
        lead.first_name,
        lead.last_name,
        lead.designation,
        lead.profile_link or "",
        lead.email,
        lead.company_name,
        lead.company_link or "",
        lead.job_title or "",
        lead.job_link or "",
        lead.location or "",
        lead.source or "",
    ]


def export_leads_csv(leads: Iterable[Lead], path: str | Path) -> Path:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(
        _render(EXPORT_HEADERS, (lead_export_values(lead) for lead in leads)),
        encoding="utf-8",
    )
    return destination

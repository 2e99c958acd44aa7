from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from sqlalchemy.orm import Session

from leadshub.config import Settings, get_settings
from leadshub.core.csv_parser import RawRow, parse_leads_csv
from leadshub.core.persister import LeadPersister
from leadshub.core.results import (
    Created,
    Errored,
    ImportSummary,
    RowOutcome,
    Skipped,
    SkippedRow,
    rejected_rows,
)
from leadshub.core.skip_report import write_skip_report
from leadshub.core.validator import validate_row
from leadshub.db.repositories import Repository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportResult:
    outcomes: list[RowOutcome] = field(default_factory=list)
    report_path: Path | None = None

    @property
    def summary(self) -> ImportSummary:
        return ImportSummary.from_outcomes(self.outcomes)

    @property
    def rejected(self) -> list[SkippedRow]:
        return rejected_rows(self.outcomes)


def skipped_report_path(source: str | Path, suffix: str = "_skipped") -> Path:
    source = Path(source)
    return source.with_name(f"{source.stem}{suffix}.csv")


class LeadImportPipeline:
    def __init__(
        self,
        session: Session,
        *,
        default_assignee_id: int,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        if self.repo.get_user(default_assignee_id) is None:
            raise ValueError(f"user {default_assignee_id} not found")
        self.default_assignee_id = default_assignee_id
        self.persister = LeadPersister(self.repo, default_assignee_id)

    def process_row(self, row: RawRow) -> RowOutcome:
        checked = validate_row(row, source=self.settings.import_source_tag)
        if isinstance(checked, Skipped):
            return checked
        return self.persister.persist(checked, row)

    def process_rows(self, rows: Iterable[RawRow]) -> list[RowOutcome]:
        outcomes: list[RowOutcome] = []
        for row in rows:
            outcome = self.process_row(row)
            self._log_outcome(outcome)
            outcomes.append(outcome)
        return outcomes

    def run_text(self, text: str) -> ImportResult:
        rows = parse_leads_csv(text)
        logger.info("Found %s rows in CSV", len(rows))
        result = ImportResult(outcomes=self.process_rows(rows))
        self._log_summary(result.summary)
        return result

    def run_file(self, source: str | Path, *, skipped_output: str | Path | None = None) -> ImportResult:
        source = Path(source)
        logger.info("Reading CSV file from: %s", source)
        result = self.run_text(source.read_text(encoding="utf-8-sig"))

        if result.rejected:
            destination = skipped_output or skipped_report_path(
                source, self.settings.skipped_report_suffix
            )
            result.report_path = write_skip_report(result.rejected, destination)
        return result

    @staticmethod
    def _log_outcome(outcome: RowOutcome) -> None:
        row = outcome.row
        if isinstance(outcome, Created):
            logger.info(
                "Row %s: Created lead for %s %s at %s",
                row.line_number,
                row.first_name,
                row.last_name,
                row.company_name,
            )
        elif isinstance(outcome, Errored):
            logger.error("Row %s: %s", row.line_number, outcome.reason)
        else:
            logger.info("Row %s: Skipping - %s", row.line_number, outcome.reason)

    @staticmethod
    def _log_summary(summary: ImportSummary) -> None:
        logger.info(
            "Import summary: processed=%s created=%s skipped=%s errors=%s",
            summary.processed,
            summary.created,
            summary.skipped,
            summary.errors,
        )

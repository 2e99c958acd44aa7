from __future__ import annotations

import logging

from leadshub.core.csv_parser import RawRow
from leadshub.core.results import Created, Errored, RowOutcome, Skipped
from leadshub.core.validator import ValidatedLead
from leadshub.db.repositories import DuplicateLeadError, Repository

logger = logging.getLogger(__name__)


class LeadPersister:
    def __init__(self, repo: Repository, default_assignee_id: int):
        self.repo = repo
        self.default_assignee_id = default_assignee_id

    def persist(self, lead: ValidatedLead, row: RawRow) -> RowOutcome:
        try:
            record = self.repo.create_lead(
                lead.to_lead_data(),
                assigned_to_id=self.default_assignee_id,
                created_by_id=self.default_assignee_id,
            )
        except DuplicateLeadError:
            return Skipped(row=row, reason=f"Duplicate lead ({row.email} at {row.company_name})")
        except Exception as exc:
            logger.exception("Row %s: lead could not be stored", row.line_number)
            return Errored(row=row, reason=f"Error: {exc}")

        return Created(row=row, lead_id=record.id)

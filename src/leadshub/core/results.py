from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass

from leadshub.core.csv_parser import RawRow


@dataclass(frozen=True, slots=True)
class SkippedRow:
    row: RawRow
    reason: str

    @property
    def row_number(self) -> int:
        return self.row.line_number


@dataclass(frozen=True, slots=True)
class Created:
    row: RawRow
    lead_id: int


@dataclass(frozen=True, slots=True)
class Skipped(SkippedRow):
    """Data problem: a missing required field or a duplicate lead."""


@dataclass(frozen=True, slots=True)
class Errored(SkippedRow):
    """System problem: the store failed for a reason other than a duplicate."""


RowOutcome = Created | Skipped | Errored


@dataclass(frozen=True, slots=True)
class ImportSummary:
    processed: int = 0
    created: int = 0
    skipped: int = 0
    errors: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[RowOutcome]) -> ImportSummary:
        return cls(
            processed=len(outcomes),
            created=sum(1 for item in outcomes if isinstance(item, Created)),
            skipped=sum(1 for item in outcomes if isinstance(item, Skipped)),
            errors=sum(1 for item in outcomes if isinstance(item, Errored)),
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def rejected_rows(outcomes: Iterable[RowOutcome]) -> list[SkippedRow]:
    return [item for item in outcomes if isinstance(item, SkippedRow)]

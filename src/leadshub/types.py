from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from math import ceil
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field, field_validator

Role = Literal["admin", "user"]
SortOrder = Literal["asc", "desc"]

SORTABLE_LEAD_COLUMNS = frozenset(
    {
        "created_at",
        "updated_at",
        "first_name",
        "last_name",
        "email",
        "company_name",
        "designation",
        "location",
        "job_title",
        "source",
    }
)

T = TypeVar("T")


class AdditionalEmail(BaseModel):
    first_name: str
    last_name: str
    email: str
    designation: str | None = None
    profile_link: str | None = None
    is_primary: bool = False

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class LeadData(BaseModel):
    first_name: str
    last_name: str
    designation: str
    email: str
    company_name: str
    profile_link: str | None = None
    person_mobile: str | None = None
    location: str | None = None
    company_link: str | None = None
    job_title: str | None = None
    job_link: str | None = None
    additional_emails: list[AdditionalEmail] = Field(default_factory=list)
    source: str | None = None
    notes: str | None = None


class LeadQuery(BaseModel):
    user_id: int | None = None
    role: Role | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    search: str | None = None
    company: str | None = None
    location: str | None = None
    designation: str | None = None
    assigned_to: int | None = None
    source: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    sort_by: str = "created_at"
    sort_order: SortOrder = "desc"

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value: str) -> str:
        if value not in SORTABLE_LEAD_COLUMNS:
            raise ValueError(f"sort_by must be one of {sorted(SORTABLE_LEAD_COLUMNS)}")
        return value

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def pagination(self) -> dict[str, Any]:
        return {
            "current_page": self.page,
            "total_pages": self.total_pages,
            "total": self.total,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }

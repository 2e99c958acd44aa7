from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from leadshub.db.models import Country, Lead, User
from leadshub.types import AdditionalEmail, LeadData, Role


class UserSummary(BaseModel):
    id: int
    name: str
    email: str


class LeadCreateRequest(LeadData):
    assigned_to: int
    created_by: int


class LeadUpdateRequest(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    designation: str | None = None
    email: str | None = None
    company_name: str | None = None
    profile_link: str | None = None
    person_mobile: str | None = None
    location: str | None = None
    company_link: str | None = None
    job_title: str | None = None
    job_link: str | None = None
    additional_emails: list[AdditionalEmail] | None = None
    source: str | None = None
    notes: str | None = None


class LeadResponse(BaseModel):
    id: int
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
    additional_emails: list[dict[str, Any]] = Field(default_factory=list)
    source: str | None = None
    notes: str | None = None
    assigned_to: UserSummary | None = None
    created_by: UserSummary | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_lead(cls, lead: Lead) -> LeadResponse:
        return cls(
            id=lead.id,
            first_name=lead.first_name,
            last_name=lead.last_name,
            designation=lead.designation,
            email=lead.email,
            company_name=lead.company_name,
            profile_link=lead.profile_link,
            person_mobile=lead.person_mobile,
            location=lead.location,
            company_link=lead.company_link,
            job_title=lead.job_title,
            job_link=lead.job_link or None,
            additional_emails=list(lead.additional_emails or []),
            source=lead.source,
            notes=lead.notes,
            assigned_to=_summary(lead.assignee),
            created_by=_summary(lead.creator),
            created_at=lead.created_at.isoformat() if lead.created_at else None,
            updated_at=lead.updated_at.isoformat() if lead.updated_at else None,
        )


def _summary(user: User | None) -> UserSummary | None:
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=user.email)


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool


class LeadListResponse(BaseModel):
    leads: list[LeadResponse]
    stats: dict[str, int]
    pagination: Pagination


class LeadFilterOptionsResponse(BaseModel):
    companies: list[str]
    locations: list[str]
    designations: list[str]
    sources: list[str]


class CompanyInfo(BaseModel):
    company_name: str
    company_link: str | None = None


class CompanyLookupResponse(BaseModel):
    exists: bool
    company: CompanyInfo | None = None


class CountryRequest(BaseModel):
    name: str = ""


class CountryResponse(BaseModel):
    id: int
    name: str

    @classmethod
    def from_country(cls, country: Country) -> CountryResponse:
        return cls(id=country.id, name=country.name)


class UserCreateRequest(BaseModel):
    name: str
    email: str
    password: str = Field(min_length=6)
    role: Role = "user"
    is_active: bool = True


class UserUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = Field(default=None, min_length=6)
    role: Role | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    is_active: bool
    last_active: str | None = None
    created_at: str | None = None

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            last_active=user.last_active.isoformat() if user.last_active else None,
            created_at=user.created_at.isoformat() if user.created_at else None,
        )


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: Pagination


class ImportSummaryResponse(BaseModel):
    processed: int
    created: int
    skipped: int
    errors: int


class SkippedRowResponse(BaseModel):
    row_number: int
    kind: Literal["skipped", "error"]
    reason: str
    values: dict[str, str]


class ImportResponse(BaseModel):
    assignee: UserSummary
    summary: ImportSummaryResponse
    skipped_rows: list[SkippedRowResponse] = Field(default_factory=list)
    skip_report_csv: str | None = None

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from leadshub.api.deps import get_db
from leadshub.api.schemas import (
    CompanyInfo,
    CompanyLookupResponse,
    CountryRequest,
    CountryResponse,
    ImportResponse,
    ImportSummaryResponse,
    LeadCreateRequest,
    LeadFilterOptionsResponse,
    LeadListResponse,
    LeadResponse,
    LeadUpdateRequest,
    Pagination,
    SkippedRowResponse,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserSummary,
    UserUpdateRequest,
)
from leadshub.config import get_settings
from leadshub.core.csv_parser import FormatError
from leadshub.core.importer import LeadImportPipeline
from leadshub.core.reports import build_report, dashboard_stats
from leadshub.core.results import Errored
from leadshub.core.skip_report import render_skip_report
from leadshub.db.repositories import DuplicateLeadError, Repository
from leadshub.db.seed import resolve_default_assignee
from leadshub.types import LeadData, LeadQuery, Role, SortOrder

router = APIRouter(prefix="/api", tags=["api"])


@router.post("/leads", response_model=LeadResponse, status_code=201)
def create_lead(payload: LeadCreateRequest, db: Session = Depends(get_db)) -> LeadResponse:
    repo = Repository(db)
    for user_id in {payload.assigned_to, payload.created_by}:
        if not repo.get_user(user_id):
            raise HTTPException(status_code=400, detail=f"User {user_id} not found")

    data = LeadData.model_validate(payload.model_dump(exclude={"assigned_to", "created_by"}))
    try:
        lead = repo.create_lead(data, assigned_to_id=payload.assigned_to, created_by_id=payload.created_by)
    except DuplicateLeadError as exc:
        raise HTTPException(
            status_code=400,
            detail="A lead with this email and company already exists",
        ) from exc

    repo.record_activity(payload.created_by)
    return LeadResponse.from_lead(lead)


@router.get("/leads", response_model=LeadListResponse)
def list_leads(
    user_id: int | None = Query(None, alias="userId"),
    role: Role | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = None,
    company: str | None = None,
    location: str | None = None,
    designation: str | None = None,
    assigned_to: int | None = Query(None, alias="assignedTo"),
    source: str | None = None,
    date_from: date | None = Query(None, alias="dateFrom"),
    date_to: date | None = Query(None, alias="dateTo"),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: SortOrder = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
) -> LeadListResponse:
    settings = get_settings()
    try:
        query = LeadQuery(
            user_id=user_id,
            role=role,
            page=page,
            limit=min(limit or settings.default_page_size, settings.max_page_size),
            search=search,
            company=company,
            location=location,
            designation=designation,
            assigned_to=assigned_to,
            source=source,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    result = Repository(db).list_leads(query)
    return LeadListResponse(
        leads=[LeadResponse.from_lead(lead) for lead in result.items],
        stats={"total": result.total},
        pagination=Pagination(**result.pagination()),
    )


@router.get("/leads/filters", response_model=LeadFilterOptionsResponse)
def lead_filter_options(
    user_id: int | None = Query(None, alias="userId"),
    role: Role | None = None,
    db: Session = Depends(get_db),
) -> LeadFilterOptionsResponse:
    options = Repository(db).lead_filter_options(user_id=user_id, role=role)
    return LeadFilterOptionsResponse(**options)


@router.get("/leads/company", response_model=CompanyLookupResponse)
def lookup_company(company_name: str | None = None, db: Session = Depends(get_db)) -> CompanyLookupResponse:
    if not company_name:
        raise HTTPException(status_code=400, detail="Company name is required")

    lead = Repository(db).find_company(company_name)
    if lead is None:
        return CompanyLookupResponse(exists=False, company=None)
    return CompanyLookupResponse(
        exists=True,
        company=CompanyInfo(company_name=lead.company_name, company_link=lead.company_link),
    )


@router.get("/leads/analytics")
def lead_analytics(
    user_id: int | None = Query(None, alias="userId"),
    role: Role | None = None,
    report_range: str = Query("30", alias="range"),
    db: Session = Depends(get_db),
) -> dict:
    days = _report_days(report_range)
    if role != "admin" and user_id is None:
        raise HTTPException(status_code=400, detail="userId is required")
    assigned_to_id = None if role == "admin" else user_id
    return build_report(Repository(db).list_all_leads(assigned_to_id=assigned_to_id), days=days)


@router.post("/leads/import", response_model=ImportResponse)
def import_leads(
    file: UploadFile = File(...),
    assignee_id: int | None = Query(None, alias="assigneeId"),
    db: Session = Depends(get_db),
) -> ImportResponse:
    raw = file.file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded") from exc

    assignee = Repository(db).get_user(assignee_id) if assignee_id is not None else resolve_default_assignee(db)
    if assignee is None:
        raise HTTPException(status_code=404, detail=f"User {assignee_id} not found")

    pipeline = LeadImportPipeline(db, default_assignee_id=assignee.id)
    try:
        result = pipeline.run_text(text)
    except FormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    rejected = result.rejected
    return ImportResponse(
        assignee=UserSummary(id=assignee.id, name=assignee.name, email=assignee.email),
        summary=ImportSummaryResponse(**result.summary.as_dict()),
        skipped_rows=[
            SkippedRowResponse(
                row_number=item.row_number,
                kind="error" if isinstance(item, Errored) else "skipped",
                reason=item.reason,
                values=item.row.values(),
            )
            for item in rejected
        ],
        skip_report_csv=render_skip_report(rejected) if rejected else None,
    )


@router.get("/leads/{lead_id}", response_model=LeadResponse)
def get_lead(lead_id: int, db: Session = Depends(get_db)) -> LeadResponse:
    lead = Repository(db).get_lead(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return LeadResponse.from_lead(lead)


@router.put("/leads/{lead_id}", response_model=LeadResponse)
def update_lead(lead_id: int, payload: LeadUpdateRequest, db: Session = Depends(get_db)) -> LeadResponse:
    repo = Repository(db)
    try:
        lead = repo.update_lead(lead_id, payload.model_dump(exclude_unset=True))
    except DuplicateLeadError as exc:
        raise HTTPException(
            status_code=400,
            detail="A lead with this email and company already exists",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=404, detail="Lead not found") from exc
    return LeadResponse.from_lead(lead)


@router.delete("/leads/{lead_id}")
def delete_lead(lead_id: int, db: Session = Depends(get_db)) -> dict:
    try:
        Repository(db).delete_lead(lead_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail="Lead not found") from exc
    return {"message": "Lead deleted successfully"}


@router.get("/countries", response_model=list[CountryResponse])
def list_countries(db: Session = Depends(get_db)) -> list[CountryResponse]:
    return [CountryResponse.from_country(row) for row in Repository(db).list_countries()]


@router.post("/countries", response_model=CountryResponse, status_code=201)
def create_country(payload: CountryRequest, db: Session = Depends(get_db)) -> CountryResponse:
    try:
        country = Repository(db).create_country(payload.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return CountryResponse.from_country(country)


@router.get("/admin/users", response_model=UserListResponse)
def list_users(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = None,
    role: Role | None = None,
    db: Session = Depends(get_db),
) -> UserListResponse:
    settings = get_settings()
    result = Repository(db).list_users(
        search=search,
        role=role,
        page=page,
        limit=min(limit or settings.default_page_size, settings.max_page_size),
    )
    return UserListResponse(
        users=[UserResponse.from_user(user) for user in result.items],
        pagination=Pagination(**result.pagination()),
    )


@router.post("/admin/users", response_model=UserResponse, status_code=201)
def create_user(payload: UserCreateRequest, db: Session = Depends(get_db)) -> UserResponse:
    try:
        user = Repository(db).create_user(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return UserResponse.from_user(user)


@router.put("/admin/users/{user_id}", response_model=UserResponse)
def update_user(user_id: int, payload: UserUpdateRequest, db: Session = Depends(get_db)) -> UserResponse:
    repo = Repository(db)
    if not repo.get_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    try:
        user = repo.update_user(user_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return UserResponse.from_user(user)


@router.delete("/admin/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)) -> dict:
    repo = Repository(db)
    if not repo.get_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    try:
        repo.delete_user(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"message": "User deleted successfully"}


@router.get("/admin/dashboard")
def admin_dashboard(db: Session = Depends(get_db)) -> dict:
    return dashboard_stats(Repository(db))


@router.get("/admin/reports")
def admin_reports(report_range: str = Query("30", alias="range"), db: Session = Depends(get_db)) -> dict:
    return build_report(Repository(db).list_all_leads(), days=_report_days(report_range))


def _report_days(report_range: str) -> int | None:
    if report_range == "all":
        return None
    if report_range.isdigit():
        return int(report_range)
    raise HTTPException(status_code=400, detail="range must be 'all' or a number of days")

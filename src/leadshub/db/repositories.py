from __future__ import annotations

from datetime import datetime
from typing import Any

from passlib.context import CryptContext
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from leadshub.db.base import utcnow
from leadshub.db.models import Country, Lead, User
from leadshub.db.queries import build_lead_filters, lead_ordering
from leadshub.types import LeadData, LeadQuery, Page

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_REQUIRED_LEAD_FIELDS = {"first_name", "last_name", "designation", "email", "company_name"}
# only replaced on update when a non-empty value is given
_SKIP_EMPTY_ON_UPDATE = _REQUIRED_LEAD_FIELDS | {"additional_emails"}


class DuplicateLeadError(Exception):
    """Raised when the (email, company name, job link) uniqueness constraint rejects a lead."""

    def __init__(self, email: str, company_name: str):
        super().__init__(f"duplicate lead {email} at {company_name}")
        self.email = email
        self.company_name = company_name


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


def _normalize_lead_values(values: dict[str, Any]) -> dict[str, Any]:
    out = dict(values)
    if out.get("email"):
        out["email"] = normalize_email(out["email"])
    if out.get("company_name"):
        out["company_name"] = out["company_name"].strip().lower()
    if "job_link" in out:
        out["job_link"] = out["job_link"] or ""
    return out


class Repository:
    def __init__(self, session: Session):
        self.session = session

    # users

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: str = "user",
        is_active: bool = True,
    ) -> User:
        email = normalize_email(email)
        if self.get_user_by_email(email):
            raise ValueError(f"user with email {email} already exists")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalar(select(User).where(User.email == normalize_email(email)))

    def find_active_user(self, role: str | None = None) -> User | None:
        statement = select(User).where(User.is_active.is_(True))
        if role is not None:
            statement = statement.where(User.role == role)
        return self.session.scalar(statement.order_by(User.id.asc()).limit(1))

    def list_users(
        self,
        *,
        search: str | None = None,
        role: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[User]:
        criteria = []
        if search:
            criteria.append(
                or_(
                    User.name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )
        if role:
            criteria.append(User.role == role)

        total = self.session.scalar(select(func.count()).select_from(User).where(*criteria)) or 0
        statement = (
            select(User)
            .where(*criteria)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = list(self.session.scalars(statement).all())
        return Page(items=items, total=total, page=page, limit=limit)

    def update_user(self, user_id: int, values: dict[str, Any]) -> User:
        user = self.session.get(User, user_id)
        if not user:
            raise ValueError(f"user {user_id} not found")

        values = dict(values)
        password = values.pop("password", None)
        if password:
            user.password_hash = hash_password(password)
        if "email" in values and values["email"]:
            email = normalize_email(values.pop("email"))
            existing = self.get_user_by_email(email)
            if existing and existing.id != user.id:
                raise ValueError(f"user with email {email} already exists")
            user.email = email
        for key, value in values.items():
            if value is not None:
                setattr(user, key, value)

        self.session.commit()
        self.session.refresh(user)
        return user

    def delete_user(self, user_id: int) -> None:
        user = self.session.get(User, user_id)
        if not user:
            raise ValueError(f"user {user_id} not found")
        owned = self.session.scalar(
            select(func.count())
            .select_from(Lead)
            .where(or_(Lead.assigned_to_id == user_id, Lead.created_by_id == user_id))
        )
        if owned:
            raise ValueError(f"user {user_id} still owns {owned} leads")
        self.session.delete(user)
        self.session.commit()

    def record_activity(self, user_id: int) -> None:
        user = self.session.get(User, user_id)
        if user:
            user.last_active = utcnow()
            self.session.commit()

    def count_active_users(self, since: datetime | None = None) -> int:
        statement = select(func.count()).select_from(User).where(User.is_active.is_(True))
        if since is not None:
            statement = statement.where(User.last_active >= since)
        return self.session.scalar(statement) or 0

    # leads

    def create_lead(self, data: LeadData, *, assigned_to_id: int, created_by_id: int) -> Lead:
        values = _normalize_lead_values(data.model_dump())
        lead = Lead(**values, assigned_to_id=assigned_to_id, created_by_id=created_by_id)
        self.session.add(lead)
        self._commit_lead(values["email"], values["company_name"])
        self.session.refresh(lead)
        return lead

    def get_lead(self, lead_id: int) -> Lead | None:
        return self.session.get(Lead, lead_id)

    def update_lead(self, lead_id: int, values: dict[str, Any]) -> Lead:
        lead = self.session.get(Lead, lead_id)
        if not lead:
            raise ValueError(f"lead {lead_id} not found")

        for key, value in _normalize_lead_values(values).items():
            if key in _SKIP_EMPTY_ON_UPDATE and not value:
                continue
            setattr(lead, key, value)

        self._commit_lead(lead.email, lead.company_name)
        self.session.refresh(lead)
        return lead

    def delete_lead(self, lead_id: int) -> None:
        lead = self.session.get(Lead, lead_id)
        if not lead:
            raise ValueError(f"lead {lead_id} not found")
        self.session.delete(lead)
        self.session.commit()

    def list_leads(self, query: LeadQuery) -> Page[Lead]:
        criteria = build_lead_filters(query)
        total = self.session.scalar(select(func.count()).select_from(Lead).where(*criteria)) or 0
        statement = (
            select(Lead)
            .where(*criteria)
            .order_by(*lead_ordering(query))
            .offset(query.offset)
            .limit(query.limit)
        )
        items = list(self.session.scalars(statement).all())
        return Page(items=items, total=total, page=query.page, limit=query.limit)

    def list_all_leads(self, *, assigned_to_id: int | None = None) -> list[Lead]:
        statement = select(Lead).order_by(Lead.created_at.asc(), Lead.id.asc())
        if assigned_to_id is not None:
            statement = statement.where(Lead.assigned_to_id == assigned_to_id)
        return list(self.session.scalars(statement).all())

    def lead_filter_options(self, *, user_id: int | None, role: str | None) -> dict[str, list[str]]:
        base = [] if role == "admin" else [Lead.assigned_to_id == user_id]

        def distinct(column, *extra) -> list[str]:
            statement = select(column).where(*base, *extra).distinct()
            return sorted(value for value in self.session.scalars(statement).all() if value)

        return {
            "companies": distinct(Lead.company_name),
            "locations": distinct(Lead.location, Lead.location.is_not(None), Lead.location != ""),
            "designations": distinct(Lead.designation),
            "sources": (
                distinct(Lead.source, Lead.source.is_not(None), Lead.source != "")
                if role == "admin"
                else []
            ),
        }

    def find_company(self, company_name: str) -> Lead | None:
        statement = (
            select(Lead)
            .where(Lead.company_name == company_name.strip().lower())
            .order_by(Lead.id.asc())
            .limit(1)
        )
        return self.session.scalar(statement)

    def count_leads(self, since: datetime | None = None) -> int:
        statement = select(func.count()).select_from(Lead)
        if since is not None:
            statement = statement.where(Lead.created_at >= since)
        return self.session.scalar(statement) or 0

    def recent_leads(self, limit: int = 5) -> list[Lead]:
        statement = select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc()).limit(limit)
        return list(self.session.scalars(statement).all())

    def _commit_lead(self, email: str, company_name: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateLeadError(email, company_name) from exc
            raise
        except SQLAlchemyError:
            self.session.rollback()
            raise

    # countries

    def list_countries(self) -> list[Country]:
        return list(self.session.scalars(select(Country).order_by(Country.name.asc())).all())

    def create_country(self, name: str) -> Country:
        name = (name or "").strip()
        if not name:
            raise ValueError("Country name is required")
        if self.session.scalar(select(Country).where(Country.name == name)):
            raise ValueError("Country already exists")

        country = Country(name=name)
        self.session.add(country)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ValueError("Country already exists") from exc
        self.session.refresh(country)
        return country

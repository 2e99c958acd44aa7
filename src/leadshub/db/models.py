from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadshub.db.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="user", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Lead(TimestampMixin, Base):
    __tablename__ = "leads"
    __table_args__ = (
        UniqueConstraint("email", "company_name", "job_link", name="uq_lead_email_company_job"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    designation: Mapped[str] = mapped_column(String(255), nullable=False)
    profile_link: Mapped[str | None] = mapped_column(String(500), nullable=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    person_mobile: Mapped[str | None] = mapped_column(String(40), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    company_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    company_link: Mapped[str | None] = mapped_column(String(500), nullable=True)

    job_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Part of the uniqueness key: NULLs never collide in SQL, so absent is "".
    job_link: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    additional_emails: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    source: Mapped[str | None] = mapped_column(String(120), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    assigned_to_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    assignee: Mapped[User] = relationship(foreign_keys=[assigned_to_id], lazy="selectin")
    creator: Mapped[User] = relationship(foreign_keys=[created_by_id], lazy="selectin")


class Country(TimestampMixin, Base):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from leadshub.config import Settings, get_settings
from leadshub.db.models import User
from leadshub.db.repositories import Repository

logger = logging.getLogger(__name__)


def resolve_default_assignee(session: Session, settings: Settings | None = None) -> User:
    """Pick the user that owns imported leads: an active admin, any active user, or a new placeholder admin."""
    settings = settings or get_settings()
    repo = Repository(session)

    user = repo.find_active_user(role="admin")
    if user is None:
        user = repo.find_active_user()
    if user is not None:
        return user

    logger.info("No users found. Creating default admin user %s", settings.default_admin_email)
    user = create_admin_user(
        session,
        name=settings.default_admin_name,
        email=settings.default_admin_email,
        password=settings.default_admin_password,
    )
    logger.warning("Default admin user %s created. Please change the password!", user.email)
    return user


def create_admin_user(session: Session, *, name: str, email: str, password: str) -> User:
    repo = Repository(session)
    existing = repo.get_user_by_email(email)
    if existing:
        logger.info("Admin user %s already exists", existing.email)
        return existing
    return repo.create_user(name=name, email=email, password=password, role="admin", is_active=True)

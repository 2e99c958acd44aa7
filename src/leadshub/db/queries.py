from __future__ import annotations

from datetime import datetime, time

from sqlalchemy import ColumnElement, or_

from leadshub.db.models import Lead
from leadshub.types import LeadQuery


def build_lead_filters(query: LeadQuery) -> list[ColumnElement[bool]]:
    criteria: list[ColumnElement[bool]] = []

    if not query.is_admin:
        criteria.append(Lead.assigned_to_id == query.user_id)
    elif query.assigned_to is not None:
        criteria.append(Lead.assigned_to_id == query.assigned_to)

    if query.search:
        term = query.search
        criteria.append(
            or_(
                Lead.first_name.icontains(term, autoescape=True),
                Lead.last_name.icontains(term, autoescape=True),
                Lead.email.icontains(term, autoescape=True),
                Lead.company_name.icontains(term, autoescape=True),
                Lead.job_title.icontains(term, autoescape=True),
            )
        )

    if query.company:
        criteria.append(Lead.company_name.icontains(query.company, autoescape=True))
    if query.location:
        criteria.append(Lead.location.icontains(query.location, autoescape=True))
    if query.designation:
        criteria.append(Lead.designation.icontains(query.designation, autoescape=True))
    if query.source:
        criteria.append(Lead.source.icontains(query.source, autoescape=True))

    if query.date_from:
        criteria.append(Lead.created_at >= datetime.combine(query.date_from, time.min))
    if query.date_to:
        # inclusive of the whole end day
        criteria.append(Lead.created_at <= datetime.combine(query.date_to, time.max))

    return criteria


def lead_ordering(query: LeadQuery) -> list[ColumnElement]:
    column = getattr(Lead, query.sort_by)
    primary = column.desc() if query.sort_order == "desc" else column.asc()
    tiebreak = Lead.id.desc() if query.sort_order == "desc" else Lead.id.asc()
    return [primary, tiebreak]

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from leadshub.config import Settings, get_settings
from leadshub.db.models import Lead
from leadshub.db.repositories import Repository

UNKNOWN = "Unknown"


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _ranked(
    leads: Iterable[Lead],
    key: Callable[[Lead], str | None],
    label: str,
    *,
    limit: int | None = None,
    default: str | None = None,
) -> list[dict[str, Any]]:
    counts: Counter[str] = Counter()
    for lead in leads:
        value = key(lead) or default
        if value:
            counts[value] += 1
    # ties keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if limit is not None:
        ranked = ranked[:limit]
    return [{label: value, "count": count} for value, count in ranked]


def filter_by_date_range(leads: Sequence[Lead], days: int | None, now: datetime | None = None) -> list[Lead]:
    if days is None:
        return list(leads)
    cutoff = (now or datetime.now(UTC)) - timedelta(days=days)
    return [lead for lead in leads if as_utc(lead.created_at) >= as_utc(cutoff)]


def leads_by_company(leads: Iterable[Lead], limit: int = 10) -> list[dict[str, Any]]:
    return _ranked(leads, lambda lead: lead.company_name, "company", limit=limit)


def leads_by_source(leads: Iterable[Lead]) -> list[dict[str, Any]]:
    return _ranked(leads, lambda lead: lead.source, "source", default=UNKNOWN)


def top_designations(leads: Iterable[Lead], limit: int = 10) -> list[dict[str, Any]]:
    return _ranked(leads, lambda lead: lead.designation, "designation", limit=limit)


def leads_by_location(leads: Iterable[Lead]) -> list[dict[str, Any]]:
    return _ranked(leads, lambda lead: lead.location, "location", default=UNKNOWN)


def leads_by_user(leads: Iterable[Lead]) -> list[dict[str, Any]]:
    return _ranked(
        leads,
        lambda lead: lead.assignee.name if lead.assignee else None,
        "user",
        default=UNKNOWN,
    )


def leads_by_month(leads: Iterable[Lead], months: int = 12) -> list[dict[str, Any]]:
    counts: Counter[str] = Counter(as_utc(lead.created_at).strftime("%Y-%m") for lead in leads)
    ordered = sorted(counts.items())[-months:]
    return [{"month": month, "count": count} for month, count in ordered]


def build_report(leads: Sequence[Lead], days: int | None = None, now: datetime | None = None) -> dict[str, Any]:
    selected = filter_by_date_range(leads, days, now)
    return {
        "total_leads": len(selected),
        "leads_by_user": leads_by_user(selected),
        "leads_by_company": leads_by_company(selected),
        "leads_by_month": leads_by_month(selected),
        "leads_by_source": leads_by_source(selected),
        "leads_by_location": leads_by_location(selected),
        "top_designations": top_designations(selected),
    }


def dashboard_stats(
    repo: Repository,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    window_start = (now or datetime.now(UTC)) - timedelta(days=settings.new_lead_window_days)

    recent_activity = [
        {
            "id": lead.id,
            "type": "lead_created",
            "message": f"New lead added: {lead.company_name} by {lead.creator.name if lead.creator else UNKNOWN}",
            "time": as_utc(lead.created_at).isoformat(),
        }
        for lead in repo.recent_leads(limit=5)
    ]

    return {
        "stats": {
            "total_users": repo.count_active_users(),
            "total_leads": repo.count_leads(),
            "new_leads": repo.count_leads(since=window_start),
            "active_users": repo.count_active_users(since=window_start),
        },
        "recent_activity": recent_activity,
    }

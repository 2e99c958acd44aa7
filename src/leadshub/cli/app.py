from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from leadshub.api.app import create_app
from leadshub.config import get_settings
from leadshub.core.csv_parser import FormatError
from leadshub.core.importer import LeadImportPipeline
from leadshub.core.skip_report import export_leads_csv
from leadshub.db.init import init_database
from leadshub.db.repositories import Repository
from leadshub.db.seed import create_admin_user, resolve_default_assignee
from leadshub.db.session import SessionLocal
from leadshub.logging_config import configure_logging
from leadshub.types import LeadQuery

logger = logging.getLogger(__name__)

app = typer.Typer(help="Leads Hub CLI")
users_app = typer.Typer(help="Manage user accounts")
leads_app = typer.Typer(help="Browse and export leads")

app.add_typer(users_app, name="users")
app.add_typer(leads_app, name="leads")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Initialize the data directory and database tables."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@app.command("import")
def import_cmd(
    file: Path = typer.Option(..., "--file"),
    assignee_id: int | None = typer.Option(None, "--assignee-id"),
    skipped_output: Path | None = typer.Option(None, "--skipped-output"),
) -> None:
    """Import leads from a CSV file, writing rejected rows next to it."""
    configure_logging()
    try:
        ensure_initialized()
        with SessionLocal() as db:
            if assignee_id is None:
                assignee_id = resolve_default_assignee(db).id
            assignee = Repository(db).get_user(assignee_id)
            if assignee is not None:
                logger.info("Using user: %s (%s)", assignee.name, assignee.email)

            pipeline = LeadImportPipeline(db, default_assignee_id=assignee_id)
            result = pipeline.run_file(file, skipped_output=skipped_output)
    except (OSError, FormatError, ValueError, SQLAlchemyError) as exc:
        logger.error("Import failed: %s", exc)
        raise typer.Exit(code=1) from exc

    typer.echo(
        json.dumps(
            {
                "summary": result.summary.as_dict(),
                "skipped_report": str(result.report_path) if result.report_path else None,
            },
            indent=2,
        )
    )


@users_app.command("create-admin")
def users_create_admin(
    name: str = typer.Option("Admin User", "--name"),
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        user = create_admin_user(db, name=name, email=email, password=password)
        typer.echo(json.dumps({"id": user.id, "name": user.name, "email": user.email, "role": user.role}, indent=2))


@leads_app.command("list")
def leads_list(
    limit: int = typer.Option(20, "--limit"),
    search: str | None = typer.Option(None, "--search"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        page = Repository(db).list_leads(LeadQuery(role="admin", limit=limit, search=search))
        typer.echo(
            json.dumps(
                [
                    {
                        "id": lead.id,
                        "name": f"{lead.first_name} {lead.last_name}",
                        "email": lead.email,
                        "company_name": lead.company_name,
                        "designation": lead.designation,
                        "source": lead.source,
                        "created_at": lead.created_at.isoformat() if lead.created_at else None,
                    }
                    for lead in page.items
                ],
                indent=2,
            )
        )


@leads_app.command("export")
def leads_export(file: Path = typer.Option(..., "--file")) -> None:
    """Write every stored lead to a CSV file that can be imported again."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        leads = Repository(db).list_all_leads()
        destination = export_leads_csv(leads, file)
        typer.echo(json.dumps({"exported": len(leads), "file": str(destination)}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)

"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.couchdb import CouchDBClient
from core.config import AppSettings, write_user_env_vars
from core.domain.documents import SpecKind, parse_document
from core.errors import RecordValidationWarning
from core.resources_loader import FileDefaultSpecSource, default_specs_dir

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_store(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with CouchDBClient.from_settings(settings) as client:
            info = await client.request("GET", "/", "GET server info")
        version = info.get("version", "unknown")
        return True, f"CouchDB {version}"
    except Exception as exc:
        return False, str(exc)


def _check_default(source: FileDefaultSpecSource, kind: SpecKind) -> tuple[str, str]:
    path = source.path_for(kind)
    raw = source.load(kind)
    if raw is None:
        return "MISSING", f"{path} (fallback applies)"
    try:
        parse_document(kind, raw)
    except RecordValidationWarning as warning:
        return "INVALID", str(warning)
    return "OK", str(path)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="NPS Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Slack token", "OK" if settings.slack_token else "MISSING", "SLACK_TOKEN")
    table.add_row("Slack URL", "OK" if settings.slack_url else "MISSING", settings.slack_url or "SLACK_URL")
    store_url = settings.resolve_store_url()
    table.add_row("Store URL", "OK" if store_url else "MISSING", "configured" if store_url else "NPS_COUCHDB_URL")
    table.add_row("Databases", "OK", f"{settings.data_database}, {settings.meta_database}")

    # Connectivity (best-effort)
    if store_url:
        ok_store, detail_store = asyncio.run(_check_store(settings))
        table.add_row("Store connectivity", "OK" if ok_store else "FAIL", detail_store)

    # Default documents
    source = FileDefaultSpecSource(default_specs_dir(settings))
    for kind in SpecKind:
        status, detail = _check_default(source, kind)
        table.add_row(f"Default {kind.value} spec", status, detail)

    _console.print(table)

    missing = settings.missing_bootstrap_settings()
    if missing:
        _console.print(
            "\n[yellow]Note:[/yellow] bootstrap will refuse to start until these are set: "
            + ", ".join(missing)
        )


@app.command(name="configure")
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    slack_token = typer.prompt("Slack slash-command token", hide_input=True).strip()
    slack_url = typer.prompt("Slack team URL").strip()
    couchdb_url = typer.prompt("CouchDB/Cloudant URL", default="http://localhost:5984", show_default=True).strip()
    username = typer.prompt("Store user name", default="", show_default=False).strip()
    password = ""
    if username:
        password = typer.prompt("Store password", hide_input=True).strip()

    if not slack_token or not slack_url or not couchdb_url:
        raise typer.BadParameter("Slack token, Slack URL and store URL are required")

    values = {
        "NPS_SLACK_TOKEN": slack_token,
        "NPS_SLACK_URL": slack_url,
        "NPS_COUCHDB_URL": couchdb_url,
    }
    if username:
        values["NPS_COUCHDB_USERNAME"] = username
        values["NPS_COUCHDB_PASSWORD"] = password

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved configuration to:[/green] {env_path}")

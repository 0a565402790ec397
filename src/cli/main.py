"""Command line entry point (Typer)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console

from adapters.couchdb import CouchDBClient
from cli import doctor
from cli.ui_components import build_domains_table, build_scores_table, build_tags_table, print_banner
from core.config import AppSettings
from core.errors import BootstrapError
from core.logging_config import configure_logging
from core.resources_loader import FileDefaultSpecSource, default_specs_dir
from core.services.bootstrap import BootstrapResult, bootstrap

app = typer.Typer(no_args_is_help=True, help="NPS Slack bot: store bootstrap and diagnostics.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = structlog.get_logger(__name__)


async def _run_bootstrap(settings: AppSettings, specs_dir: Path | None) -> BootstrapResult:
    defaults = FileDefaultSpecSource(specs_dir or default_specs_dir(settings))
    async with CouchDBClient.from_settings(settings) as client:
        return await bootstrap(settings=settings, store=client, defaults=defaults)


@app.command(name="bootstrap")
def bootstrap_command(
    specs_dir: Optional[Path] = typer.Option(
        None,
        "--specs-dir",
        help="Directory with default_*_spec.json files.",
        exists=True,
        file_okay=False,
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the loaded specs."),
) -> None:
    """Provision the databases and load the domain, tag and score specs."""

    settings = AppSettings()
    configure_logging(settings.log_level, settings.log_format)

    try:
        result = asyncio.run(_run_bootstrap(settings, specs_dir))
    except BootstrapError as exc:
        logger.error("bootstrap_failed", error=str(exc))
        raise typer.Exit(code=1) from exc

    if quiet:
        return
    print_banner(_console)
    _console.print(build_domains_table(result.domains))
    _console.print(build_tags_table(result.tag_sets))
    _console.print(build_scores_table(result.scores))


def run() -> None:
    app()

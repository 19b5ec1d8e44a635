import asyncio

import click

from commitsheets.core.config import get_settings
from commitsheets.core.errors import CommitSheetsError
from commitsheets.core.logging import get_logger, setup_logging
from commitsheets.services.report_service import ReportService
from commitsheets.services.sheet_layouts import LAYOUTS, get_layout

logger = get_logger(__name__)


@click.group()
def cli():
    """Sync Bitbucket commit history into Google Sheets."""


@cli.command()
@click.option("--max-pages", type=int, default=None, help="Upper bound on commit pages to fetch.")
@click.option("--sheet-name", default=None, help="Target tab name.")
@click.option("--layout", type=click.Choice(sorted(LAYOUTS)), default=None, help="Column layout to write.")
@click.option("--no-diffstat", is_flag=True, help="Skip per-commit file statistics.")
def run(max_pages, sheet_name, layout, no_diffstat):
    """Fetch every commit and overwrite the target sheet."""
    try:
        settings = get_settings()
        setup_logging(settings.DEBUG)

        click.echo(f"Repository: {settings.repository}")
        service = ReportService.from_settings(settings)
        if max_pages is not None:
            service.max_pages = max_pages
        if sheet_name:
            service.sheet_name = sheet_name
        if layout:
            service.layout = get_layout(layout, settings.TICKET_BASE_URL)
        if no_diffstat:
            service.enrich = False

        click.echo("Fetching commits from Bitbucket and writing to Google Sheets...")
        result = asyncio.run(service.generate_report())
    except CommitSheetsError as e:
        raise click.ClickException(str(e)) from e
    except Exception as e:
        logger.error("sync failed", error=str(e), error_type=type(e).__name__)
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    click.echo(f"Wrote {result.commits_count} commits to spreadsheet {result.spreadsheet_id}")
    click.echo("Sync completed successfully")


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to HOST).")
@click.option("--port", type=int, default=None, help="Bind port (defaults to PORT).")
def serve(host, port):
    """Run the report API."""
    from commitsheets.main import run_server

    try:
        run_server(host=host, port=port)
    except CommitSheetsError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()

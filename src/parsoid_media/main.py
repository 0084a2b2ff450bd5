# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for extracting media lists from Parsoid HTML files or live wiki pages

import json
from pathlib import Path
from typing import Any

import asyncclick as click
from rich.console import Console

from parsoid_media.config import get_config
from parsoid_media.core import MediaListService
from parsoid_media.media import MediaExtractionError, get_media_list
from parsoid_media.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logger,
    get_logging_status,
    with_page_context,
)
from parsoid_media.utils.retry import MediaWikiAPIError
from parsoid_media.utils.rich_tables import create_logging_status_table, create_media_list_table, print_rich_table

console = Console()
logger = get_logger(__name__)


def _output(items: list[dict[str, Any]], page: str, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(items, ensure_ascii=False, indent=2))
    else:
        print_rich_table(console, create_media_list_table(items, page))


def _load_metadata(path: Path | None) -> dict[str, Any] | None:
    if path is None:
        return None
    try:
        metadata = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--metadata") from e
    if not isinstance(metadata, dict):
        raise click.BadParameter("expected a JSON object keyed by file title", param_hint="--metadata")
    return metadata


@click.command()
@click.argument("html_file", type=click.File("rb"))
@click.option(
    "--metadata",
    "metadata_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON object mapping file titles to metadata to merge in",
)
@click.pass_context
async def extract(ctx, html_file, metadata_path: Path | None):
    """
    🖼️ Extract the media list from a saved Parsoid HTML file.

    Use '-' to read the HTML from stdin.
    """
    metadata = _load_metadata(metadata_path)
    try:
        items = get_media_list(html_file.read(), metadata)
    except MediaExtractionError as e:
        logger.error("Extraction failed", file=html_file.name, error=str(e))
        raise click.ClickException(str(e)) from e

    _output(items, html_file.name, ctx.obj["json_output"])


@click.command()
@click.argument("domain")
@click.argument("title")
@click.option("--thumb-width", type=int, default=None, help="Base thumbnail width for srcset entries")
@click.pass_context
async def fetch(ctx, domain: str, title: str, thumb_width: int | None):
    """
    🌐 Fetch a page from a wiki and print its enriched media list.

    Example: parsoid-media fetch en.wikipedia.org Cat
    """
    json_output = ctx.obj["json_output"]
    with with_page_context(domain, title) as page_logger:
        service = MediaListService(thumb_width=thumb_width)
        try:
            if json_output:
                items = await service.get_media_list(domain, title)
            else:
                with console.status(f"🕸️ Fetching media for {title}..."):
                    items = await service.get_media_list(domain, title)
        except (MediaWikiAPIError, MediaExtractionError) as e:
            page_logger.error("Media list failed", error=str(e), error_type=type(e).__name__)
            raise click.ClickException(str(e)) from e
        finally:
            await service.close()

        page_logger.info("Media list complete", items=len(items))
        _output(items, title, json_output)


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else config.log_mode

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    print_rich_table(console, create_logging_status_table(status))


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Print JSON payloads and structured JSON logs instead of rich tables")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    📚 Parsoid Media - gallery media lists from MediaWiki Parsoid HTML

    Finds the images, videos, audio and pronunciation clips on a wiki page,
    in page order, ready for a mobile media gallery.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(extract)
app.add_command(fetch)
app.add_command(logging_status)


if __name__ == "__main__":
    app()

# ABOUTME: Rich table utilities for displaying media lists and logging status in the CLI
# ABOUTME: Provides pre-configured table generators for common data display patterns

from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

TYPE_ICONS = {"image": "🖼️", "video": "🎬", "audio": "🔊", "unknown": "❔"}


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key-value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table with zebra striping.

    Args:
        title: Table title with emoji/styling
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles for zebra striping
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def _item_label(item: dict[str, Any]) -> str:
    titles = item.get("titles") or {}
    if titles.get("display"):
        return titles["display"]
    if item.get("title"):
        return item["title"]
    original = item.get("original") or {}
    return original.get("source") or "?"


def create_media_list_table(items: list[dict[str, Any]], page: str) -> Table:
    """Create a table listing the media items of a page in gallery order.

    Args:
        items: Media list payload (merged or unmerged dicts)
        page: Page name shown in the title

    Returns:
        Media list table
    """
    rows = []
    for position, item in enumerate(items, start=1):
        media_type = item.get("type", "unknown")
        caption = (item.get("caption") or {}).get("text", "")
        rows.append(
            [
                str(position),
                f"{TYPE_ICONS.get(media_type, '❔')} {media_type}",
                _item_label(item),
                "" if item.get("section_id") is None else str(item["section_id"]),
                item.get("audio_type") or "",
                "✅" if item.get("showInGallery") else "—",
                caption[:60] + ("…" if len(caption) > 60 else ""),
            ]
        )

    return create_multi_column_table(
        title=f"📚 Media on {page} ({len(items)} items)",
        columns=[
            ("#", "dim"),
            ("Type", "magenta"),
            ("File", "bold white"),
            ("Section", "cyan"),
            ("Audio", "blue"),
            ("Gallery", "green"),
            ("Caption", "white"),
        ],
        rows=rows,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after

"""Table formatters for Rich console output."""

from collections.abc import Mapping

from rich.box import ROUNDED
from rich.table import Table

from esfacets.aggregations import Aggregation


def format_field_table(fields: Mapping[str, str], title: str | None = None) -> Table:
    """Format generic keys and their mapped paths as a Rich table.

    Args:
        fields: Generic key to path mapping
        title: Table title

    Returns:
        Rich Table object
    """
    table = Table(
        title=title,
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold",
        row_styles=["none", "dim"],
    )
    table.add_column("Key", style="cyan")
    table.add_column("Path")

    if not fields:
        table.add_row("[dim]No fields[/dim]", "")
    for key, path in fields.items():
        table.add_row(key, path)

    return table


def format_bucket_table(aggregation: Aggregation) -> Table:
    """Format the parsed buckets of an aggregation as a Rich table."""
    table = Table(
        title=f"{aggregation.label} ({aggregation.query_var})",
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold",
    )
    table.add_column("Key", style="cyan")
    table.add_column("Label")
    table.add_column("Count", style="yellow", justify="right")
    table.add_column("Selected", justify="center")

    if not aggregation.buckets:
        table.add_row("[dim]No buckets[/dim]", "", "", "")
    for bucket in aggregation.buckets:
        table.add_row(
            bucket.key,
            bucket.label,
            str(bucket.count),
            "[green]✓[/green]" if bucket.selected else "",
        )

    return table

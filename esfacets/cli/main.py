"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console

from esfacets import __version__
from esfacets.adapters import get_adapter
from esfacets.cli.formatters import format_bucket_table, format_field_table
from esfacets.config import Settings, load_settings
from esfacets.context import SearchContext
from esfacets.request import RefinementParams


@dataclass
class Context:
    """CLI context that holds shared resources."""

    settings: Settings
    console: Console
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


class EsFacetsGroup(click.Group):
    """Custom group that turns errors into a message and exit code 1."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=EsFacetsGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(
    version=__version__, prog_name="esfacets", message="esfacets version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """Compile search refinements into Elasticsearch DSL.

    Aggregations, lookups and the backend adapter come from the
    configuration file.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    try:
        settings = load_settings(config)
    except Exception as e:
        if debug:
            raise
        console.print(f"[red]Error loading configuration:[/red] {e}")
        ctx.exit(1)

    ctx.obj = Context(settings=settings, console=console, debug=debug)


@cli.command()
@click.argument("keys", nargs=-1)
@click.option("--adapter", "-a", help="Adapter to show (default: configured)")
@click.pass_context
def fields(ctx: click.Context, keys: tuple[str, ...], adapter: str | None) -> None:
    """Show the field map, or how KEYS are mapped."""
    console = ctx.obj.console
    backend = get_adapter(adapter or ctx.obj.settings.adapter)
    field_map = backend.field_map()

    if keys:
        mapped = {key: field_map.map(key) for key in keys}
    else:
        mapped = dict(field_map.fields)

    console.print(format_field_table(mapped, title=f"Field map: {backend.name}"))


@cli.command(name="compile")
@click.option("--params", "-p", default="", help="Refinement query string")
@click.option("--search", "-s", "search_text", default="", help="Search phrase")
@click.option("--from", "offset", type=int, default=0, help="Index of first hit")
@click.option("--size", type=int, default=10, help="Number of hits")
@click.pass_context
def compile_command(
    ctx: click.Context, params: str, search_text: str, offset: int, size: int
) -> None:
    """Print the request body for a search as JSON."""
    console = ctx.obj.console
    context = SearchContext.from_settings(ctx.obj.settings)
    context.bind(RefinementParams.from_query_string(params))

    body = context.build_body(search_text, offset=offset, size=size)
    if body is None:
        console.print(
            "[yellow]Empty search phrase and empty_search is disabled; "
            "nothing to send[/yellow]"
        )
        return

    console.print_json(context.encode(body).decode())


@cli.command()
@click.argument("response", type=click.Path(exists=True, path_type=Path))
@click.option("--params", "-p", default="", help="Refinement query string")
@click.pass_context
def parse(ctx: click.Context, response: Path, params: str) -> None:
    """Parse the aggregations of a JSON search RESPONSE into buckets."""
    console = ctx.obj.console
    context = SearchContext.from_settings(ctx.obj.settings)
    context.bind(RefinementParams.from_query_string(params))

    aggregations = context.parse_response(response.read_bytes())
    if not aggregations:
        console.print("[yellow]No aggregations configured[/yellow]")
        return

    for aggregation in aggregations:
        console.print(format_bucket_table(aggregation))


def main() -> None:
    """Main entry point for the CLI application."""
    cli(prog_name="esfacets")


if __name__ == "__main__":
    main()

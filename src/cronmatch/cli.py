"""Command-line interface for cronmatch."""

import json
import logging
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from cronmatch.api import MatchOptions, get_future_matches, is_time_matches, validate_expression
from cronmatch.errors import CronError
from cronmatch.model import CronExprSet
from cronmatch.parser import parse
from cronmatch.presets import PRESETS, get_preset

app = typer.Typer(
    name="cronmatch",
    help="Cron expression parser and schedule matcher with Quartz-style extensions",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Cron expression parser and schedule matcher."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _resolve_expression(expression: str) -> CronExprSet | str:
    """Look up a ``preset:<name>`` reference; other text is returned as is."""
    if expression.startswith("preset:"):
        preset = get_preset(expression[len("preset:"):])
        if preset is None:
            raise typer.BadParameter(f"Unknown preset: {expression}")
        return preset
    return expression


@app.command(name="next")
def next_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression or preset:<name>")],
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", help="Number of matches to print"),
    ] = None,
    timezone: Annotated[
        Optional[str],
        typer.Option("--timezone", "-z", help="Time zone the schedule is read in"),
    ] = None,
    start: Annotated[
        Optional[str],
        typer.Option("--start", "-s", help="Inclusive start instant (ISO-8601)"),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", "-e", help="Exclusive end instant (ISO-8601)"),
    ] = None,
    seconds: Annotated[
        bool,
        typer.Option("--seconds", help="Expression starts with a seconds field"),
    ] = False,
    local: Annotated[
        bool,
        typer.Option("--local", help="Print times in the schedule's zone"),
    ] = False,
    max_loops: Annotated[
        Optional[int],
        typer.Option("--max-loops", help="Maximum candidate times to examine"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", "-t", help="Print a table instead of one time per line"),
    ] = False,
) -> None:
    """Print the next times matching an expression.

    Unset options fall back to CRONMATCH_* environment variables.
    """
    overrides: dict[str, Any] = {
        "match_count": count,
        "timezone": timezone,
        "start_at": start,
        "end_at": end,
        "has_seconds": seconds or None,
        "format_in_timezone": local or None,
        "max_loop_count": max_loops,
    }

    try:
        options = MatchOptions.from_env(**{k: v for k, v in overrides.items() if v is not None})
        matches = get_future_matches(_resolve_expression(expression), options)
    except CronError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if table:
        result = Table(title=expression, show_header=True, header_style="bold magenta")
        result.add_column("#", justify="right")
        result.add_column("Time", style="cyan", no_wrap=True)
        for index, match in enumerate(matches, start=1):
            result.add_row(str(index), match)
        console.print(result)
        return

    for match in matches:
        typer.echo(match)


@app.command(name="check")
def check_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression or preset:<name>")],
    time: Annotated[str, typer.Argument(help="Instant to check (ISO-8601)")],
    timezone: Annotated[
        Optional[str],
        typer.Option("--timezone", "-z", help="Time zone the schedule is read in"),
    ] = None,
    seconds: Annotated[
        bool,
        typer.Option("--seconds", help="Expression starts with a seconds field"),
    ] = False,
) -> None:
    """Check whether an instant matches an expression (exit 1 when it does not)."""
    try:
        matched = is_time_matches(
            _resolve_expression(expression), time, timezone, has_seconds=seconds
        )
    except CronError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if matched:
        typer.echo(f"{time} matches [{expression}]")
    else:
        typer.echo(f"{time} does not match [{expression}]")
        raise typer.Exit(1)


@app.command(name="parse")
def parse_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression or preset:<name>")],
    seconds: Annotated[
        bool,
        typer.Option("--seconds", help="Expression starts with a seconds field"),
    ] = False,
    indent: Annotated[
        int,
        typer.Option("--indent", help="JSON indentation"),
    ] = 2,
) -> None:
    """Print the parsed structure of an expression as JSON."""
    try:
        resolved = _resolve_expression(expression)
        if isinstance(resolved, CronExprSet):
            expr_set = resolved
        else:
            expr_set = parse(resolved, has_seconds=seconds)
    except CronError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps(expr_set.to_dict(), indent=indent or None))


@app.command(name="validate")
def validate_cmd(
    expressions: Annotated[list[str], typer.Argument(help="Cron expressions to validate")],
    seconds: Annotated[
        bool,
        typer.Option("--seconds", help="Expressions start with a seconds field"),
    ] = False,
) -> None:
    """Validate one or more expressions."""
    failed = 0
    for expression in expressions:
        errors = validate_expression(expression, has_seconds=seconds)
        if errors:
            failed += 1
            for error in errors:
                typer.echo(f"INVALID {error}", err=True)
        else:
            typer.echo(f"VALID   {expression}")

    if failed:
        raise typer.Exit(1)


@app.command(name="presets")
def presets_cmd() -> None:
    """List the predefined schedules."""
    result = Table(title="Presets", show_header=True, header_style="bold magenta")
    result.add_column("Name", style="cyan", no_wrap=True)
    result.add_column("Expression", no_wrap=True)
    result.add_column("Alternatives", justify="right")

    for name, expr_set in PRESETS.items():
        result.add_row(name, expr_set.pattern, str(len(expr_set)))

    console.print(result)


if __name__ == "__main__":
    app()

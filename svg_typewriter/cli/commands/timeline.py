"""Timeline command - show the animation schedule."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from svg_typewriter.cli.commands.render import build_query
from svg_typewriter.config import Config
from svg_typewriter.exceptions import ParameterError
from svg_typewriter.layout import compute_layout
from svg_typewriter.params import resolve_params
from svg_typewriter.timeline import compile_timeline

console = Console()


@click.command()
@click.option("--text", "-t", help="Text to type; separate lines with ';'")
@click.option(
    "--lines-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with a list of per-line objects",
)
@click.option("--query", "-q", help="Raw request query string")
@click.option(
    "--deletion",
    type=click.Choice(["stay", "backspace", "clear"]),
    help="What happens to a line after it is typed",
)
@click.option("--typing-speed", type=float, help="Seconds per typed character")
@click.option("--pause", type=int, help="Pause after each line, in milliseconds")
@click.option("--repeat/--no-repeat", default=None, help="Loop the animation")
@click.pass_context
def timeline(
    ctx: click.Context,
    lines_file: Path | None,
    query: str | None,
    **options: object,
) -> None:
    """Show when each line is typed, held and removed."""
    config = ctx.obj.get("config") or Config.load()
    params = build_query(query, lines_file, options)

    try:
        settings = resolve_params(params, config.defaults)
    except ParameterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    layout = compute_layout(settings)
    schedule = compile_timeline(layout, settings)

    table = Table(title=f"Timeline ({settings.deletion_behavior.value})")
    table.add_column("#", style="dim")
    table.add_column("Text", style="cyan")
    table.add_column("Glyphs", justify="right")
    table.add_column("Start", justify="right", style="green")
    table.add_column("Typing", justify="right")
    table.add_column("Pause", justify="right")
    table.add_column("Deletion", justify="right")
    table.add_column("End", justify="right", style="yellow")

    for index, line in enumerate(schedule.lines):
        content = line.block.line.content.replace("\n", "\\n")
        table.add_row(
            str(index + 1),
            content[:30] + "..." if len(content) > 30 else content,
            str(line.block.glyph_count),
            f"{line.start:.3f}s",
            f"{line.typing_duration:.3f}s",
            f"{line.pause:.3f}s",
            f"{line.deletion_duration:.3f}s",
            f"{line.end:.3f}s",
        )

    console.print(table)
    console.print(f"\n[bold]Cycle:[/bold] {schedule.cycle_duration:.3f}s")
    if settings.repeat:
        console.print("[bold]Repeat:[/bold] yes")
    console.print(f"[bold]Cursor events:[/bold] {len(schedule.cursor_events)}")

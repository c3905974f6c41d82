"""Render command - write a typing-effect SVG."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from svg_typewriter.api import TypingSvgRenderer
from svg_typewriter.config import Config
from svg_typewriter.exceptions import ParameterError
from svg_typewriter.fonts import NullFontResolver
from svg_typewriter.params import parse_query

console = Console(stderr=True)

# CLI option name -> request parameter name
OPTION_PARAMS = {
    "text": "text",
    "font": "font",
    "color": "color",
    "font_size": "fontSize",
    "letter_spacing": "letterSpacing",
    "typing_speed": "typingSpeed",
    "delete_speed": "deleteSpeed",
    "width": "width",
    "height": "height",
    "pause": "pause",
    "background": "backgroundColor",
    "cursor": "cursorStyle",
    "deletion": "deletionBehavior",
    "font_ratio": "fontRatio",
}
FLAG_PARAMS = {
    "repeat": "repeat",
    "center": "center",
    "v_center": "vCenter",
    "border": "border",
}


def build_query(
    query: str | None,
    lines_file: Path | None,
    options: dict[str, object],
) -> dict[str, str]:
    """Merge ``--query``, ``--lines-file`` and explicit options, in that order."""
    params = parse_query(query) if query else {}
    if lines_file is not None:
        params["lines"] = lines_file.read_text(encoding="utf-8")
    for name, key in OPTION_PARAMS.items():
        value = options.get(name)
        if value is not None:
            params[key] = str(value)
    for name, key in FLAG_PARAMS.items():
        value = options.get(name)
        if value is not None:
            params[key] = "true" if value else "false"
    return params


@click.command()
@click.option("--text", "-t", help="Text to type; separate lines with ';'")
@click.option(
    "--lines-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with a list of per-line objects",
)
@click.option("--query", "-q", help="Raw request query string")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output SVG file (default: stdout)")
@click.option("--font", help="Font family")
@click.option("--color", help="Text colour")
@click.option("--font-size", type=int, help="Font size in pixels")
@click.option("--letter-spacing", help="Letter spacing (em, rem, px, %)")
@click.option("--typing-speed", type=float, help="Seconds per typed character")
@click.option("--delete-speed", type=float, help="Seconds per deleted character")
@click.option("--width", type=int, help="Canvas width")
@click.option("--height", type=int, help="Canvas height")
@click.option("--pause", type=int, help="Pause after each line, in milliseconds")
@click.option("--background", help="Background colour")
@click.option(
    "--cursor",
    type=click.Choice(["straight", "underline", "block", "blank"]),
    help="Cursor style",
)
@click.option(
    "--deletion",
    type=click.Choice(["stay", "backspace", "clear"]),
    help="What happens to a line after it is typed",
)
@click.option("--font-ratio", type=float, help="Average glyph width relative to font size")
@click.option("--repeat/--no-repeat", default=None, help="Loop the animation")
@click.option("--center/--no-center", default=None, help="Centre rows horizontally")
@click.option("--v-center/--no-v-center", default=None, help="Centre text vertically")
@click.option("--border/--no-border", default=None, help="Draw a border")
@click.option("--no-fonts", is_flag=True, help="Do not embed web fonts")
@click.pass_context
def render(
    ctx: click.Context,
    lines_file: Path | None,
    query: str | None,
    output: Path | None,
    no_fonts: bool,
    **options: object,
) -> None:
    """Render a typing-effect SVG.

    Options override values from --query and --lines-file.
    """
    config = ctx.obj.get("config") or Config.load()
    params = build_query(query, lines_file, options)

    renderer = TypingSvgRenderer(
        config=config,
        font_resolver=NullFontResolver() if no_fonts else None,
    )

    try:
        with console.status("[bold green]Rendering..."):
            result = renderer.render_query(params)
    except ParameterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    if output is None:
        click.echo(result.svg)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.svg, encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")
    console.print(f"  [blue]Glyphs:[/blue] {result.glyph_count}")
    console.print(f"  [blue]Cycle:[/blue] {result.cycle_duration:.3f}s")
    if not result.fonts_embedded:
        console.print("  [yellow]No fonts embedded[/yellow]")

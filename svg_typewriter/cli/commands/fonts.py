"""Fonts command - web font embedding utilities."""

from __future__ import annotations

from pathlib import Path

import click
import defusedxml.ElementTree as ET
from rich.console import Console
from rich.table import Table

from svg_typewriter.config import Config
from svg_typewriter.fonts import GoogleFontsResolver
from svg_typewriter.fonts.google import FONT_FILE_URL

console = Console()

SVG_NS = "{http://www.w3.org/2000/svg}"


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline CSS ``style`` attribute into a dict."""
    result: dict[str, str] = {}
    if not style:
        return result
    for part in style.split(";"):
        if ":" not in part:
            continue
        key, value = part.split(":", 1)
        result[key.strip()] = value.strip()
    return result


def primary_family(font_family: str) -> str:
    """First family of a CSS font-family list, unquoted."""
    return font_family.split(",")[0].strip().strip("'\"")


@click.group()
def fonts() -> None:
    """Font embedding commands."""
    pass


@fonts.command("css")
@click.argument("family")
@click.option("--text", default="", help="Only include glyphs for these characters")
@click.option("--weight", default="400", help="Font weight (400, 700, etc)")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write the CSS to a file")
@click.pass_context
def font_css(
    ctx: click.Context, family: str, text: str, weight: str, output: Path | None
) -> None:
    """Fetch embeddable CSS for a Google Fonts family."""
    config = ctx.obj.get("config") or Config.load()
    resolver = GoogleFontsResolver(config.fonts)

    with console.status(f"[bold green]Fetching '{family}'..."):
        css = resolver.resolve(family, text, weight)

    if css is None:
        console.print(f"[red]Not found:[/red] {family}")
        raise SystemExit(1)

    remote = len(FONT_FILE_URL.findall(css))
    inlined = css.count("data:font/")
    console.print(f"[green]Found:[/green] {family} ({weight})")
    console.print(f"[dim]CSS size:[/dim] {len(css) / 1024:.1f} KB")
    console.print(f"[dim]Inlined files:[/dim] {inlined}")
    if remote:
        console.print(f"[yellow]Remote files:[/yellow] {remote}")

    if output is not None:
        output.write_text(css, encoding="utf-8")
        console.print(f"[blue]Wrote[/blue] {output}")


@fonts.command("report")
@click.argument("svg_file", type=click.Path(exists=True, path_type=Path))
def font_report(svg_file: Path) -> None:
    """Report fonts used by a rendered typing SVG."""
    try:
        root = ET.parse(svg_file).getroot()
    except ET.ParseError as e:
        console.print(f"[red]Error: Could not parse SVG file:[/red] {e}")
        raise SystemExit(1) from e

    fonts_used: dict[tuple[str, str], int] = {}
    for elem in root.iter(f"{SVG_NS}text"):
        style = parse_style(elem.get("style"))
        key = (
            primary_family(style.get("font-family", "monospace")),
            style.get("font-size", "?"),
        )
        glyphs = len(list(elem.iter(f"{SVG_NS}tspan")))
        fonts_used[key] = fonts_used.get(key, 0) + glyphs

    embedded = any(
        "@font-face" in (elem.text or "") for elem in root.iter(f"{SVG_NS}style")
    )

    table = Table(title=f"Fonts in {svg_file.name}")
    table.add_column("Family", style="cyan")
    table.add_column("Size", style="yellow")
    table.add_column("Glyphs", style="dim")

    for (family, size), glyphs in sorted(fonts_used.items()):
        table.add_row(family, size, str(glyphs))

    console.print(table)
    console.print(f"\n[bold]Embedded fonts:[/bold] {'yes' if embedded else 'no'}")

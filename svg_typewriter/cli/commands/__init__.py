"""CLI commands for svg-typewriter."""

from svg_typewriter.cli.commands.fonts import fonts
from svg_typewriter.cli.commands.render import render
from svg_typewriter.cli.commands.timeline import timeline

__all__ = ["render", "timeline", "fonts"]

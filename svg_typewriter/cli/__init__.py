"""Command-line interface for svg-typewriter."""

"""Utility functions to print formatted CLI messages for progress updates."""

from __future__ import annotations

import click

__all__ = ["echo_banner", "echo_stage", "echo_success"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a command.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_stage(text: str) -> None:
    """Echo a bullet naming the pipeline stage about to run."""
    click.echo(f"  • {text}")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick."""
    click.secho(f"✓ {text}", fg="green")

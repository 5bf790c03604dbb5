"""CLI entry point for the order invalidator."""

from __future__ import annotations

import click

from order_invalidator.cli.commands import invalidate


@click.group()
def cli() -> None:
    """Batch order invalidation tool."""


cli.add_command(invalidate)

"""Helpers shared by the init and render commands."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from plate_cli.config import PlateConfig
from plate_cli.rewriter import CollisionPolicy, RewriteResult, WritePolicy
from plate_cli.substitution import SubstitutionSet


def configure_logging(debug: bool, console: Console | None = None) -> None:
    """Route plate_cli log records through Rich; DEBUG when ``debug`` is set."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def resolve_policies(
    config: PlateConfig, atomic: bool, overwrite_collisions: bool
) -> tuple[WritePolicy, CollisionPolicy]:
    """CLI flags can only tighten writes or loosen collisions over the config."""
    write_policy = WritePolicy.ATOMIC if atomic else config.write_policy
    collision_policy = CollisionPolicy.OVERWRITE if overwrite_collisions else config.collision_policy
    return write_policy, collision_policy


def values_table(values: SubstitutionSet) -> Table:
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Token", style="cyan")
    table.add_column("Value")
    for token, value in values.items():
        table.add_row(token.marker, value)
    return table


def rewrite_detail(result: RewriteResult) -> str:
    return f"{len(result.rewritten)} rewritten, {len(result.renamed)} renamed"


__all__ = [
    "configure_logging",
    "resolve_policies",
    "rewrite_detail",
    "values_table",
]

"""``plate render``: fill in a template folder that is already on disk."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from plate_cli.cli.helpers import configure_logging, resolve_policies, rewrite_detail, values_table
from plate_cli.config import load_config
from plate_cli.core.git import git_config_value
from plate_cli.errors import MissingValueError, PlateError
from plate_cli.rewriter import rewrite_tree
from plate_cli.substitution import build_substitution_set


def register_render_command(app: typer.Typer, *, console: Console) -> None:
    """Attach the ``render`` command to ``app``."""

    @app.command("render")
    def render(
        root: Path = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, help="Folder to rewrite in place"),
        project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name (default: folder name)"),
        author: Optional[str] = typer.Option(None, "--name", "-n", help="Author name (default: git config user.name)"),
        organization: Optional[str] = typer.Option(None, "--organization", "-o", help="Organization name (overrides config)"),
        bundle_id: Optional[str] = typer.Option(None, "--bundle-id", "-b", help="Bundle identifier prefix (overrides config)"),
        exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Entry name to leave untouched (repeatable)"),
        atomic: bool = typer.Option(False, "--atomic", help="Write each rewritten file to a temp file, then replace"),
        overwrite_collisions: bool = typer.Option(False, "--overwrite-collisions", help="Let the last entry win when two names collide"),
        debug: bool = typer.Option(False, "--debug", help="Show debug logging"),
    ) -> None:
        """Rewrite token markers in the names and contents under ROOT."""
        configure_logging(debug, console)
        try:
            config = load_config()
            author_name = author or git_config_value("user.name")
            if not author_name:
                raise MissingValueError("AUTHOR")
            values = build_substitution_set(
                project or root.resolve().name,
                author_name,
                config,
                organization=organization,
                bundle_id=bundle_id,
            )
            write_policy, collision_policy = resolve_policies(config, atomic, overwrite_collisions)
            if debug:
                console.print(values_table(values))
            result = rewrite_tree(
                root,
                values,
                write_policy=write_policy,
                collision_policy=collision_policy,
                exclude=exclude or (),
            )
        except PlateError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1)

        console.print(f"[green]✓[/green] Filled in {root}: {rewrite_detail(result)}")


__all__ = ["register_render_command"]

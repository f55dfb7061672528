"""
Plate CLI - generate projects from a template repository.

Usage:
    plate init [DESTINATION]
    plate render ROOT
    plate check
"""

import shlex
import sys

import typer
from rich.align import Align
from rich.console import Console
from rich.text import Text
from typer.core import TyperGroup

from plate_cli.cli import StepTracker
from plate_cli.cli.commands import register_init_command, register_render_command
from plate_cli.config import load_config
from plate_cli.core.git import check_tool
from plate_cli.errors import ConfigError

__version__ = "0.3.0"

BANNER = r"""
       _       _
 _ __ | | __ _| |_ ___
| '_ \| |/ _` | __/ _ \
| |_) | | (_| | ||  __/
| .__/|_|\__,_|\__\___|
|_|
"""

TAGLINE = "Plate - project generator for template repositories"

console = Console()


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


app = typer.Typer(
    name="plate",
    help="Generate a new project from a template repository",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


def show_banner():
    """Display the ASCII art banner."""
    colors = ["bright_blue", "blue", "cyan", "bright_cyan", "white", "bright_white"]
    styled_banner = Text()
    for i, line in enumerate(BANNER.strip("\n").split("\n")):
        styled_banner.append(line + "\n", style=colors[i % len(colors)])

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


@app.callback()
def callback(ctx: typer.Context):
    """Show banner when no subcommand is provided."""
    if ctx.invoked_subcommand is None and "--help" not in sys.argv and "-h" not in sys.argv:
        show_banner()
        console.print(Align.center("[dim]Run 'plate --help' for usage information[/dim]"))
        console.print()


register_init_command(app, console=console, show_banner=show_banner)
register_render_command(app, console=console)


@app.command()
def check():
    """Check that git and the bootstrap tool are installed."""
    show_banner()
    try:
        config = load_config()
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    tracker = StepTracker("Check Available Tools")
    tracker.add("git", "Git version control")

    bootstrap_tool = shlex.split(config.bootstrap_command)[0] if config.bootstrap_command.strip() else None
    if bootstrap_tool:
        tracker.add(bootstrap_tool, f"Bootstrap tool ({config.bootstrap_command})")

    git_ok = check_tool("git")
    (tracker.complete if git_ok else tracker.error)("git", "available" if git_ok else "not found")
    if bootstrap_tool:
        tool_ok = check_tool(bootstrap_tool)
        (tracker.complete if tool_ok else tracker.skip)(bootstrap_tool, "available" if tool_ok else "not found")

    console.print(tracker.render())

    if not git_ok:
        console.print("\n[red]git is required to clone templates.[/red]")
        raise typer.Exit(1)
    console.print("\n[bold green]Plate is ready to use![/bold green]")


def main():
    app()


if __name__ == "__main__":
    main()

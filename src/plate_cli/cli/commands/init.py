"""``plate init``: clone, copy and fill in a project template."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from plate_cli.cli.commands.init_help import INIT_COMMAND_DOC
from plate_cli.cli.helpers import configure_logging, resolve_policies, rewrite_detail, values_table
from plate_cli.cli.ui import StepTracker, ask_destination, ask_optional, ask_required, select_with_arrows
from plate_cli.config import PlateConfig, load_config
from plate_cli.core.git import check_tool, git_config_value, run_bootstrap
from plate_cli.errors import MissingValueError, PlateError, UnknownPlatformError
from plate_cli.rewriter import rewrite_tree
from plate_cli.substitution import SubstitutionSet, build_substitution_set
from plate_cli.template.manager import cloned_template, copy_template, resolve_platform_folder


def _resolve_platform(platform: str | None, config: PlateConfig, interactive: bool, console: Console) -> str:
    if platform is None:
        if not interactive:
            platform = config.default_platform
        else:
            options = {name: folder for name, folder in config.platforms.items()}
            platform = select_with_arrows(
                options,
                "Which platform is this project for?",
                default_key=config.canonical_platform(config.default_platform),
                console=console,
            )
    canonical = config.canonical_platform(platform)
    if canonical is None:
        raise UnknownPlatformError(platform, config.platforms)
    return canonical


def _resolve_destination(destination: str | None, interactive: bool, console: Console) -> Path:
    if destination is None:
        return ask_destination(console) if interactive else Path.cwd()
    path = Path(destination).expanduser()
    if not path.is_dir():
        console.print(f"[red]Error:[/red] Destination '{destination}' doesn't exist")
        raise typer.Exit(1)
    return path


def _resolve_project(project: str | None, destination: Path, interactive: bool) -> str:
    folder_name = destination.resolve().name
    if project is None and interactive:
        project = ask_optional(
            "What's the name of your project?",
            f"(Leave empty to use the name of the project folder: {folder_name})",
        )
    return project or folder_name


def _resolve_author(author: str | None, interactive: bool, console: Console) -> str:
    if author:
        return author
    git_name = git_config_value("user.name")
    if not interactive:
        if git_name is None:
            raise MissingValueError("AUTHOR")
        return git_name
    if git_name:
        return ask_optional("What's your name?", f"(Leave empty to use your git config name: {git_name})") or git_name
    return ask_required("What's your name?", "Your name cannot be empty", console)


def _summary_panel(platform: str, destination: Path, repository_url: str, values: SubstitutionSet) -> Panel:
    lines = [
        "[cyan]Plate Project Setup[/cyan]",
        "",
        f"{'Platform':<15} [green]{platform}[/green]",
        f"{'Destination':<15} [dim]{destination}[/dim]",
        f"{'Template':<15} [dim]{repository_url}[/dim]",
        f"{'Name':<15} [green]{values.project}[/green]",
        f"{'Author':<15} {values.author}",
        f"{'Organization':<15} {values.organization}",
    ]
    return Panel("\n".join(lines), border_style="cyan", padding=(1, 2))


def register_init_command(
    app: typer.Typer,
    *,
    console: Console,
    show_banner: Callable[[], None],
) -> None:
    """Attach the ``init`` command to ``app``."""

    @app.command("init", help=INIT_COMMAND_DOC)
    def init(
        destination: Optional[str] = typer.Argument(None, help="Existing folder to generate into (default: prompt, or current directory)"),
        platform: Optional[str] = typer.Option(None, "--platform", "-pl", help="Template platform (iOS, macOS, ...)"),
        project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name (default: destination folder name)"),
        author: Optional[str] = typer.Option(None, "--name", "-n", help="Author name (default: git config user.name)"),
        organization: Optional[str] = typer.Option(None, "--organization", "-o", help="Organization name (overrides config)"),
        bundle_id: Optional[str] = typer.Option(None, "--bundle-id", "-b", help="Bundle identifier prefix (overrides config)"),
        repo: Optional[str] = typer.Option(None, "--repo", "-r", help="Template repository URL (overrides config)"),
        force: bool = typer.Option(False, "--force", "-f", help="Skip the confirmation prompt"),
        non_interactive: bool = typer.Option(False, "--non-interactive", help="Never prompt; use options or defaults"),
        no_bootstrap: bool = typer.Option(False, "--no-bootstrap", help="Skip the dependency bootstrap command"),
        atomic: bool = typer.Option(False, "--atomic", help="Write each rewritten file to a temp file, then replace"),
        overwrite_collisions: bool = typer.Option(False, "--overwrite-collisions", help="Let the last entry win when two names collide"),
        debug: bool = typer.Option(False, "--debug", help="Show debug logging"),
    ) -> None:
        configure_logging(debug, console)
        show_banner()
        interactive = not non_interactive

        try:
            config = load_config()
            chosen_platform = _resolve_platform(platform, config, interactive, console)
            project_path = _resolve_destination(destination, interactive, console)
            project_name = _resolve_project(project, project_path, interactive)
            author_name = _resolve_author(author, interactive, console)
            values = build_substitution_set(
                project_name,
                author_name,
                config,
                organization=organization,
                bundle_id=bundle_id,
            )
        except PlateError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1)

        repository_url = repo or config.repository_url
        write_policy, collision_policy = resolve_policies(config, atomic, overwrite_collisions)

        console.print(_summary_panel(chosen_platform, project_path, repository_url, values))
        if debug:
            console.print(values_table(values))

        if interactive and not force and not typer.confirm("Proceed?"):
            console.print("[yellow]Operation cancelled[/yellow]")
            raise typer.Exit(0)

        tracker = StepTracker(f"Generate {values.project}")
        tracker.add("clone", "Clone template repository")
        tracker.add("copy", "Copy template folder")
        tracker.add("cleanup", "Remove temporary clone")
        tracker.add("fill", "Fill in template")
        tracker.add("bootstrap", "Bootstrap dependencies")

        failure: PlateError | None = None
        with Live(tracker.render(), console=console, refresh_per_second=8, transient=True) as live:
            tracker.attach_refresh(lambda: live.update(tracker.render()))
            try:
                tracker.start("clone", repository_url)
                with cloned_template(repository_url) as clone_path:
                    tracker.complete("clone")
                    tracker.start("copy")
                    source = resolve_platform_folder(clone_path, chosen_platform, config)
                    copied = copy_template(source, project_path, config.ignorable_items)
                    tracker.complete("copy", f"{source.name}, {len(copied)} item(s)")
                    tracker.start("cleanup")
                tracker.complete("cleanup")

                tracker.start("fill")
                result = rewrite_tree(
                    project_path,
                    values,
                    write_policy=write_policy,
                    collision_policy=collision_policy,
                )
                tracker.complete("fill", rewrite_detail(result))

                _bootstrap(tracker, config.bootstrap_command, project_path, no_bootstrap)
            except PlateError as exc:
                failure = exc
                if tracker.current:
                    tracker.error(tracker.current, type(exc).__name__)

        console.print(tracker.render())

        if failure is not None:
            console.print(f"\n[red]Error:[/red] {failure}")
            raise typer.Exit(1)

        console.print(f"\n[bold green]All done![/bold green] Good luck with {values.project}!")


def _bootstrap(tracker: StepTracker, command: str, project_path: Path, disabled: bool) -> None:
    if disabled or not command.strip():
        tracker.skip("bootstrap", "disabled")
        return
    tool = shlex.split(command)[0]
    if not check_tool(tool):
        tracker.skip("bootstrap", f"{tool} not found")
        return
    tracker.start("bootstrap", command)
    outcome = run_bootstrap(command, project_path)
    if outcome.ok:
        tracker.complete("bootstrap", command)
    else:
        lines = outcome.stderr.strip().splitlines()
        tracker.error("bootstrap", lines[-1] if lines else f"exit code {outcome.returncode}")


__all__ = ["register_init_command"]

"""Reusable UI helpers for plate CLI interactions."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

import readchar
import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

_STATUS_SYMBOLS = {
    "pending": "[green dim]○[/green dim]",
    "running": "[cyan]○[/cyan]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


class StepTracker:
    """Track generation steps and render them as a Rich tree."""

    def __init__(self, title: str):
        self.title = title
        self.steps: list[dict[str, str]] = []
        self._refresh_cb: Optional[Callable[[], None]] = None
        self.current: str | None = None

    def attach_refresh(self, cb: Callable[[], None]) -> None:
        self._refresh_cb = cb

    def add(self, key: str, label: str) -> None:
        if all(step["key"] != key for step in self.steps):
            self.steps.append({"key": key, "label": label, "status": "pending", "detail": ""})
            self._refresh()

    def start(self, key: str, detail: str = "") -> None:
        self.current = key
        self._update(key, "running", detail)

    def complete(self, key: str, detail: str = "") -> None:
        self._update(key, "done", detail)

    def error(self, key: str, detail: str = "") -> None:
        self._update(key, "error", detail)

    def skip(self, key: str, detail: str = "") -> None:
        self._update(key, "skipped", detail)

    def _update(self, key: str, status: str, detail: str) -> None:
        for step in self.steps:
            if step["key"] == key:
                step["status"] = status
                if detail:
                    step["detail"] = detail
                break
        else:
            self.steps.append({"key": key, "label": key, "status": status, "detail": detail})
        self._refresh()

    def _refresh(self) -> None:
        if self._refresh_cb:
            self._refresh_cb()

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            status = step["status"]
            symbol = _STATUS_SYMBOLS.get(status, " ")
            label = step["label"]
            detail = step["detail"].strip()
            if status == "pending":
                text = f"{label} ({detail})" if detail else label
                tree.add(f"{symbol} [bright_black]{text}[/bright_black]")
            elif detail:
                tree.add(f"{symbol} [white]{label}[/white] [bright_black]({detail})[/bright_black]")
            else:
                tree.add(f"{symbol} [white]{label}[/white]")
        return tree


def get_key() -> str:
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key in (readchar.key.UP, readchar.key.CTRL_P):
        return "up"
    if key in (readchar.key.DOWN, readchar.key.CTRL_N):
        return "down"
    if key == readchar.key.ENTER:
        return "enter"
    if key in (readchar.key.ESC, "\x1b"):
        return "escape"
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    return key


def select_with_arrows(
    options: Dict[str, str],
    prompt_text: str = "Select an option",
    default_key: str | None = None,
    console: Console | None = None,
) -> str:
    """Interactive selection using arrow keys with Rich Live display."""
    console = console or Console()
    option_keys = list(options)
    index = option_keys.index(default_key) if default_key in option_keys else 0

    def build_panel() -> Panel:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="left", width=3)
        table.add_column(style="white", justify="left")
        for i, key in enumerate(option_keys):
            pointer = "▶" if i == index else " "
            table.add_row(pointer, f"[cyan]{key}[/cyan] [dim]({options[key]})[/dim]")
        table.add_row("", "")
        table.add_row("", "[dim]Use ↑/↓ to navigate, Enter to select, Esc to cancel[/dim]")
        return Panel(table, title=f"[bold]{prompt_text}[/bold]", border_style="cyan", padding=(1, 2))

    console.print()
    with Live(build_panel(), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)
            if key == "up":
                index = (index - 1) % len(option_keys)
            elif key == "down":
                index = (index + 1) % len(option_keys)
            elif key == "enter":
                return option_keys[index]
            elif key == "escape":
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)
            live.update(build_panel(), refresh=True)


def ask_optional(question: str, hint: str = "You may leave this empty.") -> str | None:
    """Prompt once; an empty answer returns None."""
    answer = typer.prompt(f"{question} {hint}", default="", show_default=False)
    return answer.strip() or None


def ask_required(question: str, error_message: str, console: Console | None = None) -> str:
    """Prompt until a non-empty answer is given."""
    console = console or Console()
    while True:
        answer = typer.prompt(question, default="", show_default=False).strip()
        if answer:
            return answer
        console.print(f"[red]{error_message}. Try again.[/red]")


def ask_destination(console: Console | None = None) -> Path:
    """Prompt for an existing folder, defaulting to the current directory."""
    console = console or Console()
    while True:
        answer = ask_optional(
            "Where would you like to generate a project?",
            "(Leave empty to use current directory)",
        )
        if answer is None:
            return Path.cwd()
        path = Path(answer).expanduser()
        if path.is_dir():
            return path
        console.print("[red]That path doesn't exist. Try again.[/red]")


__all__ = [
    "StepTracker",
    "ask_destination",
    "ask_optional",
    "ask_required",
    "get_key",
    "select_with_arrows",
]

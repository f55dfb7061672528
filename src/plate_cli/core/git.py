"""Subprocess helpers for git and the dependency bootstrap tool."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from plate_cli.errors import TemplateFetchError

logger = logging.getLogger(__name__)

__all__ = [
    "CommandResult",
    "check_tool",
    "clone_repository",
    "git_config_value",
    "run_bootstrap",
]


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _run(cmd: list[str], cwd: Path | None = None, timeout: int | None = None) -> CommandResult:
    """Run a command and normalize failure shape."""
    logger.debug("Running %s", shlex.join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
    except FileNotFoundError:
        return CommandResult(returncode=127, stdout="", stderr=f"{cmd[0]} executable not found on PATH")
    except subprocess.TimeoutExpired:
        return CommandResult(returncode=124, stdout="", stderr=f"command timed out: {shlex.join(cmd)}")


def check_tool(tool: str) -> bool:
    """Check if a tool is installed."""
    return shutil.which(tool) is not None


def git_config_value(key: str) -> str | None:
    """Return a global git config value, or None when unset or git is missing."""
    result = _run(["git", "config", "--global", "--get", key], timeout=15)
    if not result.ok:
        return None
    return result.stdout.strip() or None


def clone_repository(repository_url: str, destination: Path) -> Path:
    """Shallow-clone ``repository_url`` into ``destination``.

    Raises:
        TemplateFetchError: If git is missing or the clone fails.
    """
    result = _run(["git", "clone", "--depth", "1", "-q", repository_url, str(destination)])
    if not result.ok:
        detail = result.stderr.strip().splitlines()
        reason = detail[-1] if detail else f"exit code {result.returncode}"
        raise TemplateFetchError(f"Could not clone {repository_url}: {reason}")
    return destination


def run_bootstrap(command: str, project_path: Path) -> CommandResult:
    """Run the dependency bootstrap command inside ``project_path``.

    Failures are returned, not raised; the generated project is kept either way.
    """
    cmd = shlex.split(command)
    if not cmd:
        return CommandResult(returncode=0, stdout="", stderr="")
    return _run(cmd, cwd=project_path)

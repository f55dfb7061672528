from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from plate_cli.core import git as git_module
from plate_cli.core.git import check_tool, clone_repository, git_config_value, run_bootstrap
from plate_cli.errors import TemplateFetchError


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


def test_git_config_value_strips_output() -> None:
    with patch.object(git_module.subprocess, "run", return_value=_completed(stdout="Jane Doe\n")) as run:
        assert git_config_value("user.name") == "Jane Doe"

    args = run.call_args.args[0]
    assert args == ["git", "config", "--global", "--get", "user.name"]


def test_git_config_value_missing_key_returns_none() -> None:
    with patch.object(git_module.subprocess, "run", return_value=_completed(returncode=1)):
        assert git_config_value("user.name") is None


def test_git_config_value_without_git_returns_none() -> None:
    with patch.object(git_module.subprocess, "run", side_effect=FileNotFoundError("git")):
        assert git_config_value("user.name") is None


def test_clone_repository_runs_shallow_quiet_clone(tmp_path: Path) -> None:
    destination = tmp_path / "clone"
    with patch.object(git_module.subprocess, "run", return_value=_completed()) as run:
        assert clone_repository("https://example.com/t.git", destination) == destination

    assert run.call_args.args[0] == [
        "git",
        "clone",
        "--depth",
        "1",
        "-q",
        "https://example.com/t.git",
        str(destination),
    ]


def test_clone_failure_raises_template_fetch_error(tmp_path: Path) -> None:
    failure = _completed(returncode=128, stderr="Cloning...\nfatal: repository not found\n")
    with patch.object(git_module.subprocess, "run", return_value=failure):
        with pytest.raises(TemplateFetchError, match="repository not found"):
            clone_repository("https://example.com/missing.git", tmp_path / "clone")


def test_clone_timeout_is_reported(tmp_path: Path) -> None:
    timeout = subprocess.TimeoutExpired(cmd="git", timeout=1)
    with patch.object(git_module.subprocess, "run", side_effect=timeout):
        with pytest.raises(TemplateFetchError, match="timed out"):
            clone_repository("https://example.com/slow.git", tmp_path / "clone")


def test_run_bootstrap_uses_project_as_cwd(tmp_path: Path) -> None:
    with patch.object(git_module.subprocess, "run", return_value=_completed()) as run:
        outcome = run_bootstrap("carthage update --platform iOS", tmp_path)

    assert outcome.ok
    assert run.call_args.args[0] == ["carthage", "update", "--platform", "iOS"]
    assert run.call_args.kwargs["cwd"] == str(tmp_path)


def test_run_bootstrap_returns_failure_instead_of_raising(tmp_path: Path) -> None:
    with patch.object(git_module.subprocess, "run", side_effect=FileNotFoundError("carthage")):
        outcome = run_bootstrap("carthage update", tmp_path)

    assert not outcome.ok
    assert outcome.returncode == 127


def test_empty_bootstrap_command_is_a_no_op(tmp_path: Path) -> None:
    with patch.object(git_module.subprocess, "run") as run:
        assert run_bootstrap("   ", tmp_path).ok
    run.assert_not_called()


def test_check_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda tool: "/usr/bin/git" if tool == "git" else None)

    assert check_tool("git") is True
    assert check_tool("carthage") is False


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_clone_repository_from_local_repo(tmp_path: Path) -> None:
    source = tmp_path / "source"
    (source / "iOSTemplate").mkdir(parents=True)
    (source / "iOSTemplate" / "{PROJECT}.swift").write_text("// {PROJECT}", encoding="utf-8")
    env = ["-c", "user.name=Plate", "-c", "user.email=plate@example.com"]
    subprocess.run(["git", "init", "-q"], cwd=source, check=True)
    subprocess.run(["git", "add", "."], cwd=source, check=True)
    subprocess.run(["git", *env, "commit", "-q", "-m", "template"], cwd=source, check=True)

    clone = clone_repository(source.as_uri(), tmp_path / "clone")

    assert (clone / "iOSTemplate" / "{PROJECT}.swift").read_text(encoding="utf-8") == "// {PROJECT}"

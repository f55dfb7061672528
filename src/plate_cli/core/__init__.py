"""Core utilities exports."""

from .git import CommandResult, check_tool, clone_repository, git_config_value, run_bootstrap

__all__ = [
    "CommandResult",
    "check_tool",
    "clone_repository",
    "git_config_value",
    "run_bootstrap",
]

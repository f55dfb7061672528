"""Plate configuration.

Configuration is read-only: defaults, overlaid by the ``[plate]`` table of
``<plate home>/config.toml``, overlaid by environment variables. CLI flags
are applied on top by the commands themselves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import toml  # type: ignore[import-untyped]

from .errors import ConfigError
from .rewriter import CollisionPolicy, WritePolicy

DEFAULT_ORGANIZATION_NAME = "Ramsey Solutions"
DEFAULT_BUNDLE_ID = "ramseysolutions"
DEFAULT_TEMPLATE_REPO = "https://github.com/lampo/SwiftPlate.git"
DEFAULT_PLATFORMS = {"iOS": "iOSTemplate", "macOS": "macOSTemplate"}
DEFAULT_PLATFORM = "iOS"
DEFAULT_BOOTSTRAP_COMMAND = "carthage update"
DEFAULT_IGNORABLE_ITEMS = ("readme.md", "license")

ENV_HOME = "PLATE_HOME"
ENV_ORGANIZATION = "PLATE_ORGANIZATION"
ENV_BUNDLE_ID = "PLATE_BUNDLE_ID"
ENV_TEMPLATE_REPO = "PLATE_TEMPLATE_REPO"


@dataclass(frozen=True)
class PlateConfig:
    """Values the CLI does not ask for, with their defaults.

    Attributes:
        organization_name: Fills ``{ORGANIZATION}``.
        bundle_id: Fills ``{BUNDLEID}``.
        repository_url: Template repository cloned by ``plate init``.
        platforms: Platform name -> template folder inside the repository.
        default_platform: Platform used when the prompt is left empty.
        bootstrap_command: Run in the destination after generation; empty
            disables it.
        ignorable_items: Lower-cased template items not copied when the
            destination already has them.
        write_policy: ``fast`` or ``atomic``.
        collision_policy: ``fail`` or ``overwrite``.
    """

    organization_name: str = DEFAULT_ORGANIZATION_NAME
    bundle_id: str = DEFAULT_BUNDLE_ID
    repository_url: str = DEFAULT_TEMPLATE_REPO
    platforms: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PLATFORMS))
    default_platform: str = DEFAULT_PLATFORM
    bootstrap_command: str = DEFAULT_BOOTSTRAP_COMMAND
    ignorable_items: tuple[str, ...] = DEFAULT_IGNORABLE_ITEMS
    write_policy: WritePolicy = WritePolicy.FAST
    collision_policy: CollisionPolicy = CollisionPolicy.FAIL

    def merged(self, data: Mapping[str, Any]) -> "PlateConfig":
        """Return a copy with the recognized keys of ``data`` applied."""
        updates: dict[str, Any] = {}

        for key in ("organization_name", "bundle_id", "repository_url", "default_platform"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                updates[key] = value.strip()

        command = data.get("bootstrap_command")
        if isinstance(command, str):
            updates["bootstrap_command"] = command.strip()

        platforms = data.get("platforms")
        if platforms is not None:
            if not isinstance(platforms, Mapping) or not platforms:
                raise ConfigError("'platforms' must be a non-empty table of name = folder")
            updates["platforms"] = {str(name): str(folder) for name, folder in platforms.items()}

        ignorable = data.get("ignorable_items")
        if ignorable is not None:
            if not isinstance(ignorable, (list, tuple)):
                raise ConfigError("'ignorable_items' must be a list of names")
            updates["ignorable_items"] = tuple(str(item).lower() for item in ignorable)

        try:
            if "write_policy" in data:
                updates["write_policy"] = WritePolicy(str(data["write_policy"]).lower())
            if "collision_policy" in data:
                updates["collision_policy"] = CollisionPolicy(str(data["collision_policy"]).lower())
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        return replace(self, **updates)

    def template_folder(self, platform: str) -> str | None:
        """Return the folder for ``platform`` (case-insensitive), if any."""
        for name, folder in self.platforms.items():
            if name.lower() == platform.strip().lower():
                return folder
        return None

    def canonical_platform(self, platform: str) -> str | None:
        for name in self.platforms:
            if name.lower() == platform.strip().lower():
                return name
        return None


def get_plate_home() -> Path:
    """Return the user-level plate directory.

    Resolution order:
    1. PLATE_HOME environment variable (all platforms)
    2. ~/.plate/ on macOS/Linux
    3. the platformdirs user config dir on Windows
    """
    if env_home := os.environ.get(ENV_HOME):
        return Path(env_home).expanduser()

    if os.name == "nt":
        from platformdirs import user_config_dir

        return Path(user_config_dir("plate"))

    return Path.home() / ".plate"


def config_path(home: Path | None = None) -> Path:
    return (home or get_plate_home()) / "config.toml"


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> PlateConfig:
    """Load configuration from defaults, the config file, and the environment.

    Raises:
        ConfigError: If the config file cannot be parsed or has invalid values.
    """
    path = path or config_path()
    environ = os.environ if environ is None else environ

    config = PlateConfig()
    if path.exists():
        try:
            payload: dict[str, Any] = toml.load(path)
        except (toml.TomlDecodeError, OSError) as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        section = payload.get("plate")
        if isinstance(section, dict):
            config = config.merged(section)

    env_overrides = {
        "organization_name": environ.get(ENV_ORGANIZATION),
        "bundle_id": environ.get(ENV_BUNDLE_ID),
        "repository_url": environ.get(ENV_TEMPLATE_REPO),
    }
    return config.merged({key: value for key, value in env_overrides.items() if value})


__all__ = [
    "DEFAULT_BOOTSTRAP_COMMAND",
    "DEFAULT_BUNDLE_ID",
    "DEFAULT_ORGANIZATION_NAME",
    "DEFAULT_PLATFORM",
    "DEFAULT_TEMPLATE_REPO",
    "PlateConfig",
    "config_path",
    "get_plate_home",
    "load_config",
]

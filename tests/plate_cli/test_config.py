from __future__ import annotations

from pathlib import Path

import pytest

from plate_cli.config import (
    DEFAULT_TEMPLATE_REPO,
    PlateConfig,
    config_path,
    get_plate_home,
    load_config,
)
from plate_cli.errors import ConfigError
from plate_cli.rewriter import CollisionPolicy, WritePolicy


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml", environ={})

    assert config == PlateConfig()
    assert config.organization_name == "Ramsey Solutions"
    assert config.bundle_id == "ramseysolutions"
    assert config.repository_url == DEFAULT_TEMPLATE_REPO
    assert config.platforms == {"iOS": "iOSTemplate", "macOS": "macOSTemplate"}
    assert config.write_policy is WritePolicy.FAST
    assert config.collision_policy is CollisionPolicy.FAIL


def test_config_file_overrides_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[plate]
organization_name = "Acme"
bundle_id = "com.acme"
default_platform = "macOS"
bootstrap_command = ""
ignorable_items = ["README.md", "LICENSE", "CHANGELOG.md"]
write_policy = "ATOMIC"
collision_policy = "overwrite"
unknown_key = "ignored"

[plate.platforms]
iOS = "ios"
tvOS = "tvos"
""",
        encoding="utf-8",
    )

    config = load_config(path, environ={})

    assert config.organization_name == "Acme"
    assert config.bundle_id == "com.acme"
    assert config.default_platform == "macOS"
    assert config.bootstrap_command == ""
    assert config.ignorable_items == ("readme.md", "license", "changelog.md")
    assert config.write_policy is WritePolicy.ATOMIC
    assert config.collision_policy is CollisionPolicy.OVERWRITE
    assert config.platforms == {"iOS": "ios", "tvOS": "tvos"}
    assert config.repository_url == DEFAULT_TEMPLATE_REPO


def test_environment_overrides_config_file(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[plate]\norganization_name = "Acme"\nbundle_id = "com.acme"\n', encoding="utf-8")

    config = load_config(
        path,
        environ={
            "PLATE_ORGANIZATION": "Globex",
            "PLATE_TEMPLATE_REPO": "https://example.com/templates.git",
            "PLATE_BUNDLE_ID": "",
        },
    )

    assert config.organization_name == "Globex"
    assert config.bundle_id == "com.acme"
    assert config.repository_url == "https://example.com/templates.git"


def test_malformed_file_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[plate\norganization_name = ", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(path, environ={})


@pytest.mark.parametrize(
    "body",
    [
        '[plate]\nwrite_policy = "sometimes"\n',
        '[plate]\ncollision_policy = "merge"\n',
        '[plate]\nignorable_items = "README.md"\n',
        "[plate]\nplatforms = {}\n",
    ],
)
def test_invalid_values_raise_config_error(tmp_path: Path, body: str) -> None:
    path = tmp_path / "config.toml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_platform_lookup_is_case_insensitive() -> None:
    config = PlateConfig()

    assert config.template_folder("ios") == "iOSTemplate"
    assert config.template_folder(" MACOS ") == "macOSTemplate"
    assert config.template_folder("android") is None
    assert config.canonical_platform("macos") == "macOS"


def test_plate_home_honours_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PLATE_HOME", str(tmp_path / "custom"))

    assert get_plate_home() == tmp_path / "custom"
    assert config_path() == tmp_path / "custom" / "config.toml"


def test_load_config_reads_plate_home_by_default(isolated_plate_home: Path) -> None:
    (isolated_plate_home / "config.toml").write_text('[plate]\nbundle_id = "io.example"\n', encoding="utf-8")

    assert load_config().bundle_id == "io.example"

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from plate_cli.config import PlateConfig
from plate_cli.substitution import SubstitutionSet, build_substitution_set

FIXED_DAY = date(2026, 10, 17)


@pytest.fixture(autouse=True)
def isolated_plate_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's ~/.plate/config.toml and PLATE_* variables out of tests."""
    home = tmp_path_factory.mktemp("plate_home")
    monkeypatch.setenv("PLATE_HOME", str(home))
    for name in ("PLATE_ORGANIZATION", "PLATE_BUNDLE_ID", "PLATE_TEMPLATE_REPO"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture()
def values() -> SubstitutionSet:
    return build_substitution_set(
        "Foo",
        "Jane",
        PlateConfig(organization_name="Acme", bundle_id="com.acme"),
        today=FIXED_DAY,
    )

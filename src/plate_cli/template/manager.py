"""Template discovery and copy helpers."""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from plate_cli.config import PlateConfig
from plate_cli.core.git import clone_repository
from plate_cli.errors import TemplateCopyError, TemplateFetchError, UnknownPlatformError

logger = logging.getLogger(__name__)

CLONE_DIR_NAME = "template"


@contextmanager
def cloned_template(repository_url: str) -> Iterator[Path]:
    """Clone the template repository into a temporary folder.

    The folder and everything in it is removed when the context exits,
    including on failure.
    """
    with tempfile.TemporaryDirectory(prefix="plate_") as temp_dir:
        clone_path = Path(temp_dir) / CLONE_DIR_NAME
        clone_repository(repository_url, clone_path)
        yield clone_path


def resolve_platform_folder(clone_path: Path, platform: str, config: PlateConfig) -> Path:
    """Return the template folder for ``platform`` inside a cloned repository.

    Raises:
        UnknownPlatformError: If ``platform`` is not configured.
        TemplateFetchError: If the repository has no such folder.
    """
    folder_name = config.template_folder(platform)
    if folder_name is None:
        raise UnknownPlatformError(platform, config.platforms)
    folder = clone_path / folder_name
    if not folder.is_dir():
        raise TemplateFetchError(f"Template repository has no '{folder_name}' folder")
    return folder


def copy_template(source: Path, destination: Path, ignorable: Iterable[str] = ()) -> list[Path]:
    """Copy each top-level item of ``source`` into ``destination``.

    Items whose lower-cased name is in ``ignorable`` are skipped when the
    destination already has an item by that name (compared case-insensitively),
    so an existing README or LICENSE is kept.

    Returns:
        Destination paths that were copied.

    Raises:
        TemplateCopyError: If an item clashes with an existing entry of the
            other kind (file vs folder) or the copy itself fails.
    """
    ignorable_names = {name.lower() for name in ignorable}
    existing = {item.name.lower() for item in destination.iterdir()}
    kept = ignorable_names & existing

    copied: list[Path] = []
    for item in sorted(source.iterdir()):
        if item.name.lower() in kept:
            logger.debug("Keeping existing %s", item.name)
            continue
        target = destination / item.name
        item_is_dir = _is_real_dir(item)
        if (target.exists() or target.is_symlink()) and _is_real_dir(target) != item_is_dir:
            existing_kind = "folder" if _is_real_dir(target) else "file"
            raise TemplateCopyError(target, f"destination already has a {existing_kind} with that name")
        try:
            if item_is_dir:
                shutil.copytree(item, target, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(item, target, follow_symlinks=False)
        except (OSError, shutil.Error) as exc:
            raise TemplateCopyError(target, str(exc)) from exc
        copied.append(target)
    return copied


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


__all__ = [
    "cloned_template",
    "copy_template",
    "resolve_platform_folder",
]

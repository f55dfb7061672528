"""Recursive template tree rewriter.

Walks a folder depth-first, renaming files and folders and rewriting file
contents with :func:`plate_cli.substitution.substitute`. Folders are
processed before they are renamed so children are always reached through
their original path.

The walk aborts on the first error and does not roll back: anything
processed before the failure stays rewritten.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import (
    PathNotFoundError,
    PermissionDeniedError,
    ReadFailureError,
    RenameCollisionError,
    TemplateEncodingError,
    WriteFailureError,
)
from .substitution import Token, substitute

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."
_ENGINE_SOURCE = Path(__file__).resolve()


class WritePolicy(str, Enum):
    """How rewritten file contents reach disk."""

    FAST = "fast"
    ATOMIC = "atomic"


class CollisionPolicy(str, Enum):
    """What to do when two entries resolve to the same name."""

    FAIL = "fail"
    OVERWRITE = "overwrite"


@dataclass
class RewriteResult:
    """Summary of a completed rewrite."""

    root: Path
    rewritten: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    renamed: list[tuple[Path, Path]] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.rewritten) + len(self.unchanged)


def rewrite_tree(
    root: Path | str,
    values: Mapping[Token, str],
    *,
    write_policy: WritePolicy | str = WritePolicy.FAST,
    collision_policy: CollisionPolicy | str = CollisionPolicy.FAIL,
    exclude: Iterable[str] = (),
) -> RewriteResult:
    """Rewrite names and contents of every entry below ``root`` in place.

    Args:
        root: Existing folder to rewrite. The folder itself is not renamed.
        values: Resolved token values.
        write_policy: ``fast`` writes straight to the target path, ``atomic``
            writes a temporary file and replaces the target with it.
        collision_policy: ``fail`` raises before touching a folder whose
            entries would collide, ``overwrite`` lets the last writer win.
        exclude: Entry names to skip at every level, in addition to hidden
            entries and symbolic links.

    Returns:
        RewriteResult listing what was rewritten and renamed.

    Raises:
        PathNotFoundError, PermissionDeniedError, ReadFailureError, TemplateEncodingError,
        WriteFailureError, RenameCollisionError: On the first failure.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise PathNotFoundError(root_path)

    walker = _TreeRewriter(
        values,
        write_policy=WritePolicy(write_policy),
        collision_policy=CollisionPolicy(collision_policy),
        exclude=frozenset(exclude),
    )
    result = RewriteResult(root=root_path)
    walker.rewrite_folder(root_path, result)
    logger.debug(
        "Rewrote %d file(s), renamed %d entries under %s",
        len(result.rewritten),
        len(result.renamed),
        root_path,
    )
    return result


class _TreeRewriter:
    def __init__(
        self,
        values: Mapping[Token, str],
        *,
        write_policy: WritePolicy,
        collision_policy: CollisionPolicy,
        exclude: frozenset[str],
    ):
        self.values = values
        self.write_policy = write_policy
        self.collision_policy = collision_policy
        self.exclude = exclude

    def should_skip(self, entry: Path) -> bool:
        if entry.name.startswith(HIDDEN_PREFIX) or entry.name in self.exclude:
            return True
        if entry.is_symlink():
            return True
        # FIFOs, sockets and device nodes would block or fail on open().
        if not (entry.is_file() or entry.is_dir()):
            return True
        return entry.resolve() == _ENGINE_SOURCE

    def rewrite_folder(self, folder: Path, result: RewriteResult) -> None:
        names = _list_folder(folder)
        plan: list[tuple[Path, Path]] = []
        for name in names:
            entry = folder / name
            if self.should_skip(entry):
                logger.debug("Skipping %s", entry)
                result.skipped.append(entry)
                continue
            plan.append((entry, folder / substitute(name, self.values)))

        if self.collision_policy is CollisionPolicy.FAIL:
            _check_collisions(folder, names, plan)

        for entry, target in plan:
            if entry.is_dir():
                self.rewrite_folder(entry, result)
                if target != entry:
                    self.move_folder(entry, target)
                    result.renamed.append((entry, target))
            else:
                self.rewrite_file(entry, target, result)

    def rewrite_file(self, source: Path, target: Path, result: RewriteResult) -> None:
        content = _read_text(source)
        new_content = substitute(content, self.values)

        if target == source and new_content == content:
            result.unchanged.append(source)
            return

        if self.write_policy is WritePolicy.ATOMIC:
            _write_atomic(target, new_content, mode_from=source)
        else:
            _write_fast(target, new_content, mode_from=source)

        if target != source:
            _remove(source)
            result.renamed.append((source, target))
            logger.debug("Renamed %s -> %s", source, target.name)
        result.rewritten.append(target)
        logger.debug("Rewrote %s", target)

    def move_folder(self, source: Path, target: Path) -> None:
        try:
            if target.is_dir() and not target.is_symlink():
                # Only reachable with CollisionPolicy.OVERWRITE.
                shutil.rmtree(target)
            os.rename(source, target)
        except FileNotFoundError as exc:
            raise PathNotFoundError(source) from exc
        except PermissionError as exc:
            raise PermissionDeniedError(source) from exc
        except OSError as exc:
            raise WriteFailureError(target, exc.strerror or str(exc)) from exc
        logger.debug("Renamed %s -> %s", source, target.name)


def _check_collisions(folder: Path, names: list[str], plan: list[tuple[Path, Path]]) -> None:
    targets = Counter(target.name for _, target in plan)
    colliding = {name for name, count in targets.items() if count > 1}
    existing = set(names)
    for entry, target in plan:
        if target != entry and target.name in existing:
            colliding.add(target.name)
    if colliding:
        raise RenameCollisionError(folder, colliding)


def _list_folder(folder: Path) -> list[str]:
    try:
        return sorted(os.listdir(folder))
    except FileNotFoundError as exc:
        raise PathNotFoundError(folder) from exc
    except PermissionError as exc:
        raise PermissionDeniedError(folder) from exc


def _read_text(path: Path) -> str:
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise TemplateEncodingError(path) from exc
    except FileNotFoundError as exc:
        raise PathNotFoundError(path) from exc
    except PermissionError as exc:
        raise PermissionDeniedError(path) from exc
    except OSError as exc:
        raise ReadFailureError(path, exc.strerror or str(exc)) from exc


def _write_fast(target: Path, content: str, mode_from: Path) -> None:
    try:
        with open(target, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        if target != mode_from:
            shutil.copymode(mode_from, target)
    except PermissionError as exc:
        raise PermissionDeniedError(target) from exc
    except OSError as exc:
        raise WriteFailureError(target, exc.strerror or str(exc)) from exc


def _write_atomic(target: Path, content: str, mode_from: Path) -> None:
    # Temp file lives beside the target so os.replace stays on one filesystem.
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
        )
    except PermissionError as exc:
        raise PermissionDeniedError(target.parent) from exc
    except OSError as exc:
        raise WriteFailureError(target, exc.strerror or str(exc)) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        shutil.copymode(mode_from, tmp_path)
        os.replace(tmp_path, target)
    except OSError as exc:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        if isinstance(exc, PermissionError):
            raise PermissionDeniedError(target) from exc
        raise WriteFailureError(target, exc.strerror or str(exc)) from exc


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError as exc:
        raise PathNotFoundError(path) from exc
    except PermissionError as exc:
        raise PermissionDeniedError(path) from exc
    except OSError as exc:
        raise WriteFailureError(path, exc.strerror or str(exc)) from exc


__all__ = [
    "CollisionPolicy",
    "HIDDEN_PREFIX",
    "RewriteResult",
    "WritePolicy",
    "rewrite_tree",
]

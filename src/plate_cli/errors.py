"""Exception hierarchy for plate."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class PlateError(Exception):
    """Base exception for plate errors."""
    pass


class RewriteError(PlateError):
    """Base exception for failures raised while rewriting a template tree.

    The walk is aborted on the first error; entries processed before the
    failure are left renamed/rewritten.
    """

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class PathNotFoundError(RewriteError):
    """A path disappeared or never existed."""

    def __init__(self, path: Path | str):
        super().__init__(path, "Path not found")


class PermissionDeniedError(RewriteError):
    """The process may not read, write, or rename a path."""

    def __init__(self, path: Path | str):
        super().__init__(path, "Permission denied")


class TemplateEncodingError(RewriteError):
    """File content is not valid UTF-8 text."""

    def __init__(self, path: Path | str):
        super().__init__(path, "File is not valid UTF-8 text")


class WriteFailureError(RewriteError):
    """Writing, renaming, or deleting a path failed."""

    def __init__(self, path: Path | str, reason: str = ""):
        self.reason = reason
        message = f"Write failed ({reason})" if reason else "Write failed"
        super().__init__(path, message)


class ReadFailureError(RewriteError):
    """Reading a file failed for a reason other than a missing path or permissions."""

    def __init__(self, path: Path | str, reason: str = ""):
        self.reason = reason
        message = f"Read failed ({reason})" if reason else "Read failed"
        super().__init__(path, message)


class RenameCollisionError(RewriteError):
    """Two entries of one folder resolve to the same name."""

    def __init__(self, folder: Path | str, names: Iterable[str]):
        self.names = sorted(names)
        super().__init__(folder, f"Rename collision on {', '.join(self.names)} in")


class MissingValueError(PlateError):
    """A required substitution value is empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing value for {field}")


class ConfigError(PlateError):
    """Raised when plate configuration is invalid."""


class TemplateFetchError(PlateError):
    """The template repository could not be cloned or is missing a folder."""


class TemplateCopyError(PlateError):
    """A template item could not be copied into the destination."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not copy {self.path.name}: {reason}")


class UnknownPlatformError(PlateError):
    """The requested platform has no template folder configured."""

    def __init__(self, platform: str, known: Iterable[str]):
        self.platform = platform
        self.known = list(known)
        super().__init__(
            f"Unknown platform '{platform}'. Expected one of: {', '.join(self.known)}"
        )


__all__ = [
    "ConfigError",
    "MissingValueError",
    "PathNotFoundError",
    "PermissionDeniedError",
    "PlateError",
    "ReadFailureError",
    "RenameCollisionError",
    "RewriteError",
    "TemplateCopyError",
    "TemplateEncodingError",
    "TemplateFetchError",
    "UnknownPlatformError",
    "WriteFailureError",
]

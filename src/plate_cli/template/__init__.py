"""Template management for plate."""

from .manager import (
    cloned_template,
    copy_template,
    resolve_platform_folder,
)

__all__ = [
    "cloned_template",
    "copy_template",
    "resolve_platform_folder",
]

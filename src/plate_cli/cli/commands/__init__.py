"""CLI command modules for plate."""

from .init import register_init_command
from .render import register_render_command

__all__ = ["register_init_command", "register_render_command"]

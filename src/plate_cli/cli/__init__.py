"""CLI helpers exposed for other modules."""

from .ui import StepTracker, ask_destination, ask_optional, ask_required, select_with_arrows

__all__ = ["StepTracker", "ask_destination", "ask_optional", "ask_required", "select_with_arrows"]

"""Models package re-exports.

Allows `from src.core.models import PromiseState` imports by re-exporting
from the implementation module.
"""

from __future__ import annotations

from .models import PromiseOutcome, PromiseState

__all__ = ["PromiseOutcome", "PromiseState"]

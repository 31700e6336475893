"""src.core package (lightweight).

This file intentionally avoids importing submodules at package import time.
Import submodules explicitly where needed, e.g. ``from src.core.conc import Promise``.
"""

from __future__ import annotations

__all__ = []

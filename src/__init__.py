"""Top-level src package.

The public API lives in ``src.core.conc``; configuration in ``src.core.config``.
"""

from __future__ import annotations

__all__: list[str] = []

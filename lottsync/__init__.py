"""lottsync: fetch TheLott draw results and store them as canonical documents."""

from __future__ import annotations

__version__ = "0.1.0"

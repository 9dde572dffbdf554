from __future__ import annotations

"""Agent exports for dotted-path loading by the simulation runner."""

from .random_agent import RandomAgent

__all__ = [
    "RandomAgent",
]

"""Ambient application concerns shared by botwire and its callers.

This package is framework-agnostic. It must NEVER import from ``botwire/``.
"""

from core.logger import BotwireLogger

__all__ = [
    "BotwireLogger",
]

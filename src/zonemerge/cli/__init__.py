"""CLI module for zonemerge.

Provides the command-line interface for converging saved map documents,
inspecting their search area and picking zoom levels.
"""

from __future__ import annotations

from zonemerge.cli.main import app

__all__ = ["app"]

"""Route Tracker: location tracking sessions that turn raw fixes into a route."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("route-tracker")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"

__all__ = ["__version__"]

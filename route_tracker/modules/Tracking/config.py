"""Typed configuration for the Tracking module."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from route_tracker.core.logging_utils import get_module_logger
from route_tracker.modules.base import (
    ConfigLoader,
    get_pref_bool,
    get_pref_choice,
    get_pref_float,
    get_pref_int,
    get_pref_str,
)
from .tracking_core.constants import (
    DEFAULT_ANIMATION_DURATION_MS,
    DEFAULT_BAUD_RATE,
    DEFAULT_CENTER_LAT,
    DEFAULT_CENTER_LON,
    DEFAULT_DISTANCE_FILTER_M,
    DEFAULT_FASTEST_INTERVAL_MS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_MIN_DISTANCE_M,
    DEFAULT_POLYLINE_MIN_POINTS,
    DEFAULT_READ_ONCE_TIMEOUT_S,
    DEFAULT_SERIAL_PORT,
    DEFAULT_ZOOM_DELTA,
)
from .tracking_core.types import AccuracyTier, Coordinate, ProviderConfig, ZoomSpan

logger = get_module_logger("TrackingConfig")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.txt"

RUNTIME_PERMISSION_CHOICES = ("auto", "true", "false", "yes", "no", "on", "off", "1", "0")


@dataclass(slots=True)
class TrackingConfig:
    """Typed configuration for tracking sessions."""

    display_name: str = "Tracking"

    # Route filter
    min_distance_m: float = DEFAULT_MIN_DISTANCE_M
    clear_route_on_start: bool = False

    # Marker animation
    animation_duration_ms: float = float(DEFAULT_ANIMATION_DURATION_MS)

    # Viewport
    zoom_delta: float = DEFAULT_ZOOM_DELTA
    polyline_min_points: int = DEFAULT_POLYLINE_MIN_POINTS
    center_lat: float = DEFAULT_CENTER_LAT
    center_lon: float = DEFAULT_CENTER_LON

    # Permissions: "auto" detects from the platform, otherwise true/false
    runtime_permissions: str = "auto"

    # Provider request
    accuracy: str = AccuracyTier.HIGH.value
    distance_filter_m: float = DEFAULT_DISTANCE_FILTER_M
    interval_ms: int = DEFAULT_INTERVAL_MS
    fastest_interval_ms: int = DEFAULT_FASTEST_INTERVAL_MS
    read_once_timeout_s: float = DEFAULT_READ_ONCE_TIMEOUT_S

    # NMEA serial receiver
    serial_port: str = DEFAULT_SERIAL_PORT
    baud_rate: int = DEFAULT_BAUD_RATE

    log_level: str = "info"

    @classmethod
    def from_preferences(
        cls,
        prefs: Mapping[str, Any],
        args: Any = None,
        *,
        base: Optional["TrackingConfig"] = None,
    ) -> "TrackingConfig":
        """Build config from a key/value mapping with optional CLI overrides.

        Missing or rejected values fall back to ``base`` (class defaults when
        not given).
        """
        defaults = base if base is not None else cls()

        config = cls(
            display_name=get_pref_str(prefs, "display_name", defaults.display_name),
            min_distance_m=get_pref_float(prefs, "min_distance_m", defaults.min_distance_m, minimum=0.0),
            clear_route_on_start=get_pref_bool(prefs, "clear_route_on_start", defaults.clear_route_on_start),
            animation_duration_ms=get_pref_float(prefs, "animation_duration_ms", defaults.animation_duration_ms, minimum=0.0),
            zoom_delta=get_pref_float(prefs, "zoom_delta", defaults.zoom_delta, minimum=0.0),
            polyline_min_points=get_pref_int(prefs, "polyline_min_points", defaults.polyline_min_points, minimum=0),
            center_lat=get_pref_float(prefs, "center_lat", defaults.center_lat),
            center_lon=get_pref_float(prefs, "center_lon", defaults.center_lon),
            runtime_permissions=get_pref_choice(
                prefs, "runtime_permissions", RUNTIME_PERMISSION_CHOICES, defaults.runtime_permissions
            ),
            accuracy=get_pref_choice(
                prefs, "accuracy", [tier.value for tier in AccuracyTier], defaults.accuracy
            ),
            distance_filter_m=get_pref_float(prefs, "distance_filter_m", defaults.distance_filter_m, minimum=0.0),
            interval_ms=get_pref_int(prefs, "interval_ms", defaults.interval_ms, minimum=0),
            fastest_interval_ms=get_pref_int(prefs, "fastest_interval_ms", defaults.fastest_interval_ms, minimum=0),
            read_once_timeout_s=get_pref_float(prefs, "read_once_timeout_s", defaults.read_once_timeout_s, minimum=0.0),
            serial_port=get_pref_str(prefs, "serial_port", defaults.serial_port),
            baud_rate=get_pref_int(prefs, "baud_rate", defaults.baud_rate, minimum=1),
            log_level=get_pref_str(prefs, "log_level", defaults.log_level),
        )

        if args is not None:
            config = config._apply_args_override(args)

        return config

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None, args: Any = None) -> "TrackingConfig":
        """Load ``config.txt`` (module default location unless given)."""
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        values = ConfigLoader.load(path, defaults=DEFAULTS, strict=True)
        return cls.from_preferences(values, args)

    @classmethod
    async def from_file_async(cls, config_path: Optional[Path] = None, args: Any = None) -> "TrackingConfig":
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        values = await ConfigLoader.load_async(path, defaults=DEFAULTS, strict=True)
        return cls.from_preferences(values, args)

    def _apply_args_override(self, args: Any) -> "TrackingConfig":
        """Apply CLI argument overrides, validated like file values."""
        overrides = {}
        for name in asdict(self):
            val = getattr(args, name, None)
            if val is not None:
                overrides[name] = val
        return TrackingConfig.from_preferences(overrides, base=self)

    # ------------------------------------------------------------------
    # Derived values

    def provider_config(self) -> ProviderConfig:
        try:
            accuracy = AccuracyTier(self.accuracy.strip().lower())
        except ValueError:
            logger.warning("Unknown accuracy tier '%s', using high", self.accuracy)
            accuracy = AccuracyTier.HIGH
        return ProviderConfig(
            accuracy=accuracy,
            distance_filter_m=max(0.0, self.distance_filter_m),
            interval_ms=self.interval_ms,
            fastest_interval_ms=self.fastest_interval_ms,
        )

    def zoom_span(self) -> ZoomSpan:
        return ZoomSpan(self.zoom_delta, self.zoom_delta)

    def default_center(self) -> Coordinate:
        return Coordinate(self.center_lat, self.center_lon)

    def runtime_permissions_override(self) -> Optional[bool]:
        """None for auto-detection, otherwise the configured boolean."""
        value = str(self.runtime_permissions).strip().lower()
        if value in {"true", "1", "yes", "on"}:
            return True
        if value in {"false", "0", "no", "off"}:
            return False
        return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULTS: Dict[str, Any] = {f.name: f.default for f in fields(TrackingConfig)}


__all__ = ["TrackingConfig", "DEFAULTS", "DEFAULT_CONFIG_PATH"]

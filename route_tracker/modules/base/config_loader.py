from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import aiofiles

from route_tracker.core.logging_utils import get_module_logger

logger = get_module_logger(__name__)


class ConfigLoader:
    """Loader for ``key = value`` module config files.

    Blank lines and ``#`` comments are ignored, values may carry a trailing
    comment. When defaults are supplied, values are coerced to the type of the
    matching default.
    """

    @staticmethod
    async def load_async(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        """Async version of load() reading the file through aiofiles."""
        config_path = Path(config_path)
        if not config_path.exists():
            return ConfigLoader._missing(config_path, defaults)

        try:
            async with aiofiles.open(config_path, 'r', encoding='utf-8') as f:
                lines = await f.readlines()
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_path, e)
            return dict(defaults or {})

        return ConfigLoader.parse_lines(lines, defaults, strict, source=config_path)

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        config_path = Path(config_path)
        if not config_path.exists():
            return ConfigLoader._missing(config_path, defaults)

        logger.debug("Loading config from: %s", config_path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_path, e)
            return dict(defaults or {})

        return ConfigLoader.parse_lines(lines, defaults, strict, source=config_path)

    @staticmethod
    def parse_lines(
        lines: Iterable[str],
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False,
        source: Any = "<memory>",
    ) -> Dict[str, Any]:
        config = dict(defaults or {})

        for line_num, line in enumerate(lines, 1):
            line = line.strip()

            if not line or line.startswith('#'):
                continue

            if '=' not in line:
                logger.warning(
                    "Invalid config line %d (missing '='): %s",
                    line_num, line
                )
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()

            if '#' in value:
                value = value.split('#', 1)[0].strip()

            if strict and defaults is not None and key not in defaults:
                logger.warning(
                    "Unknown config key '%s' (line %d) - ignored in strict mode",
                    key, line_num
                )
                continue

            if defaults and key in defaults:
                config[key] = ConfigLoader._parse_value_with_type(
                    value, type(defaults[key]), defaults[key]
                )
            else:
                config[key] = ConfigLoader._parse_value(value)

        logger.info("Loaded config from %s (%d values)", source, len(config))
        return config

    @staticmethod
    def _missing(config_path: Path, defaults: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if defaults:
            logger.debug("Config file not found at %s, using defaults", config_path)
        else:
            logger.warning("Config file not found at %s and no defaults provided", config_path)
        return dict(defaults or {})

    @staticmethod
    def _parse_value(value: str) -> Any:
        value_lower = value.lower()
        if value_lower in ('true', 'false', 'yes', 'no', 'on', 'off'):
            return value_lower in ('true', 'yes', 'on')

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type, fallback: Any = None) -> Any:
        if target_type == bool:
            return value.lower() in ('true', 'yes', 'on', '1')

        if target_type is int:
            try:
                return int(value, 0)
            except ValueError:
                logger.warning("Failed to parse '%s' as int, using default", value)
                return fallback if fallback is not None else 0

        if target_type is float:
            try:
                return float(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as float, using default", value)
                return fallback if fallback is not None else 0.0

        return value


__all__ = ["ConfigLoader"]

"""Permission gate for location access."""

from __future__ import annotations

from typing import Any, Optional

from route_tracker.core.logging_utils import get_module_logger
from route_tracker.core.platform_info import get_platform_info
from .constants import (
    LOCATION_CAPABILITY,
    PROMPT_ALLOW_MESSAGE,
    PROMPT_ALLOW_TITLE,
    PROMPT_ENABLE_MESSAGE,
    PROMPT_ENABLE_TITLE,
)
from .interfaces import LoggingPrompter, PermissionSubsystem, RemediationPrompter
from .types import ErrorKind, PermissionResult

logger = get_module_logger(__name__)

_PROMPTS = {
    ErrorKind.PERMISSION_DENIED: (PROMPT_ALLOW_TITLE, PROMPT_ALLOW_MESSAGE),
    ErrorKind.SERVICE_DISABLED: (PROMPT_ENABLE_TITLE, PROMPT_ENABLE_MESSAGE),
}


def _coerce_result(raw: Any) -> PermissionResult:
    if isinstance(raw, PermissionResult):
        return raw
    if isinstance(raw, bool):
        return PermissionResult.GRANTED if raw else PermissionResult.DENIED
    if isinstance(raw, str) and raw.strip().lower() == PermissionResult.GRANTED.value:
        return PermissionResult.GRANTED
    return PermissionResult.DENIED


class PermissionGate:
    """Asks the platform for location access and offers remediation.

    A single request is made per call; retrying is left to the user through
    the settings prompt.
    """

    def __init__(
        self,
        subsystem: Optional[PermissionSubsystem] = None,
        prompter: Optional[RemediationPrompter] = None,
        *,
        runtime_permissions: Optional[bool] = None,
        capability: str = LOCATION_CAPABILITY,
    ):
        """Initialize the gate.

        Args:
            subsystem: Platform permission API; required when runtime
                permissions apply
            prompter: Dialog used for remediation prompts
            runtime_permissions: Whether the platform gates location access at
                run time; None detects it from the platform
            capability: Capability name passed to the subsystem
        """
        if runtime_permissions is None:
            runtime_permissions = get_platform_info().has_runtime_permissions
        self.runtime_permissions = runtime_permissions
        self.capability = capability
        self._subsystem = subsystem
        self._prompter = prompter or LoggingPrompter()

    async def request_access(self) -> PermissionResult:
        """Resolve to GRANTED or DENIED. Never raises."""
        if not self.runtime_permissions:
            return PermissionResult.GRANTED

        if self._subsystem is None:
            logger.warning("No permission subsystem configured; treating %s as denied",
                           self.capability)
            return PermissionResult.DENIED

        try:
            raw = await self._subsystem.request(self.capability)
        except Exception as exc:
            logger.warning("Permission request for %s failed: %s", self.capability, exc)
            return PermissionResult.DENIED

        result = _coerce_result(raw)
        logger.info("Permission %s: %s", self.capability, result.value)
        return result

    def prompt_remediation(self, kind: ErrorKind) -> None:
        """Offer to open the system settings for a permission or service problem."""
        title, message = _PROMPTS.get(kind, _PROMPTS[ErrorKind.PERMISSION_DENIED])
        try:
            self._prompter.show_settings_prompt(title, message, self.open_system_settings)
        except Exception as exc:
            logger.warning("Could not show settings prompt: %s", exc)

    def open_system_settings(self) -> None:
        if self._subsystem is None:
            logger.debug("No permission subsystem; cannot open system settings")
            return
        try:
            self._subsystem.open_system_settings()
        except Exception as exc:
            logger.warning("Opening system settings failed: %s", exc)


__all__ = ["PermissionGate"]

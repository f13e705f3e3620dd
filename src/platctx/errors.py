# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Platctx Error Classes.

All custom exceptions raised by the platform facade, with the exit codes
the ``platctx`` command reports for them.
"""

from __future__ import annotations

import enum
from typing import Sequence


class ExitCode(enum.IntEnum):
    """Exit codes reported by the platctx command."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    CONFIG_ERROR = 2
    RESOLUTION_ERROR = 3


class PlatformError(Exception):
    """Base exception for all platctx errors."""

    exit_code: int = ExitCode.GENERIC_ERROR

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class ConfigError(PlatformError):
    """Error loading a property file."""

    exit_code: int = ExitCode.CONFIG_ERROR

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: str | None = None,
    ) -> None:
        self.file_path = file_path
        location = f" in {file_path}" if file_path else ""
        super().__init__(f"Config error{location}: {message}", details)


class ResolutionError(PlatformError):
    """
    A platform value could not be resolved.

    These are environment/configuration errors, never transient: the only
    way forward is to supply an explicit override before the next call.
    """

    exit_code: int = ExitCode.RESOLUTION_ERROR

    def __init__(self, message: str, properties: Sequence[str] = ()) -> None:
        self.properties = tuple(properties)
        details = None
        if self.properties:
            details = "consulted " + ", ".join(self.properties)
        super().__init__(message, details)


class MissingIdentityError(ResolutionError):
    """The current user resolved to a blank value."""

    def __init__(self, properties: Sequence[str] = ()) -> None:
        super().__init__("No username available", properties)


class MissingVersionError(ResolutionError):
    """No runtime version value is configured."""

    def __init__(self, properties: Sequence[str] = ()) -> None:
        super().__init__("No configured runtime version value", properties)


class UnparsableVersionError(ResolutionError, ValueError):
    """A version string yielded no numeric components."""

    def __init__(self, value: str, properties: Sequence[str] = ()) -> None:
        self.value = value
        super().__init__(f"No version parsed for {value!r}", properties)

# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Platctx: platform conventions behind one facade.

Answers "what platform am I running on, and what are its conventions?"
(OS family, current user, runtime version, default interactive shell and
working directory) so callers adapt without sniffing the OS themselves.

Features:
    - Lazy, per-fact caching with explicit overrides
    - ``platctx.*`` override properties via YAML or ``PLATCTX_*`` variables
    - Windows domain/group stripping for user and group names
    - Isolated PlatformContext instances for tests

The functions below delegate to the process-wide default context.
"""

from __future__ import annotations

import pathlib
from typing import List, Optional, Union

from platctx.context import PlatformContext, get_context, set_context
from platctx.errors import (
    ConfigError,
    MissingIdentityError,
    MissingVersionError,
    PlatformError,
    ResolutionError,
    UnparsableVersionError,
)
from platctx.paths import WorkingDirectorySource
from platctx.properties import PropertyTable
from platctx.release import __author__, __codename__, __version__
from platctx.version import VersionInfo


def is_windows() -> bool:
    return get_context().is_windows()


def is_macos() -> bool:
    return get_context().is_macos()


def is_unix_like() -> bool:
    return get_context().is_unix_like()


def is_constrained_runtime() -> bool:
    return get_context().is_constrained_runtime()


def set_constrained_runtime(value: Optional[bool]) -> None:
    get_context().set_constrained_runtime(value)


def is_alternate_vm() -> bool:
    return get_context().is_alternate_vm()


def set_alternate_vm(value: Optional[bool]) -> None:
    get_context().set_alternate_vm(value)


def get_os_type() -> str:
    return get_context().get_os_type()


def set_os_type(value: Optional[str]) -> None:
    get_context().set_os_type(value)


def get_current_user() -> str:
    return get_context().get_current_user()


def get_canonical_user(user: Optional[str]) -> Optional[str]:
    return get_context().get_canonical_user(user)


def resolve_canonical_group(group: Optional[str], user: Optional[str]) -> Optional[str]:
    return get_context().resolve_canonical_group(group, user)


def set_current_user(value: Optional[str]) -> None:
    get_context().set_current_user(value)


def get_runtime_version() -> VersionInfo:
    return get_context().get_runtime_version()


def set_runtime_version(value: Optional[Union[VersionInfo, str]]) -> None:
    get_context().set_runtime_version(value)


def get_current_working_directory() -> Optional[pathlib.Path]:
    return get_context().get_current_working_directory()


def set_working_directory_source(source: Optional[WorkingDirectorySource]) -> None:
    get_context().set_working_directory_source(source)


def default_interactive_shell_command(is_windows: Optional[bool] = None) -> str:
    return get_context().default_interactive_shell_command(is_windows)


def default_interactive_command_elements(is_windows: Optional[bool] = None) -> List[str]:
    return get_context().default_interactive_command_elements(is_windows)


def comparable_path(path: Optional[str]) -> str:
    return get_context().comparable_path(path)


__all__ = [
    "__version__",
    "__author__",
    "__codename__",
    "PlatformContext",
    "PropertyTable",
    "VersionInfo",
    "PlatformError",
    "ConfigError",
    "ResolutionError",
    "MissingIdentityError",
    "MissingVersionError",
    "UnparsableVersionError",
    "get_context",
    "set_context",
    "is_windows",
    "is_macos",
    "is_unix_like",
    "is_constrained_runtime",
    "set_constrained_runtime",
    "is_alternate_vm",
    "set_alternate_vm",
    "get_os_type",
    "set_os_type",
    "get_current_user",
    "get_canonical_user",
    "resolve_canonical_group",
    "set_current_user",
    "get_runtime_version",
    "set_runtime_version",
    "get_current_working_directory",
    "set_working_directory_source",
    "default_interactive_shell_command",
    "default_interactive_command_elements",
    "comparable_path",
]

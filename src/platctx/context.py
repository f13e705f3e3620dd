# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
The platform facade.

A PlatformContext answers "what platform am I running on?" from one property
table, caching each answer in its own lock-guarded cell. Production code uses
the process-wide default from get_context(); tests build isolated contexts
over fake property tables.
"""

import logging
import os
import pathlib
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from platctx.errors import ResolutionError
from platctx.flags import ALTERNATE_VM_SIGNAL, CONSTRAINED_RUNTIME_SIGNAL, FlagCache
from platctx.ostype import OSTypeResolver
from platctx.paths import WorkingDirectoryResolver, WorkingDirectorySource, comparable_path
from platctx.properties import CONFIG_ENV_VAR, PropertyTable
from platctx.shell import default_interactive_command_elements, default_interactive_shell_command
from platctx.users import IdentityResolver
from platctx.version import VersionInfo, VersionResolver

logger = logging.getLogger(__name__)


class PlatformContext:
    """
    Platform facts resolved lazily from a property table.

    Resolution precedence for every value: explicit setter call, then the
    ``platctx.*`` override property, then the system property, then the
    built-in default.
    """

    def __init__(self, properties: Optional[Mapping[str, str]] = None):
        self.properties = PropertyTable() if properties is None else properties
        self._os_type = OSTypeResolver(self.properties)
        self._constrained_runtime = FlagCache(self.properties, CONSTRAINED_RUNTIME_SIGNAL)
        self._alternate_vm = FlagCache(self.properties, ALTERNATE_VM_SIGNAL)
        self._identity = IdentityResolver(self.properties, self._os_type)
        self._version = VersionResolver(self.properties)
        self._cwd = WorkingDirectoryResolver(self.properties)

    # OS family

    def get_os_type(self) -> str:
        return self._os_type.get_os_type()

    def set_os_type(self, value: Optional[str]) -> None:
        self._os_type.set_os_type(value)

    def is_windows(self) -> bool:
        return self._os_type.is_windows()

    def is_macos(self) -> bool:
        return self._os_type.is_macos()

    def is_unix_like(self) -> bool:
        """True unless Windows or macOS; Android and PyPy hosts count too."""
        return self._os_type.is_unix_like()

    # Heuristic flags

    def is_constrained_runtime(self) -> bool:
        """True if running on a constrained mobile runtime such as Android."""
        return self._constrained_runtime.resolve()

    def set_constrained_runtime(self, value: Optional[bool]) -> None:
        self._constrained_runtime.set(value)

    def is_alternate_vm(self) -> bool:
        """True if running on an alternate interpreter VM such as PyPy."""
        return self._alternate_vm.resolve()

    def set_alternate_vm(self, value: Optional[bool]) -> None:
        self._alternate_vm.set(value)

    # Identity

    def get_current_user(self) -> str:
        return self._identity.get_current_user()

    def set_current_user(self, value: Optional[str]) -> None:
        self._identity.set_current_user(value)

    def get_canonical_user(self, user: Optional[str]) -> Optional[str]:
        return self._identity.get_canonical_user(user)

    def resolve_canonical_group(self, group: Optional[str], user: Optional[str]) -> Optional[str]:
        return self._identity.resolve_canonical_group(group, user)

    def is_root_user(self) -> bool:
        return self._identity.is_root_user()

    # Runtime version

    def get_runtime_version(self) -> VersionInfo:
        return self._version.get_runtime_version()

    def set_runtime_version(self, value: Optional[Union[VersionInfo, str]]) -> None:
        self._version.set_runtime_version(value)

    # Working directory and paths

    def get_current_working_directory(self) -> Optional[pathlib.Path]:
        return self._cwd.get_current_working_directory()

    def set_working_directory_source(self, source: Optional[WorkingDirectorySource]) -> None:
        self._cwd.set_working_directory_source(source)

    def comparable_path(self, path: Optional[str]) -> str:
        return comparable_path(path, self.is_windows())

    # Shell

    def default_interactive_shell_command(self, is_windows: Optional[bool] = None) -> str:
        if is_windows is None:
            is_windows = self.is_windows()
        return default_interactive_shell_command(is_windows)

    def default_interactive_command_elements(self, is_windows: Optional[bool] = None) -> List[str]:
        if is_windows is None:
            is_windows = self.is_windows()
        return default_interactive_command_elements(is_windows)

    def reset(self) -> None:
        """Return every cached fact to unresolved and drop the cwd source."""
        self._os_type.reset()
        self._constrained_runtime.set(None)
        self._alternate_vm.set(None)
        self._identity.set_current_user(None)
        self._version.set_runtime_version(None)
        self._cwd.set_working_directory_source(None)

    def describe(self) -> Dict[str, Any]:
        """
        Snapshot the resolved facts as plain values.

        Facts that fail to resolve are reported as None.
        """
        facts: Dict[str, Any] = {
            "os_type": self.get_os_type(),
            "windows": self.is_windows(),
            "macos": self.is_macos(),
            "unix_like": self.is_unix_like(),
            "constrained_runtime": self.is_constrained_runtime(),
            "alternate_vm": self.is_alternate_vm(),
        }

        try:
            facts["current_user"] = self.get_current_user()
            facts["root_user"] = self.is_root_user()
        except ResolutionError as e:
            logger.warning("%s", e.message)
            facts["current_user"] = None
            facts["root_user"] = None

        try:
            facts["runtime_version"] = str(self.get_runtime_version())
        except ResolutionError as e:
            logger.warning("%s", e.message)
            facts["runtime_version"] = None

        cwd = self.get_current_working_directory()
        facts["working_directory"] = None if cwd is None else str(cwd)
        facts["shell_command"] = self.default_interactive_command_elements()
        return facts


# Process-wide default context
_context: Optional[PlatformContext] = None
_context_lock = threading.Lock()


def _create_default_context() -> PlatformContext:
    config_path = os.environ.get(CONFIG_ENV_VAR)
    if config_path:
        logger.debug("Loading platform properties from %s", config_path)
        return PlatformContext(PropertyTable.from_yaml(config_path))
    return PlatformContext()


def get_context() -> PlatformContext:
    """Get the default context, creating it on first use."""
    global _context
    with _context_lock:
        if _context is None:
            _context = _create_default_context()
        return _context


def set_context(context: Optional[PlatformContext]) -> None:
    """Replace the default context; None discards it."""
    global _context
    with _context_lock:
        _context = context

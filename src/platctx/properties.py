# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Configuration-property tables.

Every platform value is resolved from a property table. A table layers
explicit properties (given directly or loaded from YAML) over ``PLATCTX_*``
environment variables for the override properties, over the system
properties reported by the running interpreter. Nothing here is cached:
each lookup reads the layers again, caching happens one level up.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
import re
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml

from platctx.errors import ConfigError

logger = logging.getLogger(__name__)

OVERRIDE_PREFIX = "platctx."
ENV_PREFIX = "PLATCTX_"
CONFIG_ENV_VAR = "PLATCTX_CONFIG"

# Override properties, consulted before their system equivalents
CURRENT_USER_OVERRIDE_PROP = "platctx.currentUser"
RUNTIME_VERSION_OVERRIDE_PROP = "platctx.runtimeVersion"
OS_TYPE_OVERRIDE_PROP = "platctx.osType"
CONSTRAINED_RUNTIME_OVERRIDE_PROP = "platctx.constrainedRuntime"
ALTERNATE_VM_OVERRIDE_PROP = "platctx.alternateVM"

# System properties
OS_NAME_PROP = "os.name"
OS_RELEASE_PROP = "os.release"
OS_VERSION_PROP = "os.version"
OS_PLATFORM_PROP = "os.platform"
USER_NAME_PROP = "user.name"
USER_DIR_PROP = "user.dir"
RUNTIME_VERSION_PROP = "runtime.version"
RUNTIME_NAME_PROP = "runtime.name"
RUNTIME_VM_NAME_PROP = "runtime.vm.name"
RUNTIME_BUILD_PROP = "runtime.build"

PropertyProvider = Callable[[], Optional[str]]


def _current_user() -> Optional[str]:
    try:
        return getpass.getuser()
    except (OSError, KeyError, ImportError):
        # no login name and no pwd entry for the uid
        return None


def _current_dir() -> Optional[str]:
    try:
        return os.getcwd()
    except OSError:
        return None


SYSTEM_PROPERTIES: Dict[str, PropertyProvider] = {
    OS_NAME_PROP: platform.system,
    OS_RELEASE_PROP: platform.release,
    OS_VERSION_PROP: platform.version,
    OS_PLATFORM_PROP: lambda: sys.platform,
    USER_NAME_PROP: _current_user,
    USER_DIR_PROP: _current_dir,
    RUNTIME_VERSION_PROP: platform.python_version,
    RUNTIME_NAME_PROP: platform.python_implementation,
    RUNTIME_VM_NAME_PROP: lambda: sys.implementation.name,
    RUNTIME_BUILD_PROP: lambda: sys.version,
}


def is_blank(value: Optional[str]) -> bool:
    """Check if a value is None, empty or whitespace only."""
    return value is None or not value.strip()


def env_name_for(name: str) -> Optional[str]:
    """
    Get the environment variable that carries an override property.

    ``platctx.osType`` maps to ``PLATCTX_OS_TYPE``. Properties outside the
    ``platctx.`` namespace have no environment variable.
    """
    if not name.startswith(OVERRIDE_PREFIX):
        return None
    key = name[len(OVERRIDE_PREFIX):]
    key = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", key).replace(".", "_")
    return ENV_PREFIX + key.upper()


def resolve_property(
    properties: Mapping[str, str],
    override_name: str,
    fallback_name: Optional[str] = None,
) -> Optional[str]:
    """
    Resolve a value with override-then-fallback precedence.

    Args:
        properties: Property table to read
        override_name: Property consulted first
        fallback_name: Property consulted when the override is missing or blank

    Returns:
        The override value if present and non-blank, else the fallback
        value (which may itself be blank), else None.
    """
    value = properties.get(override_name)
    if not is_blank(value):
        return value
    if fallback_name is None:
        return None
    return properties.get(fallback_name)


def _flatten(data: Mapping[Any, Any], prefix: str = "") -> Iterator[Tuple[str, str]]:
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            yield from _flatten(value, name + ".")
        elif value is None:
            continue
        elif isinstance(value, bool):
            yield name, str(value).lower()
        elif isinstance(value, (list, tuple, set)):
            raise ValueError(f"Property '{name}' must be a scalar, got a list")
        else:
            yield name, str(value)


class PropertyTable(Mapping[str, str]):
    """
    A read-only, layered view of configuration properties.

    Lookup order for a name:
        1. explicit properties
        2. the ``PLATCTX_*`` environment variable, for override properties
        3. the system property provider, if one is registered for the name
    """

    def __init__(
        self,
        properties: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        system_properties: Optional[Mapping[str, PropertyProvider]] = None,
    ):
        """
        Initialize a property table.

        Args:
            properties: Explicit properties, flattened with dots if nested
            environ: Environment to read overrides from (default: os.environ)
            system_properties: Providers for system properties
                (default: SYSTEM_PROPERTIES)
        """
        self._explicit: Dict[str, str] = dict(_flatten(properties or {}))
        self._environ = os.environ if environ is None else environ
        self._system = SYSTEM_PROPERTIES if system_properties is None else system_properties

    @classmethod
    def from_yaml(
        cls,
        path: Union[str, os.PathLike],
        environ: Optional[Mapping[str, str]] = None,
        system_properties: Optional[Mapping[str, PropertyProvider]] = None,
    ) -> "PropertyTable":
        """
        Load explicit properties from a YAML file.

        Raises:
            ConfigError: If the file is missing, malformed, or not a mapping.
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read property file: {e.strerror}", str(path))

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError("Invalid YAML", str(path), details=str(e))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Expected a mapping of properties, got {type(data).__name__}",
                str(path),
            )

        try:
            table = cls(data, environ=environ, system_properties=system_properties)
        except ValueError as e:
            raise ConfigError(str(e), str(path))

        logger.debug("Loaded %d properties from %s", len(table._explicit), path)
        return table

    def with_properties(self, properties: Mapping[str, Any]) -> "PropertyTable":
        """Return a copy of this table with extra explicit properties."""
        merged: Dict[str, Any] = dict(self._explicit)
        merged.update(dict(_flatten(properties)))
        return type(self)(merged, environ=self._environ, system_properties=self._system)

    def get_property(self, name: str) -> Optional[str]:
        """Look up a property through every layer, or None if absent."""
        if name in self._explicit:
            return self._explicit[name]

        env_name = env_name_for(name)
        if env_name is not None and env_name in self._environ:
            return self._environ[env_name]

        provider = self._system.get(name)
        if provider is None:
            return None
        try:
            return provider()
        except (OSError, KeyError, ImportError) as e:
            logger.debug("System property %s unavailable: %s", name, e)
            return None

    def __getitem__(self, name: str) -> str:
        value = self.get_property(name)
        if value is None:
            raise KeyError(name)
        return value

    def _names(self) -> Iterator[str]:
        seen = set()
        for name in self._explicit:
            seen.add(name)
            yield name
        for env_name in self._environ:
            if not env_name.startswith(ENV_PREFIX) or env_name == CONFIG_ENV_VAR:
                continue
            for name in _OVERRIDE_PROPERTIES:
                if name not in seen and env_name_for(name) == env_name:
                    seen.add(name)
                    yield name
        for name in self._system:
            if name not in seen:
                seen.add(name)
                yield name

    def __iter__(self) -> Iterator[str]:
        return (name for name in self._names() if self.get_property(name) is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"PropertyTable(explicit={self._explicit!r})"


_OVERRIDE_PROPERTIES = (
    CURRENT_USER_OVERRIDE_PROP,
    RUNTIME_VERSION_OVERRIDE_PROP,
    OS_TYPE_OVERRIDE_PROP,
    CONSTRAINED_RUNTIME_OVERRIDE_PROP,
    ALTERNATE_VM_OVERRIDE_PROP,
)

# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Runtime version resolution.

The version string comes from the ``platctx.runtimeVersion`` override or the
``runtime.version`` system property. Legacy ``major.minor.patch_update``
forms are accepted, and anything after the first character that is neither
a digit nor a dot (``-b09``, ``rc1``, ``+local``) is dropped before parsing.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, Union

from platctx.cells import MemoCell
from platctx.errors import MissingVersionError, UnparsableVersionError
from platctx.properties import (
    RUNTIME_VERSION_OVERRIDE_PROP,
    RUNTIME_VERSION_PROP,
    is_blank,
    resolve_property,
)

logger = logging.getLogger(__name__)

_PROPERTIES = (RUNTIME_VERSION_OVERRIDE_PROP, RUNTIME_VERSION_PROP)


@dataclass(frozen=True, order=True)
class VersionInfo:
    """An immutable version made of non-negative integer components."""

    components: Tuple[int, ...]

    def __post_init__(self):
        components = tuple(self.components)
        for c in components:
            if isinstance(c, bool) or not isinstance(c, int) or c < 0:
                raise ValueError(f"Version components must be non-negative integers, got {c!r}")
        # frozen dataclass
        object.__setattr__(self, "components", components)

    @classmethod
    def parse(cls, text: str) -> "VersionInfo":
        """
        Parse a dotted digit string such as ``1.8.0.362``.

        Leading and trailing dots are ignored.

        Raises:
            UnparsableVersionError: If there are no components or one is
                empty or not a number.
        """
        stripped = (text or "").strip().strip(".")
        if not stripped:
            raise UnparsableVersionError(text)

        components = []
        for part in stripped.split("."):
            if not (part.isascii() and part.isdigit()):
                raise UnparsableVersionError(text)
            components.append(int(part))
        return cls(tuple(components))

    def _component(self, index: int) -> int:
        return self.components[index] if index < len(self.components) else 0

    @property
    def major(self) -> int:
        return self._component(0)

    @property
    def minor(self) -> int:
        return self._component(1)

    @property
    def patch(self) -> int:
        return self._component(2)

    def __str__(self) -> str:
        return ".".join(str(c) for c in self.components)


def sanitize_version(value: str) -> str:
    """
    Normalize a raw version string to digits and dots.

    ``1.8.0_362-b09`` becomes ``1.8.0.362``.
    """
    value = value.strip().replace("_", ".")
    for index, ch in enumerate(value):
        if ch != "." and not ("0" <= ch <= "9"):
            return value[:index]
    return value


class VersionResolver:
    """Resolves and caches the runtime VersionInfo."""

    def __init__(self, properties: Mapping[str, str]):
        self._properties = properties
        self._cell: MemoCell[VersionInfo] = MemoCell(self._detect, name="runtime-version")

    def _detect(self) -> VersionInfo:
        value = resolve_property(self._properties, *_PROPERTIES)
        if is_blank(value):
            logger.warning("No runtime version configured in %s or %s", *_PROPERTIES)
            raise MissingVersionError(_PROPERTIES)

        sanitized = sanitize_version(value)
        try:
            version = VersionInfo.parse(sanitized)
        except UnparsableVersionError:
            logger.warning("Cannot parse runtime version %r", value)
            raise UnparsableVersionError(value, _PROPERTIES)

        logger.debug("Resolved runtime version %s from %r", version, value)
        return version

    def get_runtime_version(self) -> VersionInfo:
        """
        Get the runtime version.

        Raises:
            MissingVersionError: If no version value is configured.
            UnparsableVersionError: If the value has no numeric components.
        """
        return self._cell.get()

    def set_runtime_version(self, value: Optional[Union[VersionInfo, str]]) -> None:
        """
        Set the reported version; None re-resolves it on the next read.

        Strings are sanitized and parsed immediately.
        """
        if isinstance(value, str):
            value = VersionInfo.parse(sanitize_version(value))
        self._cell.override(value)

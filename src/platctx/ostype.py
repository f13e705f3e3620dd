# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Operating system family detection.

The OS type is a normalized (trimmed, lower-case) name taken from the
``platctx.osType`` override or the ``os.name`` system property. Windows and
macOS are recognised by substring; everything else is Unix-like.
"""

import logging
from typing import Mapping, Optional

from platctx.cells import MemoCell
from platctx.properties import OS_NAME_PROP, OS_TYPE_OVERRIDE_PROP, resolve_property

logger = logging.getLogger(__name__)


def normalize_os_type(value: Optional[str]) -> str:
    """Trim and lower-case an OS name; None becomes the empty string."""
    return (value or "").strip().lower()


def is_windows_type(os_type: str) -> bool:
    return "windows" in os_type


def is_macos_type(os_type: str) -> bool:
    # Python reports "Darwin" where other runtimes say "Mac OS X"
    return "mac" in os_type or "darwin" in os_type


def is_unix_like_type(os_type: str) -> bool:
    return not is_windows_type(os_type) and not is_macos_type(os_type)


class OSTypeResolver:
    """Resolves and caches the OS type string."""

    def __init__(self, properties: Mapping[str, str]):
        self._properties = properties
        self._cell: MemoCell[str] = MemoCell(self._detect, name="os-type")

    def _detect(self) -> str:
        value = resolve_property(self._properties, OS_TYPE_OVERRIDE_PROP, OS_NAME_PROP)
        os_type = normalize_os_type(value)
        logger.debug("Resolved OS type %r", os_type)
        return os_type

    def get_os_type(self) -> str:
        return self._cell.get()

    def set_os_type(self, value: Optional[str]) -> None:
        """Replace the OS type; None re-detects it on the next read."""
        if value is None:
            self._cell.reset()
        else:
            self._cell.force(normalize_os_type(value))

    def reset(self) -> None:
        self._cell.reset()

    def is_windows(self) -> bool:
        return is_windows_type(self.get_os_type())

    def is_macos(self) -> bool:
        return is_macos_type(self.get_os_type())

    def is_unix_like(self) -> bool:
        return is_unix_like_type(self.get_os_type())

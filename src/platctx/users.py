# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Current user identity and canonical user/group names.

Windows reports owners decorated with a domain or machine prefix
(``DOMAIN\\jdoe``) and sometimes a group suffix (``jdoe (Remote Users)``).
The canonical forms strip those decorations; on Unix-like systems names are
used as given.
"""

import logging
from typing import Mapping, Optional

from platctx.cells import MemoCell
from platctx.errors import MissingIdentityError
from platctx.ostype import OSTypeResolver
from platctx.properties import (
    CURRENT_USER_OVERRIDE_PROP,
    USER_NAME_PROP,
    is_blank,
    resolve_property,
)

logger = logging.getLogger(__name__)

ROOT_USER = "root"


def canonical_user(user: Optional[str], windows: bool) -> Optional[str]:
    """
    Remove the Windows domain/group prefix and "(Group)" suffix.

    Args:
        user: The original username, returned as is if blank
        windows: Whether Windows decoration rules apply

    Returns:
        The canonical user, unchanged on non-Windows systems
    """
    if is_blank(user) or not windows:
        return user

    pos = user.rfind("\\")
    if pos > 0:
        user = user[pos + 1:]

    pos = user.find(" ")
    if pos > 0:
        user = user[:pos].strip()

    return user


def canonical_group(group: Optional[str], user: Optional[str], unix_like: bool) -> Optional[str]:
    """
    Resolve the canonical group name.

    Args:
        group: The original group name, used if not blank
        user: The owner name, which sometimes carries the group as a prefix
        unix_like: Groups are never decorated on Unix-like systems

    Returns:
        The canonical group name
    """
    if unix_like:
        return group

    if is_blank(group):
        pos = -1 if is_blank(user) else user.rfind("\\")
        return user[:pos] if pos > 0 else group

    pos = group.find(" ")
    return group if pos < 0 else group[:pos].strip()


class IdentityResolver:
    """Resolves and caches the canonical current user."""

    def __init__(self, properties: Mapping[str, str], os_type: OSTypeResolver):
        self._properties = properties
        self._os_type = os_type
        self._cell: MemoCell[str] = MemoCell(self._detect, name="current-user")

    def _detect(self) -> str:
        value = resolve_property(self._properties, CURRENT_USER_OVERRIDE_PROP, USER_NAME_PROP)
        username = self.get_canonical_user(value)
        if is_blank(username):
            logger.warning("No username available from %s or %s",
                           CURRENT_USER_OVERRIDE_PROP, USER_NAME_PROP)
            raise MissingIdentityError((CURRENT_USER_OVERRIDE_PROP, USER_NAME_PROP))
        logger.debug("Resolved current user %r", username)
        return username

    def get_current_user(self) -> str:
        """
        Get the canonical current username.

        Raises:
            MissingIdentityError: If no non-blank username is configured.
        """
        return self._cell.get()

    def set_current_user(self, value: Optional[str]) -> None:
        """Set the reported user; None re-resolves it on the next read."""
        self._cell.override(value)

    def get_canonical_user(self, user: Optional[str]) -> Optional[str]:
        return canonical_user(user, self._os_type.is_windows())

    def resolve_canonical_group(self, group: Optional[str], user: Optional[str]) -> Optional[str]:
        return canonical_group(group, user, self._os_type.is_unix_like())

    def is_root_user(self) -> bool:
        """Check if the current user is the Unix superuser."""
        if self._os_type.is_windows():
            return False
        return self.get_current_user() == ROOT_USER

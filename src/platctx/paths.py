# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Working directory and path comparison helpers.

Only path values are built here; nothing touches the filesystem.
"""

import logging
import pathlib
from typing import Callable, Mapping, Optional

from platctx.cells import SourceHolder
from platctx.properties import USER_DIR_PROP, is_blank

logger = logging.getLogger(__name__)

WorkingDirectorySource = Callable[[], Optional[pathlib.Path]]


def comparable_path(path: Optional[str], windows: bool) -> str:
    """
    Get a form of path that compares correctly on the target OS.

    Windows filesystems are case-insensitive, so the path is lower-cased
    there. None is treated as the empty string.
    """
    p = "" if path is None else path
    return p.lower() if windows else p


class WorkingDirectoryResolver:
    """
    Resolves the current working directory.

    A registered source is called on every request and its result is
    returned as is, since it may change between calls. Without a source the
    ``user.dir`` property is used.
    """

    def __init__(self, properties: Mapping[str, str]):
        self._properties = properties
        self._source: SourceHolder[Optional[pathlib.Path]] = SourceHolder()

    def get_current_working_directory(self) -> Optional[pathlib.Path]:
        source = self._source.get()
        if source is not None:
            return source()

        cwd = self._properties.get(USER_DIR_PROP)
        if is_blank(cwd):
            logger.debug("No %s property available", USER_DIR_PROP)
            return None
        return pathlib.Path(cwd)

    def set_working_directory_source(self, source: Optional[WorkingDirectorySource]) -> None:
        """Plug in a source; None reverts to the ``user.dir`` property."""
        self._source.set(source)

# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Heuristic platform flags.

A flag such as "running on Android" is decided from a DetectionSignal: an
override property checked first, then an ordered list of properties, each
tested with a case-insensitive substring matcher. The first match wins and
the answer is cached until explicitly reset.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Tuple

from platctx.cells import MemoCell
from platctx.properties import (
    ALTERNATE_VM_OVERRIDE_PROP,
    CONSTRAINED_RUNTIME_OVERRIDE_PROP,
    OS_PLATFORM_PROP,
    OS_RELEASE_PROP,
    OS_VERSION_PROP,
    RUNTIME_BUILD_PROP,
    RUNTIME_NAME_PROP,
    RUNTIME_VM_NAME_PROP,
)

logger = logging.getLogger(__name__)

Matcher = Callable[[Optional[str]], bool]


def substring_matcher(needle: str) -> Matcher:
    """Build a case-insensitive substring test; blank values never match."""
    needle = needle.lower()

    def matches(value: Optional[str]) -> bool:
        if not value:
            return False
        return needle in value.strip().lower()

    return matches


@dataclass(frozen=True)
class DetectionSignal:
    """
    How to detect one boolean platform flag.

    Attributes:
        name: Flag name used in log messages
        override_property: Property checked before any other
        properties: Properties checked in order when the override does not match
        matcher: Predicate applied to each property value
    """

    name: str
    override_property: str
    properties: Tuple[str, ...]
    matcher: Matcher

    def detect(self, properties: Mapping[str, str]) -> bool:
        """Run one full detection pass against a property table."""
        if self.matcher(properties.get(self.override_property)):
            logger.debug("%s enabled by %s", self.name, self.override_property)
            return True

        for prop in self.properties:
            if self.matcher(properties.get(prop)):
                logger.debug("%s detected from %s", self.name, prop)
                return True

        logger.debug("%s not detected", self.name)
        return False


CONSTRAINED_RUNTIME_SIGNAL = DetectionSignal(
    name="constrained-runtime",
    override_property=CONSTRAINED_RUNTIME_OVERRIDE_PROP,
    properties=(OS_PLATFORM_PROP, OS_RELEASE_PROP, OS_VERSION_PROP, RUNTIME_BUILD_PROP),
    matcher=substring_matcher("android"),
)

ALTERNATE_VM_SIGNAL = DetectionSignal(
    name="alternate-vm",
    override_property=ALTERNATE_VM_OVERRIDE_PROP,
    properties=(RUNTIME_NAME_PROP, RUNTIME_VM_NAME_PROP, RUNTIME_BUILD_PROP),
    matcher=substring_matcher("pypy"),
)


class FlagCache:
    """A boolean flag detected once and cached under its own lock."""

    def __init__(self, properties: Mapping[str, str], signal: DetectionSignal):
        self.signal = signal
        self._properties = properties
        self._cell: MemoCell[bool] = MemoCell(self._detect, name=signal.name)

    def _detect(self) -> bool:
        return self.signal.detect(self._properties)

    def resolve(self) -> bool:
        """Return the cached flag, running detection on first use."""
        return self._cell.get()

    def set(self, value: Optional[bool]) -> None:
        """Override the flag; None forces detection on the next resolve."""
        self._cell.override(value)

"""
Shared fixtures: fake property tables and isolated platform contexts.
"""

from collections import Counter
from typing import Dict, Iterator, Mapping, Optional

import pytest

import platctx
from platctx import PlatformContext


LINUX_PROPERTIES = {
    "os.name": "Linux",
    "os.platform": "linux",
    "os.release": "6.1.0-18-amd64",
    "user.name": "jdoe",
    "user.dir": "/home/jdoe/work",
    "runtime.version": "3.12.4",
    "runtime.name": "CPython",
    "runtime.vm.name": "cpython",
    "runtime.build": "3.12.4 (main, Jun  6 2024, 18:26:44) [GCC 12.2.0]",
}


class CountingProperties(Mapping[str, str]):
    """A property table that records how often each name is read."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(values or {})
        self.reads: Counter = Counter()

    def __getitem__(self, name: str) -> str:
        self.reads[name] += 1
        return self.values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def total_reads(self) -> int:
        return sum(self.reads.values())


@pytest.fixture
def linux_props() -> CountingProperties:
    return CountingProperties(LINUX_PROPERTIES)


@pytest.fixture
def make_context():
    """Build an isolated context over LINUX_PROPERTIES plus overrides."""

    def factory(**overrides) -> PlatformContext:
        values = dict(LINUX_PROPERTIES)
        for key, value in overrides.items():
            name = key.replace("__", ".")
            if value is None:
                values.pop(name, None)
            else:
                values[name] = value
        return PlatformContext(CountingProperties(values))

    return factory


@pytest.fixture(autouse=True)
def isolated_default_context(monkeypatch):
    """Keep the process-wide context and PLATCTX_* variables out of tests."""
    monkeypatch.delenv("PLATCTX_CONFIG", raising=False)
    for name in ("CURRENT_USER", "RUNTIME_VERSION", "OS_TYPE",
                 "CONSTRAINED_RUNTIME", "ALTERNATE_VM"):
        monkeypatch.delenv(f"PLATCTX_{name}", raising=False)
    platctx.set_context(None)
    yield
    platctx.set_context(None)


@pytest.fixture
def fake_props():
    """The CountingProperties class, for tests that build their own tables."""
    return CountingProperties

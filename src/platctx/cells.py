# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Thread-safe memoizing cells.

A cell holds one lazily resolved platform value. Every access, including a
read of an already resolved value, goes through the cell's own lock, so an
explicit override and a concurrent resolution are strictly ordered.
"""

import threading
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")


class MemoCell(Generic[T]):
    """
    A lazily resolved value with explicit override and reset.

    The resolver runs at most once per resolution cycle. If it raises,
    nothing is stored and the next ``get`` tries again.
    """

    def __init__(self, resolver: Callable[[], T], name: str = ""):
        """
        Initialize a cell.

        Args:
            resolver: Called under the lock to compute the value
            name: Label used in repr and log messages
        """
        self.name = name
        self._resolver = resolver
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._resolved = False

    def get(self) -> T:
        """Return the cached value, resolving it first if needed."""
        with self._lock:
            if not self._resolved:
                value = self._resolver()
                self._value = value
                self._resolved = True
            return self._value  # type: ignore[return-value]

    def override(self, value: Optional[T]) -> None:
        """
        Store a value explicitly.

        None returns the cell to the unresolved state.
        """
        with self._lock:
            self._value = value
            self._resolved = value is not None

    def force(self, value: T) -> None:
        """Store a value as resolved, even if it is None."""
        with self._lock:
            self._value = value
            self._resolved = True

    def reset(self) -> None:
        """Forget the value so the next ``get`` runs the resolver again."""
        self.override(None)

    @property
    def is_resolved(self) -> bool:
        with self._lock:
            return self._resolved

    def __repr__(self) -> str:
        with self._lock:
            state = repr(self._value) if self._resolved else "<unresolved>"
        return f"MemoCell({self.name!r}, {state})"


class SourceHolder(Generic[T]):
    """
    A lock-guarded slot for a pluggable callable.

    Unlike MemoCell it never caches what the callable returns.
    """

    def __init__(self, source: Optional[Callable[[], T]] = None):
        self._lock = threading.Lock()
        self._source = source

    def get(self) -> Optional[Callable[[], T]]:
        with self._lock:
            return self._source

    def set(self, source: Optional[Callable[[], T]]) -> None:
        with self._lock:
            self._source = source

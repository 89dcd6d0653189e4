"""In-memory ledger environment: keyed storage with TTLs, a clock and an event log."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable


class Storage:
    """A key/value store with value semantics and per-entry time-to-live."""

    def __init__(self, min_ttl: int = 0) -> None:
        self.min_ttl = min_ttl
        self._entries: dict[Hashable, Any] = {}
        self._ttl: dict[Hashable, int] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return a copy of the value stored under ``key``, or ``default``."""
        if key not in self._entries:
            return default
        return copy.deepcopy(self._entries[key])

    def set(self, key: Hashable, value: Any) -> None:
        """Store a copy of ``value`` under ``key``; an existing TTL is kept."""
        self._entries[key] = copy.deepcopy(value)
        self._ttl.setdefault(key, self.min_ttl)

    def remove(self, key: Hashable) -> None:
        """Drop ``key``; removing an absent key does nothing."""
        self._entries.pop(key, None)
        self._ttl.pop(key, None)

    def has(self, key: Hashable) -> bool:
        return key in self._entries

    def extend_ttl(self, key: Hashable, threshold: int, extend_to: int) -> None:
        """Raise the entry's TTL to ``extend_to`` when it has fallen below ``threshold``."""
        if key not in self._entries:
            raise KeyError(key)
        if self._ttl[key] < threshold:
            self._ttl[key] = extend_to

    def ttl(self, key: Hashable) -> int:
        """Return the TTL of a stored entry."""
        if key not in self._entries:
            raise KeyError(key)
        return self._ttl[key]


@dataclass
class Env:
    """Execution environment shared by the contract modules."""

    timestamp: int = 0
    persistent: Storage = field(default_factory=Storage)
    instance: Storage = field(default_factory=Storage)
    events: list[tuple[tuple[Any, ...], Any]] = field(default_factory=list)

    def publish(self, topics: Iterable[Any], data: Any) -> None:
        """Record an event with its topics and payload."""
        self.events.append((tuple(topics), data))
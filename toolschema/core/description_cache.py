"""Description Cache: identity-keyed, non-owning memo from schema node to descriptor.

Invariants:
    - Keyed by node identity, never by equality: two equal annotations are two entries
    - A hit returns the stored descriptor object itself (`is`), never a copy
    - The cache never keeps a node alive: entries hold a weak reference and are dropped
      by the weakref callback when the node is collected
    - Nodes that cannot be weakly referenced are not cached (set() returns False)

Design Decisions:
    - id()-keyed dict + weakref.ref instead of WeakKeyDictionary: WeakKeyDictionary hashes by
      equality, and typing aliases compare equal across distinct objects
    - Not thread-safe: the walker's placeholder-then-mutate protocol assumes a single
      registration path (ADR: tool registration runs once, at import time)
"""

import weakref
from typing import Any

Descriptor = dict[str, Any]


class DescriptionCache:
    """Memo of compiled descriptors, one per live schema node."""

    def __init__(self) -> None:
        self._entries: dict[int, tuple[weakref.ref, Descriptor]] = {}

    def get(self, node: Any) -> Descriptor | None:
        entry = self._entries.get(id(node))
        if entry is None:
            return None
        ref, descriptor = entry
        # Guards against a recycled id between collection and callback.
        if ref() is not node:
            return None
        return descriptor

    def set(self, node: Any, descriptor: Descriptor) -> bool:
        """Store `descriptor` for `node`. Returns False when node is not weak-referenceable."""
        key = id(node)
        try:
            ref = weakref.ref(node, self._evictor(key))
        except TypeError:
            return False
        self._entries[key] = (ref, descriptor)
        return True

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, node: Any) -> bool:
        return self.get(node) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def _evictor(self, key: int):
        entries = self._entries

        def evict(ref: weakref.ref) -> None:
            entry = entries.get(key)
            if entry is not None and entry[0] is ref:
                del entries[key]

        return evict

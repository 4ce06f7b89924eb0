"""Arena of resource nodes indexed by key, keeping every competing definition."""

from collections.abc import Iterator

from rescodegen.resource_key import ResourceKey
from rescodegen.resource_node import ResourceNode


class ResourceGraph:
    """Ordered mapping from ResourceKey to all of its definitions.

    The first definition inserted for a key is its winner; later ones are
    kept only for reporting.
    """

    def __init__(self) -> None:
        """Create an empty graph."""
        self._arena: list[ResourceNode] = []
        self._index: dict[ResourceKey, list[int]] = {}

    def insert(self, node: ResourceNode) -> bool:
        """Append ``node``; returns True when its key was already present."""
        node.index = len(self._arena)
        self._arena.append(node)
        slots = self._index.setdefault(node.key, [])
        slots.append(node.index)
        return len(slots) > 1

    def winner(self, key: ResourceKey) -> ResourceNode | None:
        """Return the precedence winner for ``key``."""
        slots = self._index.get(key)
        return self._arena[slots[0]] if slots else None

    def definitions(self, key: ResourceKey) -> list[ResourceNode]:
        """Return every definition of ``key``, winner first."""
        return [self._arena[i] for i in self._index.get(key, [])]

    def winners(self) -> Iterator[ResourceNode]:
        """Iterate over winners in insertion order."""
        for slots in self._index.values():
            yield self._arena[slots[0]]

    def duplicates(self) -> Iterator[tuple[ResourceKey, list[ResourceNode]]]:
        """Iterate over keys defined more than once."""
        for key, slots in self._index.items():
            if len(slots) > 1:
                yield key, [self._arena[i] for i in slots]

    def __contains__(self, key: object) -> bool:
        """Return True when ``key`` has at least one definition."""
        return key in self._index

    def __len__(self) -> int:
        """Return the number of distinct keys."""
        return len(self._index)

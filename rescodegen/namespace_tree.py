"""Logic for building the namespace hierarchy of the resolved graph."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from rescodegen.resource_key import ResourceKey


@dataclass
class NamespaceTree:
    """A namespace segment, the keys declared directly in it and its children."""

    path: tuple[str, ...] = ()
    keys: list[ResourceKey] = field(default_factory=list)
    children: dict[str, "NamespaceTree"] = field(default_factory=dict)

    def child(self, segment: str) -> "NamespaceTree":
        """Return the child for ``segment``, creating it when missing."""
        node = self.children.get(segment)
        if node is None:
            node = NamespaceTree((*self.path, segment))
            self.children[segment] = node
        return node

    def walk(self) -> Iterator["NamespaceTree"]:
        """Yield this node and its descendants, parents first, children sorted."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(node.children[s] for s in sorted(node.children, reverse=True))


def build_namespace_tree(keys: Iterable[ResourceKey]) -> NamespaceTree:
    """Build the namespace tree; keys keep their input order within a node."""
    root = NamespaceTree()
    for key in keys:
        node = root
        for segment in key.namespace:
            node = node.child(segment)
        node.keys.append(key)
    return root

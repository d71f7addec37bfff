"""Scene graph: an arena of nodes addressed by integer index.

Each node has a name, an optional parent index, ordered children and an
ordered list of attached behaviors. The resolver only reads the scene; the
host owns and mutates it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import SceneGraphError

NodeId = int


@dataclass
class _NodeRecord:
    name: str
    parent: Optional[NodeId] = None
    children: List[NodeId] = field(default_factory=list)
    behaviors: List[Any] = field(default_factory=list)


class Scene:
    """Host-owned tree of nodes with attached behaviors.

    Example:
        >>> scene = Scene()
        >>> root = scene.add_node("Application")
        >>> player = scene.add_node("Player", parent=root)
        >>> scene.attach(player, object())
        >>> list(scene.ancestors(player)) == [root]
        True
    """

    def __init__(self) -> None:
        self._nodes: List[_NodeRecord] = []
        self._owner: Dict[int, NodeId] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def _record(self, node: NodeId) -> _NodeRecord:
        if not isinstance(node, int) or isinstance(node, bool) or not 0 <= node < len(self._nodes):
            raise SceneGraphError(f"Unknown node: {node!r}")
        return self._nodes[node]

    def add_node(self, name: str, parent: Optional[NodeId] = None) -> NodeId:
        if parent is not None:
            self._record(parent)
        idx = len(self._nodes)
        self._nodes.append(_NodeRecord(name=name, parent=parent))
        if parent is not None:
            self._nodes[parent].children.append(idx)
        return idx

    def attach(self, node: NodeId, *behaviors: Any) -> None:
        """Attach behaviors to *node*, after any already attached."""
        rec = self._record(node)
        for b in behaviors:
            if id(b) in self._owner:
                raise SceneGraphError(
                    f"{type(b).__name__} is already attached to node '{self.name(self._owner[id(b)])}'"
                )
            self._owner[id(b)] = node
            rec.behaviors.append(b)

    def detach(self, behavior: Any) -> None:
        node = self._owner.pop(id(behavior), None)
        if node is None:
            raise SceneGraphError(f"{type(behavior).__name__} is not attached to this scene")
        self._nodes[node].behaviors = [b for b in self._nodes[node].behaviors if b is not behavior]

    def reparent(self, node: NodeId, new_parent: Optional[NodeId]) -> None:
        rec = self._record(node)
        if new_parent is not None:
            self._record(new_parent)
            if new_parent == node or node in self.ancestors(new_parent):
                raise SceneGraphError(
                    f"Cannot move node '{rec.name}' under itself or one of its descendants"
                )
        if rec.parent is not None:
            self._nodes[rec.parent].children.remove(node)
        rec.parent = new_parent
        if new_parent is not None:
            self._nodes[new_parent].children.append(node)

    def name(self, node: NodeId) -> str:
        return self._record(node).name

    def parent(self, node: NodeId) -> Optional[NodeId]:
        return self._record(node).parent

    def children(self, node: NodeId) -> Tuple[NodeId, ...]:
        return tuple(self._record(node).children)

    def behaviors(self, node: NodeId) -> Tuple[Any, ...]:
        return tuple(self._record(node).behaviors)

    def node_of(self, behavior: Any) -> NodeId:
        try:
            return self._owner[id(behavior)]
        except KeyError:
            raise SceneGraphError(f"{type(behavior).__name__} is not attached to this scene") from None

    def roots(self) -> Tuple[NodeId, ...]:
        return tuple(i for i, rec in enumerate(self._nodes) if rec.parent is None)

    def ancestors(self, node: NodeId) -> Iterator[NodeId]:
        """Yield the parent, grandparent and so on up to the root."""
        parent = self._record(node).parent
        while parent is not None:
            yield parent
            parent = self._nodes[parent].parent

    def walk(self, roots: Iterable[NodeId]) -> Iterator[NodeId]:
        """Yield *roots* and their descendants in pre-order, each node once."""
        seen = set()
        for root in roots:
            self._record(root)
            stack = [root]
            while stack:
                n = stack.pop()
                if n in seen:
                    continue
                seen.add(n)
                yield n
                stack.extend(reversed(self._nodes[n].children))

"""
Dependency tree: what does a component depend on, level by level.

Only DEPENDS_ON edges are followed, always forwards (source -> target).
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Edge, EdgeType, Node, NodeType
from archgraph.traversal.bounds import DEFAULT_DEPTH, clamp_depth
from archgraph.traversal.fanout import gather_all
from archgraph.traversal.results import NodeSummary, resolve_nodes

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    id: str
    name: Optional[str] = None
    type: Optional[NodeType] = None
    dependencies: List["TreeNode"] = field(default_factory=list)

    @classmethod
    def of(cls, node_id: str, node: Optional[Node]) -> "TreeNode":
        summary = NodeSummary.of(node_id, node)
        return cls(id=summary.id, name=summary.name, type=summary.type)

    @property
    def height(self) -> int:
        """Number of dependency levels below this node."""
        if not self.dependencies:
            return 0
        return 1 + max(child.height for child in self.dependencies)

    def to_dict(self) -> dict:
        data = NodeSummary(self.id, self.name, self.type).to_dict()
        data["dependencies"] = [child.to_dict() for child in self.dependencies]
        return data


@dataclass
class DependencyTree:
    node_id: str
    depth: int
    root: Optional[TreeNode] = None

    @property
    def found(self) -> bool:
        return self.root is not None

    @property
    def dependencies(self) -> List[TreeNode]:
        return self.root.dependencies if self.root else []

    def to_dict(self) -> dict:
        if self.root is None:
            return {"id": self.node_id, "found": False, "depth": self.depth, "dependencies": []}
        data = self.root.to_dict()
        data["found"] = True
        data["depth"] = self.depth
        return data


def depends_on_targets(edges: Iterable[Edge]) -> List[str]:
    return [e.target_id for e in edges if e.type is EdgeType.DEPENDS_ON]


class _LevelFetcher:
    """Per-call memo so each id's edges and node are read at most once."""

    def __init__(self, source: GraphSource):
        self.source = source
        self.targets: Dict[str, List[str]] = {}
        self.nodes: Dict[str, Optional[Node]] = {}

    async def _targets_of(self, node_id: str) -> Tuple[str, List[str]]:
        edges = await self.source.edges_from_source(node_id)
        return node_id, depends_on_targets(edges)

    async def load_targets(self, node_ids: Iterable[str]) -> None:
        missing = [i for i in dict.fromkeys(node_ids) if i not in self.targets]
        for node_id, targets in await gather_all(*(self._targets_of(i) for i in missing)):
            self.targets[node_id] = targets

    async def load_nodes(self, node_ids: Iterable[str]) -> None:
        missing = [i for i in dict.fromkeys(node_ids) if i not in self.nodes]
        self.nodes.update(await resolve_nodes(self.source, missing))


async def dependency_tree(
    source: GraphSource,
    node_id: str,
    depth: int = DEFAULT_DEPTH,
) -> DependencyTree:
    """
    Build the DEPENDS_ON tree below node_id, at most `depth` levels deep.

    A branch stops at the depth limit or when its next node is already an
    ancestor on the same path, so cycles terminate instead of recursing.
    Shared dependencies (diamonds) appear under every parent. Dangling
    targets are kept as id-only leaves and never expanded.
    """
    depth = clamp_depth(depth)
    root_node = await source.get_node(node_id)
    if root_node is None:
        logger.debug("[DependencyTree] Root '%s' not found", node_id)
        return DependencyTree(node_id=node_id, depth=depth)

    fetcher = _LevelFetcher(source)
    fetcher.nodes[node_id] = root_node
    root = TreeNode.of(node_id, root_node)

    frontier: List[Tuple[TreeNode, FrozenSet[str]]] = [(root, frozenset([node_id]))]
    for level in range(1, depth + 1):
        if not frontier:
            break

        await fetcher.load_targets(tree_node.id for tree_node, _ in frontier)
        await fetcher.load_nodes(
            target
            for tree_node, _ in frontier
            for target in fetcher.targets[tree_node.id]
        )

        next_frontier: List[Tuple[TreeNode, FrozenSet[str]]] = []
        for tree_node, ancestors in frontier:
            for target_id in fetcher.targets[tree_node.id]:
                if target_id in ancestors:
                    continue
                child = TreeNode.of(target_id, fetcher.nodes[target_id])
                tree_node.dependencies.append(child)
                if child.type is not None:
                    next_frontier.append((child, ancestors | {target_id}))

        logger.debug(
            "[DependencyTree] %s level %d: %d node(s) to expand",
            node_id, level, len(next_frontier),
        )
        frontier = next_frontier

    return DependencyTree(node_id=node_id, depth=depth, root=root)


def depends_on_adjacency(
    edges: Iterable[Edge],
    node_ids: Optional[Set[str]] = None,
) -> Dict[str, List[str]]:
    """
    source -> [targets] over DEPENDS_ON edges.

    With node_ids given, edges touching any other id are dropped.
    """
    adjacency: Dict[str, List[str]] = {}
    for edge in edges:
        if edge.type is not EdgeType.DEPENDS_ON:
            continue
        if node_ids is not None and (
            edge.source_id not in node_ids or edge.target_id not in node_ids
        ):
            continue
        adjacency.setdefault(edge.source_id, []).append(edge.target_id)
    return adjacency


def dependency_closure(adjacency: Mapping[str, Sequence[str]], node_id: str) -> Set[str]:
    """
    Every id reachable from node_id along DEPENDS_ON edges, at any depth.

    The unbounded form of dependency_tree over a preloaded adjacency.
    node_id itself is only included when it sits on a cycle.
    """
    reached: Set[str] = set()
    queue = deque(adjacency.get(node_id, ()))
    while queue:
        current = queue.popleft()
        if current in reached:
            continue
        reached.add(current)
        queue.extend(adjacency.get(current, ()))
    return reached

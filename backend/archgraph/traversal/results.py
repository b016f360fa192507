from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Node, NodeType
from archgraph.traversal.fanout import gather_all


@dataclass(frozen=True)
class NodeSummary:
    """
    {id, name, type} view of a node.

    A dangling reference (id with no node behind it) keeps only the id.
    """
    id: str
    name: Optional[str] = None
    type: Optional[NodeType] = None

    @classmethod
    def of(cls, node_id: str, node: Optional[Node]) -> "NodeSummary":
        if node is None:
            return cls(id=node_id)
        return cls(id=node.id, name=node.name, type=node.type)

    @property
    def is_dangling(self) -> bool:
        return self.type is None

    def to_dict(self) -> dict:
        if self.is_dangling:
            return {"id": self.id}
        return {"id": self.id, "name": self.name, "type": self.type.value}


async def resolve_nodes(source: GraphSource, node_ids: Iterable[str]) -> Dict[str, Optional[Node]]:
    """Look up each distinct id once, concurrently."""
    unique = list(dict.fromkeys(node_ids))
    nodes = await gather_all(*(source.get_node(node_id) for node_id in unique))
    return dict(zip(unique, nodes))


async def resolve_summaries(source: GraphSource, node_ids: Iterable[str]) -> List[NodeSummary]:
    """Summaries in the order given, duplicates kept."""
    node_ids = list(node_ids)
    nodes = await resolve_nodes(source, node_ids)
    return [NodeSummary.of(node_id, nodes[node_id]) for node_id in node_ids]

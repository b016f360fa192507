"""
Implementation order: a build sequence where every component comes after
everything it depends on.

Kahn's algorithm over the non-layer nodes and the DEPENDS_ON edges between
them. Among nodes that are ready at the same time, the smallest id goes
first, so the order is reproducible.

A cycle is reported, not raised: the result carries the set of nodes that
never became ready (the cycle members plus anything waiting on them).
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Edge, Node
from archgraph.traversal.dependency_tree import depends_on_adjacency
from archgraph.traversal.fanout import gather_all

logger = logging.getLogger(__name__)


@dataclass
class OrderResult:
    order: Optional[List[str]] = None
    cycle: Optional[List[str]] = None
    partial_order: List[str] = field(default_factory=list)

    @property
    def has_cycle(self) -> bool:
        return self.cycle is not None

    def to_dict(self) -> dict:
        return {"order": self.order, "cycle": self.cycle}


def kahn_order(node_ids: List[str], adjacency: Dict[str, List[str]]) -> OrderResult:
    """
    adjacency maps a node to the nodes it depends on.

    In-degree here is the number of unresolved dependencies; releasing a
    node decrements every node that depends on it.
    """
    remaining: Dict[str, int] = {node_id: 0 for node_id in node_ids}
    dependents_of: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for source_id, targets in adjacency.items():
        for target_id in targets:
            remaining[source_id] += 1
            dependents_of[target_id].append(source_id)

    ready = [node_id for node_id, count in remaining.items() if count == 0]
    heapq.heapify(ready)

    order: List[str] = []
    while ready:
        current = heapq.heappop(ready)
        order.append(current)
        for dependent in dependents_of[current]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) < len(remaining):
        resolved = set(order)
        unresolved = sorted(node_id for node_id in remaining if node_id not in resolved)
        return OrderResult(cycle=unresolved, partial_order=order)
    return OrderResult(order=order, partial_order=order)


def order_graph(nodes: List[Node], edges: List[Edge]) -> OrderResult:
    component_ids = [n.id for n in nodes if not n.is_layer]
    adjacency = depends_on_adjacency(edges, set(component_ids))
    return kahn_order(component_ids, adjacency)


async def implementation_order(source: GraphSource) -> OrderResult:
    nodes, edges = await gather_all(source.all_nodes(), source.all_edges())
    result = order_graph(nodes, edges)
    if result.has_cycle:
        logger.warning(
            "[ImplementationOrder] Dependency cycle blocks %d node(s): %s",
            len(result.cycle), ", ".join(result.cycle),
        )
    else:
        logger.debug("[ImplementationOrder] Ordered %d node(s)", len(result.order))
    return result

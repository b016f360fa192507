import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from archgraph.graph.source import GraphSource
from archgraph.graph.types import Node, VersionStatus
from archgraph.traversal.status import DEFAULT_VERSION, component_statuses

logger = logging.getLogger(__name__)


@dataclass
class LayerSummary:
    layer_id: Optional[str]  # None for the unassigned bucket
    layer_name: str
    counts: Dict[VersionStatus, int] = field(
        default_factory=lambda: {status: 0 for status in VersionStatus}
    )

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def completion_percent(self) -> int:
        if not self.total:
            return 0
        return round(100 * self.counts[VersionStatus.COMPLETE] / self.total)

    def to_dict(self) -> dict:
        return {
            "layer_id": self.layer_id,
            "layer_name": self.layer_name,
            "total_components": self.total,
            "counts": {status.value: count for status, count in self.counts.items()},
            "completion_percent": self.completion_percent,
        }


@dataclass
class LayerOverview:
    version: str
    layers: List[LayerSummary] = field(default_factory=list)

    def get(self, layer_id: str) -> Optional[LayerSummary]:
        return next((s for s in self.layers if s.layer_id == layer_id), None)

    @property
    def unassigned(self) -> LayerSummary:
        return self.layers[-1]

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "layers": [s.to_dict() for s in self.layers],
        }


def summarize_layers(
    version: str,
    nodes: List[Node],
    statuses: Dict[str, VersionStatus],
) -> LayerOverview:
    layer_nodes = sorted((n for n in nodes if n.is_layer), key=lambda n: (n.sort_order, n.id))
    summaries = {n.id: LayerSummary(layer_id=n.id, layer_name=n.name) for n in layer_nodes}
    unassigned = LayerSummary(layer_id=None, layer_name="Unassigned")

    for node in nodes:
        if node.is_layer:
            continue
        bucket = summaries.get(node.layer) if node.layer else None
        if bucket is None:
            if node.layer:
                logger.warning(
                    "[LayerOverview] %s references unknown layer '%s'", node.id, node.layer
                )
            bucket = unassigned
        bucket.counts[statuses[node.id]] += 1

    return LayerOverview(version=version, layers=list(summaries.values()) + [unassigned])


async def layer_overview(source: GraphSource, version: str = DEFAULT_VERSION) -> LayerOverview:
    """Per-layer component counts by status, plus an unassigned bucket."""
    nodes = await source.all_nodes()
    components = [n for n in nodes if not n.is_layer]
    statuses = await component_statuses(source, components, version)
    return summarize_layers(version, nodes, statuses)

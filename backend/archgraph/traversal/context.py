"""
Component context: everything needed to start working on one component.

Node details, versions with step totals, features grouped by version,
direct dependencies and dependents, its layer and the other members of
that layer.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from archgraph.graph.source import GraphSource
from archgraph.graph.types import EdgeType, Feature, Node, Version
from archgraph.traversal.dependency_tree import depends_on_targets
from archgraph.traversal.fanout import gather_all
from archgraph.traversal.results import NodeSummary, resolve_summaries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionProgress:
    version: str
    progress: int
    status: str
    total_steps: int = 0
    feature_count: int = 0

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "progress": self.progress,
            "status": self.status,
            "total_steps": self.total_steps,
            "feature_count": self.feature_count,
        }


@dataclass
class ComponentContext:
    node_id: str
    component: Optional[Node] = None
    versions: List[VersionProgress] = field(default_factory=list)
    features: Dict[str, List[Feature]] = field(default_factory=dict)
    dependencies: List[NodeSummary] = field(default_factory=list)
    dependents: List[NodeSummary] = field(default_factory=list)
    layer: Optional[NodeSummary] = None
    siblings: List[NodeSummary] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.component is not None

    @property
    def progress(self) -> Dict[str, dict]:
        return {
            v.version: {
                "total_steps": v.total_steps,
                "feature_count": v.feature_count,
                "status": v.status,
                "progress": v.progress,
            }
            for v in self.versions
        }

    def to_dict(self) -> dict:
        if self.component is None:
            return {"id": self.node_id, "found": False}
        c = self.component
        return {
            "id": self.node_id,
            "found": True,
            "component": {
                "id": c.id,
                "name": c.name,
                "type": c.type.value,
                "layer": c.layer,
                "description": c.description,
                "tags": list(c.tags),
            },
            "versions": [v.to_dict() for v in self.versions],
            "features": {
                tag: [f.to_dict() for f in features]
                for tag, features in self.features.items()
            },
            "dependencies": [n.to_dict() for n in self.dependencies],
            "dependents": [n.to_dict() for n in self.dependents],
            "layer": self.layer.to_dict() if self.layer else None,
            "siblings": [n.to_dict() for n in self.siblings],
            "progress": self.progress,
        }


def group_features(features: List[Feature]) -> Dict[str, List[Feature]]:
    grouped: Dict[str, List[Feature]] = {}
    for feature in features:
        grouped.setdefault(feature.version, []).append(feature)
    return grouped


def version_progress(versions: List[Version], grouped: Dict[str, List[Feature]]) -> List[VersionProgress]:
    result = []
    for v in versions:
        features = grouped.get(v.version, [])
        result.append(VersionProgress(
            version=v.version,
            progress=v.progress,
            status=v.status.value,
            total_steps=sum(f.step_count for f in features),
            feature_count=len(features),
        ))
    return result


async def _nothing():
    return None


async def _no_members() -> List[Node]:
    return []


async def component_context(source: GraphSource, node_id: str) -> ComponentContext:
    """
    Assemble the context for node_id.

    The node lookup runs first since the layer fetches need its layer id.
    The remaining reads are independent and run as one concurrent join;
    if any of them fails the others are cancelled and the error
    propagates, so a half-built context is never returned.
    """
    node = await source.get_node(node_id)
    if node is None:
        logger.debug("[ComponentContext] '%s' not found", node_id)
        return ComponentContext(node_id=node_id)

    versions, features, out_edges, in_edges, layer_node, layer_members = await gather_all(
        source.versions_for_node(node_id),
        source.features_for_node(node_id),
        source.edges_from_source(node_id),
        source.edges_to_target(node_id),
        source.get_node(node.layer) if node.layer else _nothing(),
        source.nodes_by_layer(node.layer) if node.layer else _no_members(),
    )

    dependency_ids = depends_on_targets(out_edges)
    dependent_ids = [e.source_id for e in in_edges if e.type is EdgeType.DEPENDS_ON]
    dependencies, dependents = await gather_all(
        resolve_summaries(source, dependency_ids),
        resolve_summaries(source, dependent_ids),
    )

    grouped = group_features(features)
    return ComponentContext(
        node_id=node_id,
        component=node,
        versions=version_progress(versions, grouped),
        features=grouped,
        dependencies=dependencies,
        dependents=dependents,
        layer=NodeSummary.of(node.layer, layer_node) if layer_node else None,
        siblings=[NodeSummary.of(n.id, n) for n in layer_members if n.id != node_id],
    )

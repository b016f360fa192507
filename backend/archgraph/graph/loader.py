"""
Loads an architecture document (YAML) into an InMemoryGraphSource.

Document layout:

    nodes:
      - id: api-layer
        name: API Layer
        type: layer
      - id: router
        name: Router
        type: component
        layer: api-layer
    edges:
      - source_id: api-layer
        target_id: router
        type: CONTAINS
    versions:
      - node_id: router
        version: mvp
        progress: 100          # status derived from progress when omitted
    features:
      - node_id: router
        version: mvp
        filename: mvp-routing.feature
        title: Routing
        step_count: 12
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from archgraph.graph.errors import GraphDataError
from archgraph.graph.integrity import IntegrityIssue, IssueSeverity, check_graph, raise_on_errors
from archgraph.graph.memory_source import InMemoryGraphSource
from archgraph.graph.types import (
    Edge,
    EdgeType,
    Feature,
    Node,
    NodeType,
    Version,
    VersionStatus,
)

logger = logging.getLogger(__name__)

KEBAB_CASE_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")
MAX_ID_LENGTH = 64


# ---- Document schema ----

class NodeSpec(BaseModel):
    id: str
    name: str
    type: NodeType
    layer: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0
    current_version: Optional[str] = None

    @field_validator("id")
    @classmethod
    def id_is_kebab_case(cls, value: str) -> str:
        if len(value) > MAX_ID_LENGTH or not KEBAB_CASE_RE.match(value):
            raise ValueError(
                f"id must be kebab-case and at most {MAX_ID_LENGTH} characters"
            )
        return value


class EdgeSpec(BaseModel):
    source_id: str
    target_id: str
    type: EdgeType
    label: Optional[str] = None


class VersionSpec(BaseModel):
    node_id: str
    version: str
    progress: int = Field(default=0, ge=0, le=100)
    status: Optional[VersionStatus] = None
    content: Optional[str] = None


class FeatureSpec(BaseModel):
    node_id: str
    version: str
    filename: str
    title: str
    step_count: int = Field(default=0, ge=0)


class ArchitectureDocument(BaseModel):
    nodes: List[NodeSpec] = Field(default_factory=list)
    edges: List[EdgeSpec] = Field(default_factory=list)
    versions: List[VersionSpec] = Field(default_factory=list)
    features: List[FeatureSpec] = Field(default_factory=list)


def derive_status(progress: int) -> VersionStatus:
    if progress >= 100:
        return VersionStatus.COMPLETE
    if progress > 0:
        return VersionStatus.IN_PROGRESS
    return VersionStatus.PLANNED


# ---- Loading ----

def parse_document(data: Dict[str, Any]) -> ArchitectureDocument:
    try:
        return ArchitectureDocument.model_validate(data or {})
    except ValidationError as e:
        issues = [
            IntegrityIssue(
                severity=IssueSeverity.ERROR,
                code="SCHEMA",
                message=f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}",
            )
            for err in e.errors()
        ]
        raise GraphDataError(issues) from e


def build_source(document: ArchitectureDocument) -> InMemoryGraphSource:
    nodes = [
        Node(
            id=spec.id,
            name=spec.name,
            type=spec.type,
            layer=spec.layer,
            description=spec.description,
            tags=tuple(spec.tags),
            color=spec.color,
            icon=spec.icon,
            sort_order=spec.sort_order,
            current_version=spec.current_version,
        )
        for spec in document.nodes
    ]
    edges = [
        Edge(
            source_id=spec.source_id,
            target_id=spec.target_id,
            type=spec.type,
            label=spec.label,
        )
        for spec in document.edges
    ]
    versions = [
        Version(
            node_id=spec.node_id,
            version=spec.version,
            progress=spec.progress,
            status=spec.status or derive_status(spec.progress),
            content=spec.content,
        )
        for spec in document.versions
    ]
    features = [
        Feature(
            node_id=spec.node_id,
            version=spec.version,
            filename=spec.filename,
            title=spec.title,
            step_count=spec.step_count,
        )
        for spec in document.features
    ]

    report = check_graph(nodes, edges, versions, features)
    for issue in report.warnings:
        logger.warning("[GraphLoader] %s", issue)
    raise_on_errors(report)

    return InMemoryGraphSource(nodes, edges, versions, features)


def load_graph_data(data: Dict[str, Any]) -> InMemoryGraphSource:
    """Validate an already-parsed document and build a source from it."""
    return build_source(parse_document(data))


def load_graph_file(path: str) -> InMemoryGraphSource:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Architecture document not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    source = load_graph_data(data)
    stats = source.stats
    logger.info(
        "[GraphLoader] Loaded %s: %d nodes, %d edges, %d versions, %d features",
        path, stats["nodes"], stats["edges"], stats["versions"], stats["features"],
    )
    return source

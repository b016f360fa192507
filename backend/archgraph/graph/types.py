from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class NodeType(Enum):
    LAYER = "layer"
    COMPONENT = "component"
    STORE = "store"
    EXTERNAL = "external"
    PHASE = "phase"
    APP = "app"
    MCP = "mcp"


class EdgeType(Enum):
    CONTAINS = "CONTAINS"
    CONTROLS = "CONTROLS"
    DEPENDS_ON = "DEPENDS_ON"
    READS_FROM = "READS_FROM"
    WRITES_TO = "WRITES_TO"
    DISPATCHES_TO = "DISPATCHES_TO"
    ESCALATES_TO = "ESCALATES_TO"
    PROXIES = "PROXIES"
    SANITISES = "SANITISES"
    GATES = "GATES"
    SEQUENCE = "SEQUENCE"

    @property
    def is_relationship(self) -> bool:
        """Everything except containment is a semantic relationship."""
        return self is not EdgeType.CONTAINS


class VersionStatus(Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Node:
    id: str
    name: str
    type: NodeType
    layer: Optional[str] = None             # id of a node of type layer
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0
    current_version: Optional[str] = None

    @property
    def is_layer(self) -> bool:
        return self.type is NodeType.LAYER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "layer": self.layer,
            "description": self.description,
            "tags": list(self.tags),
            "color": self.color,
            "icon": self.icon,
            "sort_order": self.sort_order,
            "current_version": self.current_version,
        }


@dataclass(frozen=True)
class Edge:
    source_id: str
    target_id: str
    type: EdgeType
    label: Optional[str] = None

    @property
    def key(self):
        """Identity triple; unique across the graph."""
        return (self.source_id, self.target_id, self.type.value)

    def to_dict(self) -> dict:
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "type": self.type.value,
        }


@dataclass(frozen=True)
class Version:
    node_id: str
    version: str  # overview | mvp | v1 | v2 ...
    progress: int = 0
    status: VersionStatus = VersionStatus.PLANNED
    content: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "version": self.version,
            "progress": self.progress,
            "status": self.status.value,
            "content": self.content,
        }


@dataclass(frozen=True)
class Feature:
    node_id: str
    version: str
    filename: str
    title: str
    step_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "title": self.title,
            "step_count": self.step_count,
        }

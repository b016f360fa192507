from abc import ABC, abstractmethod
from typing import List, Optional

from archgraph.graph.types import Edge, Feature, Node, Version, VersionStatus


class GraphSource(ABC):
    """
    Read-only view over the stored architecture graph.

    Implemented by the storage layer. The traversal engine only ever calls
    these coroutines; every call should see a consistent-enough snapshot
    (read-committed is sufficient). Infrastructure failures are raised as
    GraphSourceError. A missing node is None, never an exception.
    """

    @abstractmethod
    async def get_node(self, node_id: str) -> Optional[Node]:
        ...

    @abstractmethod
    async def node_exists(self, node_id: str) -> bool:
        ...

    @abstractmethod
    async def nodes_by_layer(self, layer_id: str) -> List[Node]:
        ...

    @abstractmethod
    async def edges_from_source(self, node_id: str) -> List[Edge]:
        ...

    @abstractmethod
    async def edges_to_target(self, node_id: str) -> List[Edge]:
        ...

    @abstractmethod
    async def all_nodes(self) -> List[Node]:
        ...

    @abstractmethod
    async def all_edges(self) -> List[Edge]:
        ...

    @abstractmethod
    async def version_status(self, node_id: str, version: str) -> VersionStatus:
        """Derived progress status; PLANNED when the node has no record for the tag."""

    @abstractmethod
    async def versions_for_node(self, node_id: str) -> List[Version]:
        ...

    @abstractmethod
    async def features_for_node(self, node_id: str) -> List[Feature]:
        ...

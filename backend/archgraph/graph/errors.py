from typing import List


class ArchGraphError(Exception):
    """Base class for errors raised by archgraph."""


class GraphSourceError(ArchGraphError):
    """A GraphSource could not answer a read (I/O, connection, corrupt store)."""


class GraphDataError(ArchGraphError):
    """An architecture document violates the graph invariants."""

    def __init__(self, issues: List):
        self.issues = issues
        super().__init__(
            f"Architecture document has {len(issues)} error(s):\n"
            + "\n".join(str(i) for i in issues)
        )

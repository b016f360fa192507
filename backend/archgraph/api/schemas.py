from pydantic import BaseModel
from typing import List, Optional


class ErrorResponse(BaseModel):
    error: str


class CycleConflictResponse(BaseModel):
    """409 body when a dependency cycle blocks the implementation order."""
    error: str = "Dependency cycle detected"
    cycle: List[str]


class HealthResponse(BaseModel):
    status: str
    nodes: int
    edges: int
    graph_file: Optional[str] = None

"""Input and output models for the layout engine."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class NodeRecord(BaseModel):
    """A node as described by the host."""

    id: str = Field(..., min_length=1, description="Unique node identifier")
    group_ids: List[str] = Field(default_factory=list, description="Ordered group memberships")
    name: Optional[str] = Field(None, description="Display name")
    color: Optional[str] = Field(None, description="Display color")
    content: Optional[str] = Field(None, description="Opaque host content")


class EdgeRecord(BaseModel):
    """An edge as described by the host."""

    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")
    name: Optional[str] = Field(None, description="Display name")
    color: Optional[str] = Field(None, description="Display color")
    content: Optional[str] = Field(None, description="Opaque host content")


class GroupRecord(BaseModel):
    """A group as described by the host."""

    id: str = Field(..., min_length=1, description="Unique group identifier")
    member_ids: List[str] = Field(default_factory=list, description="Ordered member node ids")
    name: Optional[str] = Field(None, description="Display name")
    color: Optional[str] = Field(None, description="Display color")
    content: Optional[str] = Field(None, description="Opaque host content")

    @field_validator("member_ids", mode="before")
    @classmethod
    def split_member_string(cls, value: Any) -> Any:
        # Accept the "a, b,c" attribute form
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class GraphDescription(BaseModel):
    """Complete host graph: nodes, edges and groups in input order."""

    nodes: List[NodeRecord] = Field(default_factory=list)
    edges: List[EdgeRecord] = Field(default_factory=list)
    groups: List[GroupRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "GraphDescription":
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate node id: {node.id!r}")
            seen.add(node.id)

        seen = set()
        for group in self.groups:
            if group.id in seen:
                raise ValueError(f"Duplicate group id: {group.id!r}")
            seen.add(group.id)
        return self

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "GraphDescription":
        """Load a description from a JSON file."""
        with open(path, encoding="utf-8") as f:
            return cls.model_validate(json.load(f))


# Response models

class NodeLayout(BaseModel):
    """Placement of one node."""

    id: str
    grid: Tuple[int, int]
    position: Tuple[float, float, float]
    degree: int
    group_ids: List[str]
    name: Optional[str] = None
    color: Optional[str] = None
    content: Optional[str] = None


class EdgeLayout(BaseModel):
    """Arc polyline for one valid edge."""

    source: str
    target: str
    points: List[Tuple[float, float, float]]
    name: Optional[str] = None
    color: Optional[str] = None
    content: Optional[str] = None


class GroupLayout(BaseModel):
    """Bounds, centroid and wireframe of one group."""

    id: str
    member_ids: List[str]
    bounds: Optional[Dict[str, int]] = None
    centroid: Optional[Tuple[float, float, float]] = None
    boundary: List[Tuple[Tuple[float, float, float], Tuple[float, float, float]]] = Field(default_factory=list)
    voxel_count: int = 0
    component_count: int = 0
    name: Optional[str] = None
    color: Optional[str] = None
    content: Optional[str] = None


class DiagnosticModel(BaseModel):
    """A non-blocking warning raised during the build."""

    kind: str
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


class LayoutResponse(BaseModel):
    """Serializable layout result."""

    nodes: List[NodeLayout]
    edges: List[EdgeLayout]
    groups: List[GroupLayout]
    diagnostics: List[DiagnosticModel]

"""Diagnostics and exceptions for the layout engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class LayoutError(Exception):
    """Raised when the engine is driven incorrectly (never for bad graph data)."""


class DiagnosticKind(str, Enum):
    """Kinds of recoverable conditions reported alongside a layout."""

    REFERENCE = "reference"                # edge or membership naming an unknown node
    SEARCH_EXHAUSTED = "search_exhausted"  # ring search fell back to unconstrained placement
    DISCONNECTED = "disconnected"          # group voxels split into several components


@dataclass
class Diagnostic:
    """A non-blocking warning produced while building a layout."""

    kind: DiagnosticKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "context": dict(self.context)}

"""
Library entry points and host-facing models.
"""

from .models import (
    NodeRecord, EdgeRecord, GroupRecord, GraphDescription,
    NodeLayout, EdgeLayout, GroupLayout, DiagnosticModel, LayoutResponse,
)
from .engine import LayoutResult, build_layout, compute_group_boundaries, resolve_graph

__all__ = ['NodeRecord', 'EdgeRecord', 'GroupRecord', 'GraphDescription',
           'NodeLayout', 'EdgeLayout', 'GroupLayout', 'DiagnosticModel', 'LayoutResponse',
           'LayoutResult', 'build_layout', 'compute_group_boundaries', 'resolve_graph']

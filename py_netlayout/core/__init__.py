"""
Core layout and boundary meshing functionality.
"""

from .graph_model import Node, Edge, Group
from .errors import Diagnostic, DiagnosticKind, LayoutError
from .connectivity import ConnectivityIndex, filter_edges
from .spacing import GridBounds, GroupSpacingTracker
from .grid_positioner import GridPositioner, ring_cells, grid_to_world
from .voxel_boundary import BoundaryEdge, CorridorStrategy, VoxelBoundaryBuilder, count_components
from .edge_merger import merge_collinear_edges
from .edge_arcs import edge_arc

__all__ = ['Node', 'Edge', 'Group',
           'Diagnostic', 'DiagnosticKind', 'LayoutError',
           'ConnectivityIndex', 'filter_edges',
           'GridBounds', 'GroupSpacingTracker',
           'GridPositioner', 'ring_cells', 'grid_to_world',
           'BoundaryEdge', 'CorridorStrategy', 'VoxelBoundaryBuilder', 'count_components',
           'merge_collinear_edges', 'edge_arc']

"""
Grid layout and group boundary meshing for graph visualizations.
"""

from .api import GraphDescription, LayoutResult, build_layout, compute_group_boundaries
from .config import LayoutSettings

__version__ = "0.1.0"

__all__ = ['GraphDescription', 'LayoutResult', 'build_layout', 'compute_group_boundaries',
           'LayoutSettings']

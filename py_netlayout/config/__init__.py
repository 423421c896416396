"""
Configuration for the layout engine.
"""

from .config import LayoutSettings, settings

__all__ = ['LayoutSettings', 'settings']

"""
Grid and analysis helpers.

Provides the height buffer that generators mutate in place and
the analyzer used to summarize a generated surface.
"""

from .height_grid import HeightGrid
from .heightmap_analyzer import HeightmapAnalyzer

__all__ = ["HeightGrid", "HeightmapAnalyzer"]

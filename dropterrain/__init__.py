"""
dropterrain: fBm terrain synthesis with droplet hydraulic erosion.
"""

from .engine import HeightGrid, HeightmapAnalyzer
from .procgen import TerrainEngine, NoiseField, InvalidConfiguration

__version__ = "0.1.0"

__all__ = [
    "HeightGrid",
    "HeightmapAnalyzer",
    "TerrainEngine",
    "NoiseField",
    "InvalidConfiguration",
]

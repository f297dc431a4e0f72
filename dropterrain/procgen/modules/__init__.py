"""
Terrain generation modules.

Each module provides specific terrain generation functionality:
- noise: Seeded simplex noise and the fBm NoiseField
- fbm: Fills a height grid from a NoiseField
- erosion: Droplet-based hydraulic erosion
"""

from . import noise
from . import fbm
from . import erosion

__all__ = ["noise", "fbm", "erosion"]

"""
Heightmap analysis for generated terrain.

Summarizes a height grid so eroded and uneroded surfaces can be compared.
"""

import numpy as np
from typing import Dict, Any
from scipy import ndimage

from .height_grid import HeightGrid


class HeightmapAnalyzer:
    """
    Analyzes height grids.

    Reports elevation and slope statistics plus the number of pits
    (local minima), which droplet erosion tends to fill.
    """

    def analyze(self, grid: HeightGrid) -> Dict[str, Any]:
        """
        Terrain analysis.

        Args:
            grid: Height grid to analyze

        Returns:
            Dictionary containing elevation, slope and pit statistics
        """

        if len(grid) == 0:
            return {
                "elevation_stats": {},
                "slope_analysis": {},
                "feature_detection": {"pits_detected": 0},
                "analysis_metadata": {"vertex_count": 0, "heightmap_shape": (0, 0)},
            }

        heightmap = grid.as_heightmap()

        return {
            "elevation_stats": self._analyze_elevation(heightmap),
            "slope_analysis": self._analyze_slopes(heightmap),
            "feature_detection": self._detect_pits(heightmap),
            "analysis_metadata": {
                "vertex_count": len(grid),
                "heightmap_shape": heightmap.shape,
            }
        }

    def _analyze_elevation(self, heightmap: np.ndarray) -> Dict[str, float]:
        """Analyze elevation statistics."""

        flat_heightmap = heightmap.flatten()

        return {
            "min": float(np.min(flat_heightmap)),
            "max": float(np.max(flat_heightmap)),
            "mean": float(np.mean(flat_heightmap)),
            "std": float(np.std(flat_heightmap)),
            "range": float(np.max(flat_heightmap) - np.min(flat_heightmap)),
            "sum": float(np.sum(flat_heightmap)),
        }

    def _analyze_slopes(self, heightmap: np.ndarray) -> Dict[str, float]:
        """Analyze slope characteristics."""

        # np.gradient needs at least two samples per axis
        if min(heightmap.shape) < 2:
            return {"max_slope": 0.0, "mean_slope": 0.0}

        grad_y, grad_x = np.gradient(heightmap)
        slope_magnitude = np.sqrt(grad_x**2 + grad_y**2)

        return {
            "max_slope": float(np.max(slope_magnitude)),
            "mean_slope": float(np.mean(slope_magnitude)),
        }

    def _detect_pits(self, heightmap: np.ndarray) -> Dict[str, int]:
        """Count strict local minima over a 3x3 neighborhood."""

        # Ignore the cell itself so plateaus do not count as pits
        footprint = np.ones((3, 3), dtype=bool)
        footprint[1, 1] = False
        neighborhood_min = ndimage.minimum_filter(
            heightmap, footprint=footprint, mode='constant', cval=np.inf
        )
        pits = heightmap < neighborhood_min

        return {"pits_detected": int(np.sum(pits))}

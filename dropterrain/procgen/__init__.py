"""
Procedural terrain generation.

This module provides:
- fBm height field generation over seeded simplex noise
- Droplet-based hydraulic erosion
- Parameter specifications and module registry
"""

from .core import TerrainEngine
from .grammar import (
    ModuleRegistry, ParameterSpec, InvalidConfiguration,
    PLANE_SPEC, FBM_SPEC, EROSION_SPEC
)
from .modules.noise import NoiseField
from .modules.fbm import apply_fbm
from .modules.erosion import apply_erosion, trace_droplet, ErosionStats

__all__ = [
    "TerrainEngine",
    "ModuleRegistry",
    "ParameterSpec",
    "InvalidConfiguration",
    "PLANE_SPEC",
    "FBM_SPEC",
    "EROSION_SPEC",
    "NoiseField",
    "apply_fbm",
    "apply_erosion",
    "trace_droplet",
    "ErosionStats",
]

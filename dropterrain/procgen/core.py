"""
Core terrain generation engine.
"""

import time
from typing import Dict, Any, List, Optional, Tuple

from ..engine.height_grid import HeightGrid
from .grammar import ModuleRegistry, PLANE_SPEC, FBM_SPEC, EROSION_SPEC
from .modules.fbm import apply_fbm
from .modules.erosion import apply_erosion, ErosionStats


class TerrainEngine:
    """
    Main terrain generation engine that orchestrates modules based on parameters.

    This engine:
    - Builds plane grids and fills them with fBm heights
    - Runs droplet erosion over an existing height field
    - Resolves flat parameter dicts against each module's ParameterSpec
    """

    def __init__(self, verbose: bool = False, progress: bool = False):
        self.verbose = verbose
        self.progress = progress
        self.registry = ModuleRegistry()

        # Register built-in modules
        self._register_builtin_modules()

    def _register_builtin_modules(self):
        """Register all built-in terrain modules."""

        self.registry.register("fbm", self.generate, FBM_SPEC)
        self.registry.register("hydraulic_erosion", self.erode, EROSION_SPEC)

    def generate(self, grid: HeightGrid, fbm_params: Optional[Dict[str, Any]] = None) -> None:
        """
        Replace the grid heights with an fBm field.

        Args:
            grid: Grid with x/z already laid out
            fbm_params: octaves, amplitude, lacunarity, gain, scale, max_height, seed
        """

        params = FBM_SPEC.extract_params(fbm_params)

        start = time.time()
        apply_fbm(grid, **params)

        if self.verbose:
            print(f"fBm: {len(grid)} vertices, {params['octaves']} octaves, "
                  f"seed={params['seed']!r} ({time.time() - start:.2f}s)")

    def erode(self, grid: HeightGrid, erosion_params: Optional[Dict[str, Any]] = None) -> ErosionStats:
        """
        Run droplet erosion over the grid.

        Args:
            grid: Grid holding an existing height field
            erosion_params: drop_count, seed, capacity, erosion_rate,
                deposition_rate, evaporation_rate, max_steps

        Returns:
            ErosionStats for the run
        """

        params = EROSION_SPEC.extract_params(erosion_params)

        start = time.time()
        stats = apply_erosion(grid, progress=self.progress, **params)

        if self.verbose:
            print(f"Erosion: {stats.drops} drops, {stats.steps} steps, "
                  f"eroded={stats.total_eroded:.4f} deposited={stats.total_deposited:.4f} "
                  f"({time.time() - start:.2f}s)")

        return stats

    def build_plane(self, plane_params: Optional[Dict[str, Any]] = None) -> HeightGrid:
        """Create a flat grid from width/height/segment parameters."""
        params = PLANE_SPEC.extract_params(plane_params)
        return HeightGrid.plane(**params)

    def build_terrain(
        self,
        plane_params: Optional[Dict[str, Any]] = None,
        fbm_params: Optional[Dict[str, Any]] = None,
        erosion_params: Optional[Dict[str, Any]] = None,
        erode: bool = True
    ) -> Tuple[HeightGrid, Optional[ErosionStats]]:
        """
        Build a fresh terrain: new plane, fBm pass, then erosion.

        Returns:
            Tuple of (grid, erosion stats or None when erosion is skipped)
        """

        grid = self.build_plane(plane_params)
        self.generate(grid, fbm_params)

        stats = None
        if erode:
            stats = self.erode(grid, erosion_params)

        return grid, stats

    def run_pipeline(
        self,
        grid: HeightGrid,
        steps: List[Tuple[str, Dict[str, Any]]]
    ) -> List[Any]:
        """
        Apply registered modules in sequence.

        Args:
            grid: Grid to mutate in place
            steps: List of (module_name, parameters) pairs

        Returns:
            Result of each module call, in order
        """

        results = []
        for module_name, parameters in steps:
            module_func = self.registry.get_module_function(module_name)
            results.append(module_func(grid, parameters))

        return results

    def validate_parameters(self, module_name: str, parameters: Dict[str, Any]) -> List[str]:
        """Report parameters outside the recommended ranges of a module."""
        param_spec = self.registry.get_parameter_spec(module_name)
        return param_spec.validate(parameters)

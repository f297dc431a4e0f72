"""
Fractal Brownian motion pass over a height grid.
"""

from ...engine.height_grid import HeightGrid
from .noise import NoiseField


def apply_fbm(
    grid: HeightGrid,
    octaves: int = 1,
    amplitude: float = 1.0,
    lacunarity: float = 2.0,
    gain: float = 0.5,
    scale: float = 1.0,
    max_height: float = 1.0,
    seed: str = "seed"
) -> HeightGrid:
    """
    Overwrite every vertex height with the fBm value at its (x, z).

    Previous heights are discarded, so repeated calls with the same
    parameters give the same field.

    Args:
        grid: Height grid to mutate in place
        octaves, amplitude, lacunarity, gain, scale, seed: NoiseField parameters
        max_height: Multiplier applied to the normalized noise value

    Returns:
        The same grid, for chaining
    """

    noise = NoiseField(octaves, amplitude, lacunarity, gain, scale, seed)

    if len(grid) == 0:
        return grid

    positions = grid.positions
    grid.heights[:] = noise.sample(positions[:, 0], positions[:, 2]) * max_height

    grid.mark_geometry_changed()
    return grid

"""
Erosion simulation for terrain generation.

Implements droplet-based hydraulic erosion: virtual water particles
trace a steepest-descent path over the 4-neighborhood of a height grid,
eroding and depositing sediment as they go.
"""

import math

import jax
import numpy as np
from typing import Dict, Optional
from tqdm import tqdm

from ...engine.height_grid import HeightGrid
from .noise import seed_to_key


class ErosionStats:
    """Bookkeeping for one erosion call."""

    def __init__(self):
        self.drops = 0
        self.steps = 0
        self.total_eroded = 0.0
        self.total_deposited = 0.0
        self.discarded_sediment = 0.0
        self.capped_traces = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "drops": self.drops,
            "steps": self.steps,
            "total_eroded": self.total_eroded,
            "total_deposited": self.total_deposited,
            "discarded_sediment": self.discarded_sediment,
            "capped_traces": self.capped_traces,
        }


def sample_start_indices(vertex_count: int, drop_count: int, seed: str) -> np.ndarray:
    """
    Draw droplet start vertices.

    Each of the drop_count draws is an independent uniform sample in
    [0, vertex_count - 1). A single-vertex grid always yields index 0.
    """

    if drop_count <= 0 or vertex_count == 0:
        return np.zeros(0, dtype=np.int64)

    key = seed_to_key(seed)
    upper = max(vertex_count - 1, 1)
    starts = jax.random.randint(key, (int(drop_count),), 0, upper)
    return np.asarray(starts).astype(np.int64)


def trace_droplet(
    grid: HeightGrid,
    start_index: int,
    capacity: float,
    erosion_rate: float,
    deposition_rate: float,
    evaporation_rate: float,
    max_steps: Optional[int] = None,
    stats: Optional[ErosionStats] = None
) -> int:
    """
    Run one droplet from start_index until it settles or runs dry.

    The droplet deposits everything it carries when it reaches a vertex with
    no lower neighbor. When its capacity drops below zero (or max_steps is
    reached) the remaining sediment is dropped without touching the grid.

    Args:
        grid: Height grid to mutate in place
        start_index: Vertex where the droplet lands
        capacity: Initial sediment capacity of this droplet
        erosion_rate: Scales material removed per step
        deposition_rate: Fraction of carried sediment laid down per step
        evaporation_rate: Per-step capacity multiplier (scaled by slope)
        max_steps: Upper bound on steps; defaults to the vertex count
        stats: Accumulator updated with this trace's totals

    Returns:
        Index of the vertex where the droplet stopped
    """

    if stats is None:
        stats = ErosionStats()
    if max_steps is None:
        max_steps = len(grid)

    positions = grid.positions
    current = int(start_index)
    sediment = 0.0
    steps = 0
    settled = False

    while capacity >= 0:
        if steps >= max_steps:
            stats.capped_traces += 1
            break
        steps += 1

        lowest = current
        for neighbor in grid.neighbors(current):
            if positions[neighbor, 1] < positions[lowest, 1]:
                lowest = neighbor

        dx = positions[current, 0] - positions[lowest, 0]
        dy = positions[current, 1] - positions[lowest, 1]
        dz = positions[current, 2] - positions[lowest, 2]
        length = math.sqrt(dx * dx + dy * dy + dz * dz)
        delta_y = dy / length if length > 0 else 0.0

        if delta_y <= 0:
            # Basin: lay down everything still carried
            positions[current, 1] += sediment
            stats.total_deposited += sediment
            sediment = 0.0
            settled = True
            break

        deposit = sediment * deposition_rate * delta_y
        erosion = min(erosion_rate * (1 - delta_y), delta_y)
        sediment += min(delta_y, erosion) - deposit

        capacity *= evaporation_rate * delta_y
        if sediment > capacity:
            deposit += sediment - capacity
            sediment = capacity
        else:
            capacity -= sediment

        positions[current, 1] -= erosion
        positions[current, 1] += deposit
        stats.total_eroded += erosion
        stats.total_deposited += deposit

        current = lowest

    if not settled:
        stats.discarded_sediment += sediment

    stats.steps += steps
    return current


def apply_erosion(
    grid: HeightGrid,
    drop_count: int = 1,
    seed: str = "seed",
    capacity: float = 30.0,
    erosion_rate: float = 1.0,
    deposition_rate: float = 1.0,
    evaporation_rate: float = 0.1,
    max_steps: Optional[int] = None,
    progress: bool = False
) -> ErosionStats:
    """
    Apply droplet hydraulic erosion to a height grid.

    Droplets run one after another, so each trace sees the terrain as
    left by the previous ones. Normals are recomputed once at the end.

    Args:
        grid: Height grid to mutate in place
        drop_count: Number of droplets
        seed: Seed string for droplet start positions
        capacity: Initial sediment capacity per droplet
        erosion_rate: Scales material removed per step
        deposition_rate: Fraction of carried sediment laid down per step
        evaporation_rate: Per-step capacity multiplier (scaled by slope)
        max_steps: Upper bound on steps per droplet (default: vertex count)
        progress: Show a tqdm progress bar

    Returns:
        ErosionStats for the whole call
    """

    stats = ErosionStats()
    starts = sample_start_indices(len(grid), drop_count, seed)

    if len(starts) == 0:
        return stats

    for start in tqdm(starts, desc="Eroding", unit="drop", disable=not progress):
        trace_droplet(
            grid, int(start),
            capacity=capacity,
            erosion_rate=erosion_rate,
            deposition_rate=deposition_rate,
            evaporation_rate=evaporation_rate,
            max_steps=max_steps,
            stats=stats
        )
        stats.drops += 1

    grid.mark_geometry_changed()
    return stats

"""
Row-major grid of vertex positions used as the terrain height buffer.

Stands in for the renderer's plane mesh: x and z are laid out once at
construction, generators only ever touch the y component.
"""

import numpy as np
from typing import List, Optional


class HeightGrid:
    """
    Contiguous (N, 3) array of (x, y, z) vertex positions.

    Vertices are addressed by index; neighbor lookup is index arithmetic
    over the row width, with no row-wrap handling.
    """

    def __init__(self, positions: np.ndarray, row_width: int):
        """
        Initialize height grid.

        Args:
            positions: Array of shape (N, 3) holding x, y, z per vertex
            row_width: Number of vertices per row
        """

        positions = np.array(positions, dtype=np.float64)
        if positions.size == 0:
            positions = positions.reshape(0, 3)

        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {positions.shape}")

        count = positions.shape[0]
        if count > 0:
            if row_width < 1:
                raise ValueError(f"row_width must be >= 1, got {row_width}")
            if count % row_width != 0:
                raise ValueError(f"{count} vertices do not fill rows of width {row_width}")

        self.positions = positions
        self.row_width = int(row_width)
        self.normals = np.zeros_like(positions)
        self.needs_update = False
        self.version = 0

    @classmethod
    def plane(
        cls,
        width: float = 100.0,
        height: float = 100.0,
        width_segments: int = 100,
        height_segments: int = 100
    ) -> "HeightGrid":
        """
        Build a flat horizontal plane centred on the origin.

        Row iy runs along x at z = iy * height / height_segments - height / 2.
        """

        if width_segments < 1 or height_segments < 1:
            raise ValueError(
                f"segments must be >= 1, got {width_segments}x{height_segments}"
            )

        grid_x1 = int(width_segments) + 1
        grid_y1 = int(height_segments) + 1
        segment_width = width / width_segments
        segment_height = height / height_segments

        xs = np.arange(grid_x1) * segment_width - width / 2
        zs = np.arange(grid_y1) * segment_height - height / 2
        X, Z = np.meshgrid(xs, zs, indexing='xy')

        positions = np.stack(
            [X.ravel(), np.zeros(X.size), Z.ravel()], axis=1
        )

        grid = cls(positions, grid_x1)
        grid.compute_vertex_normals()
        return grid

    def __len__(self) -> int:
        return self.positions.shape[0]

    @property
    def vertex_count(self) -> int:
        return self.positions.shape[0]

    @property
    def rows(self) -> int:
        return self.vertex_count // self.row_width if self.vertex_count else 0

    @property
    def heights(self) -> np.ndarray:
        """Writable view of the y column."""
        return self.positions[:, 1]

    def get_y(self, index: int) -> float:
        return float(self.positions[index, 1])

    def set_y(self, index: int, value: float):
        self.positions[index, 1] = value

    def neighbors(self, index: int) -> List[int]:
        """North, south, west and east neighbors that fall inside the buffer."""

        count = self.vertex_count
        candidates = (
            index - self.row_width,
            index + self.row_width,
            index - 1,
            index + 1,
        )
        return [n for n in candidates if 0 <= n < count]

    def as_heightmap(self) -> np.ndarray:
        """Heights reshaped to (rows, row_width)."""
        return self.heights.reshape(self.rows, self.row_width)

    def _face_indices(self) -> Optional[np.ndarray]:
        """Two triangles per cell, wound (a, b, d) and (b, c, d)."""

        rows, cols = self.rows, self.row_width
        if rows < 2 or cols < 2:
            return None

        iy, ix = np.meshgrid(np.arange(rows - 1), np.arange(cols - 1), indexing='ij')
        a = (ix + cols * iy).ravel()
        b = (ix + cols * (iy + 1)).ravel()
        c = ((ix + 1) + cols * (iy + 1)).ravel()
        d = ((ix + 1) + cols * iy).ravel()

        return np.concatenate([
            np.stack([a, b, d], axis=1),
            np.stack([b, c, d], axis=1),
        ])

    def compute_vertex_normals(self) -> np.ndarray:
        """Recompute area-weighted vertex normals from the grid triangles."""

        normals = np.zeros_like(self.positions)
        faces = self._face_indices()

        if faces is not None:
            p_a = self.positions[faces[:, 0]]
            p_b = self.positions[faces[:, 1]]
            p_c = self.positions[faces[:, 2]]
            face_normals = np.cross(p_c - p_b, p_a - p_b)

            for corner in range(3):
                np.add.at(normals, faces[:, corner], face_normals)

        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        np.divide(normals, lengths, out=normals, where=lengths > 0)

        self.normals = normals
        return normals

    def mark_geometry_changed(self):
        """Recompute normals and flag the position buffer for re-upload."""
        self.compute_vertex_normals()
        self.needs_update = True
        self.version += 1

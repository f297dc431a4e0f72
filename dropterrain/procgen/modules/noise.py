"""
Noise functions for terrain generation.

JAX-based implementations:
- Seeded 2D simplex noise (the gradient-noise primitive)
- NoiseField: fractal Brownian motion (fBm) over the simplex primitive
"""

import hashlib
import math

import jax
import jax.numpy as jnp
import numpy as np
from typing import Union

from ..grammar import InvalidConfiguration

ArrayLike = Union[float, np.ndarray, jnp.ndarray]

F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

# x/y components of the 12 edge gradients of classic simplex noise
GRAD2 = jnp.array([
    [1.0, 1.0], [-1.0, 1.0], [1.0, -1.0], [-1.0, -1.0],
    [1.0, 0.0], [-1.0, 0.0], [1.0, 0.0], [-1.0, 0.0],
    [0.0, 1.0], [0.0, -1.0], [0.0, 1.0], [0.0, -1.0],
], dtype=jnp.float32)


def seed_to_int(seed: str) -> int:
    """Hash a seed string to a non-negative 31-bit integer."""
    seed_hash = hashlib.md5(str(seed).encode()).hexdigest()
    # Convert first 8 hex chars to int
    return int(seed_hash[:8], 16) % (2**31 - 1)


def seed_to_key(seed: str) -> jnp.ndarray:
    """Build a JAX PRNG key from a seed string."""
    return jax.random.PRNGKey(seed_to_int(seed))


def permutation_table(seed: str) -> jnp.ndarray:
    """
    Build the doubled 512-entry permutation table for a seed.

    The second half repeats the first so lookups of the form
    perm[i + perm[j]] never need wrapping.
    """
    p = jax.random.permutation(seed_to_key(seed), 256).astype(jnp.int32)
    return jnp.concatenate([p, p])


def _corner(gi: jnp.ndarray, x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    """Contribution of one simplex corner."""
    t = 0.5 - x * x - y * y
    g = GRAD2[gi]
    t2 = t * t
    return jnp.where(t < 0.0, 0.0, t2 * t2 * (g[..., 0] * x + g[..., 1] * y))


@jax.jit
def simplex2d(perm: jnp.ndarray, x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    """
    2D simplex noise.

    Args:
        perm: Permutation table from permutation_table()
        x, y: Coordinate arrays (any matching shape)

    Returns:
        Noise values in range approximately [-1, 1]
    """

    # Skew input space to find the simplex cell
    s = (x + y) * F2
    i = jnp.floor(x + s)
    j = jnp.floor(y + s)

    # Unskew back to get the cell origin offset
    t = (i + j) * G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the cell
    i1 = jnp.where(x0 > y0, 1.0, 0.0)
    j1 = 1.0 - i1

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 - 1.0 + 2.0 * G2
    y2 = y0 - 1.0 + 2.0 * G2

    ii = i.astype(jnp.int32) & 255
    jj = j.astype(jnp.int32) & 255
    ii1 = i1.astype(jnp.int32)
    jj1 = j1.astype(jnp.int32)

    gi0 = perm[ii + perm[jj]] % 12
    gi1 = perm[ii + ii1 + perm[jj + jj1]] % 12
    gi2 = perm[ii + 1 + perm[jj + 1]] % 12

    n0 = _corner(gi0, x0, y0)
    n1 = _corner(gi1, x1, y1)
    n2 = _corner(gi2, x2, y2)

    # Scale so the result covers [-1, 1]
    return 70.0 * (n0 + n1 + n2)


class NoiseField:
    """
    Seeded fractal Brownian motion over 2D simplex noise.

    The field is a pure function of the parameters given at construction:
    the same parameters and coordinates always give the same value.
    """

    def __init__(
        self,
        octaves: int = 1,
        amplitude: float = 1.0,
        lacunarity: float = 2.0,
        gain: float = 0.5,
        scale: float = 1.0,
        seed: str = "seed"
    ):
        """
        Initialize noise field.

        Args:
            octaves: Number of noise layers to sum (>= 1)
            amplitude: Amplitude of the first octave
            lacunarity: Frequency multiplier per octave
            gain: Amplitude multiplier per octave
            scale: Divisor applied to input coordinates (non-zero)
            seed: Seed string for the simplex permutation table
        """

        if octaves < 1:
            raise InvalidConfiguration(f"octaves must be >= 1, got {octaves}")
        if scale == 0:
            raise InvalidConfiguration("scale must be non-zero")

        total_amplitude = sum(amplitude * gain ** i for i in range(int(octaves)))
        if total_amplitude == 0:
            raise InvalidConfiguration("summed octave amplitude must be non-zero")

        self.octaves = int(octaves)
        self.amplitude = amplitude
        self.lacunarity = lacunarity
        self.gain = gain
        self.scale = scale
        self.set_seed(seed)

    def set_seed(self, seed: str):
        """Replace the simplex primitive with one keyed by a new seed."""
        self.seed = seed
        self._perm = permutation_table(seed)

    def primitive(self, x: ArrayLike, z: ArrayLike) -> np.ndarray:
        """Raw simplex value at (x, z), without scaling or octaves."""
        x = jnp.asarray(x, dtype=jnp.float32)
        z = jnp.asarray(z, dtype=jnp.float32)
        return np.asarray(simplex2d(self._perm, x, z))

    def sample(self, xs: ArrayLike, zs: ArrayLike) -> np.ndarray:
        """
        Evaluate the fBm field element-wise.

        Args:
            xs, zs: Coordinate arrays of matching shape

        Returns:
            Array of noise values, normalized by the summed octave amplitudes
        """

        x = jnp.asarray(xs, dtype=jnp.float32) / self.scale
        z = jnp.asarray(zs, dtype=jnp.float32) / self.scale

        frequency = 1.0
        amplitude = self.amplitude
        total = jnp.zeros_like(x)
        total_amplitude = 0.0

        for _ in range(self.octaves):
            total = total + simplex2d(self._perm, x * frequency, z * frequency) * amplitude
            total_amplitude += amplitude
            amplitude *= self.gain
            frequency *= self.lacunarity

        return np.asarray(total / total_amplitude)

    def get_value(self, x: float, z: float) -> float:
        """fBm value at a single (x, z) coordinate."""
        return float(self.sample(x, z))

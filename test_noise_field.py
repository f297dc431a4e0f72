"""
Tests for the seeded simplex primitive and the fBm NoiseField.
"""

import numpy as np
import pytest

from dropterrain.procgen import NoiseField, InvalidConfiguration
from dropterrain.procgen.modules.noise import permutation_table, seed_to_int


POINTS = [(12.3, -45.6), (-7.25, 3.5), (101.1, 0.4), (0.37, 88.8)]


def test_same_parameters_give_same_values():
    """Repeated calls and fresh instances agree exactly."""

    noise_a = NoiseField(octaves=6, amplitude=15, lacunarity=2, gain=0.5, scale=100, seed="alpha")
    noise_b = NoiseField(octaves=6, amplitude=15, lacunarity=2, gain=0.5, scale=100, seed="alpha")

    for x, z in POINTS:
        first = noise_a.get_value(x, z)
        assert noise_a.get_value(x, z) == first
        assert noise_b.get_value(x, z) == first


def test_different_seeds_give_different_fields():
    noise_a = NoiseField(octaves=4, scale=10, seed="alpha")
    noise_b = NoiseField(octaves=4, scale=10, seed="beta")

    values_a = [noise_a.get_value(x, z) for x, z in POINTS]
    values_b = [noise_b.get_value(x, z) for x, z in POINTS]

    assert values_a != values_b


def test_seed_hash_is_stable():
    assert seed_to_int("seed") == seed_to_int("seed")
    assert seed_to_int("seed") != seed_to_int("seed2")
    assert 0 <= seed_to_int("anything") < 2**31 - 1


def test_permutation_table_is_doubled_permutation():
    perm = np.asarray(permutation_table("seed"))

    assert perm.shape == (512,)
    assert sorted(perm[:256].tolist()) == list(range(256))
    assert np.array_equal(perm[:256], perm[256:])


def test_single_octave_equals_raw_primitive():
    """Amplitude cancels out through the total amplitude division."""

    noise = NoiseField(octaves=1, amplitude=15, lacunarity=2, gain=0.5, scale=100, seed="seed")

    for x, z in POINTS:
        expected = float(noise.primitive(x / 100, z / 100))
        assert noise.get_value(x, z) == pytest.approx(expected, rel=1e-5, abs=1e-6)


def test_values_stay_in_unit_range():
    noise = NoiseField(octaves=8, amplitude=15, lacunarity=2, gain=0.5, scale=10, seed="range")

    xs, zs = np.meshgrid(np.linspace(-50, 50, 64), np.linspace(-50, 50, 64))
    values = noise.sample(xs, zs)

    assert values.shape == xs.shape
    assert np.all(np.abs(values) <= 1.0)
    assert values.std() > 0.01


def test_sample_matches_get_value():
    noise = NoiseField(octaves=3, scale=25, seed="vector")

    xs = np.array([p[0] for p in POINTS])
    zs = np.array([p[1] for p in POINTS])
    values = noise.sample(xs, zs)

    for value, (x, z) in zip(values, POINTS):
        assert value == pytest.approx(noise.get_value(x, z), abs=1e-6)


def test_set_seed_replaces_primitive():
    reseeded = NoiseField(octaves=4, scale=10, seed="first")
    reseeded.set_seed("second")
    fresh = NoiseField(octaves=4, scale=10, seed="second")

    for x, z in POINTS:
        assert reseeded.get_value(x, z) == fresh.get_value(x, z)
    assert reseeded.seed == "second"


def test_noise_is_continuous():
    noise = NoiseField(octaves=1, scale=1, seed="smooth")

    base = noise.get_value(3.3, 4.4)
    nearby = noise.get_value(3.3 + 1e-3, 4.4)

    assert abs(base - nearby) < 0.05


def test_zero_octaves_rejected():
    with pytest.raises(InvalidConfiguration):
        NoiseField(octaves=0)


def test_zero_scale_rejected():
    with pytest.raises(InvalidConfiguration):
        NoiseField(octaves=2, scale=0)


def test_invalid_configuration_is_value_error():
    with pytest.raises(ValueError):
        NoiseField(octaves=-1)


def test_zero_amplitude_rejected():
    with pytest.raises(InvalidConfiguration):
        NoiseField(octaves=4, amplitude=0, scale=10)


def test_cancelling_octave_amplitudes_rejected():
    with pytest.raises(InvalidConfiguration):
        NoiseField(octaves=2, amplitude=1, gain=-1, scale=10)


def test_zero_gain_keeps_first_octave():
    noise = NoiseField(octaves=3, amplitude=2, gain=0, scale=10, seed="flat")
    single = NoiseField(octaves=1, amplitude=2, scale=10, seed="flat")

    for x, z in POINTS:
        assert noise.get_value(x, z) == pytest.approx(single.get_value(x, z), abs=1e-6)

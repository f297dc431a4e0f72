"""
Tests for the TerrainEngine facade, parameter grammar, analyzer and CLI.
"""

import json

import numpy as np
import pytest

from dropterrain import TerrainEngine, HeightGrid, HeightmapAnalyzer, InvalidConfiguration
from dropterrain.generate import main
from dropterrain.procgen import FBM_SPEC, EROSION_SPEC, PLANE_SPEC, ParameterSpec


SMALL_PLANE = {"width": 30, "height": 30, "width_segments": 15, "height_segments": 15}
SMALL_FBM = {"octaves": 4, "scale": 15, "max_height": 8, "seed": "engine"}


def test_extract_params_fills_defaults():
    params = FBM_SPEC.extract_params({"octaves": 3, "unknown": 1})

    assert params["octaves"] == 3
    assert params["amplitude"] == 15.0
    assert params["seed"] == "seed"
    assert "unknown" not in params


def test_default_parameters_match_control_panel():
    assert PLANE_SPEC.get_defaults() == {
        "width": 100.0, "height": 100.0, "width_segments": 100, "height_segments": 100
    }
    assert EROSION_SPEC.get_defaults()["drop_count"] == 1
    assert EROSION_SPEC.get_defaults()["evaporation_rate"] == 0.1
    assert EROSION_SPEC.get_defaults()["max_steps"] is None


def test_validate_reports_out_of_range_values():
    spec = ParameterSpec({"a": (0, 1, 0.5), "name": (None, None, "x")})

    assert spec.validate({"a": 0.5, "name": "y"}) == []
    errors = spec.validate({"a": 2})
    assert len(errors) == 1
    assert "a=2" in errors[0]


def test_generate_then_erode():
    engine = TerrainEngine()
    grid = engine.build_plane(SMALL_PLANE)

    engine.generate(grid, SMALL_FBM)
    generated = grid.heights.copy()
    stats = engine.erode(grid, {"drop_count": 50, "seed": "rain"})

    assert len(grid) == 16 * 16
    assert generated.std() > 0
    assert stats.drops == 50
    assert not np.array_equal(grid.heights, generated)
    assert grid.version == 2


def test_generate_rejects_invalid_octaves():
    engine = TerrainEngine()
    grid = engine.build_plane(SMALL_PLANE)

    with pytest.raises(InvalidConfiguration):
        engine.generate(grid, {"octaves": 0})


def test_build_terrain_is_deterministic():
    engine = TerrainEngine()
    erosion = {"drop_count": 40, "seed": "storm"}

    grid_a, stats_a = engine.build_terrain(SMALL_PLANE, SMALL_FBM, erosion)
    grid_b, stats_b = engine.build_terrain(SMALL_PLANE, SMALL_FBM, erosion)

    assert np.array_equal(grid_a.positions, grid_b.positions)
    assert stats_a.to_dict() == stats_b.to_dict()


def test_build_terrain_without_erosion():
    engine = TerrainEngine()

    grid, stats = engine.build_terrain(SMALL_PLANE, SMALL_FBM, erode=False)

    assert stats is None
    assert grid.version == 1


def test_run_pipeline_applies_modules_in_order():
    engine = TerrainEngine()
    grid = engine.build_plane(SMALL_PLANE)

    results = engine.run_pipeline(grid, [
        ("fbm", SMALL_FBM),
        ("hydraulic_erosion", {"drop_count": 10, "seed": "pipe"}),
    ])

    expected = engine.build_plane(SMALL_PLANE)
    engine.generate(expected, SMALL_FBM)
    engine.erode(expected, {"drop_count": 10, "seed": "pipe"})

    assert results[0] is None
    assert results[1].drops == 10
    assert np.array_equal(grid.heights, expected.heights)


def test_run_pipeline_unknown_module():
    engine = TerrainEngine()
    grid = engine.build_plane(SMALL_PLANE)

    with pytest.raises(KeyError):
        engine.run_pipeline(grid, [("thermal_erosion", {})])


def test_registry_lists_builtin_modules():
    engine = TerrainEngine()

    assert engine.registry.list_modules() == [(0, "fbm"), (1, "hydraulic_erosion")]
    assert engine.registry.get_parameter_spec("fbm") is FBM_SPEC


def test_verbose_engine_prints_summary(capsys):
    engine = TerrainEngine(verbose=True)
    grid = engine.build_plane(SMALL_PLANE)

    engine.generate(grid, SMALL_FBM)
    engine.erode(grid, {"drop_count": 5})

    output = capsys.readouterr().out
    assert "fBm: 256 vertices" in output
    assert "Erosion: 5 drops" in output


def test_analyzer_reports_statistics():
    grid = HeightGrid.plane(2, 2, 2, 2)
    grid.heights[:] = [5, 5, 5, 5, 0, 5, 5, 5, 5]

    analysis = HeightmapAnalyzer().analyze(grid)

    assert analysis["elevation_stats"]["min"] == 0.0
    assert analysis["elevation_stats"]["max"] == 5.0
    assert analysis["elevation_stats"]["sum"] == 40.0
    assert analysis["feature_detection"]["pits_detected"] == 1
    assert analysis["slope_analysis"]["max_slope"] > 0
    assert analysis["analysis_metadata"]["heightmap_shape"] == (3, 3)


def test_analyzer_handles_empty_grid():
    analysis = HeightmapAnalyzer().analyze(HeightGrid(np.zeros((0, 3)), 0))

    assert analysis["analysis_metadata"]["vertex_count"] == 0
    assert analysis["feature_detection"]["pits_detected"] == 0


def test_cli_json_output(capsys):
    main([
        "--plane-width-segments", "10", "--plane-height-segments", "10",
        "--fbm-octaves", "3", "--fbm-seed", "cli",
        "--erosion-drop-count", "20",
        "--json",
    ])

    analysis = json.loads(capsys.readouterr().out)

    assert analysis["analysis_metadata"]["vertex_count"] == 121
    assert analysis["erosion"]["drops"] == 20


def test_cli_text_output_warns_on_ranges(capsys):
    main([
        "--plane-width-segments", "8", "--plane-height-segments", "8",
        "--erosion-evaporation-rate", "1.5",
        "--no-erosion",
    ])

    output = capsys.readouterr().out
    assert "Warning [hydraulic_erosion]: evaporation_rate=1.5" in output
    assert "Terrain generated" in output


def test_build_plane_rejects_zero_segments():
    engine = TerrainEngine()

    with pytest.raises(ValueError):
        engine.build_plane({"width_segments": 0})


def test_generate_rejects_zero_amplitude():
    engine = TerrainEngine()
    grid = engine.build_plane(SMALL_PLANE)

    with pytest.raises(InvalidConfiguration):
        engine.generate(grid, {"amplitude": 0})

    assert grid.version == 0
    assert not np.isnan(grid.heights).any()


def test_cli_reports_bad_plane_without_traceback(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--plane-width-segments", "0", "--no-erosion"])

    captured = capsys.readouterr()
    assert exc_info.value.code == 2
    assert "Warning [plane]: width_segments=0 is below minimum 1" in captured.out
    assert "segments must be >= 1" in captured.err

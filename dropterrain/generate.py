"""
Command line terrain generation.

Builds a plane, applies fBm and droplet erosion, and prints a summary
of the resulting surface.
"""

import argparse
import json
import time
from typing import Dict, Any, List, Optional

from .engine import HeightmapAnalyzer
from .procgen import TerrainEngine, PLANE_SPEC, FBM_SPEC, EROSION_SPEC


def _add_spec_arguments(parser: argparse.ArgumentParser, spec, group_name: str):
    """Expose every parameter of a spec as a --flag with its default."""

    group = parser.add_argument_group(group_name)
    ranges = spec.get_param_ranges()

    for name, default in spec.get_defaults().items():
        min_val, max_val = ranges[name]
        flag = f"--{group_name}-{name.replace('_', '-')}"
        arg_type = type(default) if default is not None else int
        help_text = f"default: {default}"
        if min_val is not None or max_val is not None:
            help_text += f", range: [{min_val}, {max_val}]"
        group.add_argument(flag, dest=f"{group_name}_{name}", type=arg_type,
                           default=default, help=help_text)


def _collect(args: argparse.Namespace, spec, group_name: str) -> Dict[str, Any]:
    return {name: getattr(args, f"{group_name}_{name}") for name in spec.get_param_names()}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate eroded fBm terrain")
    _add_spec_arguments(parser, PLANE_SPEC, "plane")
    _add_spec_arguments(parser, FBM_SPEC, "fbm")
    _add_spec_arguments(parser, EROSION_SPEC, "erosion")
    parser.add_argument("--no-erosion", action="store_true", help="Skip the erosion pass")
    parser.add_argument("--progress", action="store_true", help="Show erosion progress bar")
    parser.add_argument("--json", action="store_true", help="Print analysis as JSON only")
    return parser


def main(argv: Optional[List[str]] = None):
    """CLI entry point for terrain generation."""

    parser = build_parser()
    args = parser.parse_args(argv)

    plane_params = _collect(args, PLANE_SPEC, "plane")
    fbm_params = _collect(args, FBM_SPEC, "fbm")
    erosion_params = _collect(args, EROSION_SPEC, "erosion")

    engine = TerrainEngine(verbose=not args.json, progress=args.progress)

    if not args.json:
        for warning in PLANE_SPEC.validate(plane_params):
            print(f"Warning [plane]: {warning}")
        for module_name, params in (("fbm", fbm_params), ("hydraulic_erosion", erosion_params)):
            for warning in engine.validate_parameters(module_name, params):
                print(f"Warning [{module_name}]: {warning}")

    start = time.time()
    try:
        grid, stats = engine.build_terrain(
            plane_params, fbm_params, erosion_params, erode=not args.no_erosion
        )
    except ValueError as e:
        parser.error(str(e))
    analysis = HeightmapAnalyzer().analyze(grid)

    if args.json:
        analysis["erosion"] = stats.to_dict() if stats is not None else None
        print(json.dumps(analysis, default=float))
        return

    elevation = analysis["elevation_stats"]
    slopes = analysis["slope_analysis"]
    print(f"\nTerrain generated in {time.time() - start:.2f}s")
    print(f"  Grid: {analysis['analysis_metadata']['heightmap_shape']}")
    print(f"  Elevation: {elevation['min']:.3f} to {elevation['max']:.3f} (mean {elevation['mean']:.3f})")
    print(f"  Slope: max {slopes['max_slope']:.3f}, mean {slopes['mean_slope']:.3f}")
    print(f"  Pits: {analysis['feature_detection']['pits_detected']}")


if __name__ == "__main__":
    main()

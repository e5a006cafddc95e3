"""
Command-Line Interface

CLI for generating procedural trees and exporting their meshes.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from arbor_policies import GrowthConfig, TreeMeshPolicy, TubeMeshPolicy, JunctionBlendPolicy, FoliagePolicy
from .api import generate_tree_mesh, save_mesh_group, write_report
from .core.branch import tree_metrics
from .ops.growth import generate_tree


def _add_growth_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="JSON file with growth settings, optional trunk origin/direction and 'mesh' policy; flags override it",
    )
    parser.add_argument("--levels", "-l", type=int, default=None, help="Recursion depth (default: 2)")
    parser.add_argument("--children", "-k", type=int, default=None, help="Branches per node (default: 2)")
    parser.add_argument("--length", type=float, default=None, help="Trunk length (default: 10)")
    parser.add_argument("--radius", type=float, default=None, help="Trunk radius (default: 1)")
    parser.add_argument("--angle", type=float, default=None, help="Base spread angle in degrees (default: 30)")
    parser.add_argument("--randomness", type=float, default=None, help="Jitter scale in [0, 1] (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")


def _load_config_file(path: Optional[str]) -> dict:
    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _growth_config(args: argparse.Namespace, data: dict) -> GrowthConfig:
    values = {k: v for k, v in data.items() if k != "mesh"}
    overrides = {
        "levels": args.levels,
        "child_count": args.children,
        "base_length": args.length,
        "base_radius": args.radius,
        "branch_angle_deg": args.angle,
        "randomness": args.randomness,
        "seed": args.seed,
    }
    config = GrowthConfig.from_dict(values)
    merged = config.to_dict()
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return GrowthConfig.from_dict(merged)


def _mesh_policy(args: argparse.Namespace, data: dict) -> TreeMeshPolicy:
    policy = TreeMeshPolicy.from_dict(data.get("mesh", {}))
    tube = policy.tube
    return TreeMeshPolicy(
        tube=TubeMeshPolicy.from_dict({
            **tube.to_dict(),
            **({"ring_segments": args.ring_segments} if args.ring_segments is not None else {}),
            **({"path_steps": args.path_steps} if args.path_steps is not None else {}),
        }),
        junction=JunctionBlendPolicy.from_dict({
            **policy.junction.to_dict(),
            "enabled": policy.junction.enabled and not args.no_junctions,
            **({"resolution": args.junction_resolution} if args.junction_resolution is not None else {}),
        }),
        foliage=FoliagePolicy.from_dict({
            **policy.foliage.to_dict(),
            "enabled": policy.foliage.enabled and not args.no_leaves,
            **({"leaf_size": args.leaf_size} if args.leaf_size is not None else {}),
        }),
        geometry_backend=policy.geometry_backend,
        isosurface_backend=policy.isosurface_backend,
        trunk_color=policy.trunk_color,
        branch_color=policy.branch_color,
        leaf_color=policy.leaf_color,
        junction_color=policy.junction_color,
    )


def cmd_generate(args: argparse.Namespace) -> int:
    data = _load_config_file(args.config)
    config = _growth_config(args, data)
    policy = _mesh_policy(args, data)

    try:
        _, group, report = generate_tree_mesh(
            config,
            policy,
            origin=data.get("origin", (0.0, 0.0, 0.0)),
            direction=data.get("direction", (0.0, 1.0, 0.0)),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        if len(group) == 0:
            print("Error: no geometry was produced; nothing to export", file=sys.stderr)
            return 1
        save_mesh_group(group, args.output)
    if args.report:
        write_report(report, args.report)

    meta = report.metadata
    print(
        f"seed={meta['seed']} nodes={meta['tree']['node_count']} "
        f"tubes={meta['tube_count']} junctions={meta['junction_count']} "
        f"leaves={meta['leaf_count']} triangles={meta['triangle_count']}"
    )
    for warning in report.warnings:
        print(f"warning: {warning}", file=sys.stderr)

    return 0 if report.success else 1


def cmd_info(args: argparse.Namespace) -> int:
    data = _load_config_file(args.config)
    config = _growth_config(args, data)

    try:
        root = generate_tree(
            config,
            origin=data.get("origin", (0.0, 0.0, 0.0)),
            direction=data.get("direction", (0.0, 1.0, 0.0)),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(tree_metrics(root), indent=2))
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="arborgen",
        description="arborgen - procedural branching trees and their meshes",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Grow a tree and build its mesh")
    _add_growth_arguments(gen_parser)
    gen_parser.add_argument("--ring-segments", type=int, default=None, help="Vertices per tube ring (default: 24)")
    gen_parser.add_argument("--path-steps", type=int, default=None, help="Rings per tube minus one (default: 24)")
    gen_parser.add_argument("--junction-resolution", type=int, default=None, help="Metaball grid size (default: 64)")
    gen_parser.add_argument("--leaf-size", type=float, default=None, help="Leaf quad edge length (default: 2)")
    gen_parser.add_argument("--no-junctions", action="store_true", help="Skip metaball junction blending")
    gen_parser.add_argument("--no-leaves", action="store_true", help="Skip leaf placement")
    gen_parser.add_argument("--output", "-O", type=str, default=None, help="Mesh file (.glb, .obj, .ply, .stl, .off)")
    gen_parser.add_argument("--report", type=str, default=None, help="Write the operation report as JSON")

    info_parser = subparsers.add_parser("info", help="Grow a tree and print structural metrics")
    _add_growth_arguments(info_parser)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "generate":
        return cmd_generate(args)
    if args.command == "info":
        return cmd_info(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

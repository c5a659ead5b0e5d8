from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Sequence

from shapefix.geometry.hull import closed_hull
from shapefix.geometry.policy import RepairPolicy
from shapefix.geometry.primitives import Shape2D, ShapeInputError
from shapefix.geometry.repair import repair_shape
from shapefix.geometry.validity import validate_shape
from shapefix.log import setup_logging


_DEMO_SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]
_DEMO_TRAILING_DUPLICATE = [(0, 0), (1, 0), (1, 1), (0, 1), (0, 0), (1, 1)]


def parse_points(tokens: Sequence[str]) -> Shape2D:
    coords: List[tuple[int, int]] = []
    for tok in tokens:
        parts = tok.split(",")
        if len(parts) != 2:
            raise ShapeInputError(f"Expected 'x,y', got {tok!r}")
        try:
            coords.append((int(parts[0]), int(parts[1])))
        except ValueError as exc:
            raise ShapeInputError(f"Coordinates must be integers, got {tok!r}") from exc
    return Shape2D.from_coords(coords)


def format_points(shape: Shape2D) -> str:
    return " ".join(f"{p.x},{p.y}" for p in shape)


def _load(args: argparse.Namespace) -> Shape2D | None:
    try:
        return parse_points(args.points)
    except ShapeInputError as exc:
        print(f"[ERROR] {exc}")
        return None


def _cmd_check(args: argparse.Namespace) -> int:
    shape = _load(args)
    if shape is None:
        return 2
    report = validate_shape(shape)
    if args.json:
        print(json.dumps(report.to_dict(), sort_keys=True))
    elif report.valid:
        print(f"valid (signed area x2 = {report.signed_area})")
    else:
        print(f"invalid: {report.reason}")
    return 0 if report.valid else 1


def _cmd_repair(args: argparse.Namespace) -> int:
    shape = _load(args)
    if shape is None:
        return 2
    policy = RepairPolicy(
        scan_all_intersections=bool(args.scan_all),
        allow_pair_removal=not args.no_pair_removal,
        hull_fallback=not args.no_hull,
    )
    outcome = repair_shape(shape, policy)
    if args.json:
        print(json.dumps(outcome.to_dict(), sort_keys=True))
        return 0 if outcome.ok else 1

    if outcome.ok:
        print(f"repaired ({outcome.report.stage}): {format_points(outcome.shape)}")
    else:
        print(f"unrepairable: {outcome.reason}")
    for action in outcome.report.actions:
        print(f"  - {action.action} {json.dumps(action.details, sort_keys=True)}")
    return 0 if outcome.ok else 1


def _cmd_hull(args: argparse.Namespace) -> int:
    shape = _load(args)
    if shape is None:
        return 2
    hull = closed_hull(dict.fromkeys(shape.points))
    if hull.is_empty:
        print("degenerate hull (fewer than 3 non-collinear points)")
        return 1
    print(format_points(hull))
    return 0


def _cmd_plot(args: argparse.Namespace) -> int:
    # matplotlib is only needed here
    from shapefix.plotting.plots import plot_repair

    shape = _load(args)
    if shape is None:
        return 2
    outpath = Path(args.out).expanduser().resolve()
    outcome = repair_shape(shape)
    plot_repair(shape, outcome.shape, outpath)
    print(f"Saved: {outpath}")
    return 0


def _cmd_demo(args: argparse.Namespace) -> int:
    square = Shape2D.from_coords(_DEMO_SQUARE)
    print(f"Is the shape valid? {validate_shape(square).valid}")

    broken = Shape2D.from_coords(_DEMO_TRAILING_DUPLICATE)
    print(f"Is the shape valid? {validate_shape(broken).valid}")
    outcome = repair_shape(broken)
    print(f"Repaired shape: {format_points(outcome.shape) or '(empty)'}")
    return 0


def _add_points(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "points",
        nargs="+",
        help="Ring vertices as x,y tokens (put '--' first when a token starts with '-')",
    )


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="shapefix")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("check", help="Report whether a ring is a valid simple polygon.")
    _add_points(c)
    c.add_argument("--json", action="store_true", help="Print the validity report as JSON")
    c.set_defaults(func=_cmd_check)

    r = sub.add_parser("repair", help="Repair a ring into a valid polygon, if possible.")
    _add_points(r)
    r.add_argument("--json", action="store_true", help="Print the repair outcome as JSON")
    r.add_argument("--scan-all", action="store_true", help="Try every intersecting edge pair per pass")
    r.add_argument("--no-pair-removal", action="store_true", help="Only delete single vertices")
    r.add_argument("--no-hull", action="store_true", help="Disable the convex hull fallback")
    r.set_defaults(func=_cmd_repair)

    h = sub.add_parser("hull", help="Print the closed convex hull of the points.")
    _add_points(h)
    h.set_defaults(func=_cmd_hull)

    pl = sub.add_parser("plot", help="Save a PNG of the ring before and after repair.")
    _add_points(pl)
    pl.add_argument("--out", default="out/shapefix_repair.png", help="Output PNG path")
    pl.set_defaults(func=_cmd_plot)

    d = sub.add_parser("demo", help="Validate and repair two sample rings.")
    d.set_defaults(func=_cmd_demo)

    args = p.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())

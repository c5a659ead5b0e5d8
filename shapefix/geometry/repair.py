from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable, List, Optional, Sequence, Tuple

from shapefix.core.hashing import shape_digest
from shapefix.geometry.hull import closed_hull
from shapefix.geometry.kernel import signed_area
from shapefix.geometry.policy import DEFAULT_REPAIR_POLICY, RepairPolicy
from shapefix.geometry.primitives import Point2D, Shape2D
from shapefix.geometry.validity import MIN_RING_POINTS, find_intersecting_edges, is_valid
from shapefix.models.repair import (
    FailureReason,
    RepairAction,
    RepairOutcome,
    RepairReport,
    RepairStage,
    Repaired,
    Unrepairable,
)

logger = logging.getLogger(__name__)

Trial = Tuple[Tuple[int, ...], List[Point2D]]


def close_ring(points: Sequence[Point2D]) -> List[Point2D]:
    out = list(points)
    if out and out[0] != out[-1]:
        out.append(out[0])
    return out


def collapse_consecutive_duplicates(points: Sequence[Point2D]) -> List[Point2D]:
    out: List[Point2D] = []
    for p in points:
        if out and out[-1] == p:
            continue
        out.append(p)
    return out


def distinct_interior(points: Sequence[Point2D]) -> List[Point2D]:
    """Distinct points excluding the closing point, in first-occurrence order."""
    return list(dict.fromkeys(points[:-1]))


def _abs_area(points: Sequence[Point2D]) -> int:
    return abs(signed_area(points))


def _single_removals(points: List[Point2D], indices: Sequence[int]) -> Iterable[Trial]:
    for idx in indices:
        trial = list(points)
        del trial[idx]
        yield (idx,), trial


def _pair_removals(points: List[Point2D], indices: Sequence[int]) -> Iterable[Trial]:
    for a, b in combinations(indices, 2):
        hi, lo = max(a, b), min(a, b)
        trial = list(points)
        # higher index first so the lower one stays put
        del trial[hi]
        del trial[lo]
        yield (lo, hi), trial


def _largest_valid(trials: Iterable[Trial]) -> Optional[Trial]:
    best: Optional[Trial] = None
    best_area = -1
    for removed, trial in trials:
        if not is_valid(trial):
            continue
        area = _abs_area(trial)
        if area > best_area:
            best, best_area = (removed, trial), area
    return best


def resolve_intersection(
    points: List[Point2D],
    i: int,
    j: int,
    *,
    allow_pair_removal: bool = True,
) -> Optional[Trial]:
    """
    Try to clear the crossing of edges i and j by deleting their vertices.

    Single deletions are tried first, then pairs. Among the trials that give a
    valid ring the one with the largest absolute area wins; ties go to the
    earliest trial. The closing point is never deleted.
    """
    closing = len(points) - 1
    candidates = [k for k in (i, i + 1, j, j + 1) if k < closing]

    best = _largest_valid(_single_removals(points, candidates))
    if best is None and allow_pair_removal:
        best = _largest_valid(_pair_removals(points, candidates))
    return best


def _resolution_pass(points: List[Point2D], policy: RepairPolicy) -> Optional[Tuple[List[Point2D], RepairAction]]:
    pairs = find_intersecting_edges(points, first_only=not policy.scan_all_intersections)
    for i, j in pairs:
        resolved = resolve_intersection(points, i, j, allow_pair_removal=policy.allow_pair_removal)
        if resolved is None:
            logger.debug("Edges %d and %d cannot be separated by vertex deletion", i, j)
            continue
        removed, trial = resolved
        action = RepairAction(
            action="resolve_intersection",
            details={
                "edges": [i, j],
                "removed_indices": list(removed),
                "removed_points": [list(points[k].as_tuple()) for k in removed],
                "area": _abs_area(trial),
            },
        )
        return trial, action
    return None


def _report(
    stage: RepairStage,
    actions: List[RepairAction],
    source: Shape2D,
    result: Shape2D,
    iterations: int,
) -> RepairReport:
    return RepairReport(
        stage=stage,
        actions=list(actions),
        input_points=len(source),
        output_points=len(result),
        iterations=iterations,
        shape_hash=shape_digest(result),
    )


def _fail(
    reason: FailureReason,
    actions: List[RepairAction],
    source: Shape2D,
    iterations: int = 0,
) -> Unrepairable:
    logger.debug("Repair failed: %s", reason)
    return Unrepairable(reason=reason, report=_report("failed", actions, source, Shape2D.empty(), iterations))


def repair_shape(
    shape: Shape2D | Sequence[Point2D],
    policy: RepairPolicy = DEFAULT_REPAIR_POLICY,
) -> RepairOutcome:
    """
    Repair a point sequence into a simple, closed, non-degenerate ring.

    Stages, in order: close the ring, collapse consecutive duplicates, drop
    repeated points (first occurrence wins), delete vertices around
    self-intersections, and finally fall back to the convex hull of the
    distinct points. The input shape is never modified.
    """
    if not isinstance(shape, Shape2D):
        shape = Shape2D(shape)
    actions: List[RepairAction] = []

    points = close_ring(shape.points)
    if len(points) != len(shape):
        actions.append(RepairAction("close_ring", {"appended": list(points[0].as_tuple())}))

    before = len(points)
    points = collapse_consecutive_duplicates(points)
    if len(points) != before:
        actions.append(RepairAction("collapse_consecutive_duplicates", {"removed": before - len(points)}))
    if len(points) < MIN_RING_POINTS:
        return _fail("too_few_points", actions, shape)

    distinct = distinct_interior(points)
    if len(distinct) != len(points) - 1:
        if len(distinct) < MIN_RING_POINTS - 1:
            return _fail("too_few_distinct_points", actions, shape)
        removed = len(points) - 1 - len(distinct)
        points = distinct + [distinct[0]]
        actions.append(RepairAction("remove_duplicate_points", {"removed": removed}))
    logger.debug("Cleanup left %d points (%d distinct)", len(points), len(distinct))

    iterations = 0
    progressed = True
    while progressed and not is_valid(points):
        if policy.max_iterations is not None and iterations >= policy.max_iterations:
            logger.debug("Stopping intersection resolution after %d passes", iterations)
            break
        step = _resolution_pass(points, policy)
        if step is None:
            progressed = False
            continue
        points, action = step
        actions.append(action)
        iterations += 1
        logger.debug("Pass %d removed %s", iterations, action.details["removed_points"])

    if is_valid(points):
        result = Shape2D(points)
        if iterations:
            stage: RepairStage = "intersection_resolution"
        elif result == shape:
            stage = "unchanged"
        else:
            stage = "cleanup"
        return Repaired(shape=result, report=_report(stage, actions, shape, result, iterations))

    if not policy.hull_fallback:
        return _fail("hull_disabled", actions, shape, iterations)

    hull = closed_hull(distinct)
    if hull.is_empty or not is_valid(hull):
        return _fail("degenerate_hull", actions, shape, iterations)
    logger.info("Falling back to convex hull of %d distinct points", len(distinct))
    actions.append(RepairAction("convex_hull", {"hull_points": len(hull) - 1}))
    return Repaired(shape=hull, report=_report("convex_hull", actions, shape, hull, iterations))


def repair(shape: Shape2D | Sequence[Point2D], policy: RepairPolicy = DEFAULT_REPAIR_POLICY) -> Shape2D:
    """Repaired shape, or the empty shape when no valid ring can be recovered."""
    return repair_shape(shape, policy).shape

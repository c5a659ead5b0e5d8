from __future__ import annotations

import logging

import pytest

from shapefix.core.hashing import shape_digest
from shapefix.geometry.policy import RepairPolicy
from shapefix.geometry.primitives import Shape2D
from shapefix.geometry.repair import (
    close_ring,
    collapse_consecutive_duplicates,
    distinct_interior,
    repair,
    repair_shape,
    resolve_intersection,
)
from shapefix.geometry.validity import is_valid
from shapefix.models.repair import Repaired, Unrepairable


UNIT_SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]
BOWTIE = [(0, 0), (2, 2), (0, 2), (2, 0), (0, 0)]
# first crossing only clears when two of its vertices go
DOUBLE_CROSSING = [(0, 0), (4, 4), (4, 0), (0, 4), (2, 6), (0, 0)]
# first crossing pair cannot be cleared, a later one can
LATER_PAIR_RESOLVABLE = [(6, 3), (1, 5), (4, 1), (3, 4), (1, 5), (6, 1), (3, 5), (3, 0), (6, 3)]


def _shape(coords) -> Shape2D:
    return Shape2D.from_coords(coords)


def test_valid_shape_is_returned_unchanged() -> None:
    outcome = repair_shape(_shape(UNIT_SQUARE))
    assert isinstance(outcome, Repaired)
    assert outcome.shape == _shape(UNIT_SQUARE)
    assert outcome.report.stage == "unchanged"
    assert outcome.report.actions == []


def test_missing_closure_is_appended() -> None:
    outcome = repair_shape(_shape([(0, 0), (1, 1), (1, 0)]))
    assert outcome.ok
    assert outcome.shape == _shape([(0, 0), (1, 1), (1, 0), (0, 0)])
    assert outcome.report.stage == "cleanup"
    assert [a.action for a in outcome.report.actions] == ["close_ring"]


def test_too_few_points_is_unrepairable() -> None:
    outcome = repair_shape(_shape([(0, 0), (1, 1)]))
    assert isinstance(outcome, Unrepairable)
    assert outcome.reason == "too_few_points"
    assert repair(_shape([(0, 0), (1, 1)])) == Shape2D.empty()


def test_empty_input_is_unrepairable() -> None:
    outcome = repair_shape(Shape2D.empty())
    assert not outcome.ok
    assert outcome.shape.is_empty


def test_repeated_point_collapses_below_a_ring() -> None:
    # first-occurrence policy: the collapse leaves 3 points, not enough for a ring
    outcome = repair_shape(_shape([(0, 0), (1, 1), (1, 1), (0, 0)]))
    assert isinstance(outcome, Unrepairable)
    assert outcome.reason == "too_few_points"
    assert outcome.report.actions[0].action == "collapse_consecutive_duplicates"


def test_trailing_duplicate_is_repaired_back_to_square() -> None:
    outcome = repair_shape(_shape([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0), (1, 1)]))
    assert outcome.ok
    assert outcome.shape == _shape(UNIT_SQUARE)
    actions = outcome.report.actions
    assert [a.action for a in actions] == ["close_ring", "remove_duplicate_points"]
    assert actions[1].details == {"removed": 2}


def test_too_few_distinct_points_is_unrepairable() -> None:
    outcome = repair_shape(_shape([(0, 0), (1, 0), (0, 0), (1, 0), (0, 0)]))
    assert isinstance(outcome, Unrepairable)
    assert outcome.reason == "too_few_distinct_points"


def test_bowtie_is_resolved_by_single_vertex_deletion() -> None:
    outcome = repair_shape(_shape(BOWTIE))
    assert outcome.ok
    assert outcome.shape == _shape([(0, 0), (0, 2), (2, 0), (0, 0)])
    assert is_valid(outcome.shape)
    assert outcome.report.stage == "intersection_resolution"
    assert outcome.report.iterations == 1
    details = outcome.report.actions[-1].details
    assert details["edges"] == [0, 2]
    assert details["removed_indices"] == [1]
    assert details["removed_points"] == [[2, 2]]


def test_pair_removal_keeps_largest_area() -> None:
    outcome = repair_shape(_shape(DOUBLE_CROSSING))
    assert outcome.ok
    assert outcome.shape == _shape([(0, 0), (4, 0), (2, 6), (0, 0)])
    assert outcome.report.actions[-1].details["removed_indices"] == [1, 3]
    assert outcome.report.actions[-1].details["area"] == 24


def test_without_pair_removal_falls_back_to_hull() -> None:
    outcome = repair_shape(_shape(DOUBLE_CROSSING), RepairPolicy(allow_pair_removal=False))
    assert outcome.ok
    assert outcome.report.stage == "convex_hull"
    assert outcome.shape == _shape([(0, 0), (4, 0), (4, 4), (2, 6), (0, 4), (0, 0)])


def test_scan_all_intersections_matches_single_pair_on_bowtie() -> None:
    outcome = repair_shape(_shape(BOWTIE), RepairPolicy(scan_all_intersections=True))
    assert outcome.shape == repair(_shape(BOWTIE))


def test_scan_all_intersections_resolves_a_later_pair() -> None:
    default = repair_shape(_shape(LATER_PAIR_RESOLVABLE))
    assert default.ok
    assert default.report.stage == "convex_hull"
    assert default.shape == _shape([(3, 0), (6, 1), (6, 3), (3, 5), (1, 5), (3, 0)])

    scanned = repair_shape(_shape(LATER_PAIR_RESOLVABLE), RepairPolicy(scan_all_intersections=True))
    assert scanned.ok
    assert scanned.report.stage == "intersection_resolution"
    assert scanned.report.iterations >= 1
    assert is_valid(scanned.shape)
    assert scanned.shape != default.shape


def test_repair_accepts_plain_point_sequences() -> None:
    pts = list(_shape(BOWTIE).points)
    outcome = repair_shape(pts)
    assert outcome.shape == repair(_shape(BOWTIE))
    assert outcome.report.input_points == 5
    assert repair(pts[:2]) == Shape2D.empty()


def test_repair_logs_stages(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="shapefix")
    repair_shape(_shape(BOWTIE), RepairPolicy(max_iterations=0))
    messages = [r.getMessage() for r in caplog.records]
    assert "Cleanup left 5 points (4 distinct)" in messages
    assert "Stopping intersection resolution after 0 passes" in messages
    hull_records = [r for r in caplog.records if r.levelno == logging.INFO]
    assert [r.getMessage() for r in hull_records] == ["Falling back to convex hull of 4 distinct points"]


def test_hull_fallback_when_resolution_is_capped() -> None:
    outcome = repair_shape(_shape(BOWTIE), RepairPolicy(max_iterations=0))
    assert outcome.ok
    assert outcome.report.stage == "convex_hull"
    assert outcome.shape == _shape([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)])
    assert outcome.report.actions[-1].details == {"hull_points": 4}


def test_hull_fallback_can_be_disabled() -> None:
    outcome = repair_shape(_shape(BOWTIE), RepairPolicy(max_iterations=0, hull_fallback=False))
    assert isinstance(outcome, Unrepairable)
    assert outcome.reason == "hull_disabled"


def test_all_collinear_shape_is_unrepairable() -> None:
    outcome = repair_shape(_shape([(0, 0), (1, 1), (2, 2), (3, 3), (0, 0)]))
    assert isinstance(outcome, Unrepairable)
    assert outcome.reason == "degenerate_hull"
    assert outcome.report.stage == "failed"
    assert outcome.report.output_points == 0


def test_policy_rejects_negative_iteration_cap() -> None:
    with pytest.raises(ValueError, match="max_iterations"):
        RepairPolicy(max_iterations=-1)


@pytest.mark.parametrize(
    "coords",
    [
        UNIT_SQUARE,
        BOWTIE,
        DOUBLE_CROSSING,
        [(0, 0), (1, 1), (1, 0)],
        [(0, 0), (1, 0), (1, 1), (0, 1), (0, 0), (1, 1)],
        [(0, 0), (4, 0), (4, 4), (2, 0), (0, 4), (0, 0)],
        [(5, 5), (-3, 2), (7, -1), (0, 9), (5, 5)],
        [(0, 0), (1, 1), (2, 2), (3, 3), (0, 0)],
        [(0, 0), (1, 1)],
    ],
)
def test_repair_is_idempotent(coords) -> None:
    fixed = repair(_shape(coords))
    if fixed.is_empty:
        return
    assert is_valid(fixed)
    assert repair(fixed) == fixed


def test_report_hash_is_deterministic() -> None:
    r1 = repair_shape(_shape(BOWTIE))
    r2 = repair_shape(_shape(BOWTIE))
    assert r1.report.shape_hash == r2.report.shape_hash == shape_digest(r1.shape)
    assert r1.report.input_points == 5
    assert r1.report.output_points == 4


def test_outcome_to_dict() -> None:
    d = repair_shape(_shape([(0, 0), (1, 1)])).to_dict()
    assert d["ok"] is False
    assert d["reason"] == "too_few_points"
    assert d["shape"] == []
    assert d["report"]["stage"] == "failed"


def test_stage_helpers() -> None:
    s = _shape([(0, 0), (0, 0), (1, 0), (1, 1), (1, 1)]).points
    closed = close_ring(s)
    assert closed[-1] == closed[0]
    collapsed = collapse_consecutive_duplicates(closed)
    assert [p.as_tuple() for p in collapsed] == [(0, 0), (1, 0), (1, 1), (0, 0)]
    assert [p.as_tuple() for p in distinct_interior(collapsed)] == [(0, 0), (1, 0), (1, 1)]


def test_resolve_intersection_returns_none_when_stuck() -> None:
    pts = list(_shape([(0, 0), (1, 1), (2, 2), (3, 3), (0, 0)]).points)
    assert resolve_intersection(pts, 1, 3) is None

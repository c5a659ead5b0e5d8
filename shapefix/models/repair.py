from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Union

from shapefix.geometry.primitives import Shape2D


RepairStage = Literal["unchanged", "cleanup", "intersection_resolution", "convex_hull", "failed"]
FailureReason = Literal["too_few_points", "too_few_distinct_points", "degenerate_hull", "hull_disabled"]


@dataclass(frozen=True)
class RepairAction:
    action: str
    details: Dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {"action": self.action, "details": dict(self.details)}


@dataclass(frozen=True)
class RepairReport:
    stage: RepairStage
    actions: List[RepairAction]
    input_points: int
    output_points: int
    iterations: int
    shape_hash: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "stage": self.stage,
            "actions": [a.to_dict() for a in self.actions],
            "input_points": int(self.input_points),
            "output_points": int(self.output_points),
            "iterations": int(self.iterations),
            "shape_hash": self.shape_hash,
        }


@dataclass(frozen=True)
class Repaired:
    shape: Shape2D
    report: RepairReport

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, object]:
        return {"ok": True, "shape": self.shape.to_coords(), "report": self.report.to_dict()}


@dataclass(frozen=True)
class Unrepairable:
    reason: FailureReason
    report: RepairReport

    @property
    def ok(self) -> bool:
        return False

    @property
    def shape(self) -> Shape2D:
        return Shape2D.empty()

    def to_dict(self) -> Dict[str, object]:
        return {"ok": False, "reason": self.reason, "shape": [], "report": self.report.to_dict()}


RepairOutcome = Union[Repaired, Unrepairable]

from shapefix.models.repair import (
    RepairAction,
    RepairOutcome,
    RepairReport,
    Repaired,
    Unrepairable,
)

__all__ = [
    "RepairAction",
    "RepairOutcome",
    "RepairReport",
    "Repaired",
    "Unrepairable",
]

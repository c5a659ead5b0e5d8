from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")  # headless-safe for servers/CI
import matplotlib.pyplot as plt  # noqa: E402

from shapefix.geometry.primitives import Shape2D  # noqa: E402
from shapefix.geometry.validity import validate_shape  # noqa: E402


def _ensure_outdir(outpath: Path) -> None:
    outpath.parent.mkdir(parents=True, exist_ok=True)


def plot_shape(shape: Shape2D, ax, title: Optional[str] = None) -> None:
    """
    Draw one ring onto ax: edges in the given order, vertices marked, first
    vertex highlighted. An empty shape leaves the axes blank with a note.
    """
    report = validate_shape(shape)
    label = "valid" if report.valid else f"invalid ({report.reason})"
    ax.set_title(f"{title}: {label}" if title else label)
    ax.set_aspect("equal", adjustable="datalim")

    if shape.is_empty:
        ax.text(0.5, 0.5, "empty", ha="center", va="center", transform=ax.transAxes)
        return

    xy = shape.to_array()
    ax.plot(xy[:, 0], xy[:, 1], "-o", color="tab:blue" if report.valid else "tab:red", markersize=4)
    ax.plot([xy[0, 0]], [xy[0, 1]], "s", color="black", markersize=6)
    if report.intersecting_edges is not None:
        for k in report.intersecting_edges:
            ax.plot(xy[k : k + 2, 0], xy[k : k + 2, 1], "-", color="tab:orange", linewidth=3)


def plot_repair(original: Shape2D, repaired: Shape2D, outpath: Path) -> Path:
    """
    Save a two-panel PNG: the input ring and its repaired counterpart.
    """
    _ensure_outdir(outpath)
    fig, (ax_in, ax_out) = plt.subplots(1, 2, figsize=(8, 4))
    plot_shape(original, ax_in, title="input")
    plot_shape(repaired, ax_out, title="repaired")
    fig.tight_layout()
    fig.savefig(outpath, dpi=150)
    plt.close(fig)
    return outpath

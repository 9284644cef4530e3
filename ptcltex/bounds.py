from __future__ import annotations
from typing import Sequence, Union

import numpy as np

from ptcltex.models import Bounds, Point, PointCollection

PointsLike = Union[PointCollection, Sequence[Point], np.ndarray]


def as_positions(points: PointsLike) -> np.ndarray:
    if isinstance(points, np.ndarray):
        pts = points.astype(np.float64, copy=False)
    elif isinstance(points, PointCollection):
        pts = points.positions()
    else:
        pts = np.array([p.position for p in points], np.float64).reshape(-1, 3)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"Expected (N,3) positions, got shape {pts.shape}")
    return pts


def compute_bounds(points: PointsLike) -> Bounds:
    """Axis-aligned box over all positions; all-zero for an empty set."""
    pts = as_positions(points)
    if pts.shape[0] == 0:
        return Bounds.zero()
    lo, hi = pts.min(0), pts.max(0)
    return Bounds(tuple(lo.tolist()), tuple(hi.tolist()))

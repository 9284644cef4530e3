import numpy as np
import pytest

from ptcltex.models import Point, PointCollection


def make_collection(pts, cols=None, source=None):
    pts = np.asarray(pts, np.float64)
    if cols is None:
        cols = np.full_like(pts, 0.5)
    points = [Point.make(f"particle_{i}", p, c) for i, (p, c) in enumerate(zip(pts, cols))]
    return PointCollection(points, source=source)


@pytest.fixture
def random_cloud():
    """1000 points in an asymmetric box with a flat z axis; colours never black."""
    rng = np.random.default_rng(7)
    n = 1000
    pts = np.column_stack([rng.uniform(-5.0, 10.0, n),
                           rng.uniform(0.0, 3.0, n),
                           np.full(n, 2.0)])
    cols = rng.uniform(0.1, 0.9, (n, 3))
    return make_collection(pts, cols, source="houdini")

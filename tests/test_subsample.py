import numpy as np
import pytest

from ptcltex.cfg import Cfg
from ptcltex.subsample import optimize_for_rendering, subsample
from conftest import make_collection


def _line(n):
    return make_collection(np.column_stack([np.arange(n), np.zeros(n), np.zeros(n)]),
                           source="houdini")


def test_halving_scenario():
    c = _line(100_000)
    out = subsample(c, 50_000)
    assert len(out) == 50_000
    assert out[0].id == "particle_0"
    assert out[1].id == "particle_2"
    assert out[-1].id == "particle_99998"
    assert out.optimized is True
    assert out.original_count == 100_000


def test_bounds_recomputed_on_subset():
    out = subsample(_line(10), 3)          # step 4 keeps 0, 4, 8
    assert [p.id for p in out] == ["particle_0", "particle_4", "particle_8"]
    assert out.bounds.max[0] == 8.0


def test_small_input_returned_unchanged():
    c = _line(10)
    out = subsample(c, 10)
    assert out.points == c.points
    assert out.optimized is False
    assert out.bounds == c.bounds


def test_provenance_preserved():
    c = _line(20)
    out = subsample(c, 4)
    assert out.created == c.created
    assert out.source == "houdini"


@pytest.mark.parametrize("n", [1, 2, 7, 31, 64, 101])
def test_count_bounds(n):
    c = _line(n)
    for m in range(1, n):
        k = len(subsample(c, m))
        assert 1 <= k <= m


def test_invalid_cap():
    with pytest.raises(ValueError):
        subsample(_line(3), 0)


def test_optimize_for_rendering_policy(monkeypatch):
    c = _line(30)
    assert optimize_for_rendering(c, max_n=10) is c
    assert len(optimize_for_rendering(c, force=True, max_n=10)) == 10

    monkeypatch.setattr(Cfg, "AUTO_OPTIMIZE_AT", 20)
    out = optimize_for_rendering(c, max_n=10)
    assert len(out) == 10 and out.optimized

from __future__ import annotations

from ptcltex.bounds import compute_bounds
from ptcltex.cfg import Cfg
from ptcltex.models import PointCollection


def subsample(collection: PointCollection, max_n: int) -> PointCollection:
    """
    Stride-subsample to at most *max_n* points.

    Keeps indices 0, step, 2*step, ... with ``step = ceil(len / max_n)``, so
    the result is deterministic and order preserving. This is a systematic
    sample: data laid out with a period matching ``step`` will alias.
    Bounds are recomputed on the retained subset.
    """
    if max_n < 1:
        raise ValueError(f"max_n must be >= 1, got {max_n}")
    n = len(collection)
    if n <= max_n:
        kept, optimized = collection.points, False
    else:
        step = -(-n // max_n)
        kept, optimized = collection.points[::step], True
        print(f"[subsample] {n} → {len(kept)} particles (step {step})")

    return PointCollection(kept,
                           bounds=compute_bounds(kept),
                           created=collection.created,
                           source=collection.source,
                           optimized=optimized,
                           original_count=n)


def optimize_for_rendering(collection: PointCollection,
                           force: bool = False,
                           max_n: int = Cfg.MAX_PARTICLES) -> PointCollection:
    """Cap large collections: always when *force*, otherwise above ``Cfg.AUTO_OPTIMIZE_AT``."""
    if force or len(collection) > Cfg.AUTO_OPTIMIZE_AT:
        return subsample(collection, max_n)
    return collection

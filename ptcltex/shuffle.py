from __future__ import annotations
from functools import lru_cache

import numpy as np

from ptcltex.cfg import Cfg


def shuffle_seed(width: int, height: int) -> int:
    return width * height * Cfg.SHUFFLE_MUL

@lru_cache(maxsize=8)
def pixel_permutation(width: int, height: int) -> np.ndarray:
    """
    Deterministic Fisher-Yates shuffle of the row-major pixel indices.

    Step ``i`` (n-1 down to 1) swaps with
    ``j = floor(((seed + i*17) % 10000) / 10000 * (i+1))``, evaluated in
    float64 so the order matches textures exported by the web viewer.
    The returned array is cached per size and read-only.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Texture size must be positive, got {width}x{height}")
    n = width * height
    seed = shuffle_seed(width, height)

    i = np.arange(n - 1, 0, -1, dtype=np.int64)
    r = (seed + i * Cfg.SHUFFLE_STEP) % Cfg.SHUFFLE_MOD
    j = np.floor(r / Cfg.SHUFFLE_MOD * (i + 1)).astype(np.int64)

    order = list(range(n))
    for a, b in zip(i.tolist(), j.tolist()):
        order[a], order[b] = order[b], order[a]

    perm = np.asarray(order, np.int64)
    perm.flags.writeable = False
    return perm

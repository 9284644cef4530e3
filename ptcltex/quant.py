from __future__ import annotations

import numpy as np

from ptcltex.models import Bounds

Q_MAX = 255                         # 8 bit per channel

################################################################################
# ╭──────────────────  8-BIT QUANTISATION  ───────────────────────╮
################################################################################

def quantize(values: np.ndarray, lo, rng) -> np.ndarray:
    """Map values in [lo, lo+rng] to 0..255 with round-half-up; out of range clamps.

    ``rng`` must already have zero axes replaced (see ``Bounds.span``).
    """
    v = np.asarray(values, np.float64)
    t = np.clip((v - np.asarray(lo, np.float64)) / np.asarray(rng, np.float64), 0.0, 1.0)
    return np.floor(t * Q_MAX + 0.5).astype(np.uint8)

def dequantize(q: np.ndarray, lo, rng) -> np.ndarray:
    return np.asarray(lo, np.float64) + q.astype(np.float64) / Q_MAX * np.asarray(rng, np.float64)

# positions are quantised inside their bounds, colours inside the unit cube
def quantize_positions(pts: np.ndarray, bounds: Bounds) -> np.ndarray:
    return quantize(pts, bounds.min, bounds.span())

def dequantize_positions(q: np.ndarray, bounds: Bounds) -> np.ndarray:
    return dequantize(q, bounds.min, bounds.span())

def quantize_colors(cols: np.ndarray) -> np.ndarray:
    return quantize(cols, 0.0, 1.0)

def dequantize_colors(q: np.ndarray) -> np.ndarray:
    return dequantize(q, 0.0, 1.0)

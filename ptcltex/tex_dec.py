from __future__ import annotations
import warnings
from typing import Optional

import numpy as np

from ptcltex.bounds import compute_bounds
from ptcltex.cfg import Cfg, CodecOptions
from ptcltex.errors import DimensionMismatch, MissingMetadataWarning
from ptcltex.models import Bounds, Point, PointCollection, TextureMeta
from ptcltex.quant import dequantize_colors, dequantize_positions
from ptcltex.shuffle import pixel_permutation
from ptcltex.tex_enc import flip_axis

TEXTURE_SOURCE = "texture_files"

# ────────────────────────────   Decoder  ─────────────────────────────

def _as_rgb(img: np.ndarray, name: str) -> np.ndarray:
    """Flatten an (H,W,3|4) texture to (H*W,3) uint8."""
    img = np.asarray(img)
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ValueError(f"{name} texture must be (H,W,3) or (H,W,4), got {img.shape}")
    return img[..., :3].astype(np.uint8, copy=False).reshape(-1, 3)

def _check_dims(position: np.ndarray, color: np.ndarray, meta: Optional[TextureMeta]):
    ph, pw = position.shape[:2]
    ch, cw = color.shape[:2]
    if (ph, pw) != (ch, cw):
        raise DimensionMismatch(f"Position texture is {pw}x{ph} but colour texture is {cw}x{ch}")
    if meta is None:
        return
    if (meta.width is not None and meta.width != pw) or (meta.height is not None and meta.height != ph):
        raise DimensionMismatch(f"Metadata says {meta.width}x{meta.height} "
                                f"but textures are {pw}x{ph}")

def _resolve_bounds(meta: Optional[TextureMeta]) -> Optional[Bounds]:
    if meta is not None and meta.bounds is not None:
        return meta.bounds
    warnings.warn("No bounds metadata for texture decode; using estimated bounds "
                  f"{Cfg.FALLBACK_BOUNDS[0]}..{Cfg.FALLBACK_BOUNDS[1]}, output scale is likely wrong",
                  MissingMetadataWarning, stacklevel=3)
    return None


def decode_textures(position: np.ndarray,
                    color: np.ndarray,
                    metadata: Optional[TextureMeta] = None,
                    options: CodecOptions = CodecOptions()) -> PointCollection:
    """Return the particles stored in a position/colour texture pair.

    Pixels are visited in the size-seeded shuffled order and pixels that are
    black in both textures are skipped, as are pixels at or past the
    metadata ``particle_count`` when it is known. Without bounds metadata a
    ``MissingMetadataWarning`` is emitted and ``Cfg.FALLBACK_BOUNDS`` is used.
    """
    _check_dims(position, color, metadata)
    h, w = position.shape[:2]
    pos_q = _as_rgb(position, "Position")
    col_q = _as_rgb(color, "Colour")

    stored = _resolve_bounds(metadata)
    bounds = stored if stored is not None else Bounds(*Cfg.FALLBACK_BOUNDS)
    if options.flip_vertical_axis:
        bounds = bounds.flipped(Cfg.VERTICAL_AXIS)

    # -------- occupancy (raster order) ----------------------------------
    occupied = pos_q.any(axis=1) | col_q.any(axis=1)
    if metadata is not None and metadata.particle_count is not None:
        # encode fills pixels 0..count-1, anything after is padding even if lossy codecs left noise
        occupied &= np.arange(h * w) < metadata.particle_count

    # -------- shuffled pixel walk ---------------------------------------
    order = pixel_permutation(w, h)
    order = order[occupied[order]]
    pos_q, col_q = pos_q[order], col_q[order]

    # de-quantise back to the original metric space ----------------------
    pts = dequantize_positions(pos_q, bounds)
    if options.flip_vertical_axis:
        pts = flip_axis(pts)
    cols = dequantize_colors(col_q)

    points = [Point(f"texture_particle_{k}", tuple(p), tuple(c), 1.0)
              for k, (p, c) in enumerate(zip(pts.tolist(), cols.tolist()))]

    return PointCollection(points,
                           bounds=stored if stored is not None else compute_bounds(pts),
                           source=TEXTURE_SOURCE)

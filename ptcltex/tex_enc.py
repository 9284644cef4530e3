# -*- coding: utf-8 -*-
"""
Particle → texture encoder
==========================
Packs an unordered particle set into two square RGBA8 textures:

* **position texture**: xyz quantised to 8 bit inside the (optionally
  y-flipped) bounding box, one particle per pixel in raster order;
* **colour texture**: rgb in [0,1] quantised to 8 bit at the same pixel.

Alpha is always 255. Unused pixels stay ``(0,0,0,255)`` in both maps, which
is what the decoder treats as an empty slot. Metadata records the
*original* (un-flipped) bounds so the decoder can invert the flip.
"""
from __future__ import annotations
import math
from typing import Optional

import numpy as np

from ptcltex.bounds import compute_bounds
from ptcltex.cfg import Cfg, CodecOptions
from ptcltex.errors import EmptyInput
from ptcltex.models import PointCollection, TextureDocument, TextureMeta, now_iso
from ptcltex.quant import quantize_colors, quantize_positions


def texture_size(count: int) -> int:
    """Smallest power of two S with S*S >= count (1 for count <= 1)."""
    if count <= 1:
        return 1
    side = math.isqrt(count - 1) + 1           # ceil(sqrt(count))
    return 1 << (side - 1).bit_length()

def flip_axis(arr: np.ndarray, axis: int = Cfg.VERTICAL_AXIS) -> np.ndarray:
    out = np.array(arr, np.float64, copy=True)
    out[:, axis] = -out[:, axis]
    return out

def _check_size(size: int, count: int):
    if size <= 0 or size & (size - 1):
        raise ValueError(f"Texture size must be a power of two, got {size}")
    if size * size < count:
        raise ValueError(f"Texture {size}x{size} cannot hold {count} particles")
    if size * size > Cfg.MAX_PIXELS:
        raise ValueError(f"Texture {size}x{size} exceeds the 32-bit pixel index range")

def blank_texture(size: int) -> np.ndarray:
    img = np.zeros((size, size, 4), np.uint8)
    img[..., 3] = 255
    return img


def encode_collection(collection: PointCollection,
                      options: CodecOptions = CodecOptions(),
                      size: Optional[int] = None) -> TextureDocument:
    # ------------------------------------------------------------------ setup
    n = len(collection)
    if n == 0:
        raise EmptyInput("Cannot encode an empty particle collection")
    precision = options.precision()

    pts  = collection.positions()
    cols = collection.colors()

    size = texture_size(n) if size is None else int(size)
    _check_size(size, n)

    # bounds ------------------------------------------------------------------
    original_bounds = compute_bounds(pts)
    if options.flip_vertical_axis:
        pts = flip_axis(pts)
    export_bounds = compute_bounds(pts)

    # ------------------------------------------------------------------ maps
    pos_img = blank_texture(size)
    col_img = blank_texture(size)
    # pixel i sits at (x = i % size, y = i // size): row-major == flat index
    pos_img.reshape(-1, 4)[:n, :3] = quantize_positions(pts, export_bounds)
    col_img.reshape(-1, 4)[:n, :3] = quantize_colors(cols)

    meta = TextureMeta(width=size,
                       height=size,
                       particle_count=n,
                       bounds=original_bounds,
                       format=options.image_format,
                       precision=precision,
                       created=now_iso())
    return TextureDocument(pos_img, col_img, meta)

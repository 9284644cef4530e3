# -*- coding: utf-8 -*-
"""
Particle ↔ texture codec
========================
Stores large particle clouds as a pair of square 8-bit RGBA textures plus a
JSON sidecar, and reads them back.

Highlights
----------
* **Format detection** for Houdini ``[{"P","Cd"}]`` dumps and the internal
  ``{"particles": [...]}`` document.
* **Stride subsampling** to cap oversized clouds (50k by default).
* **Quantised encode**: xyz inside the bounding box and rgb in [0,1] to 8
  bit, raster order, power-of-two square textures.
* **Shuffled decode**: pixels are replayed in a size-seeded Fisher-Yates
  order so partial textures do not read back as a grid.

Dependencies: numpy, imageio, plyfile, tqdm
"""
from ptcltex.cfg import Cfg, CodecOptions
from ptcltex.errors import (CodecError, DimensionMismatch, EmptyInput,
                            MissingMetadataWarning, UnrecognizedFormat)
from ptcltex.models import Bounds, Point, PointCollection, TextureDocument, TextureMeta
from ptcltex.bounds import compute_bounds
from ptcltex.formats import detect_format, parse_particle_data
from ptcltex.subsample import optimize_for_rendering, subsample
from ptcltex.tex_enc import encode_collection, texture_size
from ptcltex.tex_dec import decode_textures

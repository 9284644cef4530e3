from __future__ import annotations
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import imageio
import numpy as np

from ptcltex.cfg import CodecOptions
from ptcltex.models import PointCollection, TextureDocument, TextureMeta
from ptcltex.tex_dec import decode_textures

################################################################################
# ╭──────────────────  TEXTURE FILES  ───────────────────────────╮
################################################################################

def export_basename(collection: PointCollection, when: Optional[datetime] = None) -> str:
    """``<source>_<YYYY-MM-DDTHH-MM-SS>``, the naming used by the web exporter."""
    stamp = (when or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{collection.source or 'particles'}_{stamp}"

def texture_paths(out_dir: Path, name: str, ext: str) -> Dict[str, Path]:
    out_dir = Path(out_dir)
    return {"position": out_dir / f"{name}_position.{ext}",
            "color":    out_dir / f"{name}_color.{ext}",
            "metadata": out_dir / f"{name}_metadata.json"}

def write_texture_files(doc: TextureDocument, out_dir, name: str) -> Dict[str, Path]:
    fmt = doc.metadata.format or CodecOptions().image_format
    ext = CodecOptions(image_format=fmt).extension()
    paths = texture_paths(Path(out_dir), name, ext)
    paths["position"].parent.mkdir(parents=True, exist_ok=True)

    if fmt == "jpg":
        # JPEG has no alpha channel
        imageio.v2.imwrite(paths["position"], doc.position[..., :3], quality=95)
        imageio.v2.imwrite(paths["color"], doc.color[..., :3], quality=95)
    else:
        imageio.v2.imwrite(paths["position"], doc.position)
        imageio.v2.imwrite(paths["color"], doc.color)
    with open(paths["metadata"], "w", encoding="utf-8") as f:
        json.dump(doc.metadata.to_dict(), f, indent=2)

    m = doc.metadata
    print(f"[write_texture_files] {m.particle_count} particles → {m.width}x{m.height} "
          f"{fmt.upper()} textures in {paths['position'].parent}")
    return paths


def _load_image(path) -> np.ndarray:
    img = np.asarray(imageio.v2.imread(path))
    if img.ndim == 2:                                   # greyscale
        img = np.stack([img] * 3, axis=-1)
    if img.shape[2] == 3:
        alpha = np.full(img.shape[:2] + (1,), 255, img.dtype)
        img = np.concatenate([img, alpha], axis=-1)
    return img.astype(np.uint8, copy=False)

def read_metadata(path) -> TextureMeta:
    with open(path, "r", encoding="utf-8") as f:
        return TextureMeta.from_dict(json.load(f))

def read_texture_files(position_path,
                       color_path,
                       metadata_path=None) -> Tuple[np.ndarray, np.ndarray, Optional[TextureMeta]]:
    meta = None
    if metadata_path is not None:
        meta = read_metadata(metadata_path)
        print(f"[read_texture_files] Loaded metadata: {meta.to_dict()}")
    else:
        print("[read_texture_files] No metadata file provided - using estimated bounds")
    return _load_image(position_path), _load_image(color_path), meta


def identify_texture_files(paths: Iterable) -> Tuple[Path, Path, Optional[Path]]:
    """Pick (position, colour, metadata) out of a file list by name."""
    paths = [Path(p) for p in paths]
    json_files = [p for p in paths if p.suffix.lower() == ".json"]
    images = [p for p in paths if p.suffix.lower() != ".json"]

    def _pick(exact: str, short: str, skip=None):
        pool = [p for p in images if p is not skip]
        return (next((p for p in pool if exact in p.name), None)
                or next((p for p in pool if short in p.name), None))

    # "_position"/"_color" first so base names like "compost" do not match "pos"
    position = _pick("_position", "pos")
    color = _pick("_color", "col", skip=position)
    metadata = next((p for p in json_files if "metadata" in p.name), None)
    if metadata is None and json_files:
        metadata = json_files[0]

    if position is None or color is None:
        raise FileNotFoundError("Could not identify position and color files. "
                                'Make sure filenames contain "position" and "color"')
    if metadata is None:
        print("[identify_texture_files] No metadata file found! This will cause incorrect scaling.")
    return position, color, metadata


def load_from_textures(position_path,
                       color_path,
                       metadata_path=None,
                       options: CodecOptions = CodecOptions()) -> PointCollection:
    position, color, meta = read_texture_files(position_path, color_path, metadata_path)
    h, w = position.shape[:2]
    print(f"[load_from_textures] Loading textures ({w}x{h})")
    collection = decode_textures(position, color, meta, options)
    print(f"[load_from_textures] Loaded {len(collection)} particles from textures.")
    return collection

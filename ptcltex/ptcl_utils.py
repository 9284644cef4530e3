import json
import os
from pathlib import Path

import numpy as np
from plyfile import PlyData, PlyElement

from ptcltex.cfg import Cfg
from ptcltex.formats import parse_particle_data
from ptcltex.models import Point, PointCollection
from ptcltex.subsample import optimize_for_rendering

PLY_SOURCE = "ply"


def load_particle_json(path):
    """Parse a Houdini or internal particle JSON file into a PointCollection."""
    size_mb = os.path.getsize(path) / (1024 * 1024)
    print(f"[load_particle_json] Parsing {path} ({size_mb:.1f} MB)")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    collection = parse_particle_data(data)
    print(f"[load_particle_json] Loaded {len(collection)} particles.")
    return collection

def save_particle_json(collection: PointCollection, path):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(collection.to_document(), f)
    print(f"[save_particle_json] Saved {len(collection)} particles to {path}.")

def load_ply(path):
    """
    vertex_data[i]:
    np.void((252.0, 247.0, 121.0, 155, 79, 12),
    dtype=[('x', '<f4'), ('y', '<f4'), ('z', '<f4'), ('red', 'u1'), ('green', 'u1'), ('blue', 'u1')])

    Colours are rescaled to [0..1]; positions are kept in file units.
    """
    with open(path, 'rb') as f:
        plydata = PlyData.read(f)
    vertex_data = plydata['vertex'].data
    names = vertex_data.dtype.names
    pts_np = np.stack([vertex_data['x'], vertex_data['y'], vertex_data['z']], axis=-1).astype(np.float64)
    if all(c in names for c in ('red', 'green', 'blue')):
        cols_np = np.stack([vertex_data['red'], vertex_data['green'], vertex_data['blue']], axis=-1)
        cols_np = cols_np.astype(np.float64) / 255.0
    else:
        cols_np = np.ones_like(pts_np)

    points = [Point(f"particle_{i}", tuple(p), tuple(c), 1.0)
              for i, (p, c) in enumerate(zip(pts_np.tolist(), cols_np.tolist()))]
    print(f"[load_ply] Loaded {len(points)} points from {path}.")
    return PointCollection(points, source=PLY_SOURCE)

def save_ply(path, collection: PointCollection):
    """
    Saves a point collection to a binary PLY file.
    Positions are written as float32, colours as uint8 (0..255).
    """
    pts = collection.positions()
    cols = np.floor(np.clip(collection.colors(), 0.0, 1.0) * 255 + 0.5).astype(np.uint8)
    vertices = np.empty(len(collection),
                        dtype=[('x', 'f4'), ('y', 'f4'), ('z', 'f4'),
                               ('red', 'u1'), ('green', 'u1'), ('blue', 'u1')])
    vertices['x'], vertices['y'], vertices['z'] = pts[:, 0], pts[:, 1], pts[:, 2]
    vertices['red'], vertices['green'], vertices['blue'] = cols[:, 0], cols[:, 1], cols[:, 2]
    el = PlyElement.describe(vertices, 'vertex')
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    PlyData([el]).write(str(path))
    print(f"[save_ply] Saved point cloud with {len(collection)} points to {path}.")

def load_particles(path, optimize: bool = True, force: bool = False,
                   max_n: int = Cfg.MAX_PARTICLES) -> PointCollection:
    """Load JSON or PLY by suffix, then cap the working set."""
    suffix = Path(path).suffix.lower()
    if suffix == ".ply":
        collection = load_ply(path)
    elif suffix == ".json":
        collection = load_particle_json(path)
    else:
        raise ValueError(f"Unsupported particle file {path}: expected .json or .ply")
    if optimize:
        collection = optimize_for_rendering(collection, force=force, max_n=max_n)
    return collection

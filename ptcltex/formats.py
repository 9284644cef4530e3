"""Detection and normalisation of the two particle JSON layouts.

``houdini``  - ``[{"P": [x,y,z], "Cd": [r,g,b]}, ...]``
``internal`` - ``{"particles": [{"id", "position", "color", "size"?}, ...], "metadata"?: {...}}``

Only the first record is inspected when classifying a document.
"""
from __future__ import annotations
from collections.abc import Mapping
from typing import Any, List

from ptcltex.errors import UnrecognizedFormat
from ptcltex.models import Bounds, Point, PointCollection

HOUDINI  = "houdini"
INTERNAL = "internal"


def _is_vec3(v: Any) -> bool:
    return isinstance(v, (list, tuple)) and len(v) == 3

def is_houdini_format(doc: Any) -> bool:
    return (isinstance(doc, (list, tuple))
            and len(doc) > 0
            and isinstance(doc[0], Mapping)
            and "P" in doc[0] and "Cd" in doc[0]
            and _is_vec3(doc[0]["P"])
            and _is_vec3(doc[0]["Cd"]))

def is_internal_format(doc: Any) -> bool:
    if not isinstance(doc, Mapping):
        return False
    particles = doc.get("particles")
    return (isinstance(particles, (list, tuple))
            and len(particles) > 0
            and isinstance(particles[0], Mapping)
            and "position" in particles[0]
            and "color" in particles[0])

def detect_format(doc: Any) -> str:
    if is_houdini_format(doc):
        return HOUDINI
    if is_internal_format(doc):
        return INTERNAL
    raise UnrecognizedFormat('Unknown particle data format. Expected Houdini format '
                             '[{"P":[x,y,z],"Cd":[r,g,b]}] or internal format {"particles":[...]}')


def _build(idx: int, pid, position, color, size) -> Point:
    try:
        return Point.make(pid, position, color, size)
    except (TypeError, ValueError) as e:
        raise UnrecognizedFormat(f"Particle {idx} is malformed: {e}") from e

def convert_from_houdini(doc: List[Mapping]) -> PointCollection:
    points = []
    for i, rec in enumerate(doc):
        try:
            pos, col = rec["P"], rec["Cd"]
        except (KeyError, TypeError) as e:
            raise UnrecognizedFormat(f"Particle {i} is missing {e}") from e
        points.append(_build(i, f"particle_{i}", pos, col, 1.0))
    return PointCollection(points, source=HOUDINI)

def convert_from_internal(doc: Mapping) -> PointCollection:
    points = []
    for i, rec in enumerate(doc["particles"]):
        try:
            pos, col = rec["position"], rec["color"]
        except (KeyError, TypeError) as e:
            raise UnrecognizedFormat(f"Particle {i} is missing {e}") from e
        size = rec.get("size")
        points.append(_build(i, rec.get("id", f"particle_{i}"), pos, col,
                             1.0 if size is None else size))

    # malformed metadata is ignored, the particles are still usable
    meta = doc.get("metadata")
    if not isinstance(meta, Mapping):
        meta = {}
    created, source = meta.get("created"), meta.get("source")
    original = meta.get("originalCount")
    if isinstance(original, bool) or not isinstance(original, int):
        original = None
    return PointCollection(points,
                           bounds=Bounds.from_dict(meta.get("bounds")),
                           created=created if isinstance(created, str) else None,
                           source=source if isinstance(source, str) else None,
                           optimized=meta.get("optimized") is True,
                           original_count=original)


def parse_particle_data(doc: Any) -> PointCollection:
    fmt = detect_format(doc)
    if fmt == HOUDINI:
        print(f"[formats] Detected Houdini format with {len(doc)} particles")
        return convert_from_houdini(doc)
    print(f"[formats] Detected internal format with {len(doc['particles'])} particles")
    return convert_from_internal(doc)

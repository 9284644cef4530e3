from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]

################################################################################
# ╭──────────────────────  DATA STRUCTURES  ───────────────────────╮
################################################################################

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def _vec3(v) -> Vec3:
    x, y, z = v
    return float(x), float(y), float(z)


class Point(NamedTuple):
    """One particle. Transformations build a new Point instead of mutating."""
    id: str
    position: Vec3
    color: Vec3
    size: float = 1.0

    @classmethod
    def make(cls, pid: str, position, color, size: float = 1.0) -> "Point":
        return cls(str(pid), _vec3(position), _vec3(color), float(size))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "position": list(self.position),
                "color": list(self.color), "size": self.size}


class Bounds(NamedTuple):
    min: Vec3
    max: Vec3

    @classmethod
    def zero(cls) -> "Bounds":
        return cls((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def span(self) -> np.ndarray:
        """Per-axis range; degenerate axes get 1 so quantization never divides by zero."""
        rng = np.asarray(self.max, np.float64) - np.asarray(self.min, np.float64)
        rng[rng == 0] = 1.0
        return rng

    def flipped(self, axis: int) -> "Bounds":
        """Bounds of the same point set with *axis* negated (-max becomes min)."""
        lo, hi = list(self.min), list(self.max)
        lo[axis], hi[axis] = -self.max[axis], -self.min[axis]
        return Bounds(tuple(lo), tuple(hi))

    def to_dict(self) -> Dict[str, Any]:
        return {"min": list(self.min), "max": list(self.max)}

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> Optional["Bounds"]:
        """Parse ``{"min": [..], "max": [..]}``; anything malformed yields None."""
        if not isinstance(d, dict):
            return None
        try:
            return cls(_vec3(d["min"]), _vec3(d["max"]))
        except (KeyError, TypeError, ValueError):
            return None


class PointCollection:
    """Ordered particles plus bounds and provenance."""
    __slots__ = ("points", "bounds", "created", "source", "optimized", "original_count")

    def __init__(self,
                 points: Sequence[Point],
                 bounds: Optional[Bounds] = None,
                 created: Optional[str] = None,
                 source: Optional[str] = None,
                 optimized: bool = False,
                 original_count: Optional[int] = None):
        from ptcltex.bounds import compute_bounds

        self.points: Tuple[Point, ...] = tuple(points)
        self.bounds = bounds if bounds is not None else compute_bounds(self.points)
        self.created = created or now_iso()
        self.source = source
        self.optimized = bool(optimized)
        self.original_count = len(self.points) if original_count is None else int(original_count)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, idx):
        return self.points[idx]

    def __repr__(self) -> str:
        return (f"PointCollection(count={len(self)}, source={self.source!r}, "
                f"optimized={self.optimized}, bounds={tuple(self.bounds)})")

    def positions(self) -> np.ndarray:
        if not self.points:
            return np.zeros((0, 3), np.float64)
        return np.array([p.position for p in self.points], np.float64)

    def colors(self) -> np.ndarray:
        if not self.points:
            return np.zeros((0, 3), np.float64)
        return np.array([p.color for p in self.points], np.float64)

    def to_document(self) -> Dict[str, Any]:
        """Internal (Format-B) JSON document."""
        return {
            "particles": [p.to_dict() for p in self.points],
            "metadata": {
                "count": len(self),
                "bounds": self.bounds.to_dict(),
                "created": self.created,
                "source": self.source,
                "optimized": self.optimized,
                "originalCount": self.original_count,
            },
        }


class TextureMeta(NamedTuple):
    width: Optional[int] = None
    height: Optional[int] = None
    particle_count: Optional[int] = None
    bounds: Optional[Bounds] = None
    format: Optional[str] = None
    precision: Optional[str] = None
    created: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "particleCount": self.particle_count,
            "bounds": self.bounds.to_dict() if self.bounds is not None else None,
            "format": self.format,
            "precision": self.precision,
            "created": self.created,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TextureMeta":
        """Tolerant reader: absent or malformed keys become None."""
        def _int(key):
            v = d.get(key)
            return int(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else None
        return cls(width=_int("width"),
                   height=_int("height"),
                   particle_count=_int("particleCount"),
                   bounds=Bounds.from_dict(d.get("bounds")),
                   format=d.get("format"),
                   precision=d.get("precision"),
                   created=d.get("created"))


class TextureDocument(NamedTuple):
    position: np.ndarray    # (S,S,4) uint8, RGB = quantized xyz
    color: np.ndarray       # (S,S,4) uint8, RGB = quantized colour
    metadata: TextureMeta

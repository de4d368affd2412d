# File: src/steel_framing_generator/utils/geometry_helpers.py
"""
Geometry helpers for the stud network solver.

Points and vectors are numpy arrays of shape (3,). Lines are immutable
``LineSegment`` values; a member that gets trimmed or extended receives a new
segment rather than mutating the old one.

All distances are in the same physical units as the input lines (inches for
the default shop constants).
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import DegenerateGeometryError

PointLike = Union[np.ndarray, Sequence[float]]

# Squared lengths below this are treated as zero
_EPSILON = 1e-12


def as_point(value: PointLike) -> np.ndarray:
    """Convert a point-like value to a float numpy array of shape (3,)."""
    arr = np.asarray(value, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {arr.shape}")
    return arr


@dataclass(frozen=True, eq=False)
class LineSegment:
    """
    A finite 3D line segment.

    Attributes:
        start: Start point (3,)
        end: End point (3,)
    """

    start: np.ndarray
    end: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "start", as_point(self.start))
        object.__setattr__(self, "end", as_point(self.end))

    @classmethod
    def from_points(cls, start: PointLike, end: PointLike) -> "LineSegment":
        return cls(as_point(start), as_point(end))

    @property
    def vector(self) -> np.ndarray:
        """Vector from start to end (not normalized)."""
        return self.end - self.start

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.vector))

    @property
    def is_degenerate(self) -> bool:
        return float(self.vector @ self.vector) < _EPSILON

    def direction(self) -> np.ndarray:
        """Unit direction from start to end."""
        return normalize(self.vector)

    def point_at_parameter(self, t: float) -> np.ndarray:
        """Point at normalized parameter t (0 at start, 1 at end)."""
        return self.start + t * self.vector

    def point_at_length(self, distance: float) -> np.ndarray:
        """Point at a distance from the start, measured along the segment."""
        return self.point_at_parameter(distance / self.length)

    def parameter_at_point(self, point: PointLike) -> float:
        """Normalized parameter of the closest point on the segment, clamped to [0, 1]."""
        _, t = point_to_segment_distance(point, self)
        return t

    def length_at_point(self, point: PointLike) -> float:
        """Distance from start to the closest point on the segment."""
        return self.parameter_at_point(point) * self.length

    def distance_to_point(self, point: PointLike) -> float:
        dist, _ = point_to_segment_distance(point, self)
        return dist

    def with_start(self, point: PointLike) -> "LineSegment":
        return LineSegment(as_point(point), self.end)

    def with_end(self, point: PointLike) -> "LineSegment":
        return LineSegment(self.start, as_point(point))

    def to_dict(self) -> dict:
        return {
            "start": [round(float(c), 6) for c in self.start],
            "end": [round(float(c), 6) for c in self.end],
        }

    def __repr__(self) -> str:
        s = ", ".join(f"{c:g}" for c in self.start)
        e = ", ".join(f"{c:g}" for c in self.end)
        return f"LineSegment(({s}) -> ({e}))"


# =============================================================================
# Vector Utilities
# =============================================================================


def normalize(vector: PointLike) -> np.ndarray:
    """Return the unit vector; raises DegenerateGeometryError for zero vectors."""
    v = np.asarray(vector, dtype=float)
    norm = float(np.linalg.norm(v))
    if not math.isfinite(norm) or norm * norm < _EPSILON:
        raise DegenerateGeometryError(None, "cannot normalize a zero-length vector")
    return v / norm


def flip(vector: np.ndarray) -> np.ndarray:
    return -np.asarray(vector, dtype=float)


def angle_between(v1: PointLike, v2: PointLike) -> float:
    """Angle between two vectors in radians (0 to pi)."""
    a = np.asarray(v1, dtype=float)
    b = np.asarray(v2, dtype=float)
    mag = float(np.linalg.norm(a) * np.linalg.norm(b))
    if mag < _EPSILON:
        raise DegenerateGeometryError(None, "angle undefined for zero-length vector")
    cos_angle = max(-1.0, min(1.0, float(a @ b) / mag))
    return math.acos(cos_angle)


def checked_divide(
    numerator: float,
    denominator: float,
    member_id: Optional[str] = None,
    what: str = "offset",
) -> float:
    """Divide, raising DegenerateGeometryError instead of producing inf/NaN."""
    if not math.isfinite(denominator) or abs(denominator) < _EPSILON:
        raise DegenerateGeometryError(
            member_id, f"zero denominator while computing {what}"
        )
    return numerator / denominator


def rotate_about_axis(
    vector: PointLike, axis: PointLike, degrees: float
) -> np.ndarray:
    """Rotate a vector about an axis through the origin (right-hand rule)."""
    v = np.asarray(vector, dtype=float)
    k = normalize(axis)
    theta = math.radians(degrees)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    # Rodrigues' rotation formula
    return v * cos_t + np.cross(k, v) * sin_t + k * float(k @ v) * (1.0 - cos_t)


def mirror_across_plane(vector: PointLike, plane_normal: PointLike) -> np.ndarray:
    """Mirror a vector across the plane through the origin with the given normal."""
    v = np.asarray(vector, dtype=float)
    n = normalize(plane_normal)
    return v - 2.0 * float(v @ n) * n


# =============================================================================
# Tolerance Tests
# =============================================================================


def same_points(p1: PointLike, p2: PointLike, tolerance: float) -> bool:
    """Check if two points coincide, comparing each coordinate within tolerance."""
    a = np.asarray(p1, dtype=float)
    b = np.asarray(p2, dtype=float)
    return bool(np.all(np.abs(a - b) < tolerance))


def common_and_end_points(
    line1: LineSegment, line2: LineSegment, tolerance: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Shared endpoint of two lines that meet end to end, and their far ends.

    Returns:
        (common, line1_end, line2_end). When no endpoints coincide the
        end/end pairing is assumed.
    """
    if same_points(line1.start, line2.start, tolerance):
        return line1.start, line1.end, line2.end
    if same_points(line1.start, line2.end, tolerance):
        return line1.start, line1.end, line2.start
    if same_points(line1.end, line2.start, tolerance):
        return line1.end, line1.start, line2.end
    return line1.end, line1.start, line2.start


def parallel_normals(n1: PointLike, n2: PointLike, tolerance: float) -> bool:
    """Check if two unit normals are parallel or antiparallel (|dot| > 1 - tolerance)."""
    similarity = float(np.dot(n1, n2))
    return abs(similarity) > 1.0 - tolerance


def joint_plane_normal(line1: LineSegment, line2: LineSegment) -> np.ndarray:
    """
    Normal of the plane that best fits two lines.

    The plane normal is the normalized cross product of the two line vectors.
    Raises DegenerateGeometryError when the lines are parallel.
    """
    cross = np.cross(line1.vector, line2.vector)
    if not np.all(np.isfinite(cross)):
        raise DegenerateGeometryError(None, "non-finite line coordinates")
    scale = line1.length * line2.length
    if scale < _EPSILON or float(np.linalg.norm(cross)) < 1e-9 * scale:
        raise DegenerateGeometryError(None, "parallel lines do not define a plane")
    return normalize(cross)


# =============================================================================
# Distances and Closest Points
# =============================================================================


def point_to_segment_distance(
    point: PointLike, segment: LineSegment
) -> Tuple[float, float]:
    """
    Distance from a point to a line segment, and parameter t along segment.

    Returns:
        (distance, t) where t is 0.0 at segment start, 1.0 at segment end,
        clamped to [0, 1].
    """
    p = as_point(point)
    d = segment.vector
    seg_len_sq = float(d @ d)

    if seg_len_sq < _EPSILON:
        # Degenerate segment (zero length)
        return float(np.linalg.norm(p - segment.start)), 0.0

    t = float((p - segment.start) @ d) / seg_len_sq
    t = max(0.0, min(1.0, t))
    closest = segment.start + t * d
    return float(np.linalg.norm(p - closest)), t


def segment_to_segment_distance(line1: LineSegment, line2: LineSegment) -> float:
    """
    Minimum distance between two finite segments.

    Clamps both closest-point parameters to the segments, so endpoints are
    accounted for. Parallel and zero-length segments are handled without
    dividing by zero.
    """
    d1 = line1.vector
    d2 = line2.vector
    r = line1.start - line2.start
    a = float(d1 @ d1)
    e = float(d2 @ d2)
    f = float(d2 @ r)

    if a < _EPSILON and e < _EPSILON:
        return float(np.linalg.norm(r))

    if a < _EPSILON:
        s = 0.0
        t = _clamp01(f / e)
    else:
        c = float(d1 @ r)
        if e < _EPSILON:
            t = 0.0
            s = _clamp01(-c / a)
        else:
            b = float(d1 @ d2)
            denom = a * e - b * b
            # Parallel segments: any s works, pick the start and fix up t
            s = _clamp01((b * f - c * e) / denom) if denom > _EPSILON * a * e else 0.0
            t = (b * s + f) / e
            if t < 0.0:
                t = 0.0
                s = _clamp01(-c / a)
            elif t > 1.0:
                t = 1.0
                s = _clamp01((b - c) / a)

    closest1 = line1.start + s * d1
    closest2 = line2.start + t * d2
    return float(np.linalg.norm(closest1 - closest2))


def closest_point_to_other_line(line: LineSegment, other: LineSegment) -> np.ndarray:
    """
    Point on the (infinite) line through ``line`` closest to the line through ``other``.

    For parallel or collinear lines the closest point is not unique; the
    projection of ``other.start`` onto ``line`` is returned instead.
    """
    d1 = line.vector
    d2 = other.vector
    w = line.start - other.start
    a = float(d1 @ d1)
    if a < _EPSILON:
        raise DegenerateGeometryError(None, "closest point on a zero-length line")
    b = float(d1 @ d2)
    c = float(d2 @ d2)
    d = float(d1 @ w)
    e = float(d2 @ w)

    denom = a * c - b * b
    if denom <= 1e-9 * a * c:
        t = -d / a
    else:
        t = (b * e - c * d) / denom
    return line.start + t * d1


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))

# File: tests/stud_network/conftest.py

"""Shared line networks for stud network tests.

Lines are ((x, y, z), (x, y, z)) tuples in inches. All networks lie in the
XY plane unless noted.
"""

import math

import pytest
from typing import List, Tuple

Line = Tuple[Tuple[float, float, float], Tuple[float, float, float]]


# =============================================================================
# Fixtures: Line Networks
# =============================================================================


@pytest.fixture
def unit_knee_lines() -> List[Line]:
    """Two perpendicular unit lines sharing their start point (a knee).

    Line 0: (0,0,0) -> (1,0,0)
    Line 1: (0,0,0) -> (0,1,0)
    """
    return [
        ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
        ((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
    ]


@pytest.fixture
def knee_lines() -> List[Line]:
    """Two perpendicular 24" lines sharing their start point."""
    return [
        ((0.0, 0.0, 0.0), (24.0, 0.0, 0.0)),
        ((0.0, 0.0, 0.0), (0.0, 24.0, 0.0)),
    ]


@pytest.fixture
def angled_knee_lines() -> List[Line]:
    """Two 24" lines meeting at 60 degrees, end of line 0 to start of line 1."""
    angle = math.radians(120)
    return [
        ((0.0, 0.0, 0.0), (24.0, 0.0, 0.0)),
        ((24.0, 0.0, 0.0), (24.0 + 24.0 * math.cos(angle), 24.0 * math.sin(angle), 0.0)),
    ]


@pytest.fixture
def triangle_lines() -> List[Line]:
    """Closed right triangle, each line ending where the next starts.

    A = (0,0,0), B = (20,0,0), C = (0,20,0)
    Line 0: A -> B, Line 1: B -> C, Line 2: C -> A
    """
    a = (0.0, 0.0, 0.0)
    b = (20.0, 0.0, 0.0)
    c = (0.0, 20.0, 0.0)
    return [(a, b), (b, c), (c, a)]


@pytest.fixture
def tee_lines() -> List[Line]:
    """Line 1 ends at the middle of line 0.

    Line 0: (0,0,0) -> (20,0,0)
    Line 1: (10,0,0) -> (10,10,0)
    """
    return [
        ((0.0, 0.0, 0.0), (20.0, 0.0, 0.0)),
        ((10.0, 0.0, 0.0), (10.0, 10.0, 0.0)),
    ]


@pytest.fixture
def cross_lines() -> List[Line]:
    """Two lines crossing at their midpoints.

    Line 0: (0,0,0) -> (20,0,0)
    Line 1: (10,-10,0) -> (10,10,0)
    """
    return [
        ((0.0, 0.0, 0.0), (20.0, 0.0, 0.0)),
        ((10.0, -10.0, 0.0), (10.0, 10.0, 0.0)),
    ]


@pytest.fixture
def face_to_face_lines() -> List[Line]:
    """Two lines crossing near the start of line 0.

    Line 0: (0,0,0) -> (20,0,0)
    Line 1: (1,-10,0) -> (1,10,0), crosses line 0 one inch from its start
    """
    return [
        ((0.0, 0.0, 0.0), (20.0, 0.0, 0.0)),
        ((1.0, -10.0, 0.0), (1.0, 10.0, 0.0)),
    ]


@pytest.fixture
def collinear_overlap_lines() -> List[Line]:
    """Two collinear lines overlapping between x=5 and x=10."""
    return [
        ((0.0, 0.0, 0.0), (10.0, 0.0, 0.0)),
        ((5.0, 0.0, 0.0), (15.0, 0.0, 0.0)),
    ]


@pytest.fixture
def disconnected_lines() -> List[Line]:
    """A knee plus a line far away from it."""
    return [
        ((0.0, 0.0, 0.0), (24.0, 0.0, 0.0)),
        ((0.0, 0.0, 0.0), (0.0, 24.0, 0.0)),
        ((100.0, 100.0, 0.0), (120.0, 100.0, 0.0)),
    ]


@pytest.fixture
def ladder_lines() -> List[Line]:
    """A long chain of knees zig-zagging along X.

    Each line ends where the next starts, so every joint is a knee.
    """
    lines = []
    for i in range(200):
        y0 = 0.0 if i % 2 == 0 else 10.0
        y1 = 10.0 - y0
        lines.append(((10.0 * i, y0, 0.0), (10.0 * (i + 1), y1, 0.0)))
    return lines


@pytest.fixture
def web_out_knee_lines() -> List[Line]:
    """Two perpendicular 24" lines that both end at the origin.

    Line 0: (24,0,0) -> (0,0,0)
    Line 1: (0,24,0) -> (0,0,0)

    Member 0 is seeded with normal +Y, so both webs face into the knee and
    the knee is trimmed from the web side.
    """
    return [
        ((24.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        ((0.0, 24.0, 0.0), (0.0, 0.0, 0.0)),
    ]


@pytest.fixture
def web_facing_tee_lines() -> List[Line]:
    """Line 1 ends at the middle of line 0, on the side line 0's web faces.

    Line 0: (20,0,0) -> (0,0,0), seeded with normal +Y
    Line 1: (10,10,0) -> (10,0,0)
    """
    return [
        ((20.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        ((10.0, 10.0, 0.0), (10.0, 0.0, 0.0)),
    ]

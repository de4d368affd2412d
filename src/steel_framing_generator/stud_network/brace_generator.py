# File: src/steel_framing_generator/stud_network/brace_generator.py

"""Brace generation for knee (BR) joints.

Every BR connection gets a diagonal brace across the inside of the knee,
either as a single straight piece or, with ``three_piece_brace`` enabled, as
an interior piece along the bisector plus one exterior piece per host member.

Naming:
    BR   single brace
    BR2  interior piece of a three-piece brace
    BR1  exterior pieces of a three-piece brace

Brace ids append the two host member indices (and for exterior pieces the
host the piece dimples into), e.g. ``BR_1_0`` or ``BR1_1_0_0``.

Each brace carries END_TRUSS at both ends and a DIMPLE one dimple offset in
from each end. Each host member gets a DIMPLE and a SWAGE where a brace
dimples into it.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

import numpy as np

from ..config.framing_options import DIMPLE_OFFSET, FramingOptions
from ..errors import DegenerateGeometryError
from ..utils.geometry_helpers import (
    LineSegment,
    angle_between,
    checked_divide,
    common_and_end_points,
    normalize,
    rotate_about_axis,
)
from ..utils.logging_config import get_logger
from .network_types import Connection, ConnectionType, Member, MemberKind, OperationType

if TYPE_CHECKING:
    from .structure import Structure

logger = get_logger(__name__)


@dataclass
class KneeGeometry:
    """Frame of a knee joint, measured from the shared endpoint.

    Attributes:
        common: Shared endpoint of the two host axes.
        v1: Unit vector from common toward the far end of the first host.
        v2: Unit vector from common toward the far end of the second host.
        bisector: Unit bisector of v1 and v2 (points into the knee).
        half_angle: Half the opening angle of the knee, radians.
        web_out: True when the first host's web faces out of the knee.
        flange_offset: Distance along the bisector from the axis
            intersection to where the flanges meet.
    """

    common: np.ndarray
    v1: np.ndarray
    v2: np.ndarray
    bisector: np.ndarray
    half_angle: float
    web_out: bool
    flange_offset: float


def knee_geometry(
    host1: Member, host2: Member, options: FramingOptions
) -> KneeGeometry:
    """Measure the knee between two members that share an endpoint."""
    common, end1, end2 = common_and_end_points(
        host1.web_axis, host2.web_axis, options.intersection_tolerance
    )
    try:
        v1 = normalize(end1 - common)
        v2 = normalize(end2 - common)
        bisector = normalize(v1 + v2)
    except DegenerateGeometryError as exc:
        raise DegenerateGeometryError(
            host1.id, f"knee with member {host2.id}: {exc.extra['reason']}"
        ) from exc

    web_out = float(np.cross(v1, v2) @ np.cross(v1, host1.web_normal)) > 0
    half_angle = angle_between(v1, v2) / 2.0
    flange_offset = checked_divide(
        options.stud_height / 2.0,
        math.cos(math.pi / 2.0 - half_angle),
        host1.id,
        "knee flange offset",
    )
    return KneeGeometry(common, v1, v2, bisector, half_angle, web_out, flange_offset)


def make_brace(
    name: str, start: np.ndarray, end: np.ndarray, web_normal: np.ndarray
) -> Member:
    """Create a brace member with its end and dimple operations."""
    axis = LineSegment(start, end)
    if axis.is_degenerate:
        raise DegenerateGeometryError(name, "brace endpoints coincide")
    brace = Member(
        id=name,
        web_axis=axis,
        web_normal=normalize(web_normal),
        kind=MemberKind.BRACE,
    )
    length = brace.length
    brace.add_operation(0.0, OperationType.END_TRUSS)
    brace.add_operation(DIMPLE_OFFSET, OperationType.DIMPLE)
    brace.add_operation(length, OperationType.END_TRUSS)
    brace.add_operation(length - DIMPLE_OFFSET, OperationType.DIMPLE)
    return brace


def _dimple_host(host: Member, point: np.ndarray) -> None:
    host.add_operation_at_point(point, OperationType.DIMPLE)
    host.add_operation_at_point(point, OperationType.SWAGE)


def single_brace(
    connection: Connection,
    host1: Member,
    host2: Member,
    knee: KneeGeometry,
    options: FramingOptions,
) -> List[Member]:
    """One straight brace whose dimples sit brace_length_1 apart."""
    dimple_span = options.brace_length_1 - 2 * DIMPLE_OFFSET
    half_height = options.stud_height / 2.0

    common_offset = -knee.flange_offset if knee.web_out else knee.flange_offset
    elbow = knee.common - knee.bisector * common_offset
    arms_offset = checked_divide(
        dimple_span / 2.0, math.sin(knee.half_angle), host1.id, "brace arm length"
    )

    dimple1 = elbow + knee.v1 * arms_offset
    dimple2 = elbow + knee.v2 * arms_offset
    _dimple_host(host1, dimple1)
    _dimple_host(host2, dimple2)

    brace_direction = normalize(dimple2 - dimple1)
    brace_start = dimple1 - brace_direction * DIMPLE_OFFSET + knee.bisector * half_height
    brace_end = dimple2 + brace_direction * DIMPLE_OFFSET + knee.bisector * half_height

    name = f"BR_{connection.members[0]}_{connection.members[1]}"
    return [make_brace(name, brace_start, brace_end, -knee.bisector)]


def three_piece_brace(
    connection: Connection,
    host1: Member,
    host2: Member,
    knee: KneeGeometry,
    options: FramingOptions,
) -> List[Member]:
    """An interior piece along the bisector plus one exterior piece per host.

    Returns the pieces as [interior, exterior on host1, exterior on host2].
    """
    interior_span = options.brace_length_2 - 2 * DIMPLE_OFFSET
    exterior_span = options.brace_length_1 - 2 * DIMPLE_OFFSET
    half_height = options.stud_height / 2.0
    d = knee.flange_offset
    a = knee.half_angle

    # Distance along each host from the flange corner to the exterior dimple
    sin_a = math.sin(a)
    ratio = checked_divide(sin_a * interior_span, exterior_span, host1.id, "brace ratio")
    if abs(ratio) > 1.0:
        raise DegenerateGeometryError(
            host1.id,
            f"interior brace span {interior_span:.3f} cannot reach the exterior "
            f"braces at a {math.degrees(2 * a):.1f} degree knee",
        )
    exterior_reach = checked_divide(
        math.sin(math.pi - (a + math.asin(ratio))) * exterior_span,
        sin_a,
        host1.id,
        "exterior brace reach",
    )

    interior_start_offset = DIMPLE_OFFSET - d if knee.web_out else DIMPLE_OFFSET + d
    interior_end_offset = options.brace_length_2 - interior_start_offset

    plane_axis = np.cross(knee.v1, knee.v2)
    interior_normal = normalize(rotate_about_axis(knee.bisector, plane_axis, 90.0))
    interior_start = (
        knee.common
        - knee.bisector * interior_start_offset
        - interior_normal * half_height
    )
    interior_end = (
        knee.common
        + knee.bisector * interior_end_offset
        - interior_normal * half_height
    )

    suffix = f"{connection.members[0]}_{connection.members[1]}"
    interior = make_brace(f"BR2_{suffix}", interior_start, interior_end, interior_normal)

    corner_dimple = knee.common + knee.bisector * (d if knee.web_out else -d)
    brace_dimple = (
        interior_end
        + normalize(interior_start - interior_end) * DIMPLE_OFFSET
        + interior_normal * half_height
    )

    exteriors = []
    for host, direction, rotation_axis in (
        (host1, knee.v1, np.cross(knee.v2, knee.v1)),
        (host2, knee.v2, plane_axis),
    ):
        host_dimple = corner_dimple + direction * exterior_reach
        brace_direction = normalize(brace_dimple - host_dimple)
        brace_normal = normalize(rotate_about_axis(brace_direction, rotation_axis, -90.0))
        start = host_dimple - brace_direction * DIMPLE_OFFSET - brace_normal * half_height
        end = brace_dimple + brace_direction * DIMPLE_OFFSET - brace_normal * half_height
        exteriors.append(make_brace(f"BR1_{suffix}_{host.id}", start, end, brace_normal))
        _dimple_host(host, host_dimple)

    return [interior] + exteriors


def generate_braces(structure: "Structure", options: FramingOptions) -> List[Member]:
    """Add braces for every BR connection to ``structure.braces``.

    Returns:
        The braces created by this call, in connection order.
    """
    structure.mark_phase("braces")

    created = []
    for connection in structure.connections_of_type(ConnectionType.BR):
        host1 = structure.members[connection.members[0]]
        host2 = structure.members[connection.members[1]]
        knee = knee_geometry(host1, host2, options)

        if options.three_piece_brace:
            braces = three_piece_brace(connection, host1, host2, knee, options)
        else:
            braces = single_brace(connection, host1, host2, knee, options)

        logger.debug(
            "Braced %s at %.1f degrees: %s",
            connection,
            math.degrees(2 * knee.half_angle),
            ", ".join(b.id for b in braces),
        )
        created.extend(braces)

    structure.braces.extend(created)
    logger.info("Generated %d brace member(s)", len(created))
    return created

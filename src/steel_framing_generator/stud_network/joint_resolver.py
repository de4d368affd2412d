# File: src/steel_framing_generator/stud_network/joint_resolver.py

"""Joint resolution: trims member axes and punches operations at each joint.

Resolvers run per connection type, each once per structure:
- FTF: extend both members past the crossing and punch web holes and a bolt
- BR: trim the knee so the flanges meet and cut clearances for the other member
- T: extend the terminating member into the cross member and notch the cross
- PT: same procedure as T, applied to a pass-through pair (not run by a build)

All operation locations are distances along the member's web axis at the
time the operation is added. Moving an axis start later re-anchors them.
"""

import math
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from ..config.framing_options import (
    DIMPLE_OFFSET,
    END_OFFSET,
    INSERTION_CLEARANCE,
    OPERATION_SPACING,
    FramingOptions,
)
from ..errors import UnclassifiableJointError
from ..utils.geometry_helpers import (
    LineSegment,
    angle_between,
    checked_divide,
    closest_point_to_other_line,
    common_and_end_points,
    normalize,
    same_points,
)
from ..utils.logging_config import get_logger
from .network_types import Connection, ConnectionType, Member, OperationType

if TYPE_CHECKING:
    from .structure import Structure

logger = get_logger(__name__)


def _acute(angle: float) -> float:
    """Fold an angle between two lines into [0, pi/2]."""
    return math.pi - angle if angle > math.pi / 2 else angle


# =============================================================================
# Face-to-Face
# =============================================================================


def resolve_ftf_member(
    member: Member, other: Member, options: FramingOptions
) -> None:
    """Extend ``member`` past its crossing with ``other`` and punch web holes."""
    spacing = options.web_hole_spacing
    tolerance = options.intersection_tolerance

    axis = member.web_axis
    intersection = closest_point_to_other_line(axis, other.web_axis)
    angle = _acute(angle_between(axis.vector, other.web_axis.vector))

    if angle % (math.pi / 2) == 0:
        subtract = 0.0
    else:
        subtract = checked_divide(spacing, math.tan(angle), member.id, "FTF extension")
    min_extension = (
        checked_divide(spacing, math.sin(angle), member.id, "FTF extension")
        - subtract
        + 1.0
    )

    if (same_points(intersection, axis.start, tolerance)
            or float(np.linalg.norm(intersection - axis.start)) < min_extension):
        move = normalize(axis.start - axis.end) * min_extension
        member.set_web_axis_start(intersection + move)

    if (same_points(intersection, axis.end, tolerance)
            or float(np.linalg.norm(intersection - axis.end)) < min_extension):
        move = normalize(axis.end - axis.start) * min_extension
        member.set_web_axis_end(intersection + move)

    length = member.length
    intersection_location = member.web_axis.length_at_point(intersection)

    # cos(angle) never hits exactly zero in floating point, so right angles
    # divide through to the limit values
    tan_angle = math.tan(angle)
    hole_offset = checked_divide(
        (spacing / math.cos(angle)) - spacing, tan_angle, member.id, "web hole offset"
    )
    hole_spacing = checked_divide(2 * spacing, tan_angle, member.id, "web hole spacing")

    for location in (
        intersection_location - (hole_offset + hole_spacing),
        intersection_location - hole_offset,
        intersection_location + hole_offset,
        intersection_location + (hole_offset + hole_spacing),
    ):
        if 0.0 <= location <= length:
            member.add_operation(location, OperationType.WEB)

    member.add_operation(intersection_location, OperationType.BOLT)


def resolve_ftf_connections(structure: "Structure", options: FramingOptions) -> int:
    """Resolve every face-to-face connection. Returns the number resolved."""
    structure.mark_phase("ftf")

    connections = structure.connections_of_type(ConnectionType.FTF)
    for connection in connections:
        for member_index in connection.members:
            member = structure.members[member_index]
            other = structure.members[connection.get_other_index(member_index)]
            resolve_ftf_member(member, other, options)
        logger.debug("Resolved %s", connection)

    logger.info("Resolved %d FTF connection(s)", len(connections))
    return len(connections)


# =============================================================================
# Brace (knee) Trimming
# =============================================================================


def resolve_br_member(
    member: Member,
    common: np.ndarray,
    member_end: np.ndarray,
    other_end: np.ndarray,
    options: FramingOptions,
) -> None:
    """Trim ``member`` at a knee and cut clearances for the other member's flanges.

    Args:
        member: Member to trim.
        common: Shared endpoint of the two axes before either was trimmed.
        member_end: Far end of ``member``.
        other_end: Far end of the other member.
        options: Framing options.
    """
    member_vector = member_end - common
    other_vector = other_end - common
    angle = angle_between(member_vector, other_vector)
    half_height = options.stud_height / 2.0

    offset = checked_divide(
        (half_height / math.cos(angle)) + half_height,
        math.tan(angle),
        member.id,
        "knee trim",
    )
    web_out = (
        float(np.cross(member_vector, other_vector) @ np.cross(member_vector, member.web_normal))
        > 0
    )
    if web_out:
        offset = -offset

    new_end = common + normalize(-member_vector) * (offset + END_OFFSET)
    offset = abs(offset)

    at_start = same_points(common, member.web_axis.start, options.intersection_tolerance)
    if at_start:
        member.set_web_axis_start(new_end)
    else:
        member.set_web_axis_end(new_end)

    length = member.length

    def at(distance: float) -> float:
        return distance if at_start else length - distance

    interior_op = OperationType.LIP_CUT if web_out else OperationType.NOTCH
    exterior_op = OperationType.NOTCH if web_out else OperationType.LIP_CUT

    member.add_operation(at(0.0), OperationType.END_TRUSS)
    member.add_operation(at(END_OFFSET), OperationType.DIMPLE)
    member.add_operation(at(END_OFFSET), exterior_op)

    location = END_OFFSET
    while location < offset + INSERTION_CLEARANCE:
        member.add_operation(at(location), interior_op)
        location += OPERATION_SPACING
    member.add_operation(at(0.5 + offset), interior_op)


def resolve_br_connections(structure: "Structure", options: FramingOptions) -> int:
    """Trim both members of every brace connection. Returns the number resolved."""
    structure.mark_phase("br")

    connections = structure.connections_of_type(ConnectionType.BR)
    for connection in connections:
        # Both knees are measured before either member is trimmed
        knees = []
        for member_index in connection.members:
            member = structure.members[member_index]
            other = structure.members[connection.get_other_index(member_index)]
            knees.append((member, common_and_end_points(
                member.web_axis, other.web_axis, options.intersection_tolerance
            )))
        for member, (common, member_end, other_end) in knees:
            resolve_br_member(member, common, member_end, other_end, options)
        logger.debug("Resolved %s", connection)

    logger.info("Resolved %d BR connection(s)", len(connections))
    return len(connections)


# =============================================================================
# Tee and Pass-Through
# =============================================================================


def get_terminal_and_cross_member(
    structure: "Structure", connection: Connection, tolerance: float
) -> Optional[Tuple[int, int, LineSegment]]:
    """Find the member that ends on the other one.

    Returns:
        (terminal index, cross index, terminal line) where the terminal line
        runs from the end touching the cross member to the far end, or None
        when neither member ends on the other.
    """
    for member_index in connection.members:
        other_index = connection.get_other_index(member_index)
        axis = structure.members[member_index].web_axis
        other_axis = structure.members[other_index].web_axis
        for near, far in ((axis.start, axis.end), (axis.end, axis.start)):
            if other_axis.distance_to_point(near) < tolerance:
                return member_index, other_index, LineSegment(near, far)
    return None


def insert_terminal_member(
    terminal: Member,
    cross: Member,
    terminal_line: LineSegment,
    options: FramingOptions,
) -> None:
    """Extend a member that ends on another into it and notch the other.

    The terminal member gets END_TRUSS, DIMPLE and SWAGE at its joined end.
    The cross member gets a DIMPLE opposite the terminal's dimple and a run
    of NOTCH or LIP_CUT operations wide enough for the terminal's flanges.
    """
    terminal_vector = terminal_line.vector
    cross_vector = cross.web_axis.vector
    angle = _acute(angle_between(terminal_vector, cross_vector))
    half_height = options.stud_height / 2.0

    tan_angle = math.tan(angle)
    offset_facing = checked_divide(
        (half_height / math.cos(angle)) + half_height, tan_angle, terminal.id, "tee trim"
    )
    offset_away = checked_divide(
        (half_height / math.cos(angle)) - half_height, tan_angle, terminal.id, "tee trim"
    )

    webs_facing = float(cross.web_normal @ terminal.web_normal) < 0
    into_web = float(cross.web_normal @ terminal_vector) > 0
    offset = offset_facing if webs_facing else offset_away
    if into_web:
        offset = -offset

    new_end = terminal_line.start + normalize(-terminal_vector) * (offset + DIMPLE_OFFSET)
    at_start = same_points(
        terminal_line.start, terminal.web_axis.start, options.intersection_tolerance
    )
    if at_start:
        terminal.set_web_axis_start(new_end)
    else:
        terminal.set_web_axis_end(new_end)

    length = terminal.length

    def at(distance: float) -> float:
        return distance if at_start else length - distance

    terminal.add_operation(at(0.0), OperationType.END_TRUSS)
    terminal.add_operation(at(DIMPLE_OFFSET), OperationType.DIMPLE)
    terminal.add_operation(at(END_OFFSET), OperationType.SWAGE)

    dimple_point = terminal.web_axis.point_at_length(at(DIMPLE_OFFSET))
    dimple_point = dimple_point + normalize(terminal.web_normal) * half_height
    cross_location = cross.web_axis.length_at_point(dimple_point)
    cross.add_operation(cross_location, OperationType.DIMPLE)

    sin_angle = math.sin(angle)
    near_reach = (
        checked_divide(half_height, sin_angle, cross.id, "tee clearance")
        - checked_divide(half_height, tan_angle, cross.id, "tee clearance")
    )
    far_reach = (
        checked_divide(half_height, sin_angle, cross.id, "tee clearance")
        + checked_divide(half_height, tan_angle, cross.id, "tee clearance")
    )

    clearance_op = OperationType.LIP_CUT if into_web else OperationType.NOTCH
    leans_forward = float(cross_vector @ terminal_vector) > 0

    if leans_forward:
        start = cross_location - near_reach - INSERTION_CLEARANCE
        end = cross_location + far_reach + INSERTION_CLEARANCE
    else:
        start = cross_location + near_reach + INSERTION_CLEARANCE
        end = cross_location - far_reach - INSERTION_CLEARANCE
    start, end = min(start, end), max(start, end)

    location = start + END_OFFSET
    while location < end - END_OFFSET:
        cross.add_operation(location, clearance_op)
        location += OPERATION_SPACING
    cross.add_operation(end - END_OFFSET, clearance_op)


def _resolve_terminal_connections(
    structure: "Structure",
    options: FramingOptions,
    connection_type: ConnectionType,
) -> int:
    connections = structure.connections_of_type(connection_type)
    for connection in connections:
        found = get_terminal_and_cross_member(
            structure, connection, options.intersection_tolerance
        )
        if found is None:
            a, b = connection.members
            raise UnclassifiableJointError(
                a, b, f"{connection_type.name} joint where neither member ends on the other"
            )
        terminal_index, cross_index, terminal_line = found
        insert_terminal_member(
            structure.members[terminal_index],
            structure.members[cross_index],
            terminal_line,
            options,
        )
        logger.debug(
            "Resolved %s: member %d ends on member %d",
            connection,
            terminal_index,
            cross_index,
        )

    logger.info("Resolved %d %s connection(s)", len(connections), connection_type.name)
    return len(connections)


def resolve_t_connections(structure: "Structure", options: FramingOptions) -> int:
    """Resolve every tee connection. Returns the number resolved."""
    structure.mark_phase("t")
    return _resolve_terminal_connections(structure, options, ConnectionType.T)


def resolve_pt_connections(structure: "Structure", options: FramingOptions) -> int:
    """Resolve pass-through connections with the tee procedure.

    Not part of a standard build. A true pass-through pair has no member
    ending on the other, so this raises UnclassifiableJointError for it.
    """
    structure.mark_phase("pt")
    return _resolve_terminal_connections(structure, options, ConnectionType.PT)

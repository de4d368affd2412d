# File: src/steel_framing_generator/stud_network/orientation.py

"""Web-normal propagation and joint classification.

Walks the connectivity graph depth-first from member 0 and:
1. Seeds member 0's web normal from the plane of its first joint
2. Classifies every edge the first time it is traversed (FTF, BR, T, PT)
3. Attaches one shared Connection per edge to the members it reaches
4. Gives every newly reached member the first web normal that satisfies
   all of its connections so far
5. Checks every normal against all connections once the walk is done

Neighbors are visited in CONNECTION_PRIORITY order so the most constraining
joint type fixes a member's normal first. The walk uses an explicit stack
of (vertex, neighbor iterator) frames instead of recursion, so long chains
of members cannot exhaust the interpreter stack.
"""

from typing import TYPE_CHECKING, Iterator, List, Tuple

import numpy as np

from ..errors import (
    DegenerateGeometryError,
    DisconnectedGraphError,
    NormalConflictError,
    UnclassifiableJointError,
)
from ..utils.geometry_helpers import (
    flip,
    joint_plane_normal,
    mirror_across_plane,
    normalize,
    parallel_normals,
    same_points,
)
from ..utils.logging_config import get_logger
from .connectivity import ordered_neighbors
from .network_types import Connection, ConnectionType

if TYPE_CHECKING:
    from .structure import Structure

logger = get_logger(__name__)


# =============================================================================
# Classification
# =============================================================================


def get_connection_type(structure: "Structure", i: int, j: int) -> ConnectionType:
    """Classify the joint between oriented member ``i`` and member ``j``.

    Args:
        structure: Structure holding the input lines and member normals.
        i: Index of the member whose web normal is already set.
        j: Index of the other member.

    Returns:
        FTF when the joint plane is parallel to member i's web, otherwise BR,
        T or PT depending on which line ends near the other.

    Raises:
        UnclassifiableJointError: Missing normal, NaN geometry or parallel lines.
    """
    line_i = structure.lines[i]
    line_j = structure.lines[j]
    normal_i = structure.members[i].web_normal

    if normal_i is None:
        raise UnclassifiableJointError(i, j, f"member {i} has no web normal yet")
    if not (np.all(np.isfinite(normal_i))
            and np.all(np.isfinite(line_i.vector))
            and np.all(np.isfinite(line_j.vector))):
        raise UnclassifiableJointError(i, j, "non-finite geometry")

    try:
        plane_normal = joint_plane_normal(line_i, line_j)
    except DegenerateGeometryError as exc:
        raise UnclassifiableJointError(i, j, exc.extra["reason"]) from exc

    tolerance = structure.options.intersection_tolerance

    if parallel_normals(normal_i, plane_normal, structure.options.planarity_tolerance):
        return ConnectionType.FTF

    i_ends_on_j = (
        line_j.distance_to_point(line_i.start) < tolerance
        or line_j.distance_to_point(line_i.end) < tolerance
    )
    j_ends_on_i = (
        line_i.distance_to_point(line_j.start) < tolerance
        or line_i.distance_to_point(line_j.end) < tolerance
    )

    if i_ends_on_j and j_ends_on_i:
        return ConnectionType.BR
    if i_ends_on_j or j_ends_on_i:
        return ConnectionType.T
    return ConnectionType.PT


# =============================================================================
# Normal Candidates
# =============================================================================


def get_br_normal(
    structure: "Structure", connection: Connection, member_index: int
) -> np.ndarray:
    """Web normal for a member at a brace joint.

    Mirrors the other member's normal across the plane that bisects the two
    member directions, so both webs bend the same way around the knee.
    """
    member = structure.members[member_index]
    other = structure.members[connection.get_other_index(member_index)]
    axis = member.web_axis
    other_axis = other.web_axis

    member_vector = axis.vector
    if (same_points(axis.start, other_axis.start, structure.options.intersection_tolerance)
            or same_points(axis.end, other_axis.end, structure.options.intersection_tolerance)):
        other_vector = other_axis.vector
    else:
        other_vector = flip(other_axis.vector)

    try:
        x_axis = normalize(member_vector) + normalize(other_vector)
        y_axis = np.cross(member_vector, other_vector)
        bisecting_normal = np.cross(x_axis, y_axis)
        return normalize(mirror_across_plane(other.web_normal, bisecting_normal))
    except DegenerateGeometryError as exc:
        raise DegenerateGeometryError(
            member.id, f"brace joint with member {other.id}: {exc.extra['reason']}"
        ) from exc


def get_valid_normals_for_connection(
    structure: "Structure", connection: Connection, member_index: int
) -> List[np.ndarray]:
    """Web normals a member may take with respect to a single connection."""
    other_index = connection.get_other_index(member_index)
    other = structure.members[other_index]

    if connection.connection_type == ConnectionType.FTF:
        # Faces must oppose
        return [flip(other.web_normal)]

    if connection.connection_type == ConnectionType.BR:
        return [get_br_normal(structure, connection, member_index)]

    # T and PT: either side of the joint plane is still possible
    member = structure.members[member_index]
    try:
        plane_normal = joint_plane_normal(member.web_axis, other.web_axis)
        web_normal = normalize(np.cross(plane_normal, member.web_axis.vector))
    except DegenerateGeometryError as exc:
        raise DegenerateGeometryError(
            member.id, f"joint with member {other.id}: {exc.extra['reason']}"
        ) from exc
    return [web_normal, flip(web_normal)]


def get_valid_normals_for_member(
    structure: "Structure", member_index: int
) -> List[np.ndarray]:
    """Web normals that satisfy every connection the member has so far.

    Raises:
        NormalConflictError: No candidate survives one of the connections.
    """
    member = structure.members[member_index]
    if not member.connections:
        raise NormalConflictError(member_index, (member_index, member_index))

    tolerance = structure.options.planarity_tolerance
    candidates = get_valid_normals_for_connection(
        structure, member.connections[0], member_index
    )

    for connection in member.connections:
        checks = get_valid_normals_for_connection(structure, connection, member_index)
        candidates = [
            candidate
            for candidate in candidates
            if any(float(candidate @ check) > 1.0 - tolerance for check in checks)
        ]
        if not candidates:
            logger.error(
                "Normal conflict on member %d at connection %s",
                member_index,
                connection,
            )
            raise NormalConflictError(member_index, connection.members)

    return candidates


def verify_member_normal(structure: "Structure", member_index: int) -> None:
    """Check a member's assigned normal against every connection it has.

    A member is oriented from the first connection that reaches it, so
    connections attached later (closing a loop) are only checked here.

    Raises:
        NormalConflictError: A connection rejects the assigned normal.
    """
    member = structure.members[member_index]
    tolerance = structure.options.planarity_tolerance
    for connection in member.connections:
        checks = get_valid_normals_for_connection(structure, connection, member_index)
        if not any(float(member.web_normal @ check) > 1.0 - tolerance for check in checks):
            logger.error(
                "Member %d normal rejected by connection %s", member_index, connection
            )
            raise NormalConflictError(member_index, connection.members)


# =============================================================================
# Propagation
# =============================================================================


def seed_web_normal(structure: "Structure") -> np.ndarray:
    """Web normal of member 0 from the plane through line 0 and its first neighbor."""
    neighbors = ordered_neighbors(structure.graph, 0)
    if not neighbors:
        if len(structure.lines) > 1:
            raise DisconnectedGraphError(range(1, len(structure.lines)))
        raise DegenerateGeometryError(
            "0", "a single line has no joint plane to orient its web"
        )

    line = structure.lines[0]
    try:
        normal = joint_plane_normal(line, structure.lines[neighbors[0]])
        if structure.options.first_connection_is_face_to_face:
            return normal
        return normalize(np.cross(line.vector, normal))
    except DegenerateGeometryError as exc:
        raise DegenerateGeometryError(
            "0", f"seed joint with member {neighbors[0]}: {exc.extra['reason']}"
        ) from exc


def _classified_neighbors(
    structure: "Structure", current: int
) -> Iterator[Tuple[int, ConnectionType]]:
    """Neighbors of ``current`` with their joint type, in priority order.

    The sort is stable, so neighbors of equal type keep discovery order.
    """
    classified = [
        (neighbor, get_connection_type(structure, current, neighbor))
        for neighbor in ordered_neighbors(structure.graph, current)
    ]
    classified.sort(key=lambda item: item[1].priority)
    return iter(classified)


def _attach_connection(
    structure: "Structure",
    current: int,
    neighbor: int,
    connection_type: ConnectionType,
) -> None:
    """Give ``neighbor`` the connection to ``current`` if it still lacks some."""
    member = structure.members[neighbor]
    if structure.graph.degree(neighbor) <= len(member.connections):
        return

    connection = structure.find_connection(neighbor, current)
    if connection is None:
        connection = Connection(connection_type, (neighbor, current))
        structure.register_connection(connection)
        logger.debug("Classified %s", connection)

    member.add_connection(connection)


def propagate_orientation(structure: "Structure") -> None:
    """Assign a web normal to every member and classify every edge.

    Raises:
        DisconnectedGraphError: Members unreachable from member 0.
        NormalConflictError: A member's connections admit no common normal.
        UnclassifiableJointError: An edge could not be classified.
    """
    graph = structure.graph
    if graph.number_of_nodes() == 0:
        return

    structure.members[0].web_normal = seed_web_normal(structure)
    graph.nodes[0]["visited"] = True

    stack = [(0, _classified_neighbors(structure, 0))]
    while stack:
        current, neighbors = stack[-1]
        step = next(neighbors, None)
        if step is None:
            stack.pop()
            continue

        neighbor, connection_type = step
        _attach_connection(structure, current, neighbor, connection_type)

        if graph.nodes[neighbor]["visited"]:
            continue

        normals = get_valid_normals_for_member(structure, neighbor)
        structure.members[neighbor].web_normal = normals[0]
        graph.nodes[neighbor]["visited"] = True
        logger.debug(
            "Member %d oriented from member %d (%d candidate normal(s))",
            neighbor,
            current,
            len(normals),
        )
        stack.append((neighbor, _classified_neighbors(structure, neighbor)))

    unreached = [index for index, visited in graph.nodes(data="visited") if not visited]
    if unreached:
        logger.error("%d member(s) unreachable from member 0", len(unreached))
        raise DisconnectedGraphError(unreached)

    for index in range(len(structure.members)):
        verify_member_normal(structure, index)

    type_counts = {}
    for connection in structure.connections:
        key = connection.connection_type.name
        type_counts[key] = type_counts.get(key, 0) + 1
    logger.info(
        "Orientation: %d members, %d connections (%s)",
        len(structure.members),
        len(structure.connections),
        ", ".join(f"{k}={v}" for k, v in sorted(type_counts.items())),
    )

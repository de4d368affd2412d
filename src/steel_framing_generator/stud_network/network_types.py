# File: src/steel_framing_generator/stud_network/network_types.py

"""Data models for stud network solving.

Defines the core types shared by the connectivity graph, the orientation
propagator and the joint resolvers. Lengths are in the input's physical
units (inches for the default stud profile).

Key Types:
    ConnectionType: Classification of how two members meet (FTF, BR, T, PT)
    OperationType: Fabrication operation punched by the roll former
    Operation: One operation at a location along a member's web axis
    Connection: A classified joint between two members
    Member: One stud or brace with its axis, web normal and operations
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from ..errors import DegenerateGeometryError
from ..utils.geometry_helpers import LineSegment, PointLike, as_point
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

# Projections may overshoot an axis end by this much before a warning
CLAMP_TOLERANCE = 1e-6


# =============================================================================
# Enumerations
# =============================================================================


class ConnectionType(Enum):
    """Classification of the joint between two members."""

    FTF = "ftf"
    """Face-to-face: the joint plane is parallel to the web, members bolt web to web."""

    BR = "br"
    """Brace: both members end at a common point (a knee joint)."""

    T = "t"
    """Tee: one member terminates against the interior of the other."""

    PT = "pt"
    """Pass-through: the members cross, neither ends at the other."""

    @property
    def priority(self) -> int:
        """Position in CONNECTION_PRIORITY (lower is processed first)."""
        return CONNECTION_PRIORITY.index(self)


# Order in which neighbors are visited during orientation propagation.
# The most constraining joint type fixes a new member's normal first.
CONNECTION_PRIORITY: Tuple[ConnectionType, ...] = (
    ConnectionType.FTF,
    ConnectionType.BR,
    ConnectionType.T,
    ConnectionType.PT,
)


class OperationType(Enum):
    """Fabrication operations, named as the roll former expects them."""

    END_TRUSS = "END_TRUSS"
    DIMPLE = "DIMPLE"
    SWAGE = "SWAGE"
    NOTCH = "NOTCH"
    LIP_CUT = "LIP_CUT"
    WEB = "WEB"
    BOLT = "BOLT"


class MemberKind(Enum):
    """Whether a member came from an input line or was synthesized."""

    STUD = "stud"
    BRACE = "brace"


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class Operation:
    """A fabrication operation at a location along a member.

    Attributes:
        location: Distance from the start of the member's web axis.
        operation_type: Which operation to punch.
    """

    location: float
    operation_type: OperationType

    def to_dict(self) -> Dict:
        return {
            "location": round(self.location, 6),
            "type": self.operation_type.value,
        }


class Connection:
    """A classified joint between two members.

    Two connections are equal when they join the same unordered pair of
    members, whatever their type or member order. The member order carries
    the role: ``members[0]`` is the member reached by the propagation,
    ``members[1]`` the already-oriented member it was reached from.

    Attributes:
        connection_type: FTF, BR, T or PT.
        members: The two member indices.
    """

    __slots__ = ("connection_type", "members")

    def __init__(self, connection_type: ConnectionType, members: Tuple[int, int]):
        if len(members) != 2 or members[0] == members[1]:
            raise ValueError(f"A connection joins two distinct members, got {members}")
        self.connection_type = connection_type
        self.members = (int(members[0]), int(members[1]))

    @property
    def pair(self) -> FrozenSet[int]:
        return frozenset(self.members)

    def get_other_index(self, member_index: int) -> int:
        """Index of the member on the other side of this connection."""
        if member_index == self.members[0]:
            return self.members[1]
        if member_index == self.members[1]:
            return self.members[0]
        raise ValueError(f"Member {member_index} is not part of connection {self.members}")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Connection):
            return NotImplemented
        return self.pair == other.pair

    def __hash__(self) -> int:
        return hash(self.pair)

    def __repr__(self) -> str:
        return (
            f"Connection({self.connection_type.name}, "
            f"{self.members[0]}-{self.members[1]})"
        )

    def to_dict(self) -> Dict:
        return {
            "type": self.connection_type.value,
            "members": list(self.members),
        }


@dataclass(eq=False)
class Member:
    """A light-gauge steel member.

    The web axis and web normal are mutated in place while the structure is
    built; operations are only ever appended.

    Attributes:
        id: Input line index as a string, or a brace name such as "BR_1_0"
            (brace piece name followed by the two host member indices).
        web_axis: Current centerline of the web.
        web_normal: Unit vector the web faces, None until oriented.
        kind: STUD for input lines, BRACE for synthesized braces.
        index: Input line index, None for braces.
        operations: Operations in the order they were appended.
        connections: Connections this member takes part in.
    """

    id: str
    web_axis: LineSegment
    web_normal: Optional[np.ndarray] = None
    kind: MemberKind = MemberKind.STUD
    index: Optional[int] = None
    operations: List[Operation] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)

    @property
    def is_oriented(self) -> bool:
        return self.web_normal is not None

    @property
    def length(self) -> float:
        return self.web_axis.length

    def add_operation(self, location: float, operation_type: OperationType) -> Operation:
        """Append an operation at a distance along the current web axis."""
        operation = Operation(float(location), operation_type)
        self.operations.append(operation)
        logger.trace(
            "Member %s: %s at %.4f", self.id, operation_type.value, operation.location
        )
        return operation

    def add_operation_at_point(
        self, point: PointLike, operation_type: OperationType
    ) -> Operation:
        """Append an operation at the projection of a point onto the web axis.

        A point that projects past either end of the axis is recorded at
        that end, with a warning giving the overshoot.
        """
        axis = self.web_axis
        along = float((as_point(point) - axis.start) @ axis.direction())
        overshoot = max(-along, along - axis.length)
        if overshoot > CLAMP_TOLERANCE:
            logger.warning(
                "Member %s: %s point lies %.4f past the %s of the web axis, "
                "clamped to it",
                self.id,
                operation_type.value,
                overshoot,
                "start" if along < 0 else "end",
            )
        return self.add_operation(min(max(along, 0.0), axis.length), operation_type)

    def set_web_axis_start(self, point: PointLike) -> None:
        """Move the start of the web axis along the axis line.

        Operations appended so far are re-anchored so they keep marking the
        same physical point on the member.
        """
        old_axis = self.web_axis
        new_axis = old_axis.with_start(point)
        self._check_axis(new_axis)

        direction = new_axis.direction()
        shift = float((old_axis.start - new_axis.start) @ direction)
        if self.operations and shift != 0.0:
            self.operations = [
                replace(op, location=op.location + shift) for op in self.operations
            ]
        self.web_axis = new_axis

    def set_web_axis_end(self, point: PointLike) -> None:
        """Move the end of the web axis along the axis line."""
        new_axis = self.web_axis.with_end(point)
        self._check_axis(new_axis)
        self.web_axis = new_axis

    def add_connection(self, connection: Connection) -> bool:
        """Attach a connection unless this member already holds it by reference."""
        if any(existing is connection for existing in self.connections):
            return False
        self.connections.append(connection)
        return True

    def operations_of_type(self, operation_type: OperationType) -> List[Operation]:
        return [op for op in self.operations if op.operation_type == operation_type]

    def _check_axis(self, axis: LineSegment) -> None:
        if axis.is_degenerate:
            raise DegenerateGeometryError(self.id, "web axis collapsed to zero length")

    def to_dict(self) -> Dict:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "web_axis": self.web_axis.to_dict(),
            "web_normal": (
                [round(float(c), 6) for c in self.web_normal]
                if self.web_normal is not None
                else None
            ),
            "operations": [op.to_dict() for op in self.operations],
            "connections": [
                c.to_dict() for c in self.connections
            ],
        }


def make_stud(index: int, start: PointLike, end: PointLike) -> Member:
    """Create an unoriented stud member for input line ``index``."""
    return Member(
        id=str(index),
        web_axis=LineSegment(as_point(start), as_point(end)),
        index=index,
    )

# File: src/steel_framing_generator/stud_network/structure.py

"""Structure assembly: turns a list of 3D lines into fabricated members.

A build runs these steps in a fixed order:
1. Build the connectivity graph of the input lines
2. Propagate web normals and classify every joint
3. Generate braces for knee joints
4. Resolve FTF joints
5. Resolve BR joints
6. Resolve T joints

Each step may run once per structure. Pass-through resolution is available
as ``resolve_pt_connections`` but is not part of a build.

Usage:
    structure = build_structure(lines, FramingOptions(three_piece_brace=True))
    for member in structure.members + structure.braces:
        print(member.id, [op.operation_type.value for op in member.operations])
"""

from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Union

import networkx as nx

from ..config.framing_options import DEFAULT_OPTIONS, FramingOptions
from ..errors import DegenerateGeometryError, ResolutionError
from ..utils.geometry_helpers import LineSegment, PointLike
from ..utils.logging_config import get_logger
from . import brace_generator, joint_resolver, orientation
from .connectivity import build_connectivity_graph, describe_connectivity
from .network_types import Connection, ConnectionType, Member, make_stud

logger = get_logger(__name__)

LineLike = Union[LineSegment, Sequence[PointLike]]

# Phases in the order a build runs them
BUILD_PHASES = ("graph", "orientation", "braces", "ftf", "br", "t")


def as_line(value: LineLike) -> LineSegment:
    """Accept a LineSegment or a (start, end) pair of points."""
    if isinstance(value, LineSegment):
        return value
    start, end = value
    return LineSegment.from_points(start, end)


class Structure:
    """A network of stud members solved from input lines.

    Attributes:
        lines: Input lines, untouched by the build.
        members: One stud per input line, same index.
        braces: Brace members generated at knee joints.
        connections: Every classified joint, in classification order.
        graph: Connectivity graph, None until built.
        options: Options threaded through every phase.
    """

    def __init__(
        self,
        lines: Sequence[LineLike],
        options: Optional[FramingOptions] = None,
    ):
        self.options = options or DEFAULT_OPTIONS
        self.options.validate()

        self.lines: List[LineSegment] = [as_line(line) for line in lines]
        for index, line in enumerate(self.lines):
            if line.is_degenerate:
                raise DegenerateGeometryError(str(index), "input line has zero length")

        self.members: List[Member] = [
            make_stud(index, line.start, line.end) for index, line in enumerate(self.lines)
        ]
        self.braces: List[Member] = []
        self.connections: List[Connection] = []
        self.graph: Optional[nx.Graph] = None

        self._connection_lookup: Dict[FrozenSet[int], Connection] = {}
        self._completed_phases: List[str] = []

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def find_connection(self, a: int, b: int) -> Optional[Connection]:
        """The connection joining members ``a`` and ``b``, if classified yet."""
        return self._connection_lookup.get(frozenset((a, b)))

    def register_connection(self, connection: Connection) -> Connection:
        """Add a newly classified connection.

        Raises:
            ValueError: The member pair already has a connection.
        """
        if connection.pair in self._connection_lookup:
            raise ValueError(f"Members {connection.members} already have a connection")
        self._connection_lookup[connection.pair] = connection
        self.connections.append(connection)
        return connection

    def connections_of_type(self, connection_type: ConnectionType) -> List[Connection]:
        return [c for c in self.connections if c.connection_type == connection_type]

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    @property
    def completed_phases(self) -> List[str]:
        return list(self._completed_phases)

    @property
    def is_built(self) -> bool:
        return all(phase in self._completed_phases for phase in BUILD_PHASES)

    def mark_phase(self, phase: str) -> None:
        """Record that a phase is starting.

        Raises:
            ResolutionError: The phase already ran, or a phase it depends
                on has not run yet.
        """
        if phase in self._completed_phases:
            raise ResolutionError(phase)
        if phase in BUILD_PHASES:
            missing = [
                p for p in BUILD_PHASES[:BUILD_PHASES.index(phase)]
                if p not in self._completed_phases
            ]
        elif phase == "pt":
            missing = [p for p in ("graph", "orientation") if p not in self._completed_phases]
        else:
            missing = []
        if missing:
            raise ResolutionError(phase, f"requires phase(s) {', '.join(missing)} first")
        self._completed_phases.append(phase)

    def build_graph(self) -> nx.Graph:
        self.mark_phase("graph")
        self.graph = build_connectivity_graph(self.lines, self.options.intersection_tolerance)
        return self.graph

    def propagate_orientation(self) -> None:
        self.mark_phase("orientation")
        orientation.propagate_orientation(self)

    def generate_braces(self) -> List[Member]:
        return brace_generator.generate_braces(self, self.options)

    def resolve_ftf_connections(self) -> int:
        return joint_resolver.resolve_ftf_connections(self, self.options)

    def resolve_br_connections(self) -> int:
        return joint_resolver.resolve_br_connections(self, self.options)

    def resolve_t_connections(self) -> int:
        return joint_resolver.resolve_t_connections(self, self.options)

    def resolve_pt_connections(self) -> int:
        return joint_resolver.resolve_pt_connections(self, self.options)

    def build(self) -> "Structure":
        """Run every build phase in order.

        Raises:
            ResolutionError: The structure was already built.
        """
        if self._completed_phases:
            raise ResolutionError("build", "phases have already run on this structure")

        logger.info("Building structure from %d line(s)", len(self.lines))
        self.build_graph()
        self.propagate_orientation()
        self.generate_braces()
        self.resolve_ftf_connections()
        self.resolve_br_connections()
        self.resolve_t_connections()
        logger.info(
            "Built %d member(s), %d brace(s), %d connection(s)",
            len(self.members),
            len(self.braces),
            len(self.connections),
        )
        return self

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def describe_connections(self) -> List[str]:
        """Connectivity rows followed by one row per classified connection."""
        rows = describe_connectivity(self.graph) if self.graph is not None else []
        for connection in self.connections:
            a, b = connection.members
            rows.append(f"{connection.connection_type.name}: {a} - {b}")
        return rows

    def summary(self) -> Dict[str, Any]:
        counts = {t.name: len(self.connections_of_type(t)) for t in ConnectionType}
        return {
            "members": len(self.members),
            "braces": len(self.braces),
            "connections": counts,
            "operations": sum(
                len(m.operations) for m in self.members + self.braces
            ),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "options": self.options.to_dict(),
            "members": [m.to_dict() for m in self.members],
            "braces": [b.to_dict() for b in self.braces],
            "connections": [c.to_dict() for c in self.connections],
            "summary": self.summary(),
        }


def build_structure(
    lines: Sequence[LineLike], options: Optional[FramingOptions] = None
) -> Structure:
    """Build a structure from lines. Empty input gives an empty structure."""
    structure = Structure(lines, options)
    return structure.build()


def structure_from_lines(
    lines: Sequence[LineLike], options: Optional[FramingOptions] = None
) -> Dict[str, List[Member]]:
    """Build a structure and return its members and braces.

    Returns:
        {"members": [...], "braces": [...]}
    """
    structure = build_structure(lines, options)
    return {"members": structure.members, "braces": structure.braces}

# File: src/steel_framing_generator/stud_network/__init__.py

"""Stud network solving.

Builds a connectivity graph from 3D lines, orients every member's web,
classifies each joint (FTF, BR, T, PT) and resolves the joints into trimmed
member axes, synthesized braces and fabrication operations.

Usage:
    from steel_framing_generator.stud_network import build_structure

    structure = build_structure(lines)
    result = structure.to_dict()
"""

from .network_types import (
    CONNECTION_PRIORITY,
    Connection,
    ConnectionType,
    Member,
    MemberKind,
    Operation,
    OperationType,
    make_stud,
)

from .connectivity import build_connectivity_graph, describe_connectivity

from .orientation import (
    get_connection_type,
    get_valid_normals_for_member,
    propagate_orientation,
)

from .brace_generator import generate_braces

from .joint_resolver import (
    resolve_br_connections,
    resolve_ftf_connections,
    resolve_pt_connections,
    resolve_t_connections,
)

from .structure import Structure, build_structure, structure_from_lines

__all__ = [
    # Main entry points
    "build_structure",
    "structure_from_lines",
    "Structure",
    # Types
    "CONNECTION_PRIORITY",
    "Connection",
    "ConnectionType",
    "Member",
    "MemberKind",
    "Operation",
    "OperationType",
    "make_stud",
    # Phases
    "build_connectivity_graph",
    "describe_connectivity",
    "get_connection_type",
    "get_valid_normals_for_member",
    "propagate_orientation",
    "generate_braces",
    "resolve_ftf_connections",
    "resolve_br_connections",
    "resolve_t_connections",
    "resolve_pt_connections",
]

# File: tests/stud_network/test_structure.py

"""Tests for structure assembly.

Tests cover:
- The knee scenario end to end
- Build order and the once-per-structure phase guard
- Input validation (zero-length lines, options)
- Entry points and serialization
"""

import logging

import numpy as np
import pytest

from steel_framing_generator import (
    DegenerateGeometryError,
    FramingOptions,
    ResolutionError,
    Structure,
    build_structure,
    structure_from_lines,
)
from steel_framing_generator.stud_network.network_types import (
    ConnectionType,
    OperationType,
)
from steel_framing_generator.stud_network.structure import BUILD_PHASES
from steel_framing_generator.utils.geometry_helpers import LineSegment


class TestKneeScenario:
    """Two perpendicular unit lines sharing an endpoint."""

    def test_graph_has_one_edge(self, unit_knee_lines):
        structure = build_structure(unit_knee_lines)
        assert structure.graph.number_of_edges() == 1

    def test_classified_as_brace(self, unit_knee_lines):
        structure = build_structure(unit_knee_lines)
        assert [c.connection_type for c in structure.connections] == [ConnectionType.BR]

    def test_one_brace_with_four_operations(self, unit_knee_lines):
        structure = build_structure(unit_knee_lines)
        assert len(structure.braces) == 1
        assert [op.operation_type for op in structure.braces[0].operations] == [
            OperationType.END_TRUSS,
            OperationType.DIMPLE,
            OperationType.END_TRUSS,
            OperationType.DIMPLE,
        ]

    def test_hosts_gain_dimple_and_swage_first(self, unit_knee_lines):
        structure = build_structure(unit_knee_lines)
        for member in structure.members:
            assert [op.operation_type for op in member.operations[:2]] == [
                OperationType.DIMPLE,
                OperationType.SWAGE,
            ]


class TestBuild:
    """Tests for Structure.build."""

    def test_phases_run_in_order(self, triangle_lines):
        structure = build_structure(triangle_lines)
        assert structure.completed_phases == list(BUILD_PHASES)
        assert structure.is_built

    def test_no_null_normals(self, triangle_lines, tee_lines):
        for lines in (triangle_lines, tee_lines):
            structure = build_structure(lines)
            assert all(m.web_normal is not None for m in structure.members)
            assert all(b.web_normal is not None for b in structure.braces)

    def test_input_lines_untouched(self, knee_lines):
        structure = build_structure(knee_lines)
        assert np.allclose(structure.lines[0].start, [0, 0, 0])
        assert not np.allclose(structure.members[0].web_axis.start, [0, 0, 0])

    def test_empty_input(self):
        structure = build_structure([])
        assert structure.members == []
        assert structure.braces == []
        assert structure.connections == []
        assert structure.is_built

    def test_accepts_line_segments(self, knee_lines):
        segments = [LineSegment.from_points(s, e) for s, e in knee_lines]
        structure = build_structure(segments)
        assert len(structure.braces) == 1

    def test_three_piece_triangle(self, triangle_lines, three_piece_options):
        structure = build_structure(triangle_lines, three_piece_options)
        assert len(structure.braces) == 9
        assert len(structure.connections) == 3

    def test_build_logs_summary(self, knee_lines, caplog):
        caplog.set_level(logging.INFO, logger="steel_framing_generator")
        build_structure(knee_lines)
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Built 2 member(s), 1 brace(s)") for m in messages)
        assert any("BR=1" in m for m in messages)


class TestPhaseGuard:
    """Each phase runs once; a second run is rejected without side effects."""

    def test_second_build_rejected(self, knee_lines):
        structure = build_structure(knee_lines)
        with pytest.raises(ResolutionError):
            structure.build()

    @pytest.mark.parametrize("phase_method", [
        "resolve_ftf_connections",
        "resolve_br_connections",
        "resolve_t_connections",
    ])
    def test_second_resolver_call_rejected(self, knee_lines, phase_method):
        structure = build_structure(knee_lines)
        lengths = [m.length for m in structure.members]
        operation_counts = [len(m.operations) for m in structure.members]

        with pytest.raises(ResolutionError) as exc_info:
            getattr(structure, phase_method)()

        assert exc_info.value.phase in BUILD_PHASES
        assert [m.length for m in structure.members] == lengths
        assert [len(m.operations) for m in structure.members] == operation_counts

    def test_resolver_before_orientation_rejected(self, tee_lines):
        structure = Structure(tee_lines)
        with pytest.raises(ResolutionError, match="requires"):
            structure.resolve_t_connections()

    def test_build_after_manual_phase_rejected(self, tee_lines):
        structure = Structure(tee_lines)
        structure.build_graph()
        with pytest.raises(ResolutionError):
            structure.build()


class TestValidation:
    """Tests for input validation."""

    def test_zero_length_line(self):
        lines = [((0, 0, 0), (10, 0, 0)), ((10, 0, 0), (10, 0, 0))]
        with pytest.raises(DegenerateGeometryError) as exc_info:
            Structure(lines)
        assert exc_info.value.member_id == "1"

    def test_invalid_options(self, knee_lines):
        with pytest.raises(ValueError):
            Structure(knee_lines, FramingOptions(brace_length_1=0.5))

    def test_duplicate_connection_rejected(self, knee_lines):
        structure = build_structure(knee_lines)
        with pytest.raises(ValueError):
            structure.register_connection(structure.connections[0])

    def test_find_connection_either_order(self, knee_lines):
        structure = build_structure(knee_lines)
        assert structure.find_connection(0, 1) is structure.find_connection(1, 0)
        assert structure.find_connection(0, 1) is structure.connections[0]


class TestOutputs:
    """Tests for entry points and serialization."""

    def test_structure_from_lines(self, knee_lines):
        result = structure_from_lines(knee_lines)
        assert set(result) == {"members", "braces"}
        assert len(result["members"]) == 2
        assert len(result["braces"]) == 1

    def test_describe_connections(self, unit_knee_lines):
        rows = build_structure(unit_knee_lines).describe_connections()
        assert rows == ["0: 1, ", "1: 0, ", "BR: 1 - 0"]

    def test_summary(self, tee_lines):
        summary = build_structure(tee_lines).summary()
        assert summary["members"] == 2
        assert summary["braces"] == 0
        assert summary["connections"] == {"FTF": 0, "BR": 0, "T": 1, "PT": 0}
        assert summary["operations"] == 6

    def test_to_dict(self, knee_lines):
        data = build_structure(knee_lines).to_dict()
        assert data["options"]["brace_length_1"] == 6.0
        assert [m["id"] for m in data["members"]] == ["0", "1"]
        assert data["braces"][0]["kind"] == "brace"
        assert data["connections"] == [{"type": "br", "members": [1, 0]}]

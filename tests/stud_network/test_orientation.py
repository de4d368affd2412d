# File: tests/stud_network/test_orientation.py

"""Tests for web-normal propagation and joint classification.

Tests cover:
- Seeding member 0 (default and face-to-face)
- Classification of knees, tees, crossings and face-to-face joints
- Normal constraints per connection type
- Triangle propagation (loop closure)
- Error cases (disconnected, degenerate, conflicting normals)
"""

import math

import numpy as np
import pytest

from steel_framing_generator.errors import (
    DegenerateGeometryError,
    DisconnectedGraphError,
    NormalConflictError,
    UnclassifiableJointError,
)
from steel_framing_generator.stud_network.network_types import ConnectionType
from steel_framing_generator.stud_network.orientation import (
    get_br_normal,
    get_connection_type,
    get_valid_normals_for_connection,
    get_valid_normals_for_member,
)
from steel_framing_generator.stud_network.structure import Structure


def oriented(lines, options=None) -> Structure:
    """Structure with its graph built and normals propagated."""
    structure = Structure(lines, options)
    structure.build_graph()
    structure.propagate_orientation()
    return structure


def assert_valid_normals(structure):
    """Every member has a unit normal perpendicular to its web axis."""
    for member in structure.members:
        assert member.web_normal is not None
        assert np.linalg.norm(member.web_normal) == pytest.approx(1.0)
        assert float(member.web_normal @ member.web_axis.direction()) == pytest.approx(0.0, abs=1e-9)


# =============================================================================
# Seeding
# =============================================================================


class TestSeed:
    """Tests for member 0's seed normal."""

    def test_default_seed_lies_in_joint_plane(self, unit_knee_lines):
        structure = oriented(unit_knee_lines)
        assert np.allclose(structure.members[0].web_normal, [0, -1, 0])

    def test_face_to_face_seed_is_plane_normal(self, cross_lines, ftf_options):
        structure = oriented(cross_lines, ftf_options)
        assert np.allclose(structure.members[0].web_normal, [0, 0, 1])

    def test_single_line_raises(self):
        with pytest.raises(DegenerateGeometryError):
            oriented([((0, 0, 0), (10, 0, 0))])

    def test_isolated_seed_raises(self):
        lines = [
            ((50, 50, 0), (60, 50, 0)),
            ((0, 0, 0), (10, 0, 0)),
            ((0, 0, 0), (0, 10, 0)),
        ]
        with pytest.raises(DisconnectedGraphError) as exc_info:
            oriented(lines)
        assert exc_info.value.unreached == [1, 2]

    def test_collinear_overlap_raises_instead_of_nan(self, collinear_overlap_lines):
        """Parallel lines define no joint plane."""
        with pytest.raises(DegenerateGeometryError) as exc_info:
            oriented(collinear_overlap_lines)
        assert exc_info.value.member_id == "0"


# =============================================================================
# Classification
# =============================================================================


class TestClassification:
    """Tests for get_connection_type and the connections it produces."""

    def test_knee_is_brace(self, unit_knee_lines):
        structure = oriented(unit_knee_lines)
        assert len(structure.connections) == 1
        connection = structure.connections[0]
        assert connection.connection_type == ConnectionType.BR
        # Reached member first, the member it was reached from second
        assert connection.members == (1, 0)

    def test_tee(self, tee_lines):
        structure = oriented(tee_lines)
        assert structure.connections[0].connection_type == ConnectionType.T

    def test_crossing_is_pass_through(self, cross_lines):
        structure = oriented(cross_lines)
        assert structure.connections[0].connection_type == ConnectionType.PT

    def test_face_to_face(self, cross_lines, ftf_options):
        structure = oriented(cross_lines, ftf_options)
        assert structure.connections[0].connection_type == ConnectionType.FTF

    def test_classification_is_symmetric_for_tee(self, tee_lines):
        structure = oriented(tee_lines)
        assert get_connection_type(structure, 0, 1) == ConnectionType.T
        assert get_connection_type(structure, 1, 0) == ConnectionType.T

    def test_unoriented_member_raises(self, tee_lines):
        structure = Structure(tee_lines)
        structure.build_graph()
        with pytest.raises(UnclassifiableJointError):
            get_connection_type(structure, 0, 1)

    def test_parallel_lines_raise(self, collinear_overlap_lines):
        structure = Structure(collinear_overlap_lines)
        structure.build_graph()
        structure.members[0].web_normal = np.array([0.0, 1.0, 0.0])
        with pytest.raises(UnclassifiableJointError):
            get_connection_type(structure, 0, 1)

    def test_nan_normal_raises(self, tee_lines):
        structure = Structure(tee_lines)
        structure.build_graph()
        structure.members[0].web_normal = np.array([math.nan, 0.0, 0.0])
        with pytest.raises(UnclassifiableJointError):
            get_connection_type(structure, 0, 1)


# =============================================================================
# Normal Constraints
# =============================================================================


class TestNormalConstraints:
    """Each connection type constrains the normals of its members."""

    def test_face_to_face_normals_oppose(self, cross_lines, ftf_options):
        structure = oriented(cross_lines, ftf_options)
        n0 = structure.members[0].web_normal
        n1 = structure.members[1].web_normal
        assert float(n0 @ n1) == pytest.approx(-1.0)

    def test_knee_normals(self, unit_knee_lines):
        structure = oriented(unit_knee_lines)
        assert np.allclose(structure.members[1].web_normal, [-1, 0, 0])
        assert_valid_normals(structure)

    def test_tee_normal_perpendicular_to_joint_plane(self, tee_lines):
        structure = oriented(tee_lines)
        normal = structure.members[1].web_normal
        assert abs(float(normal @ np.array([0.0, 0.0, 1.0]))) < 1e-9
        assert_valid_normals(structure)

    def test_tee_offers_both_sides(self, tee_lines):
        structure = oriented(tee_lines)
        connection = structure.connections[0]
        candidates = get_valid_normals_for_connection(structure, connection, 1)
        assert len(candidates) == 2
        assert np.allclose(candidates[0], -candidates[1])

    def test_brace_normal_is_mirror(self, triangle_lines):
        structure = oriented(triangle_lines)
        for connection in structure.connections:
            for index in connection.members:
                expected = get_br_normal(structure, connection, index)
                assert np.allclose(structure.members[index].web_normal, expected)


# =============================================================================
# Propagation
# =============================================================================


class TestPropagation:
    """Tests for the depth-first walk."""

    def test_triangle(self, triangle_lines):
        """Three coplanar lines meeting end to end."""
        structure = oriented(triangle_lines)
        assert all(visited for _, visited in structure.graph.nodes(data="visited"))
        assert len(structure.connections) == 3
        assert all(c.connection_type == ConnectionType.BR for c in structure.connections)
        assert all(len(m.connections) == 2 for m in structure.members)
        assert_valid_normals(structure)

    def test_triangle_normals_face_out(self, triangle_lines):
        structure = oriented(triangle_lines)
        assert np.allclose(structure.members[0].web_normal, [0, -1, 0])
        assert np.allclose(structure.members[1].web_normal, [math.sqrt(0.5), math.sqrt(0.5), 0])
        assert np.allclose(structure.members[2].web_normal, [-1, 0, 0])

    def test_connections_shared_by_reference(self, triangle_lines):
        structure = oriented(triangle_lines)
        for member in structure.members:
            for connection in member.connections:
                other = structure.members[connection.get_other_index(member.index)]
                assert any(c is connection for c in other.connections)

    def test_connection_uniqueness(self, triangle_lines):
        structure = oriented(triangle_lines)
        pairs = [c.pair for c in structure.connections]
        assert len(pairs) == len(set(pairs))

    def test_long_chain(self, ladder_lines):
        structure = oriented(ladder_lines)
        assert len(structure.connections) == len(ladder_lines) - 1
        assert_valid_normals(structure)

    def test_disconnected_raises(self, disconnected_lines):
        with pytest.raises(DisconnectedGraphError) as exc_info:
            oriented(disconnected_lines)
        assert exc_info.value.unreached == [2]

    def test_face_to_face_loop_conflict(self, ftf_options):
        """Three lines crossing face to face cannot all oppose each other."""
        lines = [
            ((0.0, 0.0, 0.0), (20.0, 0.0, 0.0)),
            ((10.0, -10.0, 0.0), (10.0, 10.0, 0.0)),
            ((0.0, -5.0, 0.0), (20.0, 15.0, 0.0)),
        ]
        with pytest.raises(NormalConflictError) as exc_info:
            oriented(lines, ftf_options)
        assert exc_info.value.member_index == 0
        assert set(exc_info.value.connection_members) == {0, 2}

    def test_valid_normals_for_member(self, triangle_lines):
        structure = oriented(triangle_lines)
        normals = get_valid_normals_for_member(structure, 1)
        assert np.allclose(normals[0], structure.members[1].web_normal)

# File: src/steel_framing_generator/config/framing_options.py
"""
Options for solving a stud network.

This module defines the immutable options value threaded through graph
construction, orientation propagation and every joint resolver, plus the
shop constants of the roll-forming machine the operations are laid out for.

All lengths are in inches (the stud profile is 3.5" x 1.5").

Example:
    >>> options = FramingOptions(three_piece_brace=True, brace_length_1=8.0)
    >>> options.validate()  # Raises ValueError if invalid
    >>> structure = build_structure(lines, options)
"""

from dataclasses import dataclass, asdict
from typing import List


# =============================================================================
# Shop Constants
# =============================================================================

# Offset from a member end to its end dimple
END_OFFSET = 0.75

# Offset from a brace or tee end to its connection dimple
DIMPLE_OFFSET = 0.45

# Pitch between consecutive NOTCH / LIP_CUT operations
OPERATION_SPACING = 1.25

# Extra length cleared on the cross member around an inserted tee
INSERTION_CLEARANCE = 0.25


@dataclass(frozen=True)
class FramingOptions:
    """Options controlling how a line network is solved into members.

    Attributes:
        intersection_tolerance: Max distance between two lines (or an endpoint
            and a line) for them to count as touching (default 0.001)
        planarity_tolerance: Max deviation of |dot| from 1 for two normals to
            count as parallel (default 0.001)
        three_piece_brace: Build three-piece braces instead of a single
            diagonal at braced joints (default False)
        brace_length_1: Exterior brace length for three-piece braces, and the
            diagonal span for single braces (default 6.0)
        brace_length_2: Interior brace length for three-piece braces (default 3.0)
        first_connection_is_face_to_face: Seed member 0 so that its first
            connection is face-to-face (default False)
        stud_height: Flange height of the stud profile (default 1.5)
        stud_width: Web width of the stud profile (default 3.5). Validated and
            serialized with the options; no resolver reads it, since every
            joint offset depends only on the flange height.
        web_hole_spacing: Offset of fastener web holes from the web
            centerline (default 15/16)
    """
    intersection_tolerance: float = 0.001
    planarity_tolerance: float = 0.001
    three_piece_brace: bool = False
    brace_length_1: float = 6.0
    brace_length_2: float = 3.0
    first_connection_is_face_to_face: bool = False

    # Stud profile
    stud_height: float = 1.5
    stud_width: float = 3.5
    web_hole_spacing: float = 15.0 / 16.0

    def validate(self) -> List[str]:
        """Validate option values.

        Returns:
            List of validation error messages (empty if valid)

        Raises:
            ValueError: If any validation fails
        """
        errors = []

        if self.intersection_tolerance <= 0:
            errors.append("intersection_tolerance must be positive")
        if not 0 < self.planarity_tolerance < 1:
            errors.append("planarity_tolerance must be between 0 and 1")

        if self.brace_length_1 <= 2 * DIMPLE_OFFSET:
            errors.append(
                f"brace_length_1 ({self.brace_length_1}) must exceed "
                f"twice the dimple offset ({2 * DIMPLE_OFFSET})"
            )
        if self.brace_length_2 <= 2 * DIMPLE_OFFSET:
            errors.append(
                f"brace_length_2 ({self.brace_length_2}) must exceed "
                f"twice the dimple offset ({2 * DIMPLE_OFFSET})"
            )

        if self.stud_height <= 0:
            errors.append("stud_height must be positive")
        if self.stud_width <= 0:
            errors.append("stud_width must be positive")
        if self.web_hole_spacing <= 0:
            errors.append("web_hole_spacing must be positive")

        if errors:
            raise ValueError("FramingOptions validation failed:\n" + "\n".join(errors))

        return errors

    def to_dict(self) -> dict:
        """Convert options to a dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "FramingOptions":
        """Create options from a dictionary, using defaults for missing keys.

        Args:
            data: Dictionary with option values keyed by field name

        Returns:
            FramingOptions instance

        Raises:
            ValueError: If the dictionary contains unknown keys
        """
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown framing options: {', '.join(unknown)}")
        return cls(**data)


DEFAULT_OPTIONS = FramingOptions()

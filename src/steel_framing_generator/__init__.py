# File: src/steel_framing_generator/__init__.py

"""Light-gauge steel framing from 3D line networks."""

from .config import DEFAULT_OPTIONS, FramingOptions
from .errors import (
    DegenerateGeometryError,
    DisconnectedGraphError,
    FramingError,
    NormalConflictError,
    ResolutionError,
    UnclassifiableJointError,
)
from .stud_network import Structure, build_structure, structure_from_lines

__version__ = "0.1.0"

__all__ = [
    "build_structure",
    "structure_from_lines",
    "Structure",
    "FramingOptions",
    "DEFAULT_OPTIONS",
    "FramingError",
    "UnclassifiableJointError",
    "NormalConflictError",
    "DisconnectedGraphError",
    "DegenerateGeometryError",
    "ResolutionError",
]

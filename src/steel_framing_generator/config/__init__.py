# File: src/steel_framing_generator/config/__init__.py

"""
Configuration package for the Steel Framing Generator.
Provides the solver options and the shop constants used when laying out
fabrication operations.
"""

from .framing_options import (
    FramingOptions,
    DEFAULT_OPTIONS,
    END_OFFSET,
    DIMPLE_OFFSET,
    OPERATION_SPACING,
    INSERTION_CLEARANCE,
)

__all__ = [
    "FramingOptions",
    "DEFAULT_OPTIONS",
    "END_OFFSET",
    "DIMPLE_OFFSET",
    "OPERATION_SPACING",
    "INSERTION_CLEARANCE",
]

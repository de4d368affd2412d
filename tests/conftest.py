# tests/conftest.py
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import logging

import pytest

from steel_framing_generator.config import FramingOptions


@pytest.fixture
def options():
    """Default framing options."""
    return FramingOptions()


@pytest.fixture
def ftf_options():
    """Options that seed member 0 so its first joint is face-to-face."""
    return FramingOptions(first_connection_is_face_to_face=True)


@pytest.fixture
def three_piece_options():
    """Options for three-piece braces."""
    return FramingOptions(three_piece_brace=True)


@pytest.fixture
def trace_logging(caplog):
    """Capture every record down to the custom TRACE level."""
    caplog.set_level(5, logger="steel_framing_generator")
    return caplog

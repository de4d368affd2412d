# File: src/steel_framing_generator/utils/__init__.py
"""Shared geometry and logging utilities."""

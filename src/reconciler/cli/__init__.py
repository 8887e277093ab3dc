"""
Command Line Interface Package

click-based commands for running reconciliations and inspecting configuration.
"""

from .main import main

__all__ = ["main"]

"""Layr: turn a project description into a structured project plan."""

__version__ = "0.3.0"

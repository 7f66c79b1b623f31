"""Corkboard - keyboard-driven terminal kanban board."""

__version__ = "0.4.0"

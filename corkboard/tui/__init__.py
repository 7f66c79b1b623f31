"""
FILE: corkboard/tui/__init__.py
PURPOSE: Terminal front end (raw key input + rich live rendering)
EXPORTS:
  - run_tui() (from tui.main)
"""

from .main import run_tui

__all__ = ["run_tui"]

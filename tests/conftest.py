"""Shared pytest configuration for the corkboard tests."""

import sys
import io
from pathlib import Path

# Fix Windows console encoding (tests print check marks)
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Make the corkboard package importable without installing it
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

"""Centralized path definitions for smallpop3.

Nothing here is created on import; callers create directories on first use.
"""

from pathlib import Path

# Base directory
SMALLPOP3_DIR = Path.home() / ".smallpop3"

# Specific files
CONFIG_PATH = SMALLPOP3_DIR / "config.json"

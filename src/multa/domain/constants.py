"""Centralized constants for multa.

All magic numbers and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Universe ----------
MIN_FACTOR = 2
MAX_FACTOR = 9

# ---------- Scheduling ----------
DEFAULT_INTERVALS = (2, 3, 5, 8, 13, 21, 34, 55)

# ---------- Profiles ----------
DEFAULT_PROFILE = "default"
PROFILE_SUFFIX = ".json"
CORRUPT_SUFFIX = ".corrupt"
PROFILE_FORMAT_VERSION = 1

# ---------- Practice loop ----------
UNDO_COMMANDS = ("u", "undo")
QUIT_COMMANDS = ("q", "quit")

"""
Configuration constants.

All tunable values live here so the CLI can override them per run and tests
can reference the same numbers the code uses.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

PACKAGE_DIR = Path(__file__).resolve().parent


# =============================================================================
# DISTANCE CALIBRATION
# =============================================================================

# Meters per normalized map unit, used whenever calibration is impossible.
DEFAULT_METERS_PER_UNIT = 900.0

# Two buildings whose real walking separation is known.
CALIBRATION_BUILDINGS = ("11", "59")
CALIBRATION_DISTANCE_M = 350.0


# =============================================================================
# BUILDING DIRECTORY
# =============================================================================

# Unknown building codes are placed at the map center.
PLACEHOLDER_LOCATION = (0.5, 0.5)
PLACEHOLDER_NAME = "Building {identifier}"


# =============================================================================
# SCHEDULE LOADING
# =============================================================================

# How rows sharing a CRN are combined: "first", "last" or "merge".
DEFAULT_DUPLICATE_POLICY = "merge"

HTTP_TIMEOUT_SECONDS = 30

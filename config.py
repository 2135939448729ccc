"""
Configuration for the Mentorship Evaluation Dashboard

Contains program titles, the dataset location and rating band colours.
To change any of them, simply edit the values below.
"""

from pathlib import Path

# =============================================================================
# PROGRAM SETTINGS
# =============================================================================

PROGRAM_NAME = "Career Mentorship Program 8.0"
DASHBOARD_SUBTITLE = "Student Performance Dashboard"

# Panel export, one row per interview (header row is skipped)
DATA_PATH = str(Path(__file__).resolve().parent / "data.csv")

MAX_RATING = 5

# =============================================================================
# BAND DISPLAY SETTINGS
# =============================================================================

BAND_COLORS = {
    "strong": "#16a34a",    # Green
    "good": "#2563eb",      # Blue
    "fair": "#ca8a04",      # Amber
    "weak": "#dc2626"       # Red
}

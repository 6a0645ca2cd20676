"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# (label, min_percentage), highest grade first.
DEFAULT_GRADE_THRESHOLDS = (
    ("A+", 90),
    ("A", 80),
    ("B+", 70),
    ("B", 60),
    ("C+", 55),
    ("C", 50),
    ("D", 40),
    ("F", 0),
)

MIN_PERCENTAGE = 0
MAX_PERCENTAGE = 100
PERCENTAGE_PLACES = 2
SUMMARY_PERCENTAGE_PLACES = 1
DEFAULT_RECORD_LIMIT = 200

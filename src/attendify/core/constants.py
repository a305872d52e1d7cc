"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Runtime values for the thresholds come from settings; these are the defaults.
"""

EARTH_RADIUS_M = 6_371_000.0

DEFAULT_GEOFENCE_RADIUS_M = 50.0
DEFAULT_FACE_MATCH_THRESHOLD = 0.55
FACE_DESCRIPTOR_SIZE = 128

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 30
MIN_PASSWORD_LENGTH = 6

import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendify_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

GEOFENCE_RADIUS_M = 50.0
FACE_MATCH_THRESHOLD = 0.55
FACE_DESCRIPTOR_SIZE = 128
FACE_DETECTION_MODEL = "hog"

SESSION_DAYS = 1
MAX_CONTENT_LENGTH = 5 * 1024 * 1024

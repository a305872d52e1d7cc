import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendify"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Default geofence radius for classes created without one
GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "50"))
# Euclidean distance between 128-d descriptors; lower is stricter
FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.55"))
FACE_DESCRIPTOR_SIZE = 128
# "hog" runs on CPU, "cnn" needs dlib built with CUDA
FACE_DETECTION_MODEL = os.getenv("FACE_DETECTION_MODEL", "hog")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
MAX_CONTENT_LENGTH = 5 * 1024 * 1024

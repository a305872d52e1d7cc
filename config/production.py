import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendify"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "50"))
FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.55"))
FACE_DESCRIPTOR_SIZE = 128
FACE_DETECTION_MODEL = os.getenv("FACE_DETECTION_MODEL", "hog")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
MAX_CONTENT_LENGTH = 5 * 1024 * 1024

import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smart_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
SEED_ADMIN = True

CORS_ORIGINS = "http://localhost:3000"
MAX_CONTENT_LENGTH = 10 * 1024 * 1024

API_URL = "http://testserver/api"
CLIENT_MODE = "auto"
LOCAL_STORAGE_PATH = None
FALLBACK_LATENCY_SECONDS = 0.0
REQUEST_TIMEOUT_SECONDS = 5.0

CAMERA_INDEX = 0
CAMERA_FALLBACK_INDICES = []
SCAN_FRAME_INTERVAL = 0.0

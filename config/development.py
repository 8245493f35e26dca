import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smart_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
SEED_ADMIN = bool(int(os.getenv("SEED_ADMIN", "1")))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
# Notice attachments travel inline as base64
MAX_CONTENT_LENGTH = 10 * 1024 * 1024

# Data-access client
API_URL = os.getenv("API_URL", "http://localhost:5000/api")
CLIENT_MODE = os.getenv("CLIENT_MODE", "auto")
LOCAL_STORAGE_PATH = os.getenv("LOCAL_STORAGE_PATH", ".smart_attendance/local_storage.json")
FALLBACK_LATENCY_SECONDS = float(os.getenv("FALLBACK_LATENCY_SECONDS", "0.6"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

# QR capture
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
CAMERA_FALLBACK_INDICES = [int(i) for i in os.getenv("CAMERA_FALLBACK_INDICES", "1").split(",") if i.strip()]
SCAN_FRAME_INTERVAL = float(os.getenv("SCAN_FRAME_INTERVAL", str(1 / 30)))

import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smart_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
SEED_ADMIN = bool(int(os.getenv("SEED_ADMIN", "1")))

CORS_ORIGINS = os.getenv("FRONTEND_URL", "https://smart-attendance.vercel.app")
MAX_CONTENT_LENGTH = 10 * 1024 * 1024

API_URL = os.getenv("API_URL", "https://smart-app-p0qn.onrender.com/api")
CLIENT_MODE = os.getenv("CLIENT_MODE", "auto")
LOCAL_STORAGE_PATH = os.getenv("LOCAL_STORAGE_PATH", ".smart_attendance/local_storage.json")
FALLBACK_LATENCY_SECONDS = float(os.getenv("FALLBACK_LATENCY_SECONDS", "0.6"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
CAMERA_FALLBACK_INDICES = [int(i) for i in os.getenv("CAMERA_FALLBACK_INDICES", "1").split(",") if i.strip()]
SCAN_FRAME_INTERVAL = float(os.getenv("SCAN_FRAME_INTERVAL", str(1 / 30)))

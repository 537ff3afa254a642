import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "study_up"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

DEBUG = True
PORT = int(os.getenv("PORT", "8181"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

# 0 disables expiry
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 3600)))
ATTENDANCE_CODE_TTL_SECONDS = int(os.getenv("ATTENDANCE_CODE_TTL_SECONDS", "300"))
CHAT_DEFAULT_LIMIT = int(os.getenv("CHAT_DEFAULT_LIMIT", "200"))

ENABLE_DEMO_ROUTES = bool(int(os.getenv("ENABLE_DEMO_ROUTES", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed topics and the demo account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "study_up"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "study_up"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

DEBUG = False
PORT = int(os.getenv("PORT", "8181"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

# Comma separated list of allowed origins
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 3600)))
ATTENDANCE_CODE_TTL_SECONDS = int(os.getenv("ATTENDANCE_CODE_TTL_SECONDS", "300"))
CHAT_DEFAULT_LIMIT = int(os.getenv("CHAT_DEFAULT_LIMIT", "200"))

ENABLE_DEMO_ROUTES = bool(int(os.getenv("ENABLE_DEMO_ROUTES", "0")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

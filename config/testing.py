import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "study_up_test"),
    "pool_size": 2,
}

DEBUG = False
TESTING = True
PORT = 8181

LOG_LEVEL = "WARNING"
LOG_FORMAT = "text"

CORS_ORIGINS = "*"

SESSION_TTL_SECONDS = 0
ATTENDANCE_CODE_TTL_SECONDS = 300
CHAT_DEFAULT_LIMIT = 200

ENABLE_DEMO_ROUTES = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

import os

from . import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_PATH = os.getenv("DB_PATH", "voley.db")

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# Default admin created on first start
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@voley.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

SEED_DEFAULT_TRAININGS = env_flag("SEED_DEFAULT_TRAININGS", "1")
BULK_SKIP_FOREIGN_PLAYERS = env_flag("BULK_SKIP_FOREIGN_PLAYERS", "1")

import os

from . import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_PATH = os.getenv("DB_PATH", "/var/lib/voley/voley.db")

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@voley.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "please-set-ADMIN_PASSWORD")

SEED_DEFAULT_TRAININGS = env_flag("SEED_DEFAULT_TRAININGS", "0")
BULK_SKIP_FOREIGN_PLAYERS = env_flag("BULK_SKIP_FOREIGN_PLAYERS", "1")

import os

SECRET_KEY = "test-secret"

DB_PATH = os.getenv("DB_PATH", ":memory:")

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_FORMAT = "text"

ADMIN_EMAIL = "admin@voley.com"
ADMIN_PASSWORD = "admin123"

SEED_DEFAULT_TRAININGS = False
BULK_SKIP_FOREIGN_PLAYERS = True

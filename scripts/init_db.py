"""Create or upgrade the SQLite store without starting the web app."""
from __future__ import annotations

import importlib

from dotenv import load_dotenv

from voley_attendance.config import get_settings_module
from voley_attendance.core.logging import setup_logging
from voley_attendance.database.bootstrap import list_tables
from voley_attendance.database.connection import DatabaseConnection, DBConfig
from voley_attendance.main import prepare_store


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FORMAT", "text"))

    db = DatabaseConnection(DBConfig(path=settings.DB_PATH)).open()
    try:
        applied = prepare_store(
            db,
            admin_email=settings.ADMIN_EMAIL,
            admin_password=settings.ADMIN_PASSWORD,
            seed_trainings=bool(getattr(settings, "SEED_DEFAULT_TRAININGS", False)),
        )
        tables = list_tables(db)
    finally:
        db.close()

    print(f"OK: store ready -> {settings.DB_PATH} (tables={len(tables)}, migrations applied now={len(applied)})")


if __name__ == "__main__":
    main()

"""Backup the SQLite store.

Uses the online backup API so the app can keep running during the copy.
"""

from __future__ import annotations

import importlib
import sqlite3
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from voley_attendance.config import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_path = Path(settings.DB_PATH)
    if not db_path.exists():
        raise SystemExit(f"Store not found: {db_path}")

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"voley_{ts}.db"

    src = sqlite3.connect(str(db_path))
    dst = sqlite3.connect(str(out_file))
    try:
        src.backup(dst)
    finally:
        dst.close()
        src.close()
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()

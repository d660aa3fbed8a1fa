from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from dataclasses import dataclass
from typing import Iterator, Optional

from ..core.constants import BUSY_TIMEOUT_MS
from ..core.exceptions import StoreError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    path: str
    busy_timeout_ms: int = BUSY_TIMEOUT_MS


class DatabaseConnection:
    """Explicit store handle shared by every repository.

    One SQLite connection is opened by ``open()`` at startup and released by
    ``close()`` on shutdown. Request threads share it; a re-entrant lock is held
    for the whole lifetime of each transaction so statements never interleave.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._tx_depth = 0

    @property
    def path(self) -> str:
        return self._config.path

    def open(self) -> "DatabaseConnection":
        if self._conn is not None:
            return self
        # autocommit mode; BEGIN/COMMIT are issued by transaction()
        conn = sqlite3.connect(self._config.path, isolation_level=None, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute("PRAGMA journal_mode = WAL;")
        conn.execute(f"PRAGMA busy_timeout = {int(self._config.busy_timeout_ms)};")
        self._conn = conn
        logger.info("Opened store at %s", self._config.path)
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
            logger.info("Closed store at %s", self._config.path)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Store is not open")
        return self._conn

    @contextlib.contextmanager
    def transaction(self, *, write: bool = True) -> Iterator[sqlite3.Cursor]:
        """Transaction helper.

        - Outermost: BEGIN IMMEDIATE (write) or BEGIN (read).
        - Nested: SAVEPOINT/RELEASE so services can compose repository calls.
        - Any exception rolls back; sqlite3 errors surface as StoreError.
        """
        with self._lock:
            conn = self._require_conn()
            cur = conn.cursor()
            depth0 = self._tx_depth
            sp_name: Optional[str] = None
            try:
                try:
                    if depth0 == 0:
                        conn.execute("BEGIN IMMEDIATE;" if write else "BEGIN;")
                    else:
                        sp_name = f"sp_{depth0}"
                        cur.execute(f"SAVEPOINT {sp_name};")
                except sqlite3.Error as exc:
                    logger.exception("Could not start transaction")
                    raise StoreError("Store operation failed") from exc

                self._tx_depth += 1
                try:
                    yield cur
                except BaseException as exc:
                    self._rollback(conn, cur, depth0, sp_name)
                    if isinstance(exc, sqlite3.Error):
                        logger.exception("Store operation failed, transaction rolled back")
                        raise StoreError("Store operation failed") from exc
                    raise
                else:
                    try:
                        if depth0 == 0:
                            conn.commit()
                        else:
                            cur.execute(f"RELEASE SAVEPOINT {sp_name};")
                    except sqlite3.Error as exc:
                        self._rollback(conn, cur, depth0, sp_name)
                        logger.exception("Commit failed, transaction rolled back")
                        raise StoreError("Store operation failed") from exc
                finally:
                    self._tx_depth -= 1
            finally:
                cur.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection, cur: sqlite3.Cursor, depth0: int, sp_name: Optional[str]) -> None:
        if depth0 == 0:
            conn.rollback()
        else:
            cur.execute(f"ROLLBACK TO SAVEPOINT {sp_name};")
            cur.execute(f"RELEASE SAVEPOINT {sp_name};")

    def executescript(self, sql: str) -> None:
        """Run a DDL script outside of any transaction (sqlite3 commits implicitly)."""
        with self._lock:
            if self._tx_depth != 0:
                raise RuntimeError("executescript() must not run inside an active transaction")
            conn = self._require_conn()
            try:
                conn.executescript(sql)
            except sqlite3.Error as exc:
                logger.exception("Schema script failed")
                raise StoreError("Store operation failed") from exc

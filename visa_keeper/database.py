from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterator, Optional


@dataclass(slots=True)
class UserRecord:
    telegram_id: int
    phone_number: str
    first_name: str
    last_name: str
    passport_number: str
    visa_expiry_date: date
    created_at: datetime


@dataclass(slots=True)
class AdminRecord:
    telegram_id: int
    username: Optional[str]
    added_by: int
    added_at: datetime


_USER_COLUMNS = (
    "telegram_id, phone_number, first_name, last_name, passport_number, "
    "visa_expiry_date, created_at"
)
_ADMIN_COLUMNS = "telegram_id, username, added_by, added_at"


def _user_from_row(row: sqlite3.Row) -> UserRecord:
    return UserRecord(
        telegram_id=int(row["telegram_id"]),
        phone_number=str(row["phone_number"]),
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        passport_number=str(row["passport_number"]),
        visa_expiry_date=date.fromisoformat(row["visa_expiry_date"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _admin_from_row(row: sqlite3.Row) -> AdminRecord:
    return AdminRecord(
        telegram_id=int(row["telegram_id"]),
        username=row["username"],
        added_by=int(row["added_by"]),
        added_at=datetime.fromisoformat(row["added_at"]),
    )


class Database:
    """SQLite storage for visa holders and bot administrators.

    Every public method opens its own connection and commits on exit, and
    every mutation is a single statement, so two writers racing on the same
    ``telegram_id`` never leave a row with fields taken from both.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._initialise()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _initialise(self) -> None:
        with self._connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY,
                    telegram_id INTEGER UNIQUE NOT NULL,
                    phone_number TEXT NOT NULL,
                    first_name TEXT NOT NULL,
                    last_name TEXT NOT NULL,
                    passport_number TEXT NOT NULL,
                    visa_expiry_date TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE INDEX IF NOT EXISTS idx_users_visa_expiry
                    ON users (visa_expiry_date);

                CREATE TABLE IF NOT EXISTS admins (
                    id INTEGER PRIMARY KEY,
                    telegram_id INTEGER UNIQUE NOT NULL,
                    username TEXT,
                    added_by INTEGER NOT NULL,
                    added_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );
                """
            )

    def bootstrap(self, admin_id: Optional[int]) -> bool:
        """Seed ``admin_id`` as the first administrator when none exist yet."""
        if admin_id is None:
            return False
        with self._connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO admins (telegram_id, username, added_by)
                SELECT ?, NULL, ?
                WHERE NOT EXISTS (SELECT 1 FROM admins)
                """,
                (admin_id, admin_id),
            )
            return cursor.rowcount == 1

    # User helpers ---------------------------------------------------------
    def upsert_user(
        self,
        telegram_id: int,
        *,
        phone_number: str,
        first_name: str,
        last_name: str,
        passport_number: str,
        visa_expiry_date: date,
    ) -> UserRecord:
        with self._connection() as conn:
            rows = conn.execute(
                f"""
                INSERT INTO users
                    (telegram_id, phone_number, first_name, last_name, passport_number, visa_expiry_date)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(telegram_id) DO UPDATE SET
                    phone_number = excluded.phone_number,
                    first_name = excluded.first_name,
                    last_name = excluded.last_name,
                    passport_number = excluded.passport_number,
                    visa_expiry_date = excluded.visa_expiry_date
                RETURNING {_USER_COLUMNS}
                """,
                (
                    telegram_id,
                    phone_number,
                    first_name,
                    last_name,
                    passport_number,
                    visa_expiry_date.isoformat(),
                ),
            ).fetchall()
            return _user_from_row(rows[0])

    def get_user(self, telegram_id: int) -> Optional[UserRecord]:
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE telegram_id = ?",
                (telegram_id,),
            ).fetchone()
        return _user_from_row(row) if row else None

    def list_users(self) -> list[UserRecord]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [_user_from_row(row) for row in rows]

    def list_by_date_range(self, start: date, end: date) -> list[UserRecord]:
        with self._connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {_USER_COLUMNS} FROM users
                WHERE visa_expiry_date BETWEEN ? AND ?
                ORDER BY visa_expiry_date ASC, id ASC
                """,
                (start.isoformat(), end.isoformat()),
            ).fetchall()
        return [_user_from_row(row) for row in rows]

    def list_expiring(self, today: date, days: int) -> list[UserRecord]:
        return self.list_by_date_range(today, today + timedelta(days=days))

    # Admin helpers -------------------------------------------------------
    def add_admin(self, telegram_id: int, username: Optional[str], added_by: int) -> AdminRecord:
        with self._connection() as conn:
            rows = conn.execute(
                f"""
                INSERT INTO admins (telegram_id, username, added_by)
                VALUES (?, ?, ?)
                ON CONFLICT(telegram_id) DO UPDATE SET
                    username = excluded.username,
                    added_by = excluded.added_by
                RETURNING {_ADMIN_COLUMNS}
                """,
                (telegram_id, username, added_by),
            ).fetchall()
            return _admin_from_row(rows[0])

    def remove_admin(self, telegram_id: int) -> Optional[AdminRecord]:
        with self._connection() as conn:
            rows = conn.execute(
                f"DELETE FROM admins WHERE telegram_id = ? RETURNING {_ADMIN_COLUMNS}",
                (telegram_id,),
            ).fetchall()
            return _admin_from_row(rows[0]) if rows else None

    def is_admin(self, telegram_id: int) -> bool:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM admins WHERE telegram_id = ?", (telegram_id,)
            ).fetchone()
        return row is not None

    def list_admins(self) -> list[AdminRecord]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_ADMIN_COLUMNS} FROM admins ORDER BY added_at DESC, id DESC"
            ).fetchall()
        return [_admin_from_row(row) for row in rows]


__all__ = ["Database", "UserRecord", "AdminRecord"]

from __future__ import annotations

import sqlite3
import threading
from typing import Any, Mapping, Sequence

from domain.models import CandidateProfile, Skill

_SETTINGS_COLUMNS = (
    "naukri_email",
    "target_role",
    "location",
    "current_c_t_c",
    "expected_c_t_c",
    "notice_period",
    "years_of_experience",
    "availability",
    "dob",
    "resume_text",
)


class SQLiteCandidateRepository:
    """
    SQLite-backed implementation of ``CandidateDataRepositoryPort``.

    The schema mirrors the job-portal store: ``users`` holds the account,
    ``job_settings`` the per-user answers and resume text, ``skills`` the
    rated skill rows. The read methods are all the answer engine uses; the
    ``save_*`` methods exist for seeding from the CLI and tests.

    Reads arrive from worker threads, so the connection is shared across
    threads and guarded by a lock.
    """

    _SCHEMA_SQL = """\
    CREATE TABLE IF NOT EXISTS users (
        id          TEXT PRIMARY KEY,
        first_name  TEXT,
        last_name   TEXT,
        email       TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS job_settings (
        user_id             TEXT PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
        naukri_email        TEXT,
        target_role         TEXT,
        location            TEXT,
        current_c_t_c       TEXT,
        expected_c_t_c      TEXT,
        notice_period       TEXT,
        years_of_experience TEXT,
        availability        TEXT,
        dob                 TEXT,
        resume_text         TEXT
    );

    CREATE TABLE IF NOT EXISTS skills (
        id           INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id      TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        skill_name   TEXT NOT NULL,
        display_name TEXT,
        rating       INTEGER,
        out_of       INTEGER,
        experience   TEXT
    );

    CREATE INDEX IF NOT EXISTS idx_skills_user ON skills(user_id);
    """

    def __init__(self, db_path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._lock = threading.Lock()
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(self._SCHEMA_SQL)

    def __enter__(self) -> "SQLiteCandidateRepository":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    # -- Reads (CandidateDataRepositoryPort) --------------------------------

    def get_profile(self, user_id: str) -> CandidateProfile | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT u.first_name, u.last_name, u.email, "
                "js.naukri_email, js.target_role, js.location, "
                "js.current_c_t_c, js.expected_c_t_c, js.notice_period, "
                "js.years_of_experience, js.availability, js.dob "
                "FROM job_settings js JOIN users u ON js.user_id = u.id "
                "WHERE js.user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        name = f"{row[0] or ''} {row[1] or ''}".strip()
        return CandidateProfile(
            name=name or None,
            email=row[3] or row[2],
            target_role=row[4],
            location=row[5],
            current_ctc=row[6],
            expected_ctc=row[7],
            notice_period=row[8],
            years_of_experience=row[9],
            availability=row[10],
            dob=row[11],
        )

    def list_skills(self, user_id: str) -> Sequence[Skill]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT skill_name, display_name, rating, out_of, experience "
                "FROM skills WHERE user_id = ? ORDER BY id",
                (user_id,),
            ).fetchall()
        return [
            Skill(
                skill_name=r[0],
                display_name=r[1],
                rating=r[2],
                out_of=r[3],
                experience=r[4],
            )
            for r in rows
        ]

    def get_resume_text(self, user_id: str) -> str | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT resume_text FROM job_settings WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return row[0]

    # -- Seeding ------------------------------------------------------------

    def save_user(self, user_id: str, *, first_name: str, last_name: str, email: str) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT INTO users (id, first_name, last_name, email) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET "
                "first_name=excluded.first_name, last_name=excluded.last_name, "
                "email=excluded.email",
                (user_id, first_name, last_name, email),
            )
            self._conn.commit()

    def save_job_settings(self, user_id: str, settings: Mapping[str, Any]) -> None:
        unknown = set(settings) - set(_SETTINGS_COLUMNS)
        if unknown:
            raise ValueError(f"unknown job settings: {', '.join(sorted(unknown))}")

        values = [
            None if settings.get(col) is None else str(settings[col])
            for col in _SETTINGS_COLUMNS
        ]
        assignments = ", ".join(f"{col}=excluded.{col}" for col in _SETTINGS_COLUMNS)
        with self._lock:
            self._conn.execute(
                f"INSERT INTO job_settings (user_id, {', '.join(_SETTINGS_COLUMNS)}) "
                f"VALUES (?, {', '.join('?' for _ in _SETTINGS_COLUMNS)}) "
                f"ON CONFLICT(user_id) DO UPDATE SET {assignments}",
                (user_id, *values),
            )
            self._conn.commit()

    def replace_skills(self, user_id: str, skills: Sequence[Skill]) -> None:
        with self._lock:
            self._conn.execute("BEGIN")
            try:
                self._conn.execute("DELETE FROM skills WHERE user_id = ?", (user_id,))
                self._conn.executemany(
                    "INSERT INTO skills "
                    "(user_id, skill_name, display_name, rating, out_of, experience) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    [
                        (user_id, s.skill_name, s.display_name, s.rating, s.out_of, s.experience)
                        for s in skills
                    ],
                )
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise

    def close(self) -> None:
        with self._lock:
            self._conn.close()

from __future__ import annotations

import os
import sqlite3
import threading
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Protocol

from app.core.config import settings
from app.schemas.resume import ResumeCreate, ResumeRecord, ResumeUpdate

_RESUME_COLUMNS = "id, job_role, file_name, original_text, analysis, created_at"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResumeStore(Protocol):
    def create_resume(self, resume: ResumeCreate) -> ResumeRecord: ...

    def get_resume(self, resume_id: int) -> ResumeRecord | None: ...

    def list_resumes(self, limit: int = 50) -> list[ResumeRecord]: ...

    def update_resume(self, resume_id: int, update: ResumeUpdate) -> ResumeRecord | None: ...

    def delete_resume(self, resume_id: int) -> bool: ...

    def log_analysis_run(
        self,
        *,
        run_id: str,
        job_role: str,
        model: str,
        status: str,
        using_fallback: bool,
        error_code: str | None = None,
        latency_ms: int | None = None,
    ) -> None: ...


def _row_to_record(row: tuple) -> ResumeRecord:
    return ResumeRecord(
        id=row[0],
        job_role=row[1],
        file_name=row[2],
        original_text=row[3],
        analysis=row[4],
        created_at=row[5],
    )


class SqliteResumeStore:
    """Resume records and analysis run log kept in a single sqlite file."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resumes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                job_role TEXT,
                file_name TEXT NOT NULL,
                original_text TEXT NOT NULL,
                analysis TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analysis_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                job_role TEXT NOT NULL,
                model TEXT NOT NULL,
                status TEXT NOT NULL,
                using_fallback INTEGER NOT NULL,
                error_code TEXT,
                latency_ms INTEGER
            );
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_analysis_runs_created_at
            ON analysis_runs (created_at);
            """
        )
        self._conn = conn
        return conn

    def init_db(self) -> None:
        with self._lock:
            self._get_connection()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def create_resume(self, resume: ResumeCreate) -> ResumeRecord:
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                """
                INSERT INTO resumes (job_role, file_name, original_text, analysis, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    resume.job_role,
                    resume.file_name,
                    resume.original_text,
                    resume.analysis,
                    resume.created_at,
                ),
            )
            resume_id = int(cur.lastrowid)
        return ResumeRecord(id=resume_id, **resume.model_dump())

    def get_resume(self, resume_id: int) -> ResumeRecord | None:
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                f"SELECT {_RESUME_COLUMNS} FROM resumes WHERE id = ?",
                (resume_id,),
            )
            row = cur.fetchone()
        return _row_to_record(row) if row else None

    def list_resumes(self, limit: int = 50) -> list[ResumeRecord]:
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                f"SELECT {_RESUME_COLUMNS} FROM resumes ORDER BY id DESC LIMIT ?",
                (max(1, int(limit)),),
            )
            rows = cur.fetchall()
        return [_row_to_record(row) for row in rows]

    def update_resume(self, resume_id: int, update: ResumeUpdate) -> ResumeRecord | None:
        changes: dict[str, Any] = update.model_dump(exclude_unset=True)
        if not changes:
            return self.get_resume(resume_id)

        assignments = ", ".join(f"{column} = ?" for column in changes)
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                f"UPDATE resumes SET {assignments} WHERE id = ?",
                (*changes.values(), resume_id),
            )
            updated = int(cur.rowcount or 0)
        if not updated:
            return None
        return self.get_resume(resume_id)

    def delete_resume(self, resume_id: int) -> bool:
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute("DELETE FROM resumes WHERE id = ?", (resume_id,))
            return int(cur.rowcount or 0) > 0

    def log_analysis_run(
        self,
        *,
        run_id: str,
        job_role: str,
        model: str,
        status: str,
        using_fallback: bool,
        error_code: str | None = None,
        latency_ms: int | None = None,
    ) -> None:
        with self._lock:
            conn = self._get_connection()
            conn.execute(
                """
                INSERT INTO analysis_runs (
                    created_at, run_id, job_role, model, status, using_fallback, error_code, latency_ms
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    utc_now_iso(),
                    run_id,
                    job_role,
                    model,
                    status,
                    1 if using_fallback else 0,
                    error_code,
                    latency_ms,
                ),
            )

    def list_analysis_runs(self, limit: int = 20) -> list[dict[str, Any]]:
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                """
                SELECT created_at, run_id, job_role, model, status, using_fallback, error_code, latency_ms
                FROM analysis_runs
                ORDER BY id DESC
                LIMIT ?
                """,
                (max(1, int(limit)),),
            )
            rows = cur.fetchall()
            columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in rows]

    def purge_old_runs(self, retention_days: int | None = None) -> int:
        days = max(1, int(retention_days or settings.analysis_runs_retention_days))
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                "DELETE FROM analysis_runs WHERE created_at < ?",
                (_cutoff_iso(days),),
            )
            return int(cur.rowcount or 0)


def _cutoff_iso(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


@lru_cache(maxsize=1)
def get_resume_store() -> SqliteResumeStore:
    return SqliteResumeStore(settings.resume_db_path)

"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS jobs (
  job_id TEXT PRIMARY KEY,
  title TEXT NOT NULL,
  company TEXT NOT NULL,
  location TEXT NOT NULL,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS job_applications (
  job_id TEXT NOT NULL,
  user_id TEXT NOT NULL,
  applied_at TEXT NOT NULL,
  PRIMARY KEY (job_id, user_id),
  FOREIGN KEY (job_id) REFERENCES jobs(job_id) ON DELETE CASCADE
);
""",
    """
CREATE TABLE IF NOT EXISTS interviews (
  id TEXT PRIMARY KEY,
  candidate_id TEXT NOT NULL,
  job_id TEXT NOT NULL,
  scheduled_at_ms INTEGER NOT NULL,
  end_at_ms INTEGER NOT NULL,
  duration_minutes INTEGER NOT NULL CHECK (duration_minutes > 0),
  status TEXT NOT NULL CHECK (status IN ('scheduled', 'in-progress', 'completed', 'cancelled', 'expired')),
  type TEXT NOT NULL DEFAULT 'ai-interview',
  meeting_room TEXT,
  notes TEXT,
  started_at_ms INTEGER,
  completed_at_ms INTEGER,
  created_at_ms INTEGER NOT NULL,
  updated_at_ms INTEGER NOT NULL,
  CHECK (end_at_ms > scheduled_at_ms)
);
""",
    "CREATE INDEX IF NOT EXISTS idx_interviews_candidate ON interviews (candidate_id, scheduled_at_ms);",
    "CREATE INDEX IF NOT EXISTS idx_interviews_job ON interviews (job_id, scheduled_at_ms);",
    "CREATE INDEX IF NOT EXISTS idx_interviews_status ON interviews (status, end_at_ms);",
    # Backstop for the in-transaction conflict scan.
    """
CREATE TRIGGER IF NOT EXISTS interviews_no_overlap
BEFORE INSERT ON interviews
WHEN NEW.status IN ('scheduled', 'in-progress') AND EXISTS (
  SELECT 1 FROM interviews
  WHERE candidate_id = NEW.candidate_id
    AND status IN ('scheduled', 'in-progress')
    AND scheduled_at_ms < NEW.end_at_ms
    AND NEW.scheduled_at_ms < end_at_ms
)
BEGIN
  SELECT RAISE(ABORT, 'slot conflict');
END;
""",
]


def migrate(db_path: str = "data/interviews.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

DB_PATH = Path(os.getenv("DB_PATH", Path(__file__).resolve().parents[1] / "data.sqlite3"))

def init_db():
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    cur = conn.cursor()
    # Submissions (contact details, scoring profile, OTP state and last score)
    cur.execute("""
    CREATE TABLE IF NOT EXISTS submissions(
        id TEXT PRIMARY KEY,
        full_name TEXT NOT NULL,
        email TEXT NOT NULL,
        phone TEXT NOT NULL,
        city TEXT,
        country TEXT,
        education TEXT,
        education_grade TEXT,
        grade_type TEXT,
        has_language_test TEXT,
        language_test TEXT,
        ielts_score TEXT,
        has_work_experience TEXT,
        work_experience_years TEXT,
        financial_capacity TEXT,
        preferred_intake TEXT,
        preferred_province TEXT,
        eligibility_score INTEGER,
        status TEXT NOT NULL DEFAULT 'pending',
        otp_code TEXT,
        otp_verified INTEGER NOT NULL DEFAULT 0,
        submitted_at TEXT NOT NULL
    )
    """)
    cur.execute("CREATE INDEX IF NOT EXISTS idx_submissions_submitted_at ON submissions(submitted_at)")
    # Contact form messages
    cur.execute("""
    CREATE TABLE IF NOT EXISTS contact_messages(
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        phone TEXT NOT NULL,
        subject TEXT NOT NULL,
        message TEXT NOT NULL,
        submitted_at TEXT NOT NULL
    )
    """)
    # Logs table (stores request/response logs independently)
    cur.execute("""
    CREATE TABLE IF NOT EXISTS logs(
        log_id TEXT PRIMARY KEY,
        direction TEXT NOT NULL, -- see logger.LOG_DIRECTIONS
        payload_json TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """)
    conn.commit()
    conn.close()

@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.commit()
        conn.close()


import uuid
from datetime import datetime, timezone
from typing import List, Optional

from .db import get_conn

SUBMISSION_COLUMNS = [
    "full_name", "email", "phone", "city", "country",
    "education", "education_grade", "grade_type",
    "has_language_test", "language_test", "ielts_score",
    "has_work_experience", "work_experience_years",
    "financial_capacity", "preferred_intake", "preferred_province",
    "eligibility_score", "status", "otp_code", "otp_verified",
]

CONTACT_COLUMNS = ["name", "email", "phone", "subject", "message"]

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def create_submission(data: dict) -> dict:
    submission_id = str(uuid.uuid4())
    row = {col: data.get(col) for col in SUBMISSION_COLUMNS}
    row["status"] = row["status"] or "pending"
    row["otp_verified"] = int(bool(row["otp_verified"]))

    cols = ["id"] + SUBMISSION_COLUMNS + ["submitted_at"]
    values = [submission_id] + [row[c] for c in SUBMISSION_COLUMNS] + [_now()]
    with get_conn() as conn:
        conn.execute(
            f"INSERT INTO submissions({', '.join(cols)}) VALUES({', '.join('?' * len(cols))})",
            values,
        )
    return get_submission(submission_id)

def get_submission(submission_id: str) -> Optional[dict]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM submissions WHERE id = ?", (submission_id,)).fetchone()
    return dict(row) if row else None

def list_submissions() -> List[dict]:
    with get_conn() as conn:
        rows = conn.execute("SELECT * FROM submissions ORDER BY submitted_at DESC").fetchall()
    return [dict(r) for r in rows]

def update_submission_status(submission_id: str, status: str) -> Optional[dict]:
    with get_conn() as conn:
        conn.execute("UPDATE submissions SET status = ? WHERE id = ?", (status, submission_id))
    return get_submission(submission_id)

def update_submission_otp(submission_id: str, code: str):
    with get_conn() as conn:
        conn.execute(
            "UPDATE submissions SET otp_code = ?, otp_verified = 0 WHERE id = ?",
            (code, submission_id),
        )

def verify_otp(submission_id: str, code: str) -> bool:
    with get_conn() as conn:
        row = conn.execute("SELECT otp_code FROM submissions WHERE id = ?", (submission_id,)).fetchone()
        if not row or not row["otp_code"] or row["otp_code"] != code:
            return False
        conn.execute("UPDATE submissions SET otp_verified = 1 WHERE id = ?", (submission_id,))
    return True

def update_eligibility_score(submission_id: str, score: int) -> Optional[dict]:
    with get_conn() as conn:
        conn.execute(
            "UPDATE submissions SET eligibility_score = ? WHERE id = ?",
            (int(score), submission_id),
        )
    return get_submission(submission_id)

def create_contact_message(data: dict) -> dict:
    message_id = str(uuid.uuid4())
    now = _now()
    with get_conn() as conn:
        conn.execute(
            "INSERT INTO contact_messages(id, name, email, phone, subject, message, submitted_at) VALUES(?,?,?,?,?,?,?)",
            (message_id, *[data[c] for c in CONTACT_COLUMNS], now),
        )
    return {"id": message_id, **{c: data[c] for c in CONTACT_COLUMNS}, "submitted_at": now}

def list_contact_messages() -> List[dict]:
    with get_conn() as conn:
        rows = conn.execute("SELECT * FROM contact_messages ORDER BY submitted_at DESC").fetchall()
    return [dict(r) for r in rows]

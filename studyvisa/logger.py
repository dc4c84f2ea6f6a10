
import json
import uuid
from .db import get_conn
from datetime import datetime, timezone

# in/out: request and response bodies; notify: OTP hand-off; email: report-email requests
LOG_DIRECTIONS = {"in", "out", "notify", "email"}

def log_payload(direction: str, payload: dict):
    if direction not in LOG_DIRECTIONS:
        raise ValueError(f"Unknown log direction: {direction!r}")

    with get_conn() as conn:
        conn.execute(
            "INSERT INTO logs(log_id, direction, payload_json, created_at) VALUES(?,?,?,?)",
            (
                str(uuid.uuid4()),
                direction,
                # Rows may carry values json cannot encode natively
                json.dumps(payload, ensure_ascii=False, default=str),
                datetime.now(timezone.utc).isoformat(),
            ),
        )

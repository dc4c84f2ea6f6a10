
import os
import secrets

from .logger import log_payload

OTP_LENGTH = 6

def generate_otp() -> str:
    # OTP_LENGTH digits, never starting with zero
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))

def deliver_otp(submission_id: str, phone: str, code: str):
    # No WhatsApp/SMS channel is wired; record the hand-off without the code itself
    log_payload("notify", {
        "channel": "whatsapp",
        "submission_id": submission_id,
        "phone": phone,
        "code_length": len(code),
    })

def echo_otp() -> bool:
    return os.getenv("APP_ENV", "production") == "development"

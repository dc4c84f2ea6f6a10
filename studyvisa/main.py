import os
import secrets
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse, Response
from typing import Any, Dict, List, Optional

from .db import init_db
from .schemas import (
    ContactMessageInput,
    ContactMessageOutput,
    ContactSubmitInput,
    EligibilityDetails,
    OtpVerifyInput,
    ProfileInput,
    PublicSubmissionOutput,
    ReportEmailInput,
    StatusUpdateInput,
    SubmissionInput,
    SubmissionOutput,
    SubmitOutput,
    VerifyOutput,
)
from .eligibility import calculate_eligibility_score, validate_contact
from .logger import log_payload
from .otp import deliver_otp, echo_otp, generate_otp
from .report import render_report_pdf, report_filename
from . import storage

STATUS_SET = {"pending", "approved", "rejected"}

app = FastAPI(title="Study Visa Eligibility API", version="1.0.0")

# Initialize DB at import time
init_db()


def require_admin(x_admin_token: Optional[str] = Header(None)):
    expected = os.getenv("ADMIN_TOKEN")
    if not expected or not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=403, detail="Admin access required")

def internal_error(context: str, e: Exception):
    log_payload("out", {"error": f"{context}: {str(e)}"})
    raise HTTPException(status_code=500, detail="Internal Server Error")


# --- Convenience routes ---
@app.get("/", include_in_schema=False)
def home():
    return RedirectResponse(url="/docs", status_code=307)

@app.get("/health", include_in_schema=False)
def health():
    return {"status": "healthy"}

@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    # Avoid 404 log spam from browsers requesting a favicon.
    return Response(status_code=204)
# --- End convenience routes ---


@app.post("/eligibility/check", response_model=EligibilityDetails)
def check_eligibility(payload: ProfileInput):
    payload_dict: Dict[str, Any] = payload.model_dump()
    log_payload("in", payload_dict)

    result = calculate_eligibility_score(payload_dict).to_dict()
    log_payload("out", result)
    return JSONResponse(content=result)


@app.post("/eligibility/submit", response_model=SubmitOutput)
def submit_contact(payload: ContactSubmitInput):
    payload_dict: Dict[str, Any] = payload.model_dump()
    log_payload("in", payload_dict)

    v = validate_contact(payload_dict)
    if not v.ok:
        log_payload("out", {"errors": v.errors})
        raise HTTPException(status_code=422, detail=v.errors)

    try:
        # Initial score only; the authoritative one is computed after verification
        initial = calculate_eligibility_score(payload_dict)
        otp = generate_otp()
        submission = storage.create_submission({
            **payload_dict,
            "eligibility_score": initial.score,
            "status": "pending",
        })
        storage.update_submission_otp(submission["id"], otp)
        deliver_otp(submission["id"], submission["phone"], otp)

        response = {
            "id": submission["id"],
            "message": "OTP sent to WhatsApp",
            "initialScore": initial.score,
        }
        log_payload("out", response)
        if echo_otp():
            response["otpCode"] = otp
        return JSONResponse(content=response)
    except Exception as e:
        internal_error("submit", e)


@app.post("/eligibility/verify-otp", response_model=VerifyOutput)
def verify_otp(payload: OtpVerifyInput):
    log_payload("in", {"submission_id": payload.submission_id})

    if not storage.verify_otp(payload.submission_id, payload.otp):
        log_payload("out", {"error": "Invalid OTP code"})
        raise HTTPException(status_code=400, detail="Invalid OTP code")

    submission = storage.get_submission(payload.submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")

    try:
        result = calculate_eligibility_score(submission)
        updated = storage.update_eligibility_score(submission["id"], result.score)
        if updated is None:
            raise RuntimeError("submission vanished while saving score")
        response = {
            "score": result.score,
            "message": result.suggestion,
            "isEligible": result.is_eligible,
        }
        log_payload("out", response)
        return JSONResponse(content=response)
    except Exception as e:
        internal_error("verify-otp", e)


@app.get("/eligibility/download-pdf/{submission_id}")
def download_pdf(submission_id: str):
    submission = storage.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Not found")

    try:
        pdf = render_report_pdf(submission)
    except Exception as e:
        internal_error("download-pdf", e)
    filename = report_filename(submission_id)
    log_payload("out", {"report": filename, "bytes": len(pdf)})
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.post("/submissions", response_model=SubmissionOutput, status_code=201)
def create_submission(payload: SubmissionInput):
    payload_dict: Dict[str, Any] = payload.model_dump()
    log_payload("in", payload_dict)

    try:
        result = calculate_eligibility_score(payload_dict)
        submission = storage.create_submission({
            **payload_dict,
            "eligibility_score": result.score,
            "status": "approved" if result.is_eligible else "pending",
        })
        response = SubmissionOutput.model_validate(submission).model_dump(by_alias=True)
        log_payload("out", response)
        return JSONResponse(status_code=201, content=response)
    except Exception as e:
        internal_error("create submission", e)


@app.get("/submissions/public/{submission_id}", response_model=PublicSubmissionOutput)
def public_submission(submission_id: str):
    submission = storage.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")

    # Eligibility data only, no contact details
    return PublicSubmissionOutput(
        id=submission["id"],
        eligibility_score=submission["eligibility_score"],
        status=submission["status"],
        submitted_at=submission["submitted_at"],
        eligibility_details=calculate_eligibility_score(submission).to_dict(),
    )


@app.get("/submissions", response_model=List[SubmissionOutput], dependencies=[Depends(require_admin)])
def list_submissions():
    return storage.list_submissions()

@app.get("/submissions/{submission_id}", response_model=SubmissionOutput, dependencies=[Depends(require_admin)])
def get_submission(submission_id: str):
    submission = storage.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission

@app.patch("/submissions/{submission_id}/status", response_model=SubmissionOutput, dependencies=[Depends(require_admin)])
def update_status(submission_id: str, payload: StatusUpdateInput):
    if not payload.status:
        raise HTTPException(status_code=400, detail="Status is required")
    if payload.status not in STATUS_SET:
        raise HTTPException(status_code=400, detail=f"Status must be one of {sorted(STATUS_SET)}")

    if storage.get_submission(submission_id) is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    submission = storage.update_submission_status(submission_id, payload.status)
    log_payload("out", {"id": submission_id, "status": payload.status})
    return submission


@app.post("/send-report-email")
def send_report_email(payload: ReportEmailInput):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email address is required")

    # No mail transport is wired; the request is recorded for follow-up
    log_payload("email", payload.model_dump())
    return {
        "success": True,
        "message": "Report sent successfully",
        "email": payload.email,
    }


@app.post("/contact-messages", response_model=ContactMessageOutput, status_code=201)
def create_contact_message(payload: ContactMessageInput):
    payload_dict: Dict[str, Any] = payload.model_dump()
    log_payload("in", payload_dict)

    try:
        message = storage.create_contact_message(payload_dict)
        response = ContactMessageOutput.model_validate(message).model_dump(by_alias=True)
        log_payload("out", response)
        return JSONResponse(status_code=201, content=response)
    except Exception as e:
        internal_error("contact message", e)

@app.get("/contact-messages", response_model=List[ContactMessageOutput], dependencies=[Depends(require_admin)])
def list_contact_messages():
    return storage.list_contact_messages()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("studyvisa.main:app", host="0.0.0.0", port=8000, reload=False)

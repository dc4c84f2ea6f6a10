
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from .otp import OTP_LENGTH

class WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ProfileInput(WireModel):
    education: Optional[str] = None
    education_grade: Optional[str] = Field(None, description="CGPA out of 10 or percentage, see gradeType")
    grade_type: Optional[str] = Field(None, description="cgpa | percentage")
    has_language_test: Optional[str] = Field(None, description="yes | no")
    language_test: Optional[str] = Field(None, description="ielts | toefl | pte")
    ielts_score: Optional[str] = Field(None, description="Overall score of the declared test")
    has_work_experience: Optional[str] = Field(None, description="yes | no")
    work_experience_years: Optional[str] = None
    financial_capacity: Optional[str] = Field(None, description="above-60 | 40-60 | 20-40 | below-20 (lakhs)")

    @field_validator(
        "education_grade", "ielts_score", "work_experience_years",
        mode="before",
    )
    @classmethod
    def numbers_as_text(cls, v):
        # Forms post these as strings; accept bare JSON numbers too
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class ContactSubmitInput(ProfileInput):
    full_name: str
    email: str
    phone: str
    city: str
    country: Optional[str] = None
    preferred_intake: Optional[str] = None
    preferred_province: Optional[str] = None

class SubmissionInput(ProfileInput):
    full_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    city: Optional[str] = None
    country: Optional[str] = None
    preferred_intake: Optional[str] = None
    preferred_province: Optional[str] = None

class EligibilityDetails(WireModel):
    score: int
    is_eligible: bool
    strengths: List[str]
    weaknesses: List[str]
    suggestion: str

class SubmitOutput(WireModel):
    id: str
    message: str
    initial_score: int
    otp_code: Optional[str] = None

class OtpVerifyInput(WireModel):
    submission_id: str
    otp: str = Field(..., min_length=OTP_LENGTH, max_length=OTP_LENGTH)

class VerifyOutput(WireModel):
    score: int
    message: str
    is_eligible: bool

class StatusUpdateInput(WireModel):
    status: Optional[str] = None

class ReportEmailInput(WireModel):
    email: Optional[str] = None
    score: Optional[int] = None
    is_eligible: Optional[bool] = None

class ContactMessageInput(WireModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

class SubmissionOutput(ProfileInput):
    # Stored row as seen by admins; the OTP code itself is never exposed
    id: str
    full_name: str
    email: str
    phone: str
    city: Optional[str] = None
    country: Optional[str] = None
    preferred_intake: Optional[str] = None
    preferred_province: Optional[str] = None
    eligibility_score: Optional[int] = None
    status: str
    otp_verified: bool
    submitted_at: str

class PublicSubmissionOutput(WireModel):
    id: str
    eligibility_score: Optional[int] = None
    status: str
    submitted_at: str
    eligibility_details: EligibilityDetails

class ContactMessageOutput(WireModel):
    id: str
    name: str
    email: str
    phone: str
    subject: str
    message: str
    submitted_at: str

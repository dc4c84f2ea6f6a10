
import re
from dataclasses import dataclass, fields
from typing import Any, List, Mapping, NamedTuple, Optional, Tuple, Union

import numpy as np
import pandas as pd
from pydantic.alias_generators import to_camel

NAME_RE = re.compile(r"\S")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
PHONE_RE = re.compile(r"^[0-9+\-() ]+$")
MIN_PHONE_LENGTH = 10
DECIMAL_RE = re.compile(r"^\s*[+-]?\d+(\.\d+)?\s*$")

SCORE_MIN = 0
SCORE_MAX = 100
ELIGIBILITY_CUTOFF = 60

NO_LANGUAGE_TEST = "No English language test provided - IELTS/TOEFL/PTE required for admission"
WORK_FLOOR = 5
FINANCIAL_FLOOR = 10

# Base points per highest credential
EDUCATION_CATALOG = pd.DataFrame([
    {"education":"phd","points":35,"kind":"strength","message":"Exceptional academic credentials (PhD)"},
    {"education":"master","points":30,"kind":"strength","message":"Strong academic background (Master's degree)"},
    {"education":"bachelor","points":25,"kind":"","message":""},
    {"education":"12th","points":20,"kind":"","message":""},
    {"education":"10th","points":15,"kind":"weakness","message":"Minimum education qualification - consider completing 12th"},
])

# Tiers are ordered best-first; the first row whose min_value the grade reaches wins.
GRADE_TIERS = pd.DataFrame([
    # Bachelor, CGPA out of 10
    {"scale":"bachelor_cgpa","min_value":8.5,"points":5,"kind":"strength","message":"Excellent Bachelor's CGPA ({grade})"},
    {"scale":"bachelor_cgpa","min_value":7.0,"points":3,"kind":"strength","message":"Good Bachelor's CGPA ({grade})"},
    {"scale":"bachelor_cgpa","min_value":6.0,"points":1,"kind":"weakness","message":"Bachelor's CGPA could be higher ({grade}/10)"},
    {"scale":"bachelor_cgpa","min_value":-np.inf,"points":0,"kind":"weakness","message":"Low Bachelor's CGPA ({grade}/10) - consider academic improvement"},

    # Bachelor, percentage
    {"scale":"bachelor_percentage","min_value":75.0,"points":5,"kind":"strength","message":"Excellent Bachelor's performance ({grade}%)"},
    {"scale":"bachelor_percentage","min_value":60.0,"points":3,"kind":"strength","message":"Good Bachelor's performance ({grade}%)"},
    {"scale":"bachelor_percentage","min_value":-np.inf,"points":0,"kind":"weakness","message":"Bachelor's grade could be higher ({grade}%)"},

    # 12th, always a percentage
    {"scale":"12th","min_value":85.0,"points":5,"kind":"strength","message":"Excellent academic performance ({grade}% in 12th)"},
    {"scale":"12th","min_value":70.0,"points":3,"kind":"strength","message":"Good academic performance ({grade}% in 12th)"},
    {"scale":"12th","min_value":60.0,"points":1,"kind":"weakness","message":"12th grade could be stronger ({grade}%)"},
    {"scale":"12th","min_value":-np.inf,"points":0,"kind":"weakness","message":"Low 12th grade ({grade}%) - may need foundation programs"},
])

LANGUAGE_TIERS = pd.DataFrame([
    # IELTS, 0-9 bands
    {"test":"ielts","min_value":7.5,"points":30,"kind":"strength","message":"Excellent IELTS score (Overall {score})"},
    {"test":"ielts","min_value":6.5,"points":25,"kind":"strength","message":"Strong IELTS score (Overall {score})"},
    {"test":"ielts","min_value":6.0,"points":20,"kind":"strength","message":"Good IELTS score (Overall {score})"},
    {"test":"ielts","min_value":5.5,"points":15,"kind":"weakness","message":"IELTS score acceptable but could be higher ({score})"},
    {"test":"ielts","min_value":-np.inf,"points":10,"kind":"weakness","message":"Low IELTS score ({score}) - retake recommended"},

    # TOEFL iBT, 0-120
    {"test":"toefl","min_value":100.0,"points":30,"kind":"strength","message":"Excellent TOEFL score ({score})"},
    {"test":"toefl","min_value":90.0,"points":25,"kind":"strength","message":"Strong TOEFL score ({score})"},
    {"test":"toefl","min_value":80.0,"points":20,"kind":"strength","message":"Good TOEFL score ({score})"},
    {"test":"toefl","min_value":-np.inf,"points":15,"kind":"weakness","message":"TOEFL score could be improved ({score})"},

    # PTE Academic, 10-90
    {"test":"pte","min_value":70.0,"points":30,"kind":"strength","message":"Excellent PTE score ({score})"},
    {"test":"pte","min_value":60.0,"points":25,"kind":"strength","message":"Strong PTE score ({score})"},
    {"test":"pte","min_value":50.0,"points":20,"kind":"strength","message":"Good PTE score ({score})"},
    {"test":"pte","min_value":-np.inf,"points":15,"kind":"weakness","message":"PTE score needs improvement ({score})"},
])

WORK_TIERS = pd.DataFrame([
    {"min_value":5,"points":15,"kind":"strength","message":"Extensive work experience ({years} years)"},
    {"min_value":3,"points":12,"kind":"strength","message":"Good work experience ({years} years)"},
    {"min_value":1,"points":10,"kind":"strength","message":"Relevant work experience ({years} year{plural})"},
    {"min_value":-np.inf,"points":5,"kind":"strength","message":"Some work experience"},
])

# Funds available for study, in lakhs of rupees
FINANCIAL_CATALOG = pd.DataFrame([
    {"bucket":"above-60","points":20,"kind":"strength","message":"Excellent financial capacity (Above 60 Lakhs)"},
    {"bucket":"40-60","points":17,"kind":"strength","message":"Strong financial capacity (40-60 Lakhs)"},
    {"bucket":"20-40","points":14,"kind":"strength","message":"Adequate financial capacity (20-40 Lakhs)"},
    {"bucket":"below-20","points":10,"kind":"weakness","message":"Limited financial capacity - consider education loans"},
])

# Evaluated top-down, first match wins
SUGGESTION_LADDER: List[Tuple[int, str]] = [
    (85, "Excellent! You have a very strong profile for Canada study visa. Your application is highly competitive."),
    (75, "Great! You have a strong profile for Canada study visa. Focus on the minor improvements mentioned to maximize your chances."),
    (65, "Good! You have a solid profile for Canada study visa. Consider addressing the areas for improvement to strengthen your application."),
    (55, "You have potential for Canada study visa. We strongly recommend working on the areas mentioned to improve your chances significantly."),
]
SUGGESTION_FALLBACK = "Your profile needs improvement before applying. Our counselors can provide personalized guidance to strengthen your application."


@dataclass(frozen=True)
class ApplicantProfile:
    """Scoring inputs of a submission. Every field is optional and kept as the raw string."""
    education: Optional[str] = None
    education_grade: Optional[str] = None
    grade_type: Optional[str] = None
    has_language_test: Optional[str] = None
    language_test: Optional[str] = None
    ielts_score: Optional[str] = None
    has_work_experience: Optional[str] = None
    work_experience_years: Optional[str] = None
    financial_capacity: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ApplicantProfile":
        """Build a profile from a request body (camelCase keys) or a stored row (snake_case keys)."""
        values = {}
        for f in fields(cls):
            wire = to_camel(f.name)
            raw = record.get(wire) if record.get(wire) is not None else record.get(f.name)
            values[f.name] = None if raw is None else str(raw)
        return cls(**values)


@dataclass(frozen=True)
class EligibilityResult:
    score: int
    is_eligible: bool
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    suggestion: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "isEligible": self.is_eligible,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "suggestion": self.suggestion,
        }


class CategoryScore(NamedTuple):
    points: int
    strengths: Tuple[str, ...] = ()
    weaknesses: Tuple[str, ...] = ()


@dataclass
class ValidationResult:
    ok: bool
    errors: List[str]


def parse_number(raw: Optional[str]) -> Optional[float]:
    # Plain decimals only; anything else counts as absent
    if raw is None or not DECIMAL_RE.match(str(raw)):
        return None
    value = float(raw)
    if not np.isfinite(value):
        return None
    return value

def parse_years(raw: Optional[str]) -> Optional[int]:
    value = parse_number(raw)
    return None if value is None else int(value)

def format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)

def _pick_tier(table: pd.DataFrame, value: float, **keys) -> Optional[pd.Series]:
    mask = table["min_value"] <= value
    for col, key in keys.items():
        mask &= table[col] == key
    rows = table[mask]
    if rows.empty:
        return None
    return rows.iloc[0]

def _lookup(table: pd.DataFrame, col: str, key: Optional[str]) -> Optional[pd.Series]:
    if key is None:
        return None
    rows = table[table[col] == key]
    if rows.empty:
        return None
    return rows.iloc[0]

def _tier_score(row: pd.Series, **fmt) -> CategoryScore:
    points = int(row["points"])
    if row["kind"] == "strength":
        return CategoryScore(points, (row["message"].format(**fmt),), ())
    if row["kind"] == "weakness":
        return CategoryScore(points, (), (row["message"].format(**fmt),))
    return CategoryScore(points)

def _combine(*parts: CategoryScore) -> CategoryScore:
    return CategoryScore(
        sum(p.points for p in parts),
        tuple(s for p in parts for s in p.strengths),
        tuple(w for p in parts for w in p.weaknesses),
    )


def _grade_scale(profile: ApplicantProfile) -> Optional[str]:
    if profile.education == "bachelor" and profile.education_grade and profile.grade_type:
        return "bachelor_cgpa" if profile.grade_type == "cgpa" else "bachelor_percentage"
    if profile.education == "12th" and profile.education_grade:
        return "12th"
    return None

def score_education(profile: ApplicantProfile) -> CategoryScore:
    row = _lookup(EDUCATION_CATALOG, "education", profile.education)
    if row is None:
        return CategoryScore(0)
    base = _tier_score(row)

    scale = _grade_scale(profile)
    grade = parse_number(profile.education_grade)
    if scale is None or grade is None:
        return base
    bonus = _tier_score(_pick_tier(GRADE_TIERS, grade, scale=scale), grade=format_number(grade))
    return _combine(base, bonus)

def score_language(profile: ApplicantProfile) -> CategoryScore:
    overall = parse_number(profile.ielts_score)
    if profile.has_language_test == "yes" and profile.language_test and overall is not None:
        tier = _pick_tier(LANGUAGE_TIERS, overall, test=profile.language_test)
        if tier is None:
            # Declared test outside the rubric: no points and no message
            return CategoryScore(0)
        return _tier_score(tier, score=format_number(overall))
    return CategoryScore(0, (), (NO_LANGUAGE_TEST,))

def score_work_experience(profile: ApplicantProfile) -> CategoryScore:
    years = parse_years(profile.work_experience_years)
    if profile.has_work_experience == "yes" and years is not None:
        tier = _pick_tier(WORK_TIERS, years)
        return _tier_score(tier, years=years, plural="s" if years > 1 else "")
    # No experience is not penalised
    return CategoryScore(WORK_FLOOR)

def score_financial(profile: ApplicantProfile) -> CategoryScore:
    row = _lookup(FINANCIAL_CATALOG, "bucket", profile.financial_capacity)
    if row is None:
        return CategoryScore(FINANCIAL_FLOOR)
    return _tier_score(row)

# Evaluation order fixes the order of strengths and weaknesses
CATEGORY_SCORERS = (score_education, score_language, score_work_experience, score_financial)


def generate_suggestion(score: int) -> str:
    for floor, message in SUGGESTION_LADDER:
        if score >= floor:
            return message
    return SUGGESTION_FALLBACK

def calculate_eligibility_score(profile: Union[ApplicantProfile, Mapping[str, Any], None]) -> EligibilityResult:
    if not isinstance(profile, ApplicantProfile):
        profile = ApplicantProfile.from_record(profile or {})

    total = _combine(*(scorer(profile) for scorer in CATEGORY_SCORERS))
    score = int(np.clip(total.points, SCORE_MIN, SCORE_MAX))
    return EligibilityResult(
        score=score,
        is_eligible=score >= ELIGIBILITY_CUTOFF,
        strengths=total.strengths,
        weaknesses=total.weaknesses,
        suggestion=generate_suggestion(score),
    )


def validate_contact(payload: dict) -> ValidationResult:
    errors = []

    name = str(payload.get("full_name") or "")
    if not NAME_RE.search(name):
        errors.append("Invalid fullName: must not be empty.")

    email = str(payload.get("email") or "").strip()
    if not EMAIL_RE.match(email):
        errors.append("Invalid email: must be a valid email address.")

    phone = str(payload.get("phone") or "").strip()
    if len(phone) < MIN_PHONE_LENGTH or not PHONE_RE.match(phone):
        errors.append(f"Invalid phone: at least {MIN_PHONE_LENGTH} characters of digits, spaces, '+', '-' or parentheses.")

    city = str(payload.get("city") or "")
    if not NAME_RE.search(city):
        errors.append("Invalid city: must not be empty.")

    return ValidationResult(ok = len(errors)==0, errors = errors)

import pytest

from studyvisa import eligibility
from studyvisa.eligibility import (
    NO_LANGUAGE_TEST,
    SUGGESTION_FALLBACK,
    SUGGESTION_LADDER,
    ApplicantProfile,
    calculate_eligibility_score,
    generate_suggestion,
    score_education,
    score_financial,
    score_language,
    score_work_experience,
    validate_contact,
)


def profile(**kwargs):
    return ApplicantProfile(**kwargs)


# --- Concrete scenarios ---

def test_phd_with_everything_maxed_scores_100():
    result = calculate_eligibility_score({
        "education": "phd",
        "hasLanguageTest": "yes",
        "languageTest": "ielts",
        "ieltsScore": "8.0",
        "hasWorkExperience": "yes",
        "workExperienceYears": "6",
        "financialCapacity": "above-60",
    })
    assert result.score == 100
    assert result.is_eligible is True
    assert result.suggestion == SUGGESTION_LADDER[0][1]
    assert result.strengths == (
        "Exceptional academic credentials (PhD)",
        "Excellent IELTS score (Overall 8)",
        "Extensive work experience (6 years)",
        "Excellent financial capacity (Above 60 Lakhs)",
    )
    assert result.weaknesses == ()


def test_tenth_only_gets_floors():
    result = calculate_eligibility_score({"education": "10th"})
    assert result.score == 30
    assert result.is_eligible is False
    assert result.suggestion == SUGGESTION_FALLBACK
    assert result.strengths == ()
    assert result.weaknesses == (
        "Minimum education qualification - consider completing 12th",
        NO_LANGUAGE_TEST,
    )


def test_bachelor_cgpa_toefl_profile():
    result = calculate_eligibility_score({
        "education": "bachelor",
        "educationGrade": "7.5",
        "gradeType": "cgpa",
        "hasLanguageTest": "yes",
        "languageTest": "toefl",
        "ieltsScore": "95",
        "hasWorkExperience": "yes",
        "workExperienceYears": "3",
        "financialCapacity": "20-40",
    })
    assert result.score == 79
    assert result.is_eligible is True
    assert result.suggestion == SUGGESTION_LADDER[1][1]
    assert result.strengths == (
        "Good Bachelor's CGPA (7.5)",
        "Strong TOEFL score (95)",
        "Good work experience (3 years)",
        "Adequate financial capacity (20-40 Lakhs)",
    )


def test_bachelor_best_case_stays_below_ceiling():
    result = calculate_eligibility_score({
        "education": "bachelor",
        "educationGrade": "9.0",
        "gradeType": "cgpa",
        "hasLanguageTest": "yes",
        "languageTest": "ielts",
        "ieltsScore": "8.0",
        "hasWorkExperience": "yes",
        "workExperienceYears": "10",
        "financialCapacity": "above-60",
    })
    assert result.score == 95
    assert result.score <= 100


def test_empty_profile():
    result = calculate_eligibility_score({})
    assert result.score == 15
    assert result.is_eligible is False
    assert result.weaknesses == (NO_LANGUAGE_TEST,)
    assert calculate_eligibility_score(None) == result
    assert calculate_eligibility_score(ApplicantProfile()) == result


# --- Education ---

@pytest.mark.parametrize("education,points", [
    ("phd", 35), ("master", 30), ("bachelor", 25), ("12th", 20), ("10th", 15),
    ("diploma", 0), (None, 0), ("PhD", 0),
])
def test_education_base_points(education, points):
    assert score_education(profile(education=education)).points == points


@pytest.mark.parametrize("grade,points,kind", [
    ("8.5", 30, "strength"), ("7.0", 28, "strength"), ("6.0", 26, "weakness"), ("5.9", 25, "weakness"),
])
def test_bachelor_cgpa_bonus(grade, points, kind):
    got = score_education(profile(education="bachelor", education_grade=grade, grade_type="cgpa"))
    assert got.points == points
    assert len(got.strengths if kind == "strength" else got.weaknesses) == 1


@pytest.mark.parametrize("grade,points,kind", [
    ("75", 30, "strength"), ("60", 28, "strength"), ("59.5", 25, "weakness"),
])
def test_bachelor_percentage_bonus(grade, points, kind):
    got = score_education(profile(education="bachelor", education_grade=grade, grade_type="percentage"))
    assert got.points == points
    assert len(got.strengths if kind == "strength" else got.weaknesses) == 1


def test_bachelor_low_cgpa_message():
    got = score_education(profile(education="bachelor", education_grade="5", grade_type="cgpa"))
    assert got.weaknesses == ("Low Bachelor's CGPA (5/10) - consider academic improvement",)


def test_bachelor_bonus_needs_grade_type():
    got = score_education(profile(education="bachelor", education_grade="9.0"))
    assert got == (25, (), ())


@pytest.mark.parametrize("grade,points", [("85", 25), ("70", 23), ("60", 21), ("40", 20)])
def test_twelfth_bonus_ignores_grade_type(grade, points):
    with_cgpa = score_education(profile(education="12th", education_grade=grade, grade_type="cgpa"))
    without = score_education(profile(education="12th", education_grade=grade))
    assert with_cgpa == without
    assert without.points == points


def test_unparsable_grade_gives_no_bonus_and_no_message():
    got = score_education(profile(education="bachelor", education_grade="A+", grade_type="cgpa"))
    assert got == (25, (), ())
    got = score_education(profile(education="12th", education_grade="nan"))
    assert got == (20, (), ())


@pytest.mark.parametrize("raw", ["1_00", "1e2", "0x64", "inf", "8.", ".5", "7,5", "8 0"])
def test_only_plain_decimals_parse(raw):
    got = score_language(profile(has_language_test="yes", language_test="toefl", ielts_score=raw))
    assert got == (0, (), (NO_LANGUAGE_TEST,))


@pytest.mark.parametrize("raw,expected", [("8", 8.0), (" 7.5 ", 7.5), ("+6.0", 6.0), ("-1", -1.0)])
def test_plain_decimals_parse(raw, expected):
    assert eligibility.parse_number(raw) == expected


def test_exponent_years_do_not_count():
    got = score_work_experience(profile(has_work_experience="yes", work_experience_years="1e3"))
    assert got == (5, (), ())


def test_phd_and_master_ignore_grade():
    got = score_education(profile(education="master", education_grade="4", grade_type="cgpa"))
    assert got.points == 30
    assert got.weaknesses == ()


# --- Language ---

@pytest.mark.parametrize("test,value,points", [
    ("ielts", "9", 30), ("ielts", "7.5", 30), ("ielts", "6.5", 25), ("ielts", "6.0", 20),
    ("ielts", "5.5", 15), ("ielts", "4", 10),
    ("toefl", "100", 30), ("toefl", "90", 25), ("toefl", "80", 20), ("toefl", "79", 15),
    ("pte", "70", 30), ("pte", "60", 25), ("pte", "50", 20), ("pte", "49", 15),
])
def test_language_tiers(test, value, points):
    got = score_language(profile(has_language_test="yes", language_test=test, ielts_score=value))
    assert got.points == points
    assert len(got.strengths) + len(got.weaknesses) == 1


def test_ielts_monotonic():
    bands = ["0", "5.0", "5.5", "6.0", "6.5", "7.0", "7.5", "8.0", "9.0"]
    points = [
        score_language(profile(has_language_test="yes", language_test="ielts", ielts_score=b)).points
        for b in bands
    ]
    assert points == sorted(points)


@pytest.mark.parametrize("fields", [
    {},
    {"has_language_test": "no", "language_test": "ielts", "ielts_score": "8"},
    {"has_language_test": "yes", "language_test": "ielts"},
    {"has_language_test": "yes", "ielts_score": "8"},
    {"has_language_test": "yes", "language_test": "ielts", "ielts_score": "eight"},
    {"has_language_test": "yes", "language_test": "ielts", "ielts_score": ""},
])
def test_missing_language_test(fields):
    assert score_language(profile(**fields)) == (0, (), (NO_LANGUAGE_TEST,))


def test_unknown_language_test_scores_zero_silently():
    got = score_language(profile(has_language_test="yes", language_test="duolingo", ielts_score="120"))
    assert got == (0, (), ())


# --- Work experience ---

@pytest.mark.parametrize("years,points,message", [
    ("10", 15, "Extensive work experience (10 years)"),
    ("3", 12, "Good work experience (3 years)"),
    ("2", 10, "Relevant work experience (2 years)"),
    ("1", 10, "Relevant work experience (1 year)"),
    ("0", 5, "Some work experience"),
    ("3.7", 12, "Good work experience (3 years)"),
])
def test_work_tiers(years, points, message):
    got = score_work_experience(profile(has_work_experience="yes", work_experience_years=years))
    assert got == (points, (message,), ())


@pytest.mark.parametrize("fields", [
    {},
    {"has_work_experience": "no", "work_experience_years": "8"},
    {"has_work_experience": "yes"},
    {"has_work_experience": "yes", "work_experience_years": "many"},
])
def test_work_floor(fields):
    assert score_work_experience(profile(**fields)) == (5, (), ())


# --- Financial ---

@pytest.mark.parametrize("bucket,points", [
    ("above-60", 20), ("40-60", 17), ("20-40", 14), ("below-20", 10),
])
def test_financial_buckets(bucket, points):
    assert score_financial(profile(financial_capacity=bucket)).points == points


def test_financial_below_twenty_is_weakness():
    got = score_financial(profile(financial_capacity="below-20"))
    assert got.weaknesses == ("Limited financial capacity - consider education loans",)


@pytest.mark.parametrize("bucket", [None, "", "lots"])
def test_financial_floor(bucket):
    assert score_financial(profile(financial_capacity=bucket)) == (10, (), ())


# --- Suggestions and invariants ---

@pytest.mark.parametrize("score,index", [
    (100, 0), (85, 0), (84, 1), (75, 1), (74, 2), (65, 2), (64, 3), (55, 3),
])
def test_suggestion_ladder(score, index):
    assert generate_suggestion(score) == SUGGESTION_LADDER[index][1]


@pytest.mark.parametrize("score", [54, 15, 0])
def test_suggestion_fallback(score):
    assert generate_suggestion(score) == SUGGESTION_FALLBACK


@pytest.mark.parametrize("education", ["phd", "master", "bachelor", "12th", "10th", None])
@pytest.mark.parametrize("test,value", [("ielts", "9"), ("toefl", "60"), ("pte", "abc"), (None, None)])
@pytest.mark.parametrize("bucket", ["above-60", "below-20", None])
def test_score_bounds_and_eligibility(education, test, value, bucket):
    result = calculate_eligibility_score(ApplicantProfile(
        education=education, education_grade="95", grade_type="percentage",
        has_language_test="yes", language_test=test, ielts_score=value,
        has_work_experience="yes", work_experience_years="20",
        financial_capacity=bucket,
    ))
    assert 0 <= result.score <= 100
    assert result.is_eligible == (result.score >= 60)


def test_eligibility_boundary():
    # 25 + 15 + 10 + 10 = 60
    result = calculate_eligibility_score({
        "education": "bachelor",
        "hasLanguageTest": "yes", "languageTest": "toefl", "ieltsScore": "70",
        "hasWorkExperience": "yes", "workExperienceYears": "1",
        "financialCapacity": "below-20",
    })
    assert result.score == 60
    assert result.is_eligible is True


def test_same_profile_same_result():
    record = {
        "education": "12th", "educationGrade": "72",
        "hasLanguageTest": "yes", "languageTest": "pte", "ieltsScore": "55",
        "financialCapacity": "40-60",
    }
    first = calculate_eligibility_score(record)
    second = calculate_eligibility_score(dict(record))
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_from_record_accepts_storage_rows_and_numbers():
    row = {"education": "master", "ielts_score": 7.5, "language_test": "ielts",
           "has_language_test": "yes", "status": "pending", "email": "a@b.co"}
    p = ApplicantProfile.from_record(row)
    assert p.ielts_score == "7.5"
    assert p.language_test == "ielts"
    assert calculate_eligibility_score(row).score == 30 + 30 + 5 + 10


def test_to_dict_shape():
    out = calculate_eligibility_score({}).to_dict()
    assert set(out) == {"score", "isEligible", "strengths", "weaknesses", "suggestion"}
    assert isinstance(out["strengths"], list)


# --- Contact validation ---

def test_validate_contact_ok():
    v = validate_contact({"full_name": "Asha Rao", "email": "asha@example.com",
                          "phone": "+91 98765 43210", "city": "Pune"})
    assert v.ok and v.errors == []


def test_validate_contact_collects_all_errors():
    v = validate_contact({"full_name": " ", "email": "nope", "phone": "12345", "city": ""})
    assert not v.ok
    assert len(v.errors) == 4


def test_score_is_capped_at_100(monkeypatch):
    boosted = eligibility.EDUCATION_CATALOG.copy()
    boosted.loc[boosted["education"] == "phd", "points"] = 50
    monkeypatch.setattr(eligibility, "EDUCATION_CATALOG", boosted)

    result = calculate_eligibility_score({
        "education": "phd",
        "hasLanguageTest": "yes", "languageTest": "pte", "ieltsScore": "85",
        "hasWorkExperience": "yes", "workExperienceYears": "7",
        "financialCapacity": "above-60",
    })
    # 50 + 30 + 15 + 20 = 115 before the cap
    assert result.score == 100
    assert result.is_eligible is True
    assert result.suggestion == SUGGESTION_LADDER[0][1]
    assert isinstance(result.score, int)


def test_score_is_floored_at_0(monkeypatch):
    penalised = eligibility.EDUCATION_CATALOG.copy()
    penalised.loc[penalised["education"] == "10th", "points"] = -40
    monkeypatch.setattr(eligibility, "EDUCATION_CATALOG", penalised)

    # -40 + 0 + 5 + 10
    assert calculate_eligibility_score({"education": "10th"}).score == 0

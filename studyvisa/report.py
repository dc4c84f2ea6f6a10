"""PDF eligibility report for a stored submission.

The report reads the persisted score only. Its verdict uses its own cutoff of
70, which is stricter than the engine's eligibility cutoff of 60.
"""

import io
from typing import Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

REPORT_ELIGIBLE_CUTOFF = 70

PDF_STYLES = {
    "colors": {
        "primary": HexColor("#dc2626"),
        "text_dark": HexColor("#1f2937"),
        "text_gray": HexColor("#374151"),
        "success": HexColor("#059669"),
    },
    "fonts": {"base": "Helvetica", "bold": "Helvetica-Bold"},
    "margin": 40,
}

def report_verdict(score: Optional[int]) -> bool:
    return score is not None and score >= REPORT_ELIGIBLE_CUTOFF

def report_filename(submission_id: str) -> str:
    return f"eligibility-report-{submission_id}.pdf"

def render_report_pdf(submission: dict) -> bytes:
    colors = PDF_STYLES["colors"]
    fonts = PDF_STYLES["fonts"]
    margin = PDF_STYLES["margin"]

    buf = io.BytesIO()
    width, height = A4
    pdf = canvas.Canvas(buf, pagesize=A4)
    pdf.setTitle("Canada Study Visa Eligibility Report")
    y = height - margin - 28

    def line(text, font, size, color, gap, center=False):
        nonlocal y
        pdf.setFont(font, size)
        pdf.setFillColor(color)
        if center:
            pdf.drawCentredString(width / 2, y, text)
        else:
            pdf.drawString(margin, y, text)
        y -= gap

    # Header
    line("Canada Study Visa Eligibility Report", fonts["bold"], 24, colors["primary"], 28, center=True)
    line("Assessment Summary", fonts["base"], 16, colors["text_gray"], 48, center=True)

    # Applicant
    line("Applicant Details", fonts["bold"], 16, colors["text_dark"], 26)
    for label, key in (("Name", "full_name"), ("Email", "email"), ("Phone", "phone"), ("City", "city")):
        line(f"{label}: {submission.get(key) or ''}", fonts["base"], 12, colors["text_gray"], 18)
    y -= 24

    # Eligibility
    score = submission.get("eligibility_score")
    eligible = report_verdict(score)
    line("Eligibility Results", fonts["bold"], 16, colors["text_dark"], 26)
    line(f"Eligibility Score: {'' if score is None else score}%", fonts["base"], 12, colors["text_gray"], 28)
    line("Eligible" if eligible else "Not Eligible", fonts["bold"], 20,
         colors["success"] if eligible else colors["primary"], 60)

    # Footer
    line("Generated by Canada Study Visa Eligibility System", fonts["base"], 10, colors["text_gray"], 14, center=True)
    line("© 2025 All rights reserved.", fonts["base"], 10, colors["text_gray"], 14, center=True)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()

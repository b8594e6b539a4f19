"""
certificate_generator.py

Renders the course completion certificate as a single landscape A4 PDF.

- Platypus SimpleDocTemplate with built-in Times fonts (no font registration)
- Unit breakdown table so the certificate doubles as a transcript
- Output may be a filesystem path or any binary file-like object
"""

from __future__ import annotations

from datetime import datetime
from typing import BinaryIO, List, Optional, Sequence, Tuple, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

FONT_NORMAL = "Times-Roman"
FONT_BOLD = "Times-Bold"

INSTITUTE_NAME = "Twoem Online Productions"


def generate_certificate(
    output: Union[str, BinaryIO],
    *,
    student_name: str,
    registration_number: str,
    course_name: str,
    final_grade: str,
    issued_at: datetime,
    unit_marks: Optional[Sequence[Tuple[str, Optional[int]]]] = None,
    average_unit_marks: Optional[float] = None,
    theory_marks: Optional[int] = None,
    practical_marks: Optional[int] = None,
) -> Union[str, BinaryIO]:

    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4),
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=16 * mm,
        bottomMargin=16 * mm,
        title=f"Certificate - {registration_number}",
        author=INSTITUTE_NAME,
    )

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="Center",
        parent=styles["Normal"],
        alignment=TA_CENTER,
        fontName=FONT_NORMAL,
        fontSize=12,
        leading=15,
    ))

    story: List = []

    # -----------------------------
    # Header
    # -----------------------------
    story.append(Paragraph(
        f"<b>{INSTITUTE_NAME}</b>",
        ParagraphStyle(
            "institute",
            parent=styles["Center"],
            fontName=FONT_BOLD,
            fontSize=22,
            leading=26,
        ),
    ))
    story.append(Spacer(1, 10))

    story.append(Paragraph(
        "<b>Certificate of Completion</b>",
        ParagraphStyle(
            "heading",
            parent=styles["Center"],
            fontName=FONT_BOLD,
            fontSize=18,
            leading=22,
        ),
    ))
    story.append(Spacer(1, 14))

    story.append(Paragraph("This is to certify that", styles["Center"]))
    story.append(Spacer(1, 6))
    story.append(Paragraph(
        f"<b>{escape(student_name)}</b>",
        ParagraphStyle("student", parent=styles["Center"], fontName=FONT_BOLD, fontSize=16, leading=20),
    ))
    story.append(Paragraph(f"Registration Number: {registration_number}", styles["Center"]))
    story.append(Spacer(1, 6))
    story.append(Paragraph(
        f"has successfully completed the course <b>{escape(course_name)}</b> with a final grade of <b>{final_grade}</b>.",
        styles["Center"],
    ))
    story.append(Spacer(1, 14))

    # -----------------------------
    # Unit breakdown
    # -----------------------------
    if unit_marks:
        table_data: List[List[str]] = [["Unit", "Marks"]]
        for unit_name, marks in unit_marks:
            table_data.append([unit_name, "" if marks is None else str(marks)])
        if average_unit_marks is not None:
            table_data.append(["Unit Average", f"{average_unit_marks:.2f}"])
        if theory_marks is not None:
            table_data.append(["Main Exam (Theory)", str(theory_marks)])
        if practical_marks is not None:
            table_data.append(["Main Exam (Practical)", str(practical_marks)])

        table = Table(table_data, colWidths=[90 * mm, 30 * mm], repeatRows=1)
        header_blue = colors.Color(0.46, 0.62, 0.80)
        style = TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), FONT_NORMAL),
            ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("ALIGN", (1, 0), (1, -1), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.8, colors.black),
            ("BACKGROUND", (0, 0), (-1, 0), header_blue),
        ])
        table.setStyle(style)
        story.append(table)
        story.append(Spacer(1, 14))

    story.append(Paragraph(f"Issued on {issued_at:%d %B %Y}", styles["Center"]))

    doc.build(story)
    return output

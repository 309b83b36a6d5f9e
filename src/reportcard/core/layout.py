"""Fixed layout of the exported report card.

Positions are millimetres measured from the top-left corner of an A4 page,
the coordinate system the PDF renderer converts from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from reportcard.core.form import SubjectEntry, indexed_valid_subjects
from reportcard.core.models import ReportResult

TITLE = "Student Report Card"
TITLE_FONT_SIZE = 18
BODY_FONT_SIZE = 12

LEFT_MARGIN = 20
SUBJECT_INDENT = 25
TITLE_Y = 20
BODY_START_Y = 40
LINE_STEP = 10
SUBJECT_LINE_STEP = 8
PAGE_BOTTOM = 280


@dataclass(frozen=True)
class TextInstruction:
    text: str
    x: float
    y: float
    font_size: int
    page: int = 0


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_average(value: float) -> str:
    return f"{value:.2f}"


def summary_lines(result: ReportResult) -> list[tuple[str, str]]:
    return [
        ("Student Name", result.name),
        ("Total Marks", format_number(result.total_marks)),
        ("Number of Subjects", str(result.num_subjects)),
        ("Average Marks", format_average(result.average)),
        ("Grade", result.grade),
    ]


def subject_lines(subjects: Iterable[SubjectEntry]) -> list[str]:
    return [
        f"{idx + 1}. {s.name}: {s.marks} / {s.max_marks}"
        for idx, s in indexed_valid_subjects(subjects)
    ]


def report_filename(name: str) -> str:
    stem = re.sub(r"\s+", "_", name)
    return f"{stem}_report_card.pdf"


def build_report_layout(result: ReportResult, subjects: Iterable[SubjectEntry]) -> list[TextInstruction]:
    instructions = [TextInstruction(TITLE, LEFT_MARGIN, TITLE_Y, TITLE_FONT_SIZE)]

    y = BODY_START_Y
    for label, value in summary_lines(result):
        instructions.append(TextInstruction(f"{label}: {value}", LEFT_MARGIN, y, BODY_FONT_SIZE))
        y += LINE_STEP

    instructions.append(TextInstruction("Subject-wise Marks:", LEFT_MARGIN, y, BODY_FONT_SIZE))
    y += LINE_STEP

    page = 0
    for line in subject_lines(subjects):
        if y > PAGE_BOTTOM:
            page += 1
            y = TITLE_Y
        instructions.append(TextInstruction(line, SUBJECT_INDENT, y, BODY_FONT_SIZE, page))
        y += SUBJECT_LINE_STEP

    return instructions

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Iterable

from reportcard.core.models import SubmissionPayload

SUBJECT_FIELDS = ("name", "marks", "max_marks")

VALIDATION_MESSAGE = (
    "Please enter student name and at least one valid subject with marks and maximum marks."
)

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class ValidationError(Exception):
    pass


@dataclass(frozen=True)
class SubjectEntry:
    name: str = ""
    marks: str = ""
    max_marks: str = ""


@dataclass(frozen=True)
class FormState:
    student_name: str = ""
    subjects: tuple[SubjectEntry, ...] = (SubjectEntry(),)


def parse_number(value: str) -> float | None:
    """Parse a typed mark the way a number input reports it.

    Blank strings, ``nan``/``inf`` spellings, overflowing exponents and digit
    separators are rejected.
    """
    text = value.strip()
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def is_valid_subject(subject: SubjectEntry) -> bool:
    return (
        bool(subject.name.strip())
        and parse_number(subject.marks) is not None
        and parse_number(subject.max_marks) is not None
    )


def valid_subjects(subjects: Iterable[SubjectEntry]) -> list[SubjectEntry]:
    return [s for s in subjects if is_valid_subject(s)]


def indexed_valid_subjects(subjects: Iterable[SubjectEntry]) -> list[tuple[int, SubjectEntry]]:
    # Indices refer to the full list so rows keep the number shown in the form.
    return [(idx, s) for idx, s in enumerate(subjects) if is_valid_subject(s)]


def build_payload(form: FormState) -> SubmissionPayload:
    valid = valid_subjects(form.subjects)
    if not form.student_name.strip() or not valid:
        raise ValidationError(VALIDATION_MESSAGE)

    total_marks = 0.0
    total_max_marks = 0.0
    for subject in valid:
        total_marks += parse_number(subject.marks)
        total_max_marks += parse_number(subject.max_marks)
    if not (math.isfinite(total_marks) and math.isfinite(total_max_marks)):
        raise ValidationError(VALIDATION_MESSAGE)

    return SubmissionPayload(
        name=form.student_name,
        total_marks=total_marks,
        total_max_marks=total_max_marks,
        num_subjects=len(valid),
    )


def set_student_name(form: FormState, value: str) -> FormState:
    return replace(form, student_name=value)


def update_subject(form: FormState, index: int, field: str, value: str) -> FormState:
    if field not in SUBJECT_FIELDS:
        raise ValueError(f"Unknown subject field: {field}")
    if not 0 <= index < len(form.subjects):
        raise IndexError(f"Subject index out of range: {index}")

    subjects = list(form.subjects)
    subjects[index] = replace(subjects[index], **{field: value})
    return replace(form, subjects=tuple(subjects))


def add_subject(form: FormState) -> FormState:
    return replace(form, subjects=form.subjects + (SubjectEntry(),))


def remove_subject(form: FormState, index: int) -> FormState:
    if len(form.subjects) <= 1:
        return form
    if not 0 <= index < len(form.subjects):
        raise IndexError(f"Subject index out of range: {index}")
    return replace(form, subjects=form.subjects[:index] + form.subjects[index + 1 :])

from pydantic import BaseModel, Field


class SubmissionPayload(BaseModel):
    name: str
    total_marks: float
    total_max_marks: float
    num_subjects: int = Field(ge=1)


class ReportResult(BaseModel):
    name: str
    total_marks: float
    num_subjects: int
    average: float
    grade: str

from reportcard.core.models import ReportResult
from reportcard.services.scorer_service import CollaboratorError


class FakeScorer:
    def __init__(self, grade: str = "A", error: str = "", on_call=None) -> None:
        self.grade = grade
        self.error = error
        self.on_call = on_call
        self.calls = []

    def generate_report_card(self, name, total_marks, total_max_marks, num_subjects):
        self.calls.append((name, total_marks, total_max_marks, num_subjects))
        if self.on_call is not None:
            self.on_call(len(self.calls))
        if self.error:
            raise CollaboratorError(self.error)
        average = (total_marks / total_max_marks) * 100 if total_max_marks > 0 else 0.0
        return ReportResult(
            name=name,
            total_marks=total_marks,
            num_subjects=num_subjects,
            average=average,
            grade=self.grade,
        )


class FakeRenderer:
    def __init__(self) -> None:
        self.instructions = None

    def render(self, instructions):
        self.instructions = list(instructions)
        return b"%PDF-fake"

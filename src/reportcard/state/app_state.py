from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from reportcard.config.logger import get_logger
from reportcard.core import form as form_ops
from reportcard.core.form import FormState, ValidationError
from reportcard.core.layout import build_report_layout, report_filename
from reportcard.core.models import ReportResult
from reportcard.services.pdf_service import PdfRenderer
from reportcard.services.scorer_service import CollaboratorError, Scorer


log = get_logger("state")


@dataclass(frozen=True)
class ExportedPdf:
    filename: str
    content: bytes


@dataclass(frozen=True)
class AppState:
    """Everything the report card page shows.

    Transitions never mutate the instance; each returns the next state.
    """

    form: FormState = field(default_factory=FormState)
    result: Optional[ReportResult] = None
    error: Optional[str] = None

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def set_student_name(self, value: str) -> "AppState":
        return replace(self, form=form_ops.set_student_name(self.form, value))

    def update_subject(self, index: int, field_name: str, value: str) -> "AppState":
        return replace(self, form=form_ops.update_subject(self.form, index, field_name, value))

    def add_subject(self) -> "AppState":
        return replace(self, form=form_ops.add_subject(self.form))

    def remove_subject(self, index: int) -> "AppState":
        return replace(self, form=form_ops.remove_subject(self.form, index))

    def score(self, scorer: Scorer) -> Tuple[Optional[ReportResult], Optional[str]]:
        """Validate this form, call the scorer and return ``(result, error)``.

        Exactly one of the two is set. The state itself is left alone so the
        outcome can be merged into whatever state is current once the call
        returns.
        """
        try:
            payload = form_ops.build_payload(self.form)
        except ValidationError as exc:
            log.info("Submission rejected: %s", exc)
            return None, str(exc)

        try:
            result = scorer.generate_report_card(
                payload.name,
                payload.total_marks,
                payload.total_max_marks,
                payload.num_subjects,
            )
        except CollaboratorError as exc:
            log.warning("Scorer failed: %s", exc)
            return None, str(exc)

        log.info("Report card generated with grade %s", result.grade)
        return result, None

    def with_outcome(self, result: Optional[ReportResult], error: Optional[str]) -> "AppState":
        return replace(self, result=result, error=error)

    def submit(self, scorer: Scorer) -> "AppState":
        return self.with_outcome(*self.score(scorer))

    def export_pdf(self, renderer: PdfRenderer) -> Optional[ExportedPdf]:
        if self.result is None:
            return None
        instructions = build_report_layout(self.result, self.form.subjects)
        filename = report_filename(self.result.name)
        log.info("Exporting %s", filename)
        return ExportedPdf(filename=filename, content=renderer.render(instructions))

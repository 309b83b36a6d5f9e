from typing import Callable, List, Optional
import flet as ft

from reportcard.config.settings import settings
from reportcard.core.layout import subject_lines, summary_lines
from reportcard.services.pdf_service import PdfRenderer, ReportlabPdfRenderer, save_pdf
from reportcard.services.scorer_service import CollaboratorError, HttpScorerService, Scorer
from reportcard.state.app_state import AppState


def build_report_card_view(
    page: ft.Page,
    scorer_factory: Callable[[], Scorer] = HttpScorerService.from_settings,
    renderer: Optional[PdfRenderer] = None,
    export_dir: str = settings.export_dir,
) -> ft.View:
    renderer = renderer or ReportlabPdfRenderer()
    state = AppState()

    student_name = ft.TextField(label="Student Name", width=520)
    subject_rows = ft.Column(spacing=6)
    result_panel = ft.Container(visible=False, padding=16, bgcolor=ft.Colors.BLUE_GREY_50, border_radius=12)
    status = ft.Text(color=ft.Colors.RED_400)

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def render_result() -> None:
        if state.result is None:
            result_panel.visible = False
            result_panel.content = None
            return

        details: List[ft.Control] = [
            ft.Text(f"{label}: {value}") for label, value in summary_lines(state.result)
        ]
        details.append(ft.Text("Subject-wise Marks:", weight=ft.FontWeight.BOLD))
        details.extend(ft.Text(line) for line in subject_lines(state.form.subjects))

        result_panel.content = ft.Column(
            controls=[
                ft.Text("Report Card", size=20, weight=ft.FontWeight.BOLD),
                *details,
                ft.Button("Download PDF", on_click=on_download),
            ]
        )
        result_panel.visible = True

    def render_error() -> None:
        if state.error:
            set_status(state.error)
        elif status.color == ft.Colors.RED_400:
            status.value = ""

    def render_subjects() -> None:
        subject_rows.controls.clear()
        only_one = len(state.form.subjects) == 1

        for idx, subject in enumerate(state.form.subjects):

            def make_change_handler(index: int, field_name: str):
                def handler(e):
                    apply(state.update_subject(index, field_name, e.control.value or ""), rows=False)

                return handler

            def make_remove_handler(index: int):
                def handler(_):
                    apply(state.remove_subject(index))

                return handler

            subject_rows.controls.append(
                ft.Row(
                    controls=[
                        ft.TextField(
                            hint_text=f"Subject {idx + 1}",
                            value=subject.name,
                            width=240,
                            on_change=make_change_handler(idx, "name"),
                        ),
                        ft.TextField(
                            hint_text="Marks",
                            value=subject.marks,
                            width=110,
                            keyboard_type=ft.KeyboardType.NUMBER,
                            on_change=make_change_handler(idx, "marks"),
                        ),
                        ft.TextField(
                            hint_text="Max",
                            value=subject.max_marks,
                            width=110,
                            keyboard_type=ft.KeyboardType.NUMBER,
                            on_change=make_change_handler(idx, "max_marks"),
                        ),
                        ft.IconButton(
                            icon=ft.Icons.CLOSE,
                            icon_color=ft.Colors.RED_400,
                            disabled=only_one,
                            tooltip="At least one subject required" if only_one else "Remove subject",
                            on_click=make_remove_handler(idx),
                        ),
                    ]
                )
            )

    def apply(next_state: AppState, rows: bool = True) -> None:
        nonlocal state
        state = next_state
        if rows:
            render_subjects()
        render_result()
        render_error()
        page.update()

    def on_name_change(e) -> None:
        apply(state.set_student_name(e.control.value or ""), rows=False)

    def on_generate(_) -> None:
        submitted = state
        try:
            scorer = scorer_factory()
            result, error = submitted.score(scorer)
        except CollaboratorError as exc:
            result, error = None, str(exc)
        except Exception as exc:
            result, error = None, f"Unexpected error: {exc}"
        # Edits made while the scorer was busy live on in the current state.
        apply(state.with_outcome(result, error), rows=False)

    def on_download(_) -> None:
        try:
            exported = state.export_pdf(renderer)
            if exported is None:
                return
            path = save_pdf(exported.filename, exported.content, export_dir)
            set_status(f"Saved {path}", is_error=False)
        except Exception as exc:
            set_status(f"Unexpected error: {exc}")
        page.update()

    student_name.on_change = on_name_change
    render_subjects()

    return ft.View(
        route="/",
        controls=[
            ft.AppBar(title=ft.Text("Student Report Card")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Text("Student Report Card", size=28, weight=ft.FontWeight.BOLD),
                        student_name,
                        ft.Text("Subjects, Marks & Max Marks", weight=ft.FontWeight.BOLD),
                        subject_rows,
                        ft.OutlinedButton("+ Add Subject", on_click=lambda _: apply(state.add_subject())),
                        ft.Button("Generate", on_click=on_generate),
                        status,
                        result_panel,
                    ],
                ),
            ),
        ],
    )

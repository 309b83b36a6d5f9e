"""Command-line report card generation."""

from pathlib import Path

import click

from reportcard.config.logger import get_logger, set_level
from reportcard.config.settings import settings
from reportcard.core.form import FormState, SubjectEntry
from reportcard.core.layout import subject_lines, summary_lines
from reportcard.services.github_service import GitHubServiceError, GitHubUploader
from reportcard.services.pdf_service import ReportlabPdfRenderer, save_pdf
from reportcard.services.scorer_service import CollaboratorError, HttpScorerService
from reportcard.state.app_state import AppState


log = get_logger("cli")


def _parse_subject(value: str) -> SubjectEntry:
    parts = value.rsplit(":", 2)
    if len(parts) != 3:
        raise click.BadParameter(f"expected NAME:MARKS:MAX, got {value!r}")
    name, marks, max_marks = parts
    return SubjectEntry(name=name, marks=marks, max_marks=max_marks)


def _subjects_callback(ctx, param, values):
    return tuple(_parse_subject(v) for v in values)


@click.group()
@click.option("--verbose", is_flag=True, help="Log debug output")
def cli(verbose: bool) -> None:
    """Generate student report cards."""
    if verbose:
        set_level("DEBUG")


@cli.command(name="generate")
@click.option("--name", "student_name", required=True, help="Student name")
@click.option(
    "--subject",
    "subjects",
    multiple=True,
    required=True,
    callback=_subjects_callback,
    help="Subject as NAME:MARKS:MAX (repeatable)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=settings.export_dir,
    show_default=True,
    help="Directory the PDF is written to",
)
@click.option("--github-repo", help="GitHub repository (e.g. username/repo) to upload the PDF to")
@click.option("--github-path", default="pdfs/", show_default=True, help="Path in repo to upload PDF")
@click.option("--github-token", help="GitHub token (or set GITHUB_TOKEN env var)")
def generate_command(
    student_name: str,
    subjects: tuple[SubjectEntry, ...],
    output_dir: Path,
    github_repo: str | None,
    github_path: str,
    github_token: str | None,
) -> None:
    """Submit marks to the scorer and write the report card PDF.

    Examples:

    \b
      reportcard generate --name "Asha Rao" --subject Math:90:100 --subject Science:72:100
    """
    uploader = None
    if github_repo:
        try:
            GitHubUploader.split_repo(github_repo)
            uploader = GitHubUploader.from_settings(github_token or "")
        except GitHubServiceError as exc:
            raise click.UsageError(str(exc)) from exc

    try:
        scorer = HttpScorerService.from_settings()
    except CollaboratorError as exc:
        raise click.ClickException(str(exc)) from exc

    state = AppState(form=FormState(student_name=student_name, subjects=subjects)).submit(scorer)
    if state.result is None:
        raise click.ClickException(state.error or "Report card generation failed")

    click.echo("Report card:")
    for label, value in summary_lines(state.result):
        click.echo(f"  {label}: {value}")
    for line in subject_lines(state.form.subjects):
        click.echo(f"    {line}")

    exported = state.export_pdf(ReportlabPdfRenderer())
    try:
        pdf_path = save_pdf(exported.filename, exported.content, str(output_dir))
    except (OSError, ValueError) as exc:
        log.error("Could not write %s: %s", exported.filename, exc)
        raise click.ClickException(f"Could not write PDF: {exc}") from exc
    click.echo(f"PDF generated: {pdf_path}")

    if uploader is not None:
        try:
            uploaded = uploader.upload(github_repo, github_path, pdf_path.name, exported.content)
        except GitHubServiceError as exc:
            log.error("Upload failed: %s", exc)
            raise click.ClickException(f"Upload failed: {exc}") from exc
        click.echo(f"PDF uploaded to GitHub repo: {github_repo}/{uploaded}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

import contextlib
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from reportcard.cli import cli
from reportcard.services.github_service import GitHubServiceError, GitHubUploader
from reportcard.services.scorer_service import HttpScorerService

from fakes import FakeRenderer, FakeScorer


class GenerateCommandTests(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def invoke(self, args, scorer=None, renderer=None, uploader=None):
        with contextlib.ExitStack() as stack:
            stack.enter_context(
                mock.patch.object(HttpScorerService, "from_settings", return_value=scorer or FakeScorer())
            )
            stack.enter_context(
                mock.patch("reportcard.cli.ReportlabPdfRenderer", return_value=renderer or FakeRenderer())
            )
            if uploader is not None:
                stack.enter_context(mock.patch.object(GitHubUploader, "from_settings", return_value=uploader))
            return self.runner.invoke(cli, args)

    def test_generates_pdf(self):
        scorer = FakeScorer(grade="B")
        result = self.invoke(
            [
                "generate",
                "--name", "Asha Rao",
                "--subject", "Math:80:100",
                "--subject", "Eng:70:100",
                "--output-dir", self.tmp.name,
            ],
            scorer=scorer,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(scorer.calls, [("Asha Rao", 150, 200, 2)])
        self.assertIn("Grade: B", result.output)
        self.assertIn("2. Eng: 70 / 100", result.output)
        self.assertTrue((Path(self.tmp.name) / "Asha_Rao_report_card.pdf").exists())

    def test_verbose_flag(self):
        result = self.invoke(
            ["--verbose", "generate", "--name", "Asha", "--subject", "Math:90:100", "--output-dir", self.tmp.name]
        )
        self.assertEqual(result.exit_code, 0, result.output)

    def test_subject_name_may_contain_colon(self):
        result = self.invoke(
            ["generate", "--name", "Asha", "--subject", "Maths: Paper 1:45:50", "--output-dir", self.tmp.name]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("1. Maths: Paper 1: 45 / 50", result.output)

    def test_slash_in_name_stays_inside_output_dir(self):
        out_dir = Path(self.tmp.name) / "exports"
        result = self.invoke(
            ["generate", "--name", "../Asha/Rao", "--subject", "Math:90:100", "--output-dir", str(out_dir)]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual([p.name for p in out_dir.iterdir()], [".._Asha_Rao_report_card.pdf"])
        self.assertEqual(sorted(p.name for p in Path(self.tmp.name).iterdir()), ["exports"])

    def test_unwritable_output_is_reported(self):
        with mock.patch("reportcard.cli.save_pdf", side_effect=PermissionError("read-only")):
            result = self.invoke(
                ["generate", "--name", "Asha", "--subject", "Math:90:100", "--output-dir", self.tmp.name]
            )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Could not write PDF: read-only", result.output)

    def test_validation_failure_skips_scorer(self):
        scorer = FakeScorer()
        result = self.invoke(
            ["generate", "--name", "  ", "--subject", "Math:90:100", "--output-dir", self.tmp.name],
            scorer=scorer,
        )
        self.assertNotEqual(result.exit_code, 0)
        self.assertEqual(scorer.calls, [])
        self.assertIn("valid subject", result.output)

    def test_malformed_subject_option(self):
        result = self.invoke(["generate", "--name", "Asha", "--subject", "Math-90"])
        self.assertEqual(result.exit_code, 2)

    def test_scorer_error_exits_non_zero(self):
        result = self.invoke(
            ["generate", "--name", "Asha", "--subject", "Math:90:100", "--output-dir", self.tmp.name],
            scorer=FakeScorer(error="replica unavailable"),
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("replica unavailable", result.output)

    def test_uploads_when_repo_given(self):
        uploader = mock.Mock()
        uploader.upload.return_value = "pdfs/Asha_report_card.pdf"
        result = self.invoke(
            [
                "generate",
                "--name", "Asha",
                "--subject", "Math:90:100",
                "--output-dir", self.tmp.name,
                "--github-repo", "asha/reports",
            ],
            uploader=uploader,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        uploader.upload.assert_called_once_with("asha/reports", "pdfs/", "Asha_report_card.pdf", b"%PDF-fake")
        self.assertIn("asha/reports/pdfs/Asha_report_card.pdf", result.output)

    def test_malformed_repo_is_usage_error(self):
        result = self.invoke(
            ["generate", "--name", "Asha", "--subject", "Math:90:100", "--github-repo", "reports"],
            uploader=mock.Mock(),
        )
        self.assertEqual(result.exit_code, 2)
        self.assertIn("owner/repo", result.output)

    def test_upload_failure_exits_non_zero(self):
        uploader = mock.Mock()
        uploader.upload.side_effect = GitHubServiceError("Bad credentials")
        result = self.invoke(
            [
                "generate",
                "--name", "Asha",
                "--subject", "Math:90:100",
                "--output-dir", self.tmp.name,
                "--github-repo", "asha/reports",
            ],
            uploader=uploader,
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Bad credentials", result.output)

    def test_missing_token_is_usage_error(self):
        with mock.patch("reportcard.services.github_service.settings") as fake_settings:
            fake_settings.github_token = ""
            fake_settings.github_api_url = "https://api.github.com"
            result = self.invoke(
                ["generate", "--name", "Asha", "--subject", "Math:90:100", "--github-repo", "asha/reports"]
            )
        self.assertEqual(result.exit_code, 2)
        self.assertIn("GitHub token", result.output)


if __name__ == "__main__":
    unittest.main()

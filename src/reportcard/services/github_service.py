import base64
from typing import Any, Dict
import requests
from requests import RequestException

from reportcard.config.logger import get_logger
from reportcard.config.settings import settings


log = get_logger("github")


class GitHubServiceError(Exception):
    pass


class GitHubUploader:
    COMMIT_MESSAGE = "Add student report card PDF"

    def __init__(self, token: str, api_url: str = "https://api.github.com", branch: str = "main") -> None:
        if not token:
            raise GitHubServiceError("GitHub token must be provided as --github-token or GITHUB_TOKEN env var")
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.branch = branch

    @classmethod
    def from_settings(cls, token: str = "") -> "GitHubUploader":
        return cls(token or settings.github_token, settings.github_api_url)

    @staticmethod
    def split_repo(repo: str) -> tuple[str, str]:
        owner, sep, name = repo.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise GitHubServiceError("repo must be in 'owner/repo' format")
        return owner, name

    def upload(self, repo: str, path: str, filename: str, content: bytes) -> str:
        owner, name = self.split_repo(repo)
        full_path = f"{path}{filename}"
        url = f"{self.api_url}/repos/{owner}/{name}/contents/{full_path}"

        payload: Dict[str, Any] = {
            "message": self.COMMIT_MESSAGE,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self.branch,
        }
        existing_sha = self._existing_sha(url)
        if existing_sha:
            payload["sha"] = existing_sha

        try:
            res = requests.put(url, headers=self._headers(), json=payload, timeout=30)
        except RequestException as exc:
            raise GitHubServiceError(f"GitHub unreachable: {exc}") from exc

        if res.status_code >= 400:
            raise GitHubServiceError(self._message(res))

        log.info("Uploaded %s to %s/%s", full_path, owner, name)
        return full_path

    def _existing_sha(self, url: str) -> str:
        try:
            res = requests.get(url, headers=self._headers(), params={"ref": self.branch}, timeout=30)
        except RequestException as exc:
            raise GitHubServiceError(f"GitHub unreachable: {exc}") from exc
        if res.status_code == 404:
            return ""
        if res.status_code >= 400:
            raise GitHubServiceError(self._message(res))
        return str(res.json().get("sha") or "")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }

    @staticmethod
    def _message(res: requests.Response) -> str:
        try:
            data = res.json()
        except ValueError:
            return f"GitHub upload failed with HTTP {res.status_code}"
        return str(data.get("message") or f"GitHub upload failed with HTTP {res.status_code}")

from dataclasses import dataclass
import os
from typing import Optional
from dotenv import load_dotenv


load_dotenv()


def _optional_float(value: str) -> Optional[float]:
    value = value.strip()
    if not value:
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    scorer_url: str = os.getenv("REPORTCARD_SCORER_URL", "http://127.0.0.1:8000")
    scorer_timeout: Optional[float] = _optional_float(os.getenv("REPORTCARD_SCORER_TIMEOUT", ""))

    export_dir: str = os.getenv("REPORTCARD_EXPORT_DIR", "exports")
    web_mode: bool = os.getenv("REPORTCARD_WEB", "0") == "1"
    port: int = int(os.getenv("PORT", "8550"))
    log_level: str = os.getenv("REPORTCARD_LOG_LEVEL", "INFO").upper()

    github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    github_token: str = os.getenv("GITHUB_TOKEN", "")


settings = Settings()

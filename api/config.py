"""
Configuration management for the EDGAR funding service.

Values come from environment variables (a `.env` file at the repo root is
loaded first) with defaults suitable for local runs.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

BASE_DIR: Path = Path(__file__).parent.parent
load_dotenv(BASE_DIR / ".env")


def _parse_ciks(raw: str) -> List[int]:
    """Parse a comma separated CIK list such as '320193, 789019'."""
    return [int(part) for part in raw.split(",") if part.strip()]


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Service configuration."""

    # Paths
    BASE_DIR: Path = BASE_DIR
    DB_PATH: str = os.getenv("FUNDING_DB_PATH", str(BASE_DIR / "data" / "funding.db"))
    CONFIG_DIR: str = str(BASE_DIR / "config")
    LOG_DIR: str = os.getenv("FUNDING_LOG_DIR", str(BASE_DIR / "logs"))

    # Server
    API_TITLE: str = "EDGAR Funding API"
    API_DESCRIPTION: str = "Company funding eligibility computed from SEC EDGAR net income data"
    API_VERSION: str = "1.0.0"
    HOST: str = os.getenv("FUNDING_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("FUNDING_PORT", "8000"))

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # SEC EDGAR
    EDGAR_BASE_URL: str = os.getenv(
        "EDGAR_BASE_URL", "https://data.sec.gov/api/xbrl/companyfacts"
    )
    # SEC asks for "Company Name admin@example.com"; blank falls back to a browser UA
    SEC_USER_AGENT: str = os.getenv("SEC_USER_AGENT", "")
    REQUEST_TIMEOUT: float = float(os.getenv("EDGAR_REQUEST_TIMEOUT", "10"))
    RETRY_ATTEMPTS: int = int(os.getenv("EDGAR_RETRY_ATTEMPTS", "3"))
    RETRY_BACKOFF_SECONDS: float = float(os.getenv("EDGAR_RETRY_BACKOFF_SECONDS", "2"))
    RETRY_TOTAL_SECONDS: float = float(os.getenv("EDGAR_RETRY_TOTAL_SECONDS", "60"))
    BREAKER_FAIL_MAX: int = int(os.getenv("EDGAR_BREAKER_FAIL_MAX", "5"))
    BREAKER_RESET_SECONDS: float = float(os.getenv("EDGAR_BREAKER_RESET_SECONDS", "30"))

    # Import job
    IMPORT_ON_STARTUP: bool = _flag("FUNDING_IMPORT_ON_STARTUP", "true")
    IMPORT_CIKS: List[int] = _parse_ciks(os.getenv("FUNDING_IMPORT_CIKS", ""))


settings = Settings()

"""
SEC EDGAR companyfacts provider.

Fetches the XBRL company facts document for a CIK from
https://data.sec.gov/api/xbrl/companyfacts/CIK##########.json and parses it
into a CompanyFacts model.

Missing companies, HTTP failures and timeouts are reported as None so the
import job can move on; anything unexpected (bad JSON, payload that doesn't
validate) propagates to the caller.
"""

import logging
from typing import Optional

from api.config import settings
from models import CompanyFacts
from utils.session import RequestSession

logger = logging.getLogger(__name__)


class EdgarProvider:
    """Provider for SEC EDGAR XBRL company facts."""

    def __init__(self, session: Optional[RequestSession] = None, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.EDGAR_BASE_URL).rstrip("/")
        self.session = session or RequestSession(
            user_agent=settings.SEC_USER_AGENT or None,
            timeout=settings.REQUEST_TIMEOUT,
            max_attempts=settings.RETRY_ATTEMPTS,
            backoff_seconds=settings.RETRY_BACKOFF_SECONDS,
            total_seconds=settings.RETRY_TOTAL_SECONDS,
            breaker_fail_max=settings.BREAKER_FAIL_MAX,
            breaker_reset_seconds=settings.BREAKER_RESET_SECONDS,
        )
        self.name = "SEC EDGAR"

    def company_facts_url(self, cik: int) -> str:
        return f"{self.base_url}/CIK{cik:010d}.json"

    def get_company_facts(self, cik: int) -> Optional[CompanyFacts]:
        """
        Fetch and parse company facts for a CIK.

        Returns:
            CompanyFacts, or None when EDGAR has no data for the CIK or the
            request failed after retries.
        """
        url = self.company_facts_url(cik)
        logger.debug(f"Fetching XBRL: {url}")

        res = self.session.get(url)

        if res is None:
            logger.error(f"CIK {cik}: no response from EDGAR (network error or timeout)")
            return None

        if res.status_code == 404:
            logger.warning(f"CIK {cik}: company facts not found; no XBRL data in EDGAR")
            return None

        if res.status_code != 200:
            logger.error(f"CIK {cik}: XBRL fetch failed (HTTP {res.status_code})")
            return None

        return CompanyFacts.model_validate(res.json())

    def close(self) -> None:
        self.session.close()

"""
Data access layer for the funding API.
Reads Company aggregates from the store and computes their funding on every call.
"""

import logging
from typing import List, Optional

from database import DatabaseManager
from models import FundingCalculation

logger = logging.getLogger(__name__)


class FundingDataProvider:
    """
    Read service over the company store.

    Nothing is cached: each call loads a fresh snapshot of the stored
    aggregates and computes funding in memory.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    @property
    def db_path(self) -> str:
        return self.db.db_path

    def get_company_funding(self, starts_with: Optional[str] = None) -> List[FundingCalculation]:
        """
        Funding for every stored company, ascending by company id.

        Args:
            starts_with: Optional case-sensitive name prefix

        Returns:
            One FundingCalculation per company; companies without complete
            eligibility data are included with both amounts at 0.
        """
        results = []
        for company in self.db.get_all_companies(name_starts_with=starts_with):
            if not company.is_eligible_for_funding():
                logger.debug(f"Company {company.name} is not eligible for funding")
            results.append(company.calculate_funding())

        return sorted(results, key=lambda r: r.company_id)

    def get_company_funding_by_id(self, company_id: int) -> Optional[FundingCalculation]:
        company = self.db.get_company(company_id)
        return company.calculate_funding() if company else None

    def get_database_stats(self) -> dict:
        return self.db.get_database_stats()

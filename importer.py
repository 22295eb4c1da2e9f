"""
EDGAR Funding Import Job

Imports companies and their yearly net income from the SEC EDGAR
companyfacts API into SQLite. Runs sequentially over the configured CIKs;
a CIK that is already stored is skipped without a network call, and a
failure on one CIK is recorded and never stops the batch.

Usage:
    python importer.py                              # CIKs from env/config
    python importer.py --ciks 320193 789019         # Specific CIKs
    python importer.py --db-path data/funding.db    # Custom database
"""

import argparse
import datetime
import json
import os
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from api.config import settings
from database import DatabaseManager
from models import Company
from sources.sec_edgar.extractor import extract_incomes
from sources.sec_edgar.provider import EdgarProvider
from utils import log

logger = log.setup_verbose_logging("funding.import", log_dir=settings.LOG_DIR)

DEFAULT_CIKS = [
    18926,      # Lumen Technologies
    892553,     # Chart Industries
    320193,     # Apple
    789019,     # Microsoft
    1318605,    # Tesla
    1018724,    # Amazon
    50863,      # Intel
    34088,      # Exxon Mobil
]


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class ImportOutcome(str, Enum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    NO_DATA = "no_data"
    FAILED = "failed"


class ImportResult(BaseModel):
    """What happened to one CIK."""
    cik: int
    outcome: ImportOutcome
    company_name: str = ""
    income_count: int = 0
    error: str = ""


class ImportSummary(BaseModel):
    """Completion record of one import run."""
    started_at: datetime.datetime
    finished_at: Optional[datetime.datetime] = None
    results: List[ImportResult] = Field(default_factory=list)

    def count(self, outcome: ImportOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def failed_ciks(self) -> List[int]:
        return [r.cik for r in self.results if r.outcome == ImportOutcome.FAILED]


# ---------------------------------------------------------------------------
# CIK configuration
# ---------------------------------------------------------------------------

def load_ciks(config_dir: str = settings.CONFIG_DIR) -> List[int]:
    """
    CIKs to import: FUNDING_IMPORT_CIKS, then config/companies.json,
    then the built-in default list.
    """
    if settings.IMPORT_CIKS:
        return list(settings.IMPORT_CIKS)

    config_path = os.path.join(config_dir, "companies.json")
    if not os.path.exists(config_path):
        log.warn(f"Config not found: {config_path}")
        return list(DEFAULT_CIKS)

    with open(config_path, "r") as f:
        config = json.load(f)

    ciks = [int(c["cik"]) for c in config.get("companies", [])]
    log.info(f"Loaded {len(ciks)} CIKs from config")
    return ciks


# ---------------------------------------------------------------------------
# Job
# ---------------------------------------------------------------------------

class FundingImporter:
    """
    Batch job that fills the store with Company aggregates from EDGAR.

    run() walks the CIKs in order and returns an ImportSummary with one
    ImportResult per CIK. Re-running is idempotent: stored CIKs are skipped.
    """

    def __init__(
        self,
        db: DatabaseManager,
        provider: Optional[EdgarProvider] = None,
        ciks: Optional[Iterable[int]] = None,
    ):
        self.db = db
        self.provider = provider or EdgarProvider()
        self.ciks = list(ciks) if ciks is not None else load_ciks()

    def run(self) -> ImportSummary:
        summary = ImportSummary(started_at=datetime.datetime.now())

        log.header("EDGAR IMPORT: Company Net Income")
        log.step(f"Importing {len(self.ciks)} companies")
        logger.info(f"Starting import of {len(self.ciks)} companies")

        for i, cik in enumerate(self.ciks, 1):
            result = self.import_company(cik)
            summary.results.append(result)
            self._report(i, len(self.ciks), result)

        summary.finished_at = datetime.datetime.now()

        log.summary_table("Import Summary", [
            ("CIKs processed", str(len(summary.results))),
            ("Imported", str(summary.count(ImportOutcome.IMPORTED))),
            ("Already stored", str(summary.count(ImportOutcome.SKIPPED))),
            ("No data", str(summary.count(ImportOutcome.NO_DATA))),
            ("Failed", str(summary.count(ImportOutcome.FAILED))),
            ("Elapsed", str(summary.finished_at - summary.started_at)),
        ])
        logger.info("Import completed")
        log.ok("EDGAR import complete")
        return summary

    def import_company(self, cik: int) -> ImportResult:
        """Import a single CIK. Never raises; failures become a FAILED result."""
        try:
            existing = self.db.get_company_by_cik(cik)
            if existing is not None:
                logger.info(f"Company {existing.name} (CIK: {cik}) already exists in database, skipping API call")
                return ImportResult(
                    cik=cik,
                    outcome=ImportOutcome.SKIPPED,
                    company_name=existing.name,
                    income_count=len(existing.incomes),
                )

            facts = self.provider.get_company_facts(cik)
            if facts is None:
                logger.warning(f"No data received for CIK {cik}")
                return ImportResult(cik=cik, outcome=ImportOutcome.NO_DATA)

            company = Company(cik=cik, name=facts.entity_name)
            for income in extract_incomes(facts):
                company.add_income(income)

            self.db.add_company(company)
            logger.info(f"Imported {company.name} (CIK: {cik}) with {len(company.incomes)} income records")
            return ImportResult(
                cik=cik,
                outcome=ImportOutcome.IMPORTED,
                company_name=company.name,
                income_count=len(company.incomes),
            )

        except Exception as e:
            logger.exception(f"Error importing company with CIK {cik}")
            return ImportResult(cik=cik, outcome=ImportOutcome.FAILED, error=str(e))

    def _report(self, idx: int, total: int, result: ImportResult) -> None:
        if result.outcome == ImportOutcome.IMPORTED:
            msg = (
                f"{log.C.NAME}{result.company_name}{log.C.RESET} | "
                f"{log.C.OK}{result.income_count} income records{log.C.RESET}"
            )
        elif result.outcome == ImportOutcome.SKIPPED:
            msg = f"{log.C.DIM}already stored ({result.company_name}){log.C.RESET}"
        elif result.outcome == ImportOutcome.NO_DATA:
            msg = f"{log.C.WARN}no data from EDGAR{log.C.RESET}"
        else:
            msg = f"{log.C.ERR}failed: {result.error}{log.C.RESET}"
        log.progress(idx, total, result.cik, msg)


def main():
    parser = argparse.ArgumentParser(description="Import company net income from SEC EDGAR")
    parser.add_argument("--ciks", nargs="+", type=int, help="Specific CIKs (e.g., 320193 789019)")
    parser.add_argument("--db-path", default=None, help="SQLite database path")
    args = parser.parse_args()

    db = DatabaseManager(db_path=args.db_path)
    try:
        FundingImporter(db, ciks=args.ciks).run()
    finally:
        db.close()


if __name__ == "__main__":
    main()

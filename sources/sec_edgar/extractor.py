"""
Net income extraction from an EDGAR companyfacts payload.

Only annual reports (form 10-K) tagged with a calendar-year frame such as
CY2022 are used. EDGAR repeats the same fiscal year across several filings
(restatements, comparative columns), so each year is reduced to the single
fact with the largest absolute value; the sign of that fact is kept.
"""

import logging
import re
from typing import Optional

from pydantic import ValidationError

from models import CompanyFacts, Income, Money, ReportedFact

logger = logging.getLogger(__name__)

ANNUAL_FORM = "10-K"
CALENDAR_FRAME = re.compile(r"CY(\d{4})", re.ASCII)


def parse_frame_year(frame: Optional[str]) -> Optional[int]:
    """
    Year of a calendar-year frame ('CY2022' -> 2022).

    Returns None for frames that are not six characters starting with 'CY'
    (quarterly 'CY2022Q1', instant 'CY2022Q4I', missing frames).

    Raises:
        ValueError: six-character CY frame whose suffix is not a four digit year
    """
    if not frame or len(frame) != 6 or not frame.startswith("CY"):
        return None
    match = CALENDAR_FRAME.fullmatch(frame)
    if match is None:
        raise ValueError(f"Malformed frame {frame!r}")
    return int(match.group(1))


def select_annual_facts(facts: list[ReportedFact], cik: int = 0) -> dict[int, ReportedFact]:
    """
    Pick one 10-K fact per calendar year: the largest |val|, first one on ties.
    Facts with a malformed CY frame are skipped and logged against the CIK.
    """
    by_year: dict[int, ReportedFact] = {}
    for fact in facts:
        if fact.form != ANNUAL_FORM:
            continue
        try:
            year = parse_frame_year(fact.frame)
        except ValueError as e:
            logger.warning(f"CIK {cik}: skipping fact {fact.accn}: {e}")
            continue
        if year is None:
            continue
        current = by_year.get(year)
        if current is None or abs(fact.val) > abs(current.val):
            by_year[year] = fact
    return by_year


def extract_incomes(company_facts: CompanyFacts, company_id: int = 0) -> list[Income]:
    """
    Turn a companyfacts payload into one USD Income per calendar year.

    Returns an empty list when the payload carries no NetIncomeLoss facts.
    Facts whose year falls outside the range Income accepts are skipped.
    """
    facts = company_facts.net_income_facts()
    if not facts:
        return []

    incomes = []
    for year, fact in sorted(select_annual_facts(facts, company_facts.cik).items()):
        try:
            incomes.append(Income(company_id=company_id, year=year, amount=Money.from_amount(fact.val)))
        except ValidationError as e:
            logger.warning(f"CIK {company_facts.cik}: skipping {fact.frame}: {e.errors()[0]['msg']}")
    return incomes

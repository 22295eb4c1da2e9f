"""
Pydantic data models for the EDGAR funding eligibility system.

These models enforce type safety and validation for every entity flowing
through the pipeline: the currency-aware Money value, the per-year Income
fact, the Company aggregate that owns the funding rules, and the subset of
the SEC "companyfacts" payload the importer reads.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


# ---------------------------------------------------------------------------
# Funding rules
# ---------------------------------------------------------------------------

HIGH_INCOME_RATE = Decimal("0.1233")   # 12.33%
LOW_INCOME_RATE = Decimal("0.2151")    # 21.51%
VOWEL_BONUS = Decimal("0.15")          # 15%
DECLINE_PENALTY = Decimal("0.25")      # 25%

REQUIRED_YEARS = (2018, 2019, 2020, 2021, 2022)
VOWELS = frozenset("AEIOU")

MIN_YEAR = 1900
MAX_YEAR = 2100

CENTS = Decimal("0.01")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    JPY = "JPY"
    # ISO 4217 "no currency"; only carried by Money.zero()
    XXX = "XXX"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class CurrencyMismatchError(ValueError):
    """Raised when two non-zero Money values of different currencies are combined."""
    pass


class DivideByZeroError(ZeroDivisionError):
    """Raised when Money is divided by zero."""
    pass


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class Money(BaseModel):
    """
    Currency-tagged decimal amount.

    Money.zero() is a currency-agnostic sentinel: every operator checks for it
    before checking currencies, so it can be added to, subtracted from or
    compared with an amount in any currency. Two non-zero amounts in different
    currencies can't be compared or combined.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: Currency = Currency.USD

    @classmethod
    def zero(cls) -> "Money":
        return _ZERO

    @classmethod
    def from_amount(cls, amount: Number) -> "Money":
        """Build a USD amount."""
        return cls(amount=_to_decimal(amount), currency=Currency.USD)

    def is_zero(self) -> bool:
        """True only for the distinguished zero, not for a USD 0.00."""
        return self.currency is Currency.XXX and self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.value}"

    def _operands(self, other: "Money", action: str) -> tuple[Decimal, Decimal]:
        if other.is_zero():
            return self.amount, Decimal(0)
        if self.is_zero():
            return Decimal(0), other.amount
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot {action} Money with different currencies "
                f"({self.currency.value} vs {other.currency.value})"
            )
        return self.amount, other.amount

    # -- ordering ------------------------------------------------------------

    def __lt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        left, right = self._operands(other, "compare")
        return left < right

    def __le__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        left, right = self._operands(other, "compare")
        return left <= right

    def __gt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        left, right = self._operands(other, "compare")
        return left > right

    def __ge__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        left, right = self._operands(other, "compare")
        return left >= right

    # -- arithmetic ----------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        if other.is_zero():
            return self
        if self.is_zero():
            return other
        left, right = self._operands(other, "add")
        return Money(amount=left + right, currency=self.currency)

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        if other.is_zero():
            return self
        if self.is_zero():
            return Money(amount=-other.amount, currency=other.currency)
        left, right = self._operands(other, "subtract")
        return Money(amount=left - right, currency=self.currency)

    def __mul__(self, multiplier: Number):
        if isinstance(multiplier, Money):
            return NotImplemented
        factor = _to_decimal(multiplier)
        if self.is_zero() or factor == 0:
            return _ZERO
        return Money(amount=self.amount * factor, currency=self.currency)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Number):
        if isinstance(divisor, Money):
            return NotImplemented
        value = _to_decimal(divisor)
        if value == 0:
            raise DivideByZeroError("Cannot divide Money by zero")
        if self.is_zero():
            return _ZERO
        return Money(amount=self.amount / value, currency=self.currency)


_ZERO = Money(amount=Decimal(0), currency=Currency.XXX)

HIGH_INCOME_THRESHOLD = Money.from_amount(10_000_000_000)


# ---------------------------------------------------------------------------
# Core Entities
# ---------------------------------------------------------------------------

class Income(BaseModel):
    """
    Net income reported by one company for one fiscal year.

    Only the amount can change after construction; the owning Company keys
    its incomes by year, so year and company_id are frozen.
    """
    model_config = ConfigDict(validate_assignment=True)

    company_id: int = Field(default=0, frozen=True)
    year: int = Field(frozen=True)
    amount: Money

    @field_validator("year")
    @classmethod
    def _check_year(cls, year: int) -> int:
        if year < MIN_YEAR or year > MAX_YEAR:
            raise ValueError(f"Invalid year {year}: expected {MIN_YEAR}-{MAX_YEAR}")
        return year

    def update_amount(self, amount: Money) -> None:
        self.amount = amount


class FundingCalculation(BaseModel):
    """Funding figures derived from a Company; recomputed on every read."""
    model_config = ConfigDict(frozen=True)

    company_id: int
    company_name: str
    standard_fundable_amount: Decimal
    special_fundable_amount: Decimal


class Company(BaseModel):
    """
    Company aggregate root.

    Owns at most one Income per year and implements the funding rules:
    eligibility, the standard amount (rate picked by the highest required-year
    income) and the special amount (vowel bonus and decline penalty, both
    taken from the standard amount).
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = 0
    cik: int = Field(gt=0)
    name: str

    _incomes: dict[int, Income] = PrivateAttr(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        if not name or not name.strip():
            raise ValueError("Name cannot be empty")
        return name

    # -- aggregate maintenance -----------------------------------------------

    @property
    def incomes(self) -> list[Income]:
        return [self._incomes[year] for year in sorted(self._incomes)]

    def get_income(self, year: int) -> Optional[Income]:
        return self._incomes.get(year)

    def add_income(self, income: Income) -> None:
        """Add an income, replacing any income already held for that year."""
        self._incomes[income.year] = income

    def clear_incomes(self) -> None:
        self._incomes.clear()

    def update_name(self, name: str) -> None:
        self.name = name

    def assign_id(self, company_id: int) -> None:
        """Set the persisted id and rebind every owned income to it."""
        self.id = company_id
        self._incomes = {
            year: income.model_copy(update={"company_id": company_id})
            for year, income in self._incomes.items()
        }

    # -- funding rules -------------------------------------------------------

    def is_eligible_for_funding(self) -> bool:
        amounts = {year: income.amount for year, income in self._incomes.items()}

        if not all(year in amounts for year in REQUIRED_YEARS):
            return False

        return amounts[2021] > Money.zero() and amounts[2022] > Money.zero()

    def calculate_standard_fundable_amount(self) -> Money:
        if not self.is_eligible_for_funding():
            return Money.zero()

        highest = max(self._incomes[year].amount for year in REQUIRED_YEARS)

        if highest >= HIGH_INCOME_THRESHOLD:
            return highest * HIGH_INCOME_RATE
        return highest * LOW_INCOME_RATE

    def calculate_special_fundable_amount(self, standard: Money) -> Money:
        special = standard

        if self.starts_with_vowel():
            special = special + standard * VOWEL_BONUS

        if self.has_income_decline():
            special = special - standard * DECLINE_PENALTY

        return special

    def calculate_funding(self) -> FundingCalculation:
        standard = self.calculate_standard_fundable_amount()
        special = self.calculate_special_fundable_amount(standard)

        return FundingCalculation(
            company_id=self.id,
            company_name=self.name,
            standard_fundable_amount=standard.amount.quantize(CENTS, rounding=ROUND_HALF_EVEN),
            special_fundable_amount=special.amount.quantize(CENTS, rounding=ROUND_HALF_EVEN),
        )

    def starts_with_vowel(self) -> bool:
        return bool(self.name) and self.name[0].upper() in VOWELS

    def has_income_decline(self) -> bool:
        """True when 2022 income is strictly below 2021 income."""
        income_2021 = self._incomes.get(2021)
        income_2022 = self._incomes.get(2022)
        if income_2021 is None or income_2022 is None:
            return False
        return income_2022.amount < income_2021.amount


# ---------------------------------------------------------------------------
# SEC EDGAR companyfacts payload
# ---------------------------------------------------------------------------

class ReportedFact(BaseModel):
    """One reported value of an XBRL concept, as returned by companyfacts."""
    model_config = ConfigDict(populate_by_name=True)

    val: Decimal
    form: str = ""
    frame: Optional[str] = None
    fy: Optional[int] = None
    fp: Optional[str] = None
    end: Optional[str] = None
    filed: Optional[str] = None
    accn: Optional[str] = None


class ConceptUnits(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    usd: list[ReportedFact] = Field(default_factory=list, alias="USD")


class Concept(BaseModel):
    label: Optional[str] = None
    description: Optional[str] = None
    units: Optional[ConceptUnits] = None


class UsGaapFacts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    net_income_loss: Optional[Concept] = Field(default=None, alias="NetIncomeLoss")


class FactsSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    us_gaap: Optional[UsGaapFacts] = Field(default=None, alias="us-gaap")


class CompanyFacts(BaseModel):
    """
    Top level of https://data.sec.gov/api/xbrl/companyfacts/CIK##########.json.
    Only the NetIncomeLoss concept in USD is modelled; everything else is ignored.
    """
    model_config = ConfigDict(populate_by_name=True)

    cik: int
    entity_name: str = Field(alias="entityName")
    facts: Optional[FactsSection] = None

    def net_income_facts(self) -> list[ReportedFact]:
        """USD NetIncomeLoss facts, or an empty list when any level is missing."""
        if self.facts is None or self.facts.us_gaap is None:
            return []
        concept = self.facts.us_gaap.net_income_loss
        if concept is None or concept.units is None:
            return []
        return concept.units.usd

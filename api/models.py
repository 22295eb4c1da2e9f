"""
Pydantic models for API responses.
Auto-generates OpenAPI documentation.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from models import FundingCalculation


class CompanyFundingResponse(BaseModel):
    """
    Funding figures for one company.

    Routes render it with model_dump(by_alias=True) into a DecimalJSONResponse
    so both amounts go out as JSON numbers with their two decimals.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    standard_fundable_amount: Decimal
    special_fundable_amount: Decimal

    @classmethod
    def from_calculation(cls, funding: FundingCalculation) -> "CompanyFundingResponse":
        return cls(
            id=funding.company_id,
            name=funding.company_name,
            standard_fundable_amount=funding.standard_fundable_amount,
            special_fundable_amount=funding.special_fundable_amount,
        )


class DatabaseStats(BaseModel):
    companies: int
    incomes: int


class HealthResponse(BaseModel):
    """API health check response."""
    service: str
    version: str
    status: str
    database_path: str
    database_stats: DatabaseStats


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str

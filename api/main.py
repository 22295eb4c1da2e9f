"""
FastAPI application for the EDGAR funding API.

Exposes the funding figures of the imported companies via HTTP endpoints
with auto-generated OpenAPI documentation at /docs.
"""

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from typing import List, Optional
import logging

from .config import settings
from .data_access import FundingDataProvider
from .models import CompanyFundingResponse, ErrorResponse, HealthResponse
from .responses import DecimalJSONResponse
from database import DatabaseManager
from importer import FundingImporter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_data_provider(request: Request) -> FundingDataProvider:
    """Read service bound to the database opened at startup."""
    return FundingDataProvider(request.app.state.db)


# ----------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------

@app.on_event("startup")
def startup_event():
    """Open the database and, if configured, run the EDGAR import."""
    app.state.db = DatabaseManager(db_path=settings.DB_PATH, check_same_thread=False)
    logger.info(f"Connected to database: {app.state.db.db_path}")

    if not settings.IMPORT_ON_STARTUP:
        logger.info("Startup import disabled")
        return

    try:
        summary = FundingImporter(app.state.db).run()
        if summary.failed_ciks:
            logger.warning(f"Import finished with failures for CIKs: {summary.failed_ciks}")
    except Exception as e:
        logger.error(f"Error during startup import: {e}")


@app.on_event("shutdown")
def shutdown_event():
    """Close database connection on shutdown."""
    app.state.db.close()
    logger.info("Database connection closed")


# ----------------------------------------------------------------
# Health & Info
# ----------------------------------------------------------------

@app.get("/", response_model=HealthResponse, tags=["Health"])
def root(data: FundingDataProvider = Depends(get_data_provider)):
    """
    API health check and information.

    Returns service status and database statistics.
    """
    try:
        return {
            "service": settings.API_TITLE,
            "version": settings.API_VERSION,
            "status": "healthy",
            "database_path": data.db_path,
            "database_stats": data.get_database_stats()
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# ----------------------------------------------------------------
# Company Funding Endpoints
# ----------------------------------------------------------------

@app.get(
    "/companies",
    response_model=List[CompanyFundingResponse],
    responses={500: {"model": ErrorResponse}},
    tags=["Companies"],
)
def get_companies(
    starts_with: Optional[str] = Query(
        None,
        alias="startsWith",
        description="Only companies whose name starts with this prefix (case-sensitive)"
    ),
    data: FundingDataProvider = Depends(get_data_provider),
):
    """
    Get all companies with their standard and special fundable amounts.

    Companies without income data for every year 2018-2022, or without
    positive income in 2021 and 2022, are listed with both amounts at 0.

    Args:
        starts_with: Optional name prefix filter

    Returns:
        Companies sorted by id
    """
    try:
        results = data.get_company_funding(starts_with)
        return DecimalJSONResponse([
            CompanyFundingResponse.from_calculation(r).model_dump(by_alias=True) for r in results
        ])
    except Exception as e:
        logger.error(f"Error computing company funding: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get(
    "/companies/{company_id}",
    response_model=CompanyFundingResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Companies"],
)
def get_company(company_id: int, data: FundingDataProvider = Depends(get_data_provider)):
    """
    Get the fundable amounts of a single company.

    Args:
        company_id: Company id as returned by /companies
    """
    try:
        funding = data.get_company_funding_by_id(company_id)
        if funding is None:
            raise HTTPException(
                status_code=404,
                detail=f"Company {company_id} not found"
            )
        return DecimalJSONResponse(CompanyFundingResponse.from_calculation(funding).model_dump(by_alias=True))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error computing funding for company {company_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="info"
    )

"""
FastAPI Main Application

Caseflow case-management REST API.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from src.caseflow import __version__
from src.caseflow.api.dependencies import get_db
from src.caseflow.api.schemas import HealthCheck
from src.caseflow.api.routers import applicants, auth
from src.caseflow.db.session import close_connections
from src.caseflow.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("api_starting", environment=settings.environment, version=__version__)
    yield
    close_connections()


app = FastAPI(
    title="Caseflow API",
    description="Case management for housing assistance: duplicate review and record merging",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(applicants.router)


@app.get("/health", response_model=HealthCheck, tags=["health"])
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        Health status with database connectivity check
    """
    try:
        db.execute(text("SELECT 1"))
        database_status = "connected"
    except SQLAlchemyError as e:
        database_status = f"error: {type(e).__name__}"

    return HealthCheck(
        status="healthy" if database_status == "connected" else "degraded",
        version=__version__,
        database=database_status,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/", tags=["root"])
def root():
    """
    Root endpoint.

    Returns:
        API information
    """
    return {
        "name": "Caseflow API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "features": [
            "Duplicate applicant detection",
            "Transactional record merge",
            "Applicant search",
        ]
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.caseflow.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )

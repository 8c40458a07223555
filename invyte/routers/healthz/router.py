import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "0.1.0"


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = API_VERSION


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    response: Response,
    session: AsyncSession = Depends(get_async_session),
) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running and the database answers.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthCheckResponse(status="unhealthy", database="unreachable")
    return HealthCheckResponse(status="healthy", database="ok")

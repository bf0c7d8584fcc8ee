"""
Shared API dependencies and error mapping.
"""

import logging

from fastapi import HTTPException, Query, Request

from indicator_engine.core.config import settings
from indicator_engine.schemas.market import normalize_symbol
from indicator_engine.services.base import (
    IndexOutOfRangeError,
    NotFoundError,
    ServiceError,
    UnknownIndicatorError,
)
from indicator_engine.services.charts import ChartSession, ChartSessionRegistry

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: 404,
    IndexOutOfRangeError: 404,
    UnknownIndicatorError: 400,
}


def http_error(e: ServiceError) -> HTTPException:
    """Translate a propagated ServiceError into an HTTP response."""
    for error_type, status in ERROR_STATUS.items():
        if isinstance(e, error_type):
            return HTTPException(status_code=status, detail=e.message)
    logger.error(f"Unmapped service error: {e}")
    return HTTPException(status_code=500, detail=e.message)


def get_registry(request: Request) -> ChartSessionRegistry:
    return request.app.state.registry


async def get_chart_session(
    request: Request,
    symbol: str,
    user_id: str = Query(default=settings.default_user_id, min_length=1),
) -> ChartSession:
    """Chart session for the path symbol and the requesting user."""
    registry = get_registry(request)
    try:
        return await registry.get_or_create(user_id, normalize_symbol(symbol))
    except ServiceError as e:
        raise http_error(e)

"""
API v1 router.
Aggregates all v1 endpoints.

Rate limiters are attached by main.create_app(), which owns their state.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.v1 import auth, transactions
from backend.app.api.v1.auth import get_optional_user
from backend.app.config import get_settings
from backend.app.db.session import get_session_generator
from backend.app.logging_config import get_logger
from backend.app.schemas.auth import AuthUserResponse
from backend.app.utils.datetime_utils import utcnow

logger = get_logger(__name__)

auth_router = auth.router
tx_router = transactions.tx_router

router = APIRouter()


@router.get("/health")
async def health_check(
    session: AsyncSession = Depends(get_session_generator),
    current_user: Optional[AuthUserResponse] = Depends(get_optional_user),
    ):
    """
    Health check endpoint.
    Returns service status and checks the database (503 when unreachable).
    """
    settings = get_settings()
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error("Health check: database unreachable", error=str(e))
        database = "unavailable"

    data = {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "version": settings.VERSION,
        "timestamp": utcnow().isoformat(),
        "authenticated": current_user is not None,
        }
    if database != "ok":
        return JSONResponse(status_code=503, content={"success": False, "error": "Database unavailable", "data": data})
    return {"success": True, "data": data}

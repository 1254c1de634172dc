"""HTTP triggers for scheduled functions.

The scheduler calls these endpoints with an empty body. Responses are plain
JSON objects: ``{"message"}`` when there was nothing to do,
``{"success": true, "message"}`` when work was done, and ``{"error"}`` with
status 500 when the backend failed.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..db import AsyncSession, get_db
from ..dependencies import verify_api_key
from ..services.weekly_snapshot import run_weekly_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/functions",
    tags=["functions"],
    dependencies=[Depends(verify_api_key)],
)


@router.post("/perform-weekly-snapshot")
async def perform_weekly_snapshot(session: AsyncSession = Depends(get_db)) -> JSONResponse:
    """Snapshot artist metrics for the active season's current week."""
    try:
        outcome = await run_weekly_snapshot(session)
    except Exception as exc:
        await session.rollback()
        logger.exception("Weekly snapshot failed", extra={"error": str(exc)})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )
    return JSONResponse(content=outcome.to_payload())

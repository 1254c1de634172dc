"""Admin endpoint for running worker jobs on demand."""

from __future__ import annotations

import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from ...celery_client import get_celery_app
from ...dependencies import verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(verify_api_key)])

WORKER_QUEUE = "fantamusike-worker"


class TaskRegistryEntry(BaseModel):
    name: str
    queue: str
    description: str


class TriggerRequest(BaseModel):
    # Registered tasks take no arguments; unknown fields are rejected with 422
    model_config = ConfigDict(extra="forbid")

    task_name: str


class TriggerResponse(BaseModel):
    status: str
    task_name: str
    task_id: str


# Only tasks listed here can be dispatched from the admin panel.
TASK_REGISTRY: dict[str, TaskRegistryEntry] = {
    entry.name: entry
    for entry in [
        TaskRegistryEntry(
            name="trigger_weekly_snapshot",
            queue=WORKER_QUEUE,
            description="Snapshot artist metrics for the current season week",
        ),
        TaskRegistryEntry(
            name="calculate_daily_scores",
            queue=WORKER_QUEUE,
            description="Refresh artist metrics, score the week, resolve bets, update user totals",
        ),
        TaskRegistryEntry(
            name="process_weekly_leaderboard",
            queue=WORKER_QUEUE,
            description="Rank players, pay MusiCoin rewards and reset weekly scores",
        ),
    ]
}


@router.get("/tasks/registry", response_model=list[TaskRegistryEntry])
async def get_task_registry() -> list[TaskRegistryEntry]:
    return list(TASK_REGISTRY.values())


@router.post("/tasks/trigger", response_model=TriggerResponse)
async def trigger_task(body: TriggerRequest) -> TriggerResponse:
    """Dispatch a registered worker task by name."""
    entry = TASK_REGISTRY.get(body.task_name)
    if entry is None:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown task: {body.task_name}. Use GET /admin/tasks/registry for available tasks.",
        )

    result = get_celery_app().send_task(
        entry.name,
        queue=entry.queue,
        routing_key=entry.queue,
    )

    logger.info("Admin triggered task %s (id=%s)", entry.name, result.id)

    return TriggerResponse(status="dispatched", task_name=entry.name, task_id=result.id)

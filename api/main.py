from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db import close_db
from app.logging_config import configure_logging
from app.middleware.logging import StructuredLoggingMiddleware
from app.routers import functions, usernames
from app.routers.admin import task_control
from app.validate_env import validate_env

configure_logging("fantamusike-api", settings.environment, settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    validate_env()
    yield
    await close_db()


app = FastAPI(title="fantamusike-api", version="1.0.0", lifespan=lifespan)

app.add_middleware(StructuredLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(functions.router)
app.include_router(usernames.router)
app.include_router(task_control.router)


@app.get("/healthz")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}

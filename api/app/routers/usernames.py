"""Username validation endpoint used by onboarding and profile forms."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..utils.validation import validate_username

router = APIRouter(prefix="/usernames", tags=["usernames"])


class UsernameValidationRequest(BaseModel):
    username: str | None = None


class UsernameValidationResponse(BaseModel):
    valid: bool
    error: str | None = None


@router.post("/validate", response_model=UsernameValidationResponse)
async def validate(payload: UsernameValidationRequest) -> UsernameValidationResponse:
    """Check a candidate username. Invalid names are a normal 200 response."""
    result = validate_username(payload.username)
    return UsernameValidationResponse(valid=result.valid, error=result.error)

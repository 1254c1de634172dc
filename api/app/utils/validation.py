"""Username validation.

Rules are applied in order and stop at the first failure:

1. the username is non-empty
2. it is between 3 and 20 characters long
3. it only uses letters, digits, underscores and dots
4. it contains no banned term (case-insensitive substring match)

The banned-term message is deliberately generic so the denylist cannot be
probed term by term.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .banned_terms import BANNED_TERMS

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20

_VALID_USERNAME_CHARS = re.compile(r"[A-Za-z0-9_.]+")

ERROR_REQUIRED = "Username is required."
ERROR_TOO_SHORT = f"Username must be at least {USERNAME_MIN_LENGTH} characters long."
ERROR_TOO_LONG = f"Username cannot be longer than {USERNAME_MAX_LENGTH} characters."
ERROR_INVALID_CHARS = "Username may only contain letters, numbers, dots and underscores."
ERROR_BANNED_TERM = "Username contains disallowed terms."


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> ValidationResult:
        return cls(valid=False, error=error)


def validate_username(
    username: str | None,
    banned_terms: Iterable[str] = BANNED_TERMS,
) -> ValidationResult:
    """Validate a candidate username. Never raises."""
    if not username:
        return ValidationResult.fail(ERROR_REQUIRED)

    if len(username) < USERNAME_MIN_LENGTH:
        return ValidationResult.fail(ERROR_TOO_SHORT)

    if len(username) > USERNAME_MAX_LENGTH:
        return ValidationResult.fail(ERROR_TOO_LONG)

    if not _VALID_USERNAME_CHARS.fullmatch(username):
        return ValidationResult.fail(ERROR_INVALID_CHARS)

    lowered = username.lower()
    if any(term.lower() in lowered for term in banned_terms):
        return ValidationResult.fail(ERROR_BANNED_TERM)

    return ValidationResult.ok()

"""Terms that may not appear anywhere in a username (matched case-insensitively)."""

from __future__ import annotations

BANNED_TERMS: tuple[str, ...] = (
    # Impersonation of staff / the platform
    "admin",
    "administrator",
    "moderator",
    "mod_",
    "staff",
    "support",
    "official",
    "fantamusike",
    "spotify",
    # Offensive terms (EN)
    "fuck",
    "shit",
    "bitch",
    "nigger",
    "faggot",
    "retard",
    "nazi",
    "hitler",
    # Offensive terms (IT)
    "cazzo",
    "merda",
    "stronzo",
    "puttana",
    "troia",
    "frocio",
    "negro",
    "vaffanculo",
    "coglione",
)

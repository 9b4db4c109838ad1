from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException

from kinship.core.config import settings

SYSTEM_ACTOR = "system"


@dataclass(frozen=True)
class AuthContext:
    email: str


def get_auth_context(
    x_forwarded_user: str | None = Header(default=None, alias="X-Forwarded-User"),
    x_dev_user: str | None = Header(default=None, alias="X-Dev-User"),
) -> AuthContext | None:
    """
    Auth boundary.

    In prod, requests are expected to be behind a forward-auth proxy, which injects
    X-Forwarded-User (email). In dev/tests, auth can be disabled.
    """
    if settings.auth_mode == "none":
        return None

    email = x_forwarded_user or x_dev_user
    if not email:
        raise HTTPException(status_code=401, detail="missing auth header (X-Forwarded-User)")
    return AuthContext(email=email.strip().lower())


def actor_of(ctx: AuthContext | None) -> str:
    return ctx.email if ctx is not None else SYSTEM_ACTOR

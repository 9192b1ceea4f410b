"""Caller identity for admin-only functions."""

from typing import Any

from supabase import AuthError, create_client

from fleetops.utils.config import DatabaseConfig
from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def fetch_user(authorization: str | None, config: DatabaseConfig) -> dict[str, Any] | None:
    """Resolve the user behind a bearer token, or ``None`` if there is none.

    Returns:
        ``{"id", "user_metadata", "app_metadata"}`` for the token's user.
    """
    token = bearer_token(authorization)
    if token is None or not config.url or not config.anon_key:
        return None

    client = create_client(config.url, config.anon_key)
    try:
        response = client.auth.get_user(token)
    except AuthError as exc:
        logger.warning("Could not resolve caller from token: %s", exc)
        return None

    if response is None or response.user is None:
        return None
    return {
        "id": response.user.id,
        "user_metadata": response.user.user_metadata or {},
        "app_metadata": response.user.app_metadata or {},
    }


def is_superadmin(user: dict[str, Any] | None) -> bool:
    """Superadmin flag in either metadata block, or the ``superadmin`` role."""
    if not user:
        return False
    user_meta = user.get("user_metadata") or {}
    app_meta = user.get("app_metadata") or {}
    roles = app_meta.get("roles") or []
    return (
        user_meta.get("is_superadmin") is True
        or app_meta.get("is_superadmin") is True
        or "superadmin" in roles
    )

"""Shared-secret guard for the /energy routes."""

import hmac

from fastapi import HTTPException, Header

from vitals.config import settings

_BEARER = "bearer "


def _presented_key(x_api_key: str | None, authorization: str | None) -> str | None:
    if x_api_key is not None:
        return x_api_key
    if authorization and authorization.lower().startswith(_BEARER):
        return authorization[len(_BEARER):].strip()
    return None


async def verify_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None),
) -> str:
    """Route dependency; a no-op while VITALS_API_KEY is unset."""
    expected = settings.vitals_api_key
    if expected is None:
        return ""

    presented = _presented_key(x_api_key, authorization)
    if presented is None or not hmac.compare_digest(presented.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return presented

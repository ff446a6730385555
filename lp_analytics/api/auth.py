from __future__ import annotations

import logging

from fastapi import Header, HTTPException


BEARER_PREFIX = "bearer "
logger = logging.getLogger(__name__)


def require_jwt(authorization: str | None = Header(None)) -> str:
    """Accept any non-empty bearer credential; verification happens upstream."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        logger.warning("auth: rejected reason=missing_bearer_scheme")
        raise HTTPException(status_code=401, detail="Missing bearer token.")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        logger.warning("auth: rejected reason=empty_token")
        raise HTTPException(status_code=401, detail="Missing bearer token.")
    return token

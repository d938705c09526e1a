"""FastAPI dependency for API key authentication."""

import hmac
import logging
from typing import Optional
from fastapi import Header, HTTPException

from config_storage.config import config

logger = logging.getLogger(__name__)


async def verify_api_key(
    x_pma_api_key: Optional[str] = Header(None, alias="X-Pma-Api-Key")
) -> dict:
    """
    FastAPI dependency to verify the caller's API key.

    Returns:
        Dict describing the authenticated caller

    Raises:
        HTTPException: 401 if missing/invalid, 503 if no key is configured
    """
    if not config.PMA_API_KEY:
        logger.error("PMA_API_KEY is not configured; rejecting request")
        raise HTTPException(
            status_code=503,
            detail={
                "error_code": "auth_unavailable",
                "error_message": "Authentication is not configured"
            }
        )

    if not x_pma_api_key or not hmac.compare_digest(x_pma_api_key.encode(), config.PMA_API_KEY.encode()):
        logger.warning("Missing or invalid API key")
        raise HTTPException(
            status_code=401,
            detail={
                "error_code": "unauthorized",
                "error_message": "Missing or invalid API key"
            }
        )

    return {"authenticated": True}

"""
API Security Utilities
"""

import functools
import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import APIKeyHeader

from reconlab.core.config import ScanSettings

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@functools.lru_cache(maxsize=1)
def get_settings() -> ScanSettings:
    """Settings shared by every request, read once from the environment."""
    settings = ScanSettings.from_env()
    if not settings.api_key:
        logger.warning("RECONLAB_API_KEY is not set. API endpoints are unauthenticated.")
    return settings


async def verify_api_key(api_key: Optional[str] = Depends(api_key_header),
                         settings: ScanSettings = Depends(get_settings)):
    """Verify API key for protected endpoints"""
    if not settings.api_key:
        return None
    if not api_key or api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API Key")
    return api_key

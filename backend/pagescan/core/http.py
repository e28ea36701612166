from contextlib import asynccontextmanager
from typing import Optional

import httpx

from pagescan.core.config import Settings, get_settings


@asynccontextmanager
async def client_for(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
    settings = settings or get_settings()
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout, connect=5.0),
        headers={"User-Agent": settings.user_agent, "Accept": "text/html, */*"},
        follow_redirects=True,
        http2=True,
        verify=True,
        transport=transport,
    ) as client:
        yield client

import logging
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import httpx

from pagescan.core.config import Settings, get_settings
from pagescan.core.errors import NavigationError
from pagescan.core.http import client_for
from pagescan.snapshot.html import HtmlSnapshot

_LOG = logging.getLogger(__name__)


def _local_path(target: str) -> Optional[Path]:
    parts = urlsplit(target)
    if parts.scheme == "file":
        return Path(unquote(parts.path))
    if parts.scheme in ("http", "https"):
        return None
    return Path(target)


class StaticSnapshotProvider:
    """
    Fetches raw HTML (http/https via httpx, local files from disk) without
    rendering it. Use as an async context manager so the httpx client is shared
    across pages.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport
        self._stack: Optional[AsyncExitStack] = None
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "StaticSnapshotProvider":
        self._stack = AsyncExitStack()
        self._client = await self._stack.enter_async_context(client_for(self.settings, self._transport))
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._stack is not None:
            await self._stack.aclose()
        self._stack = None
        self._client = None

    async def navigate(self, target: str) -> HtmlSnapshot:
        path = _local_path(target)
        if path is not None:
            return self._from_file(target, path)
        if self._client is None:
            raise RuntimeError("StaticSnapshotProvider must be used as an async context manager")
        try:
            resp = await self._client.get(target)
        except httpx.HTTPError as e:
            raise NavigationError(target, repr(e)) from e
        if resp.status_code >= 400:
            raise NavigationError(target, f"HTTP {resp.status_code}")
        _LOG.debug("fetched %s (%d bytes)", resp.url, len(resp.content))
        return HtmlSnapshot(
            resp.text,
            location=str(resp.url),
            headers=dict(resp.headers),
            viewport_width=self.settings.narrow_viewport[0],
        )

    def _from_file(self, target: str, path: Path) -> HtmlSnapshot:
        try:
            html = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise NavigationError(target, str(e)) from e
        return HtmlSnapshot(html, location=path.resolve().as_uri(),
                            viewport_width=self.settings.narrow_viewport[0])

"""Shared fixtures: in-memory HTML snapshots."""

from typing import Callable

import pytest

from pagescan.core.config import Settings
from pagescan.snapshot.html import HtmlSnapshot

# A page that none of the default checks flag in static mode.
CLEAN_PAGE = (
    '<html lang="en"><head><title>T</title>'
    '<meta http-equiv="Content-Security-Policy" content="default-src \'self\'">{head}</head>'
    '<body><a href="#main">Skip to main content</a>'
    '<main id="main"><h1>Title</h1>{body}</main></body></html>'
)


@pytest.fixture
def page() -> Callable[..., HtmlSnapshot]:
    """Build a snapshot of the clean page with extra head/body markup."""

    def _page(body: str = "", head: str = "", **kwargs) -> HtmlSnapshot:
        return HtmlSnapshot(CLEAN_PAGE.format(body=body, head=head), **kwargs)

    return _page


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def clean_html() -> Callable[..., str]:
    """Raw markup of the clean page, for providers that parse it themselves."""

    def _html(body: str = "", head: str = "") -> str:
        return CLEAN_PAGE.format(body=body, head=head)

    return _html

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from pagescan.core.config import Settings, get_settings
from pagescan.core.errors import NavigationError
from pagescan.snapshot.base import FOCUSABLE, ElementLayout
from pagescan.snapshot.html import LAYOUT_ID_ATTR, HtmlSnapshot

_LOG = logging.getLogger(__name__)

CAPTURED_PROPERTIES = [
    "color", "background-color", "background-image", "font-size", "font-weight",
    "line-height", "text-align", "opacity", "display", "visibility",
    "outline-style", "outline-width", "box-shadow", "position",
]

# Stamps every element with an id (kept across calls) and returns {id: layout};
# the stamped markup is read back with page.content() so styles can be joined
# to parsed tags. With boxesOnly set only geometry is recorded.
CAPTURE_LAYOUT_JS = """
([attr, props, focusableSelector, boxesOnly]) => {
    const layout = {};
    window.__pagescanNext = window.__pagescanNext || 0;
    for (const el of document.querySelectorAll('*')) {
        let id = el.getAttribute(attr);
        if (id === null) {
            id = String(window.__pagescanNext++);
            el.setAttribute(attr, id);
        }
        const r = el.getBoundingClientRect();
        const box = {x: r.x + window.scrollX, y: r.y + window.scrollY, width: r.width, height: r.height};
        if (boxesOnly) {
            layout[id] = {box};
            continue;
        }
        const cs = window.getComputedStyle(el);
        const style = {};
        for (const p of props) style[p] = cs.getPropertyValue(p);
        layout[id] = {
            style,
            focus_style: {},
            box,
            visible: el.getClientRects().length > 0 && cs.visibility !== 'hidden',
        };
    }
    if (boxesOnly) return layout;
    for (const el of document.querySelectorAll(focusableSelector)) {
        el.focus({preventScroll: true});
        if (document.activeElement !== el) continue;
        const cs = window.getComputedStyle(el);
        layout[el.getAttribute(attr)].focus_style = {
            'outline-style': cs.outlineStyle,
            'outline-width': cs.outlineWidth,
            'box-shadow': cs.boxShadow,
        };
        el.blur();
    }
    return layout;
}
"""

# Navigation and paint timings in ms from navigation start; null when unavailable.
LOAD_TIMING_JS = """
() => {
    const nav = performance.getEntriesByType('navigation')[0];
    const paint = {};
    for (const entry of performance.getEntriesByType('paint')) paint[entry.name] = entry.startTime;
    return {
        dom_content_loaded_ms: nav ? nav.domContentLoadedEventEnd : null,
        first_paint_ms: paint['first-paint'] ?? null,
        first_contentful_paint_ms: paint['first-contentful-paint'] ?? null,
    };
}
"""


def _as_url(target: str) -> str:
    if urlsplit(target).scheme in ("http", "https", "file"):
        return target
    return Path(target).resolve().as_uri()


class BrowserSnapshotProvider:
    """Renders targets in headless Chromium and captures computed styles and geometry.

    Boxes are measured at both viewports: the narrow ones feed the touch-target
    checks, the desktop ones everything else.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "BrowserSnapshotProvider":
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True)
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._playwright = None

    async def navigate(self, target: str) -> HtmlSnapshot:
        if self._browser is None:
            raise RuntimeError("BrowserSnapshotProvider must be used as an async context manager")
        url = _as_url(target)
        narrow_w, narrow_h = self.settings.narrow_viewport
        desktop_w, desktop_h = self.settings.desktop_viewport
        page = await self._browser.new_page(viewport={"width": narrow_w, "height": narrow_h})
        js_errors = []
        page.on("pageerror", lambda exc: js_errors.append(str(exc)))
        try:
            started = time.monotonic()
            resp = await page.goto(url, wait_until="networkidle", timeout=self.settings.navigation_timeout_ms)
            load_time_ms = (time.monotonic() - started) * 1000
            if resp is not None and resp.status >= 400:
                raise NavigationError(target, f"HTTP {resp.status}")
            headers: Dict[str, str] = await resp.all_headers() if resp is not None else {}
            timing: Dict[str, Any] = await page.evaluate(LOAD_TIMING_JS)
            scroll_width = await page.evaluate("() => document.documentElement.scrollWidth")
            narrow = await page.evaluate(CAPTURE_LAYOUT_JS, [LAYOUT_ID_ATTR, CAPTURED_PROPERTIES, FOCUSABLE, True])

            await page.set_viewport_size({"width": desktop_w, "height": desktop_h})
            raw = await page.evaluate(CAPTURE_LAYOUT_JS, [LAYOUT_ID_ATTR, CAPTURED_PROPERTIES, FOCUSABLE, False])
            html = await page.content()
        except PlaywrightError as e:
            raise NavigationError(target, str(e)) from e
        finally:
            await page.close()

        for key, value in raw.items():
            if key in narrow:
                value["narrow_box"] = narrow[key]["box"]
        layout = {key: ElementLayout.model_validate(value) for key, value in raw.items()}
        if js_errors:
            _LOG.info("%d script errors on %s", len(js_errors), url)
        _LOG.debug("captured %d elements from %s in %.0f ms", len(layout), url, load_time_ms)
        return HtmlSnapshot(
            html,
            location=url,
            layout=layout,
            headers=headers,
            viewport_width=narrow_w,
            scroll_width=float(scroll_width),
            load_metrics={"load_time_ms": load_time_ms, "js_errors": len(js_errors), **timing},
        )

from typing import List

from pagescan.checks._common import _finding, aggregated, parse_px
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import DocumentMetrics, Element, Snapshot
from pagescan.snapshot.html import parse_inline_style


def _blocks_render(script: Element) -> bool:
    if script.attribute("async") is not None or script.attribute("defer") is not None:
        return False
    return (script.attribute("type") or "").strip().lower() != "module"


def _has_dimensions(img: Element) -> bool:
    if img.attribute("width") and img.attribute("height"):
        return True
    inline = parse_inline_style(img.attribute("style"))
    return parse_px(inline.get("width")) is not None and parse_px(inline.get("height")) is not None


class PerformanceCheck:
    key = "performance"
    title = "Page Weight and Rendering"
    category = Category.PERFORMANCE

    def __init__(self, max_dom_elements: int = 1500, max_inline_script_bytes: int = 100_000,
                 max_load_time_ms: float = 5000.0, failing_load_time_ms: float = 10000.0):
        self.max_dom_elements = max_dom_elements
        self.max_inline_script_bytes = max_inline_script_bytes
        self.max_load_time_ms = max_load_time_ms
        self.failing_load_time_ms = failing_load_time_ms

    def _load(self, metrics: DocumentMetrics) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category
        if metrics.load_time_ms is not None and metrics.load_time_ms > self.max_load_time_ms:
            status = "failed" if metrics.load_time_ms > self.failing_load_time_ms else "warning"
            timings = {k: v for k, v in metrics.model_dump().items() if k.endswith("_ms") and v is not None}
            out.append(_finding("PERF-LOAD-TIME", cat, "load-time",
                                f"Page took {metrics.load_time_ms:.0f} ms to load (budget {self.max_load_time_ms:.0f} ms)",
                                location_hint="Page load",
                                evidence={"status": status, "limit_ms": self.max_load_time_ms, **timings}))
        if metrics.js_errors:
            out.append(_finding("PERF-JS-ERRORS", cat, "js-errors",
                                f"{metrics.js_errors} uncaught script errors during load",
                                location_hint="Page load",
                                evidence={"errors": metrics.js_errors}))
        return out

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        dom_size = len(snapshot.query("*"))
        if dom_size > self.max_dom_elements:
            out.append(_finding("PERF-DOM-SIZE", cat, "dom-size",
                                f"DOM has {dom_size} elements (limit {self.max_dom_elements})",
                                evidence={"elements": dom_size, "limit": self.max_dom_elements}))

        blocking = [s for s in snapshot.query("head script[src]") if _blocks_render(s)]
        if blocking:
            out.append(aggregated("PERF-RENDER-BLOCKING", cat, "render-blocking",
                                  f"{len(blocking)} render-blocking scripts in <head>", blocking))

        unsized = [img for img in snapshot.query("img") if not _has_dimensions(img)]
        if unsized:
            out.append(aggregated("PERF-IMG-DIMENSIONS", cat, "img-dimensions",
                                  f"{len(unsized)} images without explicit width and height", unsized))

        inline_bytes = sum(len(s.text().encode("utf-8")) for s in snapshot.query("script:not([src])"))
        if inline_bytes > self.max_inline_script_bytes:
            out.append(_finding("PERF-INLINE-SCRIPT", cat, "inline-script-size",
                                f"Inline scripts total {inline_bytes} bytes",
                                location_hint="SCRIPT",
                                evidence={"bytes": inline_bytes, "limit": self.max_inline_script_bytes}))
        out.extend(self._load(snapshot.metrics))
        return out

import re
from typing import Dict, List, Tuple

from pagescan.checks._common import _finding, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import BoundingBox, Element, Snapshot

TOUCH_TARGETS = 'button, a[href], input:not([type="hidden"]), select, textarea, [role="button"]'


def parse_viewport(content: str) -> Dict[str, str]:
    out = {}
    for token in re.split(r"[,;]", content or ""):
        if "=" in token:
            k, v = token.split("=", 1)
            out[k.strip().lower()] = v.strip().lower()
    return out


def zoom_disabled(content: str) -> bool:
    directives = parse_viewport(content)
    if directives.get("user-scalable") in ("no", "0"):
        return True
    try:
        return float(directives.get("maximum-scale", "10")) < 2
    except ValueError:
        return False


def gap_between(a: BoundingBox, b: BoundingBox) -> float:
    dx = max(0.0, b.x - (a.x + a.width), a.x - (b.x + b.width))
    dy = max(0.0, b.y - (a.y + a.height), a.y - (b.y + b.height))
    return max(dx, dy)


def _contains(outer: BoundingBox, inner: BoundingBox) -> bool:
    return (outer.x <= inner.x and outer.y <= inner.y
            and outer.x + outer.width >= inner.x + inner.width
            and outer.y + outer.height >= inner.y + inner.height)


class MobileCheck:
    key = "mobile"
    title = "Mobile Accessibility"
    category = Category.MOBILE

    def __init__(self, min_spacing: float = 8.0, max_targets: int = 200):
        self.min_spacing = min_spacing
        self.max_targets = max_targets

    def _positioned_targets(self, snapshot: Snapshot) -> List[Tuple[Element, BoundingBox]]:
        targets = []
        for el in snapshot.query(TOUCH_TARGETS):
            if len(targets) >= self.max_targets:
                break
            box = el.bounding_box(narrow=True)
            if box is None or not box.positioned or box.width == 0 or box.height == 0:
                continue
            if el.is_visible():
                targets.append((el, box))
        return targets

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        metrics = snapshot.metrics
        if metrics.scroll_width is not None and metrics.scroll_width > metrics.viewport_width + 1:
            out.append(_finding("1.4.10", cat, "horizontal-scroll",
                                "Content causes horizontal scrolling on mobile",
                                location_hint="Mobile viewport",
                                evidence={"viewport_width": metrics.viewport_width,
                                          "scroll_width": metrics.scroll_width}))

        for meta in snapshot.query('meta[name="viewport"]'):
            if zoom_disabled(meta.attribute("content") or ""):
                out.append(_finding("1.4.4", cat, "zoom-disabled", "User zoom is disabled",
                                    location_hint="meta[name=viewport]",
                                    evidence={"content": meta.attribute("content")}))

        targets = self._positioned_targets(snapshot)
        close_pairs = []
        for i, (el_a, box_a) in enumerate(targets):
            for el_b, box_b in targets[i + 1:]:
                if _contains(box_a, box_b) or _contains(box_b, box_a):
                    continue
                if gap_between(box_a, box_b) < self.min_spacing:
                    close_pairs.append(f"{describe(el_a, 15)} and {describe(el_b, 15)}")
        if close_pairs:
            out.append(_finding("2.5.8", cat, "touch-targets-close", "Touch targets too close together",
                                location_hint=f"{len(close_pairs)} pairs",
                                evidence={"count": len(close_pairs), "samples": close_pairs[:5]}))
        return out

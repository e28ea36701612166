from typing import List

from pagescan.checks._common import _finding, aggregated, describe, is_skip_link, parse_px
from pagescan.checks.keyboard import focusable_elements
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Element, Snapshot


def lacks_focus_indicator(el: Element) -> bool:
    style = el.computed_style("outline-style", ":focus")
    width = el.computed_style("outline-width", ":focus")
    if style is None and width is None:
        return False   # unknown, not reported
    no_outline = (style or "").strip().lower() == "none" or parse_px(width) == 0
    shadow = (el.computed_style("box-shadow", ":focus") or "none").strip().lower()
    return no_outline and shadow in ("", "none")


class FocusCheck:
    key = "focus"
    title = "Focus Management"
    category = Category.FOCUS

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        focusable = [el for el in focusable_elements(snapshot) if el.is_visible()]

        missing = [el for el in focusable if lacks_focus_indicator(el)]
        if missing:
            out.append(aggregated("2.4.7", self.category, "no-focus-indicator",
                                  "Elements lack visible focus indicators", missing))

        skip_links = [el for el in focusable if is_skip_link(el)]
        if skip_links and focusable[0] not in skip_links:
            out.append(_finding("2.4.3", self.category, "skip-link-not-first",
                                "First focusable element is not a skip link",
                                location_hint=describe(focusable[0])))
        return out

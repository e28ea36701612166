from typing import List

from pagescan.checks._common import _finding, accessible_name, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot

TARGETS = 'button, a[href], input:not([type="hidden"]), select, textarea, [role="button"], [onclick]'
GENERIC_LINK_TEXT = {"click here", "here", "read more", "more", "learn more", "link", "this link"}


class InteractiveCheck:
    key = "interactive"
    title = "Interactive Elements"
    category = Category.INTERACTIVE

    def __init__(self, min_target: float = 44.0):
        self.min_target = min_target

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        for el in snapshot.query(TARGETS):
            if not el.is_visible():
                continue
            box = el.bounding_box(narrow=True)
            if box is None or box.width == 0 or box.height == 0:
                continue
            if box.width < self.min_target or box.height < self.min_target:
                out.append(_finding(
                    "2.5.5", cat, "small-touch-target",
                    f"Touch target smaller than {self.min_target:g}x{self.min_target:g} pixels",
                    location_hint=f"{describe(el)} ({round(box.width)}x{round(box.height)})",
                    evidence={"width": box.width, "height": box.height},
                ))

        for btn in snapshot.query('button, [role="button"]'):
            if not accessible_name(snapshot, btn):
                out.append(_finding("4.1.2", cat, "button-no-name", "Button has no accessible name",
                                    location_hint=describe(btn)))

        for link in snapshot.query("a[href]"):
            name = accessible_name(snapshot, link)
            if not name:
                out.append(_finding("2.4.4", cat, "link-no-name", "Link has no accessible name",
                                    location_hint=describe(link)))
            elif name.lower().strip(" .!?:") in GENERIC_LINK_TEXT:
                out.append(_finding("2.4.4", cat, "vague-link-text", "Link text is not descriptive",
                                    location_hint=describe(link), evidence={"text": name}))
        return out

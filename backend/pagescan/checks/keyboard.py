from typing import List

from pagescan.checks._common import FOCUSABLE, _finding, aggregated, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Element, Snapshot

NATIVELY_FOCUSABLE = {"a", "button", "input", "select", "textarea", "summary"}


def _tabindex(el: Element):
    raw = el.attribute("tabindex")
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def focusable_elements(snapshot: Snapshot) -> List[Element]:
    out = []
    for el in snapshot.query(FOCUSABLE):
        if el.attribute("disabled") is not None:
            continue
        if el.tag_name == "input" and (el.attribute("type") or "").lower() == "hidden":
            continue
        out.append(el)
    return out


class KeyboardCheck:
    key = "keyboard"
    title = "Keyboard Navigation"
    category = Category.KEYBOARD

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        focusable = focusable_elements(snapshot)

        positive = [el for el in focusable if (_tabindex(el) or 0) > 0]
        if positive:
            out.append(aggregated("2.4.3", self.category, "positive-tabindex",
                                  f"{len(positive)} elements use positive tabindex values", positive))

        hidden = [el for el in focusable
                  if not el.is_visible() and el.attribute("aria-hidden") != "true"]
        if hidden:
            out.append(aggregated("2.4.3", self.category, "hidden-focusable",
                                  f"{len(hidden)} hidden elements are still focusable", hidden))

        for el in snapshot.query("[onclick]"):
            if el.tag_name in NATIVELY_FOCUSABLE or el.attribute("tabindex") is not None:
                continue
            out.append(_finding("2.1.1", self.category, "mouse-only-handler",
                                "Click handler on an element that cannot receive keyboard focus",
                                location_hint=describe(el)))
        return out

from typing import List

from pagescan.checks._common import FOCUSABLE, _finding, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot

# WAI-ARIA 1.2 concrete roles
VALID_ROLES = {
    "alert", "alertdialog", "application", "article", "banner", "blockquote", "button", "caption",
    "cell", "checkbox", "code", "columnheader", "combobox", "complementary", "contentinfo",
    "definition", "deletion", "dialog", "directory", "document", "emphasis", "feed", "figure",
    "form", "generic", "grid", "gridcell", "group", "heading", "img", "insertion", "link", "list",
    "listbox", "listitem", "log", "main", "marquee", "math", "menu", "menubar", "menuitem",
    "menuitemcheckbox", "menuitemradio", "meter", "navigation", "none", "note", "option",
    "paragraph", "presentation", "progressbar", "radio", "radiogroup", "region", "row",
    "rowgroup", "rowheader", "scrollbar", "search", "searchbox", "separator", "slider",
    "spinbutton", "status", "strong", "subscript", "superscript", "switch", "tab", "table",
    "tablist", "tabpanel", "term", "textbox", "time", "timer", "toolbar", "tooltip", "tree",
    "treegrid", "treeitem",
}


class AriaCheck:
    key = "aria"
    title = "ARIA Implementation"
    category = Category.ARIA

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        for el in snapshot.query("[aria-label]"):
            if not (el.attribute("aria-label") or "").strip():
                out.append(_finding("4.1.2", cat, "empty-aria-label", "Empty aria-label attribute",
                                    location_hint=describe(el)))

        for attr in ("aria-labelledby", "aria-describedby"):
            for el in snapshot.query(f"[{attr}]"):
                for ref in (el.attribute(attr) or "").split():
                    if snapshot.element_by_id(ref) is None:
                        out.append(_finding("1.3.1", cat, "invalid-aria-reference",
                                            f"{attr} references non-existent ID: {ref}",
                                            location_hint=describe(el)))

        for el in snapshot.query("[role]"):
            roles = (el.attribute("role") or "").lower().split()
            if roles and roles[0] not in VALID_ROLES:
                out.append(_finding("4.1.2", cat, "invalid-role", f'Invalid ARIA role "{roles[0]}"',
                                    location_hint=describe(el)))

        for el in snapshot.query('[role="heading"]'):
            if el.attribute("aria-level") is None:
                out.append(_finding("4.1.2", cat, "missing-aria-level", "Heading role without aria-level",
                                    location_hint=describe(el)))

        for el in snapshot.query('[aria-hidden="true"]'):
            candidates = el.query(FOCUSABLE)
            if el.closest(FOCUSABLE) == el:
                candidates.insert(0, el)
            hidden_focusable = [f for f in candidates
                                if f.attribute("tabindex") != "-1" and f.attribute("disabled") is None]
            if hidden_focusable:
                out.append(_finding("4.1.2", cat, "aria-hidden-focusable",
                                    "Focusable content inside aria-hidden region",
                                    location_hint=describe(el), evidence={"count": len(hidden_focusable)}))
        return out

from collections import OrderedDict
from typing import Dict, List

from pagescan.checks._common import _finding, _squash, referenced_text
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Element, Snapshot

# named by their value/alt, not by a label
SELF_LABELLED_TYPES = {"hidden", "submit", "button", "reset", "image"}
GROUP_ROLES = '[role="group"], [role="radiogroup"]'


def _control_label(el: Element) -> str:
    return f'{el.tag_name.upper()}[type="{(el.attribute("type") or "text").lower()}"]' \
        + (f'#{el.attribute("id")}' if el.attribute("id") else "")


class FormsCheck:
    key = "forms"
    title = "Form Accessibility"
    category = Category.FORMS

    def _label_texts(self, snapshot: Snapshot) -> Dict[str, str]:
        texts: Dict[str, str] = {}
        for label in snapshot.query("label[for]"):
            texts[label.attribute("for") or ""] = _squash(label.text())
        return texts

    def _labelled(self, snapshot: Snapshot, el: Element, label_for: Dict[str, str]) -> bool:
        el_id = el.attribute("id")
        if el_id and el_id in label_for:
            return True
        if el.closest("label") is not None:
            return True
        if (el.attribute("aria-label") or "").strip():
            return True
        labelledby = el.attribute("aria-labelledby")
        if labelledby and referenced_text(snapshot, labelledby):
            return True
        return bool((el.attribute("title") or "").strip())

    def _grouped(self, el: Element) -> bool:
        fieldset = el.closest("fieldset")
        if fieldset is not None and any(_squash(lg.text()) for lg in fieldset.query("legend")):
            return True
        group = el.closest(GROUP_ROLES)
        return group is not None and bool(group.attribute("aria-label") or group.attribute("aria-labelledby"))

    def _required_indicated(self, el: Element, label_for: Dict[str, str]) -> bool:
        if el.attribute("aria-required") == "true":
            return True
        context = label_for.get(el.attribute("id") or "", "")
        parent = el.parent()
        if parent is not None:
            context += " " + parent.text()
        return "*" in context or "required" in context.lower()

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category
        label_for = self._label_texts(snapshot)
        groups: "OrderedDict[tuple, List[Element]]" = OrderedDict()

        for el in snapshot.query("input, textarea, select"):
            input_type = (el.attribute("type") or "text").lower() if el.tag_name == "input" else el.tag_name
            if input_type in SELF_LABELLED_TYPES:
                continue
            if not self._labelled(snapshot, el, label_for):
                if el.attribute("placeholder"):
                    out.append(_finding("3.3.2", cat, "placeholder-only", "Using placeholder as only label",
                                        location_hint=_control_label(el)))
                else:
                    out.append(_finding("3.3.2", cat, "missing-label", "Form control missing label",
                                        location_hint=_control_label(el)))
            if input_type in ("radio", "checkbox") and el.attribute("name"):
                groups.setdefault((input_type, el.attribute("name")), []).append(el)

        for (input_type, name), members in groups.items():
            if len(members) < 2:
                continue
            if not all(self._grouped(m) for m in members):
                out.append(_finding("1.3.1", cat, "missing-fieldset",
                                    "Related form controls not grouped in a labelled fieldset",
                                    location_hint=f'{input_type} group "{name}"',
                                    evidence={"count": len(members)}))

        for el in snapshot.query("[required]"):
            if not self._required_indicated(el, label_for):
                out.append(_finding("3.3.2", cat, "required-not-indicated",
                                    "Required field not properly indicated",
                                    location_hint=_control_label(el)))
        return out

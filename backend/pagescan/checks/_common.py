import re
from typing import Any, Dict, List, Optional

from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category, remedy_for
from pagescan.snapshot.base import FOCUSABLE, Element, Snapshot

TEXT_BEARING = "p, span, div, h1, h2, h3, h4, h5, h6, a, button, label, li, td, th"
SAMPLE_LIMIT = 5   # location samples kept in evidence for aggregated findings


def _finding(rule_id: str, category: Category, issue_type: str, message: str,
             location_hint: str = "Document", evidence: Optional[Dict[str, Any]] = None) -> Finding:
    return Finding(
        rule_id=rule_id,            # severity is derived from this
        category=category,
        issue_type=issue_type,      # selects the remedy text
        message=message,
        location_hint=location_hint,
        remedy=remedy_for(issue_type),
        evidence=evidence or {},
    )


def _squash(text: str) -> str:
    return " ".join(text.split())


def describe(el: Element, text_len: int = 30) -> str:
    """Best-effort label for an element: TAG.first-class: "text..." """
    label = el.tag_name.upper()
    classes = (el.attribute("class") or "").split()
    if classes:
        label += "." + classes[0]
    elif el.attribute("id"):
        label += "#" + el.attribute("id")
    text = _squash(el.text())
    if text:
        snippet = text[:text_len]
        label += f': "{snippet}{"..." if len(text) > text_len else ""}"'
    return label


def aggregated(rule_id: str, category: Category, issue_type: str, message: str,
               offenders: List[Element], extra: Optional[Dict[str, Any]] = None) -> Finding:
    evidence = {"count": len(offenders), "samples": [describe(el) for el in offenders[:SAMPLE_LIMIT]]}
    evidence.update(extra or {})
    return _finding(rule_id, category, issue_type, message,
                    location_hint=f"{len(offenders)} elements", evidence=evidence)


def referenced_text(snapshot: Snapshot, id_list: str) -> str:
    parts = []
    for ref in id_list.split():
        target = snapshot.element_by_id(ref)
        if target is not None:
            parts.append(_squash(target.text()))
    return " ".join(p for p in parts if p)


def accessible_name(snapshot: Snapshot, el: Element) -> str:
    """Approximate accessible name: aria-labelledby, aria-label, content, alt, title."""
    labelledby = el.attribute("aria-labelledby")
    if labelledby:
        name = referenced_text(snapshot, labelledby)
        if name:
            return name
    label = (el.attribute("aria-label") or "").strip()
    if label:
        return label
    text = _squash(el.text())
    if text:
        return text
    for img in el.query("img[alt]"):
        alt = (img.attribute("alt") or "").strip()
        if alt:
            return alt
    if el.tag_name == "input":
        value = (el.attribute("value") or "").strip()
        if value:
            return value
    return (el.attribute("title") or "").strip()


def parse_px(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    value = value.strip().lower()
    if value.endswith("px"):
        value = value[:-2]
    try:
        return float(value)
    except ValueError:
        return None


SKIP_LINK_TEXT = re.compile(r"skip.*(main|content|navigation)", re.I)


def is_skip_link(el: Element) -> bool:
    if el.tag_name != "a" or not (el.attribute("href") or "").startswith("#"):
        return False
    return bool(SKIP_LINK_TEXT.search(_squash(el.text()) or (el.attribute("aria-label") or "")))

from typing import List

from pagescan.checks._common import _finding, _squash, describe, is_skip_link
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot

LANDMARKS = (
    "main, nav, header, footer, aside, "
    '[role="main"], [role="navigation"], [role="banner"], [role="contentinfo"], '
    "section[aria-label], section[aria-labelledby]"
)


class StructureCheck:
    key = "structure"
    title = "Document Structure and Semantics"
    category = Category.STRUCTURE

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        if not snapshot.title():
            out.append(_finding("2.4.2", cat, "missing-title", "Missing or empty page title"))

        root = snapshot.root()
        if root is None or not (root.attribute("lang") or "").strip():
            out.append(_finding("3.1.1", cat, "missing-lang", "Missing lang attribute on <html>"))

        h1_count = len(snapshot.query("h1"))
        if h1_count == 0:
            out.append(_finding("1.3.1", cat, "no-h1", "No H1 heading found"))
        elif h1_count > 1:
            out.append(_finding("1.3.1", cat, "multiple-h1", f"Multiple H1 headings found ({h1_count})",
                                evidence={"count": h1_count}))

        last_level = 0
        for heading in snapshot.query("h1, h2, h3, h4, h5, h6"):
            level = int(heading.tag_name[1])
            if last_level and level > last_level + 1:
                out.append(_finding("1.3.1", cat, "heading-skip",
                                    f"Heading level skipped: H{level} after H{last_level}",
                                    location_hint=describe(heading, 50)))
            if not _squash(heading.text()) and not heading.query("img[alt]"):
                out.append(_finding("2.4.6", cat, "empty-heading", f"Empty H{level} heading",
                                    location_hint=describe(heading)))
            last_level = level

        if not snapshot.query(LANDMARKS):
            out.append(_finding("1.3.1", cat, "no-landmarks", "No landmark regions found"))

        if not any(is_skip_link(a) for a in snapshot.query('a[href^="#"]')):
            out.append(_finding("2.4.1", cat, "no-skip-link", 'No "skip to main content" link found'))
        return out

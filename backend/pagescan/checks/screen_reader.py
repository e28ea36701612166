import re
from typing import List

from pagescan.checks._common import _finding, aggregated, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot

SR_HELPERS = ".sr-only, .screen-reader-only, .visually-hidden"
LIST_LIKE = re.compile(r"^\s*([\u2022\u2023\u25E6\u2043\u2219]|\d+\.)\s", re.M)


class ScreenReaderCheck:
    key = "screen_reader"
    title = "Screen Reader Compatibility"
    category = Category.SCREEN_READER

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        if not snapshot.query(SR_HELPERS) and not snapshot.query('a[href^="#"]'):
            out.append(_finding("1.3.1", cat, "no-sr-helpers", "No screen reader helper text found"))

        for table in snapshot.query("table"):
            if (table.attribute("role") or "").lower() in ("presentation", "none"):
                continue
            labelled = table.attribute("aria-label") or table.attribute("aria-labelledby")
            if not table.query("caption") and not labelled:
                out.append(_finding("1.3.1", cat, "table-no-caption", "Table missing caption",
                                    location_hint=describe(table)))
            if not table.query("th"):
                out.append(_finding("1.3.1", cat, "table-no-headers", "Table missing header cells",
                                    location_hint=describe(table)))

        suspicious = [el for el in snapshot.query("div, span, p")
                      if LIST_LIKE.search(el.own_text()) and el.closest("ul, ol, li") is None]
        if suspicious:
            out.append(aggregated("1.3.1", cat, "improper-list-markup",
                                  "List-like content not using proper list markup", suspicious))
        return out

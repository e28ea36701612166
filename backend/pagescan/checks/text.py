from typing import List, Optional

from pagescan.checks._common import TEXT_BEARING, aggregated, parse_px
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Element, Snapshot


def effective_opacity(el: Element) -> float:
    opacity = 1.0
    node: Optional[Element] = el
    while node is not None:
        try:
            opacity *= float(node.computed_style("opacity") or 1)
        except ValueError:
            pass
        node = node.parent()
    return opacity


class TextCheck:
    key = "text"
    title = "Text and Typography"
    category = Category.TEXT

    def __init__(self, min_font_size: float = 12.0, min_line_height_ratio: float = 1.2,
                 min_opacity: float = 0.7):
        self.min_font_size = min_font_size
        self.min_line_height_ratio = min_line_height_ratio
        self.min_opacity = min_opacity

    def run(self, snapshot: Snapshot) -> List[Finding]:
        small, tight, justified, faint = [], [], [], []
        for el in snapshot.query(TEXT_BEARING):
            if not el.own_text().strip() or not el.is_visible():
                continue
            font_size = parse_px(el.computed_style("font-size"))
            line_height = parse_px(el.computed_style("line-height"))
            if font_size is not None:
                if font_size < self.min_font_size:
                    small.append(el)
                if line_height is not None and line_height < font_size * self.min_line_height_ratio:
                    tight.append(el)
            if (el.computed_style("text-align") or "").strip().lower() == "justify":
                justified.append(el)
            if effective_opacity(el) < self.min_opacity:
                faint.append(el)

        out: List[Finding] = []
        cat = self.category
        if small:
            out.append(aggregated("1.4.4", cat, "small-text",
                                  f"{len(small)} text elements smaller than {self.min_font_size:g}px", small))
        if tight:
            out.append(aggregated("1.4.12", cat, "insufficient-line-height",
                                  f"{len(tight)} text elements with insufficient line height", tight))
        if justified:
            out.append(aggregated("1.4.8", cat, "justified-text",
                                  "Justified text can be difficult to read", justified))
        if faint:
            out.append(aggregated("1.4.3", cat, "low-opacity-text",
                                  "Text with low opacity may be hard to read", faint))
        return out

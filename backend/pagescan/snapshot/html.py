"""
BeautifulSoup-backed snapshot.

Styles and geometry come from a browser capture (``layout``) when one is
available. Without it the snapshot resolves what it can from inline ``style``
attributes and HTML defaults, and answers ``None`` for anything it cannot know.
"""
import re
from typing import Any, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from pagescan.snapshot.base import BoundingBox, DocumentMetrics, ElementLayout

LAYOUT_ID_ATTR = "data-pagescan-id"
ROOT_FONT_SIZE = 16.0

INHERITED = {"color", "font-size", "font-weight", "line-height", "text-align", "visibility"}

STATIC_DEFAULTS = {
    "color": "rgb(0, 0, 0)",
    "background-color": "rgba(0, 0, 0, 0)",
    "background-image": "none",
    "line-height": "normal",
    "text-align": "start",
    "opacity": "1",
    "visibility": "visible",
}

HEADING_SCALE = {"h1": 2.0, "h2": 1.5, "h3": 1.17, "h4": 1.0, "h5": 0.83, "h6": 0.67}
BOLD_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6", "b", "strong", "th"}
SIZED_TAGS = {"img", "canvas", "video", "iframe", "embed", "object", "svg", "input"}

_LENGTH = re.compile(r"^\s*(-?\d*\.?\d+)\s*(px|em|rem|%)?\s*$", re.I)


def parse_inline_style(raw: Optional[str]) -> Dict[str, str]:
    decls: Dict[str, str] = {}
    if not raw:
        return decls
    for part in raw.split(";"):
        if ":" not in part:
            continue
        prop, value = part.split(":", 1)
        value = value.replace("!important", "").strip()
        if prop.strip() and value:
            decls[prop.strip().lower()] = value
    # shorthands the checks care about
    if "background" in decls and "background-color" not in decls:
        bg = decls["background"]
        if "url(" in bg and "background-image" not in decls:
            decls["background-image"] = bg
        elif "url(" not in bg:
            decls["background-color"] = bg
    if "outline" in decls and "outline-style" not in decls:
        outline = decls["outline"].lower()
        if outline in ("none", "0", "0px"):
            decls["outline-style"] = "none"
            decls["outline-width"] = "0px"
    return decls


def _px(value: str, relative_to: float) -> Optional[float]:
    m = _LENGTH.match(value)
    if not m:
        return None
    number = float(m.group(1))
    unit = (m.group(2) or "px").lower()
    if unit == "px":
        return number
    if unit == "em":
        return number * relative_to
    if unit == "rem":
        return number * ROOT_FONT_SIZE
    return number * relative_to / 100.0


def _box_px(value: str, font_size: float) -> Optional[float]:
    # % of the containing block (and vw, calc()) is unknowable without layout
    if "%" in value:
        return None
    return _px(value, font_size)


def _fmt_px(value: float) -> str:
    return f"{round(value, 2):g}px"


class DomElement:
    def __init__(self, tag: Tag, snapshot: "HtmlSnapshot"):
        self._tag = tag
        self._snapshot = snapshot
        self.tag_name = (tag.name or "").lower()

    def __eq__(self, other):
        return isinstance(other, DomElement) and other._tag is self._tag

    def __hash__(self):
        return id(self._tag)

    def __repr__(self):
        return f"<DomElement {self.tag_name}>"

    # --- attributes / tree ---
    def attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def attribute_names(self) -> List[str]:
        return list(self._tag.attrs)

    def text(self) -> str:
        return self._tag.get_text()

    def own_text(self) -> str:
        return "".join(
            str(s) for s in self._tag.children
            if isinstance(s, NavigableString) and not isinstance(s, PreformattedString)
        )

    def query(self, selector: str) -> List["DomElement"]:
        return [self._snapshot.wrap(t) for t in self._tag.select(selector)]

    def closest(self, selector: str) -> Optional["DomElement"]:
        found = self._tag.css.closest(selector)
        return self._snapshot.wrap(found) if found is not None else None

    def parent(self) -> Optional["DomElement"]:
        p = self._tag.parent
        if p is None or isinstance(p, BeautifulSoup):
            return None
        return self._snapshot.wrap(p)

    # --- rendering ---
    def computed_style(self, prop: str, pseudo: Optional[str] = None) -> Optional[str]:
        prop = prop.lower()
        layout = self._snapshot.layout_for(self._tag)
        if layout is not None:
            if pseudo == ":focus":
                # nothing captured means the element was never focused
                return layout.focus_style.get(prop)
            return layout.style.get(prop)
        return self._static_style(prop)

    def bounding_box(self, narrow: bool = False) -> Optional[BoundingBox]:
        layout = self._snapshot.layout_for(self._tag)
        if layout is not None:
            return layout.narrow_box if narrow else layout.box
        decls = parse_inline_style(self._tag.get("style"))
        font_size = self._font_size()
        width = _box_px(decls["width"], font_size) if "width" in decls else None
        height = _box_px(decls["height"], font_size) if "height" in decls else None
        if self.tag_name in SIZED_TAGS:
            if "width" not in decls and self._tag.get("width"):
                width = _box_px(str(self._tag.get("width")), font_size)
            if "height" not in decls and self._tag.get("height"):
                height = _box_px(str(self._tag.get("height")), font_size)
        if width is None or height is None:
            return None
        x = _box_px(decls["left"], font_size) if "left" in decls else None
        y = _box_px(decls["top"], font_size) if "top" in decls else None
        return BoundingBox(x=x, y=y, width=width, height=height)

    def is_visible(self) -> bool:
        layout = self._snapshot.layout_for(self._tag)
        if layout is not None:
            return layout.visible
        if self.tag_name == "input" and (self._tag.get("type") or "").lower() == "hidden":
            return False
        node = self._tag
        while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
            if node.has_attr("hidden"):
                return False
            decls = parse_inline_style(node.get("style"))
            if decls.get("display", "").lower() == "none":
                return False
            if decls.get("visibility", "").lower() in ("hidden", "collapse"):
                return False
            node = node.parent
        return True

    def _chain(self) -> List[Tag]:
        chain = []
        node = self._tag
        while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    def _font_size(self) -> float:
        size = ROOT_FONT_SIZE
        for node in self._chain():
            declared = parse_inline_style(node.get("style")).get("font-size")
            resolved = _px(declared, size) if declared else None
            if resolved is not None:
                size = resolved
            elif node.name in HEADING_SCALE:
                size = size * HEADING_SCALE[node.name]
        return size

    def _font_weight(self) -> str:
        weight = "400"
        for node in self._chain():
            declared = parse_inline_style(node.get("style")).get("font-weight")
            if declared:
                declared = declared.lower()
                if declared in ("bold", "bolder"):
                    weight = "700"
                elif declared in ("normal", "lighter"):
                    weight = "400"
                elif declared.isdigit():
                    weight = declared
            elif node.name in BOLD_TAGS:
                weight = "700"
        return weight

    def _static_style(self, prop: str) -> Optional[str]:
        if prop == "font-size":
            return _fmt_px(self._font_size())
        if prop == "font-weight":
            return self._font_weight()
        if prop == "line-height":
            return self._line_height()
        node = self._tag
        while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
            declared = parse_inline_style(node.get("style")).get(prop)
            if declared is not None:
                return declared
            if prop not in INHERITED:
                break
            node = node.parent
        if prop == "display" and self._tag.has_attr("hidden"):
            return "none"
        return STATIC_DEFAULTS.get(prop)

    def _line_height(self) -> str:
        # unitless values inherit as a factor, lengths inherit as computed px
        for node in reversed(self._chain()):
            declared = parse_inline_style(node.get("style")).get("line-height")
            if not declared:
                continue
            declared = declared.lower()
            if declared == "normal":
                return "normal"
            m = _LENGTH.match(declared)
            if not m:
                return "normal"
            if m.group(2) is None:
                return _fmt_px(float(m.group(1)) * self._font_size())
            declaring = DomElement(node, self._snapshot)
            return _fmt_px(_px(declared, declaring._font_size()))
        return "normal"


class HtmlSnapshot:
    def __init__(self, html: str, location: str = "about:blank",
                 layout: Optional[Mapping[str, ElementLayout]] = None,
                 headers: Optional[Mapping[str, str]] = None,
                 viewport_width: int = 375,
                 scroll_width: Optional[float] = None,
                 load_metrics: Optional[Mapping[str, Any]] = None):
        self.location = location
        self._soup = BeautifulSoup(html, "html.parser")
        self._layout = dict(layout) if layout is not None else None
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}
        if scroll_width is None and self._layout is None:
            scroll_width = self._static_scroll_width(viewport_width)
        self.metrics = DocumentMetrics(viewport_width=viewport_width, scroll_width=scroll_width,
                                       **(load_metrics or {}))

    def wrap(self, tag: Tag) -> DomElement:
        return DomElement(tag, self)

    def layout_for(self, tag: Tag) -> Optional[ElementLayout]:
        if self._layout is None:
            return None
        key = tag.get(LAYOUT_ID_ATTR)
        return self._layout.get(key) if key is not None else None

    def query(self, selector: str) -> List[DomElement]:
        return [self.wrap(t) for t in self._soup.select(selector)]

    def title(self) -> str:
        if self._soup.title is None:
            return ""
        return self._soup.title.get_text().strip()

    def root(self) -> Optional[DomElement]:
        html = self._soup.find("html")
        return self.wrap(html) if html is not None else None

    def element_by_id(self, element_id: str) -> Optional[DomElement]:
        found = self._soup.find(id=element_id)
        return self.wrap(found) if found is not None else None

    def response_header(self, name: str) -> Optional[str]:
        return self._headers.get(name.lower())

    def _static_scroll_width(self, viewport_width: int) -> float:
        widest = float(viewport_width)
        for tag in self._soup.find_all(True):
            box = self.wrap(tag).bounding_box()
            if box is not None:
                widest = max(widest, (box.x or 0.0) + box.width)
        return widest

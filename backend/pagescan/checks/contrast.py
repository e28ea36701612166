"""
Color contrast (WCAG 2.1 SC 1.4.3).

Only a bounded sample of text-bearing elements is measured per page; elements
drawn over background images are skipped because their backdrop is unknown.
"""
import re
from typing import List, Optional, Tuple

from pagescan.checks._common import TEXT_BEARING, _finding, describe, parse_px
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Element, Snapshot

RGBA = Tuple[float, float, float, float]
WHITE: RGBA = (255.0, 255.0, 255.0, 1.0)

NAMED_COLORS = {
    "black": (0, 0, 0), "white": (255, 255, 255), "red": (255, 0, 0), "green": (0, 128, 0),
    "blue": (0, 0, 255), "yellow": (255, 255, 0), "gray": (128, 128, 128), "grey": (128, 128, 128),
    "silver": (192, 192, 192), "lightgray": (211, 211, 211), "lightgrey": (211, 211, 211),
    "darkgray": (169, 169, 169), "darkgrey": (169, 169, 169), "navy": (0, 0, 128),
    "maroon": (128, 0, 0), "purple": (128, 0, 128), "teal": (0, 128, 128), "olive": (128, 128, 0),
    "orange": (255, 165, 0), "lime": (0, 255, 0), "aqua": (0, 255, 255), "cyan": (0, 255, 255),
    "fuchsia": (255, 0, 255), "magenta": (255, 0, 255), "whitesmoke": (245, 245, 245),
}

_FUNC = re.compile(r"^rgba?\((.*)\)$", re.I)


def _channel(token: str) -> float:
    token = token.strip()
    if token.endswith("%"):
        return float(token[:-1]) * 255.0 / 100.0
    return float(token)


def _alpha(token: str) -> float:
    token = token.strip()
    if token.endswith("%"):
        return float(token[:-1]) / 100.0
    return float(token)


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """Parse a CSS color (rgb/rgba, hex, a few names). None when unparseable."""
    if not value:
        return None
    value = value.strip().lower()
    if value == "transparent":
        return (0.0, 0.0, 0.0, 0.0)
    if value in NAMED_COLORS:
        r, g, b = NAMED_COLORS[value]
        return (float(r), float(g), float(b), 1.0)
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        if len(digits) not in (6, 8):
            return None
        try:
            parts = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            return None
        a = parts[3] / 255.0 if len(parts) == 4 else 1.0
        return (float(parts[0]), float(parts[1]), float(parts[2]), a)
    m = _FUNC.match(value)
    if not m:
        return None
    body = m.group(1).replace("/", " ").replace(",", " ").split()
    try:
        if len(body) == 3:
            return (_channel(body[0]), _channel(body[1]), _channel(body[2]), 1.0)
        if len(body) == 4:
            return (_channel(body[0]), _channel(body[1]), _channel(body[2]), _alpha(body[3]))
    except ValueError:
        return None
    return None


def _linear(c: float) -> float:
    c = c / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: RGBA) -> float:
    r, g, b = rgb[:3]
    return 0.2126 * _linear(r) + 0.7152 * _linear(g) + 0.0722 * _linear(b)


def contrast_ratio(fg: RGBA, bg: RGBA) -> float:
    l1, l2 = relative_luminance(fg), relative_luminance(bg)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def _over(top: RGBA, bottom: RGBA) -> RGBA:
    a = top[3]
    return (
        top[0] * a + bottom[0] * (1 - a),
        top[1] * a + bottom[1] * (1 - a),
        top[2] * a + bottom[2] * (1 - a),
        1.0,
    )


def effective_background(el: Element) -> Optional[RGBA]:
    """Composite background colors up the ancestor chain; None over images."""
    layers: List[RGBA] = []
    node: Optional[Element] = el
    while node is not None:
        image = node.computed_style("background-image")
        if image and image.strip().lower() != "none":
            return None
        color = parse_color(node.computed_style("background-color"))
        if color is not None and color[3] > 0:
            layers.append(color)
            if color[3] >= 1:
                break
        node = node.parent()
    result = WHITE
    for layer in reversed(layers):
        result = _over(layer, result)
    return result


def required_ratio(font_size: float, bold: bool) -> float:
    return 3.0 if font_size >= 18 or (font_size >= 14 and bold) else 4.5


def _is_bold(weight: Optional[str]) -> bool:
    if not weight:
        return False
    weight = weight.strip().lower()
    if weight in ("bold", "bolder"):
        return True
    try:
        return int(float(weight)) >= 700
    except ValueError:
        return False


class ContrastCheck:
    key = "contrast"
    title = "Color Contrast"
    category = Category.CONTRAST

    def __init__(self, max_samples: int = 50):
        self.max_samples = max_samples

    def _sample(self, snapshot: Snapshot) -> List[Element]:
        sampled = []
        for el in snapshot.query(TEXT_BEARING):
            if len(sampled) >= self.max_samples:
                break
            if el.own_text().strip() and el.is_visible():
                sampled.append(el)
        return sampled

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        for el in self._sample(snapshot):
            fg = parse_color(el.computed_style("color"))
            if fg is None or fg[3] == 0:
                continue
            bg = effective_background(el)
            if bg is None:
                continue
            if fg[3] < 1:
                fg = _over(fg, bg)
            ratio = contrast_ratio(fg, bg)
            font_size = parse_px(el.computed_style("font-size")) or 16.0
            required = required_ratio(font_size, _is_bold(el.computed_style("font-weight")))
            if ratio < required:
                out.append(_finding(
                    "1.4.3", self.category, "low-contrast",
                    f"Low color contrast: {ratio:.2f}:1 (required: {required:g}:1)",
                    location_hint=describe(el),
                    evidence={"ratio": round(ratio, 2), "required": required, "font_size": font_size},
                ))
        return out

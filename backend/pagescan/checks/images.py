import os
import re
from typing import List
from urllib.parse import urlsplit

from pagescan.checks._common import _finding, _squash, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Element, Snapshot

FILLER_WORDS = ("image", "picture", "photo", "graphic")


def _src_name(img: Element) -> str:
    src = img.attribute("src") or ""
    return os.path.basename(urlsplit(src).path) or "(no src)"


def is_decorative(img: Element) -> bool:
    return (
        img.attribute("alt") == ""
        or (img.attribute("role") or "").lower() in ("presentation", "none")
        or img.attribute("aria-hidden") == "true"
    )


class ImagesCheck:
    key = "images"
    title = "Images and Alternative Text"
    category = Category.IMAGES

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category
        for img in snapshot.query("img"):
            alt = img.attribute("alt")
            name = _src_name(img)
            if alt is None:
                if not is_decorative(img):
                    out.append(_finding("1.1.1", cat, "missing-alt", "Missing alt attribute",
                                        location_hint=name))
                continue
            lowered = alt.strip().lower()
            if not lowered:
                continue
            if any(word in re.findall(r"[a-z]+", lowered) for word in FILLER_WORDS):
                out.append(_finding("1.1.1", cat, "redundant-alt", "Alt text contains redundant words",
                                    location_hint=name, evidence={"alt": alt[:50]}))
            elif lowered in (name.lower(), os.path.splitext(name)[0].lower()):
                out.append(_finding("1.1.1", cat, "filename-alt", "File name used as alt text",
                                    location_hint=name, evidence={"alt": alt[:50]}))

        for el in snapshot.query("body *"):
            if el.tag_name in ("img", "script", "style"):
                continue
            image = el.computed_style("background-image")
            if not image or image.strip().lower() == "none" or "url(" not in image:
                continue
            if el.attribute("aria-label") or el.attribute("aria-labelledby") or _squash(el.text()):
                continue
            if el.attribute("aria-hidden") == "true" or (el.attribute("role") or "") in ("presentation", "none"):
                continue
            out.append(_finding("1.1.1", cat, "bg-image-no-alt", "Background image without alternative text",
                                location_hint=describe(el)))
        return out

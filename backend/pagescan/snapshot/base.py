"""
Read-only view of a loaded page that checks evaluate.

Checks only talk to these protocols; the concrete DOM (BeautifulSoup tree,
browser capture) stays behind the snapshot implementation.
"""
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

FOCUSABLE = 'a[href], button, input, textarea, select, details, [tabindex]:not([tabindex="-1"])'


class BoundingBox(BaseModel):
    # x/y are None when only the size is known (e.g. static inline styles)
    x: Optional[float] = None
    y: Optional[float] = None
    width: float
    height: float

    @property
    def positioned(self) -> bool:
        return self.x is not None and self.y is not None


class ElementLayout(BaseModel):
    """Rendering data captured for one element by a browser."""
    style: Dict[str, str] = Field(default_factory=dict)
    focus_style: Dict[str, str] = Field(default_factory=dict)
    box: Optional[BoundingBox] = None
    # same element laid out at the narrow (mobile) viewport
    narrow_box: Optional[BoundingBox] = None
    visible: bool = True


class DocumentMetrics(BaseModel):
    viewport_width: int
    # document scroll width measured at viewport_width; None when unknown
    scroll_width: Optional[float] = None
    # load timing and script errors; only a rendering provider can observe these
    load_time_ms: Optional[float] = None
    dom_content_loaded_ms: Optional[float] = None
    first_paint_ms: Optional[float] = None
    first_contentful_paint_ms: Optional[float] = None
    js_errors: Optional[int] = None


class Element(Protocol):
    tag_name: str

    def attribute(self, name: str) -> Optional[str]: ...

    def attribute_names(self) -> List[str]: ...

    def computed_style(self, prop: str, pseudo: Optional[str] = None) -> Optional[str]: ...

    def bounding_box(self, narrow: bool = False) -> Optional[BoundingBox]: ...

    def text(self) -> str: ...

    def own_text(self) -> str: ...

    def query(self, selector: str) -> List["Element"]: ...

    def closest(self, selector: str) -> Optional["Element"]: ...

    def parent(self) -> Optional["Element"]: ...

    def is_visible(self) -> bool: ...


class Snapshot(Protocol):
    location: str
    metrics: DocumentMetrics

    def query(self, selector: str) -> List[Element]: ...

    def title(self) -> str: ...

    def root(self) -> Optional[Element]: ...

    def element_by_id(self, element_id: str) -> Optional[Element]: ...

    def response_header(self, name: str) -> Optional[str]: ...


class SnapshotProvider(Protocol):
    async def navigate(self, target: str) -> Snapshot: ...

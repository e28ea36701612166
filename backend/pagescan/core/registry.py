from typing import Dict, List, Optional, Protocol, Tuple

from pagescan.checks.aria import AriaCheck
from pagescan.checks.contrast import ContrastCheck
from pagescan.checks.focus import FocusCheck
from pagescan.checks.forms import FormsCheck
from pagescan.checks.images import ImagesCheck
from pagescan.checks.interactive import InteractiveCheck
from pagescan.checks.keyboard import KeyboardCheck
from pagescan.checks.media import MediaCheck
from pagescan.checks.mobile import MobileCheck
from pagescan.checks.performance import PerformanceCheck
from pagescan.checks.screen_reader import ScreenReaderCheck
from pagescan.checks.security import SecurityCheck
from pagescan.checks.structure import StructureCheck
from pagescan.checks.text import TextCheck
from pagescan.core.config import Settings, get_settings
from pagescan.core.errors import RegistryError
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot


class Check(Protocol):
    key: str
    title: str

    def run(self, snapshot: Snapshot) -> List[Finding]: ...


class CheckRegistry:
    """Ordered (category, check) registrations; order is the run order."""

    def __init__(self):
        self._entries: List[Tuple[Category, Check]] = []
        self._keys = set()

    def register(self, category: Category, check: Check) -> Check:
        if check.key in self._keys:
            raise RegistryError(f"check already registered: {check.key}")
        self._keys.add(check.key)
        self._entries.append((Category(category), check))
        return check

    def all_checks(self) -> List[Check]:
        return [check for _, check in self._entries]

    def registrations(self) -> List[Tuple[Category, Check]]:
        return list(self._entries)

    def by_category(self) -> Dict[Category, List[Check]]:
        out: Dict[Category, List[Check]] = {}
        for category, check in self._entries:
            out.setdefault(category, []).append(check)
        return out

    def __len__(self) -> int:
        return len(self._entries)


def default_registry(settings: Optional[Settings] = None) -> CheckRegistry:
    s = settings or get_settings()
    registry = CheckRegistry()
    registry.register(Category.STRUCTURE, StructureCheck())
    registry.register(Category.KEYBOARD, KeyboardCheck())
    registry.register(Category.CONTRAST, ContrastCheck(max_samples=s.max_sampled_elements))
    registry.register(Category.IMAGES, ImagesCheck())
    registry.register(Category.FORMS, FormsCheck())
    registry.register(Category.FOCUS, FocusCheck())
    registry.register(Category.ARIA, AriaCheck())
    registry.register(Category.TEXT, TextCheck(min_font_size=s.min_font_size,
                                               min_line_height_ratio=s.min_line_height_ratio))
    registry.register(Category.INTERACTIVE, InteractiveCheck(min_target=s.min_touch_target))
    registry.register(Category.SCREEN_READER, ScreenReaderCheck())
    registry.register(Category.MOBILE, MobileCheck(min_spacing=s.min_target_spacing))
    registry.register(Category.MEDIA, MediaCheck())
    registry.register(Category.SECURITY, SecurityCheck())
    registry.register(Category.PERFORMANCE, PerformanceCheck(max_dom_elements=s.max_dom_elements,
                                                             max_inline_script_bytes=s.max_inline_script_bytes,
                                                             max_load_time_ms=s.max_load_time_ms,
                                                             failing_load_time_ms=s.failing_load_time_ms))
    return registry

import os
from functools import lru_cache
from typing import List, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from pagescan.models.schemas import SnapshotMode

ENV_PREFIX = "PAGESCAN_"

DEFAULT_UA = (
    "PageScan/0.4 (+https://example.local) "
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseModel):
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])
    snapshot_mode: SnapshotMode = "static"
    page_concurrency: int = Field(default=4, ge=1)
    request_timeout: float = Field(default=10.0, gt=0)
    navigation_timeout_ms: int = Field(default=30000, gt=0)
    user_agent: str = DEFAULT_UA
    narrow_viewport: Tuple[int, int] = (375, 667)
    desktop_viewport: Tuple[int, int] = (1280, 720)
    # check thresholds
    max_sampled_elements: int = Field(default=50, ge=1)
    min_touch_target: float = 44.0
    min_target_spacing: float = 8.0
    min_font_size: float = 12.0
    min_line_height_ratio: float = 1.2
    max_dom_elements: int = 1500
    max_inline_script_bytes: int = 100_000
    # page load bands: over the first is a warning, over the second a failure
    max_load_time_ms: float = 5000.0
    failing_load_time_ms: float = 10000.0

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        raw = {}
        for name, field in cls.model_fields.items():
            value = os.getenv(ENV_PREFIX + name.upper())
            if value is None:
                continue
            if name in ("cors_origins",):
                raw[name] = [o.strip() for o in value.split(",") if o.strip()]
            elif name in ("narrow_viewport", "desktop_viewport"):
                # "375x667"
                w, _, h = value.lower().partition("x")
                raw[name] = (w.strip(), h.strip())
            else:
                raw[name] = value
        return cls.model_validate(raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import List, Optional, Sequence

from pagescan.checks._common import _finding
from pagescan.core.aggregate import ScanAggregator
from pagescan.core.config import Settings, get_settings
from pagescan.core.errors import SnapshotError
from pagescan.core.registry import CheckRegistry, default_registry
from pagescan.models.schemas import Finding, PageResult, ScanSummary, ScanTarget, SnapshotMode
from pagescan.models.taxonomy import CHECK_ERROR, SCAN_ERROR, Category
from pagescan.snapshot.base import Snapshot, SnapshotProvider

_LOG = logging.getLogger(__name__)


def scan_error(message: str, evidence: Optional[dict] = None) -> Finding:
    return _finding(SCAN_ERROR, Category.STRUCTURE, "scan-error", message, evidence=evidence)


def check_error(category: Category, check_key: str, exc: Exception) -> Finding:
    return _finding(CHECK_ERROR, category, "check-error", f"Check {check_key} failed: {exc!r}",
                    evidence={"check": check_key, "error": type(exc).__name__})


class PageScanner:
    """Runs every registered check against one snapshot, isolating check failures."""

    def __init__(self, registry: Optional[CheckRegistry] = None):
        self.registry = registry or default_registry()

    def scan(self, page_id: str, snapshot: Snapshot) -> PageResult:
        findings: List[Finding] = []
        for category, check in self.registry.registrations():
            try:
                findings.extend(check.run(snapshot))
            except SnapshotError as e:
                _LOG.warning("snapshot for %s became unavailable during %s: %s", page_id, check.key, e)
                findings.append(scan_error(f"Scan failed: {e}", {"check": check.key}))
                break
            except Exception as e:
                _LOG.warning("check %s failed on %s", check.key, page_id, exc_info=True)
                findings.append(check_error(category, check.key, e))
        return PageResult(page_id=page_id, findings=findings)

    async def scan_target(self, provider: SnapshotProvider, target: str, page_id: Optional[str] = None) -> PageResult:
        page_id = page_id or target
        try:
            snapshot = await provider.navigate(target)
        except Exception as e:
            _LOG.warning("could not load %s: %s", target, e)
            return PageResult(page_id=page_id, findings=[scan_error(f"Scan failed: {e}", {"target": target})])
        return self.scan(page_id, snapshot)


def provider_for(mode: SnapshotMode, settings: Optional[Settings] = None):
    settings = settings or get_settings()
    if mode == "browser":
        # playwright is only imported when a browser scan is requested
        from pagescan.snapshot.browser import BrowserSnapshotProvider
        return BrowserSnapshotProvider(settings)
    from pagescan.snapshot.static import StaticSnapshotProvider
    return StaticSnapshotProvider(settings)


async def run_scan(
    targets: Sequence[ScanTarget],
    provider: Optional[SnapshotProvider] = None,
    registry: Optional[CheckRegistry] = None,
    settings: Optional[Settings] = None,
    mode: Optional[SnapshotMode] = None,
) -> ScanSummary:
    settings = settings or get_settings()
    scanner = PageScanner(registry or default_registry(settings))
    gate = asyncio.Semaphore(settings.page_concurrency)
    _LOG.info("scanning %d pages", len(targets))

    async def one(target: ScanTarget, active: SnapshotProvider) -> PageResult:
        async with gate:
            return await scanner.scan_target(active, target.location, target.page_id)

    async with AsyncExitStack() as stack:
        if provider is None:
            provider = await stack.enter_async_context(provider_for(mode or settings.snapshot_mode, settings))
        results = await asyncio.gather(*[one(t, provider) for t in targets])

    summary = ScanAggregator().aggregate(results)
    _LOG.info("scan %s finished: score %.2f (%s)", summary.id, summary.overall_score, summary.compliance_tier.value)
    return summary

import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException

from pagescan.core.config import get_settings
from pagescan.core.engine import run_scan
from pagescan.models.schemas import RuleInfo, ScanRequest, ScanSummary
from pagescan.models.taxonomy import RULES

_LOG = logging.getLogger(__name__)

# ---- In-memory scan store (process lifetime only)
_SCANS: Dict[str, ScanSummary] = {}

router = APIRouter(tags=["scans"])


@router.post("/scan", response_model=ScanSummary)
async def start_scan(req: ScanRequest):
    settings = get_settings()
    summary = await run_scan(req.targets, settings=settings, mode=req.mode or settings.snapshot_mode)
    _SCANS[summary.id] = summary
    _LOG.info("stored scan %s (%d pages)", summary.id, len(summary.pages))
    return summary


@router.get("/scan/{scan_id}", response_model=ScanSummary)
async def get_scan(scan_id: str):
    summary = _SCANS.get(scan_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Unknown scan id")
    return summary


@router.get("/rules", response_model=List[RuleInfo])
def list_rules():
    return [RuleInfo(rule_id=rule_id, name=rule.name, level=rule.level, severity=rule.severity)
            for rule_id, rule in RULES.items()]

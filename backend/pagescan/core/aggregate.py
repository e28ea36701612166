from typing import Iterable

from pagescan.models.schemas import PageResult, ScanSummary


class ScanAggregator:
    """Combines page results into one summary; an empty scan is valid and non-compliant."""

    def aggregate(self, results: Iterable[PageResult]) -> ScanSummary:
        pages = {}
        for result in results:
            pages[result.page_id] = result
        return ScanSummary(pages=pages)


def aggregate(results: Iterable[PageResult]) -> ScanSummary:
    return ScanAggregator().aggregate(results)

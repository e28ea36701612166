class PageScanError(Exception):
    """Base class for scanner errors."""


class SnapshotError(PageScanError):
    """The page snapshot is unreachable; the page cannot be scanned any further."""


class NavigationError(SnapshotError):
    def __init__(self, target: str, reason: str):
        super().__init__(f"could not load {target}: {reason}")
        self.target = target
        self.reason = reason


class RegistryError(PageScanError):
    pass

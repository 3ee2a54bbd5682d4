from __future__ import annotations


class ScanError(ValueError):
    """Fatal scan failure. The whole run is invalid once this is raised."""

    def __init__(self, reason: str, offset: int) -> None:
        super().__init__(f"scan_error reason={reason} offset={offset}")
        self.reason = reason
        self.offset = offset

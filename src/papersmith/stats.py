"""
Statistics tracking for a papersmith run
"""


class ProcessingStats:
    """Track per-run outcome counts"""

    def __init__(self):
        self.renamed = 0
        self.dry_run = 0
        self.no_action = 0
        self.failed = 0
        self.skipped = 0

    @property
    def total(self) -> int:
        return self.renamed + self.dry_run + self.no_action + self.failed

    def record(self, status: str):
        if status == "renamed":
            self.renamed += 1
        elif status == "dry_run":
            self.dry_run += 1
        elif status == "no_action":
            self.no_action += 1
        elif status == "failed":
            self.failed += 1
        else:
            raise ValueError(f"Unknown status: {status}")

    def __str__(self) -> str:
        total = self.total
        return f"""
SUMMARY
{'='*70}
Renamed: {self.renamed}/{total}
Dry-run reports: {self.dry_run}/{total}
No action: {self.no_action}/{total}
Failed: {self.failed}/{total}
Skipped (already named): {self.skipped}
"""

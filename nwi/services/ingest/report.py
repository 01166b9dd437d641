# nwi/services/ingest/report.py
from dataclasses import dataclass, field
from typing import List

# Keep the report readable on huge extracts
MAX_RECORDED_ERRORS = 100


@dataclass
class IngestReport:
    """Counters and per-record errors collected during one ingestion pass."""
    extract: str
    rows_read: int = 0
    entities: int = 0
    duplicates: int = 0
    updated: int = 0
    skipped: int = 0
    batches: int = 0
    errors: List[str] = field(default_factory=list)

    def skip(self, line: int, reason: str) -> None:
        self.skipped += 1
        if len(self.errors) < MAX_RECORDED_ERRORS:
            self.errors.append(f"{self.extract} row {line}: {reason}")

    def as_dict(self) -> dict:
        return {
            "extract": self.extract,
            "rows_read": self.rows_read,
            "entities": self.entities,
            "duplicates": self.duplicates,
            "updated": self.updated,
            "skipped": self.skipped,
            "batches": self.batches,
            "errors": list(self.errors),
        }

"""Run statistics with atomic JSON persistence."""

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone

from slowlog_converter.models import RowResult


@dataclass
class ConversionStats:
    """Counters for one conversion run. Updated by the driver only."""

    rows_read: int = 0
    records_written: int = 0
    skipped: dict[str, int] = field(default_factory=dict)
    sql_type_counts: dict[str, int] = field(default_factory=dict)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    def record(self, result: RowResult) -> None:
        self.rows_read += 1
        if result.ok:
            self.records_written += 1
            key = result.record.sql_type
            self.sql_type_counts[key] = self.sql_type_counts.get(key, 0) + 1
        else:
            stage = result.error.stage
            self.skipped[stage] = self.skipped.get(stage, 0) + 1

    def to_dict(self) -> dict:
        return {
            "rows_read": self.rows_read,
            "records_written": self.records_written,
            "skipped_total": self.skipped_total,
            "skipped": dict(self.skipped),
            "sql_type_counts": dict(sorted(self.sql_type_counts.items())),
        }

    def save(self, path: str) -> None:
        """Write the stats as JSON to *path* atomically."""
        data = self.to_dict()
        data["last_updated"] = datetime.now(timezone.utc).isoformat()

        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp, path)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

"""Change-detection metrics. Counters only; the store updates them under its lock."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class CacheMetrics:
    """Checks, outcomes, fingerprint failures and durable writes."""

    total_checked: int = 0
    total_changed: int = 0
    total_unchanged: int = 0
    fingerprint_failures: int = 0
    puts: int = 0
    saves: int = 0
    saves_skipped: int = 0
    save_failures: int = 0

    @property
    def change_rate_pct(self) -> float:
        if self.total_checked == 0:
            return 0.0
        return 100.0 * self.total_changed / self.total_checked

    def record_check(self, changed: bool) -> None:
        self.total_checked += 1
        if changed:
            self.total_changed += 1
        else:
            self.total_unchanged += 1

    def record_save(self, ok: bool) -> None:
        if ok:
            self.saves += 1
        else:
            self.save_failures += 1

    def summary(self) -> str:
        lines = [
            "=== Change Cache Metrics ===",
            f"Total checked: {self.total_checked}",
            f"Changed (new or modified): {self.total_changed}",
            f"Unchanged: {self.total_unchanged}",
            f"Change rate: {self.change_rate_pct:.2f}%",
            f"Fingerprint failures (treated as changed): {self.fingerprint_failures}",
            f"Puts: {self.puts}",
            f"Saves: {self.saves} (skipped clean: {self.saves_skipped}, failed: {self.save_failures})",
        ]
        return "\n".join(lines)

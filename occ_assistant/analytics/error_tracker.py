"""In-process error log with burst alerts.

Failures from the commerce platform, the model provider and the embedding
backend are recorded here so ``/api/errors`` can report on them without
an external monitoring stack.
"""
from collections import Counter, deque
from typing import Any, Deque, Dict, List, Optional
import time

from occ_assistant.analytics.logger import get_logger

logger = get_logger("errors")

# Errors of one kind within ALERT_WINDOW_SECONDS that trigger a warning
ALERT_THRESHOLDS = {
    "occ_error": 5,
    "llm_error": 3,
    "embedding_error": 5,
    "server_error": 3,
}
ALERT_WINDOW_SECONDS = 60
HISTORY_SECONDS = 3600
MAX_HISTORY = 1000


class ErrorTracker:
    """Bounded history of recent errors grouped by kind."""

    def __init__(self, thresholds: Optional[Dict[str, int]] = None, max_history: int = MAX_HISTORY):
        self.thresholds = dict(ALERT_THRESHOLDS if thresholds is None else thresholds)
        self.totals: Counter = Counter()
        self.history: Deque[Dict[str, Any]] = deque(maxlen=max_history)

    def record_error(
        self,
        error_type: str,
        error_message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        now = time.time()
        self.history.append({
            "timestamp": now,
            "type": error_type,
            "message": error_message,
            "context": context or {},
        })
        self.totals[error_type] += 1
        self._expire(now - HISTORY_SECONDS)

        logger.error(f"{error_type}: {error_message}")
        self._maybe_alert(error_type, now)

    def _expire(self, cutoff: float):
        while self.history and self.history[0]["timestamp"] <= cutoff:
            self.history.popleft()

    def _count_since(self, cutoff: float, error_type: Optional[str] = None) -> int:
        return sum(
            1 for entry in self.history
            if entry["timestamp"] > cutoff and (error_type is None or entry["type"] == error_type)
        )

    def _maybe_alert(self, error_type: str, now: float):
        threshold = self.thresholds.get(error_type)
        if not threshold:
            return
        count = self._count_since(now - ALERT_WINDOW_SECONDS, error_type)
        if count >= threshold:
            logger.warning(
                f"ALERT: {count} {error_type} errors in the last {ALERT_WINDOW_SECONDS}s "
                f"(threshold {threshold})"
            )

    def get_error_stats(self, window_seconds: int = 300) -> Dict[str, Any]:
        """Counts per kind over the window plus an errors-per-minute rate."""
        cutoff = time.time() - window_seconds
        by_type = Counter(entry["type"] for entry in self.history if entry["timestamp"] > cutoff)
        total = sum(by_type.values())
        return {
            "window_seconds": window_seconds,
            "total_errors": total,
            "error_types": dict(by_type),
            "error_rate": total / (window_seconds / 60) if window_seconds > 0 else 0,
            "since_start": dict(self.totals),
        }

    def get_recent_errors(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent errors, newest first."""
        if limit <= 0:
            return []
        return list(reversed(list(self.history)[-limit:]))

    def reset(self):
        self.totals.clear()
        self.history.clear()


# Global error tracker
error_tracker = ErrorTracker()

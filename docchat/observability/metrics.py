import json
import logging
import os
import threading
import time
from collections import deque
from typing import Optional

from docchat.config import (
    METRICS_PATH,
    METRICS_LATENCY_WINDOW,
    METRICS_SAVE_INTERVAL_SECONDS,
)


logger = logging.getLogger(__name__)


class MetricsTracker:
    """
    Process-wide request counters and a sliding window of recent latencies.

    Only the last ``latency_window`` latencies are kept, so p95 describes
    recent traffic. Writes to ``path`` are throttled to one per
    ``save_interval`` seconds; ``flush()`` forces a write. Pass
    ``path=None`` to keep the tracker in memory only.
    """

    def __init__(
        self,
        path: Optional[str] = METRICS_PATH,
        latency_window: int = METRICS_LATENCY_WINDOW,
        save_interval: float = METRICS_SAVE_INTERVAL_SECONDS,
    ):

        self._path = path
        self._latency_window = latency_window
        self._save_interval = save_interval
        self._last_save: Optional[float] = None
        self._lock = threading.Lock()
        self._metrics = self._empty()

        self._load()

    def _empty(self):

        return {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
            "total_latency": 0.0,
            "avg_latency": 0.0,
            "latencies": deque(maxlen=self._latency_window),
        }

    def _load(self):

        if not self._path or not os.path.exists(self._path):
            return

        try:

            with open(self._path, "r") as f:
                data = json.load(f)

        except (OSError, ValueError) as e:

            logger.warning(
                "Metrics file unreadable, starting fresh",
                extra={"path": self._path, "error": str(e)},
            )
            return

        latencies = data.pop("latencies", [])

        self._metrics.update(data)
        self._metrics["latencies"].extend(latencies)

    def _save(self, force: bool = False):

        if not self._path:
            return

        now = time.monotonic()

        if (
            not force
            and self._last_save is not None
            and now - self._last_save < self._save_interval
        ):
            return

        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        snapshot = dict(self._metrics)
        snapshot["latencies"] = list(self._metrics["latencies"])

        with open(self._path, "w") as f:
            json.dump(snapshot, f)

        self._last_save = now

    def record_success(self, latency: float):

        with self._lock:

            self._metrics["total_requests"] += 1
            self._metrics["successful_requests"] += 1
            self._metrics["total_latency"] += latency
            self._metrics["avg_latency"] = (
                self._metrics["total_latency"]
                / self._metrics["successful_requests"]
            )
            self._metrics["latencies"].append(latency)

            self._save()

    def record_failure(self):

        with self._lock:

            self._metrics["total_requests"] += 1
            self._metrics["failed_requests"] += 1

            self._save()

    def latency_history(self):

        with self._lock:
            return list(self._metrics["latencies"])

    def get_latency_percentile(self, percentile: float) -> float:

        latencies = self.latency_history()

        if not latencies:
            return 0.0

        sorted_latencies = sorted(latencies)

        index = int(len(sorted_latencies) * percentile / 100)
        index = min(index, len(sorted_latencies) - 1)

        return sorted_latencies[index]

    def get_metrics(self):

        with self._lock:

            summary = {
                key: value
                for key, value in self._metrics.items()
                if key != "latencies"
            }

        summary["p95_latency"] = self.get_latency_percentile(95)

        return summary

    def flush(self):

        with self._lock:
            self._save(force=True)

    def reset(self):

        with self._lock:
            self._metrics = self._empty()
            self._save(force=True)


metrics_tracker = MetricsTracker()

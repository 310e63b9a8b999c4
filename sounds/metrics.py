"""JSONL event logger for playback outcomes."""

import json
import logging
import time
from pathlib import Path

log = logging.getLogger(__name__)


class MetricsLogger:
    """Buffered JSONL logger. Write failures never interrupt playback."""

    def __init__(self, metrics_config: dict | None = None):
        metrics_config = metrics_config or {}
        self._enabled = bool(metrics_config.get("enabled", False))
        self._file_path = Path(metrics_config.get("file", "metrics.jsonl"))
        try:
            flush_interval = int(metrics_config.get("flush_interval", 10))
        except (TypeError, ValueError):
            flush_interval = 10
        self._flush_interval = max(1, flush_interval)

        self._buffer: list[str] = []
        self._event_count = 0
        self._write_error_count = 0
        self._last_warn_s = 0.0
        self._warn_interval_s = 30.0

        if self._enabled:
            try:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError:
                self._enabled = False
                self._warn(f"metrics path {self._file_path} is not writable; disabling metrics")

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def write_error_count(self) -> int:
        return self._write_error_count

    def log(self, event_type: str, **data) -> None:
        """Record an event with a timestamp."""
        if not self._enabled:
            return

        entry = {"timestamp": time.time(), "event": event_type, **data}
        try:
            line = json.dumps(entry, default=lambda o: float(o))
        except (TypeError, ValueError, OverflowError):
            self._warn(f"metrics serialization failed; dropping {event_type} event")
            return

        self._buffer.append(line)
        self._event_count += 1
        if self._event_count % self._flush_interval == 0:
            self.flush()

    def flush(self) -> None:
        """Write buffered events to disk, dropping them on failure."""
        if not self._buffer:
            return
        try:
            with open(self._file_path, "a") as f:
                for line in self._buffer:
                    f.write(line + "\n")
        except (OSError, ValueError) as e:
            self._write_error_count += 1
            self._warn(f"metrics flush failed; dropping {len(self._buffer)} events: {e}")
        self._buffer.clear()

    def _warn(self, message: str) -> None:
        """Log at most one warning per interval."""
        now = time.monotonic()
        if self._last_warn_s and now - self._last_warn_s < self._warn_interval_s:
            return
        self._last_warn_s = now
        log.warning(message)

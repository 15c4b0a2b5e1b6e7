#!/usr/bin/env python3
"""Changelog run metrics (counters and timers) appended as JSONL.

One record per line under ``Config.METRICS_ROOT``. Only counts and short
labels are recorded, never commit text.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Mapping

from configs.config import Config

logger = logging.getLogger(__name__)

MAX_LABEL_CHARS = 80


def _log_path() -> Path:
    root = Path(Config.METRICS_ROOT)
    root.mkdir(parents=True, exist_ok=True)
    return root / "changelog_metrics.log"


def _append(record: Dict[str, Any]) -> None:
    line = json.dumps(record, separators=(",", ":")) + "\n"
    # Write failures are logged, never raised.
    try:
        with open(_log_path(), "a", encoding="utf-8") as f:
            f.write(line)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        logger.warning(f"Could not write metric {record.get('metric')} under {Config.METRICS_ROOT}: {e}")


def _clip(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_LABEL_CHARS:
        return value[:MAX_LABEL_CHARS] + "..."
    return value


def incr(name: str, value: Any = 1, **labels) -> None:
    if not Config.METRICS_ENABLED:
        return
    record: Dict[str, Any] = {"ts": int(time.time()), "metric": name, "value": value}
    record.update({k: _clip(v) for k, v in labels.items()})
    _append(record)


def incr_each(name: str, counts: Mapping[str, int], *, label: str = "key", **labels) -> None:
    """Emit one counter record per entry of ``counts``, tagged with ``label``."""
    for key, value in counts.items():
        incr(name, value, **{label: key}, **labels)


class Timer:
    """Context manager recording ``<name>.latency_s`` and whether the block raised."""

    def __init__(self, name: str, **labels):
        self.name = name
        self.labels = labels
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        elapsed = time.perf_counter() - self._t0
        incr(f"{self.name}.latency_s", round(elapsed, 6), ok=exc_type is None, **self.labels)
        return False

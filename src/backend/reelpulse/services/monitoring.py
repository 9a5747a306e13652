from __future__ import annotations

import logging
import threading
from typing import Mapping

from statsd import StatsClient

from reelpulse.core.config import Settings

logger = logging.getLogger(__name__)

_CLIENT: StatsClient | None = None
_CLIENT_LOCK = threading.Lock()


def configure_metrics(settings: Settings) -> StatsClient | None:
    """Create the StatsD client when ``STATSD_HOST`` is set; metrics stay log-only otherwise."""
    global _CLIENT
    with _CLIENT_LOCK:
        _CLIENT = None
        if not settings.statsd_host:
            return None
        try:
            _CLIENT = StatsClient(host=settings.statsd_host, port=settings.statsd_port, prefix=settings.statsd_prefix)
        except Exception as exc:  # pragma: no cover - DNS / socket failures
            logger.warning(
                "Unable to initialize StatsD client (%s:%s): %s", settings.statsd_host, settings.statsd_port, exc
            )
    return _CLIENT


def _format_tags(tags: Mapping[str, str] | None) -> str:
    if not tags:
        return ""
    return " " + " ".join(f"{key}={value}" for key, value in sorted(tags.items()))


def _emit(kind: str, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
    client = _CLIENT
    if client is not None:
        try:
            if kind == "counter":
                client.incr(name, value)
            elif kind == "timing":
                client.timing(name, value)
            else:
                client.gauge(name, value)
        except Exception as exc:  # pragma: no cover - UDP send failures
            logger.debug("StatsD %s emit failed for %s: %s", kind, name, exc)
    logger.debug("metric %s %s=%.4f%s", kind, name, value, _format_tags(tags))


def record_strategy(strategy: str, outcome: str, latency_ms: float | None = None) -> None:
    """Outcome is one of ``ok``, ``failed``, ``timeout`` or ``skipped``."""
    tags = {"strategy": strategy}
    _emit("counter", f"sentiment.strategy.{strategy}.{outcome}", 1.0, tags)
    if latency_ms is not None:
        _emit("timing", f"sentiment.strategy.{strategy}.latency_ms", latency_ms, tags)


def record_transcript(platform: str, found: bool) -> None:
    outcome = "found" if found else "missing"
    _emit("counter", f"transcript.{platform}.{outcome}", 1.0, {"platform": platform})


def record_batch(total_videos: int, failed_videos: int, processing_time_ms: float) -> None:
    _emit("counter", "batch.videos", float(total_videos))
    _emit("counter", "batch.videos.failed", float(failed_videos))
    _emit("timing", "batch.processing_ms", processing_time_ms)

"""Structured JSONL scan trace utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class TraceEvent:
    """One step of a scan, as written to the trace log."""

    timestamp: str
    event: str
    path: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_metadata(metadata: dict[str, object]) -> dict[str, object]:
    """Keep scalar values and summarize containers so every event stays one flat line."""
    sanitized: dict[str, object] = {}
    for key in sorted(metadata.keys()):
        value = metadata[key]
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, Path):
            sanitized[key] = str(value)
            continue
        if isinstance(value, (list, tuple)):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value.keys())
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlTraceLogger:
    """Append-only JSONL trace logger and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def record(self, event: str, path: str | None = None, **metadata: object) -> TraceEvent:
        """Build, append and return an event stamped with the current time."""
        trace_event = TraceEvent(
            timestamp=utc_timestamp(),
            event=event,
            path=path,
            metadata=sanitize_metadata(metadata),
        )
        self.append(trace_event)
        return trace_event

    def append(self, event: TraceEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(self, limit: int = 50, event: str | None = None) -> list[dict[str, object]]:
        """Read the most recent events, optionally only those of one kind."""
        if limit < 1:
            return []
        entries: list[dict[str, object]] = []
        if not self._path.exists():
            return entries
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if event is not None and record.get("event") != event:
                    continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]

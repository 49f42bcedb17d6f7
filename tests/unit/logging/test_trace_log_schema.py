from __future__ import annotations

import io
import json
from pathlib import Path

from dupscan.config import (
    CliOverrides,
    DigestConfig,
    IndexConfig,
    ScanConfig,
    apply_cli_overrides,
    default_config,
)
from dupscan.engine import HashlibDigestProvider
from dupscan.logging import JsonlTraceLogger
from dupscan.scan import ScanReporter, Scanner


def _scan_with_trace(tmp_path: Path) -> Path:
    tree = tmp_path / "tree"
    tree.mkdir(exist_ok=True)
    (tree / "a").write_text("same", encoding="utf-8")
    (tree / "b").write_text("same", encoding="utf-8")
    trace_path = tmp_path / "logs" / "trace.jsonl"
    config = apply_cli_overrides(default_config(), CliOverrides(trace_log=trace_path))
    reporter = ScanReporter(io.StringIO(), trace=JsonlTraceLogger(trace_path))
    Scanner(config=config, reporter=reporter).scan(str(tree))
    return trace_path


def test_trace_log_writes_jsonl_schema(tmp_path: Path) -> None:
    trace_path = _scan_with_trace(tmp_path)

    lines = trace_path.read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]

    assert all(set(event.keys()) == {"event", "metadata", "path", "timestamp"} for event in events)
    assert all(event["timestamp"].endswith("Z") for event in events)
    assert events[0]["event"] == "scan_started"
    assert events[0]["metadata"] == {
        "index_bucket_count": 1049,
        "digest_backend": "hashlib",
        "digest_algorithm": "sha256",
        "digest_chunk_bytes": 131072,
        "digest_command_length": 0,
        "output_verbose": False,
        "output_dry_run": False,
        "output_trace_log": str(tmp_path / "logs" / "trace.jsonl"),
    }
    assert events[-1]["event"] == "scan_finished"
    assert events[-1]["path"] is None
    assert events[-1]["metadata"]["duplicates"] == 1


def test_trace_log_records_duplicate_pair(tmp_path: Path) -> None:
    trace_path = _scan_with_trace(tmp_path)
    logger = JsonlTraceLogger(trace_path)

    duplicates = logger.read(event="duplicate")

    assert len(duplicates) == 1
    record = duplicates[0]
    assert record["path"] == str(tmp_path / "tree" / "b")
    assert record["metadata"]["original"] == str(tmp_path / "tree" / "a")
    assert record["metadata"]["size"] == 4
    assert isinstance(record["metadata"]["digest"], str)


def test_trace_log_is_append_only_across_scans(tmp_path: Path) -> None:
    trace_path = _scan_with_trace(tmp_path)
    first_count = len(trace_path.read_text(encoding="utf-8").splitlines())

    _scan_with_trace(tmp_path)

    lines = trace_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == first_count * 2
    assert len(JsonlTraceLogger(trace_path).read(limit=1000, event="scan_started")) == 2


def test_scan_started_flattens_config_snapshot(tmp_path: Path) -> None:
    tree = tmp_path / "tree"
    tree.mkdir()
    trace_path = tmp_path / "trace.jsonl"
    config = ScanConfig(
        index=IndexConfig(bucket_count=7),
        digest=DigestConfig(backend="command", command=("sha256", "-q")),
        dry_run=True,
    )
    reporter = ScanReporter(io.StringIO(), trace=JsonlTraceLogger(trace_path))

    Scanner(config=config, digest_provider=HashlibDigestProvider(), reporter=reporter).scan(
        str(tree)
    )

    started = JsonlTraceLogger(trace_path).read(event="scan_started")[0]
    assert started["path"] == str(tree)
    assert started["metadata"]["index_bucket_count"] == 7
    assert started["metadata"]["digest_backend"] == "command"
    assert started["metadata"]["digest_command_length"] == 2
    assert started["metadata"]["output_dry_run"] is True
    assert started["metadata"]["output_trace_log"] is None

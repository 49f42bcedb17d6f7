"""Human-readable scan output and optional JSONL tracing."""

from __future__ import annotations

from typing import TextIO

from dupscan.config import ScanConfig
from dupscan.engine.models import DuplicateReport, Entry
from dupscan.logging import JsonlTraceLogger
from dupscan.scan.models import ScanProfile


class ScanReporter:
    """Writes duplicate lines always and diagnostics only when verbose.

    Doubles as the index observer so lookup traces share one output stream.
    """

    def __init__(
        self,
        out_stream: TextIO,
        verbose: bool = False,
        trace: JsonlTraceLogger | None = None,
    ) -> None:
        self._out = out_stream
        self._verbose = verbose
        self._trace = trace

    @property
    def verbose(self) -> bool:
        return self._verbose

    def scan_started(self, root: str, config: ScanConfig) -> None:
        if config.dry_run:
            self._chat("Dry run: no files will be modified.")
        if self._trace is not None:
            self._trace.record("scan_started", root, **_flatten_snapshot(config.to_public_dict()))

    def directory(self, path: str) -> None:
        self._chat(f"Directory: {path}")
        if self._trace is not None:
            self._trace.record("directory", path)

    def symlink_skipped(self, path: str) -> None:
        self._chat(f"Ignoring a symlink ({path}).")
        if self._trace is not None:
            self._trace.record("symlink_skipped", path)

    def regular_file(self, entry: Entry) -> None:
        self._chat(f"Regular file: {entry.path}, size: {entry.size}.")
        if self._trace is not None:
            self._trace.record(
                "regular_file",
                entry.path,
                size=entry.size,
                device=entry.device,
                inode=entry.inode,
                link_count=entry.link_count,
            )

    def lookup(self, entry: Entry, bucket: int) -> None:
        self._chat(f"Search for file: {entry.path} (size:{entry.size},bucket:{bucket}).")
        if self._trace is not None:
            self._trace.record("lookup", entry.path, size=entry.size, bucket=bucket)

    def size_match(self, candidate: Entry, node: Entry) -> None:
        self._chat(f"Matches (size) for {node.path}.")
        if self._trace is not None:
            self._trace.record("size_match", candidate.path, original=node.path, size=node.size)

    def digest_match(self, candidate: Entry, node: Entry) -> None:
        self._chat("Matches (hash).")

    def duplicate(self, report: DuplicateReport) -> None:
        """Emit the duplicate line regardless of verbosity."""
        self._out.write(report.format_line())
        self._out.write("\n")
        if self._trace is not None:
            self._trace.record(
                "duplicate",
                report.duplicate_path,
                original=report.original_path,
                size=report.size,
                digest=report.digest,
            )

    def summary(self, profile: ScanProfile) -> None:
        self._chat(
            f"Scanned {profile.regular_files} files in {profile.directories} directories: "
            f"{profile.duplicates} duplicates, {profile.duplicate_bytes} duplicate bytes, "
            f"{profile.digests_computed} digests computed."
        )
        if self._trace is not None:
            self._trace.record(
                "scan_finished",
                None,
                directories=profile.directories,
                regular_files=profile.regular_files,
                empty_files=profile.empty_files,
                symlinks_skipped=profile.symlinks_skipped,
                duplicates=profile.duplicates,
                duplicate_bytes=profile.duplicate_bytes,
                digests_computed=profile.digests_computed,
                retained_entries=profile.retained_entries,
                entry_slots=profile.entry_slots,
            )

    def _chat(self, line: str) -> None:
        if not self._verbose:
            return
        self._out.write(line)
        self._out.write("\n")


def _flatten_snapshot(snapshot: dict[str, object]) -> dict[str, object]:
    """Turn ``{"digest": {"backend": ...}}`` into ``{"digest_backend": ...}``.

    Lists are recorded by length only, like other sequences in the trace log.
    """
    flat: dict[str, object] = {}
    for section, values in snapshot.items():
        if not isinstance(values, dict):
            flat[section] = values
            continue
        for key, value in values.items():
            if isinstance(value, list):
                flat[f"{section}_{key}_length"] = len(value)
            else:
                flat[f"{section}_{key}"] = value
    return flat

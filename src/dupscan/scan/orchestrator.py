"""Feed discovered files through the duplicate engine."""

from __future__ import annotations

import io
import time
from dataclasses import asdict

from dupscan.config import ScanConfig, default_config
from dupscan.engine import DigestProvider, DuplicateEngine, build_digest_provider
from dupscan.engine.models import DuplicateReport
from dupscan.scan.discovery import KIND_DIRECTORY, KIND_SYMLINK, walk_tree
from dupscan.scan.models import ScanProfile, ScanResult
from dupscan.scan.reporting import ScanReporter


class Scanner:
    """Runs one or more independent scans; each scan gets a fresh engine."""

    def __init__(
        self,
        config: ScanConfig | None = None,
        digest_provider: DigestProvider | None = None,
        reporter: ScanReporter | None = None,
    ) -> None:
        self._config = config or default_config()
        self._digest_provider = digest_provider or build_digest_provider(self._config.digest)
        self._reporter = reporter or ScanReporter(io.StringIO(), verbose=False)

    @property
    def config(self) -> ScanConfig:
        return self._config

    def scan(self, root: str, profile: dict[str, object] | None = None) -> ScanResult:
        """Scan ``root`` and return duplicates in the order they were found.

        Any ScanError propagates; reports already written stay valid.
        """
        started = time.perf_counter()
        reporter = self._reporter
        engine = DuplicateEngine(
            digest_provider=self._digest_provider,
            bucket_count=self._config.index.bucket_count,
            observer=reporter,
        )
        reports: list[DuplicateReport] = []
        directories = 0
        regular_files = 0
        empty_files = 0
        symlinks_skipped = 0
        duplicate_bytes = 0

        reporter.scan_started(root, self._config)
        for item in walk_tree(root):
            if item.kind == KIND_DIRECTORY:
                directories += 1
                reporter.directory(item.path)
                continue
            if item.kind == KIND_SYMLINK:
                symlinks_skipped += 1
                reporter.symlink_skipped(item.path)
                continue
            if item.size == 0:
                empty_files += 1
                continue
            regular_files += 1
            entry = engine.new_entry(
                item.path,
                size=item.size,
                device=item.device,
                inode=item.inode,
                link_count=item.link_count,
            )
            reporter.regular_file(entry)
            report = engine.submit(entry)
            if report is None:
                continue
            reports.append(report)
            duplicate_bytes += report.size
            reporter.duplicate(report)

        scan_profile = ScanProfile(
            directories=directories,
            regular_files=regular_files,
            empty_files=empty_files,
            symlinks_skipped=symlinks_skipped,
            duplicates=len(reports),
            duplicate_bytes=duplicate_bytes,
            digests_computed=engine.index.digests_computed,
            retained_entries=engine.index.retained_count,
            entry_slots=engine.allocator.capacity,
            total_seconds=time.perf_counter() - started,
        )
        reporter.summary(scan_profile)
        if profile is not None:
            profile.update(asdict(scan_profile))
        return ScanResult(root=root, reports=tuple(reports), profile=scan_profile)

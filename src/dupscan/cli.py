"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from dupscan.config import CliOverrides, load_effective_config
from dupscan.engine import build_digest_provider
from dupscan.errors import ConfigError, ScanError
from dupscan.logging import JsonlTraceLogger
from dupscan.scan import ScanReporter, Scanner

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for a scan invocation."""
    parser = argparse.ArgumentParser(
        prog="dupscan",
        description="Scan a directory tree and report duplicate files.",
    )
    parser.add_argument(
        "-n",
        dest="dry_run",
        action="store_true",
        help="dry run: report only, never modify files",
    )
    parser.add_argument("-v", dest="verbose", action="store_true", help="verbose diagnostics")
    parser.add_argument("--config", required=False, default=None, help="TOML config file")
    parser.add_argument(
        "--trace-log", required=False, default=None, help="append JSONL trace events here"
    )
    parser.add_argument("directory")
    return parser


def main(
    argv: list[str] | None = None,
    out_stream: TextIO | None = None,
    err_stream: TextIO | None = None,
) -> int:
    """Entrypoint for the dupscan command; returns the process exit code."""
    out = out_stream or sys.stdout
    err = err_stream or sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        verbose=True if args.verbose else None,
        dry_run=True if args.dry_run else None,
        trace_log=Path(args.trace_log) if args.trace_log is not None else None,
    )
    try:
        config = load_effective_config(
            config_path=Path(args.config) if args.config is not None else None,
            overrides=overrides,
        )
        digest_provider = build_digest_provider(config.digest)
    except ConfigError as exc:
        err.write(f"dupscan: {exc}\n")
        return EXIT_USAGE_ERROR

    try:
        trace = JsonlTraceLogger(config.trace_log) if config.trace_log is not None else None
        reporter = ScanReporter(out, verbose=config.verbose, trace=trace)
        scanner = Scanner(config=config, digest_provider=digest_provider, reporter=reporter)
        scanner.scan(args.directory)
    except ScanError as exc:
        out.flush()
        err.write(f"dupscan: {exc}\n")
        return EXIT_RUNTIME_ERROR
    except OSError as exc:
        out.flush()
        err.write(f"dupscan: {exc.filename or ''}: {exc.strerror or exc}\n")
        return EXIT_RUNTIME_ERROR
    return EXIT_OK

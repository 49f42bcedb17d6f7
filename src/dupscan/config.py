"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import hashlib
import tomllib
from dataclasses import dataclass
from pathlib import Path

from dupscan.errors import ConfigError

DEFAULT_BUCKET_COUNT = 1049
BUCKET_COUNT_CAP = 1_000_003
DEFAULT_CHUNK_BYTES = 1024 * 128
CHUNK_BYTES_CAP = 16 * 1024 * 1024

DIGEST_BACKENDS = ("hashlib", "command")
SUPPORTED_ALGORITHMS = tuple(
    sorted(name for name in hashlib.algorithms_guaranteed if not name.startswith("shake_"))
)


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Duplicate index sizing."""

    bucket_count: int = DEFAULT_BUCKET_COUNT


@dataclass(slots=True, frozen=True)
class DigestConfig:
    """Digest provider selection.

    An empty ``command`` means the platform default SHA-256 command.
    """

    backend: str = "hashlib"
    algorithm: str = "sha256"
    chunk_bytes: int = DEFAULT_CHUNK_BYTES
    command: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Fully merged scan configuration."""

    index: IndexConfig
    digest: DigestConfig
    verbose: bool = False
    dry_run: bool = False
    trace_log: Path | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "index": {"bucket_count": self.index.bucket_count},
            "digest": {
                "backend": self.digest.backend,
                "algorithm": self.digest.algorithm,
                "chunk_bytes": self.digest.chunk_bytes,
                "command": list(self.digest.command),
            },
            "output": {
                "verbose": self.verbose,
                "dry_run": self.dry_run,
                "trace_log": str(self.trace_log) if self.trace_log is not None else None,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    verbose: bool | None = None
    dry_run: bool | None = None
    trace_log: Path | None = None


def default_config() -> ScanConfig:
    """Build the default scan configuration."""
    return ScanConfig(index=IndexConfig(), digest=DigestConfig())


def load_config_file(config_path: Path | None) -> dict[str, object]:
    """Load a TOML config file; ``None`` means no file."""
    if config_path is None:
        return {}
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Config file {config_path} is not valid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Config file {config_path} could not be read: {exc.strerror}") from exc
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"Config field '{name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ConfigError(f"Config field '{name}' must contain only non-empty strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_choice(value: object, name: str, default: str, choices: tuple[str, ...]) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in choices:
        raise ConfigError(f"Config field '{name}' must be one of: {', '.join(choices)}.")
    return value


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ConfigError(f"Config field '{name}' must be <= {cap}.")
    return value


def merge_config(
    base: ScanConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> ScanConfig:
    """Merge defaults, config file, then command-line overrides."""
    index_payload = _get_table(file_payload, "index")
    digest_payload = _get_table(file_payload, "digest")
    output_payload = _get_table(file_payload, "output")

    bucket_count = _optional_positive_int_with_cap(
        index_payload.get("bucket_count"),
        "index.bucket_count",
        base.index.bucket_count,
        BUCKET_COUNT_CAP,
    )

    backend = _optional_choice(
        digest_payload.get("backend"), "digest.backend", base.digest.backend, DIGEST_BACKENDS
    )
    algorithm = _optional_choice(
        digest_payload.get("algorithm"),
        "digest.algorithm",
        base.digest.algorithm,
        SUPPORTED_ALGORITHMS,
    )
    chunk_bytes = _optional_positive_int_with_cap(
        digest_payload.get("chunk_bytes"),
        "digest.chunk_bytes",
        base.digest.chunk_bytes,
        CHUNK_BYTES_CAP,
    )
    command = base.digest.command
    if "command" in digest_payload:
        command = _tuple_of_strings(digest_payload["command"], "digest.command")
        if not command:
            raise ConfigError("Config field 'digest.command' must not be empty.")

    verbose = _optional_bool(output_payload.get("verbose"), "output.verbose", base.verbose)
    trace_log = base.trace_log
    if "trace_log" in output_payload:
        raw_trace_log = output_payload["trace_log"]
        if not isinstance(raw_trace_log, str) or not raw_trace_log:
            raise ConfigError("Config field 'output.trace_log' must be a non-empty string.")
        trace_log = Path(raw_trace_log)

    merged = ScanConfig(
        index=IndexConfig(bucket_count=bucket_count),
        digest=DigestConfig(
            backend=backend,
            algorithm=algorithm,
            chunk_bytes=chunk_bytes,
            command=command,
        ),
        verbose=verbose,
        dry_run=base.dry_run,
        trace_log=trace_log,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ScanConfig, overrides: CliOverrides) -> ScanConfig:
    """Apply command-line overrides at highest precedence."""
    return ScanConfig(
        index=config.index,
        digest=config.digest,
        verbose=overrides.verbose if overrides.verbose is not None else config.verbose,
        dry_run=overrides.dry_run if overrides.dry_run is not None else config.dry_run,
        trace_log=overrides.trace_log or config.trace_log,
    )


def load_effective_config(
    config_path: Path | None = None, overrides: CliOverrides | None = None
) -> ScanConfig:
    """Load effective config using merge order defaults -> file -> overrides."""
    payload = load_config_file(config_path)
    return merge_config(default_config(), payload, overrides or CliOverrides())

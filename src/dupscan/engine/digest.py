"""Content digest providers used to confirm equal-size candidates."""

from __future__ import annotations

import hashlib
import subprocess
import sys
from pathlib import Path
from typing import Protocol

from dupscan.config import DEFAULT_CHUNK_BYTES, SUPPORTED_ALGORITHMS, DigestConfig
from dupscan.errors import DigestError


def default_digest_command() -> tuple[str, ...]:
    """Return the platform SHA-256 command that prints the bare digest first."""
    if sys.platform.startswith("freebsd"):
        return ("sha256", "-q")
    return ("sha256sum",)


class DigestProvider(Protocol):
    """Computes a deterministic, fixed-length printable digest of a file."""

    def digest(self, path: str) -> str:
        """Return the digest for ``path`` or raise DigestError."""


class HashlibDigestProvider:
    """Hash files in-process with chunked reads."""

    def __init__(self, algorithm: str = "sha256", chunk_bytes: int = DEFAULT_CHUNK_BYTES) -> None:
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported digest algorithm: {algorithm}")
        if chunk_bytes < 1:
            raise ValueError("chunk_bytes must be a positive integer.")
        self._algorithm = algorithm
        self._chunk_bytes = chunk_bytes

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def digest(self, path: str) -> str:
        digest = hashlib.new(self._algorithm)
        try:
            with Path(path).open("rb") as handle:
                while True:
                    chunk = handle.read(self._chunk_bytes)
                    if not chunk:
                        break
                    digest.update(chunk)
        except OSError as exc:
            raise DigestError(path, f"Unable to read file for hashing: {exc.strerror}") from exc
        return digest.hexdigest()


class CommandDigestProvider:
    """Hash files by running an external command such as ``sha256sum``.

    The file is fed to the command on stdin, so the file name never reaches
    its argv or its output. The first whitespace-delimited token of stdout is
    taken as the digest.
    """

    def __init__(self, command: tuple[str, ...] | None = None) -> None:
        resolved = tuple(command) if command else default_digest_command()
        if not resolved or not all(isinstance(part, str) and part for part in resolved):
            raise ValueError("Digest command must be a non-empty sequence of strings.")
        self._command = resolved

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def digest(self, path: str) -> str:
        try:
            handle = Path(path).open("rb")
        except OSError as exc:
            raise DigestError(path, f"Unable to open file for hashing: {exc.strerror}") from exc
        try:
            with handle:
                completed = subprocess.run(
                    list(self._command),
                    stdin=handle,
                    capture_output=True,
                    text=True,
                    check=False,
                )
        except OSError as exc:
            raise DigestError(path, f"Unable to run {self._command[0]}: {exc.strerror}") from exc
        if completed.returncode != 0:
            detail = completed.stderr.strip() or f"exit status {completed.returncode}"
            raise DigestError(path, f"Hash command failed ({detail}).")
        tokens = completed.stdout.split()
        if not tokens:
            raise DigestError(path, "Hash command produced no output.")
        return tokens[0]


def build_digest_provider(config: DigestConfig) -> DigestProvider:
    """Create the provider selected by configuration."""
    if config.backend == "command":
        return CommandDigestProvider(command=config.command)
    return HashlibDigestProvider(algorithm=config.algorithm, chunk_bytes=config.chunk_bytes)

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from dupscan.cli import EXIT_OK, EXIT_RUNTIME_ERROR, EXIT_USAGE_ERROR, main


def _run(argv: list[str]) -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    code = main(argv, out_stream=out, err_stream=err)
    return code, out.getvalue(), err.getvalue()


def test_clean_scan_exits_zero(tmp_path: Path) -> None:
    (tmp_path / "only").write_text("unique", encoding="utf-8")

    code, out, err = _run([str(tmp_path)])

    assert code == EXIT_OK == 0
    assert out == ""
    assert err == ""


def test_missing_directory_exits_one(tmp_path: Path) -> None:
    missing = tmp_path / "gone"

    code, _, err = _run([str(missing)])

    assert code == EXIT_RUNTIME_ERROR == 1
    assert err.startswith(f"dupscan: {missing}: ")


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires POSIX FIFOs")
def test_special_file_exits_one_after_reporting_earlier_duplicates(tmp_path: Path) -> None:
    (tmp_path / "a").write_text("copy", encoding="utf-8")
    (tmp_path / "b").write_text("copy", encoding="utf-8")
    os.mkfifo(tmp_path / "fifo")

    code, out, err = _run([str(tmp_path)])

    assert code == 1
    assert out == f">>> DUP file: {tmp_path / 'b'}. Original: {tmp_path / 'a'}.\n"
    assert "Can't handle file type 'fifo'" in err
    assert str(tmp_path / "fifo") in err


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["one", "two"],
        ["-x", "dir"],
        ["--bogus", "dir"],
    ],
)
def test_usage_errors_exit_two(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv, out_stream=io.StringIO(), err_stream=io.StringIO())

    assert excinfo.value.code == EXIT_USAGE_ERROR == 2
    assert "usage: dupscan" in capsys.readouterr().err


def test_invalid_config_exits_two(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text("[index]\nbucket_count = -1\n", encoding="utf-8")
    tree = tmp_path / "tree"
    tree.mkdir()

    code, out, err = _run(["--config", str(config_path), str(tree)])

    assert code == 2
    assert out == ""
    assert "index.bucket_count" in err


def test_digest_failure_exits_one(tmp_path: Path) -> None:
    config_path = tmp_path / "cmd.toml"
    config_path.write_text(
        '[digest]\nbackend = "command"\ncommand = ["dupscan-no-such-hash-tool"]\n',
        encoding="utf-8",
    )
    tree = tmp_path / "tree"
    tree.mkdir()
    (tree / "a").write_text("xx", encoding="utf-8")
    (tree / "b").write_text("yy", encoding="utf-8")

    code, out, err = _run(["--config", str(config_path), str(tree)])

    assert code == 1
    assert out == ""
    assert "dupscan-no-such-hash-tool" in err
    assert str(tree / "b") in err

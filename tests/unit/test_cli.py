# SPDX-License-Identifier: Apache-2.0
"""`vecpack` command line: encode, decode, hash, version."""
from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vecpack import encode
from vecpack.cli import app, main
from vecpack.version import __version__

runner = CliRunner()

SAMPLE = '{"b": 2, "a": [1, "x"]}'
SAMPLE_HEX = "070102050101610601020301010501017805010162030102"


def test_encode_from_stdin() -> None:
    result = runner.invoke(app, ["encode"], input=SAMPLE)
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == SAMPLE_HEX


def test_encode_from_file(tmp_path: Path) -> None:
    p = tmp_path / "v.json"
    p.write_text(SAMPLE, encoding="utf-8")
    result = runner.invoke(app, ["encode", str(p)])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == SAMPLE_HEX


def test_encode_raw_bytes_marker() -> None:
    result = runner.invoke(app, ["encode"], input='{"$bytes": "00ff"}')
    assert result.exit_code == 0, result.output
    assert bytes.fromhex(result.stdout.strip()) == encode(b"\x00\xff")


def test_encode_float_fails_with_code() -> None:
    result = runner.invoke(app, ["encode"], input="[1.5]")
    assert result.exit_code == 1
    assert "unsupported_type" in result.output


def test_encode_respects_max_depth() -> None:
    result = runner.invoke(app, ["--max-depth", "2", "encode"], input="[[[[1]]]]")
    assert result.exit_code == 1
    assert "max_depth_exceeded" in result.output


def test_decode_text() -> None:
    result = runner.invoke(app, ["decode", "--text", SAMPLE_HEX])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"a": [1, "x"], "b": 2}


def test_decode_raw_keys_use_map_form() -> None:
    result = runner.invoke(app, ["decode", "0x" + SAMPLE_HEX])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "$map": [
            [{"$bytes": "61"}, [1, {"$bytes": "78"}]],
            [{"$bytes": "62"}, 2],
        ]
    }


def test_decode_integer_keys_use_map_form() -> None:
    hexed = encode({1: True, 2: None}).hex()
    result = runner.invoke(app, ["decode", hexed])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"$map": [[1, True], [2, None]]}


def test_decode_rejects_non_canonical() -> None:
    result = runner.invoke(app, ["decode", "0380"])
    assert result.exit_code == 1
    assert "noncanonical_zero" in result.output


def test_decode_rejects_trailing_bytes_from_stdin() -> None:
    result = runner.invoke(app, ["decode"], input="0000\n")
    assert result.exit_code == 1
    assert "trailing_bytes" in result.output


def test_decode_rejects_non_hex() -> None:
    result = runner.invoke(app, ["decode", "zz"])
    assert result.exit_code != 0
    assert "not hex" in result.output


@pytest.mark.parametrize(
    "digest_name, fn",
    [
        ("sha256", hashlib.sha256),
        ("sha3_256", hashlib.sha3_256),
    ],
)
def test_hash(digest_name, fn) -> None:
    result = runner.invoke(app, ["hash", "--digest", digest_name], input=SAMPLE)
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == fn(bytes.fromhex(SAMPLE_HEX)).hexdigest()


def test_hash_digest_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VECPACK_DIGEST", "blake2b_256")
    result = runner.invoke(app, ["hash"], input=SAMPLE)
    assert result.exit_code == 0, result.output
    expected = hashlib.blake2b(bytes.fromhex(SAMPLE_HEX), digest_size=32).hexdigest()
    assert result.stdout.strip() == expected


def test_hash_unknown_digest() -> None:
    result = runner.invoke(app, ["hash", "--digest", "md5"], input=SAMPLE)
    assert result.exit_code == 1
    assert '"code": "config"' in result.output


def test_bad_config_fails_early() -> None:
    result = runner.invoke(app, ["--log-format", "xml", "version"])
    assert result.exit_code == 1
    assert "log_format" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"vecpack {__version__}"


def test_main_returns_exit_codes(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["decode", SAMPLE_HEX]) == 0
    assert main(["decode", "0380"]) == 1
    captured = capsys.readouterr()
    assert "noncanonical_zero" in captured.err


def test_decode_renders_bool_keys_apart_from_ints() -> None:
    hexed = "07010201030101030101030102"
    result = runner.invoke(app, ["decode", hexed])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"$map": [[True, 1], [1, 2]]}


def test_max_depth_over_ceiling_is_a_config_error() -> None:
    result = runner.invoke(app, ["--max-depth", "100000", "decode", "00"])
    assert result.exit_code == 1
    assert '"code": "config"' in result.output


@pytest.mark.parametrize("body", ["[1]", '{"max_depth": "abc"}', "{"])
def test_bad_config_file_reports_config_error(tmp_path: Path, body: str) -> None:
    p = tmp_path / "c.json"
    p.write_text(body, encoding="utf-8")
    result = runner.invoke(app, ["--config", str(p), "version"])
    assert result.exit_code == 1
    assert '"code": "config"' in result.output

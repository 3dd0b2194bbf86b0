"""
vecpack.cli
===========

`vecpack`: encode JSON to canonical bytes, decode and verify bytes, and hash
encodings from the command line.

JSON mapping
------------
- strings are text byte strings; `{"$bytes": "<hex>"}` is a raw byte string
- integers of any size; floats are rejected (unsupported_type)
- decoded byte strings print as `{"$bytes": "<hex>"}`, or as text with
  `--text` when they are valid UTF-8
- maps print as JSON objects when every key renders as a string, otherwise
  as `{"$map": [[key, value], ...]}`

Examples
--------
    $ echo '{"b": 2, "a": [1, "x"]}' | vecpack encode
    070102050101610601020301010501017805010162030102
    $ vecpack decode --text 0702050161...
    $ vecpack hash --digest sha3_256 payload.json

Configuration
-------------
--config / VECPACK_CONFIG, --max-depth / VECPACK_MAX_DEPTH,
--log-level / VECPACK_LOG_LEVEL, --log-format / VECPACK_LOG_FORMAT.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from . import config as vconfig
from . import logging as vlog
from .encoding import FrozenBool
from .encoding import decode as vp_decode
from .encoding import encode as vp_encode
from .errors import VecPackError
from .utils.hash import digest as vp_digest
from .version import get_version

app = typer.Typer(
    name="vecpack",
    help="Canonical term codec: encode, decode and hash values.",
    no_args_is_help=True,
    add_completion=False,
)

log = vlog.get_logger("vecpack.cli")

__all__ = ["app", "main"]


@app.callback()
def _root(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="TOML or JSON config file.", envvar="VECPACK_CONFIG"
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Maximum nesting depth accepted."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level."),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="json or text."),
) -> None:
    """Resolve configuration and logging for this process."""
    try:
        cfg = vconfig.load(
            config_file, max_depth=max_depth, log_level=log_level, log_format=log_format
        )
    except VecPackError as e:
        _fail(e)
    vlog.configure_from_config(cfg)
    ctx.obj = cfg


# --- JSON <-> value ----------------------------------------------------------


def _from_json(obj: Any) -> Any:
    if isinstance(obj, dict):
        if set(obj) == {"$bytes"} and isinstance(obj["$bytes"], str):
            try:
                return bytes.fromhex(obj["$bytes"])
            except ValueError as e:
                raise typer.BadParameter(f"invalid $bytes hex: {obj['$bytes']!r}") from e
        return {k: _from_json(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_from_json(x) for x in obj]
    return obj


def _to_json(v: Any, text: bool) -> Any:
    if isinstance(v, FrozenBool):
        return v.value
    if isinstance(v, bytes):
        if text:
            try:
                return v.decode("utf-8")
            except UnicodeDecodeError:
                pass
        return {"$bytes": v.hex()}
    if isinstance(v, (list, tuple)):
        return [_to_json(x, text) for x in v]
    if isinstance(v, Mapping):
        pairs = [(_to_json(k, text), _to_json(x, text)) for k, x in v.items()]
        if all(isinstance(k, str) for k, _ in pairs):
            return dict(pairs)
        return {"$map": [[k, x] for k, x in pairs]}
    return v


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_value(source: str) -> Any:
    try:
        return _from_json(json.loads(_read_source(source)))
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"input is not JSON: {e}") from e


def _fail(err: VecPackError) -> NoReturn:
    log.debug("command failed", extra={"code": err.to_dict()["code"]})
    typer.echo(json.dumps(err.to_dict()), err=True)
    raise typer.Exit(code=1)


# --- Commands ----------------------------------------------------------------


@app.command("encode")
def encode_cmd(
    ctx: typer.Context,
    source: str = typer.Argument("-", help="JSON file, or - for stdin."),
) -> None:
    """Encode a JSON value and print the canonical bytes as hex."""
    cfg: vconfig.Config = ctx.obj
    value = _load_value(source)
    try:
        out = vp_encode(value, max_depth=cfg.max_depth)
    except VecPackError as e:
        _fail(e)
    log.debug("encoded value", extra={"size": len(out)})
    typer.echo(out.hex())


@app.command("decode")
def decode_cmd(
    ctx: typer.Context,
    data: str = typer.Argument("-", help="Hex bytes (optional 0x), or - for stdin."),
    text: bool = typer.Option(False, "--text", help="Render UTF-8 byte strings as text."),
) -> None:
    """Decode canonical bytes (rejecting any non-canonical input) and print JSON."""
    cfg: vconfig.Config = ctx.obj
    raw = (sys.stdin.read() if data == "-" else data).strip()
    if raw.startswith(("0x", "0X")):
        raw = raw[2:]
    try:
        buf = bytes.fromhex(raw)
    except ValueError as e:
        raise typer.BadParameter("input is not hex") from e
    try:
        value = vp_decode(buf, max_depth=cfg.max_depth)
    except VecPackError as e:
        _fail(e)
    log.debug("decoded value", extra={"size": len(buf)})
    typer.echo(json.dumps(_to_json(value, text), ensure_ascii=False))


@app.command("hash")
def hash_cmd(
    ctx: typer.Context,
    source: str = typer.Argument("-", help="JSON file, or - for stdin."),
    digest_name: Optional[str] = typer.Option(
        None, "--digest", help="sha256, sha3_256 or blake2b_256."
    ),
) -> None:
    """Print the digest of a JSON value's canonical encoding."""
    cfg: vconfig.Config = ctx.obj
    value = _load_value(source)
    try:
        h = vp_digest(digest_name or cfg.digest, vp_encode(value, max_depth=cfg.max_depth))
    except VecPackError as e:
        _fail(e)
    typer.echo(h.hex())


@app.command("version")
def version() -> None:
    """Print the vecpack version."""
    typer.echo(f"vecpack {get_version()}")


# --- Entrypoint ----------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """Run the CLI and return an exit code."""
    try:
        # Non-standalone click hands typer.Exit codes back as the return value.
        rv = app(prog_name="vecpack", standalone_mode=False, args=argv)
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

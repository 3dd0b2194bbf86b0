"""
vecpack configuration loader.

Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (VECPACK_*)
    3) Config file (TOML or JSON; `config_file` argument or VECPACK_CONFIG)
    4) Built-in defaults (lowest)

Only tooling concerns live here: the nesting limit handed to the codec, the
digest used by `vecpack hash`, and logging. The codec functions themselves
take plain keyword arguments and never read configuration.
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .encoding.term import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT
from .errors import ConfigError
from .utils.hash import DIGESTS

DEFAULT_DIGEST = "sha256"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "text"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_LOG_FORMATS = {"json", "text"}

_ENV_KEYS = {
    "max_depth": "VECPACK_MAX_DEPTH",
    "digest": "VECPACK_DIGEST",
    "log_level": "VECPACK_LOG_LEVEL",
    "log_format": "VECPACK_LOG_FORMAT",
}


@dataclass
class Config:
    max_depth: int = DEFAULT_MAX_DEPTH
    digest: str = DEFAULT_DIGEST
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _env_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip(), 0)
    except ValueError as e:
        err = ConfigError(f"{name} must be int, got {raw!r}", variable=name)
        raise err.with_cause(e) from e


def _as_int(key: str, value: Any) -> int:
    # Files and overrides may hand us ints or numeric strings.
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be int, got bool", key=key)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return _env_int(key, value)
    raise ConfigError(f"{key} must be int, got {type(value).__name__}", key=key)


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {type(value).__name__}", key=key)
    return value.strip()


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError("config file not found", path=str(path))
    suffix = path.suffix.lower()
    if suffix in {".toml", ".tml"}:
        parse = tomllib.load
    elif suffix == ".json":
        parse = json.load
    else:
        raise ConfigError(f"unsupported config format: {suffix}", path=str(path))
    try:
        with path.open("rb") as f:
            data = parse(f)
    except (ValueError, OSError) as e:
        # TOMLDecodeError and JSONDecodeError are both ValueErrors.
        raise ConfigError("config file cannot be parsed", path=str(path)).with_cause(e) from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a table", path=str(path))
    # Allow either a flat file or a [vecpack] table.
    section = data.get("vecpack", data)
    if not isinstance(section, dict):
        raise ConfigError("[vecpack] must be a table", path=str(path))
    return section


def load(config_file: Optional[str | Path] = None, **overrides: Any) -> Config:
    """
    Load configuration. Precedence: overrides > env > file > defaults.

    Unknown keys in files or overrides are rejected so typos surface.
    """
    base: Dict[str, Any] = Config().to_dict()

    path = config_file or os.environ.get("VECPACK_CONFIG")
    if path:
        base.update(_load_file(Path(path).expanduser()))

    for key, var in _ENV_KEYS.items():
        raw = os.environ.get(var)
        if raw is None or raw == "":
            continue
        base[key] = _env_int(var, raw) if key == "max_depth" else raw.strip()

    base.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(base) - set(_ENV_KEYS))
    if unknown:
        raise ConfigError("unknown configuration keys", keys=unknown)

    cfg = Config(
        max_depth=_as_int("max_depth", base["max_depth"]),
        digest=_as_str("digest", base["digest"]).lower(),
        log_level=_as_str("log_level", base["log_level"]).upper(),
        log_format=_as_str("log_format", base["log_format"]).lower(),
    )
    _validate(cfg)
    return cfg


def _validate(cfg: Config) -> None:
    if not 1 <= cfg.max_depth <= MAX_DEPTH_LIMIT:
        raise ConfigError(
            f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}", max_depth=cfg.max_depth
        )
    if cfg.digest not in DIGESTS:
        raise ConfigError(f"unsupported digest {cfg.digest!r}", expected=sorted(DIGESTS))
    if cfg.log_level not in _LOG_LEVELS:
        raise ConfigError(f"unknown log level {cfg.log_level!r}")
    if cfg.log_format not in _LOG_FORMATS:
        raise ConfigError(f"log_format must be json or text, got {cfg.log_format!r}")


__all__ = ["Config", "load", "DEFAULT_DIGEST"]

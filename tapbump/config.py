"""
config.py

Responsibility: Load the optional `tapbump.yml` file into a typed, immutable config.

This implementation intentionally stays conservative:
- Every key has a default matching the clipzero tap, so no file is needed.
- Unknown keys are rejected so typos fail loudly instead of being ignored.
- CLI flags override file values; secrets (the GitHub token) only come from the CLI or env.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from tapbump.errors import TapbumpError

DEFAULT_CONFIG_FILE = "tapbump.yml"
LOG_LEVEL_ENV = "TAPBUMP_LOG_LEVEL"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(TapbumpError, ValueError):
    pass


@dataclass(frozen=True)
class Config:
    """Release settings for one formula in a tap."""

    formula: str = "Formula/clipzero.rb"
    repo: str = "jn3ff/clipzero"
    remote: str = "origin"
    branch: str = "main"
    tag_prefix: str = "v"
    wait_seconds: float = 2
    commit_message: str = "bump to {{ tag }}"
    package: str = "clipzero"
    desc: str = "A simple clipboard manager"
    license: str = "MIT"
    log_level: str = "INFO"

    def with_overrides(self, **overrides: Any) -> "Config":
        """
        Return a copy with every non-None override applied.
        """
        applied = {k: v for k, v in overrides.items() if v is not None}
        return _validated(replace(self, **applied))


_KNOWN_KEYS = frozenset(f.name for f in fields(Config))


def _validated(config: Config) -> Config:
    if not config.repo or config.repo.count("/") != 1:
        raise ConfigError(f"`repo` must look like OWNER/NAME, got {config.repo!r}")
    if not config.formula:
        raise ConfigError("`formula` must not be empty")
    if isinstance(config.wait_seconds, bool):
        raise ConfigError(f"`wait_seconds` must be a number, got {config.wait_seconds!r}")
    try:
        wait = float(config.wait_seconds)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"`wait_seconds` must be a number, got {config.wait_seconds!r}") from e
    if not math.isfinite(wait):
        raise ConfigError(f"`wait_seconds` must be a finite number, got {config.wait_seconds!r}")
    if wait < 0:
        raise ConfigError("`wait_seconds` must not be negative")
    log_level = str(config.log_level).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"`log_level` must be one of {', '.join(LOG_LEVELS)}, got {config.log_level!r}")
    return replace(config, wait_seconds=wait, log_level=log_level)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping/object at the top level.")
    return data


def load_config(path: str | Path | None = None, *, env: dict[str, str] | None = None) -> Config:
    """
    Load configuration.

    - `path` given: the file must exist.
    - `path` omitted: `tapbump.yml` in the working directory is used when present.
    - `TAPBUMP_LOG_LEVEL` in the environment overrides `log_level`.
    """
    environ = os.environ if env is None else env

    if path is not None:
        cfg_path = Path(path)
        if not cfg_path.is_file():
            raise ConfigError(f"Config file does not exist: {cfg_path}")
    else:
        cfg_path = Path(DEFAULT_CONFIG_FILE)

    data = _read_yaml(cfg_path) if cfg_path.is_file() else {}

    unknown = sorted(str(k) for k in data if k not in _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {cfg_path}: {', '.join(unknown)}")

    values = {k: (str(v) if k != "wait_seconds" and v is not None else v) for k, v in data.items()}
    if environ.get(LOG_LEVEL_ENV):
        values["log_level"] = environ[LOG_LEVEL_ENV]

    return _validated(Config(**{k: v for k, v in values.items() if v is not None}))

"""
formula.py

Responsibility: read the current version from, and rewrite release fields in, a Homebrew formula.

Rules:
- Only the `url`, `version` and `sha256` fields are touched; every other line is preserved.
- The `url` field is only replaced when it points at this repository's tag tarballs.
- A field that cannot be found is an error rather than a silent no-op.

This module intentionally does NOT know about git, GitHub, or CLI parsing.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from tapbump.errors import TapbumpError
from tapbump.version import Version, VersionError

logger = logging.getLogger(__name__)

_VERSION_FIELD_RE = re.compile(r'^(\s*version\s+")([^"]*)(")', re.MULTILINE)
_SHA256_FIELD_RE = re.compile(r'^(\s*sha256\s+")([^"]*)(")', re.MULTILINE)


class FormulaError(TapbumpError, RuntimeError):
    pass


def _url_field_re(repo: str) -> re.Pattern[str]:
    return re.compile(
        r'^(\s*url\s+")https://github\.com/' + re.escape(repo) + r'/archive/refs/tags/[^"]*\.tar\.gz(")',
        re.MULTILINE,
    )


def parse_version(text: str) -> Version | None:
    """
    Return the version declared by the first `version "N.N.N"` line, or None.
    """
    m = _VERSION_FIELD_RE.search(text)
    if m is None:
        return None
    try:
        return Version.parse(m.group(2))
    except VersionError:
        return None


def read_version(path: str | Path) -> Version:
    formula_path = Path(path)
    try:
        text = formula_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FormulaError(f"Could not parse current version from {formula_path}") from e

    version = parse_version(text)
    if version is None:
        raise FormulaError(f"Could not parse current version from {formula_path}")
    return version


def _replace_field(text: str, pattern: re.Pattern[str], value: str, field: str) -> str:
    new_text, count = pattern.subn(lambda m: f"{m.group(1)}{value}{m.group(m.lastindex)}", text, count=1)
    if count == 0:
        raise FormulaError(f"Formula has no `{field}` field to update")
    return new_text


def update_formula_text(text: str, *, repo: str, url: str, version: Version, sha256: str) -> str:
    text = _replace_field(text, _url_field_re(repo), url, "url")
    text = _replace_field(text, _VERSION_FIELD_RE, str(version), "version")
    text = _replace_field(text, _SHA256_FIELD_RE, sha256, "sha256")
    return text


def update_formula(path: str | Path, *, repo: str, url: str, version: Version, sha256: str) -> None:
    """
    Rewrite url/version/sha256 in the formula at `path` in place.
    """
    formula_path = Path(path)
    text = formula_path.read_text(encoding="utf-8")
    updated = update_formula_text(text, repo=repo, url=url, version=version, sha256=sha256)
    formula_path.write_text(updated, encoding="utf-8")
    logger.debug("Rewrote %s (%d -> %d bytes)", formula_path, len(text), len(updated))

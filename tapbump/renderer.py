"""
renderer.py

Responsibility: render Jinja2 templates used by a release.

Rules:
- Rendering is strict: an undefined variable is an error, never an empty string.
- Output keeps its trailing newline and uses "\n" line endings.
- The bundled formula template produces a complete formula that `formula.py` can read back.

This module intentionally does NOT know about GitHub, git, or CLI parsing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from tapbump.errors import TapbumpError

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
FORMULA_TEMPLATE = "formula.rb.j2"


class RenderError(TapbumpError, RuntimeError):
    pass


def _environment() -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def render_string(template: str, context: dict[str, Any]) -> str:
    try:
        return _environment().from_string(template).render(**context)
    except TemplateError as e:
        raise RenderError(f"Failed rendering template {template!r}: {e}") from e


def class_name_for(package: str) -> str:
    """
    Homebrew class name for a formula name: `clip-zero` -> `ClipZero`, `clipzero` -> `Clipzero`.
    """
    parts = [p for p in package.replace("_", "-").split("-") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


def render_formula(context: dict[str, Any], *, template_path: str | Path | None = None) -> str:
    """
    Render a formula from the bundled template (or `template_path`).

    Expected context keys:
    - package, repo, desc, license: formula metadata
    - url, version, sha256: release fields
    - class_name: optional, derived from `package` when absent
    """
    path = Path(template_path) if template_path is not None else TEMPLATES_DIR / FORMULA_TEMPLATE
    if not path.is_file():
        raise RenderError(f"Formula template not found: {path}")

    ctx = dict(context)
    if "class_name" not in ctx and "package" in ctx:
        ctx["class_name"] = class_name_for(str(ctx["package"]))

    text = path.read_text(encoding="utf-8")
    try:
        out = _environment().from_string(text).render(**ctx)
    except TemplateError as e:
        raise RenderError(f"Failed rendering formula template: {path.name}: {e}") from e
    return out.replace("\r\n", "\n")

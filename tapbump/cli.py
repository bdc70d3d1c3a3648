"""
cli.py

Responsibility: CLI entrypoint for tapbump.

Commands:
- `bump <patch|minor|major>`: read version -> tag -> push -> checksum -> rewrite formula -> commit -> push
- `current`: print the version the formula declares
- `render`: render a complete formula from the bundled template

This module should orchestrate behavior but keep concerns isolated:
- Version arithmetic: `version.py`
- Formula parsing/rewriting: `formula.py`
- GitHub: `github_client.py`
- git: `git.py`
- Release sequencing: `release.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from tapbump import __version__
from tapbump.config import Config, load_config
from tapbump.errors import TapbumpError
from tapbump.formula import read_version
from tapbump.git import Git
from tapbump.github_client import GitHubClient, tarball_url, validate_sha256
from tapbump.log import configure_logging
from tapbump.release import Releaser, plan_release
from tapbump.renderer import render_formula
from tapbump.version import BUMP_LEVELS, Version

logger = logging.getLogger(__name__)

PROG = "tapbump"


def _config_from_args(args: argparse.Namespace) -> Config:
    config = load_config(args.config).with_overrides(
        formula=args.formula,
        repo=args.repo,
        wait_seconds=getattr(args, "wait", None),
    )
    configure_logging(config.log_level, verbose=bool(args.verbose))
    return config


def bump_cmd(args: argparse.Namespace) -> int:
    config = _config_from_args(args)

    # The formula is read before the level is checked, so a broken formula fails first.
    current = read_version(config.formula)

    if args.level not in BUMP_LEVELS:
        print(f"Usage: {PROG} bump <{'|'.join(BUMP_LEVELS)}>", file=sys.stderr)
        print(f"Current version: {current}", file=sys.stderr)
        return 1

    token = args.github_token or os.environ.get("GITHUB_TOKEN") or None
    releaser = Releaser(
        config,
        git=Git(Path.cwd(), dry_run=bool(args.dry_run)),
        github=GitHubClient(token),
        dry_run=bool(args.dry_run),
        push=not bool(args.no_push),
        sha256=args.sha256,
    )
    releaser.run(plan_release(current, args.level, config))
    return 0


def current_cmd(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    print(read_version(config.formula))
    return 0


def render_cmd(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    version = Version.parse(args.release_version)
    tag = version.tag(config.tag_prefix)

    text = render_formula(
        {
            "package": config.package,
            "repo": config.repo,
            "desc": config.desc,
            "license": config.license,
            "url": tarball_url(config.repo, tag),
            "version": str(version),
            "sha256": validate_sha256(args.sha256),
        },
        template_path=args.template,
    )

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        logger.info("Wrote %s", out)
    else:
        sys.stdout.write(text)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="Config file (default: ./tapbump.yml when present)")
    common.add_argument("--formula", default=None, help="Formula path (overrides config `formula`)")
    common.add_argument("--repo", default=None, help="GitHub OWNER/NAME (overrides config `repo`)")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    p = argparse.ArgumentParser(prog=PROG, description="Bump, tag and publish a Homebrew tap formula release")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("bump", parents=[common], help="Tag a new release and rewrite the formula for it")
    b.add_argument("level", help="patch | minor | major")
    b.add_argument("--dry-run", action="store_true", help="Log what would happen; change nothing")
    b.add_argument("--no-push", action="store_true", help="Tag and commit locally only (requires --sha256)")
    b.add_argument("--sha256", default=None, help="Use this tarball checksum instead of downloading")
    b.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    b.add_argument("--wait", type=float, default=None, help="Seconds to wait after pushing the tag")
    b.set_defaults(func=bump_cmd)

    c = sub.add_parser("current", parents=[common], help="Print the formula's current version")
    c.set_defaults(func=current_cmd)

    r = sub.add_parser("render", parents=[common], help="Render a complete formula from the template")
    r.add_argument("--version", dest="release_version", required=True, help="Release version, e.g. 0.2.0")
    r.add_argument("--sha256", required=True, help="Tarball SHA-256")
    r.add_argument("--template", default=None, help="Template path (default: bundled formula.rb.j2)")
    r.add_argument("--output", default=None, help="Write here instead of stdout")
    r.set_defaults(func=render_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except TapbumpError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

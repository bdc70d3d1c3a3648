"""
release.py

Responsibility: sequence one release of the formula.

High-level flow:
1) Plan: current version + bump level -> new version, tag, tarball URL
2) Tag the release and push the tag
3) Wait for GitHub, then checksum the tag tarball
4) Rewrite url/version/sha256 in the formula
5) Commit the formula and push the branch

Each step raises on failure, so a later step never runs after an earlier one failed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from tapbump.config import Config
from tapbump.errors import TapbumpError
from tapbump.formula import update_formula, update_formula_text
from tapbump.git import Git
from tapbump.github_client import GitHubClient, tarball_url, validate_sha256
from tapbump.renderer import render_string
from tapbump.version import Version

logger = logging.getLogger(__name__)


class ReleaseError(TapbumpError, RuntimeError):
    pass


@dataclass(frozen=True)
class ReleasePlan:
    current: Version
    new: Version
    tag: str
    tarball_url: str


@dataclass(frozen=True)
class Release:
    plan: ReleasePlan
    sha256: str | None
    commit_message: str


def plan_release(current: Version, level: str, config: Config) -> ReleasePlan:
    new = current.bump(level)
    tag = new.tag(config.tag_prefix)
    return ReleasePlan(current=current, new=new, tag=tag, tarball_url=tarball_url(config.repo, tag))


class Releaser:
    def __init__(
        self,
        config: Config,
        *,
        git: Git,
        github: GitHubClient,
        dry_run: bool = False,
        push: bool = True,
        sha256: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.git = git
        self.github = github
        self.dry_run = dry_run
        self.push = push
        self.sha256 = sha256
        self._sleep = sleep

    @property
    def formula_path(self) -> Path:
        return Path(self.config.formula)

    def _preflight(self, plan: ReleasePlan) -> str | None:
        known_sha = validate_sha256(self.sha256) if self.sha256 is not None else None
        if not self.push and known_sha is None and not self.dry_run:
            raise ReleaseError("--no-push leaves the tarball unpublished; pass --sha256 with the expected checksum")

        # Fail before tagging if the formula cannot take the new fields.
        update_formula_text(
            self.formula_path.read_text(encoding="utf-8"),
            repo=self.config.repo,
            url=plan.tarball_url,
            version=plan.new,
            sha256="0" * 64,
        )

        if self.git.local_tag_exists(plan.tag):
            raise ReleaseError(f"Tag {plan.tag} already exists locally")
        if self.push and not self.dry_run and self.github.tag_exists(self.config.repo, plan.tag):
            raise ReleaseError(f"Tag {plan.tag} already exists on GitHub ({self.config.repo})")
        return known_sha

    def _checksum(self, plan: ReleasePlan, known_sha: str | None) -> str | None:
        if known_sha is not None:
            return known_sha
        if self.dry_run:
            logger.info("[dry-run] would fetch SHA256 from %s", plan.tarball_url)
            return None

        logger.info("Waiting for GitHub to process tag...")
        self._sleep(self.config.wait_seconds)
        return self.github.tarball_sha256(plan.tarball_url)

    def run(self, plan: ReleasePlan) -> Release:
        known_sha = self._preflight(plan)
        message = render_string(
            self.config.commit_message,
            {"tag": plan.tag, "version": str(plan.new), "previous": str(plan.current)},
        )
        logger.info("Upgrading: %s -> %s", plan.current, plan.new)

        logger.info("Creating tag %s...", plan.tag)
        self.git.tag(plan.tag)
        if self.push:
            self.git.push(self.config.remote, plan.tag)

        sha256 = self._checksum(plan, known_sha)
        if sha256 is not None:
            logger.info("SHA256: %s", sha256)

        logger.info("Updating %s...", self.formula_path)
        if self.dry_run:
            logger.info("[dry-run] formula left unchanged")
        else:
            update_formula(
                self.formula_path,
                repo=self.config.repo,
                url=plan.tarball_url,
                version=plan.new,
                sha256=sha256,
            )

        logger.info("Committing%s...", " and pushing" if self.push else "")
        self.git.add(self.formula_path)
        self.git.commit(message)
        if self.push:
            self.git.push(self.config.remote, self.config.branch)

        logger.info("Done! Released %s", plan.tag)
        logger.info("Users can now run: brew upgrade %s", self.config.package)
        return Release(plan=plan, sha256=sha256, commit_message=message)

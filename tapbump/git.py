"""
git.py

Responsibility: run the handful of `git` commands a release needs.

Any failing command raises GitError, which stops the release at that step.
In dry-run mode commands are logged and not executed.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from tapbump.errors import TapbumpError

logger = logging.getLogger(__name__)


class GitError(TapbumpError, RuntimeError):
    pass


class Git:
    def __init__(self, cwd: str | Path = ".", *, dry_run: bool = False) -> None:
        self.cwd = Path(cwd)
        self.dry_run = dry_run

    def _run(self, *args: str) -> str:
        """
        Run `git <args>`, returning combined stdout/stderr and raising GitError on failure.
        """
        cmd = ["git", *args]
        if self.dry_run:
            logger.info("[dry-run] %s", " ".join(cmd))
            return ""
        logger.debug("Running: %s", " ".join(cmd))
        try:
            cp = subprocess.run(
                cmd, cwd=str(self.cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found on PATH") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"Command failed: {' '.join(cmd)}\n\n{e.stdout}") from e
        return cp.stdout

    def local_tag_exists(self, name: str) -> bool:
        # Read-only, so it runs even in dry-run mode.
        try:
            cp = subprocess.run(
                ["git", "tag", "--list", name],
                cwd=str(self.cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found on PATH") from e
        return cp.returncode == 0 and name in cp.stdout.split()

    def tag(self, name: str) -> None:
        self._run("tag", name)

    def push(self, remote: str, ref: str) -> None:
        self._run("push", remote, ref)

    def add(self, path: str | Path) -> None:
        self._run("add", str(path))

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)

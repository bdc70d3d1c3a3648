"""
Shared test fixtures: a throwaway tap checkout and in-memory git/GitHub doubles.
"""

from __future__ import annotations

from pathlib import Path

import pytest

FORMULA_TEXT = """class Clipzero < Formula
  desc "A simple clipboard manager"
  homepage "https://github.com/jn3ff/clipzero"
  url "https://github.com/jn3ff/clipzero/archive/refs/tags/v0.1.1.tar.gz"
  version "0.1.1"
  sha256 "afee961455ccc3a98c3e8f285cb11d41d436a07d19f46422104477770d009875"
  license "MIT"

  depends_on "rust" => :build

  def install
    system "cargo", "install", "--root", prefix, "--path", "."
  end
end
"""

NEW_SHA = "0123456789abcdef" * 4


class FakeGit:
    def __init__(self, existing_tags: tuple[str, ...] = ()) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.existing_tags = set(existing_tags)

    def local_tag_exists(self, name: str) -> bool:
        return name in self.existing_tags

    def tag(self, name: str) -> None:
        self.calls.append(("tag", name))

    def push(self, remote: str, ref: str) -> None:
        self.calls.append(("push", remote, ref))

    def add(self, path) -> None:
        self.calls.append(("add", str(path)))

    def commit(self, message: str) -> None:
        self.calls.append(("commit", message))


class FakeGitHub:
    def __init__(self, sha256: str = NEW_SHA, published_tags: tuple[str, ...] = ()) -> None:
        self.sha256 = sha256
        self.published_tags = set(published_tags)
        self.fetched: list[str] = []

    def tag_exists(self, repo: str, tag: str) -> bool:
        return tag in self.published_tags

    def tarball_sha256(self, url: str) -> str:
        self.fetched.append(url)
        return self.sha256


@pytest.fixture
def tap_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A working directory holding Formula/clipzero.rb at version 0.1.1."""

    formula = tmp_path / "Formula" / "clipzero.rb"
    formula.parent.mkdir()
    formula.write_text(FORMULA_TEXT, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TAPBUMP_LOG_LEVEL", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return tmp_path


@pytest.fixture
def formula_path(tap_dir: Path) -> Path:
    return tap_dir / "Formula" / "clipzero.rb"

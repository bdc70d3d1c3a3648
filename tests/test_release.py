import logging
from pathlib import Path

import pytest

from tapbump.config import Config
from tapbump.formula import FormulaError, read_version
from tapbump.github_client import GitHubError
from tapbump.release import ReleaseError, Releaser, plan_release
from tapbump.renderer import RenderError
from tapbump.version import Version

from tests.conftest import NEW_SHA, FakeGit, FakeGitHub

NEW_URL = "https://github.com/jn3ff/clipzero/archive/refs/tags/v0.1.2.tar.gz"


def _releaser(config: Config | None = None, **kwargs):
    git = kwargs.pop("git", FakeGit())
    github = kwargs.pop("github", FakeGitHub())
    sleeps: list[float] = []
    releaser = Releaser(config or Config(), git=git, github=github, sleep=sleeps.append, **kwargs)
    return releaser, git, github, sleeps


def test_plan_release() -> None:
    plan = plan_release(Version(0, 1, 1), "minor", Config())
    assert plan.new == Version(0, 2, 0)
    assert plan.tag == "v0.2.0"
    assert plan.tarball_url == "https://github.com/jn3ff/clipzero/archive/refs/tags/v0.2.0.tar.gz"


def test_full_release(formula_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    releaser, git, github, sleeps = _releaser()
    release = releaser.run(plan_release(read_version(formula_path), "patch", releaser.config))

    assert git.calls == [
        ("tag", "v0.1.2"),
        ("push", "origin", "v0.1.2"),
        ("add", "Formula/clipzero.rb"),
        ("commit", "bump to v0.1.2"),
        ("push", "origin", "main"),
    ]
    assert github.fetched == [NEW_URL]
    assert sleeps == [2]
    assert release.sha256 == NEW_SHA

    text = formula_path.read_text(encoding="utf-8")
    assert f'url "{NEW_URL}"' in text
    assert 'version "0.1.2"' in text
    assert f'sha256 "{NEW_SHA}"' in text

    assert "Upgrading: 0.1.1 -> 0.1.2" in caplog.text
    assert "Done! Released v0.1.2" in caplog.text
    assert "brew upgrade clipzero" in caplog.text


def test_bad_checksum_stops_before_formula_and_commit(formula_path: Path) -> None:
    class BrokenGitHub(FakeGitHub):
        def tarball_sha256(self, url: str) -> str:
            raise GitHubError("Failed to get valid SHA256")

    before = formula_path.read_text(encoding="utf-8")
    releaser, git, _github, _sleeps = _releaser(github=BrokenGitHub())
    with pytest.raises(GitHubError):
        releaser.run(plan_release(Version(0, 1, 1), "patch", releaser.config))

    assert [c[0] for c in git.calls] == ["tag", "push"]
    assert formula_path.read_text(encoding="utf-8") == before


def test_existing_local_tag_refused(formula_path: Path) -> None:
    releaser, git, _github, _sleeps = _releaser(git=FakeGit(existing_tags=("v1.0.0",)))
    with pytest.raises(ReleaseError, match="already exists locally"):
        releaser.run(plan_release(Version(0, 1, 1), "major", releaser.config))
    assert git.calls == []


def test_existing_remote_tag_refused(formula_path: Path) -> None:
    releaser, git, _github, _sleeps = _releaser(github=FakeGitHub(published_tags=("v0.2.0",)))
    with pytest.raises(ReleaseError, match="already exists on GitHub"):
        releaser.run(plan_release(Version(0, 1, 1), "minor", releaser.config))
    assert git.calls == []


def test_unrewritable_formula_refused_before_tagging(formula_path: Path) -> None:
    releaser, git, _github, _sleeps = _releaser(Config(repo="someone/else"))
    with pytest.raises(FormulaError, match="`url`"):
        releaser.run(plan_release(Version(0, 1, 1), "patch", releaser.config))
    assert git.calls == []


def test_bad_commit_template_refused_before_tagging(formula_path: Path) -> None:
    releaser, git, _github, _sleeps = _releaser(Config(commit_message="bump {{ nope }}"))
    with pytest.raises(RenderError):
        releaser.run(plan_release(Version(0, 1, 1), "patch", releaser.config))
    assert git.calls == []


def test_no_push_requires_known_checksum(formula_path: Path) -> None:
    releaser, git, _github, _sleeps = _releaser(push=False)
    with pytest.raises(ReleaseError, match="--sha256"):
        releaser.run(plan_release(Version(0, 1, 1), "patch", releaser.config))
    assert git.calls == []


def test_no_push_with_known_checksum(formula_path: Path) -> None:
    releaser, git, github, sleeps = _releaser(push=False, sha256=NEW_SHA.upper())
    release = releaser.run(plan_release(Version(0, 1, 1), "patch", releaser.config))

    assert [c[0] for c in git.calls] == ["tag", "add", "commit"]
    assert github.fetched == []
    assert sleeps == []
    assert release.sha256 == NEW_SHA
    assert read_version(formula_path) == Version(0, 1, 2)


def test_dry_run_changes_nothing(formula_path: Path) -> None:
    before = formula_path.read_text(encoding="utf-8")
    releaser, git, github, sleeps = _releaser(dry_run=True)
    release = releaser.run(plan_release(Version(0, 1, 1), "patch", releaser.config))

    assert release.sha256 is None
    assert github.fetched == []
    assert sleeps == []
    assert formula_path.read_text(encoding="utf-8") == before

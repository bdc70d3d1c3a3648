import pytest

from tapbump.version import BUMP_LEVELS, Version, VersionError


@pytest.mark.parametrize(
    ("level", "expected"),
    [("patch", "0.1.2"), ("minor", "0.2.0"), ("major", "1.0.0")],
)
def test_bump_levels(level: str, expected: str) -> None:
    assert str(Version.parse("0.1.1").bump(level)) == expected


def test_bump_resets_lower_components() -> None:
    v = Version(3, 7, 9)
    assert v.bump("minor") == Version(3, 8, 0)
    assert v.bump("major") == Version(4, 0, 0)


def test_unknown_level_rejected() -> None:
    with pytest.raises(VersionError, match="Unknown bump level"):
        Version(0, 1, 1).bump("build")
    assert "build" not in BUMP_LEVELS


@pytest.mark.parametrize("text", ["", "1.2", "1.2.3.4", "v1.2.3", "1.x.3", "1.2.3-rc1"])
def test_parse_rejects_non_triplets(text: str) -> None:
    with pytest.raises(VersionError):
        Version.parse(text)


def test_parse_trims_whitespace_and_tags() -> None:
    v = Version.parse(" 10.20.30\n")
    assert (v.major, v.minor, v.patch) == (10, 20, 30)
    assert v.tag() == "v10.20.30"
    assert v.tag("release-") == "release-10.20.30"

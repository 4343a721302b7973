from __future__ import annotations

import pytest

from nodeswitch import SemanticVersion, SemverRange, SemverRangeSet
from nodeswitch._specifier import parse_semver


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("5.6.7", "5.6.7", id="full"),
        pytest.param("v5.6.7", "5.6.7", id="leading-v"),
        pytest.param("V10.0.0", "10.0.0", id="leading-upper-v"),
        pytest.param("5", "5", id="major"),
        pytest.param("5.6", "5.6", id="major-minor"),
        pytest.param("9.0.0-v8-canary20170101", "9.0.0-v8-canary20170101", id="free-form-pre-release"),
    ],
)
def test_semantic_version_from_string(text: str, expected: str) -> None:
    version = SemanticVersion.from_string(text)
    assert version.version_str == expected
    assert str(version) == expected


@pytest.mark.parametrize("text", ["", "x.y.z", "5.6.7.8", "5-rc1", "5.6-rc1", "5.a"])
def test_semantic_version_invalid(text: str) -> None:
    with pytest.raises(ValueError, match="Invalid version"):
        SemanticVersion.from_string(text)


def test_parse_semver_returns_none_for_bad_input() -> None:
    assert parse_semver(None) is None
    assert parse_semver("") is None
    assert parse_semver("boron") is None
    assert parse_semver("1.2.3") == SemanticVersion.from_string("1.2.3")


def test_semantic_version_properties() -> None:
    version = SemanticVersion.from_string("5.6")
    assert version.major == 5
    assert version.minor == 6
    assert version.patch == 0
    assert version.release == (5, 6, 0)
    assert version.is_complete is False
    assert SemanticVersion.from_string("5.6.7").is_complete is True


def test_numeric_not_lexicographic_ordering() -> None:
    assert SemanticVersion.from_string("9.0.0") < SemanticVersion.from_string("10.0.0")
    assert SemanticVersion.from_string("5.10.0") > SemanticVersion.from_string("5.9.9")


def test_pre_release_sorts_before_release() -> None:
    assert SemanticVersion.from_string("5.0.0-rc1") < SemanticVersion.from_string("5.0.0")
    assert SemanticVersion.from_string("5.0.0-rc1") < SemanticVersion.from_string("5.0.0-rc2")
    assert SemanticVersion.from_string("5.0.0-rc1") > SemanticVersion.from_string("4.9.9")


@pytest.mark.parametrize(
    ("prefix", "candidate", "expected"),
    [
        pytest.param("5", "5.6.7", True, id="major"),
        pytest.param("5.6", "5.6.7", True, id="major-minor"),
        pytest.param("5.6", "5.60.0", False, id="component-wise-not-string"),
        pytest.param("5", "56.0.0", False, id="major-not-string-prefix"),
        pytest.param("5.6.7", "5.6.7-rc1", True, id="release-matches-pre-release"),
        pytest.param("5.6.7-rc1", "5.6.7", False, id="pre-release-is-exact"),
        pytest.param("5.6.7-rc1", "5.6.7-rc1", True, id="pre-release-exact"),
    ],
)
def test_matches_prefix(prefix: str, candidate: str, expected: bool) -> None:
    assert SemanticVersion.from_string(prefix).matches_prefix(SemanticVersion.from_string(candidate)) is expected


@pytest.mark.parametrize(
    ("range_str", "candidate", "expected"),
    [
        pytest.param("^5.6.7", "5.9.9", True, id="caret-same-major"),
        pytest.param("^5.6.7", "6.0.0", False, id="caret-next-major"),
        pytest.param("^5.6.7", "5.6.6", False, id="caret-below"),
        pytest.param("^0.8.1", "0.8.9", True, id="caret-zero-major"),
        pytest.param("^0.8.1", "0.9.0", False, id="caret-zero-major-next-minor"),
        pytest.param("~5.6.7", "5.6.9", True, id="tilde-same-minor"),
        pytest.param("~5.6.7", "5.7.0", False, id="tilde-next-minor"),
        pytest.param("~5", "5.9.0", True, id="tilde-major-only"),
        pytest.param(">=4.0.0", "4.0.0", True, id="ge-equal"),
        pytest.param(">=4.0.0", "4.0.0-rc1", False, id="ge-pre-release"),
        pytest.param("<4.5.0", "4.4.9", True, id="lt"),
        pytest.param("<4.5.0", "4.5.0", False, id="lt-equal"),
        pytest.param("<=6.2.0", "6.2.0", True, id="le-equal"),
        pytest.param(">6.2.0", "6.2.1", True, id="gt"),
        pytest.param("6.2", "6.2.9", True, id="bare-prefix"),
        pytest.param("6.2", "6.3.0", False, id="bare-prefix-miss"),
        pytest.param("^5.6.7", "not-a-version", False, id="unparsable-candidate"),
    ],
)
def test_semver_range_contains(range_str: str, candidate: str, expected: bool) -> None:
    assert SemverRange.from_string(range_str).contains(candidate) is expected


def test_semver_range_invalid() -> None:
    with pytest.raises(ValueError, match="Invalid range"):
        SemverRange.from_string("^boron")


def test_semver_range_set_conjunction() -> None:
    ranges = SemverRangeSet.from_string(">=5.0.0 <6.2.1")
    assert [str(item) for item in ranges] == [">=5.0.0", "<6.2.1"]
    assert ranges.contains("5.0.0") is True
    assert ranges.contains("6.2.0") is True
    assert ranges.contains("6.2.1") is False
    assert ranges.contains("4.9.0") is False


@pytest.mark.parametrize("ranges_str", ["", "*"])
def test_semver_range_set_matches_everything(ranges_str: str) -> None:
    assert SemverRangeSet.from_string(ranges_str).contains("0.10.0") is True

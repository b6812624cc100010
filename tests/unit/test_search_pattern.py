import pytest

from helpdesk.utils.search import contains_pattern


@pytest.mark.parametrize(
    "term,expected",
    [
        ("nurul", "%nurul%"),
        ("100%", r"%100\%%"),
        ("op_baru", r"%op\_baru%"),
        ("a\\b", r"%a\\b%"),
    ],
)
def test_contains_pattern_escapes_like_wildcards(term, expected):
    assert contains_pattern(term) == expected

import pytest

from profile_directory.directory.models import Profile
from profile_directory.directory.search import (
    Segment,
    filter_profiles,
    highlight,
    segments_text,
)


def _profile(pid, name, address, email="x@example.com"):
    return Profile(
        id=pid,
        name=name,
        email=email,
        phone="1",
        address=address,
        description="d",
        interests="i",
    )


@pytest.fixture
def profiles():
    return [
        _profile(1, "Ann Smith", "Paris", email="ann@paris.fr"),
        _profile(2, "Bob (Robert)", "New York"),
        _profile(3, "Carla", "Rome, Italy"),
        _profile(4, "Dan.Parker", "Berlin"),
    ]


def test_empty_query_returns_everything_in_order(profiles):
    result = filter_profiles(profiles, "")
    assert result == profiles
    assert result is not profiles


def test_matches_name_or_address_case_insensitively(profiles):
    assert [p.id for p in filter_profiles(profiles, "PAR")] == [1, 4]
    assert [p.id for p in filter_profiles(profiles, "york")] == [2]


def test_email_and_description_are_not_searched(profiles):
    assert filter_profiles(profiles, "paris.fr") == []
    assert filter_profiles(profiles, "example") == []


@pytest.mark.parametrize("query", ["(", "(Robert)", ".", "a.p", "*", "[", "\\", ", It"])
def test_punctuation_is_literal(profiles, query):
    expected = [
        p.id
        for p in profiles
        if query.lower() in p.name.lower() or query.lower() in p.address.lower()
    ]
    assert [p.id for p in filter_profiles(profiles, query)] == expected


def test_highlight_empty_query_is_single_unmatched_segment():
    assert highlight("Ann Smith", "") == [Segment("Ann Smith", False)]


def test_highlight_marks_every_occurrence_preserving_case():
    segments = highlight("Anna and ANN", "ann")
    assert segments == [
        Segment("Ann", True),
        Segment("a and ", False),
        Segment("ANN", True),
    ]


def test_highlight_query_longer_than_text():
    assert highlight("Al", "Alexander") == [Segment("Al", False)]


def test_highlight_special_characters():
    segments = highlight("Bob (Robert) [x]", "(robert)")
    assert Segment("(Robert)", True) in segments
    assert highlight("a.b.c", ".") == [
        Segment("a"),
        Segment(".", True),
        Segment("b"),
        Segment(".", True),
        Segment("c"),
    ]


@pytest.mark.parametrize(
    "text,query",
    [
        ("Ann Smith", "ann"),
        ("", "x"),
        ("", ""),
        ("aaaa", "aa"),
        ("Rome, Italy", ", "),
        ("short", "much longer query"),
        ("x*y+z?", "*y+"),
        ("Ünïcode Straße", "straße"),
    ],
)
def test_segments_reassemble_original_text(text, query):
    assert segments_text(highlight(text, query)) == text


@pytest.mark.parametrize("query", ["ss", "STRASSE", "straße", "é"])
def test_every_listed_row_has_a_highlight(query):
    profiles = [
        _profile(1, "Straße", "Berlin"),
        _profile(2, "Émile", "Québec"),
        _profile(3, "Bess", "Strasse 5"),
    ]
    for profile in filter_profiles(profiles, query):
        segments = highlight(profile.name, query) + highlight(profile.address, query)
        assert any(segment.matched for segment in segments), profile.name

"""Tests for directive tag parsing."""
from occ_assistant.agent.directives import REVIEWS, SEARCH, VIEW, parse_directive


def test_search_directive():
    directive = parse_directive("[SEARCH: digital camera] Let me find some cameras for you...")

    assert directive.kind == SEARCH
    assert directive.argument == "digital camera"


def test_view_and_reviews_directives_trim_argument():
    assert parse_directive("[VIEW:  1382080 ] Here it is").argument == "1382080"
    assert parse_directive("Sure! [REVIEWS: 1382080]").kind == REVIEWS


def test_reviews_take_priority_over_view_and_search():
    text = "[SEARCH: camera] [VIEW: 123] [REVIEWS: 456]"
    directive = parse_directive(text)

    assert directive.kind == REVIEWS
    assert directive.argument == "456"


def test_view_takes_priority_over_search():
    directive = parse_directive("[SEARCH: camera] then [VIEW: 123]")

    assert directive.kind == VIEW
    assert directive.argument == "123"


def test_first_match_of_a_kind_wins():
    assert parse_directive("[SEARCH: tripod] or [SEARCH: lens]").argument == "tripod"


def test_no_directive():
    assert parse_directive("Hello! How can I help you today?") is None
    assert parse_directive("") is None
    assert parse_directive(None) is None


def test_malformed_tags_are_ignored():
    assert parse_directive("[SEARCH:camera]") is None
    assert parse_directive("[search: camera]") is None
    assert parse_directive("[SEARCH: ]") is None

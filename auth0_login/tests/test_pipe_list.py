"""
Tests for the left|right mapping list parser.
"""

from auth0_login.utils.pipe_list import parse_pipe_list, to_pipe_list


def test_parse_two_lines():
    text = "given_name|field_first_name\nfamily_name|field_last_name"

    assert parse_pipe_list(text) == [
        ("given_name", "field_first_name"),
        ("family_name", "field_last_name"),
    ]


def test_parse_trims_whitespace_and_handles_crlf():
    text = "  admin | administrator \r\n\r\npoweruser|power users\r\n"

    assert parse_pipe_list(text) == [
        ("admin", "administrator"),
        ("poweruser", "power users"),
    ]


def test_malformed_lines_are_dropped():
    text = "badline\na|b|c\ngiven_name|firstname\n\n|"

    # "|" has exactly one pipe, so it survives as an empty pair
    assert parse_pipe_list(text) == [("given_name", "firstname"), ("", "")]


def test_empty_input():
    assert parse_pipe_list("") == []
    assert parse_pipe_list("\n\n") == []


def test_lowercase_left():
    assert parse_pipe_list("Admin|administrator", lowercase_left=True) == [
        ("admin", "administrator")
    ]


def test_serialise_then_parse_keeps_pairs():
    pairs = [("given_name", "firstname"), ("family_name", "surname")]

    text = to_pipe_list(pairs)

    assert text == "given_name|firstname\nfamily_name|surname"
    assert parse_pipe_list(text) == pairs

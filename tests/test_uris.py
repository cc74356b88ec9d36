from __future__ import annotations

import pytest

from tqadb.errors import MalformedDataError
from tqadb.uris import format_uri, parse_uri


@pytest.mark.parametrize(
    "text",
    [
        "http://www.nltaxonomie.nl/nt12/kvk/20170714/entrypoints/kvk-rpt-jaarverantwoording.xsd",
        "https://example.com:8443/a/b?x=1#frag",
        "urn:isbn:0451450523",
        "file:///tmp/entry.xsd",
        "relative/path.xsd",
        "http://example.com/a%20b",
        "http://[::1]:8080/x",
    ],
)
def test_parse_uri_accepts_valid_uris(text: str) -> None:
    assert format_uri(parse_uri(text)) == text


def test_parsed_uris_compare_by_components() -> None:
    assert parse_uri("http://a/1") == parse_uri("http://a/1")
    assert parse_uri("http://a/1") != parse_uri("http://a/2")
    assert len({parse_uri("http://a/1"), parse_uri("http://a/1")}) == 1


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        42,
        "http://a/b c",
        "http://a/\n",
        "http://a/<x>",
        "http://a/%zz",
        "http://a/%2",
        "1http://a/b",
        ":no-scheme",
        "http:",
        "http://[::1/x",
        "http://a:port/x",
        "http://a/[x]",
        "http://a/1?x=[1]",
        "http://a/1#f#g",
        "http://us[er]@a/1",
        "http://a]/1",
    ],
)
def test_parse_uri_rejects_malformed_text(text: object) -> None:
    with pytest.raises(MalformedDataError) as excinfo:
        parse_uri(text)
    assert excinfo.value.value == text


def test_parse_uri_ignores_case_of_scheme_host_and_escapes() -> None:
    assert parse_uri("HTTP://A/1") == parse_uri("http://a/1")
    assert parse_uri("http://a/%7e") == parse_uri("http://a/%7E")
    assert len({parse_uri("http://a/1"), parse_uri("Http://A/1")}) == 1

    assert format_uri(parse_uri("HTTP://Example.COM:8080/Path?Q=%2f#Frag")) == (
        "http://example.com:8080/Path?Q=%2F#Frag"
    )


def test_parse_uri_keeps_case_of_userinfo_and_path() -> None:
    parsed = parse_uri("http://User:Pw@HOST/Some/Path")

    assert parsed.netloc == "User:Pw@host"
    assert parsed.path == "/Some/Path"
    assert parse_uri("http://a/X") != parse_uri("http://a/x")

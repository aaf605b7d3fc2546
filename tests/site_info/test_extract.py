"""Tests for URL handling and HTML metadata extraction."""

import pytest

from navkit.core import InvalidURLError
from navkit.site_info.extract import (
    extract_description,
    extract_icon_candidates,
    extract_title,
    origin_of,
    parse_html,
    resolve_url,
    validate_url,
)

PAGE = "https://example.com/a/b"


@pytest.mark.parametrize(
    "url",
    ["https://example.com", "http://example.com:8080/path?q=1", "  https://example.com/  "],
)
def test_validate_url_accepts_http(url):
    assert validate_url(url) == url.strip()


@pytest.mark.parametrize(
    "url",
    [
        "not a url",
        "",
        "   ",
        "ftp://example.com/file",
        "javascript:alert(1)",
        "https://",
        "http://[::1",
        "example.com",
        "http://127.0.0.1:99999/",
        "https://example.com:port/",
    ],
)
def test_validate_url_rejects(url):
    with pytest.raises(InvalidURLError):
        validate_url(url)


def test_origin_of_drops_path_and_credentials():
    assert origin_of("https://user:pw@example.com:8443/a/b?c") == "https://example.com:8443"


@pytest.mark.parametrize(
    "href, expected",
    [
        ("/icon.png", "https://example.com/icon.png"),
        ("icon.png", "https://example.com/a/icon.png"),
        ("//cdn.example.com/i.png", "https://cdn.example.com/i.png"),
        ("../img/logo.svg", "https://example.com/img/logo.svg"),
        ("https://static.example.org/x.ico", "https://static.example.org/x.ico"),
        ("  /padded.png  ", "https://example.com/padded.png"),
    ],
)
def test_resolve_url(href, expected):
    assert resolve_url(href, PAGE) == expected


def test_resolve_scheme_relative_keeps_http():
    assert resolve_url("//cdn.example.com/i.png", "http://example.com/") == (
        "http://cdn.example.com/i.png"
    )


def test_title_prefers_title_tag():
    soup = parse_html(
        '<title> My   Site </title><meta property="og:title" content="OG Title">'
    )
    assert extract_title(soup) == "My Site"


def test_title_falls_back_to_open_graph():
    soup = parse_html(
        '<title></title><meta property="og:title" content="OG Title">'
        '<meta name="twitter:title" content="Tw Title">'
    )
    assert extract_title(soup) == "OG Title"


def test_title_falls_back_to_twitter():
    soup = parse_html('<meta name="twitter:title" content="Tw Title">')
    assert extract_title(soup) == "Tw Title"


def test_title_empty_when_absent():
    assert extract_title(parse_html("<p>hello</p>")) == ""


def test_description_priority():
    soup = parse_html(
        '<meta property="og:description" content="OG desc">'
        '<meta name="description" content="Plain desc">'
    )
    assert extract_description(soup) == "Plain desc"


def test_description_open_graph_then_twitter():
    soup = parse_html(
        '<meta name="twitter:description" content="Tw desc">'
        '<meta property="og:description" content="OG desc">'
    )
    assert extract_description(soup) == "OG desc"

    soup = parse_html('<meta name="twitter:description" content="Tw desc">')
    assert extract_description(soup) == "Tw desc"


def test_description_tolerates_attribute_order_and_entities():
    soup = parse_html('<META CONTENT="Tom &amp; Jerry" NAME="Description">')
    assert extract_description(soup) == "Tom & Jerry"


def test_description_empty_when_absent():
    assert extract_description(parse_html("<title>x</title>")) == ""


def test_icon_candidates_priority_order():
    soup = parse_html(
        '<meta property="og:image" content="/og.png">'
        '<link rel="apple-touch-icon" href="/apple.png">'
        '<link rel="shortcut icon" href="/shortcut.ico">'
        '<link rel="icon" href="/icon.png">'
    )

    assert extract_icon_candidates(soup, PAGE) == [
        "https://example.com/icon.png",
        "https://example.com/shortcut.ico",
        "https://example.com/apple.png",
        "https://example.com/og.png",
        "https://example.com/favicon.ico",
    ]


def test_icon_candidates_fallback_only():
    assert extract_icon_candidates(parse_html("<title>x</title>"), PAGE) == [
        "https://example.com/favicon.ico"
    ]


def test_icon_candidates_skip_data_uris_and_duplicates():
    soup = parse_html(
        '<link rel="icon" href="data:image/png;base64,AAAA">'
        '<link rel="shortcut icon" href="/favicon.ico">'
    )

    assert extract_icon_candidates(soup, PAGE) == ["https://example.com/favicon.ico"]


def test_icon_rel_is_case_insensitive():
    soup = parse_html('<link href="//cdn.example.com/i.png" REL="Icon">')

    assert extract_icon_candidates(soup, PAGE)[0] == "https://cdn.example.com/i.png"


def test_icon_link_without_href_ignored():
    soup = parse_html('<link rel="icon"><link rel="apple-touch-icon" href="touch.png">')

    assert extract_icon_candidates(soup, PAGE)[0] == "https://example.com/a/touch.png"


def test_icon_candidates_skip_unfetchable_urls():
    soup = parse_html(
        '<link rel="icon" href="http://cdn.example.com:99999/i.png">'
        '<link rel="shortcut icon" href="javascript:void(0)">'
        '<link rel="apple-touch-icon" href="/touch.png">'
    )

    assert extract_icon_candidates(soup, PAGE) == [
        "https://example.com/touch.png",
        "https://example.com/favicon.ico",
    ]

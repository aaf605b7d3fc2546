"""URL handling and metadata extraction from landing-page HTML."""

from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from navkit.core.exceptions import InvalidURLError

TITLE_META_KEYS = ("og:title", "twitter:title")
DESCRIPTION_META_KEYS = ("description", "og:description", "twitter:description")


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL.

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        InvalidURLError: If the URL is empty, malformed or not http(s)
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(str(url), "URL must not be empty")

    url = url.strip()
    try:
        parts = urlsplit(url)
        host = parts.hostname
        # Raises ValueError for ports outside 0-65535
        parts.port
    except ValueError as e:
        raise InvalidURLError(url, f"malformed URL ({e})") from e

    if parts.scheme.lower() not in ("http", "https"):
        raise InvalidURLError(url, "only HTTP and HTTPS URLs are supported")
    if not host:
        raise InvalidURLError(url, "URL has no host")
    return url


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for ``url``."""
    parts = urlsplit(url)
    netloc = parts.netloc.rsplit("@", 1)[-1]
    return f"{parts.scheme}://{netloc}"


def resolve_url(href: str, page_url: str) -> str:
    """Resolve an href found on ``page_url`` to an absolute URL.

    Scheme-relative references reuse the page's scheme, root-relative ones
    the page's origin; anything else relative is joined to the page URL.
    """
    href = href.strip()
    if href.startswith("//"):
        return f"{urlsplit(page_url).scheme}:{href}"
    if href.startswith("/"):
        return origin_of(page_url) + href
    if href.lower().startswith(("http://", "https://")):
        return href
    return urljoin(page_url, href)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _clean(text: str | None) -> str:
    return " ".join(text.split()) if text else ""


def _meta_content(soup: BeautifulSoup, key: str) -> str:
    # Open Graph uses property=, most others name=; accept either.
    for tag in soup.find_all("meta"):
        for attr in ("property", "name"):
            value = tag.get(attr)
            if isinstance(value, str) and value.strip().lower() == key:
                content = _clean(tag.get("content"))
                if content:
                    return content
    return ""


def extract_title(soup: BeautifulSoup) -> str:
    """First non-empty of ``<title>``, ``og:title``, ``twitter:title``."""
    title_tag = soup.find("title")
    if title_tag is not None:
        title = _clean(title_tag.get_text())
        if title:
            return title

    for key in TITLE_META_KEYS:
        content = _meta_content(soup, key)
        if content:
            return content
    return ""


def extract_description(soup: BeautifulSoup) -> str:
    """First non-empty of meta description, ``og:description``, ``twitter:description``."""
    for key in DESCRIPTION_META_KEYS:
        content = _meta_content(soup, key)
        if content:
            return content
    return ""


def _rel_tokens(tag: Tag) -> list[str]:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [token.lower() for token in rel]


def _link_href(soup: BeautifulSoup, matches) -> str:
    for tag in soup.find_all("link"):
        href = tag.get("href")
        if isinstance(href, str) and href.strip() and matches(_rel_tokens(tag)):
            return href.strip()
    return ""


def extract_icon_candidates(soup: BeautifulSoup, page_url: str) -> list[str]:
    """List absolute icon URLs in priority order.

    Order: ``rel="icon"``, ``rel="shortcut icon"``, ``rel="apple-touch-icon"``,
    ``og:image``, then ``{origin}/favicon.ico`` as the final fallback.
    Inline ``data:`` icons and URLs that fail validation are skipped.
    """
    hrefs = [
        _link_href(soup, lambda rel: rel == ["icon"]),
        _link_href(soup, lambda rel: rel == ["shortcut", "icon"]),
        _link_href(soup, lambda rel: "apple-touch-icon" in rel),
        _meta_content(soup, "og:image"),
    ]

    candidates: list[str] = []
    for href in hrefs:
        if not href or href.lower().startswith("data:"):
            continue
        try:
            resolved = validate_url(resolve_url(href, page_url))
        except InvalidURLError:
            continue
        if resolved not in candidates:
            candidates.append(resolved)

    fallback = origin_of(page_url) + "/favicon.ico"
    if fallback not in candidates:
        candidates.append(fallback)
    return candidates

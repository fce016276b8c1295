"""
tikdownloader.io resolver - Turn a TikTok link into a direct CDN video URL

Posts the TikTok link to the tikdownloader.io search endpoint and scrapes the
returned markup for the TikTok CDN video URL and the video caption.

The markup scraping is done by a ResponseParser. Two are provided:
    RegexResponseParser  - regex matching on the raw markup (default)
    SoupResponseParser   - BeautifulSoup based, same results on well-formed markup
"""

import html
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote

import requests
from bs4 import BeautifulSoup

# ============================================================================
# CONFIGURATION
# ============================================================================

LOOKUP_URL = "https://tikdownloader.io/api/ajaxSearch"
LOOKUP_LANGUAGE = "en"
DEFAULT_TIMEOUT = 30  # seconds

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-cache, no-store',
    'Pragma': 'no-cache',
}

LOOKUP_HEADERS = {
    'Accept': '*/*',
    'Content-Type': 'application/x-www-form-urlencoded; charset=UTF-8',
    'X-Requested-With': 'XMLHttpRequest',
    **NO_CACHE_HEADERS,
}

CDN_MARKER = "tiktokcdn"
FORMAT_MARKER = "video_mp4"

UNKNOWN_USER = "unknown_user"
DEFAULT_CAPTION = "tiktok_video"


class ResolveError(Exception):
    """Raised when a link cannot be resolved to a direct media URL."""


class NoMediaFound(ResolveError):
    """The lookup succeeded but its markup holds no CDN video URL."""


@dataclass
class ParsedMedia:
    """What a parser extracts from the lookup markup."""
    media_url: str
    caption: Optional[str] = None


@dataclass
class ResolvedMedia:
    media_url: str
    caption: str
    username: str


# ============================================================================
# RESPONSE PARSERS
# ============================================================================

class ResponseParser:
    """Extracts the media URL and caption from lookup markup.

    parse() returns None when the markup holds no matching media URL.
    A caption of None means the markup has no caption element.
    """

    def parse(self, markup: str) -> Optional[ParsedMedia]:
        raise NotImplementedError


class RegexResponseParser(ResponseParser):

    MEDIA_URL_PATTERN = re.compile(
        r'(?:\s|^)(?:href|data-src)=["\'](https?://[^"\']*'
        + CDN_MARKER + r'[^"\']*' + FORMAT_MARKER + r'[^"\']*)["\']'
    )
    CAPTION_PATTERN = re.compile(r'<h3>(.*?)</h3>', re.DOTALL)

    def parse(self, markup: str) -> Optional[ParsedMedia]:
        match = self.MEDIA_URL_PATTERN.search(markup)
        if not match:
            return None

        caption = None
        caption_match = self.CAPTION_PATTERN.search(markup)
        if caption_match:
            caption = re.sub(r'<.*?>', '', caption_match.group(1))
            caption = re.sub(r'\s+', ' ', html.unescape(caption)).strip()

        media_url = html.unescape(match.group(1))
        return ParsedMedia(media_url=unquote(media_url), caption=caption)


class SoupResponseParser(ResponseParser):

    @staticmethod
    def _is_media_url(value) -> bool:
        return (
            isinstance(value, str)
            and value.startswith(('http://', 'https://'))
            and CDN_MARKER in value
            and FORMAT_MARKER in value
        )

    def parse(self, markup: str) -> Optional[ParsedMedia]:
        soup = BeautifulSoup(markup, 'html.parser')

        # Document order, href or data-src
        media_url = None
        for tag in soup.find_all(True):
            for attr in ('href', 'data-src'):
                if self._is_media_url(tag.get(attr)):
                    media_url = tag[attr]
                    break
            if media_url:
                break

        if not media_url:
            return None

        caption = None
        h3 = soup.find('h3')
        if h3 is not None:
            caption = re.sub(r'\s+', ' ', h3.get_text()).strip()

        return ParsedMedia(media_url=unquote(media_url), caption=caption)


PARSERS = {
    'regex': RegexResponseParser,
    'soup': SoupResponseParser,
}


# ============================================================================
# RESOLVER
# ============================================================================

def extract_username(link: str) -> str:
    """Extract the poster's handle from a TikTok link.

    Example: https://www.tiktok.com/@alice/video/123 -> alice
    """
    match = re.search(r'/@([^/?#]+)', link)
    if match:
        return match.group(1)
    return UNKNOWN_USER


def lookup(link: str, timeout: Optional[float] = DEFAULT_TIMEOUT) -> str:
    """POST the link to the lookup service and return the markup it sends back."""
    response = requests.post(
        LOOKUP_URL,
        data={'q': link, 'lang': LOOKUP_LANGUAGE},
        headers=LOOKUP_HEADERS,
        timeout=timeout,
    )
    if not response.ok:
        raise ResolveError(
            f"Lookup failed for {link}: {response.status_code} {response.reason}"
        )

    payload = response.json()
    markup = payload.get('data') if isinstance(payload, dict) else None
    return markup if isinstance(markup, str) else ""


def resolve_media(link: str, parser: Optional[ResponseParser] = None,
                  timeout: Optional[float] = DEFAULT_TIMEOUT) -> ResolvedMedia:
    """Resolve a TikTok link to its direct CDN URL, caption and poster handle."""
    parser = parser or RegexResponseParser()
    username = extract_username(link)

    markup = lookup(link, timeout=timeout)
    parsed = parser.parse(markup)
    if parsed is None:
        raise NoMediaFound(f"No TikTok CDN URL found for {link}")

    caption = parsed.caption if parsed.caption is not None else DEFAULT_CAPTION
    return ResolvedMedia(media_url=parsed.media_url, caption=caption, username=username)

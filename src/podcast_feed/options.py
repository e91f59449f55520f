from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import urlsplit

from podcast_feed.domain.models import Channel, Feed, ItunesImage, ItunesOwner, RichText
from podcast_feed.errors import FeedStateError, InvalidImageError, InvalidURLError

FeedOption = Callable[[Feed], None]

VALUE_YES = "yes"

_FORBIDDEN_URL_CHARS_RE = re.compile(r"[\x00-\x20\x7f]")


def validate_absolute_url(url: str) -> bool:
    """Return True when ``url`` parses as an absolute URL with a scheme and a host."""
    if not url or _FORBIDDEN_URL_CHARS_RE.search(url) is not None:
        return False
    try:
        parts = urlsplit(url)
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.hostname)


def apply_options(feed: Feed, *options: FeedOption) -> None:
    """Apply ``options`` to ``feed`` in order, stopping at the first one that raises."""
    for option in options:
        option(feed)


def require_channel(feed: Feed) -> Channel:
    if feed.channel is None:
        raise FeedStateError("Feed has no channel to configure.")
    return feed.channel


def author(name: str) -> FeedOption:
    def _apply(feed: Feed) -> None:
        require_channel(feed).author = name

    return _apply


def block(feed: Feed) -> None:
    require_channel(feed).block = VALUE_YES


def explicit(feed: Feed) -> None:
    require_channel(feed).explicit = VALUE_YES


def complete(feed: Feed) -> None:
    require_channel(feed).complete = VALUE_YES


def new_feed_url(url: str) -> FeedOption:
    """Point podcast clients at a new feed location (``itunes:new-feed-url``)."""

    def _apply(feed: Feed) -> None:
        if not validate_absolute_url(url):
            raise InvalidURLError(f"Invalid feed URL {url!r}: expected an absolute URL.")
        require_channel(feed).new_feed_url = url

    return _apply


def subtitle(text: str) -> FeedOption:
    def _apply(feed: Feed) -> None:
        require_channel(feed).subtitle = text

    return _apply


def summary(text: str) -> FeedOption:
    """Set the channel summary; it is rendered as CDATA so it may contain HTML."""

    def _apply(feed: Feed) -> None:
        require_channel(feed).summary = RichText(text)

    return _apply


def owner(name: str, email: str) -> FeedOption:
    def _apply(feed: Feed) -> None:
        require_channel(feed).owner = ItunesOwner(name=name, email=email)

    return _apply


def image(url: str) -> FeedOption:
    """Set the channel artwork (``itunes:image``)."""

    def _apply(feed: Feed) -> None:
        if not validate_absolute_url(url):
            raise InvalidImageError(f"Invalid image URL {url!r}: expected an absolute URL.")
        require_channel(feed).image = ItunesImage(href=url)

    return _apply

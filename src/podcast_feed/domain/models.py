from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PrivateAttr

if TYPE_CHECKING:
    from podcast_feed.serializer import ByteSink, WriteOptions

logger = logging.getLogger(__name__)

ITUNES_XMLNS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
CONTENT_XMLNS = "http://purl.org/rss/1.0/modules/content/"
RSS_VERSION = "2.0"


@dataclass(frozen=True)
class RichText:
    """Text that may contain markup and is emitted verbatim inside a CDATA section."""

    value: str

    def __str__(self) -> str:
        return self.value


def _coerce_rich_text(value: Any) -> Any:
    if isinstance(value, str):
        return RichText(value)
    return value


RichTextField = Annotated[RichText, BeforeValidator(_coerce_rich_text)]


def _stringify_length(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class DomainModel(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class Enclosure(DomainModel):
    url: str
    length: Annotated[str, BeforeValidator(_stringify_length)] = ""
    type: str = ""


class ItunesImage(DomainModel):
    href: str


class ItunesOwner(DomainModel):
    name: str = ""
    email: str = ""


class ItunesCategory(DomainModel):
    text: str
    categories: list[ItunesCategory] = Field(default_factory=list)


class Episode(DomainModel):
    """One podcast installment, rendered as an RSS ``<item>``.

    Nothing is required at construction time; empty fields are simply left out
    of the rendered item. ``description`` may be a plain string (escaped) or
    :class:`RichText` (CDATA).
    """

    title: str = ""
    guid: str = ""
    pub_date: datetime | None = None
    description: RichText | str | None = None
    content_encoded: RichTextField | None = None
    author: str = ""
    block: str = ""
    duration: timedelta | None = None
    explicit: str = ""
    closed_captioned: str = ""
    order: int | None = None
    subtitle: str = ""
    summary: RichTextField | None = None
    enclosure: Enclosure | None = None
    image: ItunesImage | None = None


Item = Episode


class Channel(DomainModel):
    title: str = ""
    link: str = ""
    description: str = ""
    language: str = ""
    copyright: str = ""
    author: str = ""
    block: str = ""
    explicit: str = ""
    complete: str = ""
    new_feed_url: str = ""
    subtitle: str = ""
    summary: RichTextField | None = None
    owner: ItunesOwner | None = None
    image: ItunesImage | None = None
    categories: list[ItunesCategory] = Field(default_factory=list)
    items: list[Episode] = Field(default_factory=list)


class Feed(DomainModel):
    """Serialization-ready RSS document wrapping one :class:`Channel`."""

    itunes_xmlns: str = ITUNES_XMLNS
    content_xmlns: str = CONTENT_XMLNS
    version: str = RSS_VERSION
    channel: Channel | None = Field(default_factory=Channel)

    def set_options(self, *options: Callable[[Feed], None]) -> None:
        from podcast_feed.options import apply_options

        apply_options(self, *options)

    def to_xml(self) -> str:
        from podcast_feed.serializer import render_feed

        return render_feed(self)

    def write(self, sink: ByteSink) -> None:
        from podcast_feed.serializer import write_feed

        write_feed(self, sink)

    def write_with_options(self, sink: ByteSink, options: WriteOptions) -> None:
        from podcast_feed.serializer import write_feed_buffered

        write_feed_buffered(self, sink, options)

    def to_xml_with_options(self, options: WriteOptions) -> str:
        from podcast_feed.serializer import render_feed_buffered

        return render_feed_buffered(self, options)

    def stream_write(self, sink: ByteSink) -> None:
        from podcast_feed.serializer import stream_feed

        stream_feed(self, sink)


class Podcast(DomainModel):
    """A podcast and its ordered, append-only list of episodes."""

    title: str = ""
    description: str = ""
    link: str = ""
    language: str = ""
    copyright: str = ""
    _episodes: list[Episode] = PrivateAttr(default_factory=list)

    def add_episode(self, episode: Episode) -> None:
        self._episodes.append(episode)

    def add_episode_with_capacity_hint(self, episode: Episode, expected_total: int) -> None:
        """Append ``episode``; ``expected_total`` is a sizing hint only.

        Python lists over-allocate on their own, so the hint never changes the
        resulting episode sequence.
        """
        self.add_episode(episode)

    def episode_count(self) -> int:
        return len(self._episodes)

    def copy_episodes(self) -> list[Episode]:
        """Return a snapshot of the episode list that is safe to mutate."""
        return list(self._episodes)

    def direct_episodes(self) -> list[Episode]:
        """Return the live episode list.

        Unsafe: changes made through the returned list are seen by this podcast
        and by every other holder. Do not mutate it while a feed built from this
        podcast is being serialized on another thread.
        """
        return self._episodes

    def build_feed(self, *options: Callable[[Feed], None]) -> Feed:
        """Build a feed from the current state and apply ``options`` in order.

        The first failing option's exception propagates and no feed is returned.
        """
        from podcast_feed.options import apply_options

        feed = Feed(
            channel=Channel(
                title=self.title,
                description=self.description,
                link=self.link,
                language=self.language,
                copyright=self.copyright,
                items=self.copy_episodes(),
            ),
        )
        apply_options(feed, *options)
        logger.debug("Built feed %r with %d episodes", self.title, len(self._episodes))
        return feed

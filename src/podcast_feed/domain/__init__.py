"""Core entity models for podcast-feed."""

from podcast_feed.domain.models import (
    CONTENT_XMLNS,
    ITUNES_XMLNS,
    RSS_VERSION,
    Channel,
    DomainModel,
    Enclosure,
    Episode,
    Feed,
    Item,
    ItunesCategory,
    ItunesImage,
    ItunesOwner,
    Podcast,
    RichText,
)

__all__ = [
    "CONTENT_XMLNS",
    "Channel",
    "DomainModel",
    "Enclosure",
    "Episode",
    "Feed",
    "ITUNES_XMLNS",
    "Item",
    "ItunesCategory",
    "ItunesImage",
    "ItunesOwner",
    "Podcast",
    "RSS_VERSION",
    "RichText",
]

"""Generate RSS 2.0 podcast feeds with iTunes extensions."""

import logging

from podcast_feed.buffers import BufferPool, ByteBuffer, default_buffer_pool
from podcast_feed.domain import (
    Channel,
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
from podcast_feed.errors import (
    FeedOptionError,
    FeedStateError,
    FeedWriteError,
    InvalidImageError,
    InvalidURLError,
    PodcastConfigError,
    PodcastFeedError,
)
from podcast_feed.formatting import format_duration, format_pub_date
from podcast_feed.options import (
    VALUE_YES,
    FeedOption,
    author,
    block,
    complete,
    explicit,
    image,
    new_feed_url,
    owner,
    subtitle,
    summary,
)
from podcast_feed.serializer import WriteOptions

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BufferPool",
    "ByteBuffer",
    "Channel",
    "Enclosure",
    "Episode",
    "Feed",
    "FeedOption",
    "FeedOptionError",
    "FeedStateError",
    "FeedWriteError",
    "InvalidImageError",
    "InvalidURLError",
    "Item",
    "ItunesCategory",
    "ItunesImage",
    "ItunesOwner",
    "Podcast",
    "PodcastConfigError",
    "PodcastFeedError",
    "RichText",
    "VALUE_YES",
    "WriteOptions",
    "author",
    "block",
    "complete",
    "default_buffer_pool",
    "explicit",
    "format_duration",
    "format_pub_date",
    "image",
    "new_feed_url",
    "owner",
    "subtitle",
    "summary",
]

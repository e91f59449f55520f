from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from podcast_feed.buffers import BufferPool, ByteBuffer, ByteSink, default_buffer_pool, write_all
from podcast_feed.domain.models import (
    Channel,
    Enclosure,
    Episode,
    Feed,
    ItunesCategory,
    ItunesImage,
    ItunesOwner,
    RichText,
)
from podcast_feed.errors import FeedStateError, FeedWriteError
from podcast_feed.formatting import format_duration, format_pub_date

__all__ = [
    "ByteSink",
    "WriteOptions",
    "escape_attribute",
    "escape_text",
    "iter_feed_chunks",
    "render_feed",
    "render_feed_buffered",
    "stream_feed",
    "write_feed",
    "write_feed_buffered",
]

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
_INDENT = "  "
_CHANNEL_DEPTH = 2

_INVALID_XML_CHARS_RE = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
_TEXT_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&apos;",
        "\r": "&#xD;",
    }
)
_ATTRIBUTE_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&apos;",
        "\r": "&#xD;",
        "\n": "&#xA;",
        "\t": "&#x9;",
    }
)


@dataclass(frozen=True)
class WriteOptions:
    """Allocation knobs for the buffered strategy; they never change the output bytes.

    ``buffer_size`` pre-grows the working buffer. ``use_pool`` borrows the
    buffer from ``pool`` (or the process-wide pool) instead of allocating one;
    passing ``pool`` implies pooling.
    """

    buffer_size: int = 0
    use_pool: bool = False
    pool: BufferPool | None = None

    def __post_init__(self) -> None:
        if self.buffer_size < 0:
            raise ValueError("buffer_size must be >= 0")

    def resolve_pool(self) -> BufferPool | None:
        if self.pool is not None:
            return self.pool
        if self.use_pool:
            return default_buffer_pool()
        return None


def _clean(value: str) -> str:
    return _INVALID_XML_CHARS_RE.sub("\ufffd", value)


def escape_text(value: str) -> str:
    return _clean(value).translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    return _clean(value).translate(_ATTRIBUTE_ESCAPES)


def _cdata(value: str) -> str:
    # "]]>" cannot appear inside a CDATA section; split it across two sections.
    return "<![CDATA[" + _clean(value).replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _attributes(attrs: Iterable[tuple[str, str]]) -> str:
    return "".join(f' {name}="{escape_attribute(value)}"' for name, value in attrs)


class _ElementWriter:
    def __init__(self, depth: int) -> None:
        self.depth = depth
        self.lines: list[str] = []

    def _line(self, markup: str) -> None:
        self.lines.append(f"{_INDENT * self.depth}{markup}\n")

    def text(self, name: str, value: str) -> None:
        if value:
            self._line(f"<{name}>{escape_text(value)}</{name}>")

    def rich_text(self, name: str, value: RichText | None) -> None:
        if value is not None and value.value:
            self._line(f"<{name}>{_cdata(value.value)}</{name}>")

    def start(self, name: str, attrs: Iterable[tuple[str, str]] = ()) -> None:
        self._line(f"<{name}{_attributes(attrs)}>")
        self.depth += 1

    def end(self, name: str) -> None:
        self.depth -= 1
        self._line(f"</{name}>")

    def empty(self, name: str, attrs: Iterable[tuple[str, str]]) -> None:
        self._line(f"<{name}{_attributes(attrs)}></{name}>")

    def render(self) -> str:
        return "".join(self.lines)


def _write_owner(out: _ElementWriter, owner: ItunesOwner | None) -> None:
    if owner is None or not (owner.name or owner.email):
        return
    out.start("itunes:owner")
    out.text("itunes:name", owner.name)
    out.text("itunes:email", owner.email)
    out.end("itunes:owner")


def _write_image(out: _ElementWriter, image: ItunesImage | None) -> None:
    if image is not None and image.href:
        out.empty("itunes:image", [("href", image.href)])


def _write_category(out: _ElementWriter, category: ItunesCategory) -> None:
    attrs = [("text", category.text)]
    if not category.categories:
        out.empty("itunes:category", attrs)
        return
    out.start("itunes:category", attrs)
    for child in category.categories:
        _write_category(out, child)
    out.end("itunes:category")


def _write_enclosure(out: _ElementWriter, enclosure: Enclosure | None) -> None:
    if enclosure is None:
        return
    attrs = [("url", enclosure.url)]
    if enclosure.length:
        attrs.append(("length", enclosure.length))
    if enclosure.type:
        attrs.append(("type", enclosure.type))
    out.empty("enclosure", attrs)


def render_channel_metadata(channel: Channel, *, depth: int = _CHANNEL_DEPTH) -> str:
    out = _ElementWriter(depth)
    out.text("title", channel.title)
    out.text("link", channel.link)
    out.text("description", channel.description)
    out.text("language", channel.language)
    out.text("copyright", channel.copyright)
    out.text("itunes:author", channel.author)
    out.text("itunes:block", channel.block)
    out.text("itunes:explicit", channel.explicit)
    out.text("itunes:complete", channel.complete)
    out.text("itunes:new-feed-url", channel.new_feed_url)
    out.text("itunes:subtitle", channel.subtitle)
    out.rich_text("itunes:summary", channel.summary)
    _write_owner(out, channel.owner)
    _write_image(out, channel.image)
    for category in channel.categories:
        _write_category(out, category)
    return out.render()


def render_item(item: Episode, *, depth: int = _CHANNEL_DEPTH) -> str:
    out = _ElementWriter(depth)
    out.start("item")
    out.text("title", item.title)
    out.text("guid", item.guid)
    if item.pub_date is not None:
        out.text("pubDate", format_pub_date(item.pub_date))
    if isinstance(item.description, RichText):
        out.rich_text("description", item.description)
    elif item.description:
        out.text("description", item.description)
    out.rich_text("content:encoded", item.content_encoded)
    out.text("itunes:author", item.author)
    out.text("itunes:block", item.block)
    if item.duration is not None:
        out.text("itunes:duration", format_duration(item.duration))
    out.text("itunes:explicit", item.explicit)
    out.text("itunes:isClosedCaptioned", item.closed_captioned)
    if item.order:
        out.text("itunes:order", str(item.order))
    out.text("itunes:subtitle", item.subtitle)
    out.rich_text("itunes:summary", item.summary)
    _write_enclosure(out, item.enclosure)
    _write_image(out, item.image)
    out.end("item")
    return out.render()


def iter_feed_chunks(feed: Feed) -> Iterator[str]:
    """Yield the feed document piece by piece: opening tags, channel metadata, each item, closing tags.

    Every serialization strategy concatenates exactly these chunks, which keeps
    their output byte-identical.
    """
    channel = feed.channel
    if channel is None:
        raise FeedStateError("Feed has no channel; refusing to write an incomplete document.")

    root_attrs = [
        ("xmlns:itunes", feed.itunes_xmlns),
        ("xmlns:content", feed.content_xmlns),
        ("version", feed.version),
    ]
    yield f"{XML_HEADER}<rss{_attributes(root_attrs)}>\n{_INDENT}<channel>\n"
    metadata = render_channel_metadata(channel)
    if metadata:
        yield metadata
    for item in channel.items:
        yield render_item(item)
    yield f"{_INDENT}</channel>\n</rss>\n"


def _write(sink: ByteSink, data: bytes) -> None:
    try:
        write_all(sink, data)
    except (OSError, ValueError) as exc:
        raise FeedWriteError(f"Failed to write feed: {exc}") from exc


def render_feed(feed: Feed) -> str:
    return "".join(iter_feed_chunks(feed))


def write_feed(feed: Feed, sink: ByteSink) -> None:
    """Render the whole document in memory, then write it to ``sink`` as one block."""
    _write(sink, render_feed(feed).encode("utf-8"))


def _fill_buffer(buf: ByteBuffer, feed: Feed, size_hint: int) -> None:
    if size_hint > 0:
        buf.grow(size_hint)
    for chunk in iter_feed_chunks(feed):
        buf.write(chunk.encode("utf-8"))


def _flush_buffer(buf: ByteBuffer, sink: ByteSink) -> None:
    try:
        buf.write_to(sink)
    except (OSError, ValueError) as exc:
        raise FeedWriteError(f"Failed to write feed: {exc}") from exc


def write_feed_buffered(feed: Feed, sink: ByteSink, options: WriteOptions) -> None:
    pool = options.resolve_pool()
    if pool is not None:
        with pool.borrow() as buf:
            _fill_buffer(buf, feed, options.buffer_size)
            _flush_buffer(buf, sink)
        return
    if options.buffer_size > 0:
        buf = ByteBuffer(options.buffer_size)
        _fill_buffer(buf, feed, 0)
        _flush_buffer(buf, sink)
        return
    write_feed(feed, sink)


def render_feed_buffered(feed: Feed, options: WriteOptions) -> str:
    pool = options.resolve_pool()
    if pool is not None:
        with pool.borrow() as buf:
            _fill_buffer(buf, feed, options.buffer_size)
            return buf.getvalue().decode("utf-8")
    buf = ByteBuffer(options.buffer_size)
    _fill_buffer(buf, feed, 0)
    return buf.getvalue().decode("utf-8")


def stream_feed(feed: Feed, sink: ByteSink) -> None:
    """Write each chunk as soon as it is rendered.

    Peak memory stays at one item regardless of the episode count. If the sink
    fails, whatever was already written stays in it.
    """
    written = 0
    for chunk in iter_feed_chunks(feed):
        _write(sink, chunk.encode("utf-8"))
        written += 1
    logger.debug("Streamed feed in %d chunks", written)

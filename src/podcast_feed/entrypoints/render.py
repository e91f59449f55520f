from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

import typer

from podcast_feed.config import build_feed_from_config, load_podcast_config
from podcast_feed.domain.models import Feed
from podcast_feed.errors import FeedOptionError, FeedWriteError, PodcastConfigError
from podcast_feed.serializer import WriteOptions


def run_render(
    *,
    config: Path,
    output: Path | None,
    stream: bool,
    use_pool: bool,
    buffer_size: int,
    verbose: bool,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if buffer_size < 0:
        raise typer.BadParameter("buffer_size must be >= 0")

    try:
        feed = build_feed_from_config(load_podcast_config(config))
    except (PodcastConfigError, FeedOptionError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    write_options = WriteOptions(buffer_size=buffer_size, use_pool=use_pool)
    try:
        if output is None:
            _write(feed, typer.get_binary_stream("stdout"), stream=stream, options=write_options)
            return
        output = output.expanduser()
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("wb") as handle:
            _write(feed, handle, stream=stream, options=write_options)
    except FeedWriteError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    channel = feed.channel
    typer.echo(f"Episodes: {len(channel.items) if channel is not None else 0}", err=True)
    typer.echo(f"Output: {output.resolve()}", err=True)


def _write(feed: Feed, sink: BinaryIO, *, stream: bool, options: WriteOptions) -> None:
    if stream:
        feed.stream_write(sink)
    else:
        feed.write_with_options(sink, options)

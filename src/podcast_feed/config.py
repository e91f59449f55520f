from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError

from podcast_feed import options
from podcast_feed.domain.models import DomainModel, Episode, Feed, ItunesCategory, ItunesOwner, Podcast
from podcast_feed.errors import PodcastConfigError
from podcast_feed.options import FeedOption


class ChannelConfig(DomainModel):
    author: str | None = None
    block: bool = False
    explicit: bool = False
    complete: bool = False
    new_feed_url: str | None = None
    subtitle: str | None = None
    summary: str | None = None
    owner: ItunesOwner | None = None
    image: str | None = None


class PodcastConfig(DomainModel):
    """A podcast description as read from YAML."""

    title: str = ""
    description: str = ""
    link: str = ""
    language: str = ""
    copyright: str = ""
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    categories: list[ItunesCategory] = Field(default_factory=list)
    episodes: list[Episode] = Field(default_factory=list)

    def to_podcast(self) -> Podcast:
        podcast = Podcast(
            title=self.title,
            description=self.description,
            link=self.link,
            language=self.language,
            copyright=self.copyright,
        )
        for episode in self.episodes:
            podcast.add_episode_with_capacity_hint(episode, len(self.episodes))
        return podcast

    def feed_options(self) -> list[FeedOption]:
        channel = self.channel
        opts: list[FeedOption] = []
        if channel.author is not None:
            opts.append(options.author(channel.author))
        if channel.block:
            opts.append(options.block)
        if channel.explicit:
            opts.append(options.explicit)
        if channel.complete:
            opts.append(options.complete)
        if channel.new_feed_url is not None:
            opts.append(options.new_feed_url(channel.new_feed_url))
        if channel.subtitle is not None:
            opts.append(options.subtitle(channel.subtitle))
        if channel.summary is not None:
            opts.append(options.summary(channel.summary))
        if channel.owner is not None:
            opts.append(options.owner(channel.owner.name, channel.owner.email))
        if channel.image is not None:
            opts.append(options.image(channel.image))
        if self.categories:
            opts.append(_categories(self.categories))
        return opts


def _categories(categories: list[ItunesCategory]) -> FeedOption:
    def _apply(feed: Feed) -> None:
        options.require_channel(feed).categories = list(categories)

    return _apply


def parse_podcast_config(raw: Mapping[str, Any], *, source: Path | str = "<config>") -> PodcastConfig:
    try:
        return PodcastConfig.model_validate(raw)
    except ValidationError as exc:
        raise PodcastConfigError(f"Invalid podcast config in {source}: {exc}") from exc


def load_podcast_config(path: Path) -> PodcastConfig:
    path = path.expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PodcastConfigError(f"Cannot read podcast config at {path}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise PodcastConfigError(f"Invalid YAML at {path}: {exc}") from exc

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise PodcastConfigError(f"Expected mapping YAML at {path}, got {type(loaded).__name__}")
    return parse_podcast_config(loaded, source=path)


def build_feed_from_config(config: PodcastConfig) -> Feed:
    return config.to_podcast().build_feed(*config.feed_options())

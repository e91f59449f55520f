from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import timedelta
from pathlib import Path

import pytest

from podcast_feed.config import build_feed_from_config, load_podcast_config, parse_podcast_config
from podcast_feed.domain import Feed, ItunesOwner, RichText
from podcast_feed.errors import FeedStateError, InvalidImageError, PodcastConfigError

_CONFIG_YAML = """\
title: My podcast
description: This is my very simple podcast.
link: http://www.example-podcast.com/my-podcast
language: EN
copyright: 2015 My podcast copyright
channel:
  author: Author Name
  block: true
  explicit: true
  new_feed_url: http://www.example-podcast.com/new-feed-url
  subtitle: Simple subtitle
  summary: "<p>Simple <b>summary</b></p>"
  owner:
    name: Podcast Owner
    email: owner@example-podcast.com
  image: http://www.example-podcast.com/my-podcast.jpg
categories:
  - text: Technology
    categories:
      - text: Podcasting
episodes:
  - title: Episode 1
    guid: http://www.example-podcast.com/my-podcast/1/episode
    pub_date: 2015-01-01T00:00:00Z
    duration: 320
    enclosure:
      url: http://www.example-podcast.com/my-podcast/1/episode.mp3
      length: 12312
      type: MP3
  - title: Episode 2
    guid: http://www.example-podcast.com/my-podcast/2/episode
    pub_date: 2015-01-02T00:00:00Z
    summary: "Second <i>episode</i>"
"""


def _write_config(tmp_path: Path, text: str = _CONFIG_YAML) -> Path:
    path = tmp_path / "podcast.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_podcast_config(tmp_path: Path) -> None:
    config = load_podcast_config(_write_config(tmp_path))

    assert config.title == "My podcast"
    assert config.channel.block is True
    assert config.channel.complete is False
    assert config.channel.owner == ItunesOwner(name="Podcast Owner", email="owner@example-podcast.com")
    assert len(config.episodes) == 2
    assert config.episodes[0].duration == timedelta(seconds=320)
    assert config.episodes[0].enclosure is not None
    assert config.episodes[0].enclosure.length == "12312"
    assert config.episodes[1].summary == RichText("Second <i>episode</i>")


def test_build_feed_from_config(tmp_path: Path) -> None:
    feed = build_feed_from_config(load_podcast_config(_write_config(tmp_path)))

    channel = feed.channel
    assert channel is not None
    assert channel.author == "Author Name"
    assert channel.block == "yes"
    assert channel.explicit == "yes"
    assert channel.complete == ""
    assert channel.summary == RichText("<p>Simple <b>summary</b></p>")
    assert [category.text for category in channel.categories] == ["Technology"]

    xml_text = feed.to_xml()
    root = ET.fromstring(xml_text.encode("utf-8"))
    parsed = root.find("channel")
    assert parsed is not None
    assert len(parsed.findall("item")) == 2
    assert "<pubDate>Thu, 01 Jan 2015 00:00:00 +0000</pubDate>" in xml_text
    assert "<itunes:duration>5:20</itunes:duration>" in xml_text


def test_to_podcast_keeps_episode_order(tmp_path: Path) -> None:
    podcast = load_podcast_config(_write_config(tmp_path)).to_podcast()

    assert podcast.episode_count() == 2
    assert [ep.title for ep in podcast.copy_episodes()] == ["Episode 1", "Episode 2"]


def test_empty_config_builds_empty_feed(tmp_path: Path) -> None:
    feed = build_feed_from_config(load_podcast_config(_write_config(tmp_path, "")))
    assert "<channel>" in feed.to_xml()


def test_invalid_image_in_config_fails_build() -> None:
    config = parse_podcast_config({"channel": {"image": "cover.jpg"}})
    with pytest.raises(InvalidImageError):
        build_feed_from_config(config)


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(PodcastConfigError, match="Invalid YAML"):
        load_podcast_config(_write_config(tmp_path, "title: [unclosed"))


def test_non_mapping_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(PodcastConfigError, match="Expected mapping"):
        load_podcast_config(_write_config(tmp_path, "- a\n- b\n"))


def test_unknown_keys_raise(tmp_path: Path) -> None:
    with pytest.raises(PodcastConfigError, match="Invalid podcast config"):
        load_podcast_config(_write_config(tmp_path, "title: x\nepisodez: []\n"))


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(PodcastConfigError, match="Cannot read"):
        load_podcast_config(tmp_path / "missing.yaml")


def test_category_option_requires_channel() -> None:
    config = parse_podcast_config({"title": "x", "categories": [{"text": "Technology"}]})
    feed = Feed(channel=None)

    with pytest.raises(FeedStateError):
        for option in config.feed_options():
            option(feed)

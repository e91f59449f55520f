from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from podcast_feed.domain import Enclosure, Episode, Feed, Item, Podcast, RichText
from podcast_feed.errors import InvalidImageError
from podcast_feed.options import author, image, subtitle


def _episode(n: int) -> Episode:
    return Episode(
        title=f"Episode {n}",
        guid=f"https://example.com/podcast/{n}",
        pub_date=datetime(2015, 1, n % 28 + 1, tzinfo=UTC),
    )


def _podcast() -> Podcast:
    return Podcast(
        title="My podcast",
        description="This is my very simple podcast.",
        link="http://www.example-podcast.com/my-podcast",
        language="EN",
        copyright="2015 My podcast copyright",
    )


def test_add_episode_preserves_order_and_count() -> None:
    podcast = _podcast()
    for n in range(5):
        podcast.add_episode(_episode(n))

    assert podcast.episode_count() == 5
    assert [ep.title for ep in podcast.copy_episodes()] == [f"Episode {n}" for n in range(5)]


def test_episode_count_of_empty_podcast() -> None:
    assert Podcast().episode_count() == 0


@pytest.mark.parametrize("hint", [0, 1, 3, 10, 1000, -5])
def test_capacity_hint_matches_plain_append(hint: int) -> None:
    plain = _podcast()
    hinted = _podcast()
    episodes = [_episode(n) for n in range(10)]
    for episode in episodes:
        plain.add_episode(episode)
        hinted.add_episode_with_capacity_hint(episode, hint)

    assert hinted.episode_count() == plain.episode_count() == 10
    assert hinted.copy_episodes() == plain.copy_episodes()


def test_copy_episodes_is_independent() -> None:
    podcast = _podcast()
    podcast.add_episode(_episode(1))

    snapshot = podcast.copy_episodes()
    snapshot.append(_episode(2))
    snapshot.clear()

    assert podcast.episode_count() == 1


def test_direct_episodes_aliases_live_storage() -> None:
    podcast = _podcast()
    podcast.add_episode(_episode(1))

    live = podcast.direct_episodes()
    live[0] = _episode(7)
    live.append(_episode(8))

    assert podcast.episode_count() == 2
    assert podcast.copy_episodes()[0].title == "Episode 7"
    assert podcast.direct_episodes() is live


def test_build_feed_copies_podcast_fields() -> None:
    podcast = _podcast()
    podcast.add_episode(_episode(1))
    podcast.add_episode(_episode(2))

    feed = podcast.build_feed()

    assert feed.channel is not None
    assert feed.channel.title == "My podcast"
    assert feed.channel.description == "This is my very simple podcast."
    assert feed.channel.link == "http://www.example-podcast.com/my-podcast"
    assert feed.channel.language == "EN"
    assert feed.channel.copyright == "2015 My podcast copyright"
    assert [item.guid for item in feed.channel.items] == [
        "https://example.com/podcast/1",
        "https://example.com/podcast/2",
    ]
    assert feed.version == "2.0"


def test_build_feed_snapshots_episode_list() -> None:
    podcast = _podcast()
    podcast.add_episode(_episode(1))
    feed = podcast.build_feed()

    podcast.add_episode(_episode(2))

    assert feed.channel is not None
    assert len(feed.channel.items) == 1
    assert feed.channel.items[0] is podcast.direct_episodes()[0]


def test_build_feed_applies_options_in_order() -> None:
    feed = _podcast().build_feed(author("A"), subtitle("first"), subtitle("second"))

    assert feed.channel is not None
    assert feed.channel.author == "A"
    assert feed.channel.subtitle == "second"


def test_build_feed_stops_at_first_failing_option() -> None:
    applied: list[str] = []

    def record(feed: Feed) -> None:
        applied.append("after")

    with pytest.raises(InvalidImageError):
        _podcast().build_feed(author("A"), image("not a url"), subtitle("S"), record)

    assert applied == []


def test_build_feed_propagates_custom_option_error() -> None:
    def broken(feed: Feed) -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        _podcast().build_feed(broken)


def test_episode_with_no_fields_is_legal() -> None:
    episode = Episode()
    assert episode.enclosure is None
    assert episode.pub_date is None
    assert Item is Episode


def test_rich_text_fields_accept_plain_strings() -> None:
    episode = Episode(summary="<b>bold</b>", content_encoded="<p>x</p>", description=RichText("<i>d</i>"))

    assert episode.summary == RichText("<b>bold</b>")
    assert episode.content_encoded == RichText("<p>x</p>")
    assert episode.description == RichText("<i>d</i>")
    assert str(episode.summary) == "<b>bold</b>"


def test_plain_description_stays_plain() -> None:
    assert Episode(description="plain").description == "plain"


def test_enclosure_length_accepts_integers() -> None:
    assert Enclosure(url="https://example.com/1.mp3", length=1234, type="audio/mpeg").length == "1234"


def test_episode_duration_accepts_seconds() -> None:
    assert Episode.model_validate({"duration": 94}).duration == timedelta(seconds=94)


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Episode.model_validate({"titel": "typo"})

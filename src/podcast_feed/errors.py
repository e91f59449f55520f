from __future__ import annotations


class PodcastFeedError(RuntimeError):
    """Base class for all podcast-feed errors."""


class FeedOptionError(PodcastFeedError, ValueError):
    """A feed option rejected its input."""


class InvalidURLError(FeedOptionError):
    pass


class InvalidImageError(FeedOptionError):
    pass


class FeedWriteError(PodcastFeedError):
    """The output sink failed while the feed was being written."""


class FeedStateError(PodcastFeedError):
    """The feed cannot be serialized in its current state."""


class PodcastConfigError(PodcastFeedError):
    pass

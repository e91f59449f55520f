from typer.testing import CliRunner

import podcast_feed
from podcast_feed import __version__
from podcast_feed.entrypoints.cli import app


def test_version_is_set() -> None:
    assert __version__


def test_cli_version() -> None:
    result = CliRunner().invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_public_api_exports() -> None:
    for name in podcast_feed.__all__:
        assert hasattr(podcast_feed, name), name

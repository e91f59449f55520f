from pathlib import Path
from typing import Annotated

import typer

app = typer.Typer(add_completion=False)


@app.command()
def version() -> None:
    """Print version."""
    from podcast_feed import __version__

    typer.echo(__version__)


@app.command()
def render(
    config: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="Podcast description YAML file."),
    ],
    *,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Feed file to write (default: stdout)."),
    ] = None,
    stream: Annotated[
        bool,
        typer.Option(help="Write episodes one at a time instead of buffering the whole document."),
    ] = False,
    pool: Annotated[
        bool,
        typer.Option(help="Borrow the working buffer from the shared buffer pool."),
    ] = False,
    buffer_size: Annotated[
        int,
        typer.Option(min=0, help="Pre-grow the working buffer to this many bytes."),
    ] = 0,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Render an RSS 2.0 podcast feed from a YAML podcast description."""
    from podcast_feed.entrypoints.render import run_render

    run_render(
        config=config,
        output=output,
        stream=stream,
        use_pool=pool,
        buffer_size=buffer_size,
        verbose=verbose,
    )


def main() -> None:
    app()

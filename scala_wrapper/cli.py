"""
Builds a book with Scala `object wrapper` scaffolds removed from its examples.
The processed chapters are written to the book's build directory.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .book import MDBook
from .config import ConfigError
from .constants import PREPROCESSOR_NAME
from .exceptions import BookError, PreprocessorError
from .preprocessor import ScalaWrapper

__all__ = ["cli"]


@click.command(context_settings={"ignore_unknown_options": True})
@click.version_option(version=__version__, prog_name=PREPROCESSOR_NAME)
@click.argument("arguments", nargs=-1, type=click.UNPROCESSED)
def cli(arguments: tuple[str, ...]):
    """
    Entry point for preprocessing and building a book.

    Args:
        arguments: Command-line arguments; exactly one, the book root
            directory, is expected.

    Returns:
        None.

    Raises:
        click.ClickException: If the book cannot be loaded, a chapter fails
            to process, or the output cannot be written.

    Examples:
        scala-wrapper docs/
    """
    if len(arguments) != 1:
        prog_name = click.get_current_context().info_name
        click.echo(f"USAGE: {prog_name} <book>", err=True)
        return

    try:
        book = MDBook.load(Path(arguments[0]))
        book.with_preprocessor(ScalaWrapper())
        book.build(warn=lambda message: click.echo(message, err=True))
    except (BookError, ConfigError, PreprocessorError) as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()

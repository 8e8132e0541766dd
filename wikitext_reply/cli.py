"""
Formats reply text as wikitext for a threaded discussion page.
Reads the text from a file or stdin and writes the wikitext to stdout.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .builder import format_reply, reply_indentation
from .config import ConfigError, build_config
from .exceptions import UnsupportedCombinationError

__all__ = ["cli"]


@click.command()
@click.version_option()
@click.option("--indent", help="Indentation marker, e.g. ':' or '*#'")
@click.option(
    "--bulleted/--no-bulleted", default=False, help="Reply as a bullet item when --indent is unset"
)
@click.option("--nested", is_flag=True, help="Reply one level under a bulleted entry")
@click.option("--sign/--no-sign", default=True, help="Append a signature when missing")
@click.option("--paragraph-template", multiple=True, help="Template marking paragraph breaks")
@click.option("--verbose", is_flag=True, help="Log formatting steps to stderr")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def cli(
    source,
    indent: str | None = None,
    bulleted: bool = False,
    nested: bool = False,
    sign: bool = True,
    paragraph_template: tuple[str, ...] = (),
    verbose: bool = False,
):
    """
    Entry point for formatting a discussion reply.

    Args:
        source: Open file (or stdin) holding the reply text.
        indent: Explicit indentation marker; derived from `bulleted` and
            `nested` when omitted.
        bulleted: Whether the reply is a bullet item.
        nested: Whether the reply sits under a bulleted entry.
        sign: Whether to append the configured signature when missing.
        paragraph_template: Override for the paragraph templates.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If the content cannot be formatted under the
            requested indentation.

    Examples:
        echo "Agree." | wikitext-reply --bulleted -
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    try:
        config = build_config(
            Path.cwd(),
            paragraph_templates=paragraph_template or None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    indentation = indent if indent is not None else reply_indentation(bulleted, nested)

    text = source.read()
    if not text.strip():
        click.echo("Warning: reply text is empty", err=True)

    try:
        wikitext = format_reply(text, indentation, config, sign=sign)
    except UnsupportedCombinationError as error:
        raise click.ClickException(
            f"Cannot format this combination of content and indentation ({error.code})"
        ) from error

    click.echo(wikitext, nl=False)


if __name__ == "__main__":
    cli()

"""``snapper`` command line: print the snapshot of a python value.

The value is looked up by its dotted path::

    $ snapper mypackage.fixtures.USERS --alias mypackage.fixtures=
    $ snapper mypackage.fixtures.build_users --call
"""
from __future__ import annotations

import logging
import pydoc
from typing import Any

import click

from . import _highlight, printer, utils

logger = logging.getLogger(__name__)


def _parse_aliases(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    aliases: dict[str, str] = {}
    for value in values:
        old, sep, new = value.partition("=")
        if not sep or not old:
            raise click.BadParameter(
                f"{value!r} should be of the form OLD=NEW", ctx, param
            )
        aliases[old] = new
    return aliases


def _locate(target: str) -> Any:
    try:
        value = utils.locate(target)
    except pydoc.ErrorDuringImport as e:
        raise click.ClickException(f"Failed to import {target!r}: {e.value}")
    if value is None:
        raise click.BadParameter(
            f"{target!r} not found", param_hint="'TARGET'"
        )
    return value


@click.command()
@click.argument("target")
@click.option(
    "-a",
    "--alias",
    "aliases",
    multiple=True,
    metavar="OLD=NEW",
    callback=_parse_aliases,
    help="Rewrite the module prefix OLD to NEW in type names. "
    "An empty NEW removes the prefix.",
)
@click.option(
    "--call", is_flag=True, help="Call TARGET and print what it returns."
)
@click.option(
    "--sort-keys", is_flag=True, help="Print dictionaries sorted by key."
)
@click.option(
    "--indent",
    type=click.IntRange(min=1),
    default=None,
    help="Indent with this many spaces instead of tabs.",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Highlight the output (defaults to on when writing to a terminal).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages.")
@click.version_option(package_name="snapper")
def main(
    target: str,
    aliases: dict[str, str],
    call: bool,
    sort_keys: bool,
    indent: int | None,
    color: bool | None,
    verbose: bool,
) -> None:
    """Print a snapshot of the value found at TARGET (e.g.: pkg.mod.VALUE)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    value = _locate(target)
    if call:
        if not callable(value):
            raise click.BadParameter(
                f"{target!r} is not callable", param_hint="'TARGET'"
            )
        logger.debug("Calling %s", target)
        value = value()
    try:
        text = printer.dumps(
            value,
            aliases,
            indent=printer.DEFAULT_INDENT if indent is None else " " * indent,
            sort_keys=sort_keys,
        )
    except ValueError as e:
        raise click.ClickException(str(e))
    if color is None:
        color = click.get_text_stream("stdout").isatty()
    if color:
        text = _highlight.highlight(text)
    click.echo(text, color=color)

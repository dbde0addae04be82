"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from pstore.core.errors import ErrorCode
from pstore.output.errors import print_publish_error, publish_error_exit_code

if TYPE_CHECKING:
    from pstore.cli.context import CLIContext
    from pstore.publish.errors import PublishError


def exit_with_error(ctx: CLIContext, message: str, *, code: ErrorCode) -> NoReturn:
    ctx.console.error(message)
    raise typer.Exit(code=int(code))


def exit_on_publish_error(ctx: CLIContext, error: PublishError) -> NoReturn:
    """Print a publish error and exit with its mapped code."""
    print_publish_error(error, ctx.console)
    raise typer.Exit(code=publish_error_exit_code(error))


def parse_mapping_pairs(items: list[str]) -> list[tuple[str, str]] | str:
    """Parse ``PATH=MAPPING`` items.

    Returns the pairs, or the first malformed item.
    """
    pairs: list[tuple[str, str]] = []
    for item in items:
        if "=" not in item:
            return item
        path, mapping = item.split("=", 1)
        if not path.strip():
            return item
        pairs.append((path.strip(), mapping.strip()))
    return pairs

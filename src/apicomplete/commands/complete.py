"""Complete command -- the entry point called by generated shell scripts.

``apicomplete complete LINE`` prints one candidate per line for the word at
the end of LINE. It always exits 0 and never writes to stderr unless
``--verbose`` is given: an error during interactive completion must never
reach the user's terminal.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer

from apicomplete.commands import get_paths
from apicomplete.completion import CompletionEngine
from apicomplete.config import load_global_config
from apicomplete.exceptions import ApiCompleteError
from apicomplete.output import print_lines
from apicomplete.store import SpecStore

logger = logging.getLogger(__name__)


def complete_command(
    ctx: typer.Context,
    line: str = typer.Argument("", help="The command line up to the cursor."),
    descriptions: Optional[bool] = typer.Option(
        None,
        "--descriptions/--no-descriptions",
        help="Append a tab and a description to each candidate.",
    ),
) -> None:
    """Print completion candidates for a partially typed command line.

    Example::

        apicomplete complete "http https://petstore3.swagger.io/api/v3/pet/"
        apicomplete complete --descriptions -- "http "
    """
    paths = get_paths(ctx)
    if descriptions is None:
        try:
            descriptions = load_global_config(paths).completion.descriptions
        except ApiCompleteError as exc:
            logger.debug("Using default completion settings: %s", exc)
            descriptions = False

    candidates = CompletionEngine(SpecStore(paths)).complete(line)
    print_lines([candidate.render(descriptions) for candidate in candidates])

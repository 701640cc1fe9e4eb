"""Path-var command -- substitute ``:var`` path segments in an HTTPie command.

Used by the generated fish wrapper around ``http``::

    apicomplete path-var -- http :8080/users/:id/posts :id=123 -v
    # http :8080/users/123/posts -v

The rewritten command is printed on one line, shell-quoted.
"""

from __future__ import annotations

import shlex
from typing import Optional

import typer

from apicomplete.output import print_data
from apicomplete.pathvars import rewrite


def path_var_command(
    args: Optional[list[str]] = typer.Argument(
        None, help="The HTTPie command line, after '--'."
    ),
) -> None:
    """Replace :var path segments with values from :var=value arguments."""
    print_data(shlex.join(rewrite(list(args or []))))

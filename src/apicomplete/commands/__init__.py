"""Built-in CLI sub-commands for apicomplete.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~apicomplete.commands.spec` -- register, list, remove, and refresh
  APIs.
* :mod:`~apicomplete.commands.complete` -- print completion candidates for a
  partial command line.
* :mod:`~apicomplete.commands.paths` -- list the paths of an API and the
  parameters of one path.
* :mod:`~apicomplete.commands.completions` -- generate shell completion
  scripts.
* :mod:`~apicomplete.commands.path_var` -- substitute ``:var`` path segments.
* :mod:`~apicomplete.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``spec`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``complete``).

The helpers below give every command the same access to the storage
locations resolved by the root callback and the same error-to-exit-code
translation.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from apicomplete.config import StoragePaths, load_global_config
from apicomplete.exceptions import ApiCompleteError
from apicomplete.models import GlobalConfig
from apicomplete.output import error
from apicomplete.store import SpecStore


def get_paths(ctx: typer.Context) -> StoragePaths:
    """Return the :class:`StoragePaths` stored in ``ctx.obj`` by the root callback."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    paths = obj.get("paths")
    if paths is None:
        paths = StoragePaths.resolve()
    return paths


def get_store(ctx: typer.Context) -> SpecStore:
    return SpecStore(get_paths(ctx))


def get_config(ctx: typer.Context) -> GlobalConfig:
    return load_global_config(get_paths(ctx))


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print an :class:`ApiCompleteError` and exit with its code.

    Raises:
        typer.Exit: With the error's ``exit_code``.
    """
    try:
        yield
    except ApiCompleteError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

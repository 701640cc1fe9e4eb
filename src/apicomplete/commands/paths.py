"""Path and param commands -- browse what a registered API serves.

* ``apicomplete path NAME`` lists ``METHOD URL`` lines, one per operation,
  which pipe well into a fuzzy finder.
* ``apicomplete param NAME PATH`` lists the parameters of one path in HTTPie
  request-item syntax, required parameters first.

Both fetch the spec when its cache is missing.
"""

from __future__ import annotations

from typing import Optional

import typer

from apicomplete.commands import exit_on_error, get_config, get_store
from apicomplete.completion.engine import param_candidate, path_candidate, sorted_params
from apicomplete.exceptions import NotFoundError
from apicomplete.fetcher import SpecFetcher
from apicomplete.index import PathIndex
from apicomplete.output import print_lines


def _load_index(ctx: typer.Context, name: str) -> PathIndex:
    store = get_store(ctx)
    entry = store.get(name)
    cached = SpecFetcher(store, get_config(ctx).request).ensure_cache(entry)
    return PathIndex(entry.base_url, cached)


def path_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name of the API."),
    pattern: Optional[str] = typer.Option(
        None, "--pattern", "-p", help="Only paths whose template contains PATTERN."
    ),
    fish: bool = typer.Option(
        False, "--fish", help="Print 'URL<TAB>summary' lines for fish completion."
    ),
) -> None:
    """List the paths of an API.

    Example::

        apicomplete path petstore --pattern pet
        apicomplete path petstore | fzf
    """
    with exit_on_error():
        index = _load_index(ctx, name)

    entries = index.filter(pattern) if pattern else index.paths_under()
    lines = []
    for entry in entries:
        if fish:
            lines.append(path_candidate(index.base_url, entry).render(descriptions=True))
        elif entry.methods:
            url = index.full_url(entry)
            lines.extend(f"{method.value.upper()} {url}" for method in entry.methods)
        else:
            lines.append(index.full_url(entry))
    print_lines(lines)


def param_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name of the API."),
    path: str = typer.Argument(help="Path template or concrete path, e.g. /pet/{petId}."),
    pattern: Optional[str] = typer.Option(
        None, "--pattern", "-p", help="Only parameters whose name contains PATTERN."
    ),
) -> None:
    """List the query, header, and cookie parameters of a path.

    Example::

        apicomplete param petstore /pet/findByStatus
    """
    with exit_on_error():
        index = _load_index(ctx, name)
        entry = index.lookup(path)
        if entry is None:
            raise NotFoundError(f"No path of '{name}' matches '{path}'")

    lines = []
    for param in sorted_params(entry):
        if pattern and pattern not in param.name:
            continue
        candidate = param_candidate(param)
        if candidate is not None:
            lines.append(candidate.render(descriptions=True))
    print_lines(lines)

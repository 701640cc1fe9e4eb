"""Spec commands -- manage the registry of APIs.

Provides the ``apicomplete spec`` sub-command group:

* ``spec list`` (``ls``) -- names in registry order, or a detailed table.
* ``spec add`` -- fetch a spec and register it under a name.
* ``spec save`` -- like ``add``, but overwrites an existing entry.
* ``spec remove`` (``rm``) -- delete an entry and its cache.
* ``spec refresh`` (``sync``) -- re-fetch caches.

``add`` and ``save`` fetch before they write, so an unreachable or invalid
spec never leaves a partial entry behind.
"""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from apicomplete.commands import exit_on_error, get_config, get_store
from apicomplete.exceptions import ApiCompleteError, InvalidUsageError
from apicomplete.fetcher import SpecFetcher
from apicomplete.models import ApiEntry
from apicomplete.output import error, info, print_lines, print_table, success, suggest
from apicomplete.store import validate_name


spec_app = typer.Typer(no_args_is_help=True)


def _make_entry(name: str, spec_url: str, base_url: Optional[str]) -> ApiEntry:
    validate_name(name)
    try:
        return ApiEntry(name=name, spec_url=spec_url, base_url=base_url or "")
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid API entry: {exc}") from None


def _register(ctx: typer.Context, entry: ApiEntry, force: bool) -> None:
    store = get_store(ctx)
    fetcher = SpecFetcher(store, get_config(ctx).request)
    info(f"Fetching {entry.spec_url}")
    cached = fetcher.register(entry, force=force)
    success(f"Registered '{entry.name}' with {len(cached.paths)} paths at {entry.base_url}")
    suggest(f"Try: apicomplete complete 'http {entry.base_url}/'")


@spec_app.command("list")
def spec_list(
    ctx: typer.Context,
    detailed: bool = typer.Option(
        False, "--detailed", "-d", help="Show spec URL, base URL, and cache file."
    ),
) -> None:
    """List registered APIs in registration order.

    Example::

        apicomplete spec list
        apicomplete spec list --detailed
    """
    with exit_on_error():
        store = get_store(ctx)
        entries = store.list()

    if not entries:
        info("No APIs registered.")
        suggest("Add one with: apicomplete spec add <name> <spec-url>")
        return

    if not detailed:
        print_lines([entry.name for entry in entries])
        return

    rows = []
    for entry in entries:
        cache = store.cache_path(entry.name)
        rows.append(
            [entry.name, entry.spec_url, entry.base_url, str(cache) if cache.is_file() else "-"]
        )
    print_table(["Name", "Spec URL", "Base URL", "Cache"], rows, title="APIs")


spec_app.command("ls", hidden=True)(spec_list)


@spec_app.command("add")
def spec_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Unique name for the API."),
    spec_url: str = typer.Argument(help="URL of the OpenAPI 3.x JSON document."),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Base URL requests go to. Defaults to the spec URL's origin."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing entry."),
) -> None:
    """Fetch a spec and register it under NAME.

    Example::

        apicomplete spec add petstore https://petstore3.swagger.io/api/v3/openapi.json \\
            --base-url https://petstore3.swagger.io/api/v3
    """
    with exit_on_error():
        _register(ctx, _make_entry(name, spec_url, base_url), force=force)


@spec_app.command("save")
def spec_save(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Unique name for the API."),
    url: str = typer.Option(..., "--url", "-u", help="URL of the OpenAPI 3.x JSON document."),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Base URL requests go to. Defaults to the spec URL's origin."
    ),
) -> None:
    """Register or overwrite an API (same as ``add --force``)."""
    with exit_on_error():
        _register(ctx, _make_entry(name, url, base_url), force=True)


@spec_app.command("remove")
def spec_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name of the API to remove."),
) -> None:
    """Remove an API and its cached spec."""
    with exit_on_error():
        get_store(ctx).remove(name)
    success(f"Removed '{name}'")


spec_app.command("rm", hidden=True)(spec_remove)


@spec_app.command("refresh")
def spec_refresh(
    ctx: typer.Context,
    names: Optional[list[str]] = typer.Argument(None, help="APIs to refresh."),
    all_: bool = typer.Option(False, "--all", "-a", help="Refresh every registered API."),
) -> None:
    """Re-fetch the specs of the named APIs and replace their caches.

    Every name is checked before anything is fetched. When a fetch fails the
    previous cache is kept, the remaining APIs are still refreshed, and the
    command exits with the code of the first failure.

    Example::

        apicomplete spec refresh petstore
        apicomplete spec refresh --all
    """
    with exit_on_error():
        store = get_store(ctx)
        if all_:
            entries = store.list()
        elif names:
            entries = [store.get(name) for name in names]
        else:
            raise InvalidUsageError("Give one or more API names, or --all")
        fetcher = SpecFetcher(store, get_config(ctx).request)

    exit_code = 0
    for entry in entries:
        try:
            cached = fetcher.refresh(entry)
        except ApiCompleteError as exc:
            error(str(exc))
            exit_code = exit_code or exc.exit_code
            continue
        success(f"Refreshed '{entry.name}' ({len(cached.paths)} paths)")

    if exit_code:
        raise typer.Exit(code=exit_code)


spec_app.command("sync", hidden=True)(spec_refresh)

"""Config commands -- view and modify global configuration.

Provides the ``apicomplete config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~apicomplete.models.GlobalConfig`). Settings control the fetch
timeout and TLS behaviour, and the defaults of the completion commands.
"""

from __future__ import annotations

import json

import typer
from pydantic import ValidationError

from apicomplete.commands import exit_on_error, get_config, get_paths
from apicomplete.config import save_global_config
from apicomplete.models import GlobalConfig
from apicomplete.output import error, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show current configuration as JSON.

    Example::

        apicomplete config show
    """
    with exit_on_error():
        config = get_config(ctx)
    info(f"Config file: {get_paths(ctx).config_file}")
    print_data(json.dumps(config.model_dump(mode="json"), indent=2))


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, float, or a comma-separated list).
    The updated config is validated against
    :class:`~apicomplete.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or Pydantic validation fails.

    Example::

        apicomplete config set request.timeout 5
        apicomplete config set completion.descriptions true
        apicomplete config set completion.commands http,https,xh
    """
    with exit_on_error():
        config = get_config(ctx)
    data = config.model_dump(mode="json")

    # Navigate the dot-separated key path.
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    # Type coerce the value to match the current field type.
    current = target[final_key]
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = type(current)(value)
        except ValueError:
            error(f"Expected {type(current).__name__} for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif isinstance(current, list):
        coerced = [item.strip() for item in value.split(",") if item.strip()]
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    with exit_on_error():
        save_global_config(get_paths(ctx), new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is given.

    Example::

        apicomplete config reset --force
    """
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    with exit_on_error():
        save_global_config(get_paths(ctx), GlobalConfig())
    success("Configuration reset to defaults.")

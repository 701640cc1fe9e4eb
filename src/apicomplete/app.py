"""Typer application and CLI entry point for apicomplete.

This module wires together the top-level Typer application: the ``spec``
and ``config`` sub-command groups and the single commands ``complete``,
``path``, ``param``, ``path-var`` and ``completions``.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`apicomplete.config`: Storage path resolution.
    :mod:`apicomplete.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from apicomplete import __version__
from apicomplete.config import StoragePaths
from apicomplete.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="apicomplete",
    help="OpenAPI-aware command-line completion for HTTPie.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apicomplete {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~apicomplete.output.OutputManager` and
    logging from CLI flags, and stores the resolved
    :class:`~apicomplete.config.StoragePaths` in ``ctx.obj["paths"]`` unless
    the caller already provided one.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from apicomplete.output import OutputManager, set_output, setup_logging

    output = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    setup_logging(output)

    ctx.ensure_object(dict)
    if ctx.obj.get("paths") is None:
        ctx.obj["paths"] = StoragePaths.resolve()
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from apicomplete.commands.complete import complete_command  # noqa: E402
from apicomplete.commands.completions import completions_command  # noqa: E402
from apicomplete.commands.config import config_app  # noqa: E402
from apicomplete.commands.path_var import path_var_command  # noqa: E402
from apicomplete.commands.paths import param_command, path_command  # noqa: E402
from apicomplete.commands.spec import spec_app  # noqa: E402

app.add_typer(spec_app, name="spec", help="Register and manage API specs.")
app.add_typer(config_app, name="config", help="Configuration management.")
app.command("complete")(complete_command)
app.command("path")(path_command)
app.command("param")(param_command)
app.command(
    "path-var",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(path_var_command)
app.command("completions")(completions_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception, paths: StoragePaths) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.
        paths: Storage locations resolved at startup; the log goes under
            ``paths.logs_dir``.

    Returns:
        Absolute path to the written crash log file.
    """
    logs_dir = paths.logs_dir
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``apicomplete`` console script.

    Unhandled :class:`~apicomplete.exceptions.ApiCompleteError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    paths = StoragePaths.resolve()
    try:
        app(obj={"paths": paths})
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from apicomplete.exceptions import ApiCompleteError
        from apicomplete.output import error

        if isinstance(exc, ApiCompleteError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc, paths)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)

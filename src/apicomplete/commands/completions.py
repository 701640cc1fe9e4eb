"""Completions command -- generate a shell completion script.

The script is printed to stdout, or written to ``--output``. It attaches to
the commands listed in ``completion.commands`` of the global config unless
``--command`` is given.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from apicomplete.commands import exit_on_error, get_config
from apicomplete.output import print_data, success, suggest
from apicomplete.shell import SUPPORTED_SHELLS, render_completion_script, write_completion_script


def completions_command(
    ctx: typer.Context,
    shell: str = typer.Option(
        ..., "--shell", "-s", help=f"Target shell ({', '.join(SUPPORTED_SHELLS)})."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the script to this file instead of stdout."
    ),
    commands: Optional[list[str]] = typer.Option(
        None, "--command", "-c", help="Command to complete (repeatable). Defaults to config."
    ),
) -> None:
    """Generate a completion script that calls ``apicomplete complete``.

    Example::

        apicomplete completions --shell fish --output ~/.config/fish/conf.d/apicomplete.fish
        apicomplete completions --shell bash >> ~/.bashrc
    """
    with exit_on_error():
        names = commands or get_config(ctx).completion.commands
        if output is None:
            print_data(render_completion_script(shell, names).rstrip("\n"))
            return
        path = write_completion_script(shell, output.expanduser(), names)

    success(f"Wrote {shell} completion script to {path}")
    if shell == "fish":
        suggest("Open a new fish session to load it.")
    else:
        suggest(f"Add 'source {path}' to your ~/.bashrc.")

"""Render static shell completion scripts that delegate to ``apicomplete``.

The generated scripts hold no API knowledge of their own: on every
completion request they pass the command line up to the cursor to
``apicomplete complete`` and offer whatever it prints. Registering or
refreshing an API therefore never requires regenerating the script.

The generation process:

1. A Jinja2 environment is configured with templates from ``shell/templates/``.
2. The template ``<shell>.j2`` is rendered with the program name and the
   commands completion is attached to (``http`` and ``https`` by default).
3. The script is returned, or written atomically when an output path is given.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from apicomplete.config import atomic_write
from apicomplete.exceptions import InvalidUsageError


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``shell/templates/``)."""

SUPPORTED_SHELLS = ("fish", "bash")

DEFAULT_COMMANDS = ("http", "https")

_COMMAND_NAME = re.compile(r"[A-Za-z0-9_.+-]+")


def render_completion_script(
    shell: str,
    commands: Optional[Sequence[str]] = None,
    program: str = "apicomplete",
) -> str:
    """Render the completion script for *shell*.

    Args:
        shell: One of :data:`SUPPORTED_SHELLS`.
        commands: Commands to attach completion to. Defaults to
            :data:`DEFAULT_COMMANDS`.
        program: Executable the script calls back into.

    Raises:
        InvalidUsageError: If *shell* is unsupported or a command name is
            not a plain word.

    Example::

        script = render_completion_script("fish")
        Path("~/.config/fish/conf.d/apicomplete.fish").expanduser().write_text(script)
    """
    if shell not in SUPPORTED_SHELLS:
        raise InvalidUsageError(
            f"Unsupported shell '{shell}'. Choose from: {', '.join(SUPPORTED_SHELLS)}"
        )
    names = list(commands) if commands else list(DEFAULT_COMMANDS)
    for name in [program, *names]:
        if not _COMMAND_NAME.fullmatch(name):
            raise InvalidUsageError(f"Invalid command name for completion: {name!r}")

    env = _create_jinja_env()
    template = env.get_template(f"{shell}.j2")
    return template.render(program=program, commands=names)


def write_completion_script(
    shell: str,
    output: Path,
    commands: Optional[Sequence[str]] = None,
    program: str = "apicomplete",
) -> Path:
    """Render the script for *shell* and write it to *output*."""
    script = render_completion_script(shell, commands, program)
    atomic_write(output, script)
    return output


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for shell templates.

    Autoescape is off because the output is shell code, not HTML; command
    names are validated before rendering instead.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

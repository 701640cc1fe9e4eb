"""Shell integration -- static completion scripts for fish and bash.

The main exports are :func:`render_completion_script` and
:func:`write_completion_script`, used by the ``apicomplete completions``
command.
"""

from apicomplete.shell.generator import (
    SUPPORTED_SHELLS,
    render_completion_script,
    write_completion_script,
)

__all__ = ["SUPPORTED_SHELLS", "render_completion_script", "write_completion_script"]

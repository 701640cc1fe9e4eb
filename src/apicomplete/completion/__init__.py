"""Completion engine -- suggest the next word of an HTTPie command line.

Typical usage::

    from apicomplete.completion import CompletionEngine

    engine = CompletionEngine(store)
    for candidate in engine.complete("http https://petstore3.swagger.io/api/v3/pet/"):
        print(candidate.value)

Sub-modules:

* :mod:`~apicomplete.completion.tokens` -- shell-style splitting of the line
  at the cursor.
* :mod:`~apicomplete.completion.engine` -- the :func:`classify` state
  decision and the :class:`CompletionEngine` built on it.
"""

from apicomplete.completion.engine import (
    Candidate,
    CompletionEngine,
    CompletionState,
    Decision,
    classify,
)
from apicomplete.completion.tokens import Tokens, tokenize

__all__ = [
    "Candidate",
    "CompletionEngine",
    "CompletionState",
    "Decision",
    "Tokens",
    "classify",
    "tokenize",
]

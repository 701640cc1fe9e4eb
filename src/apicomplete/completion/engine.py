"""Turn a partially typed HTTPie command line into completion candidates.

The decision of *what* to complete is made by :func:`classify`, a pure
function over the tokenized line and the registered APIs. It returns one of
three explicit states:

``NO_BASE_MATCHED``
    No word on the line starts with a registered base URL. Every base URL
    is offered, in registry order.

``BASE_MATCHED``
    The word under the cursor starts with one or more base URLs. Full URLs
    of the paths continuing what was typed are offered.

``PATH_MATCHED``
    A URL on the line resolves to a path template. Its query, header and
    cookie parameters are offered in HTTPie request-item syntax
    (``name==``, ``Name:``, ``Cookie:name=``).

:class:`CompletionEngine` wires :func:`classify` to a
:class:`~apicomplete.store.SpecStore` and guarantees that completion never
raises: the shell must never show an error while the user is typing.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from apicomplete.completion.tokens import Tokens, tokenize
from apicomplete.index import PathIndex, normalize_path
from apicomplete.models import ApiEntry, ParamEntry, ParamLocation, PathEntry
from apicomplete.store import SpecStore

logger = logging.getLogger(__name__)

REQUIRED_MARKER = "(required)"


class CompletionState(str, enum.Enum):
    NO_BASE_MATCHED = "no_base_matched"
    BASE_MATCHED = "base_matched"
    PATH_MATCHED = "path_matched"


@dataclass(frozen=True)
class Candidate:
    """One completion suggestion and the text shown beside it."""

    value: str
    description: str = ""

    def render(self, descriptions: bool = False) -> str:
        if descriptions and self.description:
            return f"{self.value}\t{self.description}"
        return self.value


@dataclass
class Decision:
    """Outcome of :func:`classify`: the state reached and what to offer."""

    state: CompletionState
    candidates: list[Candidate] = field(default_factory=list)


ApiIndex = tuple[ApiEntry, Optional[PathIndex]]


# ------------------------------------------------------------------ #
# Rendering
# ------------------------------------------------------------------ #


def param_value(param: ParamEntry) -> Optional[str]:
    """HTTPie request-item prefix for *param*; ``None`` for path parameters."""
    if param.location == ParamLocation.QUERY:
        return f"{param.name}=="
    if param.location == ParamLocation.HEADER:
        return f"{param.name}:"
    if param.location == ParamLocation.COOKIE:
        return f"Cookie:{param.name}="
    return None


def param_candidate(param: ParamEntry) -> Optional[Candidate]:
    value = param_value(param)
    if value is None:
        return None
    description = param.description or param.name
    if param.required:
        description = f"{REQUIRED_MARKER} {description}"
    return Candidate(value=value, description=description)


def path_candidate(base_url: str, entry: PathEntry) -> Candidate:
    return Candidate(value=base_url + entry.template, description=entry.summary or entry.template)


def sorted_params(entry: PathEntry) -> list[ParamEntry]:
    """Required parameters first, declaration order otherwise."""
    return sorted(entry.parameters, key=lambda p: not p.required)


# ------------------------------------------------------------------ #
# Classification
# ------------------------------------------------------------------ #


def _base_matches(word: str, apis: Sequence[ApiIndex]) -> list[tuple[ApiEntry, Optional[PathIndex], str]]:
    """APIs whose base URL *word* starts with, plus the remainder after it.

    The base URL must end at a segment boundary, so ``https://a.io/api``
    does not match ``https://a.io/apiv2``.
    """
    matches = []
    for entry, index in apis:
        base = entry.base_url
        if not base or not word.startswith(base):
            continue
        remainder = word[len(base):]
        if remainder and remainder[0] not in "/?#":
            continue
        matches.append((entry, index, remainder))
    return matches


def _dedupe(candidates: list[Candidate]) -> list[Candidate]:
    seen: set[str] = set()
    result = []
    for candidate in candidates:
        if candidate.value not in seen:
            seen.add(candidate.value)
            result.append(candidate)
    return result


def _all_base_urls(apis: Sequence[ApiIndex]) -> Decision:
    candidates = [
        Candidate(value=entry.base_url, description=entry.name) for entry, _ in apis if entry.base_url
    ]
    return Decision(CompletionState.NO_BASE_MATCHED, _dedupe(candidates))


def _param_candidates(
    entries: list[PathEntry], tokens: Tokens, prefix: str = ""
) -> list[Candidate]:
    candidates = []
    for entry in entries:
        for param in sorted_params(entry):
            candidate = param_candidate(param)
            if candidate is None or tokens.has_word_starting_with(candidate.value):
                continue
            if prefix and not candidate.value.startswith(prefix):
                continue
            candidates.append(candidate)
    return _dedupe(candidates)


def _complete_current_url(
    matches: list[tuple[ApiEntry, Optional[PathIndex], str]], tokens: Tokens
) -> Decision:
    """The word under the cursor is a URL beneath one or more base URLs."""
    indexed = [(entry, index, rest) for entry, index, rest in matches if index is not None]

    exact = [
        entry
        for _, index, rest in indexed
        for entry in index.paths_under()
        if rest and entry.template == rest
    ]
    if exact:
        return Decision(CompletionState.PATH_MATCHED, _param_candidates(exact, tokens))

    paths: list[Candidate] = []
    for _, index, rest in indexed:
        paths.extend(path_candidate(index.base_url, p) for p in index.find(index.base_url, rest))
    if paths:
        return Decision(CompletionState.BASE_MATCHED, _dedupe(paths))

    # Nothing continues the typed text; a trailing "/" may still name a path.
    loose = [
        entry
        for _, index, rest in indexed
        for entry in index.paths_under()
        if rest and normalize_path(entry.template) == normalize_path(rest)
    ]
    if loose:
        return Decision(CompletionState.PATH_MATCHED, _param_candidates(loose, tokens))
    return Decision(CompletionState.BASE_MATCHED, [])


def _complete_after_url(
    matches: list[tuple[ApiEntry, Optional[PathIndex], str]], tokens: Tokens
) -> Decision:
    """The cursor has moved past a URL word; offer its path's parameters."""
    entries = []
    for _, index, rest in matches:
        if index is None:
            continue
        entry = index.lookup(rest or "/")
        if entry is not None:
            entries.append(entry)
    if not entries:
        return Decision(CompletionState.BASE_MATCHED, [])
    return Decision(
        CompletionState.PATH_MATCHED, _param_candidates(entries, tokens, prefix=tokens.current)
    )


def classify(tokens: Tokens, apis: Sequence[ApiIndex]) -> Decision:
    """Decide what to complete for *tokens*.

    Args:
        tokens: The tokenized command line.
        apis: Registered entries in registry order, each paired with its
            :class:`PathIndex` or ``None`` when no cache is available.

    Returns:
        The reached state and its candidates. Candidates from APIs sharing a
        base URL are merged in registry order with duplicates removed.
    """
    if tokens.current:
        matches = _base_matches(tokens.current, apis)
        if matches:
            return _complete_current_url(matches, tokens)

    for word in reversed(tokens.words):
        matches = _base_matches(word, apis)
        if matches:
            return _complete_after_url(matches, tokens)

    return _all_base_urls(apis)


# ------------------------------------------------------------------ #
# Engine
# ------------------------------------------------------------------ #


class CompletionEngine:
    """Complete command lines against the APIs registered in *store*.

    Caches are read but never fetched: an API without a usable cache only
    contributes its base URL.
    """

    def __init__(self, store: SpecStore) -> None:
        self._store = store

    def _index_for(self, entry: ApiEntry, line: str) -> Optional[PathIndex]:
        if not entry.base_url or entry.base_url not in line:
            return None
        cached = self._store.load_cache(entry.name)
        if cached is None:
            return None
        return PathIndex(entry.base_url, cached)

    def decide(self, line: str) -> Decision:
        tokens = tokenize(line)
        apis = [(entry, self._index_for(entry, line)) for entry in self._store.list()]
        decision = classify(tokens, apis)
        logger.debug(
            "Completion for %r: %s (%d candidates)",
            line,
            decision.state.value,
            len(decision.candidates),
        )
        return decision

    def complete(self, line: str) -> list[Candidate]:
        """Return candidates for *line*; any failure yields an empty list."""
        try:
            return self.decide(line).candidates
        except Exception:
            logger.debug("Completion failed for %r", line, exc_info=True)
            return []

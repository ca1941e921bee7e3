"""Pattern rules for accidental keystrokes.

Each rule receives a normalized query and a ``is_known`` predicate and
returns the repaired query, or ``None`` when it does not apply. A repair is
only reported when the repaired text is a known term, which is what makes
these corrections safe to apply without asking the user.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

KnownPredicate = Callable[[str], bool]

REPEATED_RUN_RE = re.compile(r"(.)\1{2,}")
MIN_STEM_LENGTH = 3


@dataclass(frozen=True)
class ExtraLetterRule:
    kind: str
    check: Callable[[str, KnownPredicate], str | None]


def collapse_repeated_runs(query: str, is_known: KnownPredicate) -> str | None:
    if not REPEATED_RUN_RE.search(query):
        return None
    for keep in (1, 2):
        collapsed = REPEATED_RUN_RE.sub(lambda match: match.group(1) * keep, query)
        if is_known(collapsed):
            return collapsed
    return None


def _strip_trailing(word: str, is_known: KnownPredicate) -> str | None:
    for extra in (1, 2):
        stem = word[:-extra]
        if len(stem) < MIN_STEM_LENGTH:
            break
        if is_known(stem):
            return stem
    return None


def strip_trailing_chars(query: str, is_known: KnownPredicate) -> str | None:
    if " " in query or len(query) <= MIN_STEM_LENGTH:
        return None
    return _strip_trailing(query, is_known)


def repair_split_token(query: str, is_known: KnownPredicate) -> str | None:
    """Fix a lone letter typed as its own token ("playstatio n", "play p")."""
    tokens = query.split(" ")
    if len(tokens) < 2:
        return None

    for idx, token in enumerate(tokens):
        if len(token) != 1 or not token.isalpha():
            continue
        attempts = []
        if idx > 0:
            attempts.append(tokens[: idx - 1] + [tokens[idx - 1] + token] + tokens[idx + 1 :])
        if idx + 1 < len(tokens):
            attempts.append(tokens[:idx] + [token + tokens[idx + 1]] + tokens[idx + 2 :])
        attempts.append(tokens[:idx] + tokens[idx + 1 :])
        for attempt in attempts:
            candidate = " ".join(attempt)
            if candidate and is_known(candidate):
                return candidate
    return None


def strip_word_trailing_chars(query: str, is_known: KnownPredicate) -> str | None:
    tokens = query.split(" ")
    if len(tokens) < 2:
        return None

    repaired: list[str] = []
    changed = False
    for token in tokens:
        fixed = None
        if len(token) > MIN_STEM_LENGTH and not is_known(token):
            fixed = _strip_trailing(token, is_known)
        repaired.append(fixed or token)
        changed = changed or fixed is not None
    return " ".join(repaired) if changed else None


EXTRA_LETTER_RULES = (
    ExtraLetterRule("repeated_run", collapse_repeated_runs),
    ExtraLetterRule("split_token", repair_split_token),
    ExtraLetterRule("trailing_chars", strip_trailing_chars),
    ExtraLetterRule("word_trailing_chars", strip_word_trailing_chars),
)


def detect_extra_letters(
    query: str,
    is_known: KnownPredicate,
    rules: tuple[ExtraLetterRule, ...] = EXTRA_LETTER_RULES,
) -> tuple[str, str] | None:
    for rule in rules:
        repaired = rule.check(query, is_known)
        if repaired and repaired != query:
            return rule.kind, repaired
    return None

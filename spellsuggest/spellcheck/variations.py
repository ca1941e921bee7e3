from __future__ import annotations

from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

MAX_VARIATIONS = 300
MAX_GROWTH = 2

PHONETIC_SUBSTITUTIONS: dict[str, tuple[str, ...]] = {
    "c": ("k", "s", "ck"),
    "k": ("c", "ck"),
    "s": ("c", "z"),
    "z": ("s",),
    "f": ("ph", "v"),
    "ph": ("f",),
    "v": ("f", "w"),
    "w": ("v", "u"),
    "i": ("y", "e"),
    "y": ("i",),
    "o": ("u", "a"),
    "u": ("o", "w"),
    "a": ("e", "o"),
    "e": ("a", "i"),
    "x": ("ks", "z"),
}

COMMON_INSERTS = ("h", "e", "i", "a", "o", "u")


class VariationKind(str, Enum):
    ORIGINAL = "original"
    DELETION = "deletion"
    TRANSPOSITION = "transposition"
    PHONETIC = "phonetic"
    INSERTION = "insertion"


def _deletions(term: str):
    for idx in range(len(term)):
        yield term[:idx] + term[idx + 1 :]


def _transpositions(term: str):
    for idx in range(len(term) - 1):
        if term[idx] == term[idx + 1]:
            continue
        yield term[:idx] + term[idx + 1] + term[idx] + term[idx + 2 :]


def _phonetic_substitutions(term: str):
    for pattern, replacements in PHONETIC_SUBSTITUTIONS.items():
        start = term.find(pattern)
        while start != -1:
            end = start + len(pattern)
            for replacement in replacements:
                yield term[:start] + replacement + term[end:]
            start = term.find(pattern, start + 1)


def _insertions(term: str):
    for idx in range(len(term) + 1):
        for ch in COMMON_INSERTS:
            yield term[:idx] + ch + term[idx:]


STRATEGIES = (
    (VariationKind.DELETION, _deletions),
    (VariationKind.TRANSPOSITION, _transpositions),
    (VariationKind.PHONETIC, _phonetic_substitutions),
    (VariationKind.INSERTION, _insertions),
)


@lru_cache(maxsize=8192)
def variation_kinds(term: str, max_variations: int = MAX_VARIATIONS) -> Mapping[str, VariationKind]:
    """Map every generated variant of ``term`` to the edit that produced it.

    The first strategy to produce a variant wins, so a string reachable by
    both a deletion and an insertion is reported as a deletion. The returned
    mapping is shared between callers and read-only.
    """
    found: dict[str, VariationKind] = {term: VariationKind.ORIGINAL}
    limit = len(term) + MAX_GROWTH
    for kind, strategy in STRATEGIES:
        for variation in strategy(term):
            if len(found) >= max_variations:
                return MappingProxyType(found)
            if not variation or len(variation) > limit or variation in found:
                continue
            found[variation] = kind
    return MappingProxyType(found)


@lru_cache(maxsize=8192)
def variations(term: str, max_variations: int = MAX_VARIATIONS) -> frozenset[str]:
    return frozenset(variation_kinds(term, max_variations))

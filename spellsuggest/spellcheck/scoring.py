from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from spellsuggest.spellcheck.budget import Deadline
from spellsuggest.spellcheck.metrics import (
    bounded_levenshtein,
    edit_similarity,
    lcs_similarity,
    ngram_similarity,
    phonetic_match,
    transposition_similarity,
)


@dataclass(frozen=True)
class ScoringWeights:
    edit: float = 0.3
    lcs: float = 0.25
    bigram: float = 0.2
    trigram: float = 0.15
    transposition: float = 0.0
    phonetic_bonus: float = 0.3
    prefix_bonus: float = 0.2
    suffix_bonus: float = 0.1
    length_penalty: float = 0.2
    affix_length: int = 3
    length_tolerance: int = 3


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoredCandidate:
    term: str
    score: float
    distance: int | None = None


def score(query: str, candidate: str, weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    combined = (
        edit_similarity(query, candidate) * weights.edit
        + lcs_similarity(query, candidate) * weights.lcs
        + ngram_similarity(query, candidate, 2) * weights.bigram
        + ngram_similarity(query, candidate, 3) * weights.trigram
        + transposition_similarity(query, candidate) * weights.transposition
    )

    if phonetic_match(query, candidate):
        combined += weights.phonetic_bonus

    prefix = query[: weights.affix_length]
    suffix = query[-weights.affix_length :]
    if prefix and candidate.startswith(prefix):
        combined += weights.prefix_bonus
    if suffix and candidate.endswith(suffix):
        combined += weights.suffix_bonus

    if abs(len(query) - len(candidate)) > weights.length_tolerance:
        combined -= weights.length_penalty

    return max(0.0, min(1.0, combined))


def rank(
    query: str,
    candidates: Iterable[str],
    *,
    limit: int = 3,
    min_score: float = 0.0,
    max_distance: int | None = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    deadline: Deadline | None = None,
) -> list[ScoredCandidate]:
    """Best-scoring candidates for ``query``, highest first.

    Ties keep candidate iteration order. With ``max_distance`` set, candidates
    further away than that many edits are skipped before scoring. An expired
    deadline ends the scan and ranks whatever was scored so far.
    """
    if limit <= 0:
        return []

    scored: list[ScoredCandidate] = []
    for candidate in candidates:
        if deadline is not None and deadline.expired():
            break
        distance = None
        if max_distance is not None:
            distance = bounded_levenshtein(query, candidate, max_distance)
            if distance is None:
                continue
        value = score(query, candidate, weights)
        if value >= min_score:
            scored.append(ScoredCandidate(term=candidate, score=value, distance=distance))

    # sorted() is stable, so equal scores stay in iteration order.
    scored = sorted(scored, key=lambda item: -item.score)
    return scored[:limit]

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from spellsuggest.common.config import settings
from spellsuggest.spellcheck.budget import Deadline
from spellsuggest.spellcheck.cache import CorrectionCache
from spellsuggest.spellcheck.dictionary import Dictionary, DictionaryLoader
from spellsuggest.spellcheck.index import CandidateIndex, CandidateIndexBuilder, coerce_documents
from spellsuggest.spellcheck.metrics import edit_similarity, osa_distance, phonetic_match
from spellsuggest.spellcheck.models import CacheStats, CorrectionResult, CorrectionType
from spellsuggest.spellcheck.rules import detect_extra_letters
from spellsuggest.spellcheck.scoring import DEFAULT_WEIGHTS, ScoredCandidate, ScoringWeights, rank, score
from spellsuggest.spellcheck.variations import MAX_VARIATIONS, VariationKind, variation_kinds
from spellsuggest.text.normalization import normalize

logger = logging.getLogger(__name__)

Corpus = Iterable[Any] | None

# The query was produced from the candidate by this edit.
CANDIDATE_SIDE_TYPES = {
    VariationKind.DELETION: CorrectionType.TYPO,
    VariationKind.TRANSPOSITION: CorrectionType.TYPO,
    VariationKind.PHONETIC: CorrectionType.PHONETIC,
    VariationKind.INSERTION: CorrectionType.EXTRA_LETTER,
}

# The candidate was produced from the query by this edit.
QUERY_SIDE_TYPES = {
    VariationKind.DELETION: CorrectionType.EXTRA_LETTER,
    VariationKind.TRANSPOSITION: CorrectionType.TYPO,
    VariationKind.PHONETIC: CorrectionType.PHONETIC,
    VariationKind.INSERTION: CorrectionType.TYPO,
}


@dataclass(frozen=True)
class EngineStrategy:
    name: str = "balanced"
    weights: ScoringWeights = DEFAULT_WEIGHTS
    min_query_length: int = 2
    min_score: float = 0.5
    variation_confidence: float = 0.85
    extra_letter_confidence: float = 0.95
    misspelling_confidence: float = 0.9
    auto_correct_confidence: float = 0.9
    auto_correct_extra_letter_only: bool = False
    use_known_misspellings: bool = True
    use_extra_letter_rules: bool = True
    match_candidate_variations: bool = True
    match_query_variations: bool = True
    # Must stay >= 2 or single-edit variation matches get pruned.
    max_length_delta: int | None = 3
    max_edit_distance: int | None = None
    max_variations: int = MAX_VARIATIONS
    max_words: int = 8
    rank_max_distance: int = 3


STRATEGIES = {
    "exploratory": EngineStrategy(
        name="exploratory",
        weights=ScoringWeights(transposition=0.15),
        use_known_misspellings=False,
        use_extra_letter_rules=False,
        max_length_delta=None,
    ),
    "balanced": EngineStrategy(),
    "fast": EngineStrategy(
        name="fast",
        min_score=0.6,
        match_query_variations=False,
        max_edit_distance=3,
        auto_correct_extra_letter_only=True,
    ),
}


def get_strategy(name: str) -> EngineStrategy:
    try:
        return STRATEGIES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown spellcheck strategy {name!r}; expected one of {sorted(STRATEGIES)}") from None


@dataclass(frozen=True)
class _Match:
    suggestion: str
    confidence: float
    correction_type: CorrectionType


class SuggestionEngine:
    def __init__(
        self,
        *,
        strategy: EngineStrategy | str | None = None,
        dictionary: Dictionary | DictionaryLoader | None = None,
        cache: CorrectionCache | None = None,
        index_builder: CandidateIndexBuilder | None = None,
        scan_budget_ms: float | None = settings.scan_budget_ms,
        index_budget_ms: float | None = settings.index_budget_ms,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if strategy is None:
            strategy = settings.strategy
        self.strategy = get_strategy(strategy) if isinstance(strategy, str) else strategy
        self._dictionary = dictionary if dictionary is not None else DictionaryLoader()
        self.cache = cache if cache is not None else CorrectionCache(clock=clock)
        self.index_builder = index_builder if index_builder is not None else CandidateIndexBuilder()
        self.scan_budget_ms = scan_budget_ms
        self.index_budget_ms = index_budget_ms
        self._clock = clock

    # ------------- public API -------------

    def dictionary(self) -> Dictionary:
        if isinstance(self._dictionary, DictionaryLoader):
            return self._dictionary.load()
        return self._dictionary

    def suggest(self, query: str | None, corpus: Corpus = None) -> CorrectionResult:
        normalized = normalize(query)
        if len(normalized) < self.strategy.min_query_length:
            return CorrectionResult.no_correction()

        documents = coerce_documents(corpus)
        dictionary = self.dictionary()
        fingerprint = self.index_builder.fingerprint(documents)
        key = (normalized, fingerprint, hash(dictionary.terms))

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        index = self.index_builder.build(
            dictionary,
            documents,
            fingerprint=fingerprint,
            deadline=Deadline(self.index_budget_ms, clock=self._clock),
        )
        deadline = Deadline(self.scan_budget_ms, clock=self._clock)
        result = self._resolve(normalized, index, dictionary, deadline, depth=0)
        if deadline.was_hit:
            logger.debug("spellcheck scan for %r hit its %sms budget", normalized, self.scan_budget_ms)

        self.cache.set(key, normalized, result)
        return result

    def needs_correction(self, query: str | None, corpus: Corpus = None) -> bool:
        return self.suggest(query, corpus).needs_correction

    def auto_correct(self, query: str | None, corpus: Corpus = None) -> str:
        typed = query or ""
        result = self.suggest(typed, corpus)
        if not result.needs_correction or result.suggestion is None:
            return typed
        if self.strategy.auto_correct_extra_letter_only and result.correction_type is not CorrectionType.EXTRA_LETTER:
            return typed
        if result.confidence > self.strategy.auto_correct_confidence:
            return result.suggestion
        return typed

    def rank_candidates(self, query: str | None, corpus: Corpus = None, *, limit: int = 3) -> list[ScoredCandidate]:
        normalized = normalize(query)
        if len(normalized) < self.strategy.min_query_length:
            return []
        documents = coerce_documents(corpus)
        index = self.index_builder.build(
            self.dictionary(),
            documents,
            deadline=Deadline(self.index_budget_ms, clock=self._clock),
        )
        return rank(
            normalized,
            index.candidates,
            limit=limit,
            min_score=self.strategy.min_score,
            max_distance=self.strategy.rank_max_distance,
            weights=self.strategy.weights,
            deadline=Deadline(self.scan_budget_ms, clock=self._clock),
        )

    def clear_cache(self) -> None:
        self.cache.clear()
        self.index_builder.clear()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    # ------------- internals -------------

    def _resolve(
        self,
        query: str,
        index: CandidateIndex,
        dictionary: Dictionary,
        deadline: Deadline,
        *,
        depth: int,
    ) -> CorrectionResult:
        if query in index or self._direct_hit(query, index):
            return CorrectionResult.no_correction()

        match = self._match_term(query, index, dictionary, deadline)
        if match is None and depth == 0 and " " in query:
            match = self._decompose(query, index, dictionary, deadline, depth=depth)
        if match is None or match.suggestion == query:
            return CorrectionResult.no_correction()

        return CorrectionResult(
            needs_correction=True,
            suggestion=match.suggestion,
            confidence=match.confidence,
            correction_type=match.correction_type,
        )

    def _direct_hit(self, query: str, index: CandidateIndex) -> bool:
        if any(query in text for text in index.searchable_texts):
            return True
        return any(query in term for term in index.dictionary_terms)

    def _is_known(self, text: str, index: CandidateIndex) -> bool:
        if text in index:
            return True
        if " " not in text:
            return False
        long_words = [word for word in text.split(" ") if len(word) >= self.index_builder.min_term_length]
        return bool(long_words) and all(word in index for word in long_words)

    def _match_term(
        self,
        query: str,
        index: CandidateIndex,
        dictionary: Dictionary,
        deadline: Deadline,
    ) -> _Match | None:
        strategy = self.strategy
        if strategy.use_known_misspellings:
            target = dictionary.misspellings.get(query)
            if target:
                return _Match(target, strategy.misspelling_confidence, CorrectionType.TYPO)

        if strategy.use_extra_letter_rules:
            detected = detect_extra_letters(query, lambda text: self._is_known(text, index))
            if detected is not None:
                kind, repaired = detected
                logger.debug("extra-letter rule %s matched %r -> %r", kind, query, repaired)
                return _Match(repaired, strategy.extra_letter_confidence, CorrectionType.EXTRA_LETTER)

        return self._scan_candidates(query, index, deadline)

    def _scan_candidates(self, query: str, index: CandidateIndex, deadline: Deadline) -> _Match | None:
        strategy = self.strategy
        query_variants = variation_kinds(query, strategy.max_variations) if strategy.match_query_variations else {}

        best: str | None = None
        best_score = 0.0
        for candidate in index.candidates:
            if deadline.expired():
                break
            if strategy.max_length_delta is not None and abs(len(candidate) - len(query)) > strategy.max_length_delta:
                continue
            if (
                strategy.max_edit_distance is not None
                and osa_distance(query, candidate, strategy.max_edit_distance) is None
            ):
                continue

            value = score(query, candidate, strategy.weights)
            correction_type = self._variation_match(query, candidate, query_variants)
            if correction_type is not None:
                return _Match(candidate, max(value, strategy.variation_confidence), correction_type)

            # Strictly greater: on equal scores the earlier candidate stays.
            if value >= strategy.min_score and value > best_score:
                best = candidate
                best_score = value

        if best is None:
            return None
        confidence = best_score
        # Matches that add or drop words stay below the auto-correct bar.
        if best.count(" ") != query.count(" "):
            confidence = min(confidence, strategy.variation_confidence)
        return _Match(best, confidence, self._direct_type(query, best))

    def _variation_match(self, query: str, candidate: str, query_variants) -> CorrectionType | None:
        if self.strategy.match_candidate_variations:
            kind = variation_kinds(candidate, self.strategy.max_variations).get(query)
            if kind is not None and kind is not VariationKind.ORIGINAL:
                return CANDIDATE_SIDE_TYPES[kind]
        kind = query_variants.get(candidate)
        if kind is not None and kind is not VariationKind.ORIGINAL:
            return QUERY_SIDE_TYPES[kind]
        return None

    def _direct_type(self, query: str, candidate: str) -> CorrectionType:
        if phonetic_match(query, candidate) and edit_similarity(query, candidate) < 0.75:
            return CorrectionType.PHONETIC
        return CorrectionType.TYPO

    def _decompose(
        self,
        query: str,
        index: CandidateIndex,
        dictionary: Dictionary,
        deadline: Deadline,
        *,
        depth: int,
    ) -> _Match | None:
        words = query.split(" ")
        if len(words) > self.strategy.max_words:
            logger.debug("correcting only the first %d of %d words", self.strategy.max_words, len(words))

        corrected: list[str] = []
        confidences: list[float] = []
        types: list[CorrectionType] = []
        for position, word in enumerate(words):
            if position >= self.strategy.max_words or len(word) < self.strategy.min_query_length:
                corrected.append(word)
                continue
            result = self._resolve(word, index, dictionary, deadline, depth=depth + 1)
            if result.needs_correction and result.suggestion:
                corrected.append(result.suggestion)
                confidences.append(result.confidence)
                types.append(result.correction_type)
            else:
                corrected.append(word)

        if not confidences:
            return None
        correction_type = types[0] if len(set(types)) == 1 else CorrectionType.TYPO
        return _Match(" ".join(corrected), min(confidences), correction_type)


spellchecker_engine = SuggestionEngine()


def suggest(query: str | None, corpus: Corpus = None) -> CorrectionResult:
    return spellchecker_engine.suggest(query, corpus)


def needs_correction(query: str | None, corpus: Corpus = None) -> bool:
    return spellchecker_engine.needs_correction(query, corpus)


def auto_correct(query: str | None, corpus: Corpus = None) -> str:
    return spellchecker_engine.auto_correct(query, corpus)


def rank_candidates(query: str | None, corpus: Corpus = None, *, limit: int = 3) -> list[ScoredCandidate]:
    return spellchecker_engine.rank_candidates(query, corpus, limit=limit)


def clear_cache() -> None:
    spellchecker_engine.clear_cache()


def cache_stats() -> CacheStats:
    return spellchecker_engine.cache_stats()

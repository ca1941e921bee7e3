from spellsuggest.text.normalization import NormalizedString, normalize

from .cache import CorrectionCache
from .dictionary import DEFAULT_DICTIONARY, Dictionary, DictionaryLoader, build_dictionary
from .engine import (
    STRATEGIES,
    EngineStrategy,
    SuggestionEngine,
    auto_correct,
    cache_stats,
    clear_cache,
    get_strategy,
    needs_correction,
    rank_candidates,
    spellchecker_engine,
    suggest,
)
from .index import CandidateIndex, CandidateIndexBuilder
from .models import CacheStats, CorrectionResult, CorrectionType, Document
from .scoring import ScoredCandidate, ScoringWeights, score
from .variations import variations

__all__ = [
    "CacheStats",
    "CandidateIndex",
    "CandidateIndexBuilder",
    "CorrectionCache",
    "CorrectionResult",
    "CorrectionType",
    "DEFAULT_DICTIONARY",
    "Dictionary",
    "DictionaryLoader",
    "Document",
    "EngineStrategy",
    "NormalizedString",
    "STRATEGIES",
    "ScoredCandidate",
    "ScoringWeights",
    "SuggestionEngine",
    "auto_correct",
    "build_dictionary",
    "cache_stats",
    "clear_cache",
    "get_strategy",
    "needs_correction",
    "normalize",
    "rank_candidates",
    "score",
    "spellchecker_engine",
    "suggest",
    "variations",
]

from dataclasses import replace

import pytest

from spellsuggest.spellcheck import engine as engine_module
from spellsuggest.spellcheck.cache import CorrectionCache
from spellsuggest.spellcheck.dictionary import DEFAULT_DICTIONARY
from spellsuggest.spellcheck.engine import EngineStrategy, SuggestionEngine, get_strategy
from spellsuggest.spellcheck.index import CandidateIndexBuilder
from spellsuggest.spellcheck.models import CorrectionResult, CorrectionType

PLAYSTATION_CORPUS = [{"name": "PlayStation 5 Console", "platform": "PS5", "category": "Consoles"}]


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _engine(strategy: str = "balanced", **kwargs) -> SuggestionEngine:
    return SuggestionEngine(
        strategy=strategy,
        dictionary=DEFAULT_DICTIONARY,
        scan_budget_ms=None,
        index_budget_ms=None,
        **kwargs,
    )


def test_suggest_corrects_dropped_letter() -> None:
    result = _engine().suggest("playstaton", PLAYSTATION_CORPUS)

    assert result.needs_correction
    assert result.suggestion in {"playstation", "playstation 5"}
    assert result.confidence >= 0.7
    assert result.correction_type is CorrectionType.TYPO


def test_suggest_leaves_corpus_text_alone() -> None:
    result = _engine().suggest("xbox", [{"name": "Xbox Series X"}])

    assert result == CorrectionResult(needs_correction=False)
    assert result.suggestion is None
    assert result.confidence == 0.0


def test_suggest_ignores_too_short_queries() -> None:
    assert not _engine().suggest("a", PLAYSTATION_CORPUS).needs_correction
    assert not _engine().suggest("  !", PLAYSTATION_CORPUS).needs_correction


def test_suggest_uses_known_misspellings() -> None:
    result = _engine().suggest("residente evil", [{"name": "Resident Evil 4"}])

    assert result.needs_correction
    assert result.suggestion == "resident evil"
    assert result.confidence == 0.9


def test_exploratory_strategy_finds_extra_letter_without_tables() -> None:
    result = _engine("exploratory").suggest("residente evil", [{"name": "Resident Evil 4"}])

    assert result.needs_correction
    assert "resident evil" in result.suggestion
    assert result.correction_type is CorrectionType.EXTRA_LETTER


def test_auto_correct_applies_confident_extra_letter_fix() -> None:
    engine = _engine()

    assert engine.auto_correct("playstatio n", PLAYSTATION_CORPUS) == "playstation"
    assert engine.suggest("playstatio n", PLAYSTATION_CORPUS).correction_type is CorrectionType.EXTRA_LETTER


def test_auto_correct_returns_query_when_nothing_to_fix() -> None:
    engine = _engine()

    assert engine.auto_correct("xbox", [{"name": "Xbox Series X"}]) == "xbox"
    assert engine.auto_correct("a") == "a"


def test_fast_strategy_only_auto_corrects_extra_letters() -> None:
    engine = _engine("fast")

    assert engine.suggest("playstaton", PLAYSTATION_CORPUS).needs_correction
    assert engine.auto_correct("playstaton", PLAYSTATION_CORPUS) == "playstaton"
    assert engine.auto_correct("playstatio n", PLAYSTATION_CORPUS) == "playstation"
    assert _engine("balanced").auto_correct("playstaton", PLAYSTATION_CORPUS) != "playstaton"


def test_needs_correction_mirrors_suggest() -> None:
    engine = _engine()

    assert engine.needs_correction("playstaton", PLAYSTATION_CORPUS)
    assert not engine.needs_correction("console", PLAYSTATION_CORPUS)


def test_indexed_terms_never_need_correction() -> None:
    engine = _engine()
    for term in ("playstation", "console", "ps5", "playstation 5", "playstation 5 console", "consoles"):
        assert not engine.suggest(term, PLAYSTATION_CORPUS).needs_correction


def test_substring_of_dictionary_term_is_a_direct_hit() -> None:
    assert not _engine().suggest("stati").needs_correction


def test_multi_word_queries_are_corrected_word_by_word() -> None:
    result = _engine().suggest("zelda mraio")

    assert result.needs_correction
    assert result.suggestion == "zelda mario"
    assert result.correction_type is CorrectionType.TYPO


def test_word_by_word_correction_is_capped() -> None:
    engine = SuggestionEngine(
        strategy=EngineStrategy(max_words=2),
        dictionary=DEFAULT_DICTIONARY,
        scan_budget_ms=None,
        index_budget_ms=None,
    )

    assert engine.suggest("mraio mraio mraio").suggestion == "mario mario mraio"


@pytest.mark.parametrize(
    "query",
    ["", "   ", "!!!", None, "日本語", "ñ" * 500, "a b c d e f g", "🎮🎮🎮"],
)
def test_suggest_never_raises(query) -> None:
    result = _engine().suggest(query, PLAYSTATION_CORPUS)

    assert isinstance(result, CorrectionResult)
    assert 0.0 <= result.confidence <= 1.0
    if not result.needs_correction:
        assert result.suggestion is None
        assert result.confidence == 0.0
        assert result.correction_type is CorrectionType.NONE


def test_suggest_tolerates_invalid_corpus_entries() -> None:
    corpus = [None, 42, "text", {"name": None}, {"name": 123}, {"name": "PlayStation 5"}]

    result = _engine().suggest("playstaton", corpus)

    assert result.needs_correction
    assert result.suggestion.startswith("playstation")


def test_repeated_query_is_served_from_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    engine = _engine()
    calls: list[str] = []
    original = engine._scan_candidates

    def counting_scan(query, index, deadline):
        calls.append(query)
        return original(query, index, deadline)

    monkeypatch.setattr(engine, "_scan_candidates", counting_scan)

    first = engine.suggest("playstaton", PLAYSTATION_CORPUS)
    second = engine.suggest("  PlayStaton ", PLAYSTATION_CORPUS)

    assert first == second
    assert calls == ["playstaton"]


def test_cache_is_keyed_by_corpus(monkeypatch: pytest.MonkeyPatch) -> None:
    engine = _engine()
    calls: list[str] = []
    original = engine._scan_candidates

    def counting_scan(query, index, deadline):
        calls.append(query)
        return original(query, index, deadline)

    monkeypatch.setattr(engine, "_scan_candidates", counting_scan)

    engine.suggest("playstaton", PLAYSTATION_CORPUS)
    engine.suggest("playstaton", [{"name": "PlayStation 4 Slim"}])

    assert len(calls) == 2


def test_cached_results_expire(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = _FakeClock()
    engine = _engine(cache=CorrectionCache(ttl_s=60, clock=clock), clock=clock)
    calls: list[str] = []
    original = engine._scan_candidates

    def counting_scan(query, index, deadline):
        calls.append(query)
        return original(query, index, deadline)

    monkeypatch.setattr(engine, "_scan_candidates", counting_scan)

    engine.suggest("playstaton", PLAYSTATION_CORPUS)
    clock.now = 59.0
    engine.suggest("playstaton", PLAYSTATION_CORPUS)
    assert len(calls) == 1

    clock.now = 61.0
    engine.suggest("playstaton", PLAYSTATION_CORPUS)
    assert len(calls) == 2


def test_cache_stats_and_clear() -> None:
    engine = _engine()
    engine.suggest("playstaton", PLAYSTATION_CORPUS)
    engine.suggest("a", PLAYSTATION_CORPUS)

    stats = engine.cache_stats()
    assert stats.size == 1
    assert stats.entries[0].query == "playstaton"
    assert stats.entries[0].correction_type is CorrectionType.TYPO

    engine.clear_cache()
    assert engine.cache_stats().size == 0


def test_scan_budget_bounds_the_search() -> None:
    clock = _FakeClock()

    def ticking_clock() -> float:
        clock.now += 1.0
        return clock.now

    engine = SuggestionEngine(
        strategy="balanced",
        dictionary=DEFAULT_DICTIONARY,
        scan_budget_ms=1,
        index_budget_ms=None,
        clock=ticking_clock,
    )

    result = engine.suggest("playstaton", PLAYSTATION_CORPUS)

    assert result == CorrectionResult.no_correction()


def test_rank_candidates_orders_by_score() -> None:
    ranked = _engine().rank_candidates("swich", limit=3)

    assert ranked
    assert ranked[0].term == "switch"
    assert [item.score for item in ranked] == sorted((item.score for item in ranked), reverse=True)
    assert _engine().rank_candidates("a") == []


def test_module_functions_use_shared_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(engine_module, "spellchecker_engine", _engine())

    assert engine_module.suggest("playstaton", PLAYSTATION_CORPUS).needs_correction
    assert engine_module.needs_correction("playstaton", PLAYSTATION_CORPUS)
    assert engine_module.auto_correct("playstatio n", PLAYSTATION_CORPUS) == "playstation"
    assert engine_module.cache_stats().size == 2
    engine_module.clear_cache()
    assert engine_module.cache_stats().size == 0


def test_get_strategy_is_case_insensitive() -> None:
    assert get_strategy(" FAST ").name == "fast"
    assert get_strategy("exploratory").max_length_delta is None
    with pytest.raises(ValueError):
        get_strategy("turbo")


def test_engine_keeps_injected_empty_collaborators() -> None:
    cache = CorrectionCache(ttl_s=5)
    builder = CandidateIndexBuilder()
    assert len(cache) == 0

    engine = _engine(cache=cache, index_builder=builder)

    assert engine.cache is cache
    assert engine.index_builder is builder
    engine.suggest("playstaton", PLAYSTATION_CORPUS)
    assert len(cache) == 1
    assert builder.builds == 1


def test_word_count_changing_match_is_not_auto_applied() -> None:
    engine = _engine()

    result = engine.suggest("resident evl 4")

    assert result.needs_correction
    assert result.suggestion == "resident evil"
    assert result.confidence <= engine.strategy.variation_confidence
    assert engine.auto_correct("resident evl 4") == "resident evl 4"


def test_auto_correct_treats_none_as_empty() -> None:
    assert _engine().auto_correct(None) == ""


def test_edit_distance_pruning_counts_swaps_as_one_edit() -> None:
    strict = replace(get_strategy("fast"), max_edit_distance=1)
    engine = SuggestionEngine(
        strategy=strict,
        dictionary=DEFAULT_DICTIONARY,
        scan_budget_ms=None,
        index_budget_ms=None,
    )

    result = engine.suggest("nintedno")

    assert result.suggestion == "nintendo"
    assert result.correction_type is CorrectionType.TYPO

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from pydantic import BaseModel, Field

from spellsuggest.spellcheck.engine import SuggestionEngine, spellchecker_engine
from spellsuggest.spellcheck.index import coerce_documents
from spellsuggest.spellcheck.metrics import edit_similarity
from spellsuggest.spellcheck.models import CorrectionResult, Document
from spellsuggest.text.normalization import normalize

logger = logging.getLogger(__name__)

SEARCH_FIELD_WEIGHTS = (
    ("name", 1.0),
    ("platform", 0.8),
    ("description", 0.7),
    ("category", 0.6),
)

EXACT_MATCH_THRESHOLD = 0.8
RELATED_PARTIAL_THRESHOLD = 0.4
RELATED_TOTAL_THRESHOLD = 0.3
PARTIAL_WEIGHT = 0.5
MAX_RELATED = 8
EXCLUDED_PRODUCT_TYPES = {"master"}


class SearchOutcome(BaseModel):
    exact_matches: list[Any] = Field(default_factory=list)
    related_products: list[Any] = Field(default_factory=list)
    correction: CorrectionResult | None = None


@dataclass(frozen=True)
class ProductMatch:
    product: Any
    exact_score: float
    partial_score: float
    total_score: float

    @property
    def is_exact(self) -> bool:
        return self.exact_score >= EXACT_MATCH_THRESHOLD

    @property
    def is_related(self) -> bool:
        return not self.is_exact and (
            self.partial_score >= RELATED_PARTIAL_THRESHOLD or self.total_score >= RELATED_TOTAL_THRESHOLD
        )


class ProductSearchService:
    def __init__(self, *, engine: SuggestionEngine | None = None) -> None:
        self.engine = engine if engine is not None else spellchecker_engine

    def exact_match(self, query: str, text: str) -> float:
        normalized_query = normalize(query)
        normalized_text = normalize(text)
        if not normalized_query:
            return 0.0
        if normalized_text == normalized_query:
            return 1.0

        query_words = normalized_query.split(" ")
        position = 0
        for text_word in normalized_text.split(" "):
            if position < len(query_words) and text_word == query_words[position]:
                position += 1
        if position == len(query_words):
            return 0.95

        if normalized_query in normalized_text:
            return 0.9
        return 0.0

    def partial_match(self, query: str, text: str) -> float:
        query_words = [word for word in normalize(query).split(" ") if word]
        text_words = [word for word in normalize(text).split(" ") if word]
        if not query_words:
            return 0.0

        matched = 0.0
        for query_word in query_words:
            for text_word in text_words:
                if text_word == query_word:
                    matched += 1.0
                    break
                if len(query_word) > 2 and query_word in text_word:
                    matched += 0.7
                    break
                if len(query_word) > 3 and edit_similarity(query_word, text_word) > 0.8:
                    matched += 0.5
                    break
        return matched / len(query_words)

    def _score_product(self, query: str, product: Any, document: Document) -> ProductMatch:
        best_exact = 0.0
        best_partial = 0.0
        for field_name, weight in SEARCH_FIELD_WEIGHTS:
            text = document.field_text(field_name)
            if not text:
                continue
            best_exact = max(best_exact, self.exact_match(query, text) * weight)
            best_partial = max(best_partial, self.partial_match(query, text) * weight)
        return ProductMatch(
            product=product,
            exact_score=best_exact,
            partial_score=best_partial,
            total_score=best_exact + best_partial * PARTIAL_WEIGHT,
        )

    def search(self, products: Iterable[Any], query: str, *, suggest: bool = True) -> SearchOutcome:
        candidates: list[tuple[Any, Document]] = []
        for product in products or ():
            documents = coerce_documents([product])
            if not documents or documents[0].product_type in EXCLUDED_PRODUCT_TYPES:
                continue
            candidates.append((product, documents[0]))

        if not normalize(query):
            return SearchOutcome(exact_matches=[product for product, _doc in candidates])

        matches = [self._score_product(query, product, document) for product, document in candidates]
        exact = sorted((m for m in matches if m.is_exact), key=lambda m: -m.total_score)
        related = sorted((m for m in matches if m.is_related), key=lambda m: -m.total_score)

        correction = None
        if suggest and not exact:
            correction = self.engine.suggest(query, [document for _product, document in candidates])
            logger.debug("no exact matches for %r; correction=%s", query, correction.suggestion)

        return SearchOutcome(
            exact_matches=[m.product for m in exact],
            related_products=[m.product for m in related[:MAX_RELATED]],
            correction=correction,
        )


search_service = ProductSearchService()


def search_products(products: Iterable[Any], query: str) -> SearchOutcome:
    return search_service.search(products, query)

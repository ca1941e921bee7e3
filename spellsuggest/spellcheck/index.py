from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from spellsuggest.spellcheck.budget import Deadline
from spellsuggest.spellcheck.dictionary import Dictionary
from spellsuggest.spellcheck.models import Document
from spellsuggest.text.normalization import normalize
from spellsuggest.text.tokenizer import is_stopword

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 3
MIN_PHRASE_LENGTH = 5
MAX_PHRASE_WORDS = 3
INDEX_MEMO_SIZE = 8


@dataclass(frozen=True)
class IndexField:
    name: str
    weight: float
    phrases: bool = True


# Ordered by weight; candidates mined from heavier fields come first and win ties.
DEFAULT_FIELDS = (
    IndexField("name", 1.0),
    IndexField("platform", 0.8),
    IndexField("description", 0.7, phrases=False),
    IndexField("category", 0.6),
    IndexField("tags", 0.6),
)


@dataclass(frozen=True)
class CandidateIndex:
    candidates: tuple[str, ...]
    dictionary_terms: tuple[str, ...]
    searchable_texts: tuple[str, ...]
    fingerprint: str
    complete: bool = True
    members: frozenset[str] = dataclass_field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", frozenset(self.candidates))

    def __contains__(self, term: object) -> bool:
        return term in self.members

    def __len__(self) -> int:
        return len(self.candidates)


def coerce_documents(corpus: Iterable[Any] | None) -> list[Document]:
    documents: list[Document] = []
    for item in corpus or ():
        if isinstance(item, Document):
            documents.append(item)
            continue
        try:
            if isinstance(item, Mapping):
                documents.append(Document.model_validate(dict(item)))
            elif item is not None and not isinstance(item, (str, bytes)):
                documents.append(Document.model_validate(item, from_attributes=True))
        except ValidationError:
            logger.debug("skipping corpus entry that is not a document: %r", item)
    return documents


def corpus_fingerprint(documents: Iterable[Document], fields: Iterable[IndexField] = DEFAULT_FIELDS) -> str:
    field_names = [field.name for field in fields]
    digest = hashlib.sha1()
    for document in documents:
        for field_name in field_names:
            digest.update((document.field_text(field_name) or "").encode("utf-8"))
            digest.update(b"\x1f")
        digest.update(b"\x1e")
    return digest.hexdigest()


def searchable_text(document: Document, fields: Iterable[IndexField] = DEFAULT_FIELDS) -> str:
    parts = (normalize(document.field_text(field.name)) for field in fields)
    return " ".join(part for part in parts if part)


class CandidateIndexBuilder:
    """Builds the candidate vocabulary from a dictionary plus a corpus.

    Complete indexes are memoized by corpus fingerprint, so a caller that
    passes the same products on every keystroke pays for mining once.
    """

    def __init__(
        self,
        *,
        fields: Iterable[IndexField] = DEFAULT_FIELDS,
        min_term_length: int = MIN_TERM_LENGTH,
        min_phrase_length: int = MIN_PHRASE_LENGTH,
        memo_size: int = INDEX_MEMO_SIZE,
    ) -> None:
        self.fields = tuple(sorted(fields, key=lambda field: -field.weight))
        self.min_term_length = min_term_length
        self.min_phrase_length = min_phrase_length
        self.memo_size = max(0, memo_size)
        self._memo: OrderedDict[tuple[tuple[str, ...], str], CandidateIndex] = OrderedDict()
        self._lock = threading.RLock()
        self.builds = 0

    def fingerprint(self, documents: Iterable[Document]) -> str:
        return corpus_fingerprint(documents, self.fields)

    def build(
        self,
        dictionary: Dictionary,
        documents: list[Document],
        *,
        fingerprint: str | None = None,
        deadline: Deadline | None = None,
    ) -> CandidateIndex:
        fingerprint = fingerprint or self.fingerprint(documents)
        key = (dictionary.terms, fingerprint)
        with self._lock:
            cached = self._memo.get(key)
            if cached is not None:
                self._memo.move_to_end(key)
                return cached

        index = self._build(dictionary, documents, fingerprint, deadline)
        if index.complete and self.memo_size:
            with self._lock:
                self._memo[key] = index
                while len(self._memo) > self.memo_size:
                    self._memo.popitem(last=False)
        return index

    def clear(self) -> None:
        with self._lock:
            self._memo.clear()

    def _build(
        self,
        dictionary: Dictionary,
        documents: list[Document],
        fingerprint: str,
        deadline: Deadline | None,
    ) -> CandidateIndex:
        self.builds += 1
        ordered: dict[str, None] = {}
        for term in dictionary.terms:
            if len(term) >= self.min_term_length:
                ordered[term] = None
        dictionary_terms = tuple(ordered)

        complete = True
        for document in documents:
            if deadline is not None and deadline.expired():
                complete = False
                logger.debug(
                    "candidate mining stopped after %.1fms with %d candidates",
                    deadline.elapsed_ms(),
                    len(ordered),
                )
                break
            for term in self._mine_document(document):
                ordered.setdefault(term, None)

        return CandidateIndex(
            candidates=tuple(ordered),
            dictionary_terms=dictionary_terms,
            searchable_texts=tuple(searchable_text(document, self.fields) for document in documents),
            fingerprint=fingerprint,
            complete=complete,
        )

    def _mine_document(self, document: Document):
        for field in self.fields:
            text = normalize(document.field_text(field.name))
            if not text:
                continue
            tokens = text.split(" ")
            for word in tokens:
                if len(word) >= self.min_term_length and not is_stopword(word):
                    yield word
            if not field.phrases:
                continue
            for left, right in zip(tokens, tokens[1:]):
                phrase = f"{left} {right}"
                if len(phrase) >= self.min_phrase_length:
                    yield phrase
            if 1 < len(tokens) <= MAX_PHRASE_WORDS:
                yield text

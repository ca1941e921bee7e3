from __future__ import annotations

import re
import unicodedata
from typing import NewType

NormalizedString = NewType("NormalizedString", str)

NON_WORD_RE = re.compile(r"[^\w\s]")
WHITESPACE_RE = re.compile(r"\s+")


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(raw: str | None) -> NormalizedString:
    """Canonical form used for every comparison in the package.

    Lowercasing happens before accent stripping: some uppercase letters
    (e.g. "İ") lowercase into a base letter plus a combining mark, and the
    mark has to be gone for the result to be stable under a second pass.
    """
    text = strip_accents((raw or "").lower())
    text = NON_WORD_RE.sub("", text)
    text = WHITESPACE_RE.sub(" ", text)
    return NormalizedString(text.strip())


def words(text: str) -> list[str]:
    return [word for word in normalize(text).split(" ") if word]

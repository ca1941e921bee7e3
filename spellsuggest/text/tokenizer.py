from functools import lru_cache

import nltk
from nltk.corpus import stopwords

from spellsuggest.common.config import settings
from spellsuggest.text.normalization import normalize

DEFAULT_STOPWORDS = {
    "a", "ao", "aos", "as", "com", "como", "da", "das", "de", "do", "dos", "e", "em",
    "entre", "essa", "esse", "isso", "mais", "mas", "na", "nas", "no", "nos", "o", "os",
    "ou", "para", "pela", "pelo", "por", "que", "se", "sem", "sua", "seu", "um", "uma",
    "and", "for", "of", "the", "with",
}


@lru_cache(maxsize=4)
def load_stopwords(language: str = settings.stopwords_language) -> frozenset[str]:
    try:
        nltk.data.find("corpora/stopwords")
        words = stopwords.words(language)
    except (LookupError, OSError):
        return frozenset(DEFAULT_STOPWORDS)

    # NLTK ships accented Portuguese forms; compare against normalized tokens.
    return frozenset(normalize(word) for word in words) | DEFAULT_STOPWORDS


def is_stopword(word: str) -> bool:
    return word in load_stopwords()

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str, default: str) -> float | None:
    raw = os.getenv(name, default).strip().lower()
    if raw in {"", "none", "off"}:
        return None
    return float(raw)


@dataclass(frozen=True)
class Settings:
    strategy: str = os.getenv("SPELLCHECK_STRATEGY", "balanced")
    cache_ttl_s: float = float(os.getenv("SPELLCHECK_CACHE_TTL_S", "300"))
    cache_max_entries: int = int(os.getenv("SPELLCHECK_CACHE_MAX_ENTRIES", "2000"))
    cache_sweep_threshold: int = int(os.getenv("SPELLCHECK_CACHE_SWEEP_THRESHOLD", "1000"))
    scan_budget_ms: float | None = _optional_float("SPELLCHECK_SCAN_BUDGET_MS", "50")
    index_budget_ms: float | None = _optional_float("SPELLCHECK_INDEX_BUDGET_MS", "30")
    dictionary_path: str | None = os.getenv("SPELLCHECK_DICTIONARY_PATH") or None
    stopwords_language: str = os.getenv("SPELLCHECK_STOPWORDS_LANGUAGE", "portuguese")


settings = Settings()

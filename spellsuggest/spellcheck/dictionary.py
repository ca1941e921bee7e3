from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from spellsuggest.common.config import settings
from spellsuggest.text.normalization import normalize

logger = logging.getLogger(__name__)

DEFAULT_TERMS = (
    # consoles and platforms
    "playstation", "xbox", "nintendo", "switch", "ps5", "ps4", "ps3", "ps2", "ps1",
    "xbox series x", "xbox series s", "xbox series", "xbox one", "xbox 360",
    "nintendo switch", "steam deck", "vita", "psp", "gameboy", "wii", "wiiu",
    "gamecube", "dreamcast",
    # brands
    "play", "station", "microsoft", "sony", "steam", "epic", "ubisoft", "activision",
    "blizzard", "electronic arts", "rockstar", "bethesda",
    # franchises
    "resident", "evil", "resident evil", "call", "duty", "call of duty", "fifa", "god",
    "war", "god of war", "spider", "spiderman", "man", "last", "the last of us",
    "grand", "theft", "auto", "grand theft auto", "gta", "minecraft", "fortnite",
    "valorant", "league", "legends", "league of legends", "counter", "strike",
    "counter strike", "cyberpunk", "witcher", "assassins", "creed", "assassins creed",
    "mortal", "kombat", "mortal kombat", "street", "fighter", "street fighter",
    "tekken", "final", "fantasy", "final fantasy", "zelda", "mario", "sonic", "crash",
    "bandicoot", "crash bandicoot", "uncharted", "horizon", "bloodborne", "dark",
    "souls", "dark souls", "elden", "ring", "elden ring", "sekiro", "nioh", "devil",
    "may", "cry", "devil may cry", "metal", "gear", "metal gear", "silent", "hill",
    "silent hill", "tomb", "raider", "tomb raider", "far cry", "watch", "dogs",
    "watch dogs", "rainbow", "six", "rainbow six", "battlefield", "apex",
    "apex legends", "overwatch", "destiny", "borderlands", "fallout", "elder",
    "scrolls", "elder scrolls", "skyrim", "mass", "effect", "mass effect", "dragon",
    "age", "dragon age", "bioshock", "dishonored", "prey", "doom", "wolfenstein",
    "halo", "gears", "gears of war", "forza", "fable", "ori", "cuphead", "hollow",
    "knight", "hollow knight", "celeste", "stardew", "valley", "stardew valley",
    "terraria", "among", "among us", "fall", "guys", "fall guys", "rocket",
    "rocket league", "pokemon", "monster", "hunter", "dragon ball", "naruto",
    # genres
    "acao", "aventura", "rpg", "fps", "mmorpg", "estrategia", "simulacao", "corrida",
    "esporte", "luta", "plataforma", "puzzle", "terror", "survival", "sandbox",
    "roguelike", "metroidvania", "battle", "royale", "battle royale", "moba", "rts",
    # accessories and hardware
    "controle", "joystick", "headset", "fone", "microfone", "teclado", "mouse",
    "mousepad", "cadeira", "monitor", "webcam", "cabo", "carregador", "bateria",
    "memoria", "ssd", "placa", "video", "placa de video", "processador", "cooler",
    "fonte",
)

KNOWN_MISSPELLINGS: dict[str, tuple[str, ...]] = {
    "playstation": ("playsation", "playstaion", "plaistation", "pleisteiton"),
    "ps5": ("playstation5", "play5"),
    "ps4": ("playstation4", "play4"),
    "xbox": ("x box", "xbos", "exbox"),
    "xbox series": ("xbox serie",),
    "xbox one": ("xboxone", "xbox 1"),
    "nintendo": ("nintedo", "nitendo"),
    "switch": ("swich", "swicth", "switc"),
    "resident evil": ("residente evil", "resident evill", "residen evil", "resident evi"),
    "call of duty": ("call of duti", "cal of duty", "call duty"),
    "spiderman": ("spider man", "spidermen", "homem aranha"),
    "god of war": ("god war", "god of wars", "godofwar"),
    "grand theft auto": ("grand theft", "grand teft auto"),
    "the last of us": ("last of us", "the last us", "lastofus"),
    "assassins creed": ("assassin creed", "assasins creed", "assassins cred"),
    "mortal kombat": ("mortal combat", "mortalkombat"),
    "final fantasy": ("final fantasi", "finalfantasy"),
    "counter strike": ("counterstrike", "cs go", "csgo"),
    "joystick": ("joy stick", "joistick", "joystic"),
    "headset": ("head set", "hedset"),
    "teclado": ("tecaldo",),
    "mouse": ("mause", "mousse", "mous"),
}


@dataclass(frozen=True)
class Dictionary:
    terms: tuple[str, ...]
    misspellings: Mapping[str, str] = field(default_factory=dict)


def build_dictionary(
    terms: Iterable[str],
    misspellings: Mapping[str, Iterable[str]] | None = None,
) -> Dictionary:
    ordered: dict[str, None] = {}
    for term in terms:
        normalized = normalize(term)
        if normalized:
            ordered[normalized] = None

    typo_map: dict[str, str] = {}
    for canonical, typos in (misspellings or {}).items():
        target = normalize(canonical)
        if not target:
            continue
        for typo in typos:
            source = normalize(typo)
            if source and source != target:
                typo_map[source] = target

    return Dictionary(terms=tuple(ordered), misspellings=typo_map)


DEFAULT_DICTIONARY = build_dictionary(DEFAULT_TERMS, KNOWN_MISSPELLINGS)


def parse_dictionary_file(path: Path) -> Dictionary:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        payload = json.loads(text)
        return build_dictionary(payload.get("terms", []), payload.get("misspellings", {}))
    lines = (line.strip() for line in text.splitlines())
    return build_dictionary(line for line in lines if line and not line.startswith("#"))


class DictionaryLoader:
    """Loads a dictionary file and reloads it only when its mtime changes."""

    def __init__(self, path: Path | str | None = None, *, fallback: Dictionary = DEFAULT_DICTIONARY) -> None:
        raw_path = path if path is not None else settings.dictionary_path
        self.path = Path(raw_path) if raw_path else None
        self.fallback = fallback
        self._mtime: float | None = None
        self._cached: Dictionary | None = None

    def load(self) -> Dictionary:
        if self.path is None or not self.path.exists():
            return self.fallback
        mtime = self.path.stat().st_mtime
        if self._mtime == mtime and self._cached is not None:
            return self._cached
        self._cached = parse_dictionary_file(self.path)
        self._mtime = mtime
        logger.info("loaded spellcheck dictionary path=%s terms=%d", self.path, len(self._cached.terms))
        return self._cached

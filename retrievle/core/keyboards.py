from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from retrievle.core.settings import DEFAULT_KEYBOARD

# Built-in token keyboards. Tokens are used exactly as listed; the engine
# compares them by string equality.
_LATIN = tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ")

BUILTIN_KEYBOARDS: Dict[str, Tuple[str, ...]] = {
    "en": _LATIN,
    "fr": _LATIN + tuple("ÀÂÆÇÉÈÊËÎÏÔŒÙÛÜŸ"),
    "hiragana": tuple(
        "あいうえお"
        "かきくけこ"
        "さしすせそ"
        "たちつてと"
        "なにぬねの"
        "はひふへほ"
        "まみむめも"
        "やゆよ"
        "らりるれろ"
        "わをん"
    ),
    "katakana": tuple(
        "アイウエオ"
        "カキクケコ"
        "サシスセソ"
        "タチツテト"
        "ナニヌネノ"
        "ハヒフヘホ"
        "マミムメモ"
        "ヤユヨ"
        "ラリルレロ"
        "ワヲン"
    ),
    "emoji": ("🍎", "🍌", "🍇", "🍓", "🥕", "🍞", "🧀", "🍚", "🐱", "🐶", "🐟", "🐦",
              "☀️", "🌧️", "⭐", "🌙", "🏠", "🚗", "🚲", "⚽", "📚", "✏️", "🎵", "❤️"),
}

KEYBOARD_LABELS: Dict[str, str] = {
    "en": "English",
    "fr": "Français",
    "hiragana": "日本語 (ひらがな)",
    "katakana": "日本語 (カタカナ)",
    "emoji": "Emoji",
}

_SEPARATORS = re.compile(r"[\n,\t]+")


def load_keyboard(name: str = DEFAULT_KEYBOARD) -> List[str]:
    """
    Return the tokens of a built-in keyboard.

    Fallback strategy
    -----------------
    Unknown names fall back to the default keyboard (English).
    """
    tokens = BUILTIN_KEYBOARDS.get(name) or BUILTIN_KEYBOARDS[DEFAULT_KEYBOARD]
    return list(tokens)


def keyboard_names() -> List[str]:
    return list(BUILTIN_KEYBOARDS)


def dedupe(tokens: Iterable[str]) -> List[str]:
    """Drop empty and repeated tokens, keeping first occurrences in order."""
    seen = set()
    out: List[str] = []
    for t in tokens:
        if not t or t in seen:
            continue
        seen.add(t)
        out.append(t)
    return out


def parse_tokens(text: str) -> List[str]:
    """
    Parse a pasted token list into keyboard tokens.

    Notes
    -----
    - Commas, newlines and tabs separate tokens; runs of separators collapse.
    - Each token is trimmed but its case is kept as typed.
    - Empty and duplicate tokens are removed (first occurrence wins).

    Example: "pomme, riz\\nbanane" -> ["pomme", "riz", "banane"]
    """
    raw = _SEPARATORS.split(text or "")
    return dedupe(s.strip() for s in raw)


def keyboard_tokens(name: str = DEFAULT_KEYBOARD, custom_text: str = "") -> List[str]:
    """
    Tokens for the on-screen keyboard.

    A pasted custom token list (e.g. food words or syllables) wins over the
    built-in keyboard `name`; an empty or blank paste keeps the built-in one.
    """
    custom = parse_tokens(custom_text)
    return custom or load_keyboard(name)

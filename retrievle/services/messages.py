from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from retrievle.core.state import HintError


@dataclass(frozen=True)
class Messages:
    """User-facing strings for one UI language."""
    teacher_title: str
    player_title: str
    hint_button: str
    missing_setup: str
    win: str
    lose: Callable[[str], str]
    no_hints: str
    no_more_hints: str
    word_length: Callable[[int, int], str]
    select_segment: Callable[[int], str]
    saved: Callable[[str, int, int, str], str]

    def hint_error(self, error: HintError) -> str:
        if error is HintError.NO_HINTS_DEFINED:
            return self.no_hints
        return self.no_more_hints


_MESSAGES: Dict[str, Messages] = {
    "en": Messages(
        teacher_title="Retrievle – Teacher",
        player_title="Retrievle – Player",
        hint_button="💡 Hint",
        missing_setup="Game not configured. Please ask the teacher.",
        win="Well done!",
        lose=lambda word: f"Too bad! The solution was: {word}",
        no_hints="No hints have been defined.",
        no_more_hints="No more hints available.",
        word_length=lambda lo, hi: f"The word, phrase, or expression must be between {lo} and {hi} tokens.",
        select_segment=lambda n: f"Please select {n} tokens.",
        saved=lambda word, attempts, hints, order: (
            f"Word saved: {word} (max attempts: {attempts}, hints: {hints}, mode: {order})"
        ),
    ),
    "fr": Messages(
        teacher_title="Retrievle – Enseignant",
        player_title="Retrievle – Élève",
        hint_button="💡 Indice",
        missing_setup="Paramètres manquants. Veuillez utiliser l’interface enseignant.",
        win="Bravo !",
        lose=lambda word: f"Dommage ! La solution était : {word}",
        no_hints="Aucun indice n’a été défini.",
        no_more_hints="Plus d’indices disponibles.",
        word_length=lambda lo, hi: f"Le mot, l'expression, la phrase, doit contenir entre {lo} et {hi} signes.",
        select_segment=lambda n: f"Veuillez sélectionner {n} signes.",
        saved=lambda word, attempts, hints, order: (
            f"Mot enregistré : {word} (tentatives max : {attempts}, indices : {hints}, mode : {order})"
        ),
    ),
}


def get_messages(lang: str) -> Messages:
    """Strings for `lang`; any language without a translation falls back to English."""
    return _MESSAGES.get(lang, _MESSAGES["en"])


def join_tokens(tokens: Sequence[str]) -> str:
    return " ".join(tokens)

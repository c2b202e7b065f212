from __future__ import annotations

import logging
import os
import re
from typing import Optional, Sequence

from openai import OpenAI

logger = logging.getLogger(__name__)


# Reject only if the hint contains the answer as a standalone word (case-insensitive).
# Short answers ("e", "om") must not match inside longer words.
def _contains_answer(text: str, answer: Sequence[str]) -> bool:
    lowered = (text or "").lower()
    for candidate in {"".join(answer).lower(), " ".join(answer).lower()}:
        if re.search(rf"(?<!\w){re.escape(candidate)}(?!\w)", lowered):
            return True
    return False


def _local_fallback_hint(answer: Sequence[str]) -> str:
    """Always-available local hint (simple and safe)."""
    n = len(answer)
    noun = "token" if n == 1 else "tokens"
    return f"You need to find {n} {noun}; the first one is '{answer[0]}'."


def suggest_hint(
    tokens: Sequence[str],
    answer: Sequence[str],
    model: Optional[str] = None,
    temperature: float = 0.8,
) -> str:
    """
    Suggest ONE hint a teacher can paste into the hint fields.

    Rules
    -----
    - The model sees the full phrase and the part the player must find.
    - Any text is accepted as long as it does NOT contain the answer itself.
    - Offline, without an API key, on any client error or on a rule
      violation, a deterministic local hint is returned instead.
    """
    if not answer:
        raise ValueError("`answer` must contain at least one token.")

    api_key = os.getenv("OPENAI_API_KEY", "")
    offline = os.getenv("OFFLINE_MODE", "true").lower() == "true"
    if offline or not api_key:
        return _local_fallback_hint(answer)

    client = OpenAI(api_key=api_key)
    mdl = model or os.getenv("MODEL_NAME", "gpt-4o-mini")

    system = "You help language teachers write short clues for a word-guessing game."
    user = (
        f"The full expression is '{' '.join(tokens)}'. "
        f"The player must find these parts: '{' '.join(answer)}'. "
        "Give exactly ONE short hint that helps the player find them. "
        "Do NOT include the hidden parts themselves. Reply with the hint only."
    )

    try:
        resp = client.chat.completions.create(
            model=mdl,
            messages=[{"role": "system", "content": system},
                      {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=80,
        )
    except Exception as e:
        logger.warning("Hint suggestion failed, using local hint: %s", e)
        return _local_fallback_hint(answer)

    text = (resp.choices[0].message.content or "").strip()
    if not text or _contains_answer(text, answer):
        return _local_fallback_hint(answer)
    # Soft cap (~25 words) so it fits a hint field
    words = text.split()
    if len(words) > 25:
        text = " ".join(words[:25])
    return text


__all__ = ["suggest_hint"]

"""
Guess scoring and keyboard feedback.

`evaluate` scores one guess against the answer with multiset semantics, so a
token repeated in the guess only earns as many CORRECT/PRESENT marks as the
answer actually holds. `fold_keyboard` merges one scored guess into the
per-token keyboard colouring, never downgrading a token.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Mapping, Sequence

from retrievle.core.state import Token, Verdict


def evaluate(guess: Sequence[Token], answer: Sequence[Token]) -> list[Verdict]:
    """
    Score `guess` against `answer`, position by position.

    Algorithm
    ---------
    1) Count every token of the answer.
    2) Exact matches become CORRECT and consume one count each.
    3) Left to right, each remaining guess token becomes PRESENT if a count
       for it is still available (consuming it), otherwise ABSENT.

    Raises
    ------
    ValueError
        If guess and answer differ in length. Nothing is truncated or padded.

    Examples
    --------
    >>> evaluate(["A", "A", "B"], ["A", "B", "A"])
    [<Verdict.CORRECT: 'correct'>, <Verdict.PRESENT: 'present'>, <Verdict.PRESENT: 'present'>]
    """
    if len(guess) != len(answer):
        raise ValueError(
            f"Guess has {len(guess)} tokens but the answer has {len(answer)}."
        )

    remaining: Counter = Counter(answer)
    verdicts: list[Verdict | None] = [None] * len(guess)

    # Pass 1: exact matches
    for i, (g, a) in enumerate(zip(guess, answer)):
        if g == a:
            verdicts[i] = Verdict.CORRECT
            remaining[g] -= 1

    # Pass 2: displaced matches, claimed in guess order
    for i, g in enumerate(guess):
        if verdicts[i] is not None:
            continue
        if remaining[g] > 0:
            verdicts[i] = Verdict.PRESENT
            remaining[g] -= 1
        else:
            verdicts[i] = Verdict.ABSENT

    return verdicts  # type: ignore[return-value]


def fold_keyboard(
    existing: Mapping[Token, Verdict],
    verdicts: Sequence[Verdict],
    guess_tokens: Sequence[Token],
) -> Dict[Token, Verdict]:
    """
    Return a new keyboard map with one scored guess folded in.

    Each token keeps the best verdict seen so far (CORRECT > PRESENT > ABSENT).
    `existing` is not modified.
    """
    if len(verdicts) != len(guess_tokens):
        raise ValueError("`verdicts` and `guess_tokens` must have the same length.")

    state: Dict[Token, Verdict] = dict(existing)
    for token, verdict in zip(guess_tokens, verdicts):
        known = state.get(token)
        if known is None or verdict.rank > known.rank:
            state[token] = verdict
    return state


def is_solved(verdicts: Sequence[Verdict]) -> bool:
    return bool(verdicts) and all(v is Verdict.CORRECT for v in verdicts)

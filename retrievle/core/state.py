from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from retrievle.core.settings import MAX_HINTS, MAX_TOKENS, MIN_TOKENS

Token = str


class Verdict(Enum):
    """Per-position scoring outcome for one guessed token."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"

    @property
    def rank(self) -> int:
        return _VERDICT_RANK[self]


_VERDICT_RANK = {Verdict.ABSENT: 0, Verdict.PRESENT: 1, Verdict.CORRECT: 2}


class HintOrder(Enum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class Outcome(Enum):
    """What a successful `submit` tells the caller to do next."""
    WON = "won"
    LOST = "lost"
    CONTINUE = "continue"


class UsageError(Enum):
    """Recoverable, caller-correctable conditions; the session is left untouched."""
    INCOMPLETE_GUESS = "incomplete_guess"
    INVALID_OPERATION = "invalid_operation"


class HintError(Enum):
    NO_HINTS_DEFINED = "no_hints_defined"
    NO_MORE_HINTS = "no_more_hints"


class PuzzleConfigError(ValueError):
    """
    Raised when a puzzle definition violates one or more invariants.

    All problems found are collected in `errors` so the caller sees a single
    rejection listing everything that is wrong with the setup.
    """

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("Invalid puzzle definition: " + "; ".join(self.errors))


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid index or attempt count
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PuzzleDefinition:
    """
    Immutable, validated configuration for one guessing session.

    Notes
    -----
    - `guess_positions` is a set of indices into `full_sequence`; it is stored
      sorted ascending, and `answer[i]` corresponds to the i-th sorted position.
    - Validation happens eagerly in `__post_init__`. If anything is wrong a
      `PuzzleConfigError` is raised and no object is produced. Values are
      never repaired: tokens are compared exactly as given.
    """

    full_sequence: Tuple[Token, ...]
    guess_positions: Tuple[int, ...]
    answer: Tuple[Token, ...]
    max_attempts: int
    hints: Tuple[str, ...] = ()
    hint_order: HintOrder = HintOrder.SEQUENTIAL

    def __post_init__(self) -> None:
        errors: List[str] = []

        full = _as_tuple(self.full_sequence, "full_sequence", errors)
        positions = _as_tuple(self.guess_positions, "guess_positions", errors)
        answer = _as_tuple(self.answer, "answer", errors)
        hints = _as_tuple(self.hints, "hints", errors)

        # Tokens
        if any(not isinstance(t, str) or not t for t in full):
            errors.append("`full_sequence` tokens must be non-empty strings.")
        elif not MIN_TOKENS <= len(full) <= MAX_TOKENS:
            errors.append(
                f"`full_sequence` must contain between {MIN_TOKENS} and {MAX_TOKENS} tokens "
                f"(got {len(full)})."
            )

        # Guess positions
        positions_ok = True
        if not positions:
            errors.append("`guess_positions` must select at least one position.")
            positions_ok = False
        elif not all(_is_int(i) for i in positions):
            errors.append("`guess_positions` must contain integers only.")
            positions_ok = False
        else:
            if len(set(positions)) != len(positions):
                errors.append("`guess_positions` must not contain duplicate indices.")
                positions_ok = False
            out_of_range = sorted(i for i in positions if i < 0 or i >= len(full))
            if out_of_range:
                errors.append(f"`guess_positions` out of range: {out_of_range}.")
                positions_ok = False
        if positions_ok:
            positions = tuple(sorted(positions))

        # Answer vs. full sequence
        if any(not isinstance(t, str) or not t for t in answer):
            errors.append("`answer` tokens must be non-empty strings.")
        elif len(answer) != len(positions):
            errors.append(
                f"`answer` has {len(answer)} tokens but {len(positions)} positions are selected."
            )
        elif positions_ok:
            derived = tuple(full[i] for i in positions)
            if derived != answer:
                errors.append(
                    "`answer` does not match `full_sequence` at `guess_positions` "
                    f"(expected {list(derived)}, got {list(answer)})."
                )

        if not _is_int(self.max_attempts) or self.max_attempts < 1:
            errors.append("`max_attempts` must be a positive integer.")

        if any(not isinstance(h, str) for h in hints):
            errors.append("`hints` must be strings.")
        if len(hints) > MAX_HINTS:
            errors.append(f"At most {MAX_HINTS} hints are allowed (got {len(hints)}).")

        order = self.hint_order
        if not isinstance(order, HintOrder):
            try:
                order = HintOrder(order)
            except ValueError:
                errors.append("`hint_order` must be 'sequential' or 'random'.")

        if errors:
            raise PuzzleConfigError(errors)

        # Because dataclass is frozen, use object.__setattr__ for normalization.
        object.__setattr__(self, "full_sequence", full)
        object.__setattr__(self, "guess_positions", positions)
        object.__setattr__(self, "answer", answer)
        object.__setattr__(self, "hints", hints)
        object.__setattr__(self, "hint_order", order)

    @property
    def segment_length(self) -> int:
        return len(self.guess_positions)

    @property
    def revealed_positions(self) -> Tuple[int, ...]:
        """Positions that are shown to the player from the start."""
        guessable = set(self.guess_positions)
        return tuple(i for i in range(len(self.full_sequence)) if i not in guessable)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PuzzleDefinition":
        """
        Build a puzzle from an untrusted intake record.

        Expected keys
        -------------
        fullSequence, guessPositions, answer, maxAttempts, hints, hintOrder,
        and optionally segmentLength (must equal the number of positions).

        Raises
        ------
        PuzzleConfigError
            If the record is not a mapping, misses keys, holds values of the
            wrong type, or violates any puzzle invariant.
        """
        if not isinstance(record, Mapping):
            raise PuzzleConfigError(["Puzzle record must be a mapping."])

        required = ("fullSequence", "guessPositions", "answer", "maxAttempts")
        missing = [k for k in required if k not in record]
        if missing:
            raise PuzzleConfigError([f"Missing field `{k}`." for k in missing])

        errors: List[str] = []
        for key in ("fullSequence", "guessPositions", "answer", "hints"):
            value = record.get(key, [])
            if not isinstance(value, (list, tuple)):
                errors.append(f"`{key}` must be a list.")

        order = record.get("hintOrder", HintOrder.SEQUENTIAL.value)
        if order not in [o.value for o in HintOrder]:
            errors.append("`hintOrder` must be 'sequential' or 'random'.")

        if "segmentLength" in record:
            seg = record["segmentLength"]
            positions = record["guessPositions"]
            if not _is_int(seg):
                errors.append("`segmentLength` must be an integer.")
            elif isinstance(positions, (list, tuple)) and seg != len(positions):
                errors.append(
                    f"`segmentLength` is {seg} but {len(positions)} positions are selected."
                )

        if errors:
            raise PuzzleConfigError(errors)

        return cls(
            full_sequence=tuple(record["fullSequence"]),
            guess_positions=tuple(record["guessPositions"]),
            answer=tuple(record["answer"]),
            max_attempts=record["maxAttempts"],
            hints=tuple(record.get("hints", ())),
            hint_order=HintOrder(order),
        )

    def to_record(self) -> Dict[str, Any]:
        """Export the intake mapping understood by `from_record`."""
        return {
            "fullSequence": list(self.full_sequence),
            "guessPositions": list(self.guess_positions),
            "answer": list(self.answer),
            "segmentLength": self.segment_length,
            "maxAttempts": self.max_attempts,
            "hints": list(self.hints),
            "hintOrder": self.hint_order.value,
        }


def _as_tuple(value: Any, name: str, errors: List[str]) -> tuple:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        errors.append(f"`{name}` must be a sequence.")
        return ()
    return tuple(value)


def build_puzzle(
    tokens: Sequence[Token],
    selected_indices: Iterable[int],
    max_attempts: int,
    hints: Iterable[str] = (),
    hint_order: HintOrder | str = HintOrder.SEQUENTIAL,
) -> PuzzleDefinition:
    """
    Author-side helper: derive the answer from the selected tiles.

    Blank hint fields are dropped here (an author leaving a hint box empty),
    which is the only place any cleanup happens; intake via `from_record`
    takes hints verbatim.
    """
    positions = tuple(selected_indices)
    sorted_positions = sorted(i for i in positions if _is_int(i) and 0 <= i < len(tokens))
    answer = tuple(tokens[i] for i in sorted_positions)
    kept_hints = tuple(h.strip() for h in hints if isinstance(h, str) and h.strip())
    return PuzzleDefinition(
        full_sequence=tuple(tokens),
        guess_positions=positions,
        answer=answer,
        max_attempts=max_attempts,
        hints=kept_hints,
        hint_order=hint_order,
    )


# ---------------- Session results ---------------- #

@dataclass(frozen=True)
class HintResult:
    """Either a disclosed hint or the reason none could be given."""
    hint: Optional[str] = None
    error: Optional[HintError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RowResult:
    """One completed attempt, with verdicts aligned to the puzzle positions."""
    guess: Tuple[Token, ...]
    verdicts: Tuple[Verdict, ...]
    positions: Tuple[int, ...]

    def by_position(self) -> Dict[int, Tuple[Token, Verdict]]:
        return {p: (t, v) for p, t, v in zip(self.positions, self.guess, self.verdicts)}


@dataclass(frozen=True)
class SubmitResult:
    """
    Result of `GameSession.submit`.

    Exactly one of `outcome` / `error` is set. On WON and LOST, `revealed`
    holds the full sequence so the caller can show the solution.
    """
    outcome: Optional[Outcome] = None
    verdicts: Tuple[Verdict, ...] = ()
    positions: Tuple[int, ...] = ()
    row: int = 0
    revealed: Optional[Tuple[Token, ...]] = None
    error: Optional[UsageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def painted(self) -> Dict[int, Verdict]:
        """Verdicts keyed by their original position in the full sequence."""
        return dict(zip(self.positions, self.verdicts))


@dataclass(frozen=True)
class BoardCell:
    token: Optional[Token] = None
    verdict: Optional[Verdict] = None
    fixed: bool = False


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session, enough for a renderer to redraw."""
    current_guess: Tuple[Token, ...]
    row: int
    max_attempts: int
    status: GameStatus
    keyboard_state: Mapping[Token, Verdict]
    history: Tuple[RowResult, ...] = field(default_factory=tuple)

    @property
    def attempts_left(self) -> int:
        return self.max_attempts - self.row


def cap_selection(selected: Iterable[int], segment_length: int) -> List[int]:
    """
    Keep at most `segment_length` selected tiles, dropping the highest indices.

    Used on the authoring side when the author shrinks the segment or ticks
    one tile too many; the result is sorted ascending.
    """
    ordered = sorted(set(selected))
    return ordered[: max(segment_length, 0)]

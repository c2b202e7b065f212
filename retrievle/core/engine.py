from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Optional

from retrievle.core.dispenser import HintDispenser
from retrievle.core.feedback import evaluate, fold_keyboard, is_solved
from retrievle.core.state import (
    BoardCell,
    GameStatus,
    HintResult,
    Outcome,
    PuzzleDefinition,
    RowResult,
    SessionSnapshot,
    SubmitResult,
    Token,
    UsageError,
    Verdict,
)

logger = logging.getLogger(__name__)


class GameSession:
    """
    Running game for one validated puzzle.

    The session is mutable and owned by a single caller. Input arrives one
    token at a time; `submit` scores the buffered guess, folds the verdicts
    into the keyboard state and moves the game forward. Once the status is
    WON or LOST, every mutating call returns `UsageError.INVALID_OPERATION`.

    Parameters
    ----------
    puzzle : PuzzleDefinition
        The puzzle to play. It is never modified.
    mark_revealed_tokens : bool, optional
        If True, tokens shown from the start (non-guess positions) are
        pre-marked CORRECT on the keyboard (default: False).
    hint_seed : int | None, optional
        Seed for the random hint draw, for reproducible sessions.
    """

    def __init__(
        self,
        puzzle: PuzzleDefinition,
        mark_revealed_tokens: bool = False,
        hint_seed: int | None = None,
    ) -> None:
        if not isinstance(puzzle, PuzzleDefinition):
            raise TypeError("GameSession requires a validated PuzzleDefinition.")

        self.puzzle = puzzle
        self.hints = HintDispenser(puzzle.hints, puzzle.hint_order, seed=hint_seed)

        self._current: List[Token] = []
        self._row = 0
        self._status = GameStatus.IN_PROGRESS
        self._keyboard: Dict[Token, Verdict] = {}
        self._history: List[RowResult] = []

        if mark_revealed_tokens:
            for i in puzzle.revealed_positions:
                self._keyboard[puzzle.full_sequence[i]] = Verdict.CORRECT

    # ---------- read-only state ----------

    @property
    def current_guess(self) -> tuple:
        return tuple(self._current)

    @property
    def row(self) -> int:
        return self._row

    @property
    def max_attempts(self) -> int:
        return self.puzzle.max_attempts

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def keyboard_state(self) -> MappingProxyType:
        return MappingProxyType(dict(self._keyboard))

    @property
    def is_over(self) -> bool:
        return self._status is not GameStatus.IN_PROGRESS

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_guess=self.current_guess,
            row=self._row,
            max_attempts=self.puzzle.max_attempts,
            status=self._status,
            keyboard_state=self.keyboard_state,
            history=tuple(self._history),
        )

    def board(self) -> List[List[BoardCell]]:
        """
        Project the session onto a `max_attempts` x `len(full_sequence)` grid.

        Rules
        -----
        - Non-guess positions always show their token as a fixed CORRECT cell.
        - Completed rows show the guessed tokens and verdicts at their
          original positions.
        - The row being typed (if the game is still on) shows the buffered
          tokens without verdicts; later rows are empty.
        """
        puzzle = self.puzzle
        positions = puzzle.guess_positions
        fixed = {i: BoardCell(puzzle.full_sequence[i], Verdict.CORRECT, fixed=True)
                 for i in puzzle.revealed_positions}

        grid: List[List[BoardCell]] = []
        for r in range(puzzle.max_attempts):
            cells = [fixed.get(c, BoardCell()) for c in range(len(puzzle.full_sequence))]
            if r < len(self._history):
                for col, (token, verdict) in self._history[r].by_position().items():
                    cells[col] = BoardCell(token, verdict)
            elif r == self._row and not self.is_over:
                for col, token in zip(positions, self._current):
                    cells[col] = BoardCell(token)
            grid.append(cells)
        return grid

    # ---------- input ----------

    def append_token(self, token: Token) -> Optional[UsageError]:
        """Add a token to the guess; typing past the segment length does nothing."""
        if self.is_over:
            return UsageError.INVALID_OPERATION
        if len(self._current) < self.puzzle.segment_length:
            self._current.append(token)
        return None

    def delete_last(self) -> Optional[UsageError]:
        if self.is_over:
            return UsageError.INVALID_OPERATION
        if self._current:
            self._current.pop()
        return None

    def submit(self) -> SubmitResult:
        """
        Score the buffered guess and advance the game.

        Behavior
        --------
        - Returns an INVALID_OPERATION error result if the game is over, and an
          INCOMPLETE_GUESS error result if the guess is not full; the session
          is untouched in both cases.
        - All verdicts CORRECT: status becomes WON; the row is not consumed.
        - Otherwise the row counter advances and the buffer is cleared. When the
          last attempt is used the status becomes LOST.
        - WON and LOST results carry the full sequence in `revealed`.
        """
        if self.is_over:
            return SubmitResult(error=UsageError.INVALID_OPERATION, row=self._row)
        if len(self._current) != self.puzzle.segment_length:
            return SubmitResult(error=UsageError.INCOMPLETE_GUESS, row=self._row)

        guess = tuple(self._current)
        positions = self.puzzle.guess_positions
        verdicts = tuple(evaluate(guess, self.puzzle.answer))
        self._keyboard = fold_keyboard(self._keyboard, verdicts, guess)
        self._history.append(RowResult(guess=guess, verdicts=verdicts, positions=positions))
        logger.debug("Row %d scored: %s", self._row, [v.value for v in verdicts])

        if is_solved(verdicts):
            self._status = GameStatus.WON
            self._current = []
            logger.info("Puzzle solved on row %d", self._row)
            return SubmitResult(
                outcome=Outcome.WON,
                verdicts=verdicts,
                positions=positions,
                row=self._row,
                revealed=self.puzzle.full_sequence,
            )

        self._row += 1
        self._current = []
        if self._row >= self.puzzle.max_attempts:
            self._status = GameStatus.LOST
            logger.info("Out of attempts after %d rows", self._row)
            return SubmitResult(
                outcome=Outcome.LOST,
                verdicts=verdicts,
                positions=positions,
                row=self._row,
                revealed=self.puzzle.full_sequence,
            )

        return SubmitResult(
            outcome=Outcome.CONTINUE,
            verdicts=verdicts,
            positions=positions,
            row=self._row,
        )

    def next_hint(self) -> HintResult:
        """Disclose the next hint; never changes row, status or keyboard."""
        return self.hints.next()

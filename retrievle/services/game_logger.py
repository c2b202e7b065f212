"""
Game event logging for the Retrievle front-end.

One JSON line per event (setup saved or rejected, session started, guess
submitted, hint requested, game finished) goes to a dated file; warnings and
errors also reach the console.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from retrievle.core.state import HintResult, PuzzleDefinition, SubmitResult

LOGGER_NAME = "retrievle_game"


class GameLogger:
    """
    Structured event logger.

    Parameters
    ----------
    log_dir : str | None
        Directory for the log files. Defaults to `RETRIEVLE_LOG_DIR` or "logs".
    """

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = Path(log_dir or os.getenv("RETRIEVLE_LOG_DIR", "logs"))
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.INFO)
        logger.propagate = False

        # Prevent duplicate handlers (Streamlit reruns the script constantly)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        return logger

    def _entry(self, event_type: str, details: Dict[str, Any]) -> str:
        return json.dumps({
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            "details": details,
        }, ensure_ascii=False)

    def log_event(self, event_type: str, level: int = logging.INFO, **details: Any) -> None:
        self.logger.log(level, self._entry(event_type, details))

    def log_puzzle_saved(self, puzzle: PuzzleDefinition) -> None:
        self.log_event(
            "puzzle_saved",
            tokens=len(puzzle.full_sequence),
            segment_length=puzzle.segment_length,
            max_attempts=puzzle.max_attempts,
            hints=len(puzzle.hints),
            hint_order=puzzle.hint_order.value,
        )

    def log_setup_rejected(self, errors: Sequence[str]) -> None:
        self.log_event("setup_rejected", level=logging.WARNING, errors=list(errors))

    def log_session_started(self, puzzle: PuzzleDefinition) -> None:
        self.log_event(
            "session_started",
            segment_length=puzzle.segment_length,
            max_attempts=puzzle.max_attempts,
        )

    def log_guess(self, guess: Sequence[str], result: SubmitResult) -> None:
        self.log_event(
            "guess_submitted",
            guess=list(guess),
            outcome=result.outcome.value if result.outcome else None,
            error=result.error.value if result.error else None,
            verdicts=[v.value for v in result.verdicts],
            row=result.row,
        )

    def log_hint(self, result: HintResult) -> None:
        self.log_event(
            "hint_requested",
            disclosed=result.ok,
            error=result.error.value if result.error else None,
        )

    def log_game_finished(self, won: bool, rows_used: int) -> None:
        self.log_event("game_finished", won=won, rows_used=rows_used)

    def close(self) -> None:
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

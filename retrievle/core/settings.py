"""
Game configuration constants.

All bounds the puzzle validator and the front-end agree on live here so the
Teacher page and the intake check never drift apart.
"""

from typing import Final

MIN_TOKENS: Final[int] = 5
"""Shortest allowed full sequence (word, phrase or expression)."""

MAX_TOKENS: Final[int] = 10
"""Longest allowed full sequence."""

MAX_HINTS: Final[int] = 5

DEFAULT_MAX_ATTEMPTS: Final[int] = 6
DEFAULT_SEGMENT_LENGTH: Final[int] = 5

DEFAULT_KEYBOARD: Final[str] = "en"

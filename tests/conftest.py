import pytest

from retrievle.core.state import HintOrder, PuzzleDefinition


@pytest.fixture
def pomme() -> PuzzleDefinition:
    return PuzzleDefinition(
        full_sequence=("P", "O", "M", "M", "E"),
        guess_positions=(0, 1, 2, 3, 4),
        answer=("P", "O", "M", "M", "E"),
        max_attempts=6,
    )


@pytest.fixture
def gapped() -> PuzzleDefinition:
    # "BONJOUR" with B, N, U to find
    return PuzzleDefinition(
        full_sequence=("B", "O", "N", "J", "O", "U", "R"),
        guess_positions=(0, 2, 5),
        answer=("B", "N", "U"),
        max_attempts=3,
        hints=("A greeting", "Starts with B"),
        hint_order=HintOrder.SEQUENTIAL,
    )

import pytest

from retrievle.core.state import (
    HintOrder,
    PuzzleConfigError,
    PuzzleDefinition,
    Verdict,
    build_puzzle,
    cap_selection,
)


def _record(**overrides):
    record = {
        "fullSequence": ["B", "O", "N", "J", "O", "U", "R"],
        "guessPositions": [0, 2, 5],
        "answer": ["B", "N", "U"],
        "maxAttempts": 6,
        "hints": ["A greeting"],
        "hintOrder": "random",
    }
    record.update(overrides)
    return record


def test_valid_non_consecutive_puzzle(gapped):
    assert gapped.segment_length == 3
    assert gapped.guess_positions == (0, 2, 5)
    assert gapped.revealed_positions == (1, 3, 4, 6)


def test_positions_are_stored_sorted():
    p = PuzzleDefinition(
        full_sequence=("B", "O", "N", "J", "O", "U", "R"),
        guess_positions=(5, 0, 2),
        answer=("B", "N", "U"),
        max_attempts=4,
    )
    assert p.guess_positions == (0, 2, 5)


def test_lists_are_frozen_into_tuples():
    p = PuzzleDefinition(
        full_sequence=["P", "O", "M", "M", "E"],
        guess_positions=[1, 2],
        answer=["O", "M"],
        max_attempts=2,
        hints=["fruit"],
        hint_order="random",
    )
    assert p.full_sequence == ("P", "O", "M", "M", "E")
    assert p.hints == ("fruit",)
    assert p.hint_order is HintOrder.RANDOM


@pytest.mark.parametrize("overrides,fragment", [
    ({"guessPositions": [0, 2, 7]}, "out of range"),
    ({"guessPositions": [0, 2, -1]}, "out of range"),
    ({"guessPositions": [0, 2, 2], "answer": ["B", "N", "N"]}, "duplicate"),
    ({"answer": ["B", "N"]}, "positions are selected"),
    ({"answer": ["B", "N", "X"]}, "does not match"),
    ({"answer": ["N", "B", "U"]}, "does not match"),
    ({"maxAttempts": 0}, "max_attempts"),
    ({"maxAttempts": True}, "max_attempts"),
    ({"maxAttempts": 2.0}, "max_attempts"),
    ({"fullSequence": ["A", "B", "C", "D"], "guessPositions": [0], "answer": ["A"]}, "between 5 and 10"),
    ({"fullSequence": list("ABCDEFGHIJK"), "guessPositions": [0], "answer": ["A"]}, "between 5 and 10"),
    ({"fullSequence": ["B", "", "N", "J", "O", "U", "R"]}, "non-empty strings"),
    ({"guessPositions": [], "answer": []}, "at least one"),
    ({"guessPositions": [0, "2", 5]}, "integers"),
    ({"hints": ["1", "2", "3", "4", "5", "6"]}, "At most 5"),
    ({"hints": [1]}, "strings"),
    ({"hintOrder": "shuffled"}, "hintOrder"),
    ({"hints": "not a list"}, "`hints` must be a list"),
    ({"segmentLength": 4}, "segmentLength"),
])
def test_from_record_rejects_bad_setup(overrides, fragment):
    with pytest.raises(PuzzleConfigError) as exc:
        PuzzleDefinition.from_record(_record(**overrides))
    assert any(fragment in err for err in exc.value.errors)


def test_rejection_lists_every_problem():
    with pytest.raises(PuzzleConfigError) as exc:
        PuzzleDefinition.from_record(_record(guessPositions=[0, 9], maxAttempts=-1))
    assert len(exc.value.errors) >= 2


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        PuzzleDefinition.from_record(_record(answer=["X", "Y", "Z"]))


def test_from_record_missing_fields():
    with pytest.raises(PuzzleConfigError) as exc:
        PuzzleDefinition.from_record({"fullSequence": ["A"] * 5})
    assert len(exc.value.errors) == 3


def test_from_record_rejects_non_mapping():
    with pytest.raises(PuzzleConfigError):
        PuzzleDefinition.from_record(["not", "a", "record"])


def test_from_record_does_not_repair_tokens():
    # case and whitespace are the caller's business
    with pytest.raises(PuzzleConfigError):
        PuzzleDefinition.from_record(_record(answer=["b", "N", "U"]))


def test_record_roundtrip(gapped):
    record = gapped.to_record()
    assert record["segmentLength"] == 3
    assert record["hintOrder"] == "sequential"
    assert PuzzleDefinition.from_record(record) == gapped


def test_hints_and_order_are_optional():
    record = _record()
    del record["hints"], record["hintOrder"]
    p = PuzzleDefinition.from_record(record)
    assert p.hints == ()
    assert p.hint_order is HintOrder.SEQUENTIAL


def test_build_puzzle_derives_answer_from_selection():
    tokens = ["il", "fait", "beau", "aujourd'hui", "à", "Paris"]
    p = build_puzzle(tokens, {5, 2}, 4, hints=["", "  ", "weather"], hint_order="random")
    assert p.answer == ("beau", "Paris")
    assert p.guess_positions == (2, 5)
    assert p.hints == ("weather",)
    assert p.hint_order is HintOrder.RANDOM


def test_build_puzzle_rejects_out_of_range_selection():
    with pytest.raises(PuzzleConfigError):
        build_puzzle(["A", "B", "C", "D", "E"], [1, 8], 3)


def test_verdict_rank_order():
    assert Verdict.CORRECT.rank > Verdict.PRESENT.rank > Verdict.ABSENT.rank


def test_cap_selection_drops_highest_indices():
    assert cap_selection([5, 0, 2, 4], 3) == [0, 2, 4]
    assert cap_selection({3, 1}, 5) == [1, 3]
    assert cap_selection([1, 2], 0) == []


def test_capped_selection_builds_a_puzzle():
    tokens = ["B", "O", "N", "J", "O", "U", "R"]
    p = build_puzzle(tokens, cap_selection([6, 0, 2, 5], 3), 4)
    assert p.answer == ("B", "N", "U")

from retrievle.core.dispenser import HintDispenser
from retrievle.core.state import HintError, HintOrder


def test_sequential_order_then_exhausted():
    d = HintDispenser(["h1", "h2"], HintOrder.SEQUENTIAL)
    assert d.next().hint == "h1"
    assert d.next().hint == "h2"
    third = d.next()
    assert not third.ok
    assert third.hint is None
    assert third.error is HintError.NO_MORE_HINTS
    # stays exhausted
    assert d.next().error is HintError.NO_MORE_HINTS


def test_random_gives_each_hint_exactly_once():
    d = HintDispenser(["h1", "h2"], HintOrder.RANDOM)
    got = [d.next().hint, d.next().hint]
    assert sorted(got) == ["h1", "h2"]
    assert d.next().error is HintError.NO_MORE_HINTS


def test_random_never_repeats_across_seeds():
    hints = ["a", "b", "c", "d", "e"]
    for seed in range(25):
        d = HintDispenser(hints, HintOrder.RANDOM, seed=seed)
        drawn = [d.next().hint for _ in hints]
        assert sorted(drawn) == hints
        assert d.next().error is HintError.NO_MORE_HINTS


def test_random_is_reproducible_with_a_seed():
    hints = ["a", "b", "c", "d", "e"]
    first = HintDispenser(hints, HintOrder.RANDOM, seed=7)
    second = HintDispenser(hints, HintOrder.RANDOM, seed=7)
    assert [first.next().hint for _ in hints] == [second.next().hint for _ in hints]


def test_no_hints_defined():
    for order in HintOrder:
        d = HintDispenser([], order)
        assert d.next().error is HintError.NO_HINTS_DEFINED
        assert d.next().error is HintError.NO_HINTS_DEFINED


def test_remaining_and_disclosed():
    d = HintDispenser(["h1", "h2", "h3"])
    assert d.remaining == 3
    d.next()
    assert d.remaining == 2
    assert d.disclosed == ["h1"]

    r = HintDispenser(["h1", "h2", "h3"], HintOrder.RANDOM, seed=1)
    hint = r.next().hint
    assert r.remaining == 2
    assert r.disclosed == [hint]


def test_random_disclosed_keeps_the_order_hints_were_shown():
    hints = ["a", "b", "c", "d", "e"]
    for seed in range(10):
        d = HintDispenser(hints, HintOrder.RANDOM, seed=seed)
        shown = [d.next().hint for _ in hints]
        assert d.disclosed == shown

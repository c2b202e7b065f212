from retrievle.core.keyboards import (
    dedupe,
    keyboard_names,
    keyboard_tokens,
    load_keyboard,
    parse_tokens,
)


def test_builtin_keyboards():
    assert set(keyboard_names()) >= {"en", "fr", "hiragana", "katakana", "emoji"}
    assert load_keyboard("en")[:3] == ["A", "B", "C"]
    assert "É" in load_keyboard("fr")
    assert "ね" in load_keyboard("hiragana")


def test_unknown_keyboard_falls_back_to_english():
    assert load_keyboard("klingon") == load_keyboard("en")


def test_builtin_keyboards_have_no_duplicates():
    for name in keyboard_names():
        tokens = load_keyboard(name)
        assert len(tokens) == len(set(tokens)), name


def test_parse_tokens_splits_trims_and_dedupes():
    assert parse_tokens("pomme, riz\nbanane") == ["pomme", "riz", "banane"]
    assert parse_tokens("a,,\t b ,a\n\nC") == ["a", "b", "C"]
    assert parse_tokens("") == []


def test_dedupe_keeps_first_occurrence():
    assert dedupe(["x", "", "y", "x"]) == ["x", "y"]


def test_keyboard_tokens_prefers_pasted_list():
    assert keyboard_tokens("en", "pomme, riz\nbanane, riz") == ["pomme", "riz", "banane"]


def test_keyboard_tokens_blank_paste_keeps_builtin():
    assert keyboard_tokens("fr", " ,\n ") == load_keyboard("fr")
    assert keyboard_tokens("hiragana") == load_keyboard("hiragana")

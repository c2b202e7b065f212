from __future__ import annotations

import html

import streamlit as st

from dotenv import load_dotenv
load_dotenv(override=False)  # Load .env into process env

# --- Core game imports ---
from retrievle.core.engine import GameSession
from retrievle.core.keyboards import KEYBOARD_LABELS, keyboard_names, keyboard_tokens
from retrievle.core.settings import (
    DEFAULT_KEYBOARD,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_SEGMENT_LENGTH,
    MAX_HINTS,
    MAX_TOKENS,
    MIN_TOKENS,
)
from retrievle.core.state import (
    BoardCell,
    GameStatus,
    HintOrder,
    PuzzleConfigError,
    PuzzleDefinition,
    UsageError,
    Verdict,
    build_puzzle,
    cap_selection,
)

# --- Services ---
from retrievle.services.game_logger import GameLogger
from retrievle.services.hint_writer import suggest_hint
from retrievle.services.messages import Messages, get_messages, join_tokens


_VERDICT_COLORS = {
    Verdict.CORRECT: "#6aaa64",
    Verdict.PRESENT: "#c9b458",
    Verdict.ABSENT: "#787c7e",
}
_VERDICT_BADGES = {Verdict.CORRECT: "🟩", Verdict.PRESENT: "🟨", Verdict.ABSENT: "⬛"}


# =======================================
# Session-state helpers
# =======================================

def _game_logger() -> GameLogger:
    """One GameLogger per browser session."""
    if "game_logger" not in st.session_state:
        st.session_state["game_logger"] = GameLogger()
    return st.session_state["game_logger"]


def _init_setup_state() -> None:
    """Ensure teacher-side keys exist."""
    st.session_state.setdefault("setup_tokens", [])
    st.session_state.setdefault("setup_selected", [])
    for i in range(MAX_HINTS):
        st.session_state.setdefault(f"hint_{i}", "")

    # A suggested hint lands in the first empty field before the widgets are drawn
    pending = st.session_state.pop("pending_hint", None)
    if pending:
        free = next((i for i in range(MAX_HINTS) if not st.session_state[f"hint_{i}"]), None)
        if free is not None:
            st.session_state[f"hint_{free}"] = pending


def _init_play_state() -> None:
    st.session_state.setdefault("session", None)
    st.session_state.setdefault("hint_messages", [])
    st.session_state.setdefault("input_notice", None)
    st.session_state.setdefault("finish_logged", False)


def _start_session(record: dict, msgs: Messages) -> GameSession | None:
    """
    Turn the stored setup record into a fresh GameSession.

    The record is consumed (one-time handoff from the Teacher page); the last
    valid puzzle is kept so "Play again" can restart it.
    """
    logger = _game_logger()
    try:
        puzzle = PuzzleDefinition.from_record(record)
    except PuzzleConfigError as e:
        logger.log_setup_rejected(e.errors)
        st.error(msgs.missing_setup)
        return None

    session = GameSession(puzzle, mark_revealed_tokens=True)
    st.session_state["session"] = session
    st.session_state["last_puzzle"] = puzzle
    st.session_state["hint_messages"] = []
    st.session_state["input_notice"] = None
    st.session_state["finish_logged"] = False
    logger.log_session_started(puzzle)
    return session


# =======================================
# Rendering helpers
# =======================================

def _tile(token: str | None, verdict: Verdict | None) -> str:
    bg = _VERDICT_COLORS.get(verdict, "#ffffff")
    fg = "#ffffff" if verdict else "#000000"
    text = html.escape(token) if token else "&nbsp;"
    return (
        f"<span style='display:inline-block;min-width:2.4em;padding:0.35em 0.2em;margin:2px;"
        f"border:2px solid #d3d6da;text-align:center;font-weight:700;font-size:1.2em;"
        f"background:{bg};color:{fg}'>{text}</span>"
    )


def _render_board(board: list[list[BoardCell]]) -> None:
    rows = ["".join(_tile(c.token, c.verdict) for c in row) for row in board]
    st.markdown("<br>".join(rows), unsafe_allow_html=True)


def _active_keyboard() -> list[str]:
    """Built-in keyboard from the sidebar, unless a custom token list was pasted."""
    return keyboard_tokens(
        st.session_state.get("keyboard", DEFAULT_KEYBOARD),
        st.session_state.get("custom_keyboard", ""),
    )


def _key_label(token: str, state) -> str:
    badge = _VERDICT_BADGES.get(state.get(token))
    return f"{badge} {token}" if badge else token


def _keyboard_grid(tokens: list[str], key_prefix: str, state=None, per_row: int = 10) -> str | None:
    """Draw token buttons; return the token clicked this run, if any."""
    clicked = None
    state = state or {}
    for start in range(0, len(tokens), per_row):
        cols = st.columns(per_row)
        for col, token in zip(cols, tokens[start:start + per_row]):
            if col.button(_key_label(token, state), key=f"{key_prefix}_{token}", use_container_width=True):
                clicked = token
    return clicked


# =======================================
# Teacher page
# =======================================

def teacher_page(msgs: Messages) -> None:
    _init_setup_state()
    st.title(msgs.teacher_title)
    st.caption(
        f"Enter a word, phrase or expression ({MIN_TOKENS}–{MAX_TOKENS} tokens), choose which "
        "tokens the player must find (they don't have to be consecutive), set the number of "
        f"attempts and optionally add up to {MAX_HINTS} hints."
    )

    c1, c2 = st.columns(2)
    segment_length = c1.number_input(
        "Number of tokens to guess", min_value=1, max_value=MAX_TOKENS,
        value=DEFAULT_SEGMENT_LENGTH, step=1,
    )
    max_attempts = c2.number_input(
        "Maximum number of attempts", min_value=1, max_value=20,
        value=DEFAULT_MAX_ATTEMPTS, step=1,
    )

    tokens: list[str] = st.session_state["setup_tokens"]

    # ---- Token entry ----
    st.subheader("Expression")
    clicked = _keyboard_grid(_active_keyboard(), "setup")
    if clicked and len(tokens) < MAX_TOKENS:
        tokens.append(clicked)
        st.rerun()

    d1, d2 = st.columns(2)
    if d1.button("⌫ DEL", use_container_width=True) and tokens:
        tokens.pop()
        n = len(tokens)
        st.session_state["setup_selected"] = [i for i in st.session_state["setup_selected"] if i < n]
        st.rerun()
    if d2.button("♻️ Clear", use_container_width=True):
        st.session_state["setup_tokens"] = []
        st.session_state["setup_selected"] = []
        st.rerun()

    # ---- Segment selection ----
    if tokens:
        st.markdown("Select the tokens to guess:")
        cols = st.columns(len(tokens))
        limit = int(segment_length)
        previous = cap_selection(st.session_state["setup_selected"], limit)
        full = len(previous) >= limit
        selected: list[int] = []
        for i, (col, token) in enumerate(zip(cols, tokens)):
            # Once N tiles are picked, the others are locked until one is released
            locked = full and i not in previous
            if col.checkbox(token, value=i in previous, key=f"sel_{i}_{token}", disabled=locked):
                selected.append(i)
        st.session_state["setup_selected"] = cap_selection(selected, limit)

    # ---- Hints ----
    with st.expander("Hints", expanded=True):
        for i in range(MAX_HINTS):
            st.text_input(f"Hint {i + 1}", key=f"hint_{i}")
        order = st.selectbox("Order of hints", [o.value for o in HintOrder])

        selected = st.session_state["setup_selected"]
        if st.button("✨ Suggest a hint", disabled=not selected):
            answer = [tokens[i] for i in sorted(selected)]
            with st.spinner("Thinking..."):
                suggestion = suggest_hint(tokens, answer)
            if all(st.session_state[f"hint_{i}"] for i in range(MAX_HINTS)):
                st.info(suggestion)
            else:
                st.session_state["pending_hint"] = suggestion
                st.rerun()

    # ---- Validate ----
    if st.button("Validate", type="primary"):
        logger = _game_logger()
        if not MIN_TOKENS <= len(tokens) <= MAX_TOKENS:
            st.error(msgs.word_length(MIN_TOKENS, MAX_TOKENS))
            return
        if len(st.session_state["setup_selected"]) != segment_length:
            st.error(msgs.select_segment(int(segment_length)))
            return
        try:
            puzzle = build_puzzle(
                tokens,
                st.session_state["setup_selected"],
                int(max_attempts),
                hints=[st.session_state[f"hint_{i}"] for i in range(MAX_HINTS)],
                hint_order=order,
            )
        except PuzzleConfigError as e:
            logger.log_setup_rejected(e.errors)
            for err in e.errors:
                st.error(err)
            return

        st.session_state["puzzle_record"] = puzzle.to_record()
        st.session_state["session"] = None
        logger.log_puzzle_saved(puzzle)
        st.success(msgs.saved(join_tokens(puzzle.answer), puzzle.max_attempts,
                              len(puzzle.hints), puzzle.hint_order.value))


# =======================================
# Player page
# =======================================

def player_page(msgs: Messages) -> None:
    _init_play_state()
    st.title(msgs.player_title)

    session: GameSession | None = st.session_state["session"]
    if session is None:
        record = st.session_state.pop("puzzle_record", None)
        if record is None:
            st.warning(msgs.missing_setup)
            return
        session = _start_session(record, msgs)
        if session is None:
            return

    logger = _game_logger()
    snap = session.snapshot()

    # ---- Board ----
    _render_board(session.board())
    st.caption(f"Attempts left: {snap.attempts_left} / {snap.max_attempts}")

    # ---- Hints ----
    if st.button(msgs.hint_button):
        result = session.next_hint()
        logger.log_hint(result)
        text = result.hint if result.ok else msgs.hint_error(result.error)
        st.session_state["hint_messages"].append(text)
        st.rerun()
    for text in st.session_state["hint_messages"]:
        st.info(text)

    # ---- Keyboard ----
    if snap.status is GameStatus.IN_PROGRESS:
        clicked = _keyboard_grid(_active_keyboard(),
                                 "play", state=snap.keyboard_state)
        if clicked:
            session.append_token(clicked)
            st.rerun()

        k1, k2 = st.columns(2)
        if k1.button("⌫ DEL", use_container_width=True):
            session.delete_last()
            st.rerun()
        if k2.button("ENTER", type="primary", use_container_width=True):
            guess = session.current_guess
            result = session.submit()
            logger.log_guess(guess, result)
            if result.error is UsageError.INCOMPLETE_GUESS:
                st.session_state["input_notice"] = msgs.select_segment(session.puzzle.segment_length)
            else:
                st.session_state["input_notice"] = None
            st.rerun()

        if st.session_state["input_notice"]:
            st.warning(st.session_state["input_notice"])
        return

    # ---- Outcome banner ----
    if not st.session_state["finish_logged"]:
        logger.log_game_finished(won=snap.status is GameStatus.WON, rows_used=len(snap.history))
        st.session_state["finish_logged"] = True

    if snap.status is GameStatus.WON:
        st.success(f"🎉 {msgs.win}")
    else:
        st.error(f"💀 {msgs.lose(join_tokens(session.puzzle.full_sequence))}")

    if st.button("Play again"):
        last = st.session_state.get("last_puzzle")
        st.session_state["session"] = None
        if last is not None:
            st.session_state["puzzle_record"] = last.to_record()
        st.rerun()


# =========
# The App
# =========

def main() -> None:
    st.set_page_config(page_title="Retrievle", page_icon="🧩", layout="centered")

    with st.sidebar:
        st.header("Settings")
        page = st.radio("Mode", ["Teacher", "Player"])
        names = keyboard_names()
        st.selectbox(
            "Keyboard", names,
            index=names.index(st.session_state.get("keyboard", DEFAULT_KEYBOARD)),
            format_func=lambda k: KEYBOARD_LABELS.get(k, k),
            key="keyboard",
        )
        st.text_area(
            "Custom keyboard (optional)",
            key="custom_keyboard",
            help="Paste tokens separated by commas or new lines, e.g. \"pomme, riz, banane\". "
                 "Replaces the keyboard above for both pages.",
        )

    msgs = get_messages(st.session_state["keyboard"])
    if page == "Teacher":
        teacher_page(msgs)
    else:
        player_page(msgs)


if __name__ == "__main__":
    main()

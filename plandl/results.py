from __future__ import annotations

from datetime import datetime, timedelta

from .rounds import MAX_ROUNDS, RoundState

GAME_NAME = "Plandl"
_HIT = "\U0001F7E9"  # green square
_MISS = "\U0001F7E5"  # red square


def share_text(state: RoundState, *, url: str | None = None) -> str:
    """Plain-text summary of the day for the clipboard."""

    score = state.final_score if state.final_score is not None else state.score
    lines = [
        f"{GAME_NAME} ✈️ {state.day_seed}",
        f"Score: {score}",
        f"Rounds: {len(state.guesses)}/{MAX_ROUNDS}",
        "",
    ]
    for g in state.guesses:
        c = g.correct
        lines.append("".join(_HIT if ok else _MISS for ok in (c.manufacturer, c.model, c.version)))
    text = "\n".join(lines) + "\n"
    if url:
        text += f"\nPlay at: {url}"
    return text


def time_until_next_puzzle(now: datetime) -> timedelta:
    midnight = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - now


def format_countdown(delta: timedelta) -> str:
    total = max(0, int(delta.total_seconds()))
    hh = total // 3600
    mm = (total % 3600) // 60
    ss = total % 60
    return f"{hh:02d}:{mm:02d}:{ss:02d}"

from __future__ import annotations

import json
import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .rounds import Correctness, Guess, RoundState

SCHEMA_VERSION = 1
STATE_KEY = "plandl_state"
STATE_PATH_ENV = "PLANDL_STATE_PATH"


def default_state_path() -> Path:
    explicit = os.environ.get(STATE_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / ".plandl_state.sqlite3"


def open_db(path: Path) -> sqlite3.Connection:
    path = Path(path)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    _migrate(conn)
    return conn


def _migrate(conn: sqlite3.Connection) -> None:
    row = conn.execute("PRAGMA user_version;").fetchone()
    ver = int(row[0]) if row else 0
    if ver >= SCHEMA_VERSION:
        return

    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS slot (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION};")


def state_to_dict(state: RoundState) -> dict[str, Any]:
    """Flat record, same keys the browser build kept in localStorage."""

    return {
        "date": state.day_seed,
        "round": state.round,
        "score": state.score,
        "guesses": [
            {
                "round": g.round,
                "manufacturer": g.manufacturer,
                "model": g.model,
                "version": g.version,
                "correct": {
                    "manufacturer": g.correct.manufacturer,
                    "model": g.correct.model,
                    "version": g.correct.version,
                },
            }
            for g in state.guesses
        ],
        "completed": state.completed,
        "finalScore": state.final_score,
    }


def _flag(value: object) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a JSON boolean, got {value!r}")
    return value


def state_from_dict(data: object) -> RoundState:
    """Parse a stored record. Raises ValueError/TypeError/KeyError on bad shapes."""

    if not isinstance(data, dict):
        raise ValueError("state record must be an object")

    guesses: list[Guess] = []
    for item in data.get("guesses") or []:
        correct = item["correct"]
        guesses.append(
            Guess(
                round=int(item["round"]),
                manufacturer=str(item["manufacturer"]),
                model=str(item["model"]),
                version=str(item["version"]),
                correct=Correctness(
                    manufacturer=_flag(correct["manufacturer"]),
                    model=_flag(correct["model"]),
                    version=_flag(correct["version"]),
                ),
            )
        )

    final_score = data.get("finalScore")
    return RoundState(
        day_seed=int(data["date"]),
        round=int(data["round"]),
        score=int(data["score"]),
        guesses=tuple(guesses),
        completed=_flag(data.get("completed", False)),
        final_score=None if final_score is None else int(final_score),
    )


def _decode_state(raw: str | None, day_seed: int) -> RoundState | None:
    if raw is None:
        return None
    try:
        state = state_from_dict(json.loads(raw))
    except (ValueError, TypeError, KeyError):
        return None
    if state.day_seed != int(day_seed) or not state.is_consistent():
        return None
    return state


class SqliteStateStore:
    """Single key/value slot holding today's RoundState."""

    def __init__(self, conn: sqlite3.Connection, *, key: str = STATE_KEY) -> None:
        self._conn = conn
        self._key = key

    def load(self, day_seed: int) -> RoundState | None:
        row = self._conn.execute("SELECT value FROM slot WHERE key = ?", (self._key,)).fetchone()
        if row is None:
            return None
        state = _decode_state(row[0], day_seed)
        if state is None:
            # Yesterday's progress or a corrupt record: drop it, never migrate.
            self.clear()
        return state

    def save(self, state: RoundState) -> None:
        value = json.dumps(state_to_dict(state))
        with self._conn:
            self._conn.execute(
                "INSERT INTO slot(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (self._key, value),
            )

    def clear(self) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM slot WHERE key = ?", (self._key,))

    def raw(self) -> str | None:
        row = self._conn.execute("SELECT value FROM slot WHERE key = ?", (self._key,)).fetchone()
        return None if row is None else str(row[0])

    def write_raw(self, value: str) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT INTO slot(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (self._key, value),
            )


class MemoryStateStore:
    """In-memory slot with the same semantics, for tests and headless runs."""

    def __init__(self, raw: str | None = None) -> None:
        self._raw = raw

    def load(self, day_seed: int) -> RoundState | None:
        state = _decode_state(self._raw, day_seed)
        if state is None:
            self._raw = None
        return state

    def save(self, state: RoundState) -> None:
        self._raw = json.dumps(state_to_dict(state))

    def clear(self) -> None:
        self._raw = None

    def raw(self) -> str | None:
        return self._raw


@contextmanager
def open_store(path: Path) -> Iterator[SqliteStateStore]:
    conn = open_db(path)
    try:
        yield SqliteStateStore(conn)
    finally:
        conn.close()

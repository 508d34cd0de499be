"""Round state machine and guess evaluation for the daily puzzle.

The state is an immutable ``RoundState``; ``submit_guess`` and ``advance`` are
pure transitions returning a new state. ``DailyGame`` wraps them for the UI and
writes the state to a store after every transition.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol

from .catalog import Aircraft, Catalog
from .clock import Clock
from .daily import DailyAnswer, select_daily_answer

MAX_ROUNDS = 5
BASE_POINTS = 100
MULTIPLIERS: tuple[int, ...] = (5, 4, 3, 2, 1)


class GameStateError(ValueError):
    """Raised for a transition that is not valid in the current phase."""


class Phase(str, Enum):
    PLAYING = "playing"
    ROUND_RESOLVED = "round_resolved"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class RevealLevel:
    scale_pct: int
    blur_px: int


REVEAL_LEVELS: tuple[RevealLevel, ...] = (
    RevealLevel(scale_pct=300, blur_px=2),
    RevealLevel(scale_pct=225, blur_px=1),
    RevealLevel(scale_pct=160, blur_px=0),
    RevealLevel(scale_pct=120, blur_px=0),
    RevealLevel(scale_pct=100, blur_px=0),
)


def _check_round(round_no: int) -> None:
    if not (1 <= round_no <= MAX_ROUNDS):
        raise ValueError(f"round must be in [1, {MAX_ROUNDS}], got {round_no}")


def multiplier_for_round(round_no: int) -> int:
    _check_round(round_no)
    return MULTIPLIERS[round_no - 1]


def reveal_for_round(round_no: int) -> RevealLevel:
    _check_round(round_no)
    return REVEAL_LEVELS[round_no - 1]


@dataclass(frozen=True, slots=True)
class Correctness:
    manufacturer: bool
    model: bool
    version: bool

    @property
    def all_correct(self) -> bool:
        return self.manufacturer and self.model and self.version


@dataclass(frozen=True, slots=True)
class Guess:
    round: int
    manufacturer: str
    model: str
    version: str
    correct: Correctness


def evaluate_guess(answer: Aircraft, manufacturer: str, model: str, version: str) -> Correctness:
    # Values come from the catalog-backed selectors: exact equality, no normalisation.
    return Correctness(
        manufacturer=manufacturer == answer.manufacturer,
        model=model == answer.model,
        version=version == answer.version,
    )


def round_score(round_no: int, correct: Correctness) -> int:
    if not correct.all_correct:
        return 0
    return BASE_POINTS * multiplier_for_round(round_no)


@dataclass(frozen=True, slots=True)
class RoundState:
    day_seed: int
    round: int = 1
    score: int = 0
    guesses: tuple[Guess, ...] = ()
    completed: bool = False
    final_score: int | None = None

    @property
    def phase(self) -> Phase:
        if self.completed:
            return Phase.COMPLETED
        if len(self.guesses) >= self.round:
            return Phase.ROUND_RESOLVED
        return Phase.PLAYING

    @property
    def last_guess(self) -> Guess | None:
        return self.guesses[-1] if self.guesses else None

    @property
    def won(self) -> bool:
        last = self.last_guess
        return last is not None and last.correct.all_correct

    def is_consistent(self) -> bool:
        """True when the fields describe a reachable state (used for restored records)."""

        if not (1 <= self.round <= MAX_ROUNDS) or self.score < 0:
            return False
        if any(g.round != i + 1 for i, g in enumerate(self.guesses)):
            return False
        n = len(self.guesses)
        # Only the last guess may be fully correct; a correct guess ends the day.
        if any(g.correct.all_correct for g in self.guesses[:-1]):
            return False
        if self.completed:
            if not (1 <= n <= MAX_ROUNDS and n == self.round):
                return False
            return n == MAX_ROUNDS or self.guesses[-1].correct.all_correct
        if n == self.round - 1:
            return n == 0 or not self.guesses[-1].correct.all_correct
        return n == self.round


def new_state(day_seed: int) -> RoundState:
    return RoundState(day_seed=int(day_seed))


def submit_guess(
    state: RoundState,
    answer: Aircraft,
    manufacturer: str,
    model: str,
    version: str,
) -> RoundState:
    """Record the guess for the current round and score it."""

    if state.phase is not Phase.PLAYING:
        raise GameStateError(f"cannot submit a guess while {state.phase.value}")
    if not (manufacturer and model and version):
        raise GameStateError("manufacturer, model and version must all be selected")

    correct = evaluate_guess(answer, manufacturer, model, version)
    guess = Guess(
        round=state.round,
        manufacturer=manufacturer,
        model=model,
        version=version,
        correct=correct,
    )
    return replace(
        state,
        score=state.score + round_score(state.round, correct),
        guesses=state.guesses + (guess,),
    )


def advance(state: RoundState) -> RoundState:
    """Leave a resolved round: finish the day or move on to the next round."""

    if state.phase is not Phase.ROUND_RESOLVED:
        raise GameStateError(f"cannot advance while {state.phase.value}")
    if state.won or state.round >= MAX_ROUNDS:
        return replace(state, completed=True, final_score=state.score)
    return replace(state, round=state.round + 1)


class StateStore(Protocol):
    def load(self, day_seed: int) -> RoundState | None: ...
    def save(self, state: RoundState) -> None: ...


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """View model for the UI (pure data)."""

    phase: Phase
    round: int
    multiplier: int
    score: int
    reveal: RevealLevel
    offset_x: float
    offset_y: float
    image: str
    last_guess: Guess | None
    guesses_made: int
    final_score: int | None


class DailyGame:
    """Today's puzzle: answer, current state and persistence in one place."""

    def __init__(self, *, catalog: Catalog, answer: DailyAnswer, store: StateStore) -> None:
        self._catalog = catalog
        self._answer = answer
        self._store = store

        restored = store.load(answer.day_seed)
        self._state = restored if restored is not None else new_state(answer.day_seed)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def answer(self) -> DailyAnswer:
        return self._answer

    @property
    def state(self) -> RoundState:
        return self._state

    def submit_guess(self, manufacturer: str, model: str, version: str) -> Guess:
        self._state = submit_guess(self._state, self._answer.aircraft, manufacturer, model, version)
        self._store.save(self._state)
        last = self._state.last_guess
        assert last is not None
        return last

    def advance(self) -> Phase:
        self._state = advance(self._state)
        self._store.save(self._state)
        return self._state.phase

    def snapshot(self) -> GameSnapshot:
        s = self._state
        # The reveal screen always shows the whole image.
        shown_round = MAX_ROUNDS if s.completed else s.round
        return GameSnapshot(
            phase=s.phase,
            round=s.round,
            multiplier=multiplier_for_round(s.round),
            score=s.score,
            reveal=reveal_for_round(shown_round),
            offset_x=self._answer.offset_x,
            offset_y=self._answer.offset_y,
            image=self._answer.aircraft.image,
            last_guess=s.last_guess,
            guesses_made=len(s.guesses),
            final_score=s.final_score,
        )


def build_daily_game(*, catalog: Catalog, clock: Clock, store: StateStore) -> DailyGame:
    """Factory for today's game session."""

    answer = select_daily_answer(catalog, clock.now().date())
    return DailyGame(catalog=catalog, answer=answer, store=store)

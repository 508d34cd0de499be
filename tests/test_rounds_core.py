from __future__ import annotations

import pytest

from plandl.catalog import Aircraft
from plandl.rounds import (
    MULTIPLIERS,
    Correctness,
    GameStateError,
    Guess,
    Phase,
    RevealLevel,
    RoundState,
    advance,
    evaluate_guess,
    new_state,
    reveal_for_round,
    round_score,
    submit_guess,
)

ANSWER = Aircraft("Cessna", "172", "Skyhawk", "images/cessna_172_skyhawk.jpg")


def test_multipliers_are_fixed() -> None:
    assert MULTIPLIERS == (5, 4, 3, 2, 1)


def test_evaluator_exact_field_equality() -> None:
    c = evaluate_guess(ANSWER, "Cessna", "172", "Skyhawk")
    assert (c.manufacturer, c.model, c.version, c.all_correct) == (True, True, True, True)

    c = evaluate_guess(ANSWER, "Cessna", "150", "Skyhawk")
    assert (c.manufacturer, c.model, c.version, c.all_correct) == (True, False, True, False)

    # No normalisation: case and whitespace matter.
    c = evaluate_guess(ANSWER, "cessna", "172 ", "Skyhawk")
    assert (c.manufacturer, c.model) == (False, False)


@pytest.mark.parametrize("round_no,expected", [(1, 500), (2, 400), (3, 300), (4, 200), (5, 100)])
def test_round_score_only_when_all_correct(round_no: int, expected: int) -> None:
    assert round_score(round_no, Correctness(True, True, True)) == expected
    assert round_score(round_no, Correctness(True, True, False)) == 0
    assert round_score(round_no, Correctness(False, False, False)) == 0


def test_reveal_levels_de_zoom_and_de_blur() -> None:
    assert [reveal_for_round(r) for r in range(1, 6)] == [
        RevealLevel(300, 2),
        RevealLevel(225, 1),
        RevealLevel(160, 0),
        RevealLevel(120, 0),
        RevealLevel(100, 0),
    ]
    with pytest.raises(ValueError):
        reveal_for_round(6)


def test_new_state_is_round_one_playing() -> None:
    s = new_state(20240101)
    assert (s.round, s.score, s.guesses, s.completed, s.final_score) == (1, 0, (), False, None)
    assert s.phase is Phase.PLAYING


def test_submit_records_guess_and_resolves_round() -> None:
    s = submit_guess(new_state(1), ANSWER, "Piper", "Cherokee", "Six")
    assert s.phase is Phase.ROUND_RESOLVED
    assert s.round == 1
    assert s.score == 0
    assert s.guesses == (Guess(1, "Piper", "Cherokee", "Six", Correctness(False, False, False)),)


def test_correct_first_round_scores_500_and_completes() -> None:
    s = submit_guess(new_state(1), ANSWER, "Cessna", "172", "Skyhawk")
    assert s.score == 500
    s = advance(s)
    assert s.phase is Phase.COMPLETED
    assert s.final_score == 500
    assert s.round == 1


def test_wrong_guess_advances_to_next_round() -> None:
    s = advance(submit_guess(new_state(1), ANSWER, "Cessna", "150", "Standard"))
    assert s.phase is Phase.PLAYING
    assert s.round == 2
    assert len(s.guesses) == 1


def test_submit_rejected_outside_playing_and_when_incomplete() -> None:
    resolved = submit_guess(new_state(1), ANSWER, "Piper", "Cherokee", "Six")
    with pytest.raises(GameStateError):
        submit_guess(resolved, ANSWER, "Cessna", "172", "Skyhawk")

    with pytest.raises(GameStateError):
        submit_guess(new_state(1), ANSWER, "Cessna", "172", "")


def test_advance_rejected_while_playing_or_completed() -> None:
    with pytest.raises(GameStateError):
        advance(new_state(1))

    done = advance(submit_guess(new_state(1), ANSWER, "Cessna", "172", "Skyhawk"))
    with pytest.raises(GameStateError):
        advance(done)
    with pytest.raises(GameStateError):
        submit_guess(done, ANSWER, "Cessna", "172", "Skyhawk")


def test_round_never_exceeds_five() -> None:
    s = new_state(1)
    rounds_seen = []
    while s.phase is not Phase.COMPLETED:
        s = advance(submit_guess(s, ANSWER, "Piper", "Cherokee", "Six"))
        rounds_seen.append(s.round)
    assert max(rounds_seen) == 5
    assert len(s.guesses) == 5


def test_transitions_do_not_mutate_input_state() -> None:
    s0 = new_state(1)
    s1 = submit_guess(s0, ANSWER, "Cessna", "172", "Skyhawk")
    assert s0.guesses == ()
    assert s0.score == 0
    assert s1 is not s0


def test_consistency_check_flags_unreachable_records() -> None:
    g1 = Guess(1, "a", "b", "c", Correctness(False, False, False))
    g2 = Guess(2, "a", "b", "c", Correctness(False, False, False))
    assert RoundState(day_seed=1, round=3, score=400, guesses=(g1, g2)).is_consistent()
    assert RoundState(day_seed=1, round=2, guesses=(g1, g2)).is_consistent()
    assert not RoundState(day_seed=1, round=6).is_consistent()
    assert not RoundState(day_seed=1, round=1, score=-5).is_consistent()
    assert not RoundState(day_seed=1, round=4, guesses=(g1,)).is_consistent()
    assert not RoundState(day_seed=1, round=3, guesses=(g2, g1)).is_consistent()
    assert not RoundState(day_seed=1, round=1, completed=True).is_consistent()


def test_consistency_check_rejects_play_after_a_correct_guess() -> None:
    hit = Guess(1, "a", "b", "c", Correctness(True, True, True))
    miss = Guess(2, "a", "b", "c", Correctness(False, False, False))
    assert RoundState(day_seed=1, round=1, score=500, guesses=(hit,)).is_consistent()
    assert RoundState(
        day_seed=1, round=1, score=500, guesses=(hit,), completed=True, final_score=500
    ).is_consistent()
    # Advancing past a correct guess ends the day, so these never occur.
    assert not RoundState(day_seed=1, round=2, score=500, guesses=(hit,)).is_consistent()
    assert not RoundState(day_seed=1, round=2, score=500, guesses=(hit, miss)).is_consistent()
    first_miss = Guess(1, "a", "b", "c", Correctness(False, False, False))
    assert not RoundState(day_seed=1, round=1, guesses=(first_miss,), completed=True).is_consistent()

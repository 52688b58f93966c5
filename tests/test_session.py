from itertools import product

import pytest

from game.errors import (
    ConfigurationTooLarge,
    InvalidConfiguration,
    InvalidFeedback,
    SessionStateError,
)
from game.ruleset import DuplicatePolicy, GameConfiguration
from game.scoring import score
from game.session import GameSession, GameStatus, check_configuration
from solver.candidates import generate
from solver.evidence_filter import filter_candidates
from solver.minimax import FAST, STRICT

RGBY = GameConfiguration(4, ("Red", "Green", "Blue", "Yellow"))


def _play(session, secret, max_rounds=50):
    """Let the session break a known secret; return the number of rounds."""
    while session.status == GameStatus.IN_PROGRESS and session.round < max_rounds:
        guess = session.next_guess()
        session.record_feedback(guess, *score(secret, guess))
        # candidates always equal the full space filtered by the evidence
        if session.status == GameStatus.IN_PROGRESS:
            cfg = session.configuration
            full = generate(cfg.code_length, cfg.colors, cfg.duplicates)
            assert list(session.candidates) == filter_candidates(full, session.evidence_log)
    return session.round


def test_new_session_is_configuring():
    session = GameSession()
    assert session.status == GameStatus.CONFIGURING
    assert session.candidates == ()
    assert session.evidence_log == ()


@pytest.mark.parametrize("configuration", [
    GameConfiguration(0, ("A", "B")),
    GameConfiguration(3, ()),
    GameConfiguration(3, (" ", "")),
    GameConfiguration(4, ("A", "B", "C"), DuplicatePolicy.none()),
    GameConfiguration(4, ("A", "B"), DuplicatePolicy.limited(1)),
    GameConfiguration(4, ("A", "B"), DuplicatePolicy.limited(0)),
])
def test_invalid_configuration_keeps_configuring(configuration):
    session = GameSession()
    with pytest.raises(InvalidConfiguration):
        session.start(configuration)
    assert session.status == GameStatus.CONFIGURING


def test_configuration_too_large_reports_size_and_ceiling():
    session = GameSession()
    with pytest.raises(ConfigurationTooLarge) as err:
        session.start(GameConfiguration(8, tuple("ABCDEF")))
    assert err.value.size == 6**8
    assert err.value.ceiling == 500_000
    assert "1,679,616" in str(err.value)
    assert session.status == GameStatus.CONFIGURING


def test_six_colors_four_pegs_no_repeats_is_accepted():
    cfg = GameConfiguration(4, tuple("ABCDEF"), DuplicatePolicy.none())
    assert check_configuration(cfg) == 360
    session = GameSession()
    session.start(cfg)
    assert session.status == GameStatus.IN_PROGRESS
    assert len(session.candidates) == 360


def test_opening_guess_and_first_feedback():
    session = GameSession()
    session.start(RGBY)
    guess = session.next_guess()
    assert guess == ("Red", "Green", "Red", "Green")

    secret = ("Red", "Red", "Green", "Blue")
    assert score(secret, guess) == (1, 2)
    status = session.record_feedback(guess, 1, 2)

    assert status == GameStatus.IN_PROGRESS
    assert secret in session.candidates
    assert all(score(c, guess) == (1, 2) for c in session.candidates)
    assert len(session.evidence_log) == 1


def test_next_guess_is_cached_until_feedback():
    session = GameSession()
    session.start(RGBY)
    first = session.next_guess()
    assert session.next_guess() == first
    assert session.pending_guess == first
    session.record_feedback(first, 0, 1)
    assert session.pending_guess is None


@pytest.mark.parametrize("guess,exact,color_only", [
    (("Red", "Green", "Red", "Green"), 3, 2),
    (("Red", "Green", "Red", "Green"), -1, 0),
    (("Red", "Green", "Red"), 1, 0),
    (("Red", "Green", "Red", "Purple"), 1, 0),
])
def test_invalid_feedback_leaves_state_unchanged(guess, exact, color_only):
    session = GameSession()
    session.start(RGBY)
    session.next_guess()
    before = session.candidates
    with pytest.raises(InvalidFeedback):
        session.record_feedback(guess, exact, color_only)
    assert session.status == GameStatus.IN_PROGRESS
    assert session.candidates == before
    assert session.evidence_log == ()


def test_full_match_solves():
    session = GameSession()
    session.start(RGBY)
    guess = session.next_guess()
    assert session.record_feedback(guess, 4, 0) == GameStatus.SOLVED
    assert session.solution == guess
    assert session.round == 1
    with pytest.raises(SessionStateError):
        session.next_guess()
    with pytest.raises(SessionStateError):
        session.record_feedback(guess, 4, 0)


def test_impossible_feedback_is_a_contradiction():
    session = GameSession()
    session.start(RGBY)
    guess = session.next_guess()
    assert session.record_feedback(guess, 3, 1) == GameStatus.CONTRADICTION
    assert session.candidates == ()
    assert session.next_guess() is None
    with pytest.raises(SessionStateError):
        session.record_feedback(guess, 0, 0)


def test_contradiction_after_ruling_out_every_color():
    session = GameSession()
    session.start(RGBY)
    session.record_feedback(("Red", "Green", "Red", "Green"), 0, 0)
    session.record_feedback(("Blue",) * 4, 0, 0)
    assert session.candidates == (("Yellow",) * 4,)
    assert session.record_feedback(("Yellow",) * 4, 0, 0) == GameStatus.CONTRADICTION


def test_restart_and_start_rules():
    session = GameSession()
    session.start(RGBY)
    with pytest.raises(SessionStateError):
        session.start(RGBY)
    session.next_guess()
    session.restart()
    assert session.status == GameStatus.CONFIGURING
    assert session.pending_guess is None
    session.start(GameConfiguration(3, tuple("ABC"), DuplicatePolicy.none()))
    assert len(session.candidates) == 6


def test_single_color_single_peg():
    session = GameSession()
    session.start(GameConfiguration(1, ("A", "A")))
    assert session.next_guess() == ("A",)
    assert session.record_feedback(("A",), 1, 0) == GameStatus.SOLVED


def test_every_secret_is_solved_three_pegs_four_colors():
    cfg = GameConfiguration(3, tuple("ABCD"))
    for secret in product("ABCD", repeat=3):
        session = GameSession(solver_config=STRICT)
        session.start(cfg)
        rounds = _play(session, secret)
        assert session.status == GameStatus.SOLVED
        assert session.solution == secret
        assert rounds <= 7


def test_every_secret_is_solved_without_repeats():
    cfg = GameConfiguration(3, tuple("ABCD"), DuplicatePolicy.none())
    space = generate(3, cfg.colors, cfg.duplicates)
    for secret in space:
        session = GameSession(solver_config=FAST)
        session.start(cfg)
        assert _play(session, secret) <= len(space)
        assert session.status == GameStatus.SOLVED


def test_classic_scenario_converges():
    session = GameSession(solver_config=STRICT)
    session.start(RGBY)
    secret = ("Red", "Red", "Green", "Blue")
    rounds = _play(session, secret)
    assert session.status == GameStatus.SOLVED
    assert session.solution == secret
    assert rounds <= 7


def test_limited_policy_game():
    cfg = GameConfiguration(4, tuple("ABC"), DuplicatePolicy.limited(2))
    session = GameSession(solver_config=FAST)
    session.start(cfg)
    assert len(session.candidates) == 54
    assert session.next_guess() == ("A", "B", "A", "B")
    _play(session, ("C", "C", "A", "B"))
    assert session.solution == ("C", "C", "A", "B")

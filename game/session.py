from __future__ import annotations

import logging
from enum import Enum

from solver.candidates import count_combinations, generate
from solver.evidence_filter import filter_candidates
from solver.minimax import GuessChoice, MinimaxConfig, MinimaxSolver
from state.game_state import GameState
from state.persistence import load_state, save_state

from .errors import ConfigurationTooLarge, SessionStateError
from .evidence import Evidence
from .ruleset import GameConfiguration

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    CONFIGURING = "configuring"
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    CONTRADICTION = "contradiction"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.SOLVED, GameStatus.CONTRADICTION)


def check_configuration(configuration: GameConfiguration) -> int:
    """
    Validate a configuration and apply the combination-count guard.

    Returns:
        int: Size of the candidate space.
    Raises:
        InvalidConfiguration: Bad peg count, palette or policy.
        ConfigurationTooLarge: Candidate space above the ceiling.
    """
    configuration.validate(strict=True)
    size = count_combinations(
        configuration.code_length,
        configuration.num_colors,
        configuration.duplicates,
    )
    if size > configuration.max_combinations:
        raise ConfigurationTooLarge(size, configuration.max_combinations)
    return size


class GameSession:
    """
    One code-breaking game: configuration, remaining candidates and
    the evidence recorded so far.

    Candidates always equal the generated space filtered by every entry
    of the evidence log.
    """

    def __init__(self, solver_config: MinimaxConfig | None = None):
        self.solver_config = solver_config
        self.restart()

    def restart(self):
        """Drop the current game and go back to configuring."""
        self.status = GameStatus.CONFIGURING
        self.configuration: GameConfiguration | None = None
        self._candidates: list = []
        self._guess_universe: tuple | None = None
        self._evidence: list[Evidence] = []
        self._solver: MinimaxSolver | None = None
        self.pending_guess: tuple | None = None
        self.last_choice: GuessChoice | None = None
        self.solution: tuple | None = None

    # --- read-only views ---
    @property
    def candidates(self) -> tuple:
        return tuple(self._candidates)

    @property
    def evidence_log(self) -> tuple:
        return tuple(self._evidence)

    @property
    def round(self) -> int:
        """Number of feedback entries recorded, counting a winning one."""
        return len(self._evidence) + (1 if self.status == GameStatus.SOLVED else 0)

    def _require(self, *states: GameStatus, action: str):
        if self.status not in states:
            raise SessionStateError(
                f"Cannot {action} while the game is {self.status.value}."
            )

    # --- transitions ---
    def start(self, configuration: GameConfiguration):
        """
        Validate the configuration and build the candidate space.

        Raises:
            InvalidConfiguration: Bad peg count, palette or policy.
            ConfigurationTooLarge: Candidate space above the ceiling.
            SessionStateError: If a game is already running.
        """
        self._require(GameStatus.CONFIGURING, action="start a game")
        check_configuration(configuration)

        self._candidates = generate(
            configuration.code_length,
            configuration.colors,
            configuration.duplicates,
        )
        self.configuration = configuration
        self._solver = MinimaxSolver(configuration, self.solver_config)
        self._evidence = []
        self.status = GameStatus.IN_PROGRESS
        logger.info(
            "Game started: %s, %d candidates",
            configuration.describe(), len(self._candidates),
        )

    def next_guess(self) -> tuple | None:
        """
        Propose the next guess.

        Returns:
            tuple | None: The guess, or None when no candidate is left
            (the game is, or moves to, CONTRADICTION).
        """
        if self.status == GameStatus.CONTRADICTION:
            return None
        self._require(GameStatus.IN_PROGRESS, action="ask for a guess")

        if self.pending_guess is not None:
            return self.pending_guess

        if not self._candidates:
            self.status = GameStatus.CONTRADICTION
            return None

        if self._guess_universe is None:
            # Under every policy the universe is the full generated space
            self._guess_universe = tuple(
                generate(
                    self.configuration.code_length,
                    self.configuration.colors,
                    self.configuration.duplicates,
                )
            )

        self.last_choice = self._solver.choose_guess(
            self._candidates,
            self._guess_universe,
            first_round=not self._evidence,
        )
        self.pending_guess = self.last_choice.guess
        return self.pending_guess

    def record_feedback(self, guess, exact: int, color_only: int) -> GameStatus:
        """
        Record the feedback for a guess and narrow the candidates.

        Args:
            guess: The guess the feedback refers to.
            exact: Pegs with correct color and position.
            color_only: Pegs with correct color in the wrong position.
        Returns:
            GameStatus: The status after the update.
        Raises:
            InvalidFeedback: Counts or guess rejected, state unchanged.
        """
        self._require(GameStatus.IN_PROGRESS, action="record feedback")
        evidence = Evidence.create(guess, exact, color_only, self.configuration)
        self.pending_guess = None

        if exact == self.configuration.code_length:
            self.solution = evidence.guess
            self.status = GameStatus.SOLVED
            logger.info("Solved with %s", ", ".join(evidence.guess))
            return self.status

        self._evidence.append(evidence)
        self._candidates = filter_candidates(self._candidates, [evidence])
        logger.info("%s: %d candidates left", evidence, len(self._candidates))

        if not self._candidates:
            self.status = GameStatus.CONTRADICTION
        return self.status

    # --- persistence ---
    def get_current_state(self) -> GameState:
        """Return a GameState snapshot for saving."""
        self._require(
            GameStatus.IN_PROGRESS,
            GameStatus.SOLVED,
            GameStatus.CONTRADICTION,
            action="save",
        )
        return GameState(
            rules=self.configuration.to_rules(),
            evidence=[e.to_dict() for e in self._evidence],
            status=self.status.value,
            pending_guess=self.pending_guess,
            solution=self.solution,
        )

    def save(self, filename="game_state.json"):
        save_state(self.get_current_state(), filename)

    @classmethod
    def from_state(
        cls, state: GameState, solver_config: MinimaxConfig | None = None
    ) -> "GameSession":
        """
        Rebuild a session by replaying the saved evidence.

        Candidates are recomputed rather than loaded, so the snapshot
        only needs the configuration and the evidence log.
        """
        session = cls(solver_config=solver_config)
        session.start(GameConfiguration.from_rules(state.rules))
        for e in state.evidence:
            ev = Evidence.from_dict(e)
            session.record_feedback(ev.guess, ev.exact, ev.color_only)
        if state.solution is not None and session.status == GameStatus.IN_PROGRESS:
            n = session.configuration.code_length
            session.record_feedback(state.solution, n, 0)
        if state.pending_guess is not None and session.status == GameStatus.IN_PROGRESS:
            session.pending_guess = tuple(state.pending_guess)
        return session

    @classmethod
    def from_file(cls, filename, solver_config: MinimaxConfig | None = None):
        return cls.from_state(load_state(filename), solver_config=solver_config)

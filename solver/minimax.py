from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass
from typing import Literal, Sequence

from game.ruleset import GameConfiguration
from game.scoring import Score, score

logger = logging.getLogger(__name__)

Code = tuple[str, ...]
Source = Literal["single", "opening", "candidates", "universe"]


@dataclass(frozen=True)
class MinimaxConfig:
    """
    Tuning knobs for the guess search.

    Early exit and truncation trade strategy optimality for bounded
    latency. STRICT disables both apart from the perfect-split exit.
    """

    # stop once a guess leaves at most this many candidates in its worst bucket
    early_exit_threshold: int = 1
    # ... or at most this fraction of the current candidates (0 disables)
    early_exit_fraction: float = 0.0
    # evaluate only the first N candidates / universe guesses (None = all)
    max_candidate_guesses: int | None = None
    max_universe_guesses: int | None = None
    # search the guess universe only with more candidates than this
    universe_search_above: int = 2

    def __post_init__(self):
        if self.max_candidate_guesses is not None and self.max_candidate_guesses < 1:
            raise ValueError("max_candidate_guesses must be at least 1.")

    def threshold(self, num_candidates: int) -> int:
        return max(
            self.early_exit_threshold,
            int(self.early_exit_fraction * num_candidates),
        )


STRICT = MinimaxConfig()
FAST = MinimaxConfig(
    early_exit_threshold=2,
    early_exit_fraction=0.25,
    max_candidate_guesses=1000,
    max_universe_guesses=2000,
)


@dataclass(frozen=True)
class GuessChoice:
    guess: Code
    worst_case: int
    worst_feedback: Score | None
    source: Source


def opening_guess(configuration: GameConfiguration) -> Code | None:
    """
    Fixed opening c0, c1, c0, c1, ... from the first two palette colors.

    Returns None when the configuration does not qualify: fewer than
    4 pegs, fewer than 2 colors, or a policy that forbids the pattern.
    """
    n = configuration.code_length
    policy = configuration.duplicates
    if n < 4 or configuration.num_colors < 2 or not policy.allows_repeats(n):
        return None
    pair = configuration.colors[:2]
    guess = tuple(pair[i % 2] for i in range(n))
    if not policy.allows(guess):
        return None
    return guess


class MinimaxSolver:
    """
    Minimax guess selection:
    - per guess, bucket the candidates by feedback and take the largest bucket
    - best guess = smallest largest bucket, first one wins ties
    - candidates are searched first since a candidate guess can win outright

    Attributes:
        configuration: GameConfiguration
        cfg: MinimaxConfig
    """

    def __init__(
        self,
        configuration: GameConfiguration,
        config: MinimaxConfig | None = None,
    ):
        self.configuration = configuration
        self.cfg = config or STRICT

    @staticmethod
    def _worst_case(
        guess: Sequence[str], candidates: Sequence[Code], bound: float
    ) -> tuple[int, Score | None]:
        """
        Largest feedback bucket for a guess.

        Counting stops as soon as a bucket reaches bound, since such a
        guess can no longer beat the current best.

        Returns:
            (worst bucket size, its feedback)
        """
        buckets: Counter = Counter()
        max_cnt = 0
        max_fb = None
        for c in candidates:
            fb = score(c, guess)
            cnt = buckets[fb] + 1
            buckets[fb] = cnt
            if cnt > max_cnt:
                max_cnt = cnt
                max_fb = fb
                if max_cnt >= bound:
                    break
        return max_cnt, max_fb

    def _search(
        self,
        pool: Sequence[Code],
        candidates: Sequence[Code],
        best: GuessChoice | None,
        source: Source,
        threshold: int,
    ) -> tuple[GuessChoice | None, bool]:
        """
        Scan one pool of guesses.

        Returns:
            (best choice so far, whether the early exit fired)
        """
        best_cnt = best.worst_case if best is not None else float("inf")

        for gs in pool:
            cnt, fb = self._worst_case(gs, candidates, best_cnt)
            if cnt < best_cnt:
                best = GuessChoice(gs, cnt, fb, source)
                best_cnt = cnt
                logger.debug(
                    "Best guess %s (%s), worst case %d after %s",
                    gs, source, cnt, fb,
                )
                if cnt <= threshold:
                    return best, True
        return best, False

    def choose_guess(
        self,
        candidates: Sequence[Code],
        guess_universe: Sequence[Code] = (),
        *,
        first_round: bool = False,
    ) -> GuessChoice:
        """
        Choose the next guess.

        Args:
            candidates: Secrets still consistent with the evidence.
            guess_universe: Every guess the solver may propose.
            first_round: True before any feedback has been recorded.
        Returns:
            GuessChoice: guess, worst case, worst feedback, source.
        Raises:
            ValueError: If there are no candidates.
        """
        if not candidates:
            raise ValueError("Cannot choose a guess without candidates.")

        if len(candidates) == 1:
            return GuessChoice(tuple(candidates[0]), 1, None, "single")

        if first_round:
            opening = opening_guess(self.configuration)
            if opening is not None:
                return GuessChoice(opening, len(candidates), None, "opening")
            return GuessChoice(tuple(candidates[0]), len(candidates), None, "opening")

        start = time.perf_counter()
        threshold = self.cfg.threshold(len(candidates))

        pool = candidates
        if self.cfg.max_candidate_guesses is not None:
            pool = candidates[: self.cfg.max_candidate_guesses]
        best, done = self._search(pool, candidates, None, "candidates", threshold)

        if not done and len(candidates) > self.cfg.universe_search_above:
            evaluated = set(pool)
            universe = [g for g in guess_universe if g not in evaluated]
            if self.cfg.max_universe_guesses is not None:
                universe = universe[: self.cfg.max_universe_guesses]
            best, _ = self._search(universe, candidates, best, "universe", threshold)

        logger.info(
            "Chose %s from %d candidates (worst case %d, %s) in %.2fs",
            ", ".join(best.guess), len(candidates), best.worst_case,
            best.source, time.perf_counter() - start,
        )
        return best

"""
Mastermind feedback for a single (secret, guess) pair.

  - exact      : correct color in the correct position (black peg)
  - color_only : correct color in the wrong position (white peg)

Positions counted as exact are excluded from the color count, and every
leftover peg is matched at most once, so the result is symmetric:
score(a, b) == score(b, a).
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, NamedTuple, Sequence


class Score(NamedTuple):
    exact: int
    color_only: int

    def __str__(self):
        return f"{self.exact} exact, {self.color_only} color only"


def score(secret: Sequence[str], guess: Sequence[str]) -> Score:
    """
    Compare a hypothetical secret with a guess.

    Args:
        secret: The candidate secret.
        guess: The proposed guess, same length as secret.
    Returns:
        Score: (exact, color_only)
    Raises:
        ValueError: If the sequences differ in length.
    """
    if len(secret) != len(guess):
        raise ValueError(
            f"Secret and guess must be the same length "
            f"({len(secret)} != {len(guess)})."
        )

    exact = 0
    leftover_secret = []
    leftover_guess = []

    # Pass 1: exact matches, collect the rest
    for s, g in zip(secret, guess):
        if s == g:
            exact += 1
        else:
            leftover_secret.append(s)
            leftover_guess.append(g)

    # Pass 2: each leftover secret color consumes one leftover guess peg
    color_only = 0
    for color in leftover_secret:
        if color in leftover_guess:
            color_only += 1
            leftover_guess.remove(color)

    return Score(exact, color_only)


def score_distribution(
    guess: Sequence[str], candidates: Iterable[Sequence[str]]
) -> Counter:
    """
    Bucket the candidates by the feedback the guess would receive.

    Returns:
        Counter[Score, int]: Number of candidates per outcome.
    """
    buckets: Counter = Counter()
    for candidate in candidates:
        buckets[score(candidate, guess)] += 1
    return buckets

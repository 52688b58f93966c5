from __future__ import annotations

import logging
from typing import Iterable, Sequence

from game.evidence import Evidence
from game.scoring import score

logger = logging.getLogger(__name__)


def is_consistent(candidate: Sequence[str], evidence_log: Iterable[Evidence]) -> bool:
    """
    True if the candidate, taken as the secret, would have produced
    every recorded feedback.
    """
    for e in evidence_log:
        if score(candidate, e.guess) != e.score:
            return False
    return True


def filter_candidates(
    candidates: Iterable[Sequence[str]], evidence_log: Sequence[Evidence]
) -> list:
    """
    Keep only candidates consistent with all evidence, preserving order.

    Args:
        candidates: Current candidate secrets.
        evidence_log: Recorded (guess, exact, color_only) rounds.
    Returns:
        list: The surviving candidates. Empty means the evidence
        contradicts itself.
    """
    evidence_log = list(evidence_log)
    kept = [c for c in candidates if is_consistent(c, evidence_log)]
    logger.debug("%d candidates consistent with %d rounds", len(kept), len(evidence_log))
    return kept

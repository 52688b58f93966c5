"""
Enumeration of the candidate-secret space.

Every generator returns sequences in the same stable order: the order of
itertools.product over the palette, with sequences the policy forbids left
out. The first candidate is therefore always the same for a given
configuration.
"""

from __future__ import annotations

import logging
from itertools import permutations, product
from math import comb, perm
from typing import Sequence

from game.errors import InvalidConfiguration
from game.ruleset import DuplicatePolicy

logger = logging.getLogger(__name__)

Code = tuple[str, ...]


def _generate_limited(
    code_length: int, colors: Sequence[str], max_per_color: int
) -> list[Code]:
    """
    Build every code that uses each color at most max_per_color times.

    Iterative depth-first walk over positions, so only codes that
    respect the limit are ever materialized.
    """
    result: list[Code] = []
    counts = [0] * len(colors)
    prefix: list[int] = []
    # next color index to try at each depth
    stack = [0]

    while stack:
        idx = stack[-1]
        if idx >= len(colors):
            stack.pop()
            if prefix:
                counts[prefix.pop()] -= 1
            continue
        stack[-1] = idx + 1
        if counts[idx] >= max_per_color:
            continue

        prefix.append(idx)
        counts[idx] += 1
        if len(prefix) == code_length:
            result.append(tuple(colors[i] for i in prefix))
            counts[prefix.pop()] -= 1
        else:
            stack.append(0)

    return result


def generate(
    code_length: int, colors: Sequence[str], policy: DuplicatePolicy
) -> list[Code]:
    """
    Enumerate all codes of a given length over a palette.

    Args:
        code_length: Number of pegs.
        colors: Palette, duplicates already removed.
        policy: Duplicate policy.
    Returns:
        list[Code]: Every allowed code exactly once, in stable order.
    Raises:
        InvalidConfiguration: If code_length < 1 or the palette is empty.
    """
    if code_length < 1:
        raise InvalidConfiguration("numPegs must be at least 1.")
    if not colors:
        raise InvalidConfiguration("Need at least one color.")

    colors = list(colors)
    if policy.kind == "none":
        codes = list(permutations(colors, code_length))
    elif policy.kind == "limited" and policy.max_per_color(code_length) < code_length:
        codes = _generate_limited(
            code_length, colors, policy.max_per_color(code_length)
        )
    else:
        codes = list(product(colors, repeat=code_length))

    logger.debug(
        "Generated %d codes (%d pegs, %d colors, %s)",
        len(codes), code_length, len(colors), policy.label(),
    )
    return codes


def count_combinations(
    code_length: int, num_colors: int, policy: DuplicatePolicy
) -> int:
    """
    Size of the candidate space without enumerating it.

    Args:
        code_length: Number of pegs.
        num_colors: Palette size.
        policy: Duplicate policy.
    Returns:
        int: Exact number of codes generate() would return.
    """
    if code_length < 1 or num_colors < 1:
        return 0
    if policy.kind == "none":
        return perm(num_colors, code_length)
    if policy.kind == "unlimited":
        return num_colors**code_length

    # Limited: ways[j] = codes of length j over the colors seen so far.
    # Adding a color used t times picks its t positions: comb(j, t).
    limit = policy.max_per_color(code_length)
    ways = [1] + [0] * code_length
    for _ in range(num_colors):
        ways = [
            sum(ways[j - t] * comb(j, t) for t in range(min(limit, j) + 1))
            for j in range(code_length + 1)
        ]
    return ways[code_length]

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from .errors import InvalidConfiguration

# Configuration: colors, code length, duplicate policy, etc.
DEFAULT_RULES = {
    "name": "classic",  # Identifier for this ruleset
    "code_length": 4,  # Number of pegs in the code
    "duplicates": "unlimited",  # "none" | "limited" | "unlimited"
    "max_duplicates": None,  # Only used by the "limited" policy
    "max_combinations": 500_000,  # Refuse to enumerate larger spaces
    "colors": [
        "R",
        "G",
        "B",
        "Y",
        "O",
        "P",
    ],  # Default color set ( Red, Green, Blue, Yellow, Orange, Purple)
    "display": {
        "emoji_map": {  # Optional, for CLI rendering
            "R": "🔴",
            "G": "🟢",
            "B": "🔵",
            "Y": "🟡",
            "O": "🟠",
            "P": "🟣",
            "BK": "⚫",
            "W": "⚪",
        }
    },
}

MAX_COMBINATIONS = DEFAULT_RULES["max_combinations"]

PolicyKind = Literal["none", "limited", "unlimited"]


def parse_colors(text: str) -> list[str]:
    """
    Split a user supplied color list on commas and whitespace.

    Args:
        text (str): e.g. "Red, Green Blue".
    Returns:
        list[str]: The non-empty labels, in input order.
    """
    return [c.strip() for c in re.split(r"[ ,]+", text) if c.strip()]


@dataclass(frozen=True)
class DuplicatePolicy:
    """
    How often a color may appear in one sequence.

    Attributes:
        kind: "none" (all distinct), "limited" (at most max_duplicates
            of each color) or "unlimited".
        max_duplicates: Upper bound per color for the limited policy.
    """

    kind: PolicyKind = "unlimited"
    max_duplicates: int | None = None

    @classmethod
    def none(cls) -> "DuplicatePolicy":
        return cls("none")

    @classmethod
    def unlimited(cls) -> "DuplicatePolicy":
        return cls("unlimited")

    @classmethod
    def limited(cls, max_duplicates: int) -> "DuplicatePolicy":
        return cls("limited", max_duplicates)

    def max_per_color(self, code_length: int) -> int:
        """Largest number of times one color may appear in a code."""
        if self.kind == "none":
            return 1
        if self.kind == "limited":
            return min(self.max_duplicates, code_length)
        return code_length

    def allows_repeats(self, code_length: int) -> bool:
        return self.max_per_color(code_length) >= 2

    def allows(self, sequence) -> bool:
        """Check a single sequence against the policy."""
        limit = self.max_per_color(len(sequence))
        return all(sequence.count(c) <= limit for c in set(sequence))

    def label(self) -> str:
        if self.kind == "limited":
            return f"limited({self.max_duplicates})"
        return self.kind

    @classmethod
    def parse(cls, text: str) -> "DuplicatePolicy":
        """
        Parse "none", "unlimited", "limited:2" or "limited(2)".

        Raises:
            InvalidConfiguration: For anything else.
        """
        text = text.strip().lower()
        if text in ("none", "unlimited"):
            return cls(text)
        m = re.fullmatch(r"limited\s*[:(]\s*(\d+)\s*\)?", text)
        if m:
            return cls.limited(int(m.group(1)))
        raise InvalidConfiguration(
            f"Unknown duplicate policy '{text}'. "
            "Use none, unlimited or limited:N."
        )


@dataclass(frozen=True)
class GameConfiguration:
    """
    Everything needed to set up a game.

    Attributes:
        code_length (int): Number of pegs in the secret.
        colors (tuple[str, ...]): Palette, in input order, without repeats.
        duplicates (DuplicatePolicy): Duplicate policy for secrets and guesses.
        max_combinations (int): Ceiling for the combination-count guard.
    """

    code_length: int
    colors: tuple[str, ...]
    duplicates: DuplicatePolicy = field(default_factory=DuplicatePolicy)
    max_combinations: int = MAX_COMBINATIONS

    def __post_init__(self):
        # Duplicate labels collapse onto their first occurrence
        labels = []
        for c in self.colors:
            c = str(c).strip()
            if c and c not in labels:
                labels.append(c)
        object.__setattr__(self, "colors", tuple(labels))

    @property
    def num_colors(self) -> int:
        return len(self.colors)

    def validate(self, strict: bool = True) -> bool:
        """
        Check peg count, palette and duplicate policy.

        Args:
            strict (bool): If True, raise InvalidConfiguration on failure.
        Returns:
            bool: True if valid, False otherwise.
        """

        def fail(msg: str) -> bool:
            if strict:
                raise InvalidConfiguration(msg)
            return False

        if not isinstance(self.code_length, int) or self.code_length < 1:
            return fail("Need at least one peg.")

        if not self.colors:
            return fail("Need at least one color.")

        policy = self.duplicates
        if policy.kind not in ("none", "limited", "unlimited"):
            return fail(f"Unknown duplicate policy '{policy.kind}'.")

        if policy.kind == "limited" and (
            policy.max_duplicates is None or policy.max_duplicates < 1
        ):
            return fail("Limited duplicates need a maximum of at least 1.")

        limit = policy.max_per_color(self.code_length)
        if limit * self.num_colors < self.code_length:
            if policy.kind == "none":
                return fail(
                    "If duplicates are not allowed, need at least as many "
                    "colors as there are pegs."
                )
            return fail(
                f"{self.num_colors} colors used at most {limit} times each "
                f"cannot fill {self.code_length} pegs."
            )

        return True

    @classmethod
    def from_rules(cls, rules: dict | None = None) -> "GameConfiguration":
        """Build a configuration from a ruleset dictionary."""
        rules = rules or DEFAULT_RULES
        return cls(
            code_length=rules["code_length"],
            colors=tuple(rules["colors"]),
            duplicates=DuplicatePolicy(
                rules.get("duplicates", "unlimited"),
                rules.get("max_duplicates"),
            ),
            max_combinations=rules.get("max_combinations", MAX_COMBINATIONS),
        )

    def to_rules(self) -> dict:
        """Return the configuration as a plain ruleset dictionary."""
        return {
            "code_length": self.code_length,
            "colors": list(self.colors),
            "duplicates": self.duplicates.kind,
            "max_duplicates": self.duplicates.max_duplicates,
            "max_combinations": self.max_combinations,
        }

    def describe(self) -> str:
        return (
            f"{self.code_length} pegs, {self.num_colors} colors, "
            f"duplicates: {self.duplicates.label()}"
        )

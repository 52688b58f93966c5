from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidFeedback
from .ruleset import GameConfiguration
from .scoring import Score


@dataclass(frozen=True)
class Evidence:
    """
    One round of the game: a guess and the feedback it received.

    Attributes:
        guess (tuple[str, ...]): The guessed sequence of colors.
        exact (int): Number of correct colors in correct positions.
        color_only (int): Number of correct colors in wrong positions.
    """

    guess: tuple[str, ...]
    exact: int
    color_only: int

    @classmethod
    def create(
        cls,
        guess,
        exact: int,
        color_only: int,
        configuration: GameConfiguration,
    ) -> "Evidence":
        """
        Build an Evidence entry, checking it against the configuration.

        Raises:
            InvalidFeedback: If the counts or the guess cannot be right.
        """
        evidence = cls(tuple(guess), exact, color_only)
        evidence.validate(configuration)
        return evidence

    def validate(self, configuration: GameConfiguration) -> bool:
        """
        Check the guess (length, colors) and the feedback counts.

        Raises:
            InvalidFeedback: On the first failed check.
        """
        n = configuration.code_length

        if len(self.guess) != n:
            raise InvalidFeedback(
                f"Guess length must be {n}, but got {len(self.guess)}."
            )

        for color in self.guess:
            if color not in configuration.colors:
                allowed = ", ".join(configuration.colors)
                raise InvalidFeedback(
                    f"Invalid color '{color}'. Allowed: {allowed}."
                )

        for value in (self.exact, self.color_only):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidFeedback(
                    "Feedback counts must be non-negative integers."
                )

        if self.exact + self.color_only > n:
            raise InvalidFeedback(
                "The sum of Right-Color-and-Column and Right-color-wrong-column "
                f"cannot be more than the number of pegs ({n})."
            )

        return True

    @property
    def score(self) -> Score:
        return Score(self.exact, self.color_only)

    def as_string(self, sep: str = ", ") -> str:
        return sep.join(self.guess)

    def to_dict(self) -> dict:
        return {
            "guess": list(self.guess),
            "exact": self.exact,
            "color_only": self.color_only,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Evidence":
        return cls(tuple(data["guess"]), data["exact"], data["color_only"])

    def __str__(self):
        return f"{self.as_string()} -> {self.score}"

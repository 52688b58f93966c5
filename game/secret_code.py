import random

from .errors import InvalidConfiguration
from .ruleset import GameConfiguration
from .scoring import Score, score


class Code:
    """
        Represents a secret code, used when the assistant plays against itself.
    Attributes:
        sequence (tuple[str, ...]): The sequence of colors representing the code.
        configuration (GameConfiguration): The rules the code must follow."""

    def __init__(self, configuration: GameConfiguration, sequence=None):
        """
        Initialize a Code instance.

        Args:
            configuration (GameConfiguration): Length, palette and duplicate
            policy.
            sequence (list or None): The color labels of the code. A string
            is split on commas and whitespace.
        """
        self.configuration = configuration
        if isinstance(sequence, str):
            sequence = [c.strip() for c in sequence.replace(",", " ").split()]
        self.sequence = tuple(sequence) if sequence else ()

    def generate_random(self, rng: random.Random | None = None):
        """
        Generate a random valid code according to the configuration.

        Args:
            rng (random.Random | None): Source of randomness, for
            reproducible benchmarks.
        """
        rng = rng or random.Random()
        colors = list(self.configuration.colors)
        length = self.configuration.code_length
        policy = self.configuration.duplicates

        if policy.kind == "none":
            self.sequence = tuple(rng.sample(colors, k=length))
        else:
            # Limited policies: redraw until no color is over its limit
            while True:
                self.sequence = tuple(rng.choices(colors, k=length))
                if policy.allows(self.sequence):
                    break

        self.validate()
        return self

    def validate(self, strict: bool = True) -> bool:
        """
        Validate the current code (length, colors, duplicates).

        Args:
            strict (bool): If True, raise InvalidConfiguration with an
            explanatory message when validation fails.

        Returns:
            bool: True if the code sequence is valid; False if invalid and
            strict is False.
        """

        def fail(msg: str) -> bool:
            if strict:
                raise InvalidConfiguration(msg)
            return False

        n = self.configuration.code_length
        if len(self.sequence) != n:
            return fail(f"Code length must be {n}, but got {len(self.sequence)}.")

        if not self.configuration.duplicates.allows(self.sequence):
            return fail(
                f"Code breaks the duplicate policy "
                f"({self.configuration.duplicates.label()})."
            )

        for color in self.sequence:
            if color not in self.configuration.colors:
                allowed = ", ".join(self.configuration.colors)
                return fail(f"Invalid color '{color}'. Allowed: {allowed}.")

        return True

    def compare_with(self, guess) -> Score:
        """
        Feedback this code gives to a guess.

        Args:
            guess: Sequence of color labels.
        Returns:
            Score: (exact, color_only)
        """
        return score(self.sequence, tuple(guess))

    def as_string(self, sep: str = ", "):
        """
        Return a string representation of the code (e.g. 'R, G, B, Y').
        """
        return sep.join(self.sequence) if self.sequence else "EMPTY"

    def __eq__(self, other):
        if isinstance(other, Code):
            return self.sequence == other.sequence
        if isinstance(other, (list, tuple)):
            return self.sequence == tuple(other)
        return False

    def __hash__(self):
        return hash(self.sequence)

    def __str__(self):
        return self.as_string()

class MastermindError(ValueError):
    """Base class for every error the assistant reports to its caller."""


class InvalidConfiguration(MastermindError):
    """Peg count, palette or duplicate policy cannot form a game."""


class ConfigurationTooLarge(MastermindError):
    """
    The candidate space is larger than the allowed ceiling.

    Attributes:
        size (int): Number of secrets the configuration would produce.
        ceiling (int): The configured upper bound.
    """

    def __init__(self, size: int, ceiling: int):
        self.size = size
        self.ceiling = ceiling
        super().__init__(
            f"This configuration has {size:,} possible secrets, "
            f"the limit is {ceiling:,}. Use fewer pegs or colors."
        )


class InvalidFeedback(MastermindError):
    """Feedback counts (or the guess they refer to) cannot be right."""


class SessionStateError(MastermindError):
    """The session is not in a state that accepts the requested operation."""


CONTRADICTION_MESSAGE = (
    "Ran out of possible guesses. There might be a contradiction "
    "in the information you entered."
)

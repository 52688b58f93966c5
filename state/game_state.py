# state/game_state.py


class GameState:
    """Container for a Mastermind assistant snapshot"""

    def __init__(self, rules, evidence, status, pending_guess=None, solution=None):
        self.rules = rules
        self.evidence = evidence
        self.status = status
        self.pending_guess = list(pending_guess) if pending_guess else None
        self.solution = list(solution) if solution else None

    def to_dict(self):
        # Return the gamestate as dictionary for i.e. json
        return {
            "rules": self.rules,
            "evidence": self.evidence,
            "status": self.status,
            "pending_guess": self.pending_guess,
            "solution": self.solution,
        }

    @classmethod
    def from_dict(cls, data):
        # Load the gamestate from a dictionary
        return cls(
            rules=data["rules"],
            evidence=data.get("evidence", []),
            status=data.get("status", "in_progress"),
            pending_guess=data.get("pending_guess"),
            solution=data.get("solution"),
        )

# Command-line interface (the assistant proposes, you score)

from game.errors import CONTRADICTION_MESSAGE, MastermindError
from game.ruleset import DEFAULT_RULES, DuplicatePolicy, GameConfiguration, parse_colors
from game.session import GameSession, GameStatus

from .terminal import log_print

HELP = (
    "Score each guess as two numbers: right color and column, then right "
    "color wrong column (e.g. '1 2').\n"
    "Commands: restart, save <file>, load <file>, history, candidates, exit.\n"
)


def parse_feedback(text: str) -> tuple[int, int]:
    """
    Parse feedback like "1 2", "1,2" or "1/2".

    Raises:
        ValueError: If the text is not two integers.
    """
    parts = text.replace(",", " ").replace("/", " ").split()
    if len(parts) != 2:
        raise ValueError("Enter two numbers, e.g. '1 2'.")
    return int(parts[0]), int(parts[1])


def _label(color: str, emoji_map: dict) -> str:
    return emoji_map.get(color, color)


def render(session: GameSession, emoji_map: dict | None = None):
    """Print the evidence history and the pending guess as a table."""
    if emoji_map is None:
        emoji_map = DEFAULT_RULES["display"]["emoji_map"]
    n = session.configuration.code_length
    cell = max([2] + [len(_label(c, emoji_map)) for c in session.configuration.colors])

    line = ("+" + "-" * (cell + 2)) * n + "+" + "-" * 22 + "+"
    print(line)
    for i, e in enumerate(session.evidence_log, start=1):
        row = "".join(f"| {_label(c, emoji_map):<{cell}} " for c in e.guess)
        pegs = (
            emoji_map.get("BK", "B") * e.exact
            + emoji_map.get("W", "W") * e.color_only
        )
        print(f"{row}| #{i:<2} {e.exact} exact {e.color_only} color {pegs}")
        print(line)
    if session.pending_guess is not None:
        row = "".join(
            f"| {_label(c, emoji_map):<{cell}} " for c in session.pending_guess
        )
        print(f"{row}| next guess")
        print(line)


def prompt_configuration(input_fn=input) -> GameConfiguration:
    """Ask for peg count, colors and duplicate policy until they parse."""
    defaults = GameConfiguration.from_rules(DEFAULT_RULES)
    while True:
        try:
            pegs = input_fn(f"Number of pegs [{defaults.code_length}]: ").strip()
            colors = input_fn(f"Colors [{' '.join(defaults.colors)}]: ").strip()
            policy = input_fn(
                "Duplicates (none, unlimited, limited:N) "
                f"[{defaults.duplicates.label()}]: "
            ).strip()
            configuration = GameConfiguration(
                code_length=int(pegs) if pegs else defaults.code_length,
                colors=tuple(parse_colors(colors)) if colors else defaults.colors,
                duplicates=DuplicatePolicy.parse(policy) if policy else defaults.duplicates,
            )
            configuration.validate(strict=True)
            return configuration
        except ValueError as e:
            print(f"Invalid configuration: {e}")


def _start(session: GameSession, configuration, input_fn) -> bool:
    """Start a game, re-prompting until a configuration is accepted."""
    while True:
        if configuration is None:
            configuration = prompt_configuration(input_fn)
        try:
            session.start(configuration)
            print(f"\nNew game: {configuration.describe()}")
            print(f"{len(session.candidates):,} possible secrets.")
            return True
        except MastermindError as e:
            print(f"Invalid configuration: {e}")
            configuration = None


def gameloop(configuration=None, solver_config=None, input_fn=input) -> GameSession:
    """
    Run the interactive assistant until the user exits.

    Args:
        configuration: Start with this configuration instead of asking.
        solver_config: MinimaxConfig for the guess search.
        input_fn: Replacement for input(), used by tests.
    Returns:
        GameSession: The session as it was when the loop ended.
    """
    print("=== Mastermind Assistant ===")
    print(HELP)

    session = GameSession(solver_config=solver_config)
    _start(session, configuration, input_fn)

    while True:
        if session.status == GameStatus.IN_PROGRESS:
            guess = session.next_guess()
            if guess is not None:
                render(session)
                print(f"Guess {session.round + 1}: {', '.join(guess)}")

        if session.status == GameStatus.SOLVED:
            log_print(
                f"\nSolved in {session.round} guesses: "
                f"{', '.join(session.solution)}"
            )
        elif session.status == GameStatus.CONTRADICTION:
            log_print(f"\n{CONTRADICTION_MESSAGE}")

        if session.status.is_terminal:
            prompt = "Type 'restart' for a new game or 'exit' to quit: "
        else:
            prompt = "Your feedback: "

        try:
            user_input = input_fn(prompt).strip()
        except EOFError:
            break
        command = user_input.lower()

        # handle special commands
        if command == "exit":
            print("Exiting.")
            break
        elif command == "restart":
            session.restart()
            _start(session, None, input_fn)
            continue
        elif command == "history":
            if session.configuration is not None:
                render(session)
            continue
        elif command == "candidates":
            remaining = session.candidates
            print(f"{len(remaining):,} candidates left.")
            for c in remaining[:20]:
                print("  " + ", ".join(c))
            continue
        elif command.startswith("save"):
            try:
                filename = user_input.split(maxsplit=1)[1]
                session.save(filename)
                print(f"Game saved to {filename}.")
            except (IndexError, OSError, MastermindError) as e:
                print(f"Error saving game: {e}")
            continue
        elif command.startswith("load"):
            try:
                filename = user_input.split(maxsplit=1)[1]
                session = GameSession.from_file(filename, solver_config=solver_config)
                print(f"Game loaded: {session.configuration.describe()}")
            except (IndexError, KeyError, OSError, ValueError) as e:
                print(f"Error loading save: {e}")
            continue

        if session.status.is_terminal:
            print("The game is over. Type 'restart' or 'exit'.")
            continue

        # Score the pending guess
        try:
            exact, color_only = parse_feedback(user_input)
            session.record_feedback(session.pending_guess, exact, color_only)
        except ValueError as e:
            print(f"Invalid input: {e}")
            continue

        if session.status == GameStatus.IN_PROGRESS:
            print(f"{len(session.candidates):,} possible secrets left.")

    print("\n=== Game Over ===")
    return session

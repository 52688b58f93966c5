from __future__ import annotations

import argparse
import json
import logging
import random
import sys
import time
from pathlib import Path

from game.errors import MastermindError
from game.ruleset import DEFAULT_RULES, DuplicatePolicy, GameConfiguration, parse_colors
from game.secret_code import Code
from game.session import GameSession, GameStatus, check_configuration
from solver.minimax import FAST, STRICT, MinimaxConfig
from ui.cli import gameloop
from ui.terminal import log_print, progress_print

logger = logging.getLogger(__name__)

SOLVER_PRESETS = {"strict": STRICT, "fast": FAST}


def setup_logging(level: str = "WARNING"):
    """Send log records to stderr with a timestamped format."""
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(level.upper())


def play_one_game(
    configuration: GameConfiguration,
    secret: Code,
    solver_config: MinimaxConfig | None = None,
    max_rounds: int | None = None,
) -> dict:
    """
    Let the assistant break a known secret, scoring every guess itself.

    Returns:
        dict: won, rounds, total_time_s, turn_times, candidates_left
    """
    session = GameSession(solver_config=solver_config)
    session.start(configuration)
    turn_times = []
    candidates_left = []

    start_time = time.perf_counter()
    while session.status == GameStatus.IN_PROGRESS:
        if max_rounds is not None and session.round >= max_rounds:
            break
        t0 = time.perf_counter()
        guess = session.next_guess()
        if guess is None:
            break
        exact, color_only = secret.compare_with(guess)
        session.record_feedback(guess, exact, color_only)
        turn_times.append(time.perf_counter() - t0)
        candidates_left.append(
            1 if session.status == GameStatus.SOLVED else len(session.candidates)
        )

    return {
        "won": session.status == GameStatus.SOLVED,
        "rounds": session.round,
        "total_time_s": time.perf_counter() - start_time,
        "turn_times": turn_times,
        "candidates_left": candidates_left,
    }


def run_benchmark(
    configuration: GameConfiguration,
    games: int = 10,
    seed: int | None = None,
    solver_config: MinimaxConfig | None = None,
    max_rounds: int | None = None,
    progress: bool = True,
) -> dict:
    """
    Play several self-play games on random secrets and collect statistics.

    Returns:
        dict: Column-oriented results, one entry per game, in the layout
        plot/plot.py reads.
    """
    rng = random.Random(seed)
    results = []
    start = time.perf_counter()
    for i in range(games):
        secret = Code(configuration).generate_random(rng)
        logger.info("Game %d: secret %s", i + 1, secret)
        results.append(play_one_game(configuration, secret, solver_config, max_rounds))
        if progress:
            rate = (i + 1) / max(1e-9, time.perf_counter() - start)
            progress_print(f"Progress: {i + 1}/{games} games ({rate:.2f} games/sec)")
    if progress:
        log_print("")

    max_turns = max((len(r["turn_times"]) for r in results), default=0)
    turn_headers = [f"turn_{t}" for t in range(1, max_turns + 1)]

    def column(key, t):
        return [
            r[key][t] if t < len(r[key]) else None for r in results
        ]

    return {
        "won": [r["won"] for r in results],
        "rounds": [r["rounds"] for r in results],
        "total_time_s": [r["total_time_s"] for r in results],
        "turn_headers": turn_headers,
        "turn_time_s_columns": {
            h: column("turn_times", t) for t, h in enumerate(turn_headers)
        },
        "candidates_left_columns": {
            h: column("candidates_left", t) for t, h in enumerate(turn_headers)
        },
    }


def save_benchmark(path, configuration: GameConfiguration, solver: str, games: dict):
    """Merge one run into the benchmark file under '<pegs>x<colors>'."""
    path = Path(path)
    data = {"runs": {}}
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    key = f"{configuration.code_length}x{configuration.num_colors}"
    run = data.setdefault("runs", {}).setdefault(key, {})
    run[solver] = {
        "policy": configuration.duplicates.label(),
        "colors": list(configuration.colors),
        "games": games,
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _configuration_from_args(args) -> GameConfiguration | None:
    if args.pegs is None and args.colors is None and args.duplicates is None:
        return None
    defaults = GameConfiguration.from_rules(DEFAULT_RULES)
    return GameConfiguration(
        code_length=args.pegs if args.pegs is not None else defaults.code_length,
        colors=tuple(parse_colors(args.colors)) if args.colors else defaults.colors,
        duplicates=(
            DuplicatePolicy.parse(args.duplicates)
            if args.duplicates
            else defaults.duplicates
        ),
        max_combinations=args.max_combinations,
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Mastermind code-breaking assistant")
    ap.add_argument("--log-level", default="WARNING", help="Logging level")
    ap.add_argument("--solver", choices=sorted(SOLVER_PRESETS), default="fast",
                    help="strict: exact minimax, fast: early exit and capped search")

    sub = ap.add_subparsers(dest="command")
    for name in ("play", "benchmark"):
        p = sub.add_parser(name)
        p.add_argument("--pegs", type=int, default=None, help="Number of pegs")
        p.add_argument("--colors", default=None, help="Color labels, e.g. 'R G B Y O P'")
        p.add_argument("--duplicates", default=None,
                       help="none, unlimited or limited:N")
        p.add_argument("--max-combinations", type=int,
                       default=DEFAULT_RULES["max_combinations"],
                       help="Refuse configurations with more possible secrets")

    bench = sub.choices["benchmark"]
    bench.add_argument("--games", type=int, default=10, help="Number of games")
    bench.add_argument("--seed", type=int, default=None, help="Random seed")
    bench.add_argument("--max-rounds", type=int, default=None,
                       help="Give up a game after this many rounds")
    bench.add_argument("--out", default="benchmark.json", help="Output JSON path")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    solver_config = SOLVER_PRESETS[args.solver]

    if args.command is None:
        gameloop(solver_config=solver_config)
        return 0

    try:
        configuration = _configuration_from_args(args)
    except MastermindError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.command == "play":
        gameloop(configuration, solver_config=solver_config)
        return 0

    configuration = configuration or GameConfiguration.from_rules(
        {**DEFAULT_RULES, "max_combinations": args.max_combinations}
    )
    if args.games < 1:
        print("Need at least one game.", file=sys.stderr)
        return 2
    try:
        check_configuration(configuration)
    except MastermindError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    games = run_benchmark(
        configuration,
        games=args.games,
        seed=args.seed,
        solver_config=solver_config,
        max_rounds=args.max_rounds,
    )
    save_benchmark(args.out, configuration, args.solver, games)

    rounds = games["rounds"]
    times = games["total_time_s"]
    print(f"\nAverage time over {len(times)} games: {sum(times) / len(times):.2f} seconds.")
    print(f"Max time over {len(times)} games: {max(times):.2f} seconds.")
    print(f"Average rounds over {len(rounds)} games: {sum(rounds) / len(rounds):.2f}.")
    print(f"Max rounds over {len(rounds)} games: {max(rounds)}.")
    print(f"Games won: {sum(games['won'])}/{len(rounds)}. Results in {args.out}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

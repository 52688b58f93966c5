import argparse
import json
import re
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt


def _natural_turn_sort_key(s: str):
    m = re.search(r"(\d+)", str(s))
    return int(m.group(1)) if m else s


def _parse_run_key(key: str):
    m = re.fullmatch(r"(\d+)\s*x\s*(\d+)", key.strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def _annotate_points(ax, xs, ys, *, fmt="{:.2f}", dx=0, dy=6, fontsize=8):
    """
    Annotate points (x, y) on ax with formatted y values.

    Args:
        ax: matplotlib Axes
        xs: list of x coordinates
        ys: list of y coordinates
        fmt: format string for y values
        dx: x offset in points
        dy: y offset in points
        fontsize: font size for annotations
    """
    for x, y in zip(xs, ys):
        if y is None or np.isnan(y):
            continue
        ax.annotate(
            fmt.format(y),
            (x, y),
            textcoords="offset points",
            xytext=(dx, dy),
            ha="center",
            va="center",
            fontsize=fontsize,
        )


def _stats(vals):
    """(avg, min, max) of a list, NaN for an empty one."""
    if not vals:
        return np.nan, np.nan, np.nan
    arr = np.asarray(vals, dtype=np.float64)
    return float(np.mean(arr)), float(np.min(arr)), float(np.max(arr))


def _column_stats(columns: dict, headers: list, won: np.ndarray):
    """Per-turn (avg, min, max) lists over won games only."""
    avgs, mins, maxs = [], [], []
    for th in headers:
        col = columns.get(th, [])
        vals = [
            float(v)
            for v, w in zip(col[: len(won)], won)
            if w and v is not None
        ]
        a, lo, hi = _stats(vals)
        avgs.append(a)
        mins.append(lo)
        maxs.append(hi)
    return avgs, mins, maxs


def compute_run_stats(games: dict) -> dict:
    """
    Summarize one benchmark run.

    Only won games count towards times, rounds and per-turn values.

    Returns:
      dict with keys
        total_time (avg, min, max), rounds (avg, min, max),
        turn_time (avg list, min list, max list),
        candidates_left (avg list, min list, max list),
        rounds_hist (np.ndarray of rounds of won games), n_won, n_games
    """
    won = np.array(games.get("won", []), dtype=bool)
    total_time = np.array(games.get("total_time_s", []), dtype=np.float64)
    rounds = np.array(games.get("rounds", []), dtype=np.int64)

    # Guard against length mismatches
    n = min(len(won), len(total_time), len(rounds))
    won = won[:n]
    total_time = total_time[:n]
    rounds = rounds[:n]

    turn_headers = list(games.get("turn_headers", []))
    turn_headers.sort(key=_natural_turn_sort_key)

    return {
        "total_time": _stats(total_time[won].tolist()),
        "rounds": _stats(rounds[won].tolist()),
        "turn_time": _column_stats(
            games.get("turn_time_s_columns", {}) or {}, turn_headers, won
        ),
        "candidates_left": _column_stats(
            games.get("candidates_left_columns", {}) or {}, turn_headers, won
        ),
        "rounds_hist": rounds[won],
        "n_won": int(np.count_nonzero(won)),
        "n_games": int(n),
    }


def _plot_min_max(xs, stats, label, fmt):
    """Average line with min/max scatter, band and annotations."""
    avg, lo, hi = stats
    plt.plot(xs, avg, marker="o", markersize=3, label=f"Average {label}")
    plt.scatter(xs, hi, marker="^", s=20, label=f"Max {label}")
    plt.scatter(xs, lo, marker="v", s=20, label=f"Min {label}")
    plt.fill_between(xs, lo, hi, alpha=0.2, label="Min–Max range")
    _annotate_points(plt.gca(), xs, avg, fmt=fmt, dy=8)
    _annotate_points(plt.gca(), xs, lo, fmt=fmt, dy=-8)
    _annotate_points(plt.gca(), xs, hi, fmt=fmt, dy=16)


def plot_pegs(p: int, runs: dict, colors_list: list, outdir: Path) -> list:
    """
    Write all plots for one peg count.

    Returns:
        list[Path]: The files written.
    """
    written = []
    solvers = sorted({s for m in colors_list for s in runs[f"{p}x{m}"]})

    for solver in solvers:
        ms = [m for m in colors_list if solver in runs[f"{p}x{m}"]]
        stats = {m: compute_run_stats(runs[f"{p}x{m}"][solver].get("games", {})) for m in ms}
        wins = ", ".join(f"m={m}: {stats[m]['n_won']}/{stats[m]['n_games']}" for m in ms)

        # Plot 1: rounds per game vs colors
        plt.figure(figsize=(10, 6))
        _plot_min_max(ms, [[stats[m]["rounds"][i] for m in ms] for i in range(3)], "Rounds", "{:.2f}")
        plt.title(f"Rounds per Game for {p} pegs ({solver})\n Games won per color(m): {wins}")
        plt.xlabel("Number of Colors (m)")
        plt.ylabel("Rounds per Game [won games]")
        plt.xticks(ms)
        plt.grid(True)
        plt.legend()
        out = outdir / f"{p}pegs_rounds_{solver}.png"
        plt.savefig(out, dpi=200, bbox_inches="tight")
        plt.close()
        written.append(out)

        # Plot 2: total time vs colors
        plt.figure(figsize=(10, 6))
        _plot_min_max(ms, [[stats[m]["total_time"][i] for m in ms] for i in range(3)], "Total Time", "{:.2f}s")
        plt.title(f"Total Time for {p} pegs ({solver})\n Games won per color(m): {wins}")
        plt.xlabel("Number of Colors (m)")
        plt.ylabel("Total Time (s) [won games]")
        plt.xticks(ms)
        plt.grid(True)
        plt.legend()
        out = outdir / f"{p}pegs_total_time_{solver}.png"
        plt.savefig(out, dpi=200, bbox_inches="tight")
        plt.close()
        written.append(out)

        # Plot 3: histogram of rounds, one bar group per m
        plt.figure(figsize=(10, 6))
        all_rounds = [stats[m]["rounds_hist"] for m in ms if stats[m]["rounds_hist"].size]
        if all_rounds:
            top = int(max(r.max() for r in all_rounds))
            bins = np.arange(1, top + 2) - 0.5
            width = 0.8 / len(ms)
            for i, m in enumerate(ms):
                counts, _ = np.histogram(stats[m]["rounds_hist"], bins=bins)
                x = np.arange(1, top + 1) + (i - (len(ms) - 1) / 2) * width
                plt.bar(x, counts, width=width, label=f"m={m}")
            plt.xticks(np.arange(1, top + 1))
        plt.title(f"Rounds Distribution for {p} pegs ({solver})")
        plt.xlabel("Rounds needed")
        plt.ylabel("Games")
        plt.grid(True, axis="y")
        plt.legend(title="Number of Colors (m)")
        out = outdir / f"{p}pegs_rounds_hist_{solver}.png"
        plt.savefig(out, dpi=200, bbox_inches="tight")
        plt.close()
        written.append(out)

        # Plot 4 and 5: per-turn time and candidates left
        for key, ylabel, fmt, name, log in (
            ("turn_time", "Average Turn Time (s) [won games]", "{:.2f}s", "turn_time", False),
            ("candidates_left", "Candidates Left [won games]", "{:.0f}", "candidates_left", True),
        ):
            plt.figure(figsize=(12, 8))
            max_turns = 0
            for m in ms:
                y_avg, y_min, y_max = stats[m][key]
                if not y_avg:
                    continue
                x = np.arange(1, len(y_avg) + 1)
                max_turns = max(max_turns, len(y_avg))
                plt.plot(x, y_avg, marker="o", label=f"m={m} (wins={stats[m]['n_won']})")
                plt.scatter(x, y_min, marker="v", s=20)
                plt.scatter(x, y_max, marker="^", s=20)
                plt.fill_between(x, y_min, y_max, alpha=0.2)
                _annotate_points(plt.gca(), x, y_avg, fmt=fmt, dy=8)
            if log:
                plt.yscale("log")
            plt.title(f"{ylabel.split(' [')[0]} per Turn for {p} pegs ({solver})")
            plt.xlabel("Turn Number")
            plt.ylabel(ylabel)
            if max_turns:
                plt.xticks(np.arange(1, max_turns + 1))
            plt.legend(title="Number of Colors (m)")
            plt.grid(True)
            out = outdir / f"{p}pegs_{name}_{solver}.png"
            plt.savefig(out, dpi=200, bbox_inches="tight")
            plt.close()
            written.append(out)

    return written


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--file", default="benchmark.json", help="Path to benchmark JSON")
    ap.add_argument("--pegs", nargs="*", type=int, default=None,
                    help="Which peg counts to plot (e.g. --pegs 4 5). Default: all found.")
    ap.add_argument("--outdir", default="./results", help="Output directory for PNGs")
    args = ap.parse_args(argv)

    path = Path(args.file)
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    with path.open("r", encoding="utf-8") as f:
        runs = json.load(f).get("runs", {})

    # Discover available (pegs, colors)
    available = {}
    for k in runs.keys():
        parsed = _parse_run_key(k)
        if parsed is None:
            continue
        p, m = parsed
        available.setdefault(p, set()).add(m)

    if not available:
        raise ValueError("No runs found with keys like '4x6' in data['runs'].")

    peg_list = sorted(available.keys()) if args.pegs is None else args.pegs

    written = []
    for p in peg_list:
        if p not in available:
            print(f"[skip] No runs for {p} pegs.")
            continue
        written.extend(plot_pegs(p, runs, sorted(available[p]), outdir))

    for out in written:
        print(f"[saved] {out}")
    return written


if __name__ == "__main__":
    main()

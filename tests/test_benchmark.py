import json

import numpy as np

import main
from game.ruleset import DuplicatePolicy, GameConfiguration
from game.secret_code import Code
from plot import plot
from solver.minimax import STRICT

CFG = GameConfiguration(3, ("A", "B", "C"))


def test_play_one_game_wins():
    secret = Code(CFG, ["C", "A", "B"])
    result = main.play_one_game(CFG, secret, STRICT)
    assert result["won"] is True
    assert result["rounds"] == len(result["turn_times"])
    assert result["candidates_left"][-1] == 1


def test_run_benchmark_columns():
    games = main.run_benchmark(CFG, games=4, seed=1, progress=False)
    assert games["won"] == [True] * 4
    assert len(games["rounds"]) == 4
    assert len(games["turn_headers"]) == max(games["rounds"])
    for header in games["turn_headers"]:
        assert len(games["turn_time_s_columns"][header]) == 4
        assert len(games["candidates_left_columns"][header]) == 4
    # a game that ended early has no value for later turns
    first = games["turn_headers"][0]
    assert all(v is not None for v in games["turn_time_s_columns"][first])


def test_main_benchmark_writes_results(tmp_path):
    out = tmp_path / "bench.json"
    argv = ["--solver", "strict", "benchmark", "--pegs", "3", "--colors", "A B C D",
            "--duplicates", "none", "--games", "3", "--seed", "0", "--out", str(out)]
    assert main.main(argv) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    run = data["runs"]["3x4"]["strict"]
    assert run["policy"] == "none"
    assert len(run["games"]["won"]) == 3

    # a second run merges into the same file
    assert main.main(["benchmark", "--pegs", "3", "--colors", "A B C D", "--games", "1",
                      "--out", str(out)]) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert set(data["runs"]["3x4"]) == {"strict", "fast"}


def test_main_benchmark_rejects_large_configuration(tmp_path, capsys):
    out = tmp_path / "bench.json"
    assert main.main(["benchmark", "--pegs", "8", "--colors", "A B C D E F",
                      "--out", str(out)]) == 2
    assert "500,000" in capsys.readouterr().err
    assert not out.exists()


def test_compute_run_stats_uses_won_games_only():
    games = {
        "won": [True, True, False],
        "rounds": [3, 5, 10],
        "total_time_s": [1.0, 3.0, 100.0],
        "turn_headers": ["turn_2", "turn_1"],
        "turn_time_s_columns": {"turn_1": [0.5, 1.5, 9.0], "turn_2": [0.5, None, 9.0]},
        "candidates_left_columns": {"turn_1": [10, 20, 30], "turn_2": [1, None, 5]},
    }
    stats = plot.compute_run_stats(games)
    assert stats["n_won"] == 2 and stats["n_games"] == 3
    assert stats["rounds"] == (4.0, 3.0, 5.0)
    assert stats["total_time"] == (2.0, 1.0, 3.0)
    avg, lo, hi = stats["turn_time"]
    assert avg == [1.0, 0.5]
    assert stats["candidates_left"][0] == [15.0, 1.0]
    assert np.array_equal(stats["rounds_hist"], np.array([3, 5]))


def test_plot_main_writes_png_files(tmp_path):
    bench = tmp_path / "bench.json"
    for pegs, colors, policy in ((3, ("A", "B", "C"), None), (3, ("A", "B", "C", "D"), "none")):
        cfg = GameConfiguration(pegs, colors, DuplicatePolicy.parse(policy) if policy else DuplicatePolicy())
        main.save_benchmark(bench, cfg, "fast", main.run_benchmark(cfg, games=3, seed=2, progress=False))

    outdir = tmp_path / "results"
    written = plot.main(["--file", str(bench), "--outdir", str(outdir)])
    assert len(written) == 5
    for path in written:
        assert path.exists()

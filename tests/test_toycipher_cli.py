import random

import pytest

from cipherlab.sbox import differential_table, format_table, linear_table
from cipherlab.toycipher_cli import Experiment, main, run_experiment


def test_run_experiment_is_reproducible():
    first = run_experiment(16, 1, 5, random.Random(7))
    second = run_experiment(16, 1, 5, random.Random(7))
    assert first == second


def test_rank_proportions_sum_to_one():
    experiment = run_experiment(32, 1, 8, random.Random(3))
    assert len(experiment.rank_proportions) == 4
    assert sum(experiment.rank_proportions) == pytest.approx(1.0)


def test_bits_identified_is_cumulative():
    experiment = run_experiment(32, 2, 8, random.Random(11))
    shares = experiment.bits_identified
    assert len(shares) == 5
    assert shares[0] == pytest.approx(1.0)
    assert all(a >= b - 1e-9 for a, b in zip(shares, shares[1:]))


def test_experiment_records_parameters():
    experiment = run_experiment(8, 3, 4, random.Random(1))
    assert experiment.coef == 3
    assert experiment.n_keys == 4


def test_zero_keys_gives_zero_shares():
    experiment = run_experiment(8, 1, 0, random.Random(1))
    assert experiment.rank_proportions == (0.0, 0.0, 0.0, 0.0)
    assert experiment.bits_identified == (0.0, 0.0, 0.0, 0.0, 0.0)


def test_negative_keys_rejected():
    with pytest.raises(ValueError):
        run_experiment(8, 1, -1, random.Random(1))


def test_report_layout():
    experiment = Experiment(1, 1500, (0.5, 0.25, 0.25, 0.0), (1.0, 1.0, 0.5, 0.5, 0.25))
    lines = experiment.report().splitlines()
    assert lines[0] == "Proportion : (C = 1, Number Keys = 1500)"
    assert lines[1] == "\t100 - 75%    \t: 50.0%"
    assert lines[4] == "\t25 - 0%    \t: 0.0%"
    assert lines[5] == ""
    assert lines[6] == "\t4 Bits identify\t: 25.0%"
    assert lines[10] == "\t0 Bits identify\t: 100.0%"
    assert len(lines) == 11


def test_main_prints_report(capsys):
    assert main(["--keys", "3", "--q", "8", "--seed", "5"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Proportion : (C = 1, Number Keys = 3)\n")
    assert out == run_experiment(8, 1, 3, random.Random(5)).report()


def test_main_writes_tables(tmp_path, capsys):
    diff_path = tmp_path / "diff.txt"
    lin_path = tmp_path / "lin.txt"
    code = main(
        ["--differential", str(diff_path), "--linear", str(lin_path), "--skip-experiment"]
    )
    assert code == 0
    assert diff_path.read_text() == format_table(differential_table())
    assert lin_path.read_text() == format_table(linear_table())
    assert capsys.readouterr().out == ""


def test_main_rejects_negative_keys():
    with pytest.raises(SystemExit):
        main(["--keys", "-2"])
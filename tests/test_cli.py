import logging
from pathlib import Path

import pytest

from walksat_lab.cli.solve import build_config, format_result, main, parse_args
from walksat_lab.sat.cnf import CNF
from walksat_lab.sat.state import Assignment, SearchStats
from walksat_lab.sat.walksat import SolveResult, Status
from walksat_lab.util.logger import logger

TOY = Path(__file__).resolve().parents[1] / "data" / "toy"
REPO = Path(__file__).resolve().parents[1]


def _answer_lines(out):
    return [l for l in out.splitlines() if l.startswith(("s ", "v "))]


def test_format_result_sat_with_model():
    res = SolveResult(Status.SAT, Assignment.from_bools([True, False, True]), SearchStats())
    assert format_result(res) == ["s SATISFIABLE"]
    assert format_result(res, print_model=True, width=2) == ["s SATISFIABLE", "v 1 -2", "v 3 0"]


def test_format_result_unsat_has_no_model_lines():
    res = SolveResult(Status.UNSAT)
    assert format_result(res, print_model=True) == ["s UNSATISFIABLE"]


def test_cli_solves_mini(capsys):
    rc = main([str(TOY / "mini.cnf"), "--seed", "1", "--print-model"])
    out = capsys.readouterr().out
    assert rc == 0
    lines = _answer_lines(out)
    assert lines[0] == "s SATISFIABLE"
    lits = [int(x) for l in lines[1:] for x in l.split()[1:]]
    assert lits[-1] == 0
    model = [None] + [lit > 0 for lit in lits[:-1]]
    assert CNF.parse_dimacs(str(TOY / "mini.cnf")).is_model(model)


def test_cli_reports_unsatisfiable_after_budget(capsys):
    rc = main([str(TOY / "contradiction.cnf"), "--max-tries", "2", "--max-flips", "3", "--seed", "0"])
    out = capsys.readouterr().out
    assert rc == 0
    assert _answer_lines(out) == ["s UNSATISFIABLE"]
    assert "c tries=2 flips=6" in out


def test_cli_reads_yaml_config(tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("random_seed: 5\nls:\n  max_tries: 3\n  max_flips: 4\n  noise: 0.2\n")
    rc = main([str(TOY / "contradiction.cnf"), "--config", str(cfg)])
    out = capsys.readouterr().out
    assert rc == 0
    assert "c tries=3 flips=12" in out


def test_cli_flags_override_yaml(tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("ls:\n  max_tries: 3\n  max_flips: 4\n")
    main([str(TOY / "contradiction.cnf"), "--config", str(cfg), "--max-flips", "1"])
    assert "c tries=3 flips=3" in capsys.readouterr().out


def test_cli_default_config_file(capsys):
    rc = main([str(TOY / "mini.cnf"), "--config", str(REPO / "configs" / "default.yaml")])
    assert rc == 0
    assert "s SATISFIABLE" in capsys.readouterr().out


def test_cli_missing_file(tmp_path, capsys):
    rc = main([str(tmp_path / "missing.cnf")])
    captured = capsys.readouterr()
    assert rc == 1
    assert captured.err.startswith("[FATAL]")
    assert "s " not in captured.out


def test_cli_malformed_formula(tmp_path, capsys):
    bad = tmp_path / "bad.cnf"
    bad.write_text("p cnf 2 1\n1 7 0\n")
    assert main([str(bad)]) == 1
    assert "[FATAL]" in capsys.readouterr().err


def test_cli_bad_noise(capsys):
    assert main([str(TOY / "mini.cnf"), "--noise", "2"]) == 2
    assert "noise" in capsys.readouterr().err


def test_cli_debug_logging(caplog):
    try:
        with caplog.at_level(logging.DEBUG, logger="walksat_lab"):
            main([str(TOY / "contradiction.cnf"), "-v", "2", "--max-tries", "2", "--max-flips", "1"])
        assert "try 1/2 failed" in caplog.text
        assert "UNSATISFIABLE after 2 tries" in caplog.text
    finally:
        logger.setLevel(logging.NOTSET)


def test_cli_undecodable_file(tmp_path, capsys):
    bad = tmp_path / "latin.cnf"
    bad.write_bytes(b"p cnf 1 1\n\xff\xfe 0\n")
    assert main([str(bad)]) == 1
    assert capsys.readouterr().err.startswith("[FATAL]")


@pytest.mark.parametrize("ls", [{"seed": 3}, {"random_seed": 3}])
def test_seed_flag_beats_yaml_seed(ls):
    args = parse_args([str(TOY / "mini.cnf"), "--seed", "7"])
    assert build_config({"random_seed": 1, "ls": dict(ls)}, args).seed == 7


def test_yaml_seed_used_without_flag():
    args = parse_args([str(TOY / "mini.cnf")])
    assert build_config({"ls": {"seed": 3}}, args).seed == 3


def test_cli_non_integer_budget_in_yaml(tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("ls:\n  max_tries: [1, 2]\n")
    assert main([str(TOY / "mini.cnf"), "--config", str(cfg)]) == 2
    assert "[FATAL] bad configuration" in capsys.readouterr().err

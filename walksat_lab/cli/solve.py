from __future__ import annotations
import argparse
import sys
import yaml
from typing import Any, Dict, List, Optional

from ..sat.cnf import CNF, InputUnavailable, MalformedCNF
from ..sat.walksat import WalkSAT, WalkSATConfig, SolveResult, WALK_SAMPLING
from ..util.logger import logger, LOGGER_LEVEL


def load_config(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_config(cfg: Dict[str, Any], args: argparse.Namespace) -> WalkSATConfig:
    """YAML values first, then explicit command-line overrides."""
    ls = dict(cfg.get("ls") or {})
    if args.max_tries is not None:
        ls["max_tries"] = args.max_tries
    if args.max_flips is not None:
        ls["max_flips"] = args.max_flips
    if args.noise is not None:
        ls["noise"] = args.noise
    if args.walk_sampling is not None:
        ls["walk_sampling"] = args.walk_sampling
    if args.time_limit_s is not None:
        ls["time_limit_s"] = args.time_limit_s
    if args.seed is not None:
        # from_dict reads "ls" before top level, so the flag must land there
        ls.pop("seed", None)
        ls["random_seed"] = args.seed
    merged = dict(cfg)
    merged["ls"] = ls
    return WalkSATConfig.from_dict(merged)


def format_result(res: SolveResult, print_model: bool = False, width: int = 10) -> List[str]:
    """
    Competition-style answer lines: "s SATISFIABLE" / "s UNSATISFIABLE",
    followed by "v ..." model lines ending in 0 when asked for.
    """
    lines = [f"s {res.status}"]
    if print_model and res.assignment is not None:
        lits = res.assignment.to_dimacs() + [0]
        for i in range(0, len(lits), width):
            lines.append("v " + " ".join(str(l) for l in lits[i:i + width]))
    return lines


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description=(
            "Search for a model of a DIMACS CNF formula with WalkSAT.\n"
            "UNSATISFIABLE means no model was found within the try/flip budget.\n"
            "Example:\n"
            "  walksat-lab data/toy/mini.cnf --seed 7 --print-model\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("instance", help="Path to a .cnf instance (DIMACS 'p cnf').")
    ap.add_argument("--config", default=None, help="YAML config path (see configs/default.yaml)")
    ap.add_argument("--max-tries", type=int, default=None, help="Random restarts (default: 5)")
    ap.add_argument("--max-flips", type=int, default=None, help="Flips per try (default: 100)")
    ap.add_argument("--noise", type=float, default=None, help="Random-walk probability (default: 0.4)")
    ap.add_argument("--walk-sampling", choices=WALK_SAMPLING, default=None,
                    help="Random walk picks a literal position or a distinct variable (default: literal)")
    ap.add_argument("--seed", type=int, default=None, help="RNG seed")
    ap.add_argument("--time-limit-s", type=float, default=None, help="Wall-clock cap, checked between flips")
    ap.add_argument("--print-model", action="store_true", help="Print the model as 'v' lines on success")
    ap.add_argument("-v", "--verbosity", type=int, choices=sorted(LOGGER_LEVEL), default=0,
                    help="0 = quiet, 1 = info, 2 = debug (stderr)")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    ap_args = parse_args(argv)
    logger.setLevel(LOGGER_LEVEL[ap_args.verbosity])

    try:
        ws_cfg = build_config(load_config(ap_args.config), ap_args)
    except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
        print(f"[FATAL] bad configuration: {e}", file=sys.stderr)
        return 2

    try:
        inst = CNF.parse_dimacs(ap_args.instance)
    except (InputUnavailable, MalformedCNF) as e:
        print(f"[FATAL] {e}", file=sys.stderr)
        return 1
    logger.info("loaded %s: n=%d vars, m=%d clauses", ap_args.instance, inst.n_vars, inst.n_clauses)

    res = WalkSAT(inst, ws_cfg).solve()
    st = res.stats
    print(f"c tries={st.tries} flips={st.flips} elapsed_sec={st.elapsed_sec:.6f}"
          + (" timed_out" if st.timed_out else ""))
    for line in format_result(res, print_model=ap_args.print_model):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations
import os, csv, time, hashlib, json
from dataclasses import asdict
from typing import Dict, Any, List, Optional

from pysat.solvers import Solver

from ..sat import cnf as cnf_mod
from ..sat import walksat
from ..util.logger import logger


CSV_KEYS = ["instance", "seed", "status", "tries", "flips", "elapsed_sec",
            "flips_per_sec", "timed_out", "verified", "reference", "config_hash", "wall_sec"]


def _config_hash(cfg: walksat.WalkSATConfig) -> str:
    s = json.dumps(asdict(cfg), sort_keys=True, separators=(",", ":"))
    return hashlib.sha1(s.encode()).hexdigest()[:10]


def reference_status(ins: cnf_mod.CNF, solver_name: str = "g3") -> str:
    """
    Verdict of a complete solver from PySAT, used to tell a real
    UNSATISFIABLE apart from an exhausted WalkSAT budget.
    """
    with Solver(name=solver_name, bootstrap_with=[list(cl.lits) for cl in ins.clauses]) as s:
        return walksat.Status.SAT if s.solve() else walksat.Status.UNSAT


def solve_instance(path: str, cfg: walksat.WalkSATConfig, seed: int = 1, check: bool = False) -> Dict[str, Any]:
    ins = cnf_mod.CNF.parse_dimacs(path)
    logger.info("n = %d, m = %d for %s", ins.n_vars, ins.n_clauses, os.path.basename(path))

    # same budget for every instance, seeded per run
    local_cfg = walksat.WalkSATConfig(**{**asdict(cfg), "seed": seed})
    t0 = time.time()
    res = walksat.WalkSAT(ins, local_cfg).solve()
    row: Dict[str, Any] = {
        "instance": os.path.basename(path),
        "seed": seed,
        "status": res.status,
        "tries": res.stats.tries,
        "flips": res.stats.flips,
        "elapsed_sec": res.stats.elapsed_sec,
        "flips_per_sec": res.stats.flips_per_sec,
        "timed_out": res.stats.timed_out,
        "verified": (res.assignment is not None and ins.is_model(res.assignment)),
        "reference": reference_status(ins) if check else "",
        "config_hash": _config_hash(local_cfg),
    }
    row["wall_sec"] = time.time() - t0
    if check and row["reference"] == walksat.Status.SAT and not res.satisfiable:
        logger.info("%s is satisfiable but no model was found within budget", row["instance"])
    return row


def solve_folder(folder: str, cfg: walksat.WalkSATConfig, seed: int = 1, check: bool = False) -> List[Dict[str, Any]]:
    rows = []
    for name in sorted(os.listdir(folder)):
        if not name.endswith(".cnf"):
            continue
        path = os.path.join(folder, name)
        try:
            rows.append(solve_instance(path, cfg, seed=seed, check=check))
        except (cnf_mod.InputUnavailable, cnf_mod.MalformedCNF) as e:
            logger.warning("skipping %s: %s", name, e)
    return rows


def write_csv(rows: List[Dict[str, Any]], out_csv: str) -> None:
    if not rows:
        return
    os.makedirs(os.path.dirname(out_csv) or ".", exist_ok=True)
    with open(out_csv, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=CSV_KEYS)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k) for k in CSV_KEYS})


def summarize(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not rows:
        return None
    solved = sum(1 for r in rows if r["status"] == walksat.Status.SAT)
    return {
        "instances": len(rows),
        "solved": solved,
        "total_flips": sum(r["flips"] for r in rows),
        "wall_sec": sum(r["wall_sec"] for r in rows),
    }

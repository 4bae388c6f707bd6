from __future__ import annotations
import argparse, os, sys
import yaml
from typing import List, Optional

from ..bench.harness import solve_folder, summarize, write_csv
from ..sat.walksat import WalkSATConfig
from ..util.logger import logger, LOGGER_LEVEL
from .solve import load_config


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run WalkSAT on every .cnf file of a folder and write a CSV.")
    ap.add_argument("--folder", required=True, help="Folder containing .cnf files")
    ap.add_argument("--config", required=False, default=None, help="YAML config path")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--out", required=False, default="results.csv")
    ap.add_argument("--time_limit_s", type=float, default=None, help="Wall-time cap per instance (seconds)")
    ap.add_argument("--check", action="store_true", help="Also solve each instance with a complete PySAT solver")
    ap.add_argument("-v", "--verbosity", type=int, choices=sorted(LOGGER_LEVEL), default=0)
    args = ap.parse_args(argv)
    logger.setLevel(LOGGER_LEVEL[args.verbosity])

    try:
        cfg = load_config(args.config)
        if args.time_limit_s is not None:
            cfg["ls"] = dict(cfg.get("ls") or {})
            cfg["ls"]["time_limit_s"] = float(args.time_limit_s)
        ws_cfg = WalkSATConfig.from_dict(cfg)
    except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
        print(f"[FATAL] bad configuration: {e}", file=sys.stderr)
        return 2

    if not os.path.isdir(args.folder):
        print(f"[FATAL] folder not found: {args.folder}", file=sys.stderr)
        return 1

    rows = solve_folder(args.folder, ws_cfg, seed=args.seed, check=args.check)
    write_csv(rows, args.out)
    summary = summarize(rows)
    if summary is None:
        print(f"[OK] solve_batch: no .cnf files in {args.folder}")
    else:
        print(f"[OK] solve_batch: wrote {args.out} ({summary['instances']} rows, "
              f"{summary['solved']} solved, {summary['total_flips']} flips)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

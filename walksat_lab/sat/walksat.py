from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence
import logging
import random
import time

from .cnf import CNF
from .state import Assignment, SearchStats
from ..util.logger import logger


WALK_SAMPLING = ("literal", "variable")


class Status:
    """
    Verdict tokens, spelled the way SAT-competition tooling expects.

    UNSAT only means that no model was found within max_tries x max_flips;
    local search never proves unsatisfiability.
    """
    SAT = "SATISFIABLE"
    UNSAT = "UNSATISFIABLE"


@dataclass
class WalkSATConfig:
    max_tries: int = 5
    max_flips: int = 100
    noise: float = 0.4
    # "literal": random walk samples a literal position of the clause, so a
    # variable present with both signs is twice as likely.
    # "variable": random walk samples among distinct variables.
    walk_sampling: str = "literal"
    seed: Optional[int] = None
    time_limit_s: Optional[float] = None

    def __post_init__(self):
        for name in ("max_tries", "max_flips"):
            val = getattr(self, name)
            if isinstance(val, bool) or not isinstance(val, int):
                raise TypeError(f"{name} must be an int, got {val!r}")
        if isinstance(self.noise, bool) or not isinstance(self.noise, (int, float)):
            raise TypeError(f"noise must be a number, got {self.noise!r}")
        if self.time_limit_s is not None and (
                isinstance(self.time_limit_s, bool) or not isinstance(self.time_limit_s, (int, float))):
            raise TypeError(f"time_limit_s must be a number or None, got {self.time_limit_s!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise TypeError(f"seed must be an int or None, got {self.seed!r}")
        if self.max_tries < 0:
            raise ValueError(f"max_tries must be >= 0, got {self.max_tries}")
        if self.max_flips < 0:
            raise ValueError(f"max_flips must be >= 0, got {self.max_flips}")
        if not 0.0 <= self.noise <= 1.0:
            raise ValueError(f"noise must lie in [0, 1], got {self.noise}")
        if self.walk_sampling not in WALK_SAMPLING:
            raise ValueError(f"walk_sampling must be one of {WALK_SAMPLING}, got {self.walk_sampling!r}")
        if self.time_limit_s is not None and self.time_limit_s < 0:
            raise ValueError(f"time_limit_s must be >= 0, got {self.time_limit_s}")

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "WalkSATConfig":
        """
        Build from a loaded YAML mapping. Keys are looked up in the ``ls``
        section first, then at top level. ``flip_budget`` and ``restarts``
        are accepted as older spellings of ``max_flips`` and ``max_tries``.
        """
        cfg = cfg or {}
        ls = cfg.get("ls") or {}

        def pick(*keys, default=None):
            for src in (ls, cfg):
                for k in keys:
                    if src.get(k) is not None:
                        return src[k]
            return default

        time_limit = pick("time_limit_s")
        seed = pick("random_seed", "seed")
        return cls(
            max_tries=int(pick("max_tries", "restarts", default=5)),
            max_flips=int(pick("max_flips", "flip_budget", default=100)),
            noise=float(pick("noise", default=0.4)),
            walk_sampling=str(pick("walk_sampling", default="literal")),
            seed=None if seed is None else int(seed),
            time_limit_s=None if time_limit is None else float(time_limit),
        )


@dataclass
class SolveResult:
    status: str
    assignment: Optional[Assignment] = None
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def satisfiable(self) -> bool:
        return self.status == Status.SAT


def clause_satisfied(clause: Sequence[int], assign) -> bool:
    """True iff some literal of clause holds under assign. Pure."""
    for lit in clause:
        if (lit > 0 and assign[lit]) or (lit < 0 and not assign[-lit]):
            return True
    return False


def formula_satisfied(cnf: CNF, assign) -> bool:
    for cl in cnf.clauses:
        if not clause_satisfied(cl.lits, assign):
            return False
    return True


def pick_unsat_clause(cnf: CNF, assign, rng: random.Random) -> Optional[int]:
    """
    Index of a violated clause drawn uniformly among all violated ones,
    or None when assign is a model. No random draw happens in that case.
    """
    unsat = [i for i, cl in enumerate(cnf.clauses) if not clause_satisfied(cl.lits, assign)]
    if not unsat:
        return None
    return rng.choice(unsat)


def break_count(cnf: CNF, assign, var: int, exclude: Optional[int] = None) -> int:
    """
    Number of clauses, other than the one at index ``exclude``, that are
    satisfied now and would be violated once ``var`` is flipped.
    O(occ(var)): clauses without var cannot change.
    """
    brk = 0
    for ci in cnf.occ[var]:
        if ci == exclude:
            continue
        was_sat = False
        sat_after = False
        # simulate the flip literal by literal
        for lit in cnf.clauses[ci].lits:
            v = abs(lit)
            val = assign[v]
            if (lit > 0) == val:
                was_sat = True
            if v == var:
                val = not val
            if (lit > 0) == val:
                sat_after = True
                break
        if was_sat and not sat_after:
            brk += 1
    return brk


def pick_var_to_flip(
    cnf: CNF,
    assign,
    clause_idx: int,
    rng: random.Random,
    noise: float,
    walk_sampling: str = "literal",
) -> int:
    """
    Variable (never a signed literal) of clause ``clause_idx`` to flip next.

    With probability ``noise`` a random-walk move, otherwise the variable
    with the fewest breaks; ties go to the earliest literal in the clause.
    """
    clause = cnf.clauses[clause_idx]
    if rng.random() < noise:
        if walk_sampling == "variable":
            return rng.choice(clause.variables())
        return abs(rng.choice(clause.lits))

    best_v = None
    best_break = None
    seen = set()
    for lit in clause.lits:
        v = abs(lit)
        if v in seen:
            continue
        br = break_count(cnf, assign, v, exclude=clause_idx)
        seen.add(v)
        if best_break is None or br < best_break:
            best_v, best_break = v, br
            if br == 0:
                # 0 is minimal; ties keep the earlier variable
                break
    return best_v


class WalkSAT:
    """
    WalkSAT with random restarts.

    Each try starts from a fresh uniform assignment and performs at most
    ``max_flips`` flips; the run stops at the first model found.
    """
    def __init__(self, cnf: CNF, cfg: Optional[WalkSATConfig] = None, rng: Optional[random.Random] = None):
        self.cnf = cnf
        self.cfg = cfg or WalkSATConfig()

        self.rng = rng or random.Random(self.cfg.seed)

    def _finish(self, status: str, assign: Optional[Assignment], stats: SearchStats, start_t: float) -> SolveResult:
        stats.elapsed_sec = max(1e-9, time.time() - start_t)
        logger.info(
            "%s after %d tries, %d flips (%.3fs%s)",
            status, stats.tries, stats.flips, stats.elapsed_sec,
            ", time limit hit" if stats.timed_out else "",
        )
        return SolveResult(status=status, assignment=assign, stats=stats)

    def solve(self) -> SolveResult:
        cnf, cfg, rng = self.cnf, self.cfg, self.rng
        stats = SearchStats()
        assign = Assignment(cnf.n_vars)

        start_t = time.time()
        deadline = None if cfg.time_limit_s is None else start_t + cfg.time_limit_s

        for t in range(cfg.max_tries):
            assign.randomize(rng)
            stats.tries += 1
            for _k in range(cfg.max_flips):
                if deadline is not None and time.time() >= deadline:
                    stats.timed_out = True
                    return self._finish(Status.UNSAT, None, stats, start_t)

                if formula_satisfied(cnf, assign):
                    return self._finish(Status.SAT, assign.copy(), stats, start_t)
                target = pick_unsat_clause(cnf, assign, rng)
                if target is None:
                    return self._finish(Status.SAT, assign.copy(), stats, start_t)

                v = pick_var_to_flip(cnf, assign, target, rng, cfg.noise, cfg.walk_sampling)
                assign.flip(v)
                stats.flips += 1

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("try %d/%d failed, %d clauses unsatisfied", t + 1, cfg.max_tries, cnf.count_unsat(assign))

        return self._finish(Status.UNSAT, None, stats, start_t)


def solve(cnf: CNF, cfg: Optional[WalkSATConfig] = None, rng: Optional[random.Random] = None) -> SolveResult:
    return WalkSAT(cnf, cfg, rng).solve()

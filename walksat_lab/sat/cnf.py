from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple


class MalformedCNF(ValueError):
    """Structural problem in a formula (empty clause, literal out of range)."""


class InputUnavailable(Exception):
    """The DIMACS source could not be read or parsed."""


@dataclass(frozen=True)
class Clause:
    lits: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.lits)

    def __iter__(self):
        return iter(self.lits)

    def variables(self) -> List[int]:
        """Distinct variables in first-occurrence order."""
        seen = []
        for lit in self.lits:
            v = abs(lit)
            if v not in seen:
                seen.append(v)
        return seen


class CNF:
    """
    Plain DIMACS CNF formula.

    - clauses keep their input order; index i is the identity of a clause
    - occ[v] lists the distinct clause indices where v appears (either sign)

    Raises MalformedCNF on a negative variable count, an empty clause, a
    literal 0 or a literal outside [1, n_vars].
    """
    def __init__(self, n_vars: int, clauses: List[Clause]):
        if n_vars < 0:
            raise MalformedCNF(f"Negative variable count: {n_vars}")
        for i, cl in enumerate(clauses):
            if not cl.lits:
                raise MalformedCNF(f"Clause {i} is empty")
            for lit in cl.lits:
                if lit == 0:
                    raise MalformedCNF(f"Clause {i} contains literal 0")
                if abs(lit) > n_vars:
                    raise MalformedCNF(
                        f"Clause {i} literal {lit} outside variable range [1, {n_vars}]"
                    )
        self.n_vars = n_vars
        self.clauses = clauses
        # Occurrence lists (1-indexed by variable id)
        self.occ: List[List[int]] = [[] for _ in range(n_vars + 1)]
        for cid, cl in enumerate(clauses):
            for v in cl.variables():
                self.occ[v].append(cid)

    @property
    def n_clauses(self) -> int:
        return len(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    def __repr__(self) -> str:
        return f"CNF(n_vars={self.n_vars}, n_clauses={self.n_clauses})"

    @staticmethod
    def from_clauses(n_vars: int, clauses: Iterable[Sequence[int]]) -> "CNF":
        return CNF(n_vars, [Clause(tuple(int(x) for x in raw)) for raw in clauses])

    @staticmethod
    def parse_dimacs(path: str) -> "CNF":
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputUnavailable(f"Cannot read {path}: {e}") from e
        return CNF.from_dimacs_string(text)

    @staticmethod
    def from_dimacs_string(text: str) -> "CNF":
        n_vars: Optional[int] = None
        n_clauses: Optional[int] = None
        clauses: List[List[int]] = []
        cur: List[int] = []

        for raw in text.splitlines():
            line = raw.strip()
            if not line or line.startswith("c"):
                continue
            if line.startswith("%"):
                # SATLIB end marker
                break
            if line.startswith("p"):
                # p cnf <n_vars> <n_clauses>
                if n_vars is not None:
                    raise InputUnavailable(f"Duplicate problem line: {line}")
                toks = line.split()
                if len(toks) != 4 or toks[1].lower() != "cnf":
                    raise InputUnavailable(f"Bad problem line: {line}")
                try:
                    n_vars = int(toks[2])
                    n_clauses = int(toks[3])
                except ValueError:
                    raise InputUnavailable(f"Bad problem line: {line}") from None
                if n_vars < 0 or n_clauses < 0:
                    raise InputUnavailable(f"Bad problem line: {line}")
                continue

            if n_vars is None:
                raise InputUnavailable("Clause read before 'p cnf' header")
            # Clause tokens; a clause may span several lines
            for tok in line.split():
                try:
                    lit = int(tok)
                except ValueError:
                    raise InputUnavailable(f"Bad literal {tok!r} in line: {line}") from None
                if lit == 0:
                    clauses.append(cur)
                    cur = []
                else:
                    cur.append(lit)

        if cur:
            # last clause without terminating 0
            clauses.append(cur)
        if n_vars is None or n_clauses is None:
            raise InputUnavailable("Missing 'p cnf' header")
        if len(clauses) != n_clauses:
            raise InputUnavailable(
                f"Header announces {n_clauses} clauses, found {len(clauses)}"
            )
        return CNF.from_clauses(n_vars, clauses)

    def to_dimacs(self) -> str:
        lines = [f"p cnf {self.n_vars} {self.n_clauses}"]
        for cl in self.clauses:
            lines.append(" ".join(str(l) for l in cl.lits) + " 0")
        return "\n".join(lines) + "\n"

    # ---------- Scoring helpers ----------

    def count_unsat(self, assign) -> int:
        """Number of clauses violated by assign (1-based, index 0 unused)."""
        unsat = 0
        for cl in self.clauses:
            satisfied = False
            for lit in cl.lits:
                v = abs(lit)
                if (lit > 0 and assign[v]) or (lit < 0 and not assign[v]):
                    satisfied = True
                    break
            if not satisfied:
                unsat += 1
        return unsat

    def is_model(self, assign) -> bool:
        return self.count_unsat(assign) == 0

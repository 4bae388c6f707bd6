from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List
import random


class Assignment:
    """
    Truth assignment for variables 1..n_vars.

    Stored as a 1-based list of bools, index 0 unused, so that
    ``assign[v]`` reads like the DIMACS variable id.
    """
    def __init__(self, n_vars: int):
        self.n_vars = n_vars
        self.values: List[bool] = [False] * (n_vars + 1)

    @classmethod
    def from_bools(cls, bits: Iterable[bool]) -> "Assignment":
        """Build from a 0-based sequence (bits[0] is variable 1)."""
        vals = [bool(b) for b in bits]
        a = cls(len(vals))
        a.values[1:] = vals
        return a

    @classmethod
    def from_dict(cls, mapping: Dict[int, bool]) -> "Assignment":
        n = max(mapping) if mapping else 0
        a = cls(n)
        for v, val in mapping.items():
            if v < 1:
                raise IndexError(f"Variable {v} out of range")
            a.values[v] = bool(val)
        return a

    def __len__(self) -> int:
        return self.n_vars

    def __getitem__(self, v: int) -> bool:
        return self.values[v]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Assignment):
            return NotImplemented
        return self.values[1:] == other.values[1:]

    def __repr__(self) -> str:
        bits = "".join("1" if b else "0" for b in self.values[1:])
        return f"Assignment({bits})"

    def value(self, v: int) -> bool:
        return self.values[v]

    def lit_true(self, lit: int) -> bool:
        val = self.values[abs(lit)]
        return val if lit > 0 else (not val)

    def randomize(self, rng: random.Random) -> None:
        """Draw every variable independently and uniformly."""
        for v in range(1, self.n_vars + 1):
            self.values[v] = bool(rng.getrandbits(1))

    def flip(self, v: int) -> None:
        if v < 1 or v > self.n_vars:
            raise IndexError(f"Variable {v} outside [1, {self.n_vars}]")
        self.values[v] = not self.values[v]

    def copy(self) -> "Assignment":
        a = Assignment(self.n_vars)
        a.values = self.values.copy()
        return a

    def to_dimacs(self) -> List[int]:
        """Model as signed literals, e.g. [1, -2, 3]."""
        return [v if self.values[v] else -v for v in range(1, self.n_vars + 1)]

    def to_bitstring(self) -> str:
        return "".join("1" if b else "0" for b in self.values[1:])


@dataclass
class SearchStats:
    tries: int = 0         # tries started
    flips: int = 0         # flips applied over all tries
    elapsed_sec: float = 0.0
    timed_out: bool = False

    @property
    def flips_per_sec(self) -> float:
        return self.flips / max(1e-9, self.elapsed_sec)

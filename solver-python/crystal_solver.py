#!/usr/bin/env python3
"""
Crimson Cipher crystal box solver using bitmask dynamic programming.

The box is an L x C grid. Some cells hold a crystal with a brightness value
and up to four connections (right, up, left, down) to the neighboring
crystals. The solver picks a subset of crystals, one row configuration at a
time, maximizing total brightness while never selecting two crystals that
are connected to each other:

1. A row configuration is a bitmask over the columns (bit j = column j used)
2. Inside a row, column j and column (j + 1) mod C cannot both be used when
   column j is connected to its right neighbor (rows wrap around)
3. Between row r and row r - 1, a column cannot be used in both when the
   crystal in row r is connected upwards (row 0 is compared with row L - 1)
4. The table memo[row][conf][anchor] keeps the best partial sum, where the
   anchor is the configuration fixed for the last row in this branch

Usage: python crystal_solver.py < input.txt
"""

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

# =============================================================================
# DOMAIN DEFINITIONS
# =============================================================================

# Brightness stored for cells without a crystal
NO_CRYSTAL = -1

# Value of an infeasible memo entry. Infeasibility is ordinary data here:
# most configurations are expected to be infeasible somewhere in the search.
INFEASIBLE = -1

# Connection bits, in the order the records list them
RIGHT = 0b0001
UP = 0b0010
LEFT = 0b0100
DOWN = 0b1000

# Extra frames on top of the row count when the recursion limit is raised
RECURSION_HEADROOM = 200

# Largest memo table a box may allocate (about 1.1 GB at 17 bytes per entry)
MAX_TABLE_ENTRIES = 1 << 26

# Totals are int64; brightness is bounded so that a full box cannot overflow
INT64_MAX = int(np.iinfo(np.int64).max)


class SolverError(Exception):
    """Base class for errors raised by the crystal solver."""


class InvalidInput(SolverError):
    """The problem description is malformed or out of range."""


def table_entries(rows: int, cols: int) -> int:
    """Number of memo entries needed for a rows x cols box (rows * 4^cols)."""
    return rows * (1 << cols) * (1 << cols)


def solve_work(rows: int, cols: int) -> int:
    """Candidate checks done by a full solve: each memo entry scans 2^cols configurations."""
    return table_entries(rows, cols) * (1 << cols)


def max_brightness(rows: int, cols: int) -> int:
    """Largest brightness for which the sum over every cell still fits in int64."""
    return INT64_MAX // (rows * cols)


def check_brightness(brightness: int, rows: int, cols: int, where: str = "Crystal") -> None:
    if brightness < 0:
        raise InvalidInput(f"{where}: brightness must not be negative, got {brightness}")
    limit = max_brightness(rows, cols)
    if brightness > limit:
        raise InvalidInput(f"{where}: brightness {brightness} is too large for a {rows}x{cols} box (max {limit})")


@contextmanager
def _recursion_headroom(depth: int) -> Iterator[None]:
    # The recurrence goes one frame deeper per row
    previous = sys.getrecursionlimit()
    needed = depth * 2 + RECURSION_HEADROOM
    if needed > previous:
        sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


# =============================================================================
# DATA MODEL
# =============================================================================

@dataclass(frozen=True)
class Crystal:
    brightness: int = NO_CRYSTAL
    connections: int = 0

    @property
    def present(self) -> bool:
        return self.brightness != NO_CRYSTAL

    def connected(self, direction: int) -> bool:
        return bool(self.connections & direction)


@dataclass(frozen=True)
class CrystalRecord:
    """One crystal line of the input: 1-based position, brightness and flags."""
    row: int
    col: int
    brightness: int
    right: bool = False
    up: bool = False
    left: bool = False
    down: bool = False

    def to_line(self) -> str:
        flags = (self.right, self.up, self.left, self.down)
        return ' '.join(str(v) for v in (self.row, self.col, self.brightness) + tuple(int(f) for f in flags))


@dataclass
class Problem:
    rows: int
    cols: int
    crystals: List[CrystalRecord] = field(default_factory=list)

    def build(self) -> 'CrystalBox':
        """Create a box and place every crystal of the problem on it."""
        box = CrystalBox(self.rows, self.cols)
        for c in self.crystals:
            box.place_crystal(c.row, c.col, c.brightness, c.right, c.up, c.left, c.down)
        return box

    def to_text(self) -> str:
        lines = [f"{self.rows} {self.cols} {len(self.crystals)}"]
        lines.extend(c.to_line() for c in self.crystals)
        return '\n'.join(lines) + '\n'


@dataclass(frozen=True)
class MemoEntry:
    computed: bool = False
    value: int = INFEASIBLE
    source_config: int = 0


@dataclass
class Solution:
    crystal_count: int
    total_brightness: int
    used_cells: List[Tuple[int, int]]  # 1-based (row, col), reconstruction order
    anchor_config: Optional[int] = None
    stats: dict = field(default=None, compare=False)

    @property
    def feasible(self) -> bool:
        return self.total_brightness != INFEASIBLE


@dataclass
class _RowTables:
    """Per-row bitmasks and per-configuration vectors derived from the grid."""
    configs: np.ndarray      # [0, 2^C)
    consistent: np.ndarray   # rows x 2^C, bool
    row_values: np.ndarray   # rows x 2^C, summed brightness
    up_masks: List[int]      # columns whose crystal connects upwards, per row


# =============================================================================
# SOLVER
# =============================================================================

class CrystalBox:
    """
    A crystal box and its dynamic programming memo table.

    Both are created together; crystals are placed before solve() is called
    and the memo table is only written while solving.
    """

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise InvalidInput(f"Box dimensions must be positive, got {rows}x{cols}")
        if table_entries(rows, cols) > MAX_TABLE_ENTRIES:
            raise InvalidInput(
                f"A {rows}x{cols} box needs {table_entries(rows, cols)} memo entries "
                f"(limit {MAX_TABLE_ENTRIES}); reduce the number of columns"
            )

        self.rows = rows
        self.cols = cols
        self.num_configs = 1 << cols

        self.brightness = np.full((rows, cols), NO_CRYSTAL, dtype=np.int64)
        self.connections = np.zeros((rows, cols), dtype=np.int64)

        # Memo arena indexed [row][conf][anchor]
        shape = (rows, self.num_configs, self.num_configs)
        self._computed = np.zeros(shape, dtype=bool)
        self._value = np.full(shape, INFEASIBLE, dtype=np.int64)
        self._source = np.zeros(shape, dtype=np.int64)

        self._tables: Optional[_RowTables] = None
        self._solution: Optional[Solution] = None

    # -------------------------------------------------------------------------
    # Grid
    # -------------------------------------------------------------------------

    def place_crystal(self, row: int, col: int, brightness: int,
                      right=False, up=False, left=False, down=False) -> None:
        """
        Place a crystal at (row, col), 1-based. Overwrites any previous crystal.

        The four flags tell whether the crystal is connected to its right,
        upper, left and lower neighbor respectively.
        """
        if self._tables is not None:
            raise SolverError("Crystals cannot be placed after solving")
        if not (1 <= row <= self.rows and 1 <= col <= self.cols):
            raise InvalidInput(f"Crystal position ({row}, {col}) is outside the {self.rows}x{self.cols} box")
        check_brightness(brightness, self.rows, self.cols, f"Crystal ({row}, {col})")

        connections = 0
        for flag, bit in ((right, RIGHT), (up, UP), (left, LEFT), (down, DOWN)):
            if flag:
                connections |= bit

        self.brightness[row - 1, col - 1] = brightness
        self.connections[row - 1, col - 1] = connections

    def cell(self, row: int, col: int) -> Crystal:
        """Crystal at 0-based (row, col)."""
        return Crystal(int(self.brightness[row, col]), int(self.connections[row, col]))

    @property
    def table_entries(self) -> int:
        return table_entries(self.rows, self.cols)

    # -------------------------------------------------------------------------
    # Row configuration validator
    # -------------------------------------------------------------------------

    def is_internally_consistent(self, row: int, conf: int) -> bool:
        """
        Check that `conf` breaks no restriction inside row `row`.

        Every selected column needs a crystal, and a selected column cannot be
        right-connected to a selected column j + 1 (column C - 1 wraps to 0).
        """
        for j in range(self.cols):
            if not (conf >> j) & 1:
                continue
            crystal = self.cell(row, j)
            if not crystal.present:
                return False
            if (conf >> ((j + 1) % self.cols)) & 1 and crystal.connected(RIGHT):
                return False
        return True

    def are_compatible(self, row: int, lower_conf: int, upper_conf: int) -> bool:
        """
        Check `lower_conf` for row `row` against `upper_conf` for the row above.

        Only the up connections of row `row` are consulted.
        """
        for j in range(self.cols):
            if (lower_conf >> j) & 1 and (upper_conf >> j) & 1 and self.cell(row, j).connected(UP):
                return False
        return True

    def _build_tables(self) -> _RowTables:
        configs = np.arange(self.num_configs, dtype=np.int64)
        weights = np.int64(1) << np.arange(self.cols, dtype=np.int64)
        present = self.brightness != NO_CRYSTAL

        missing = np.where(present, 0, weights).sum(axis=1)
        right = np.where(self.connections & RIGHT, weights, 0).sum(axis=1)
        up = np.where(self.connections & UP, weights, 0).sum(axis=1)

        # Bit j of `shifted` is bit (j + 1) mod C of the configuration
        shifted = (configs >> 1) | ((configs & 1) << (self.cols - 1))
        consistent = ((configs[None, :] & missing[:, None]) == 0) & \
                     (((configs & shifted)[None, :] & right[:, None]) == 0)

        bits = (configs[:, None] >> np.arange(self.cols, dtype=np.int64)) & 1
        row_values = (bits @ np.where(present, self.brightness, 0).T).T

        return _RowTables(
            configs=configs,
            consistent=consistent,
            row_values=row_values,
            up_masks=[int(m) for m in up],
        )

    def _ensure_tables(self) -> _RowTables:
        if self._tables is None:
            self._tables = self._build_tables()
        return self._tables

    # -------------------------------------------------------------------------
    # DP engine
    # -------------------------------------------------------------------------

    def memo_entry(self, row: int, conf: int, anchor: int) -> MemoEntry:
        return MemoEntry(
            computed=bool(self._computed[row, conf, anchor]),
            value=int(self._value[row, conf, anchor]),
            source_config=int(self._source[row, conf, anchor]),
        )

    def evaluate(self, row: int, conf: int, anchor: int) -> MemoEntry:
        """
        Best brightness sum from row `row` down to row 0, given `conf` for this
        row and `anchor` for the last row of the box.

        Returns the memo entry, whose `source_config` is the configuration chosen
        for row - 1 (or the anchor itself for row 0).
        """
        with _recursion_headroom(self.rows):
            self._evaluate(row, conf, anchor)
        return self.memo_entry(row, conf, anchor)

    def _store(self, row: int, conf: int, anchor: int, value: int, source: int) -> int:
        self._computed[row, conf, anchor] = True
        self._value[row, conf, anchor] = value
        self._source[row, conf, anchor] = source
        return value

    def _evaluate(self, row: int, conf: int, anchor: int) -> int:
        if self._computed[row, conf, anchor]:
            return int(self._value[row, conf, anchor])

        tables = self._ensure_tables()

        if not tables.consistent[row, conf]:
            return self._store(row, conf, anchor, INFEASIBLE, 0)

        row_value = int(tables.row_values[row, conf])

        # Base case: row 0 closes the cycle against the anchor row
        if row == 0:
            if conf & anchor & tables.up_masks[0]:
                return self._store(row, conf, anchor, INFEASIBLE, 0)
            return self._store(row, conf, anchor, row_value, anchor)

        blocked = conf & tables.up_masks[row]
        candidates = np.flatnonzero((tables.configs & blocked) == 0)

        # Only entries not yet in the memo need a recursive call
        pending = candidates[~self._computed[row - 1, candidates, anchor]]
        for poss in pending:
            self._evaluate(row - 1, int(poss), anchor)

        below = self._value[row - 1, candidates, anchor]
        feasible = below != INFEASIBLE
        if not feasible.any():
            return self._store(row, conf, anchor, INFEASIBLE, 0)

        # Candidates are ascending and argmax returns the first maximum
        totals = np.where(feasible, below + row_value, INFEASIBLE)
        best = int(np.argmax(totals))
        return self._store(row, conf, anchor, int(totals[best]), int(candidates[best]))

    def solve(self) -> Solution:
        """
        Solve the box. Must be called after every crystal has been placed.

        Calling it again reuses the memo table and returns an equal solution.
        """
        start = time.time()

        best_value, best_anchor = INFEASIBLE, None
        with _recursion_headroom(self.rows):
            for anchor in range(self.num_configs):
                value = self._evaluate(self.rows - 1, anchor, anchor)
                if value > best_value:
                    best_value, best_anchor = value, anchor

        cells = self._reconstruct(best_anchor) if best_anchor is not None else []

        self._solution = Solution(
            crystal_count=len(cells),
            total_brightness=best_value,
            used_cells=cells,
            anchor_config=best_anchor,
            stats={
                'time_seconds': round(time.time() - start, 6),
                'states_computed': int(self._computed.sum()),
                'configurations': self.num_configs,
            },
        )
        return self._solution

    # -------------------------------------------------------------------------
    # Reconstructor
    # -------------------------------------------------------------------------

    def _reconstruct(self, anchor: int) -> List[Tuple[int, int]]:
        """Walk the memo table from the winning anchor, last row first."""
        cells = []
        conf = anchor
        for row in range(self.rows - 1, -1, -1):
            for col in range(self.cols - 1, -1, -1):
                if (conf >> col) & 1:
                    cells.append((row + 1, col + 1))
            conf = int(self._source[row, conf, anchor])
        return cells

    def solution_values(self) -> Tuple[int, int]:
        """Number of crystals used and the sum of their brightness."""
        solution = self._require_solution()
        return solution.crystal_count, solution.total_brightness

    def solution_cells(self) -> List[Tuple[int, int]]:
        return list(self._require_solution().used_cells)

    def _require_solution(self) -> Solution:
        if self._solution is None:
            raise SolverError("solve() has not been called")
        return self._solution


# =============================================================================
# INPUT / OUTPUT
# =============================================================================

def _to_ints(tokens: Sequence[str]) -> List[int]:
    values = []
    for position, token in enumerate(tokens, start=1):
        try:
            values.append(int(token))
        except ValueError:
            raise InvalidInput(f"Token {position} is not an integer: {token!r}") from None
    return values


def parse_problem(text: str) -> Problem:
    """
    Parse `L C N` followed by N records `x y v d c e b`.

    Tokens are whitespace separated; anything after the last record is ignored.
    """
    tokens = text.split()
    if len(tokens) < 3:
        raise InvalidInput("Expected 'L C N' at the start of the input")

    rows, cols, count = _to_ints(tokens[:3])
    if rows < 1 or cols < 1:
        raise InvalidInput(f"Box dimensions must be positive, got {rows}x{cols}")
    if count < 0:
        raise InvalidInput(f"Crystal count must not be negative, got {count}")

    needed = 3 + 7 * count
    if len(tokens) < needed:
        raise InvalidInput(f"Expected {count} crystal records, input ends after {(len(tokens) - 3) // 7}")

    values = _to_ints(tokens[3:needed])
    problem = Problem(rows=rows, cols=cols)
    for i in range(count):
        x, y, v, d, c, e, b = values[7 * i:7 * i + 7]
        if not (1 <= x <= rows and 1 <= y <= cols):
            raise InvalidInput(f"Crystal {i + 1}: position ({x}, {y}) is outside the {rows}x{cols} box")
        check_brightness(v, rows, cols, f"Crystal {i + 1}")
        if any(flag not in (0, 1) for flag in (d, c, e, b)):
            raise InvalidInput(f"Crystal {i + 1}: connection flags must be 0 or 1, got {d} {c} {e} {b}")
        problem.crystals.append(CrystalRecord(x, y, v, d == 1, c == 1, e == 1, b == 1))

    return problem


def read_problem(text: str) -> CrystalBox:
    """Parse the problem text and return a populated box."""
    return parse_problem(text).build()


def format_solution(solution: Solution) -> str:
    lines = [f"{solution.crystal_count} {solution.total_brightness}"]
    lines.extend(f"{row} {col}" for row, col in solution.used_cells)
    return '\n'.join(lines)


def solution_to_dict(solution: Solution) -> Dict:
    return {
        "crystal_count": solution.crystal_count,
        "total_brightness": solution.total_brightness,
        "cells": [{"row": row, "col": col} for row, col in solution.used_cells],
        "stats": solution.stats,
    }


# =============================================================================
# CLI INTERFACE
# =============================================================================

HELP_TEXT = """
Crimson Cipher Solver - bitmask dynamic programming

Usage: python crystal_solver.py < input.txt

Input (whitespace separated integers):
    L C N               rows, columns and number of crystals
    x y v d c e b       N times: row, column (1-based), brightness, then
                        1/0 flags for right, up, left and down connections

Output:
    count total         crystals used and their total brightness
    row col             one line per crystal used
"""


def main(argv: Optional[List[str]] = None) -> int:
    """Read the problem from stdin, solve, write the answer to stdout."""
    args = sys.argv[1:] if argv is None else argv

    if args and args[0] in ('--help', '-h'):
        print(HELP_TEXT)
        return 0
    if args:
        print(f"Unknown argument: {args[0]} (see --help)", file=sys.stderr)
        return 2

    try:
        box = read_problem(sys.stdin.read())
    except InvalidInput as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1

    solution = box.solve()
    print(format_solution(solution))
    return 0


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
Independent OR-Tools CP-SAT model of the crystal box.

Used to check the dynamic programming solver on random boxes: both must
agree on the optimal total brightness (the chosen cells may differ when
several optimal selections exist).
"""

import sys
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ortools.sat.python import cp_model

from crystal_solver import NO_CRYSTAL, RIGHT, UP, CrystalBox, read_problem


@dataclass
class CpSatResult:
    success: bool
    optimal: bool
    score: int
    cells: List[Tuple[int, int]]  # 1-based (row, col), row-major
    stats: dict = None


def build_model(box: CrystalBox) -> Tuple[cp_model.CpModel, Dict[Tuple[int, int], cp_model.IntVar]]:
    """
    One Boolean per crystal; a pair of connected crystals cannot both be used.

    Right connections wrap from the last column to the first one, and up
    connections of row 0 point at the last row, as in the DP.
    """
    model = cp_model.CpModel()

    used = {}
    for r in range(box.rows):
        for c in range(box.cols):
            if box.brightness[r, c] != NO_CRYSTAL:
                used[(r, c)] = model.NewBoolVar(f'crystal_{r + 1}_{c + 1}')

    for (r, c), var in used.items():
        connections = int(box.connections[r, c])
        neighbors = []
        if connections & RIGHT:
            neighbors.append((r, (c + 1) % box.cols))
        if connections & UP:
            neighbors.append(((r - 1) % box.rows, c))

        for pos in neighbors:
            other = used.get(pos)
            if other is None:
                continue
            if pos == (r, c):
                # 1-wide or 1-high box: the crystal is connected to itself
                model.Add(var == 0)
            else:
                model.AddBoolOr([var.Not(), other.Not()])

    model.Maximize(sum(int(box.brightness[r, c]) * var for (r, c), var in used.items()))
    return model, used


def solve_with_cpsat(box: CrystalBox, max_time_seconds: float = 10.0) -> CpSatResult:
    model, used = build_model(box)
    if not used:
        return CpSatResult(success=True, optimal=True, score=0, cells=[], stats={'status': 'EMPTY'})

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = max_time_seconds
    solver.parameters.num_workers = 1
    status = solver.Solve(model)

    stats = {
        'status': solver.StatusName(status),
        'time_seconds': solver.WallTime(),
        'branches': solver.NumBranches(),
        'conflicts': solver.NumConflicts(),
    }

    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        return CpSatResult(success=False, optimal=False, score=0, cells=[], stats=stats)

    cells = sorted((r + 1, c + 1) for (r, c), var in used.items() if solver.Value(var))
    score = sum(int(box.brightness[r - 1, c - 1]) for r, c in cells)

    return CpSatResult(
        success=True,
        optimal=(status == cp_model.OPTIMAL),
        score=score,
        cells=cells,
        stats=stats,
    )


def main():
    """Read a problem from stdin and print the CP-SAT answer in the CLI format."""
    box = read_problem(sys.stdin.read())
    result = solve_with_cpsat(box)
    if not result.success:
        print(f"CP-SAT failed: {result.stats['status']}", file=sys.stderr)
        return 1
    print(f"{len(result.cells)} {result.score}")
    for row, col in result.cells:
        print(f"{row} {col}")
    return 0


if __name__ == '__main__':
    sys.exit(main())

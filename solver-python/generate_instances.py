#!/usr/bin/env python3
"""
Generate random crystal boxes in the solver's input format.
Optionally checks the DP answer of each box against the CP-SAT model.

Usage:
  python generate_instances.py --count 50 --rows 4 --cols 4 --output instances --verify
"""

import argparse
import random
import sys
import time
from pathlib import Path
from crystal_solver import CrystalRecord, Problem
from cpsat_check import solve_with_cpsat


def random_problem(rows, cols, density=0.6, max_brightness=20, connection_rate=0.3, rng=None):
    """Generate one random box: each cell holds a crystal with probability `density`."""
    rng = rng or random.Random()
    problem = Problem(rows=rows, cols=cols)

    for row in range(1, rows + 1):
        for col in range(1, cols + 1):
            if rng.random() >= density:
                continue
            problem.crystals.append(CrystalRecord(
                row, col, rng.randint(0, max_brightness),
                right=rng.random() < connection_rate,
                up=rng.random() < connection_rate,
                left=rng.random() < connection_rate,
                down=rng.random() < connection_rate,
            ))

    # Records are read in any order
    rng.shuffle(problem.crystals)
    return problem


def verify_problem(problem, max_time=10.0):
    """Solve with both engines. Returns (dp_score, cpsat_score, cpsat_optimal)."""
    dp = problem.build().solve()
    cp = solve_with_cpsat(problem.build(), max_time_seconds=max_time)
    return dp.total_brightness, cp.score, cp.optimal


def main():
    parser = argparse.ArgumentParser(description='Generate random crystal boxes for the Crimson Cipher solver')
    parser.add_argument('--count', type=int, default=20, help='Number of boxes to generate')
    parser.add_argument('--rows', type=int, default=4, help='Rows per box')
    parser.add_argument('--cols', type=int, default=4, help='Columns per box')
    parser.add_argument('--density', type=float, default=0.6, help='Probability that a cell holds a crystal')
    parser.add_argument('--max-brightness', type=int, default=20, help='Largest brightness value')
    parser.add_argument('--connection-rate', type=float, default=0.3, help='Probability of each connection flag')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--output', type=str, default='instances', help='Output directory')
    parser.add_argument('--verify', action='store_true', help='Compare DP and CP-SAT answers')
    parser.add_argument('--max-time', type=float, default=10.0, help='CP-SAT time limit per box (with --verify)')
    args = parser.parse_args()

    rng = random.Random(args.seed)
    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating {args.count} boxes of {args.rows}x{args.cols} into {out_dir}/")
    print()

    mismatches = 0
    total_time = 0.0

    for i in range(args.count):
        problem = random_problem(args.rows, args.cols, args.density, args.max_brightness,
                                 args.connection_rate, rng)
        path = out_dir / f"instance_{i:03d}.txt"
        path.write_text(problem.to_text())

        print(f"[{i+1}/{args.count}] {path.name}: {len(problem.crystals)} crystals", end='', flush=True)

        if args.verify:
            start = time.time()
            dp_score, cp_score, optimal = verify_problem(problem, args.max_time)
            total_time += time.time() - start
            if not optimal:
                print(f" ... CP-SAT not optimal (dp={dp_score}, cpsat={cp_score})")
            elif dp_score != cp_score:
                mismatches += 1
                print(f" ... MISMATCH dp={dp_score} cpsat={cp_score}")
            else:
                print(f" ... OK (score={dp_score})")
        else:
            print()

    print()
    print(f"Done! Wrote {args.count} boxes to {out_dir}")
    if args.verify:
        print(f"Total verify time: {total_time:.1f}s, mismatches: {mismatches}")
    return 1 if mismatches else 0


if __name__ == '__main__':
    sys.exit(main())

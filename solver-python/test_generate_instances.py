"""Tests for the random box generator."""

import random

from crystal_solver import parse_problem
import generate_instances


def test_random_problem_is_reproducible():
    a = generate_instances.random_problem(3, 4, rng=random.Random(5))
    b = generate_instances.random_problem(3, 4, rng=random.Random(5))
    assert a == b


def test_random_problem_density_bounds():
    full = generate_instances.random_problem(3, 3, density=1.0, rng=random.Random(1))
    empty = generate_instances.random_problem(3, 3, density=0.0, rng=random.Random(1))
    assert len(full.crystals) == 9
    assert empty.crystals == []
    assert len({(c.row, c.col) for c in full.crystals}) == 9


def test_main_writes_and_verifies(tmp_path, monkeypatch, capsys):
    out_dir = tmp_path / "boxes"
    monkeypatch.setattr('sys.argv', [
        'generate_instances.py', '--count', '3', '--rows', '3', '--cols', '3',
        '--seed', '42', '--output', str(out_dir), '--verify',
    ])
    assert generate_instances.main() == 0

    files = sorted(out_dir.glob('instance_*.txt'))
    assert [f.name for f in files] == ['instance_000.txt', 'instance_001.txt', 'instance_002.txt']
    for f in files:
        problem = parse_problem(f.read_text())
        assert (problem.rows, problem.cols) == (3, 3)

    output = capsys.readouterr().out
    assert 'mismatches: 0' in output

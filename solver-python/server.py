#!/usr/bin/env python3
"""
Flask API server for the Crimson Cipher solver.

Run with: python server.py
Then POST a box to: http://localhost:5000/solve
Production: gunicorn -c ../deploy/gunicorn.conf.py server:app
"""

import os
import threading
import time
from flask import Flask, request, jsonify
from flask_cors import CORS
from crystal_solver import (
    CrystalRecord,
    InvalidInput,
    Problem,
    check_brightness,
    parse_problem,
    solution_to_dict,
    solve_work,
    table_entries,
)

# =============================================================================
# Configuration
# =============================================================================

MAX_TABLE_ENTRIES = int(os.environ.get('MAX_TABLE_ENTRIES', 4_000_000))
# Limit on rows * 8^cols candidate checks; 16x7 and 4x7 boxes fit, 4x8 does not
MAX_SOLVE_WORK = int(os.environ.get('MAX_SOLVE_WORK', 1 << 25))
PORT = int(os.environ.get('PORT', 5000))

app = Flask(__name__)

allowed_origins = os.environ.get('ALLOWED_ORIGINS', '*')
if allowed_origins != '*':
    allowed_origins = [o.strip() for o in allowed_origins.split(',')]
CORS(app, origins=allowed_origins)

# One solve at a time
solve_lock = threading.Lock()


class TableTooLarge(Exception):
    pass


def _flag(value, name: str, index: int) -> bool:
    if value in (True, False, 0, 1):
        return bool(value)
    raise InvalidInput(f"Crystal {index}: '{name}' must be a boolean or 0/1, got {value!r}")


def _int_field(data: dict, name: str, where: str) -> int:
    if name not in data:
        raise InvalidInput(f"{where}: missing required field '{name}'")
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{where}: '{name}' must be an integer, got {value!r}")
    return value


def problem_from_payload(data: dict) -> Problem:
    """
    Build a Problem from a request body.

    Accepts either {"input": "<text in the CLI format>"} or
    {"rows", "cols", "crystals": [{"row", "col", "brightness", "right", "up", "left", "down"}]}.
    """
    if 'input' in data:
        if not isinstance(data['input'], str):
            raise InvalidInput("'input' must be a string")
        return parse_problem(data['input'])

    rows = _int_field(data, 'rows', 'Box')
    cols = _int_field(data, 'cols', 'Box')
    if rows < 1 or cols < 1:
        raise InvalidInput(f"Box dimensions must be positive, got {rows}x{cols}")

    crystals = data.get('crystals', [])
    if not isinstance(crystals, list):
        raise InvalidInput("'crystals' must be a list")

    problem = Problem(rows=rows, cols=cols)
    for i, item in enumerate(crystals, start=1):
        if not isinstance(item, dict):
            raise InvalidInput(f"Crystal {i}: expected an object")
        where = f"Crystal {i}"
        row = _int_field(item, 'row', where)
        col = _int_field(item, 'col', where)
        brightness = _int_field(item, 'brightness', where)
        if not (1 <= row <= rows and 1 <= col <= cols):
            raise InvalidInput(f"{where}: position ({row}, {col}) is outside the {rows}x{cols} box")
        check_brightness(brightness, rows, cols, where)
        problem.crystals.append(CrystalRecord(
            row, col, brightness,
            right=_flag(item.get('right', False), 'right', i),
            up=_flag(item.get('up', False), 'up', i),
            left=_flag(item.get('left', False), 'left', i),
            down=_flag(item.get('down', False), 'down', i),
        ))
    return problem


def check_size(problem: Problem):
    entries = table_entries(problem.rows, problem.cols)
    if entries > MAX_TABLE_ENTRIES:
        raise TableTooLarge(
            f"A {problem.rows}x{problem.cols} box needs {entries} memo entries "
            f"(limit {MAX_TABLE_ENTRIES}); reduce the number of columns"
        )
    work = solve_work(problem.rows, problem.cols)
    if work > MAX_SOLVE_WORK:
        raise TableTooLarge(
            f"A {problem.rows}x{problem.cols} box needs {work} candidate checks "
            f"(limit {MAX_SOLVE_WORK}); reduce the number of rows or columns"
        )


@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


@app.route('/solve', methods=['POST'])
def solve():
    """
    Solve a crystal box.

    Request JSON:
    {
        "rows": 2,
        "cols": 2,
        "crystals": [
            {"row": 1, "col": 1, "brightness": 5, "right": true, "up": false, "left": false, "down": false}
        ]
    }
    or {"input": "2 2 1\\n1 1 5 1 0 0 0\\n"}
    """
    try:
        data = request.get_json(silent=True)

        if not data or not isinstance(data, dict):
            return jsonify({"success": False, "error": "No JSON body provided"}), 400

        problem = problem_from_payload(data)
        check_size(problem)

        print(f"Solving: rows={problem.rows}, cols={problem.cols}, crystals={len(problem.crystals)}", flush=True)

        with solve_lock:
            start = time.time()
            solution = problem.build().solve()
            elapsed = time.time() - start

        output = {"success": True}
        output.update(solution_to_dict(solution))

        print(f"Result: crystals={solution.crystal_count}, brightness={solution.total_brightness}, "
              f"time={elapsed:.3f}s", flush=True)

        return jsonify(output)

    except InvalidInput as e:
        return jsonify({"success": False, "error": f"Invalid input: {e}"}), 400
    except TableTooLarge as e:
        return jsonify({"success": False, "error": str(e)}), 413
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        return jsonify({"success": False, "error": str(e)}), 500


if __name__ == '__main__':
    print(f"Starting Crimson Cipher API on http://localhost:{PORT}")
    print("Endpoints:")
    print("  GET  /health - Health check")
    print("  POST /solve  - Solve a crystal box")
    app.run(host='0.0.0.0', port=PORT, debug=True)

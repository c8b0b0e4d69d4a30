# tests/utils.py
"""
Small, reusable helpers used across the apcluster test suite.

Functions:
- naive_similarity(X): cell-by-cell similarity with the min-diagonal rule.
- naive_responsibility(S, A): literal double loop over the responsibility formula.
- naive_availability(R): literal double loop over the availability formula.
- naive_damp(new, old, damping): per-cell damping with int() truncation.
- time_block(label, meta=None): context manager that prints wall-clock time.

The naive versions work on nested lists so they share no code with the
vectorized implementations they check.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, List

Grid = List[List[int]]


def naive_similarity(X: Grid) -> Grid:
    n = len(X)
    S = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            d = sum((a - b) ** 2 for a, b in zip(X[i], X[j]))
            S[i][j] -= d
            S[j][i] -= d
    m = min(min(row) for row in S)
    for i in range(n):
        S[i][i] = m
    return S


def naive_responsibility(S: Grid, A: Grid) -> Grid:
    n = len(S)
    R = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            competitors = [S[i][k] + A[i][k] for k in range(n) if k != j]
            R[i][j] = S[i][j] - (max(competitors) if competitors else 0)
    return R


def naive_availability(R: Grid) -> Grid:
    n = len(R)
    A = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            if i == j:
                A[i][i] = sum(max(0, R[k][i]) for k in range(n) if k != i)
            else:
                total = R[j][j] + sum(max(0, R[k][j]) for k in range(n) if k not in (i, j))
                A[i][j] = min(0, total)
    return A


def naive_damp(new: Grid, old: Grid, damping: float = 0.5) -> Grid:
    return [
        [int(a * damping) + int(b * (1 - damping)) for a, b in zip(row_new, row_old)]
        for row_new, row_old in zip(new, old)
    ]


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Output
    ------
    [timing] fit {"n":40,"d":3} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        meta_str = " " + json.dumps(meta, separators=(",", ":")) if meta else ""
        print(f"[timing] {label}{meta_str} {dt:.3f}s")

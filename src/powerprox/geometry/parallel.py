"""
Map-then-fold over an index range, sequential or across a small thread pool.

Workers pull indices from a shared counter, so uneven per-item cost still spreads
evenly. `sequential_fold` is the reference result for any commutative, associative
`combine`.
"""

from __future__ import annotations

import math
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

T = TypeVar("T")
A = TypeVar("A")


def sequential_fold(
    count: int,
    func: Callable[[int], T],
    combine: Callable[[A, T], A],
    initial: A,
) -> A:
    acc = initial
    for idx in range(count):
        acc = combine(acc, func(idx))
    return acc


class _IndexCounter:
    """Thread-safe monotonically increasing index source."""

    def __init__(self) -> None:
        self._next = 0
        self._lock = threading.Lock()

    def take(self) -> int:
        with self._lock:
            idx = self._next
            self._next += 1
            return idx


def parallel_fold(
    count: int,
    func: Callable[[int], T],
    combine: Callable[[A, T], A],
    initial: A,
    *,
    workers: int,
    merge: Callable[[A, A], A] | None = None,
) -> A:
    """Fold `func(i)` for i in range(count) using `workers` threads.

    Each worker folds its own partial starting from `initial`; partials are then
    merged with `merge` (defaults to `combine`, which fits `min`/`max`/`+`).
    """
    if int(workers) < 1:
        raise ValueError("workers must be >= 1")
    if workers == 1 or count <= 1:
        return sequential_fold(count, func, combine, initial)

    merge_fn = merge if merge is not None else combine  # type: ignore[assignment]
    counter = _IndexCounter()

    def work() -> A:
        acc = initial
        while True:
            idx = counter.take()
            if idx >= count:
                return acc
            acc = combine(acc, func(idx))

    n_workers = min(int(workers), count)
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = [executor.submit(work) for _ in range(n_workers)]
        partials = [f.result() for f in futures]

    out = initial
    for partial in partials:
        out = merge_fn(out, partial)
    return out


def parallel_min(count: int, func: Callable[[int], float], *, workers: int) -> float:
    """Minimum of `func(i)` over range(count); `inf` for an empty range."""
    return parallel_fold(count, func, min, math.inf, workers=workers)

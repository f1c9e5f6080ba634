"""
Bounded producer/worker fan-out shared by model loading and similarity queries.

The calling thread is the single producer: it enumerates ``items`` into a
bounded task queue, so a slow pool applies backpressure to the source instead
of buffering it. A fixed number of workers, run on a ThreadPoolExecutor, pull
one item at a time and hand it to ``handle``.

fan_out() returns only after every worker has finished every item it took
from the queue. If ``handle`` raises, the first exception is kept, the
producer stops enumerating, the workers drain what is already queued without
handling it, and the exception is re-raised once the barrier is reached.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

T = TypeVar("T")

_STOP = object()


def fan_out(
    items: Iterable[T],
    handle: Callable[[T], None],
    num_workers: int,
    queue_size: int | None = None,
) -> int:
    """
    Run ``handle`` over ``items`` on ``num_workers`` threads.

    Args:
        items: Work items, enumerated lazily by the calling thread
        handle: Called once per item from a worker thread
        num_workers: Number of worker threads
        queue_size: Bound on queued, not yet started items (default num_workers)

    Returns:
        Number of items dispatched to the workers
    """
    if num_workers < 1:
        raise ValueError(f"num_workers must be >= 1, got {num_workers}")

    tasks: queue.Queue = queue.Queue(maxsize=queue_size or num_workers)
    abort = threading.Event()
    errors: list[Exception] = []
    errors_lock = threading.Lock()

    def worker() -> None:
        while True:
            item = tasks.get()
            if item is _STOP:
                return
            if abort.is_set():
                # Drain only; the result is going to be discarded.
                continue
            try:
                handle(item)
            except Exception as exc:
                with errors_lock:
                    errors.append(exc)
                abort.set()

    dispatched = 0
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = [executor.submit(worker) for _ in range(num_workers)]
        try:
            for item in items:
                if abort.is_set():
                    break
                tasks.put(item)
                dispatched += 1
        finally:
            for _ in range(num_workers):
                tasks.put(_STOP)
        for future in futures:
            future.result()

    if errors:
        raise errors[0]
    return dispatched


__all__ = ["fan_out"]

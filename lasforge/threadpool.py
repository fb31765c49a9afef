"""A fixed-size pool of worker threads fed from a bounded task queue."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable


class ThreadPool:
    """Runs callables on worker threads.

    Once the queue holds ``queue_size`` waiting tasks, ``add`` blocks until a
    worker takes one.  A negative ``queue_size`` means no limit.
    """

    def __init__(self, num_threads: int, queue_size: int = -1, verbose: bool = False) -> None:
        if queue_size == 0:
            raise ValueError("queue_size must not be zero")
        self._queue_size = queue_size
        self._num_threads = max(num_threads, 1)
        self._verbose = verbose

        self._lock = threading.Lock()
        self._produce = threading.Condition(self._lock)
        self._consume = threading.Condition(self._lock)

        self._tasks: deque[Callable[[], object]] = deque()
        self._threads: list[threading.Thread] = []
        self._errors: list[str] = []
        self._outstanding = 0
        self._running = False
        self._trap = False
        self._catchall = "Unknown error."

        self.go()

    def go(self) -> None:
        """Start the worker threads; does nothing if already running."""
        with self._lock:
            if self._running:
                return
            self._running = True
            for _ in range(self._num_threads):
                t = threading.Thread(target=self._work, daemon=True)
                self._threads.append(t)
                t.start()

    def join(self) -> None:
        """Refuse new tasks, let queued tasks finish and stop the workers."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._consume.notify_all()
        for t in self._threads:
            t.join()
        self._threads.clear()

    def stop(self) -> None:
        """Join and discard any tasks still queued."""
        self.join()
        with self._lock:
            self._tasks.clear()

    def wait_idle(self) -> None:
        """Block until no task is queued or running; tasks may still be added."""
        with self._lock:
            self._produce.wait_for(lambda: not self._outstanding and not self._tasks)

    def cycle(self) -> None:
        """Join and restart."""
        self.join()
        self.go()

    def resize(self, num_threads: int) -> None:
        """Join, change the number of workers and restart."""
        self.join()
        self._num_threads = max(num_threads, 1)
        self.go()

    def has_errors(self) -> bool:
        with self._lock:
            return bool(self._errors)

    def clear_errors(self) -> list[str]:
        """Return the trapped error messages and forget them."""
        with self._lock:
            errors, self._errors = self._errors, []
            return errors

    def add(self, task: Callable[[], object]) -> bool:
        """Queue ``task``; returns False if the pool is not running."""
        with self._lock:
            if not self._running:
                return False
            self._produce.wait_for(
                lambda: self._queue_size < 0 or len(self._tasks) < self._queue_size
            )
            self._tasks.append(task)
            self._consume.notify_all()
            return True

    def num_threads(self) -> int:
        return self._num_threads

    def trap(self, trap_exceptions: bool, catchall: str = "Unknown error") -> None:
        """Turn exception trapping on or off and clear recorded errors.

        With trapping on, an exception in a task is recorded as its message;
        an exception that is not an ``Exception`` is recorded as ``catchall``.
        """
        with self._lock:
            self._trap = trap_exceptions
            self._catchall = catchall
            self._errors.clear()

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, *args: object) -> None:
        self.join()

    def _work(self) -> None:
        while True:
            with self._lock:
                self._consume.wait_for(lambda: bool(self._tasks) or not self._running)
                if not self._tasks:
                    return
                self._outstanding += 1
                task = self._tasks.popleft()
                trap, catchall = self._trap, self._catchall
                # add() may be waiting for room in the queue.
                self._produce.notify_all()

            err = ""
            try:
                if trap:
                    try:
                        task()
                    except Exception as exc:
                        err = str(exc)
                    except BaseException:
                        err = catchall
                else:
                    task()
            finally:
                with self._lock:
                    self._outstanding -= 1
                    if err:
                        if self._verbose:
                            print(f"Exception in pool task: {err}", flush=True)
                        self._errors.append(err)
                    self._produce.notify_all()
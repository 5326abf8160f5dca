"""Search workers parked on a condition variable, and the pool that owns them."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterator, Optional, Sequence

VALUE_INFINITE = 32001
VALUE_NONE = 32002

SearchFn = Callable[["Worker"], None]


class Worker:
    """A thread that sleeps until told to search, then runs ``search(self)``."""

    def __init__(self, idx: int, search: SearchFn) -> None:
        self.idx = idx
        self.pool: Optional["ThreadPool"] = None
        self._search = search
        self._cv = threading.Condition()
        self._searching = True
        self._exit = False
        self._error: Optional[BaseException] = None

        self.nodes = 0
        self.tb_hits = 0
        self.best_move_changes = 0
        self.nmp_min_ply = 0
        self.sel_depth = 0
        self.pv_idx = 0
        self.pv_last = 0
        self.root_depth = 0
        self.completed_depth = 0
        self.root_moves: list[Any] = []

        # Bookkeeping used by the main worker only
        self.calls_cnt = 0
        self.best_previous_score = VALUE_INFINITE
        self.previous_time_reduction = 1.0
        self.iter_value = [0, 0, 0, 0]
        self.stop_on_ponderhit = False
        self.ponder = False

        self._thread: Optional[threading.Thread] = threading.Thread(
            target=self._idle_loop, name=f"search-{idx}", daemon=True
        )
        self._thread.start()
        self.wait_for_search_finished()

    @property
    def searching(self) -> bool:
        with self._cv:
            return self._searching

    def _idle_loop(self) -> None:
        while True:
            with self._cv:
                self._searching = False
                self._cv.notify_all()
                self._cv.wait_for(lambda: self._searching)
                if self._exit:
                    return
            try:
                self._search(self)
            except Exception as exc:  # reported to whoever waits for the search
                self._error = exc

    def start_searching(self) -> None:
        """Wake the thread so that it starts a search."""
        with self._cv:
            self._searching = True
            self._cv.notify_all()

    def wait_for_search_finished(self) -> None:
        """Block until the thread has finished searching.

        An exception raised by the search is raised again here.
        """
        with self._cv:
            self._cv.wait_for(lambda: not self._searching)
            error, self._error = self._error, None
        if error is not None:
            raise error

    def close(self) -> None:
        """Stop the idle thread and wait for it to end."""
        if self._thread is None:
            return
        with self._cv:
            if self._searching:
                raise RuntimeError(f"worker {self.idx} is still searching")
            self._exit = True
            self._searching = True
            self._cv.notify_all()
        self._thread.join()
        self._thread = None

    def __enter__(self) -> "Worker":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def pick_best(workers: Sequence[Worker], tb_win: int, tb_loss: int) -> Worker:
    """Choose the worker whose best move wins a vote weighted by score and depth.

    Among mate or tablebase scores the highest score wins outright.
    """
    if not workers:
        raise ValueError("no workers to choose from")

    best = workers[0]
    votes: dict[Any, int] = {}
    min_score = min([VALUE_NONE] + [w.root_moves[0].score for w in workers])

    for worker in workers:
        move = worker.root_moves[0]
        votes[move.pv[0]] = votes.get(move.pv[0], 0) + (
            move.score - min_score + 14
        ) * int(worker.completed_depth)

        best_move = best.root_moves[0]
        if abs(best_move.score) >= tb_win:
            # Pick the shortest mate / TB conversion or stave off mate the longest
            if move.score > best_move.score:
                best = worker
        elif move.score >= tb_win or (
            move.score > tb_loss
            and votes[move.pv[0]] > votes.get(best_move.pv[0], 0)
        ):
            best = worker

    return best


class ThreadPool:
    """Owns the search workers; the first one is the main worker."""

    def __init__(self, search: SearchFn) -> None:
        self._search = search
        self.workers: list[Worker] = []
        self.stop = False
        self.increase_depth = True

    def set(self, requested: int) -> None:
        """Recreate the workers so that exactly ``requested`` of them exist."""
        if requested < 0:
            raise ValueError(f"cannot create {requested} threads")
        if self.workers:
            self.main().wait_for_search_finished()
            while self.workers:
                worker = self.workers.pop()
                worker.wait_for_search_finished()
                worker.close()
        for idx in range(requested):
            worker = Worker(idx, self._search)
            worker.pool = self
            self.workers.append(worker)
        if self.workers:
            self._clear()

    def _clear(self) -> None:
        main = self.main()
        main.calls_cnt = 0
        main.best_previous_score = VALUE_INFINITE
        main.previous_time_reduction = 1.0

    def main(self) -> Worker:
        """Return the main worker."""
        if not self.workers:
            raise RuntimeError("the thread pool is empty")
        return self.workers[0]

    def nodes_searched(self) -> int:
        return sum(worker.nodes for worker in self.workers)

    def tb_hits(self) -> int:
        return sum(worker.tb_hits for worker in self.workers)

    def get_best_thread(self, tb_win: int, tb_loss: int) -> Worker:
        return pick_best(self.workers, tb_win, tb_loss)

    def start_searching(self) -> None:
        """Start every worker except the main one."""
        for worker in self.workers[1:]:
            worker.start_searching()

    def wait_for_search_finished(self) -> None:
        """Wait for every worker except the main one."""
        for worker in self.workers[1:]:
            worker.wait_for_search_finished()

    def close(self) -> None:
        """Stop and join every worker."""
        self.set(0)

    def __iter__(self) -> Iterator[Worker]:
        return iter(self.workers)

    def __len__(self) -> int:
        return len(self.workers)

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
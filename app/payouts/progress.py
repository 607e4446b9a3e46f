from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional


@dataclass(frozen=True)
class ProgressSnapshot:
    total: int
    done: int = 0
    succeeded: int = 0
    failed: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.done

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "done": self.done,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


ProgressObserver = Callable[[ProgressSnapshot], None]


class BatchProgress:
    """
    Counters for one batch.

    Only the dispatcher calls record_*; everyone else reads snapshot().
    Each update swaps in a new frozen snapshot, so a reader on another
    thread always sees succeeded + failed == done <= total.
    """

    def __init__(self, total: int, observer: Optional[ProgressObserver] = None):
        if total < 0:
            raise ValueError("total must be >= 0")
        self._state = ProgressSnapshot(total=int(total))
        self._observer = observer

    @property
    def total(self) -> int:
        return self._state.total

    def snapshot(self) -> ProgressSnapshot:
        return self._state

    def record_success(self) -> None:
        s = self._check_room()
        self._publish(replace(s, done=s.done + 1, succeeded=s.succeeded + 1))

    def record_failure(self) -> None:
        s = self._check_room()
        self._publish(replace(s, done=s.done + 1, failed=s.failed + 1))

    def _check_room(self) -> ProgressSnapshot:
        s = self._state
        if s.done >= s.total:
            raise RuntimeError("batch progress overflow: done would exceed total")
        return s

    def _publish(self, s: ProgressSnapshot) -> None:
        self._state = s
        if self._observer is not None:
            self._observer(s)

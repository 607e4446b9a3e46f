from __future__ import annotations

import logging
from collections import OrderedDict
from threading import Lock
from typing import Optional

from app.payouts.dispatcher import PayoutBatch
from app.payouts.state_machine import TERMINAL_STATES
from settings import settings

logger = logging.getLogger("hrdesk.payouts")


class BatchRegistry:
    """
    In-process index of payout batches so HTTP callers can poll progress.

    Only the most recent `keep_finished` completed/cancelled batches are
    kept; older finished ones are dropped on the next add. Batches that are
    still IDLE or RUNNING are never dropped.
    """

    def __init__(self, keep_finished: int = 20) -> None:
        self._lock = Lock()
        self._batches: OrderedDict[str, PayoutBatch] = OrderedDict()
        self.keep_finished = keep_finished

    def add(self, batch: PayoutBatch) -> PayoutBatch:
        with self._lock:
            self._batches[batch.batch_id] = batch
            self._prune()
        return batch

    def get(self, batch_id: str) -> Optional[PayoutBatch]:
        with self._lock:
            return self._batches.get(batch_id)

    def clear(self) -> None:
        with self._lock:
            self._batches.clear()

    def _prune(self) -> None:
        finished = [bid for bid, b in self._batches.items() if b.state in TERMINAL_STATES]
        excess = len(finished) - self.keep_finished
        for bid in finished[:max(excess, 0)]:
            del self._batches[bid]
            logger.info("payout batch evicted batch_id=%s", bid)


registry = BatchRegistry(keep_finished=settings.PAYOUT_KEEP_FINISHED_BATCHES)

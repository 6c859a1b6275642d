# Path: core/fetch/lane.py
# Purpose: Provide the dedicated background lane that runs post-fetch and decode work.
# Layer: core/fetch.
# Details: One worker thread; hand-offs run one at a time in submission order.

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DecodeLane:
    """Single-threaded FIFO executor shared by every fetch of one pipeline."""

    def __init__(self, name: str = "image-rendering") -> None:
        self.name = name
        self._worker_ident: Optional[int] = None
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=name, initializer=self._record_worker
        )
        self._closed = False

    def _record_worker(self) -> None:
        self._worker_ident = threading.get_ident()

    def submit(self, work: Callable[..., T], *args) -> "Future[T]":
        """Queue ``work`` on the lane. Raises RuntimeError once the lane is shut down."""

        return self._executor.submit(work, *args)

    def on_lane(self) -> bool:
        """Return True when called from the lane's worker thread."""

        return self._worker_ident is not None and threading.get_ident() == self._worker_ident

    @property
    def closed(self) -> bool:
        return self._closed

    def shutdown(self, wait: bool = True) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Shutting down decode lane %s", self.name)
        self._executor.shutdown(wait=wait)

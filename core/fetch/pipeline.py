# Path: core/fetch/pipeline.py
# Purpose: Fetch image payloads asynchronously through isolated store snapshots.
# Layer: core/fetch.
# Details: Store reads run on the snapshot's own context; results are re-delivered on the shared decode lane.

from __future__ import annotations

import logging
from concurrent.futures import Future
from functools import partial
from typing import Callable, Optional, TypeVar

from core.errors import DecodeFailed, ImageManagerError, ImageNotFound, PayloadMissing, UnableToReadImage
from core.models.domain import FetchRequest, FetchVariant, ImageID
from core.store.base import ImageStore, StoreSnapshot

from .lane import DecodeLane

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchPipeline:
    """Serve concurrent fetches against one store.

    Each fetch opens its own snapshot, so concurrent requests never share store
    state. Once the snapshot has produced bytes or an error, the outcome moves
    to the decode lane, where the optional transform runs and the returned
    future is completed exactly once. Fetches cannot be cancelled.
    """

    def __init__(self, store: ImageStore, lane: Optional[DecodeLane] = None, lane_name: str = "image-rendering") -> None:
        self._store = store
        self._owns_lane = lane is None
        self.lane = lane or DecodeLane(lane_name)

    def fetch(self, image_id: ImageID, variant: FetchVariant = FetchVariant.FULL) -> "Future[bytes]":
        """Return a future resolving to the raw bytes of the selected payload."""

        return self.fetch_mapped(image_id, variant, None)

    def fetch_mapped(
        self,
        image_id: ImageID,
        variant: FetchVariant,
        transform: Optional[Callable[[bytes], T]],
    ) -> "Future[T]":
        """Fetch the payload and apply ``transform`` to it on the decode lane.

        Exceptions raised by ``transform`` are reported as DecodeFailed.
        """

        request = FetchRequest(image_id, variant)
        result: Future = Future()
        # Moves the future out of PENDING so callers cannot cancel it.
        result.set_running_or_notify_cancel()

        snapshot = self._store.new_snapshot()
        read = snapshot.perform(partial(self._read_payload, request))
        snapshot.close()
        read.add_done_callback(partial(self._hand_off, request, transform, result))
        return result

    @staticmethod
    def _read_payload(request: FetchRequest, snapshot: StoreSnapshot) -> bytes:
        image = snapshot.resolve(request.id)
        if image is None:
            raise ImageNotFound(request.id)

        data = image.payload(request.variant)
        if data is None:
            raise PayloadMissing(request.id)
        return bytes(data)

    def _hand_off(
        self,
        request: FetchRequest,
        transform: Optional[Callable[[bytes], T]],
        result: Future,
        read: Future,
    ) -> None:
        try:
            self.lane.submit(self._deliver, request, transform, result, read)
        except RuntimeError as exc:
            logger.warning("Decode lane closed before %s was delivered", request)
            result.set_exception(exc)

    def _deliver(
        self,
        request: FetchRequest,
        transform: Optional[Callable[[bytes], T]],
        result: Future,
        read: Future,
    ) -> None:
        error = read.exception()
        if error is not None:
            logger.debug("Fetch %s failed: %s", request, error)
            result.set_exception(error)
            return

        data = read.result()
        if transform is None:
            result.set_result(data)
            return

        try:
            value = self._apply(request, transform, data)
        except ImageManagerError as exc:
            logger.debug("Decoding %s failed: %s", request, exc)
            result.set_exception(exc)
        else:
            result.set_result(value)

    @staticmethod
    def _apply(request: FetchRequest, transform: Callable[[bytes], T], data: bytes) -> T:
        try:
            return transform(data)
        except UnableToReadImage as exc:
            if exc.image_id is not None:
                raise
            raise type(exc)(request.id, str(exc)) from exc
        except Exception as exc:  # noqa: BLE001 - any transform failure means unreadable bytes
            raise DecodeFailed(request.id) from exc

    def close(self) -> None:
        """Shut down the decode lane if this pipeline created it."""

        if self._owns_lane:
            self.lane.shutdown(wait=True)

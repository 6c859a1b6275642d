"""Tests for core.fetch.pipeline — asynchronous, serialized payload fetching."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait

import pytest

from factories import make_image_bytes
from core.errors import DecodeFailed, ImageNotFound, PayloadMissing, UnableToReadImage
from core.fetch.decoders import decode_bitmap
from core.fetch.lane import DecodeLane
from core.fetch.pipeline import FetchPipeline
from core.models.domain import FetchVariant

TIMEOUT = 10


@pytest.fixture
def pipeline(populated_store):
    fetch_pipeline = FetchPipeline(populated_store, lane_name="test-lane")
    try:
        yield fetch_pipeline
    finally:
        fetch_pipeline.close()


class TestFetch:
    def test_full_payload(self, pipeline):
        assert pipeline.fetch(1).result(timeout=TIMEOUT) == make_image_bytes((64, 48))

    def test_thumbnail_payload(self, pipeline):
        data = pipeline.fetch(1, FetchVariant.THUMBNAIL).result(timeout=TIMEOUT)
        assert data == make_image_bytes((16, 12))

    def test_unknown_id_is_not_found(self, pipeline):
        with pytest.raises(ImageNotFound) as excinfo:
            pipeline.fetch(999).result(timeout=TIMEOUT)
        assert not isinstance(excinfo.value, UnableToReadImage)
        assert excinfo.value.image_id == 999

    def test_missing_payload_is_unable_to_read(self, pipeline):
        with pytest.raises(UnableToReadImage) as excinfo:
            pipeline.fetch(3, FetchVariant.THUMBNAIL).result(timeout=TIMEOUT)
        assert isinstance(excinfo.value, PayloadMissing)

    def test_removed_image_is_not_found(self, populated_store, pipeline):
        populated_store.remove_image(2)
        with pytest.raises(ImageNotFound):
            pipeline.fetch(2).result(timeout=TIMEOUT)

    def test_not_cancellable(self, pipeline):
        future = pipeline.fetch(1)
        assert future.cancel() is False
        assert future.result(timeout=TIMEOUT)


class TestDelivery:
    def test_completes_on_decode_lane(self, pipeline):
        threads = []

        def transform(data):
            threads.append(threading.current_thread().name)
            return len(data)

        pipeline.fetch_mapped(1, FetchVariant.FULL, transform).result(timeout=TIMEOUT)
        assert len(threads) == 1
        assert threads[0].startswith("test-lane_")

    def test_callbacks_fire_on_lane_thread(self, pipeline):
        fired = threading.Event()
        names = []

        def on_done(future):
            names.append(threading.current_thread().name)
            fired.set()

        future = pipeline.fetch(1)
        future.add_done_callback(on_done)
        assert fired.wait(TIMEOUT)
        # Either the lane completed it, or it was already done and ran here.
        assert names[0].startswith("test-lane_") or names[0] == threading.current_thread().name

    def test_transform_failure_reported_as_decode_failed(self, pipeline):
        def explode(data):
            raise ValueError("corrupt")

        with pytest.raises(DecodeFailed) as excinfo:
            pipeline.fetch_mapped(1, FetchVariant.FULL, explode).result(timeout=TIMEOUT)
        assert excinfo.value.image_id == 1
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_decoder_message_is_kept(self, pipeline):
        with pytest.raises(DecodeFailed) as excinfo:
            pipeline.fetch_mapped(1, FetchVariant.FULL, lambda data: decode_bitmap(b"not an image")).result(
                timeout=TIMEOUT
            )
        assert excinfo.value.image_id == 1
        assert "Cannot decode image bytes" in str(excinfo.value)

    def test_not_found_from_transform_reported_as_decode_failed(self, pipeline):
        def lookup(data):
            raise ImageNotFound(42)

        with pytest.raises(DecodeFailed) as excinfo:
            pipeline.fetch_mapped(1, FetchVariant.FULL, lookup).result(timeout=TIMEOUT)
        assert excinfo.value.image_id == 1
        assert isinstance(excinfo.value.__cause__, ImageNotFound)

    def test_store_error_skips_transform(self, pipeline):
        calls = []
        future = pipeline.fetch_mapped(404, FetchVariant.FULL, calls.append)
        with pytest.raises(ImageNotFound):
            future.result(timeout=TIMEOUT)
        assert calls == []

    def test_exactly_one_outcome_per_fetch(self, pipeline):
        outcomes = []
        lock = threading.Lock()
        delivered = threading.Semaphore(0)

        def record(future):
            with lock:
                outcomes.append("error" if future.exception() else "value")
            delivered.release()

        futures = [pipeline.fetch(image_id) for image_id in (1, 2, 3, 4, 1, 5)]
        for future in futures:
            future.add_done_callback(record)
        done, not_done = wait(futures, timeout=TIMEOUT)
        assert not not_done
        for _ in futures:
            assert delivered.acquire(timeout=TIMEOUT)
        assert sorted(outcomes) == ["error", "error", "value", "value", "value", "value"]
        assert all(future.done() for future in futures)

    def test_closed_lane_still_completes_future(self, populated_store):
        fetch_pipeline = FetchPipeline(populated_store)
        fetch_pipeline.close()
        with pytest.raises(RuntimeError):
            fetch_pipeline.fetch(1).result(timeout=TIMEOUT)

    def test_shared_lane_not_closed_by_pipeline(self, populated_store):
        lane = DecodeLane("shared")
        try:
            FetchPipeline(populated_store, lane=lane).close()
            assert lane.closed is False
        finally:
            lane.shutdown()


class TestConcurrency:
    def test_concurrent_fetches_are_isolated(self, populated_store, pipeline):
        ids = [1, 2, 3, 999, 1, 2]
        with ThreadPoolExecutor(max_workers=len(ids)) as callers:
            futures = list(callers.map(pipeline.fetch, ids))

        results = []
        for image_id, future in zip(ids, futures):
            try:
                results.append((image_id, len(future.result(timeout=TIMEOUT))))
            except ImageNotFound:
                results.append((image_id, None))

        assert [image_id for image_id, size in results if size is None] == [999]
        assert all(size for image_id, size in results if image_id != 999)

    def test_decode_work_never_overlaps(self, pipeline):
        active = 0
        peak = 0
        lock = threading.Lock()

        def slow_transform(data):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with lock:
                active -= 1
            return data

        futures = [pipeline.fetch_mapped(1, FetchVariant.FULL, slow_transform) for _ in range(8)]
        for future in futures:
            future.result(timeout=TIMEOUT)
        assert peak == 1


class TestDecodeLane:
    def test_fifo_order(self):
        lane = DecodeLane("fifo")
        seen = []
        try:
            futures = [lane.submit(seen.append, index) for index in range(10)]
            for future in futures:
                future.result(timeout=TIMEOUT)
        finally:
            lane.shutdown()
        assert seen == list(range(10))

    def test_on_lane(self):
        lane = DecodeLane("own-thread")
        try:
            assert lane.submit(lane.on_lane).result(timeout=TIMEOUT) is True
            assert lane.on_lane() is False
        finally:
            lane.shutdown()

    def test_on_lane_with_same_name(self):
        first = DecodeLane()
        second = DecodeLane()
        try:
            assert second.submit(first.on_lane).result(timeout=TIMEOUT) is False
            assert first.submit(second.on_lane).result(timeout=TIMEOUT) is False
            assert first.submit(first.on_lane).result(timeout=TIMEOUT) is True
        finally:
            first.shutdown()
            second.shutdown()

    def test_submit_after_shutdown(self):
        lane = DecodeLane("done")
        lane.shutdown()
        lane.shutdown()
        with pytest.raises(RuntimeError):
            lane.submit(print)

"""Tests for batch generation and id uniqueness."""

import threading

import pytest

from tailtracer.catalog import DEFAULT_DEVICES, DEFAULT_ENDPOINTS
from tailtracer.generators import Batch, BatchGenerator


def test_generate_batch_returns_exactly_count(generator) -> None:
    """The loop bound is exclusive: count pairs, not count + 1."""
    assert len(generator.generate_batch(5)) == 5
    assert len(generator.generate_batch(1)) == 1


def test_generate_batch_zero_is_empty(generator) -> None:
    batch = generator.generate_batch(0)
    assert len(batch) == 0
    assert batch.spans() == []


def test_generate_batch_negative_count_rejected(generator) -> None:
    with pytest.raises(ValueError):
        generator.generate_batch(-1)


def test_batch_spans_flatten_in_pair_order(generator) -> None:
    batch = generator.generate_batch(3)
    spans = batch.spans()
    assert len(spans) == 6
    for i, pair in enumerate(batch):
        assert spans[2 * i] is pair.client_span
        assert spans[2 * i + 1] is pair.server_span


def test_every_pair_is_a_valid_two_span_trace(generator) -> None:
    for pair in generator.generate_batch(50):
        client, server = pair.spans()
        assert client.parent is None
        assert server.parent.span_id == client.context.span_id
        assert client.context.trace_id == server.context.trace_id
        assert server.end_time == client.end_time
        assert server.start_time > client.start_time


def test_batches_draw_from_whole_catalog(generator) -> None:
    batch = generator.generate_batch(1000)
    device_names = {dict(p.device_resource.attributes)["service.name"] for p in batch}
    endpoints = {p.server_span.name for p in batch}
    assert device_names == {d.name for d in DEFAULT_DEVICES}
    assert endpoints == set(DEFAULT_ENDPOINTS)


def test_trace_ids_are_hex_strings(generator) -> None:
    batch = generator.generate_batch(2)
    ids = batch.trace_ids()
    assert len(ids) == 2
    assert all(len(t) == 32 and int(t, 16) for t in ids)


def test_default_generator_uses_builtin_catalog() -> None:
    batch = BatchGenerator().generate_batch(10)
    assert isinstance(batch, Batch)
    assert len(batch.spans()) == 20


def test_concurrent_generation_has_no_id_collisions() -> None:
    """10,400 pairs from 8 threads sharing one generator: all trace and span ids unique."""
    generator = BatchGenerator()
    batches: list[Batch] = []
    lock = threading.Lock()

    def worker() -> None:
        local = [generator.generate_batch(100) for _ in range(13)]
        with lock:
            batches.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    pairs = [pair for batch in batches for pair in batch]
    assert len(pairs) == 10_400
    trace_ids = {pair.trace_id for pair in pairs}
    span_ids = {span.context.span_id for pair in pairs for span in pair.spans()}
    assert len(trace_ids) == 10_400
    assert len(span_ids) == 20_800

"""Tests for two-span trace synthesis."""

import dataclasses

import pytest
from opentelemetry.trace import SpanKind, StatusCode

from tailtracer.catalog import DEFAULT_BACKEND, DEFAULT_DEVICES
from tailtracer.errors import UnrecognizedCodeError
from tailtracer.generators import EntropyIdGenerator, TraceSynthesizer
from tailtracer.generators.trace_synthesizer import (
    CLIENT_SPAN_DURATION_NS,
    SERVER_SPAN_START_OFFSET_NS,
)

SECOND_NS = 1_000_000_000


def _backend(endpoint: str = "api/v2.5/balance", **overrides):
    return dataclasses.replace(DEFAULT_BACKEND, endpoint=endpoint, **overrides)


def test_spans_share_trace_id_and_form_parent_chain(synthesizer) -> None:
    pair = synthesizer.synthesize(DEFAULT_DEVICES[0], _backend())
    client, server = pair.spans()
    assert client.context.trace_id == server.context.trace_id == pair.trace_id
    assert client.parent is None
    assert server.parent is not None
    assert server.parent.span_id == client.context.span_id
    assert server.parent.trace_id == client.context.trace_id
    assert client.context.span_id != server.context.span_id


def test_kinds_and_status(synthesizer) -> None:
    pair = synthesizer.synthesize(DEFAULT_DEVICES[0], _backend())
    assert pair.client_span.kind == SpanKind.CLIENT
    assert pair.server_span.kind == SpanKind.SERVER
    assert pair.client_span.status.status_code == StatusCode.OK
    assert pair.server_span.status.status_code == StatusCode.OK


def test_timing_offsets(synthesizer, fixed_start_ns: int) -> None:
    """Client lasts 4s; server starts 2s in and ends with the client."""
    client, server = synthesizer.synthesize(DEFAULT_DEVICES[1], _backend()).spans()
    assert client.start_time == fixed_start_ns
    assert client.end_time - client.start_time == 4 * SECOND_NS == CLIENT_SPAN_DURATION_NS
    assert server.start_time - client.start_time == 2 * SECOND_NS == SERVER_SPAN_START_OFFSET_NS
    assert server.start_time > client.start_time
    assert server.end_time == client.end_time


def test_start_uses_current_time_by_default() -> None:
    import time

    before = time.time_ns()
    client, _ = TraceSynthesizer().synthesize(DEFAULT_DEVICES[0], _backend()).spans()
    after = time.time_ns()
    assert before <= client.start_time <= after


@pytest.mark.parametrize(
    "endpoint, client_name",
    [
        ("api/v2.5/balance", "Check Balance"),
        ("api/v2.5/deposit", "Make Deposit"),
        ("api/v2.5/withdrawn", "Fast Cash"),
    ],
)
def test_span_names(synthesizer, endpoint: str, client_name: str) -> None:
    pair = synthesizer.synthesize(DEFAULT_DEVICES[0], _backend(endpoint))
    assert pair.client_span.name == client_name
    assert pair.server_span.name == endpoint


def test_unknown_endpoint_gives_blank_client_name(synthesizer) -> None:
    pair = synthesizer.synthesize(DEFAULT_DEVICES[0], _backend("api/v2.5/transfer"))
    assert pair.client_span.name == ""
    assert pair.server_span.name == "api/v2.5/transfer"


def test_device_resource_attributes(synthesizer) -> None:
    device = DEFAULT_DEVICES[0]
    pair = synthesizer.synthesize(device, _backend())
    attrs = dict(pair.device_resource.attributes)
    assert attrs == {
        "atm.id": 111,
        "atm.stateid": "IL",
        "atm.ispnetwork": "comcast-chicago",
        "atm.serialnumber": "atmxph-2022-111",
        "service.name": "ATM-111-IL",
        "service.version": "v1.0",
    }
    assert pair.client_span.resource is pair.device_resource


def test_backend_resource_attributes(synthesizer) -> None:
    pair = synthesizer.synthesize(DEFAULT_DEVICES[0], _backend())
    attrs = dict(pair.backend_resource.attributes)
    assert attrs == {
        "cloud.provider": "aws",
        "cloud.region": "us-east-2",
        "os.type": "linux",
        "os.version": "4.16.10-300.fc28.x86_64",
        "service.name": "accounts",
        "service.version": "v2.5",
    }
    assert pair.server_span.resource is pair.backend_resource


@pytest.mark.parametrize(
    "provider, os_type, expected_provider, expected_os",
    [
        ("mcrsft", "wndws", "azure", "windows"),
        ("gogl", "slrs", "gcp", "solaris"),
        ("amzn", "lnx", "aws", "linux"),
    ],
)
def test_backend_code_mapping(
    synthesizer, provider: str, os_type: str, expected_provider: str, expected_os: str
) -> None:
    backend = _backend(cloud_provider=provider, os_type=os_type)
    attrs = synthesizer.synthesize(DEFAULT_DEVICES[0], backend).backend_resource.attributes
    assert attrs["cloud.provider"] == expected_provider
    assert attrs["os.type"] == expected_os


def test_unknown_backend_codes_are_blank(synthesizer) -> None:
    backend = _backend(cloud_provider="ibm", os_type="bsd")
    attrs = synthesizer.synthesize(DEFAULT_DEVICES[0], backend).backend_resource.attributes
    assert attrs["cloud.provider"] == ""
    assert attrs["os.type"] == ""
    assert synthesizer.resolver.reported == {("cloud provider", "ibm"), ("OS type", "bsd")}


def test_strict_mode_raises_on_unknown_codes(strict_synthesizer) -> None:
    with pytest.raises(UnrecognizedCodeError):
        strict_synthesizer.synthesize(DEFAULT_DEVICES[0], _backend("api/v2.5/transfer"))
    with pytest.raises(UnrecognizedCodeError):
        strict_synthesizer.synthesize(DEFAULT_DEVICES[0], _backend(os_type="bsd"))


def test_ids_have_expected_width() -> None:
    gen = EntropyIdGenerator()
    for _ in range(100):
        trace_id = gen.generate_trace_id()
        span_id = gen.generate_span_id()
        assert 0 < trace_id < 2**128
        assert 0 < span_id < 2**64


def test_span_ids_are_fresh_per_trace(synthesizer) -> None:
    pairs = [synthesizer.synthesize(DEFAULT_DEVICES[0], _backend()) for _ in range(200)]
    trace_ids = {p.trace_id for p in pairs}
    span_ids = {s.context.span_id for p in pairs for s in p.spans()}
    assert len(trace_ids) == 200
    assert len(span_ids) == 400

"""
Build the two-span ATM trace for one (device, backend) pair.

Trace shape:
  <operation name> (CLIENT, ATM resource)        start=t0       end=t0+4s
  └── <endpoint path> (SERVER, backend resource) start=t0+2s    end=t0+4s

Spans are emitted as finished SDK ReadableSpans so any SpanExporter can
consume them without a TracerProvider in between.
"""

import secrets
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.id_generator import IdGenerator
from opentelemetry.sdk.util.instrumentation import InstrumentationScope
from opentelemetry.semconv._incubating.attributes.cloud_attributes import (
    CLOUD_PROVIDER,
    CLOUD_REGION,
)
from opentelemetry.semconv._incubating.attributes.os_attributes import OS_TYPE, OS_VERSION
from opentelemetry.semconv.attributes.service_attributes import SERVICE_NAME, SERVICE_VERSION
from opentelemetry.trace import (
    INVALID_SPAN_ID,
    SpanContext,
    SpanKind,
    Status,
    StatusCode,
    TraceFlags,
)

from .. import __version__
from ..catalog.lookups import (
    CodeResolver,
    lookup_cloud_provider,
    lookup_operation_name,
    lookup_os_type,
)
from ..catalog.profiles import BackendProfile, DeviceProfile

RESOURCE_SCHEMA_URL = "https://opentelemetry.io/schemas/1.9.0"

CLIENT_SPAN_DURATION_NS = 4_000_000_000
SERVER_SPAN_START_OFFSET_NS = 2_000_000_000

ATM_ID = "atm.id"
ATM_STATE_ID = "atm.stateid"
ATM_ISP_NETWORK = "atm.ispnetwork"
ATM_SERIAL_NUMBER = "atm.serialnumber"

_SCOPE = InstrumentationScope("tailtracer", __version__)


class EntropyIdGenerator(IdGenerator):
    """Trace ids from UUID4, span ids from the OS CSPRNG. Safe to share between threads."""

    def generate_trace_id(self) -> int:
        return uuid.uuid4().int

    def generate_span_id(self) -> int:
        span_id = secrets.randbits(64)
        while span_id == INVALID_SPAN_ID:
            span_id = secrets.randbits(64)
        return span_id


@dataclass(frozen=True)
class TracePair:
    """One synthesized trace: both resources and the client/server spans."""

    device_resource: Resource
    backend_resource: Resource
    client_span: ReadableSpan
    server_span: ReadableSpan

    @property
    def trace_id(self) -> int:
        return self.client_span.context.trace_id

    def spans(self) -> tuple[ReadableSpan, ReadableSpan]:
        return self.client_span, self.server_span


def device_resource(device: DeviceProfile) -> Resource:
    """Resource attributes for the ATM that issued the call."""
    return Resource(
        {
            ATM_ID: device.id,
            ATM_STATE_ID: device.state_id,
            ATM_ISP_NETWORK: device.isp_network,
            ATM_SERIAL_NUMBER: device.serial_number,
            SERVICE_NAME: device.name,
            SERVICE_VERSION: device.version,
        },
        schema_url=RESOURCE_SCHEMA_URL,
    )


def backend_resource(backend: BackendProfile, resolver: CodeResolver) -> Resource:
    """Resource attributes for the backend process; provider and OS codes go through resolver."""
    return Resource(
        {
            CLOUD_PROVIDER: resolver.resolve(lookup_cloud_provider(backend.cloud_provider)),
            CLOUD_REGION: backend.cloud_region,
            OS_TYPE: resolver.resolve(lookup_os_type(backend.os_type)),
            OS_VERSION: backend.os_version,
            SERVICE_NAME: backend.process_name,
            SERVICE_VERSION: backend.version,
        },
        schema_url=RESOURCE_SCHEMA_URL,
    )


class TraceSynthesizer:
    """Synthesize ATM -> backend traces. Holds no per-trace state."""

    def __init__(
        self,
        resolver: CodeResolver | None = None,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], int] = time.time_ns,
    ):
        self.resolver = resolver or CodeResolver()
        self.id_generator = id_generator or EntropyIdGenerator()
        self.clock = clock

    def _span_context(self, trace_id: int) -> SpanContext:
        return SpanContext(
            trace_id=trace_id,
            span_id=self.id_generator.generate_span_id(),
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED),
        )

    def synthesize(self, device: DeviceProfile, backend: BackendProfile) -> TracePair:
        """Build resources and the client/server span pair for one ATM call."""
        trace_id = self.id_generator.generate_trace_id()
        operation_name = self.resolver.resolve(lookup_operation_name(backend.endpoint))

        atm_resource = device_resource(device)
        service_resource = backend_resource(backend, self.resolver)

        client_start = self.clock()
        client_end = client_start + CLIENT_SPAN_DURATION_NS
        client_context = self._span_context(trace_id)
        client_span = ReadableSpan(
            name=operation_name,
            context=client_context,
            parent=None,
            resource=atm_resource,
            kind=SpanKind.CLIENT,
            status=Status(StatusCode.OK),
            start_time=client_start,
            end_time=client_end,
            instrumentation_scope=_SCOPE,
        )

        server_span = ReadableSpan(
            name=backend.endpoint,
            context=self._span_context(trace_id),
            parent=client_context,
            resource=service_resource,
            kind=SpanKind.SERVER,
            status=Status(StatusCode.OK),
            start_time=client_start + SERVER_SPAN_START_OFFSET_NS,
            end_time=client_end,
            instrumentation_scope=_SCOPE,
        )

        return TracePair(
            device_resource=atm_resource,
            backend_resource=service_resource,
            client_span=client_span,
            server_span=server_span,
        )

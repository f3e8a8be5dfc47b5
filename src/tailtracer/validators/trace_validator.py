"""
Validate synthesized ATM traces against their structural and timing rules.

Checks per trace pair:
- one CLIENT root span and one SERVER child span sharing the trace id
- server parent id equals client span id
- client lasts 4s, server starts 2s after client and ends with it
- required resource attributes are present
"""

from dataclasses import dataclass, field
from enum import Enum
from collections.abc import Iterable
from typing import Any

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.trace import SpanKind, StatusCode

from ..generators.trace_synthesizer import (
    CLIENT_SPAN_DURATION_NS,
    SERVER_SPAN_START_OFFSET_NS,
    TracePair,
)

DEVICE_RESOURCE_KEYS = (
    "atm.id",
    "atm.stateid",
    "atm.ispnetwork",
    "atm.serialnumber",
    "service.name",
    "service.version",
)
BACKEND_RESOURCE_KEYS = (
    "cloud.provider",
    "cloud.region",
    "os.type",
    "os.version",
    "service.name",
    "service.version",
)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationError:
    """A single validation error or warning."""

    severity: ValidationSeverity
    location: str
    message: str
    trace_id: str | None = None
    expected: Any = None
    actual: Any = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        trace_info = f" ({self.trace_id})" if self.trace_id else ""
        return f"{prefix}{trace_info} {self.location}: {self.message}"


@dataclass
class ValidationResult:
    """Result of validating one or more trace pairs."""

    valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    def add_error(self, error: ValidationError):
        if error.severity == ValidationSeverity.ERROR:
            self.errors.append(error)
            self.valid = False
        else:
            self.warnings.append(error)

    def merge(self, other: "ValidationResult"):
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.valid:
            self.valid = False

    def __str__(self) -> str:
        lines = ["Validation passed" if self.valid else "Validation failed"]
        if self.errors:
            lines.append(f"\nErrors ({len(self.errors)}):")
            lines.extend(f"  - {err}" for err in self.errors)
        if self.warnings:
            lines.append(f"\nWarnings ({len(self.warnings)}):")
            lines.extend(f"  - {warn}" for warn in self.warnings)
        return "\n".join(lines)


def _check(
    result: ValidationResult,
    ok: bool,
    field_name: str,
    message: str,
    trace_id: str,
    expected: Any = None,
    actual: Any = None,
) -> None:
    if not ok:
        result.add_error(
            ValidationError(
                ValidationSeverity.ERROR,
                field_name,
                message,
                trace_id=trace_id,
                expected=expected,
                actual=actual,
            )
        )


def _check_resource(
    result: ValidationResult, span: ReadableSpan, keys: tuple[str, ...], trace_id: str
) -> None:
    attrs = dict(span.resource.attributes) if span.resource else {}
    for key in keys:
        if key not in attrs:
            result.add_error(
                ValidationError(
                    ValidationSeverity.ERROR,
                    f"resource.{key}",
                    "missing resource attribute",
                    trace_id=trace_id,
                )
            )
        elif attrs[key] == "":
            result.add_error(
                ValidationError(
                    ValidationSeverity.WARNING,
                    f"resource.{key}",
                    "blank value (unrecognized code)",
                    trace_id=trace_id,
                )
            )


def validate_trace_pair(pair: TracePair) -> ValidationResult:
    """Validate one synthesized trace pair."""
    result = ValidationResult()
    client, server = pair.client_span, pair.server_span
    trace_id = format(client.context.trace_id, "032x")

    _check(
        result,
        client.context.trace_id == server.context.trace_id,
        "trace_id",
        "client and server spans must share the trace id",
        trace_id,
        expected=trace_id,
        actual=format(server.context.trace_id, "032x"),
    )
    _check(
        result,
        client.context.span_id != server.context.span_id,
        "span_id",
        "client and server span ids must differ",
        trace_id,
    )
    _check(result, client.parent is None, "client.parent", "client span must be root", trace_id)
    _check(
        result,
        server.parent is not None and server.parent.span_id == client.context.span_id,
        "server.parent",
        "server span parent must be the client span",
        trace_id,
    )
    _check(
        result,
        client.kind == SpanKind.CLIENT,
        "client.kind",
        "client span must have kind CLIENT",
        trace_id,
        expected=SpanKind.CLIENT.name,
        actual=client.kind.name,
    )
    _check(
        result,
        server.kind == SpanKind.SERVER,
        "server.kind",
        "server span must have kind SERVER",
        trace_id,
        expected=SpanKind.SERVER.name,
        actual=server.kind.name,
    )
    for label, span in (("client", client), ("server", server)):
        _check(
            result,
            span.status.status_code == StatusCode.OK,
            f"{label}.status",
            "span status must be OK",
            trace_id,
            expected=StatusCode.OK.name,
            actual=span.status.status_code.name,
        )

    if None in (client.start_time, client.end_time, server.start_time, server.end_time):
        _check(result, False, "timestamps", "all spans must have start and end", trace_id)
        return result

    _check(
        result,
        client.end_time - client.start_time == CLIENT_SPAN_DURATION_NS,
        "client.duration",
        "client span must last 4s",
        trace_id,
        expected=CLIENT_SPAN_DURATION_NS,
        actual=client.end_time - client.start_time,
    )
    _check(
        result,
        server.start_time - client.start_time == SERVER_SPAN_START_OFFSET_NS,
        "server.start_time",
        "server span must start 2s after client start",
        trace_id,
        expected=SERVER_SPAN_START_OFFSET_NS,
        actual=server.start_time - client.start_time,
    )
    _check(
        result,
        server.end_time == client.end_time,
        "server.end_time",
        "server span must end with the client span",
        trace_id,
        expected=client.end_time,
        actual=server.end_time,
    )

    if not client.name:
        result.add_error(
            ValidationError(
                ValidationSeverity.WARNING,
                "client.name",
                "blank operation name (unrecognized endpoint)",
                trace_id=trace_id,
                actual=server.name,
            )
        )
    _check_resource(result, client, DEVICE_RESOURCE_KEYS, trace_id)
    _check_resource(result, server, BACKEND_RESOURCE_KEYS, trace_id)
    return result


def validate_trace_pairs(pairs: Iterable[TracePair]) -> ValidationResult:
    """Validate every pair and merge the results."""
    result = ValidationResult()
    for pair in pairs:
        result.merge(validate_trace_pair(pair))
    return result

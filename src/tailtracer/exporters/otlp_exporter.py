"""
OTLP span exporter factory.

Supports both HTTP and gRPC protocols; the protocol-specific exporter package is
imported lazily so only the one in use needs to be installed.
"""

from typing import Any


def create_otlp_trace_exporter(
    endpoint: str = "http://localhost:4318",
    protocol: str = "http",
    headers: dict[str, str] | None = None,
    **kwargs: Any,
):
    """
    Create an OTLP trace exporter.

    Args:
        endpoint: OTLP endpoint URL
        protocol: "http" or "grpc"
        headers: Optional headers to include
        **kwargs: Additional exporter configuration

    Returns:
        Configured SpanExporter
    """
    if protocol == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        return OTLPSpanExporter(
            endpoint=endpoint.replace("http://", "").replace("https://", ""),
            insecure=endpoint.startswith("http://"),
            headers=headers,
            **kwargs,
        )
    if protocol != "http":
        raise ValueError(f"Unsupported OTLP protocol: {protocol!r} (use 'http' or 'grpc')")

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (  # type: ignore[assignment]
        OTLPSpanExporter,
    )

    traces_endpoint = endpoint.rstrip("/")
    if not traces_endpoint.endswith("/v1/traces"):
        traces_endpoint = f"{traces_endpoint}/v1/traces"
    return OTLPSpanExporter(
        endpoint=traces_endpoint,
        headers=headers,
        **kwargs,
    )

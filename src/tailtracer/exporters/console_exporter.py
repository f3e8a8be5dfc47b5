"""
Console exporter for debugging and development.

Prints spans to stdout for quick verification.
"""

import sys

from opentelemetry.sdk.trace.export import ConsoleSpanExporter


def create_console_exporter() -> ConsoleSpanExporter:
    """Create a span exporter that writes each span as JSON to the current stdout."""
    return ConsoleSpanExporter(service_name="tailtracer", out=sys.stdout)

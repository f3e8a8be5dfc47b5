"""Span exporters used as delivery sinks for synthesized traces."""

from .console_exporter import create_console_exporter
from .file_exporter import FileSpanExporter, span_to_dict
from .otlp_exporter import create_otlp_trace_exporter

__all__ = [
    "create_otlp_trace_exporter",
    "FileSpanExporter",
    "span_to_dict",
    "create_console_exporter",
]

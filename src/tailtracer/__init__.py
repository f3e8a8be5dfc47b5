"""
Tailtracer - synthetic ATM/backend trace generator.

This package fabricates two-span OpenTelemetry traces (an ATM client call and
the backend server span handling it) for feeding observability pipelines.
"""

__version__ = "1.0.0"

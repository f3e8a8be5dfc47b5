"""Validators for synthesized traces."""

from .trace_validator import (
    ValidationError,
    ValidationResult,
    ValidationSeverity,
    validate_trace_pair,
    validate_trace_pairs,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationSeverity",
    "validate_trace_pair",
    "validate_trace_pairs",
]

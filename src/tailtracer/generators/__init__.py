"""Trace synthesis and batch generation."""

from .batch_generator import Batch, BatchGenerator
from .trace_synthesizer import EntropyIdGenerator, TracePair, TraceSynthesizer

__all__ = [
    "TraceSynthesizer",
    "TracePair",
    "EntropyIdGenerator",
    "BatchGenerator",
    "Batch",
]

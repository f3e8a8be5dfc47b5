"""
Produce batches of synthetic ATM traces for a host to deliver to a sink.

generate_batch(count) returns exactly `count` trace pairs. Each pair draws its
own device and backend endpoint from the catalog.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from opentelemetry.sdk.trace import ReadableSpan

from ..catalog.entity_catalog import EntityCatalog
from .trace_synthesizer import TracePair, TraceSynthesizer

logger = logging.getLogger(__name__)


@dataclass
class Batch:
    """Trace pairs produced by one generate_batch call."""

    pairs: list[TracePair] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[TracePair]:
        return iter(self.pairs)

    def spans(self) -> list[ReadableSpan]:
        """All spans in pair order (client then server), ready for SpanExporter.export."""
        return [span for pair in self.pairs for span in pair.spans()]

    def trace_ids(self) -> list[str]:
        return [format(pair.trace_id, "032x") for pair in self.pairs]


class BatchGenerator:
    """Combine catalog selection and trace synthesis."""

    def __init__(
        self,
        catalog: EntityCatalog | None = None,
        synthesizer: TraceSynthesizer | None = None,
    ):
        self.catalog = catalog or EntityCatalog()
        self.synthesizer = synthesizer or TraceSynthesizer()

    def generate_trace(self) -> TracePair:
        """Pick one device and one backend endpoint and synthesize their trace."""
        device = self.catalog.pick_device()
        backend = self.catalog.pick_backend()
        return self.synthesizer.synthesize(device, backend)

    def generate_batch(self, count: int) -> Batch:
        """Return a batch of exactly `count` trace pairs."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        batch = Batch([self.generate_trace() for _ in range(count)])
        logger.debug("Generated batch of %d trace pairs", len(batch))
        return batch

"""
Periodic host loop: generate a batch every interval and hand it to a sink.

The sink is any OpenTelemetry SpanExporter (file, OTLP, console). The loop runs
on one daemon thread; shutdown() signals it, joins it, then flushes and shuts
down the sink.
"""

import logging
import threading

from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from .config import ReceiverConfig
from .errors import TailtracerError
from .generators.batch_generator import Batch, BatchGenerator

logger = logging.getLogger(__name__)

_JOIN_TIMEOUT_SECONDS = 5.0


class TraceReceiver:
    """Drive BatchGenerator on a timer and deliver each batch to a SpanExporter."""

    def __init__(
        self,
        exporter: SpanExporter,
        config: ReceiverConfig | None = None,
        generator: BatchGenerator | None = None,
    ):
        self.exporter = exporter
        self.config = config or ReceiverConfig()
        self.generator = generator or BatchGenerator()
        self.batches_exported = 0
        self.batches_failed = 0
        self.error: TailtracerError | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._closed = False

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> Batch:
        """Generate one batch and export it. Export failures are logged and counted."""
        batch = self.generator.generate_batch(self.config.traces_per_interval)
        try:
            result = self.exporter.export(batch.spans())
        except Exception:
            logger.exception("Exporter raised while exporting %d trace pairs", len(batch))
            result = SpanExportResult.FAILURE
        with self._lock:
            if result == SpanExportResult.SUCCESS:
                self.batches_exported += 1
            else:
                self.batches_failed += 1
        if result != SpanExportResult.SUCCESS:
            logger.warning("Export of %d trace pairs failed", len(batch))
        else:
            logger.debug("Exported trace ids: %s", ", ".join(batch.trace_ids()))
        return batch

    def _run(self) -> None:
        logger.info(
            "Trace receiver loop started (interval=%ss, traces_per_interval=%d)",
            self.config.interval_seconds,
            self.config.traces_per_interval,
        )
        while not self._stop_event.is_set():
            try:
                self.tick()
            except TailtracerError as e:
                logger.exception("Trace generation failed; stopping receiver loop")
                with self._lock:
                    self.batches_failed += 1
                self.error = e
                self._stop_event.set()
                break
            self._stop_event.wait(self.config.interval_seconds)
        logger.info("Trace receiver loop finished")

    def start(self) -> None:
        """Start the periodic loop on a background thread."""
        if self._closed:
            raise RuntimeError("Receiver has been shut down")
        if self.is_running():
            raise RuntimeError("Receiver is already running")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="TailtracerReceiver", daemon=True)
        self._thread.start()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until shutdown is requested; returns True if it was."""
        return self._stop_event.wait(timeout)

    def shutdown(self) -> None:
        """Stop the loop, then flush and shut down the exporter. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=_JOIN_TIMEOUT_SECONDS)
            if self._thread.is_alive():
                logger.warning("Receiver thread did not stop within %ss", _JOIN_TIMEOUT_SECONDS)
            self._thread = None
        self.exporter.force_flush()
        self.exporter.shutdown()

"""
Command-line interface for tailtracer.

Provides commands for:
- Generating a one-off batch of ATM traces
- Running the periodic receiver loop against a sink
- Listing the entity catalog
- Validating synthesized traces
"""

import argparse
import dataclasses
import logging
import sys

from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from . import __version__
from .catalog.entity_catalog import EntityCatalog
from .catalog.lookups import CodeResolver
from .config import CATALOG_PATH, load_receiver_config, parse_duration
from .errors import TailtracerError
from .exporters.console_exporter import create_console_exporter
from .exporters.file_exporter import FileSpanExporter
from .exporters.otlp_exporter import create_otlp_trace_exporter
from .generators.batch_generator import BatchGenerator
from .generators.trace_synthesizer import TraceSynthesizer
from .receiver import TraceReceiver
from .validators.trace_validator import validate_trace_pairs

_DEFAULT_ENDPOINTS = {
    "http": "http://localhost:4318",
    "grpc": "http://localhost:4317",
}
_MAX_TRACE_IDS_SHOWN = 10


def _add_sink_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-file",
        type=str,
        default=None,
        help="Output file path (if set, exports spans as JSON lines instead of OTLP)",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Print spans to stdout instead of exporting over OTLP",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=None,
        help="OTLP endpoint (default: localhost:4318 for http, localhost:4317 for grpc)",
    )
    parser.add_argument(
        "--protocol",
        choices=("http", "grpc"),
        default="http",
        help="OTLP protocol (default: http)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tailtracer",
        description="Synthetic ATM -> backend trace generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Send 10 trace pairs to a local OTLP collector
  tailtracer generate --count 10

  # Generate 5 trace pairs every 30 seconds into a file
  tailtracer run --interval 30s --traces-per-interval 5 --output-file traces.jsonl

  # Check synthesized traces against their invariants
  tailtracer validate --count 100
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        help="Catalog YAML with devices, backend and endpoints (default: resource/config/catalog.yaml or built-in)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for device/endpoint selection")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unrecognized provider, OS or endpoint codes instead of using blank values",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    generate_parser = subparsers.add_parser("generate", help="Generate and export one batch")
    generate_parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of trace pairs to generate (default: 1)",
    )
    _add_sink_arguments(generate_parser)

    run_parser = subparsers.add_parser("run", help="Generate batches periodically until stopped")
    run_parser.add_argument(
        "--interval",
        type=str,
        default=None,
        help="Time between batches, e.g. 1m, 30s, 500ms (default: config or 1m)",
    )
    run_parser.add_argument(
        "--traces-per-interval",
        type=int,
        default=None,
        help="Trace pairs per batch (default: config or 1)",
    )
    run_parser.add_argument(
        "--duration",
        type=str,
        default=None,
        help="Stop after this long (default: run until interrupted)",
    )
    _add_sink_arguments(run_parser)

    subparsers.add_parser("catalog", help="List simulated devices and backend endpoints")

    validate_parser = subparsers.add_parser("validate", help="Synthesize traces and validate them")
    validate_parser.add_argument(
        "--count",
        type=int,
        default=100,
        help="Number of trace pairs to validate (default: 100)",
    )
    validate_parser.add_argument(
        "--show-warnings",
        action="store_true",
        help="Print warnings as well as errors",
    )

    return parser


def _load_catalog(args: argparse.Namespace) -> EntityCatalog:
    if args.catalog:
        return EntityCatalog.from_yaml(args.catalog, seed=args.seed)
    if CATALOG_PATH.is_file():
        return EntityCatalog.from_yaml(CATALOG_PATH, seed=args.seed)
    return EntityCatalog(seed=args.seed)


def _build_generator(args: argparse.Namespace, strict: bool = False) -> BatchGenerator:
    synthesizer = TraceSynthesizer(resolver=CodeResolver(strict=args.strict or strict))
    return BatchGenerator(catalog=_load_catalog(args), synthesizer=synthesizer)


def _create_exporter(args: argparse.Namespace) -> SpanExporter:
    if args.output_file:
        print(f"   Output: {args.output_file}")
        return FileSpanExporter(args.output_file)
    if args.console:
        print("   Output: console")
        return create_console_exporter()
    endpoint = args.endpoint or _DEFAULT_ENDPOINTS[args.protocol]
    print(f"   Output: OTLP {args.protocol} {endpoint}")
    return create_otlp_trace_exporter(endpoint, protocol=args.protocol)


def _print_trace_ids(trace_ids: list[str]) -> None:
    if not trace_ids:
        return
    shown = trace_ids[:_MAX_TRACE_IDS_SHOWN]
    if len(trace_ids) <= _MAX_TRACE_IDS_SHOWN:
        print("Trace IDs:")
    else:
        print(f"Trace IDs (first {_MAX_TRACE_IDS_SHOWN} of {len(trace_ids)}):")
    for trace_id in shown:
        print(f"   {trace_id}")


def cmd_generate(args: argparse.Namespace):
    """Generate one batch and export it."""
    print(f"Generating {args.count} ATM trace pairs...")
    generator = _build_generator(args)
    exporter = _create_exporter(args)
    try:
        batch = generator.generate_batch(args.count)
        result = exporter.export(batch.spans())
    finally:
        exporter.shutdown()
    print()
    if result != SpanExportResult.SUCCESS:
        print(f"Export failed for {len(batch)} trace pairs")
        sys.exit(1)
    print(f"Exported {len(batch)} trace pairs ({len(batch.spans())} spans)")
    _print_trace_ids(batch.trace_ids())


def cmd_run(args: argparse.Namespace):
    """Run the periodic receiver loop."""
    config = load_receiver_config()
    overrides: dict = {}
    if args.interval is not None:
        overrides["interval_seconds"] = parse_duration(args.interval)
    if args.traces_per_interval is not None:
        if args.traces_per_interval < 1:
            raise TailtracerError("--traces-per-interval must be at least 1")
        overrides["traces_per_interval"] = args.traces_per_interval
    if overrides:
        config = dataclasses.replace(config, **overrides)
    if args.seed is None and config.seed is not None:
        args.seed = config.seed
    duration = parse_duration(args.duration) if args.duration else None

    print("Starting ATM trace receiver...")
    print(f"   Interval: {config.interval_seconds}s")
    print(f"   Traces per interval: {config.traces_per_interval}")
    exporter = _create_exporter(args)
    print()

    receiver = TraceReceiver(
        exporter=exporter,
        config=config,
        generator=_build_generator(args, strict=config.strict),
    )
    receiver.start()
    try:
        receiver.wait(duration)
    finally:
        receiver.shutdown()
    if receiver.error is not None:
        raise receiver.error
    print(f"Batches exported: {receiver.batches_exported}, failed: {receiver.batches_failed}")


def cmd_catalog(args: argparse.Namespace):
    """List the catalog."""
    catalog = _load_catalog(args)
    print("Devices:")
    for device in catalog.devices:
        print(f"  - {device.name} (id={device.id}, state={device.state_id}, version={device.version})")
        print(f"     serial={device.serial_number} isp={device.isp_network}")
    backend = catalog.backend
    print()
    print(f"Backend: {backend.process_name} {backend.version}")
    print(f"   OS: {backend.os_type} {backend.os_version}")
    print(f"   Cloud: {backend.cloud_provider} {backend.cloud_region}")
    print("   Endpoints:")
    for endpoint in catalog.endpoints:
        print(f"      {endpoint}")


def cmd_validate(args: argparse.Namespace):
    """Synthesize traces and validate them."""
    generator = _build_generator(args)
    batch = generator.generate_batch(args.count)
    result = validate_trace_pairs(batch)
    if not args.show_warnings:
        result.warnings = []
    print(f"Validated {len(batch)} trace pairs")
    print(result)
    if not result.valid:
        sys.exit(1)


_COMMANDS = {
    "generate": cmd_generate,
    "run": cmd_run,
    "catalog": cmd_catalog,
    "validate": cmd_validate,
}


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if getattr(args, "count", 0) < 0:
        parser.error("--count must be >= 0")

    try:
        _COMMANDS[args.command](args)
    except KeyboardInterrupt:
        print("\nGeneration interrupted")
        sys.exit(0)
    except TailtracerError as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

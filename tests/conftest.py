"""Shared fixtures for tailtracer tests."""

import pytest

from tailtracer.catalog import CodeResolver, EntityCatalog
from tailtracer.generators import BatchGenerator, TraceSynthesizer


@pytest.fixture
def fixed_start_ns() -> int:
    return 1_700_000_000_000_000_000


@pytest.fixture
def fixed_clock(fixed_start_ns):
    """Clock that always returns the same Unix-ns timestamp."""
    return lambda: fixed_start_ns


@pytest.fixture
def synthesizer(fixed_clock) -> TraceSynthesizer:
    return TraceSynthesizer(clock=fixed_clock)


@pytest.fixture
def strict_synthesizer(fixed_clock) -> TraceSynthesizer:
    return TraceSynthesizer(resolver=CodeResolver(strict=True), clock=fixed_clock)


@pytest.fixture
def catalog() -> EntityCatalog:
    return EntityCatalog(seed=1234)


@pytest.fixture
def generator(catalog, synthesizer) -> BatchGenerator:
    return BatchGenerator(catalog=catalog, synthesizer=synthesizer)

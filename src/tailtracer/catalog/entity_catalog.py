"""
Uniform random selection over the simulated devices and backend endpoints.

Each EntityCatalog owns one random.Random seeded once at construction. The
generator is shared by all picks on that catalog and guarded by a lock, so a
catalog can be used from several threads.
"""

import random
import threading
from collections.abc import Sequence
from pathlib import Path

from ..errors import CatalogError
from .profiles import (
    DEFAULT_BACKEND,
    DEFAULT_DEVICES,
    DEFAULT_ENDPOINTS,
    BackendProfile,
    DeviceProfile,
    load_catalog_tables,
)


class EntityCatalog:
    """Fixed tables of devices, one backend and its endpoints, with random pickers."""

    def __init__(
        self,
        devices: Sequence[DeviceProfile] = DEFAULT_DEVICES,
        backend: BackendProfile = DEFAULT_BACKEND,
        endpoints: Sequence[str] = DEFAULT_ENDPOINTS,
        seed: int | None = None,
    ):
        if not devices:
            raise CatalogError("Catalog needs at least one device")
        if not endpoints:
            raise CatalogError("Catalog needs at least one endpoint")
        self.devices: tuple[DeviceProfile, ...] = tuple(devices)
        self.backend = backend
        self.endpoints: tuple[str, ...] = tuple(endpoints)
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    @classmethod
    def from_yaml(cls, path: str | Path, seed: int | None = None) -> "EntityCatalog":
        """Build a catalog from a YAML definition (see profiles.load_catalog_tables)."""
        devices, backend, endpoints = load_catalog_tables(Path(path))
        return cls(devices=devices, backend=backend, endpoints=endpoints, seed=seed)

    def _pick_index(self, size: int) -> int:
        with self._lock:
            return self._rng.randint(0, size - 1)

    def pick_device(self) -> DeviceProfile:
        """Return one device, uniformly at random."""
        return self.devices[self._pick_index(len(self.devices))]

    def pick_backend(self) -> BackendProfile:
        """Return the backend with one endpoint attached, chosen uniformly at random."""
        endpoint = self.endpoints[self._pick_index(len(self.endpoints))]
        return self.backend.with_endpoint(endpoint)

"""Simulated ATM devices, the backend service, and selection over them."""

from .entity_catalog import EntityCatalog
from .lookups import (
    CodeResolver,
    Recognized,
    Unrecognized,
    lookup_cloud_provider,
    lookup_operation_name,
    lookup_os_type,
)
from .profiles import (
    DEFAULT_BACKEND,
    DEFAULT_DEVICES,
    DEFAULT_ENDPOINTS,
    BackendProfile,
    DeviceProfile,
)

__all__ = [
    "EntityCatalog",
    "DeviceProfile",
    "BackendProfile",
    "DEFAULT_DEVICES",
    "DEFAULT_BACKEND",
    "DEFAULT_ENDPOINTS",
    "CodeResolver",
    "Recognized",
    "Unrecognized",
    "lookup_cloud_provider",
    "lookup_os_type",
    "lookup_operation_name",
]

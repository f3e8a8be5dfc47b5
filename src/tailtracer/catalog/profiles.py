"""
Simulated entity profiles and the built-in ATM scenario table.

Profiles are immutable; a fresh BackendProfile is produced per selection so the
endpoint chosen for one trace never leaks into another.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from ..errors import CatalogError


@dataclass(frozen=True)
class DeviceProfile:
    """An ATM unit that initiates calls to the backend."""

    id: int
    version: str
    name: str
    state_id: str
    serial_number: str
    isp_network: str


@dataclass(frozen=True)
class BackendProfile:
    """The backend banking service and the endpoint a single call targets."""

    version: str
    process_name: str
    os_type: str
    os_version: str
    cloud_provider: str
    cloud_region: str
    endpoint: str = ""

    def with_endpoint(self, endpoint: str) -> "BackendProfile":
        return replace(self, endpoint=endpoint)


DEFAULT_DEVICES: tuple[DeviceProfile, ...] = (
    DeviceProfile(
        id=111,
        version="v1.0",
        name="ATM-111-IL",
        state_id="IL",
        serial_number="atmxph-2022-111",
        isp_network="comcast-chicago",
    ),
    DeviceProfile(
        id=222,
        version="v1.0",
        name="ATM-222-CA",
        state_id="CA",
        serial_number="atmxph-2022-222",
        isp_network="comcast-sanfrancisco",
    ),
)

DEFAULT_BACKEND = BackendProfile(
    version="v2.5",
    process_name="accounts",
    os_type="lnx",
    os_version="4.16.10-300.fc28.x86_64",
    cloud_provider="amzn",
    cloud_region="us-east-2",
)

DEFAULT_ENDPOINTS: tuple[str, ...] = (
    "api/v2.5/balance",
    "api/v2.5/deposit",
    "api/v2.5/withdrawn",
)


_DEVICE_FIELDS = (
    "id",
    "version",
    "name",
    "state_id",
    "serial_number",
    "isp_network",
)
_BACKEND_FIELDS = (
    "version",
    "process_name",
    "os_type",
    "os_version",
    "cloud_provider",
    "cloud_region",
)


def _device_from_dict(raw: Any, index: int) -> DeviceProfile:
    if not isinstance(raw, dict):
        raise CatalogError(f"devices[{index}] must be a mapping")
    missing = [k for k in _DEVICE_FIELDS if k not in raw]
    if missing:
        raise CatalogError(f"devices[{index}] is missing: {', '.join(missing)}")
    device_id = raw["id"]
    if isinstance(device_id, bool) or not isinstance(device_id, int):
        raise CatalogError(f"devices[{index}].id must be an integer")
    kwargs = {k: str(raw[k]) for k in _DEVICE_FIELDS if k != "id"}
    return DeviceProfile(id=device_id, **kwargs)


def _backend_from_dict(raw: Any) -> BackendProfile:
    if not isinstance(raw, dict):
        raise CatalogError("backend must be a mapping")
    missing = [k for k in _BACKEND_FIELDS if k not in raw]
    if missing:
        raise CatalogError(f"backend is missing: {', '.join(missing)}")
    return BackendProfile(**{k: str(raw[k]) for k in _BACKEND_FIELDS})


def load_catalog_tables(
    path: Path,
) -> tuple[tuple[DeviceProfile, ...], BackendProfile, tuple[str, ...]]:
    """
    Load (devices, backend, endpoints) from a catalog YAML file.

    Expected shape:
      devices: [{id, version, name, state_id, serial_number, isp_network}, ...]
      backend: {version, process_name, os_type, os_version, cloud_provider, cloud_region}
      endpoints: [api/v2.5/balance, ...]
    """
    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}")
    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in catalog file {path}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {path} must contain a mapping")

    raw_devices = data.get("devices")
    if not isinstance(raw_devices, list) or not raw_devices:
        raise CatalogError("devices must be a non-empty list")
    devices = tuple(_device_from_dict(d, i) for i, d in enumerate(raw_devices))

    backend = _backend_from_dict(data.get("backend"))

    raw_endpoints = data.get("endpoints")
    if not isinstance(raw_endpoints, list) or not raw_endpoints:
        raise CatalogError("endpoints must be a non-empty list")
    endpoints = tuple(str(e) for e in raw_endpoints if isinstance(e, str) and e.strip())
    if len(endpoints) != len(raw_endpoints):
        raise CatalogError("endpoints must be non-empty strings")

    return devices, backend, endpoints

"""
Code lookups for backend metadata and ATM operation names.

Lookups return a tagged result (Recognized / Unrecognized) and never raise;
CodeResolver applies the policy for unknown codes (blank + warn once, or raise).
"""

import logging
import threading
from dataclasses import dataclass
from typing import Union

from opentelemetry.semconv._incubating.attributes.cloud_attributes import CloudProviderValues
from opentelemetry.semconv._incubating.attributes.os_attributes import OsTypeValues

from ..errors import UnrecognizedCodeError

logger = logging.getLogger(__name__)

CLOUD_PROVIDER = "cloud provider"
OS_TYPE = "OS type"
ENDPOINT = "endpoint"


@dataclass(frozen=True)
class Recognized:
    value: str


@dataclass(frozen=True)
class Unrecognized:
    kind: str
    code: str


LookupResult = Union[Recognized, Unrecognized]


_CLOUD_PROVIDERS = {
    "amzn": CloudProviderValues.AWS.value,
    "mcrsft": CloudProviderValues.AZURE.value,
    "gogl": CloudProviderValues.GCP.value,
}

_OS_TYPES = {
    "lnx": OsTypeValues.LINUX.value,
    "wndws": OsTypeValues.WINDOWS.value,
    "slrs": OsTypeValues.SOLARIS.value,
}

# Checked in order; first substring found in the endpoint wins.
_OPERATION_NAMES = (
    ("balance", "Check Balance"),
    ("deposit", "Make Deposit"),
    ("withdraw", "Fast Cash"),
)


def lookup_cloud_provider(code: str) -> LookupResult:
    """Map a provider code (amzn, mcrsft, gogl) to the cloud.provider value."""
    value = _CLOUD_PROVIDERS.get(code)
    return Recognized(value) if value is not None else Unrecognized(CLOUD_PROVIDER, code)


def lookup_os_type(code: str) -> LookupResult:
    """Map an OS code (lnx, wndws, slrs) to the os.type value."""
    value = _OS_TYPES.get(code)
    return Recognized(value) if value is not None else Unrecognized(OS_TYPE, code)


def lookup_operation_name(endpoint: str) -> LookupResult:
    """Derive the ATM-side operation name from a backend endpoint path."""
    for needle, name in _OPERATION_NAMES:
        if needle in endpoint:
            return Recognized(name)
    return Unrecognized(ENDPOINT, endpoint)


class CodeResolver:
    """
    Turn lookup results into attribute values.

    Non-strict: unknown codes resolve to "" and are logged once per (kind, code).
    Strict: unknown codes raise UnrecognizedCodeError.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._reported: set[tuple[str, str]] = set()
        self._lock = threading.Lock()

    def resolve(self, result: LookupResult) -> str:
        if isinstance(result, Recognized):
            return result.value
        if self.strict:
            raise UnrecognizedCodeError(result.kind, result.code)
        key = (result.kind, result.code)
        with self._lock:
            first = key not in self._reported
            self._reported.add(key)
        if first:
            logger.warning("Unrecognized %s code %r; using blank value", result.kind, result.code)
        return ""

    @property
    def reported(self) -> frozenset[tuple[str, str]]:
        """(kind, code) pairs that have been substituted with a blank value."""
        with self._lock:
            return frozenset(self._reported)

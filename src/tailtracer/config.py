"""
Configuration for the trace receiver and the entity catalog.

Config files live outside src/ under resource/ (resource/config/config.yaml,
resource/config/catalog.yaml). When running from source, resource/ at project
root is used. When the package is installed, set TAILTRACER_ROOT to a directory
containing config/.

Receiver settings can be overridden from the environment:
  TAILTRACER_INTERVAL             - duration between batches (e.g. 1m, 30s, 500ms)
  TAILTRACER_TRACES_PER_INTERVAL  - trace pairs generated per batch
"""

import math
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError


def get_resources_root() -> Path:
    """Return the root directory for config resources.

    Resolution order:
    1. TAILTRACER_ROOT env var (must contain config/)
    2. resource/ under directory containing pyproject.toml (when running from source)
    3. tailtracer/resources/ next to this package (when installed)
    """
    env_root = os.environ.get("TAILTRACER_ROOT")
    if env_root:
        p = Path(env_root).resolve()
        if p.is_dir():
            return p
    here = Path(__file__).resolve().parent
    for candidate in [here, *here.parents]:
        if (candidate / "pyproject.toml").is_file():
            return candidate / "resource"
    return Path(__file__).resolve().parent / "resources"


_RESOURCES_ROOT = get_resources_root()
CONFIG_PATH = _RESOURCES_ROOT / "config" / "config.yaml"
CATALOG_PATH = _RESOURCES_ROOT / "config" / "catalog.yaml"

DEFAULT_INTERVAL_SECONDS = 60.0
DEFAULT_TRACES_PER_INTERVAL = 1

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|us|ns|h|m|s)")
_UNIT_SECONDS = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 1e-3,
    "us": 1e-6,
    "ns": 1e-9,
}


def load_yaml(path: Path, default: Any = None) -> Any:
    """Load YAML file; return default on missing file or parse error."""
    if default is None:
        default = {}
    if not path.exists():
        return default
    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return default
    return data if isinstance(data, dict) else default


def parse_duration(value: Any) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) and duration strings made of one or more
    <number><unit> parts, e.g. "1m", "30s", "1m30s", "500ms".
    """
    if isinstance(value, bool):
        raise ConfigError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        text = value.strip().lower()
        if not text:
            raise ConfigError("Duration must not be empty")
        try:
            seconds = float(text)
        except ValueError:
            pos = 0
            seconds = 0.0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    raise ConfigError(f"Invalid duration: {value!r}") from None
                seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
                pos = match.end()
            if pos != len(text):
                raise ConfigError(f"Invalid duration: {value!r}") from None
    else:
        raise ConfigError(f"Invalid duration: {value!r}")
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigError(f"Duration must be positive, got {value!r}")
    return seconds


def _parse_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}") from None
    if n < 1:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return n


@dataclass(frozen=True)
class ReceiverConfig:
    """Settings owned by the host receiver."""

    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    traces_per_interval: int = DEFAULT_TRACES_PER_INTERVAL
    seed: int | None = None
    strict: bool = False


def load_receiver_config(config_path: Path | None = None) -> ReceiverConfig:
    """
    Load receiver settings from the receiver: block of config.yaml, then apply
    environment overrides. Missing file or block yields defaults.
    """
    path = config_path or CONFIG_PATH
    data = load_yaml(path)
    block = data.get("receiver") or {}
    if not isinstance(block, dict):
        raise ConfigError("receiver must be a mapping")

    interval_raw: Any = block.get("interval", DEFAULT_INTERVAL_SECONDS)
    per_interval_raw: Any = block.get("traces_per_interval", DEFAULT_TRACES_PER_INTERVAL)

    env_interval = os.environ.get("TAILTRACER_INTERVAL", "").strip()
    if env_interval:
        interval_raw = env_interval
    env_per_interval = os.environ.get("TAILTRACER_TRACES_PER_INTERVAL", "").strip()
    if env_per_interval:
        per_interval_raw = env_per_interval

    seed = block.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigError(f"seed must be an integer, got {seed!r}")

    strict = block.get("strict", False)
    if not isinstance(strict, bool):
        raise ConfigError(f"strict must be a boolean, got {strict!r}")

    return ReceiverConfig(
        interval_seconds=parse_duration(interval_raw),
        traces_per_interval=_parse_positive_int("traces_per_interval", per_interval_raw),
        seed=seed,
        strict=strict,
    )

"""
Configuration loader — reads onsystem.yml and ONSYSTEM_* env vars.

The only thing configured is which system to simulate. The file is
optional; environment variables override whatever it sets.

    simulate:
      os: sonoma          # linux | macos | <macOS release>
      arch: arm           # intel | arm
      macos_on_linux: false
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.models.system import Architecture, BaseOS, SystemContext
from onsystem.core.services.on_system import simulate_system

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "onsystem.yml"

ENV_SIMULATE_OS = "ONSYSTEM_SIMULATE_OS"
ENV_SIMULATE_ARCH = "ONSYSTEM_SIMULATE_ARCH"
ENV_SIMULATE_MACOS_ON_LINUX = "ONSYSTEM_SIMULATE_MACOS_ON_LINUX"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when onsystem configuration is invalid or missing."""


class SimulateConfig(BaseModel):
    """Simulation overrides. ``None`` means "use the host value"."""

    model_config = ConfigDict(extra="forbid")

    os: str | None = None
    arch: Architecture | None = None
    macos_on_linux: bool | None = None

    @field_validator("os")
    @classmethod
    def _known_os(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if value in (BaseOS.LINUX.value, BaseOS.MACOS.value) or value in MACOS_VERSIONS:
            return value
        raise ValueError(f"Unknown OS {value!r}; expected linux, macos, or a macOS release")


class OnSystemConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    simulate: SimulateConfig = Field(default_factory=SimulateConfig)
    source: str | None = Field(default=None, exclude=True)

    @property
    def is_simulating(self) -> bool:
        s = self.simulate
        return s.os is not None or s.arch is not None or s.macos_on_linux is not None


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for onsystem.yml starting from the given directory, walking up.

    Returns:
        Path to onsystem.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {raw!r}")


def _read_file(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading onsystem config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> OnSystemConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to onsystem.yml. If None, searches upward;
              a missing file is fine in that case.
        environ: Environment to read ONSYSTEM_* from (default: os.environ).

    Returns:
        Validated OnSystemConfig.

    Raises:
        ConfigError: If an explicit file is missing, or anything is invalid.
    """
    env = os.environ if environ is None else environ

    if path is None:
        path = find_config_file()
        data = _read_file(path) if path is not None else {}
    else:
        data = _read_file(path)

    simulate = data.get("simulate") or {}
    if not isinstance(simulate, dict):
        raise ConfigError(f"Expected a mapping under 'simulate', got {type(simulate).__name__}")
    simulate = dict(simulate)

    # Env vars win over the file
    if env.get(ENV_SIMULATE_OS):
        simulate["os"] = env[ENV_SIMULATE_OS].strip().lower()
    if env.get(ENV_SIMULATE_ARCH):
        simulate["arch"] = env[ENV_SIMULATE_ARCH].strip().lower()
    if ENV_SIMULATE_MACOS_ON_LINUX in env:
        simulate["macos_on_linux"] = _parse_bool(
            ENV_SIMULATE_MACOS_ON_LINUX, env[ENV_SIMULATE_MACOS_ON_LINUX],
        )

    data = {**data, "simulate": simulate}

    try:
        config = OnSystemConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid onsystem configuration: {e}") from e

    config.source = str(path) if path is not None else None
    logger.info(
        "Loaded onsystem config%s (simulating: %s)",
        f" from {path}" if path else "", config.is_simulating,
    )
    return config


def apply_config(config: OnSystemConfig) -> SystemContext | None:
    """Push the configured overrides into the active system context.

    Returns:
        The simulated context, or None when nothing is configured.
    """
    s = config.simulate
    if not config.is_simulating:
        return None
    return simulate_system.simulate(
        os=s.os,
        arch=s.arch,
        simulate_macos_on_linux=s.macos_on_linux,
    )

"""
System model — the context that on-system conditions are evaluated against.

A ``SystemContext`` is either detected from the host or simulated
(tests, ``--os``/``--arch`` overrides, ``onsystem.yml``). It is
read-only once built; the evaluator never mutates it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.domain.errors import SystemDetectionError
from onsystem.core.domain.macos_version import MacOSVersion


class Architecture(str, Enum):
    """CPU architecture family."""

    INTEL = "intel"
    ARM = "arm"


class BaseOS(str, Enum):
    """OS family, independent of version."""

    MACOS = "macos"
    LINUX = "linux"


class Qualifier(str, Enum):
    """Relative comparison attached to a macOS version condition."""

    OR_NEWER = "or_newer"
    OR_OLDER = "or_older"


class SystemContext(BaseModel):
    """Current (or simulated) system.

    ``os`` is ``"linux"``, a macOS release symbol (``"sonoma"``), or the
    generic ``"macos"`` when the release is not in the registry. A host
    running such a release keeps its number in ``os_version`` (``"27"``)
    so releases still compare.
    """

    model_config = ConfigDict(frozen=True)

    arch: Architecture
    os: str
    os_version: str | None = None
    simulate_macos_on_linux: bool = False

    @field_validator("os_version")
    @classmethod
    def _parsable_version(cls, value: str | None) -> str | None:
        if value is not None:
            MacOSVersion.parse(value)
        return value

    @field_validator("os")
    @classmethod
    def _known_os(cls, value: str) -> str:
        if value in (BaseOS.LINUX.value, BaseOS.MACOS.value) or value in MACOS_VERSIONS:
            return value
        raise ValueError(f"Unknown OS {value!r}; expected linux, macos, or a macOS release")

    # ── Provider interface ───────────────────────────────────────

    def current_arch(self) -> Architecture:
        return self.arch

    def current_base_os(self) -> BaseOS:
        return BaseOS.LINUX if self.os == BaseOS.LINUX.value else BaseOS.MACOS

    def current_os_version(self) -> MacOSVersion:
        """The macOS release being run or simulated.

        Raises:
            SystemDetectionError: On Linux, or when the release is neither
                registered nor known by number.
        """
        if self.os in MACOS_VERSIONS:
            return MacOSVersion.from_symbol(self.os)
        if self.os == BaseOS.MACOS.value and self.os_version:
            return MacOSVersion.parse(self.os_version)
        raise SystemDetectionError(
            f"Current system {self.os!r} has no known macOS version",
        )

    def simulating_or_running_on(self, base_os: BaseOS | str) -> bool:
        return self.current_base_os() == BaseOS(base_os)

    def simulate_macos_on_linux_enabled(self) -> bool:
        return self.simulate_macos_on_linux

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "arch": self.arch.value,
            "os": self.os,
            "base_os": self.current_base_os().value,
            "macos_version": MACOS_VERSIONS.get(self.os, self.os_version),
            "simulate_macos_on_linux": self.simulate_macos_on_linux,
        }

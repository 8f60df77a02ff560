"""
L3 Detection — host architecture and OS.

Read-only — uses the ``platform`` module only.
"""

from __future__ import annotations

import logging
import platform

from onsystem.core.data.macos_versions import symbol_for_version
from onsystem.core.domain.errors import InvalidConditionError
from onsystem.core.domain.macos_version import MacOSVersion
from onsystem.core.models.system import Architecture, BaseOS, SystemContext

logger = logging.getLogger(__name__)

_MACHINE_ARCH: dict[str, Architecture] = {
    "x86_64": Architecture.INTEL,
    "amd64": Architecture.INTEL,
    "i386": Architecture.INTEL,
    "i686": Architecture.INTEL,
    "arm64": Architecture.ARM,
    "aarch64": Architecture.ARM,
}


def detect_arch(machine: str | None = None) -> Architecture:
    """Normalise ``platform.machine()`` to an ``Architecture``.

    Raises:
        InvalidConditionError: For a machine outside the intel/arm families.
    """
    machine = (machine if machine is not None else platform.machine()).lower()
    arch = _MACHINE_ARCH.get(machine)
    if arch is None:
        raise InvalidConditionError("arch", machine, "unsupported host machine")
    return arch


def detect_os(system: str | None = None, mac_release: str | None = None) -> str:
    """Detect the host OS as ``"linux"``, a macOS symbol, or ``"macos"``.

    Anything that is not Darwin counts as Linux. A Darwin release that
    is not in the registry (too old, or newer than this package)
    falls back to the generic ``"macos"``.
    """
    system = system if system is not None else platform.system()
    if system != "Darwin":
        return BaseOS.LINUX.value

    release = mac_release if mac_release is not None else platform.mac_ver()[0]
    symbol = symbol_for_version(release) if release else None
    if symbol is None:
        logger.info("Unregistered macOS release %r; comparing by version number", release)
        return BaseOS.MACOS.value
    return symbol


def detect_macos_version(system: str | None = None, mac_release: str | None = None) -> str | None:
    """Release-level macOS version of the host (``"26.0.1"`` → ``"26"``).

    Returns:
        The version string, or None off Darwin or when it cannot be parsed.
    """
    system = system if system is not None else platform.system()
    if system != "Darwin":
        return None

    release = mac_release if mac_release is not None else platform.mac_ver()[0]
    try:
        return str(MacOSVersion.parse(release).strip_patch())
    except ValueError:
        logger.warning("Cannot parse macOS release %r", release)
        return None


def detect_system_context() -> SystemContext:
    """Build the ``SystemContext`` of the machine we are running on."""
    system = platform.system()
    release = platform.mac_ver()[0] if system == "Darwin" else ""
    context = SystemContext(
        arch=detect_arch(),
        os=detect_os(system, release),
        os_version=detect_macos_version(system, release),
    )
    logger.debug("Detected host system: %s", context.to_dict())
    return context

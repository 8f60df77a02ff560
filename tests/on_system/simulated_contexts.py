"""
Test fixtures — simulated system contexts for condition evaluation.

Each context represents a real-world machine. The evaluator reads:

    - arch  (intel/arm)
    - os  (linux, macos, or a macOS release symbol)
    - os_version  (host release number when os is the generic macos)
    - simulate_macos_on_linux  (bool)
"""

from __future__ import annotations

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.models.system import SystemContext


def _make_context(
    *,
    os: str,
    arch: str = "intel",
    os_version: str | None = None,
    macos_on_linux: bool = False,
) -> SystemContext:
    """Build a simulated system context."""
    return SystemContext(
        arch=arch, os=os, os_version=os_version, simulate_macos_on_linux=macos_on_linux,
    )


CONTEXTS: dict[str, SystemContext] = {
    "sonoma-arm": _make_context(os="sonoma", arch="arm"),
    "sonoma-intel": _make_context(os="sonoma"),
    "ventura-arm": _make_context(os="ventura", arch="arm"),
    "big-sur-intel": _make_context(os="big_sur"),
    "catalina-intel": _make_context(os="catalina"),
    "linux-intel": _make_context(os="linux"),
    "linux-arm": _make_context(os="linux", arch="arm"),
    "linux-macos-sim": _make_context(os="linux", macos_on_linux=True),
    "macos-generic": _make_context(os="macos", arch="arm"),
    # A release newer than the registry, known only by number
    "macos-unregistered": _make_context(os="macos", arch="arm", os_version="27"),
}

MACOS_CONTEXTS = {k: c for k, c in CONTEXTS.items() if c.os in MACOS_VERSIONS}
LINUX_CONTEXTS = {
    k: c for k, c in CONTEXTS.items()
    if c.os == "linux" and not c.simulate_macos_on_linux
}

# Oldest → newest
RELEASES_ASCENDING = list(reversed(MACOS_VERSIONS))

"""
Simulated system — the single source of truth for "which system are we
evaluating conditions against."

The host is detected lazily on first use. Overrides are set by
whichever entry point needs them:

    - CLI:     main.py  → apply_config() / simulate(os=..., arch=...)
    - Tests:   conftest → clear() between tests, simulated(...) per test

Module-level singleton (not a class). Overrides are expected to change
only during setup, before conditions are evaluated concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from onsystem.core.models.system import Architecture, SystemContext
from onsystem.core.services.on_system.detection import detect_system_context

logger = logging.getLogger(__name__)

_host: Optional[SystemContext] = None
_os: Optional[str] = None
_arch: Optional[Architecture] = None
_macos_on_linux: Optional[bool] = None


def host_context() -> SystemContext:
    """Return the detected host context (cached)."""
    global _host
    if _host is None:
        _host = detect_system_context()
    return _host


def simulate(
    os: str | None = None,
    arch: Architecture | str | None = None,
    simulate_macos_on_linux: bool | None = None,
) -> SystemContext:
    """Set simulation overrides. ``None`` leaves a field unchanged.

    Returns:
        The effective context after the overrides are applied.

    Raises:
        ValueError: If ``os`` or ``arch`` is not a known value.
    """
    global _os, _arch, _macos_on_linux
    new_arch = Architecture(arch) if arch is not None else _arch
    new_os = os if os is not None else _os
    new_flag = simulate_macos_on_linux if simulate_macos_on_linux is not None else _macos_on_linux

    # Validate before committing so a bad value leaves the state untouched
    _build(new_os, new_arch, new_flag)

    _os, _arch, _macos_on_linux = new_os, new_arch, new_flag
    context = get_system_context()
    logger.info("Simulating system: %s", context.to_dict())
    return context


def clear() -> None:
    """Drop all simulation overrides."""
    global _os, _arch, _macos_on_linux
    _os = _arch = _macos_on_linux = None


def is_simulating() -> bool:
    """Whether any override is active."""
    return _os is not None or _arch is not None or _macos_on_linux is not None


def get_system_context() -> SystemContext:
    """Return the effective context: overrides on top of the host."""
    if not is_simulating():
        return host_context()
    return _build(_os, _arch, _macos_on_linux)


@contextmanager
def simulated(
    os: str | None = None,
    arch: Architecture | str | None = None,
    simulate_macos_on_linux: bool | None = None,
) -> Iterator[SystemContext]:
    """Apply overrides for the duration of a ``with`` block."""
    saved = (_os, _arch, _macos_on_linux)
    try:
        yield simulate(os=os, arch=arch, simulate_macos_on_linux=simulate_macos_on_linux)
    finally:
        _restore(*saved)


def _restore(
    os: Optional[str],
    arch: Optional[Architecture],
    macos_on_linux: Optional[bool],
) -> None:
    global _os, _arch, _macos_on_linux
    _os, _arch, _macos_on_linux = os, arch, macos_on_linux


def _build(
    os: Optional[str],
    arch: Optional[Architecture],
    macos_on_linux: Optional[bool],
) -> SystemContext:
    # Only touch the host when a field is actually missing, so fully
    # simulated contexts work on unsupported machines too.
    host = host_context() if os is None or arch is None else None
    return SystemContext(
        arch=arch if arch is not None else host.arch,
        os=os if os is not None else host.os,
        # The host release number only describes the host OS
        os_version=host.os_version if os is None else None,
        simulate_macos_on_linux=bool(macos_on_linux),
    )

"""
L0 Data — macOS release registry.

Maps each release symbol (as used in ``on_<symbol>`` declarations) to
its version number. Ordered newest first.
"""

from __future__ import annotations

MACOS_VERSIONS: dict[str, str] = {
    "tahoe": "26",
    "sequoia": "15",
    "sonoma": "14",
    "ventura": "13",
    "monterey": "12",
    "big_sur": "11",
    "catalina": "10.15",
    "mojave": "10.14",
    "high_sierra": "10.13",
    "sierra": "10.12",
    "el_capitan": "10.11",
}

# Reverse lookup: "10.15" → "catalina"
_SYMBOL_BY_VERSION = {v: k for k, v in MACOS_VERSIONS.items()}


def is_macos_version(symbol: str) -> bool:
    """Whether ``symbol`` names a known macOS release."""
    return symbol in MACOS_VERSIONS


def symbol_for_version(version: str) -> str | None:
    """Map a host version string to its release symbol.

    From Big Sur on, the major number alone identifies the release
    (``"14.5"`` → ``"sonoma"``). Before that, major.minor does
    (``"10.15.7"`` → ``"catalina"``).

    Returns:
        The release symbol, or None if the version is not registered.
    """
    parts = version.strip().split(".")
    if not parts or not parts[0].isdigit():
        return None
    if parts[0] == "10":
        if len(parts) < 2:
            return None
        return _SYMBOL_BY_VERSION.get(f"10.{parts[1]}")
    return _SYMBOL_BY_VERSION.get(parts[0])

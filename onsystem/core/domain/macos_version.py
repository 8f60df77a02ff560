"""
L1 Domain — macOS version value type (pure).

Versions compare numerically component by component, so
``10.15 < 11 < 14``. Trailing zero components are ignored for
equality and ordering (``14`` == ``14.0``).
No I/O, no subprocess.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.domain.errors import InvalidConditionError


def _parse_parts(text: str) -> tuple[int, ...]:
    parts = tuple(int(x) for x in text.strip().lstrip("v").split("."))
    # Drop trailing zeros so that 14 and 14.0 compare equal
    while len(parts) > 1 and parts[-1] == 0:
        parts = parts[:-1]
    return parts


@dataclass(frozen=True, order=True)
class MacOSVersion:
    """An ordered macOS release number."""

    parts: tuple[int, ...]
    text: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> MacOSVersion:
        """Parse a dotted version string like ``"10.15.7"``.

        Raises:
            ValueError: If ``text`` is not a dotted version.
        """
        try:
            parts = _parse_parts(text)
        except ValueError as e:
            raise ValueError(f"Not a macOS version: {text!r}") from e
        return cls(parts=parts, text=text.strip())

    @classmethod
    def from_symbol(cls, symbol: str) -> MacOSVersion:
        """Look up a release symbol such as ``"big_sur"``.

        Raises:
            InvalidConditionError: If the symbol is not registered.
        """
        version = MACOS_VERSIONS.get(symbol)
        if version is None:
            raise InvalidConditionError("OS", symbol)
        return cls.parse(version)

    @property
    def major(self) -> int:
        return self.parts[0]

    def strip_patch(self) -> MacOSVersion:
        """Drop components below the release level.

        ``14.5`` → ``14`` and ``10.15.7`` → ``10.15``.
        """
        keep = 2 if self.major == 10 else 1
        parts = self.parts[:keep]
        return MacOSVersion(parts=parts, text=".".join(str(p) for p in parts))

    def __str__(self) -> str:
        return self.text or ".".join(str(p) for p in self.parts)

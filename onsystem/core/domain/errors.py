"""
L1 Domain — errors raised while evaluating on-system conditions.
"""

from __future__ import annotations


class InvalidConditionError(ValueError):
    """Raised when a declared condition is outside its closed domain.

    These are authoring errors in the manifest (an unknown arch, an
    unknown macOS symbol, a bad ``or_*`` qualifier, a non-Linux first
    argument to ``on_system``). They are never retried or defaulted.
    """

    def __init__(self, kind: str, condition: object, reason: str = "") -> None:
        self.kind = kind
        self.condition = condition
        self.reason = reason
        message = f"Invalid {kind} condition: {condition!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class SystemDetectionError(RuntimeError):
    """Raised when the current system's macOS version cannot be determined.

    The manifest is fine; the host (or the simulated context) does not
    carry enough information to compare releases.
    """

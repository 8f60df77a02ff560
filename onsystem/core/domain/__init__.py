"""
L1 Domain — ``__init__.py`` re-exports the pure domain types.

No subprocess calls, no filesystem access, no environment reads.
"""

from onsystem.core.domain.errors import (  # noqa: F401
    InvalidConditionError,
    SystemDetectionError,
)
from onsystem.core.domain.macos_version import MacOSVersion  # noqa: F401

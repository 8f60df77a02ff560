"""
L0 Data — static registries. No logic beyond lookups.
"""

from onsystem.core.data.macos_versions import (  # noqa: F401
    MACOS_VERSIONS,
    is_macos_version,
    symbol_for_version,
)

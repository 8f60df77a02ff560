"""
Domain models — Pydantic types for system conditions.

    from onsystem.core.models import Architecture, BaseOS, Qualifier, SystemContext
"""

from onsystem.core.models.system import (
    Architecture,
    BaseOS,
    Qualifier,
    SystemContext,
)

__all__ = [
    "Architecture",
    "BaseOS",
    "Qualifier",
    "SystemContext",
]

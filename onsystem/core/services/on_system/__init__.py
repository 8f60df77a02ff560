"""
On-system conditions — package re-exports.

    from onsystem.core.services.on_system import os_condition_met, OnSystem

Layers: detection (host probe) → simulate_system (active context) →
condition (evaluator) → dispatch (manifest declarations).
"""

from onsystem.core.services.on_system.condition import (  # noqa: F401
    ARCH_OPTIONS,
    BASE_OS_OPTIONS,
    arch_condition_met,
    base_os_condition_met,
    condition_from_declaration,
    os_condition_met,
    parse_macos_spec,
    system_condition_met,
)
from onsystem.core.services.on_system.dispatch import (  # noqa: F401
    ConditionKind,
    Declaration,
    ManifestContext,
    OnSystem,
    SystemSupport,
    build_declaration_table,
    condition_met,
    declaration_table,
)
from onsystem.core.services.on_system.simulate_system import (  # noqa: F401
    get_system_context,
    simulate,
    simulated,
)

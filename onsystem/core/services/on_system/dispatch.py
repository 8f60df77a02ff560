"""
L4 Declarations — ``on_<condition>`` blocks for package manifests.

A manifest declares blocks such as::

    dsl = OnSystem(ManifestContext())
    dsl.on_arm(lambda: ...)
    dsl.on_big_sur(lambda: ..., "or_newer")
    dsl.on_system("linux", macos="catalina_or_older", block=lambda: ...)

Each block runs only when its condition holds for the current (or
simulated) system. The set of available declarations is fixed when the
table is built, one entry per arch, base OS and macOS release, and
every entry carries its condition tag so nothing is parsed at
evaluation time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.domain.errors import InvalidConditionError
from onsystem.core.models.system import Architecture, BaseOS, Qualifier, SystemContext
from onsystem.core.services.on_system.condition import (
    DECLARATION_PREFIX,
    arch_condition_met,
    base_os_condition_met,
    condition_from_declaration,
    os_condition_met,
    system_condition_met,
)

logger = logging.getLogger(__name__)

SYSTEM_DECLARATION = "on_system"


class ConditionKind(str, Enum):
    """Which axis a declaration tests."""

    ARCH = "arch"
    BASE_OS = "base_os"
    MACOS_VERSION = "macos_version"
    SYSTEM = "system"


class SystemSupport(str, Enum):
    """Which declarations a manifest type offers.

    ``MACOS_ONLY`` manifests get arch and macOS-release blocks but no
    ``on_macos`` / ``on_linux`` / ``on_system``.
    """

    MACOS_AND_LINUX = "macos_and_linux"
    MACOS_ONLY = "macos_only"


@dataclass(frozen=True)
class Declaration:
    """One ``on_<condition>`` entry in the declaration table."""

    name: str
    kind: ConditionKind
    condition: str


def _declaration(kind: ConditionKind, condition: str) -> Declaration:
    return Declaration(name=f"{DECLARATION_PREFIX}{condition}", kind=kind, condition=condition)


def build_declaration_table(
    support: SystemSupport = SystemSupport.MACOS_AND_LINUX,
) -> dict[str, Declaration]:
    """Build the ``name → Declaration`` table for a manifest type."""
    entries = [_declaration(ConditionKind.ARCH, a.value) for a in Architecture]

    if support == SystemSupport.MACOS_AND_LINUX:
        entries += [_declaration(ConditionKind.BASE_OS, b.value) for b in BaseOS]
        entries.append(Declaration(
            name=SYSTEM_DECLARATION,
            kind=ConditionKind.SYSTEM,
            condition=condition_from_declaration(SYSTEM_DECLARATION),
        ))

    entries += [_declaration(ConditionKind.MACOS_VERSION, v) for v in MACOS_VERSIONS]
    return {d.name: d for d in entries}


_TABLES: dict[SystemSupport, dict[str, Declaration]] = {
    support: build_declaration_table(support) for support in SystemSupport
}


def declaration_table(support: SystemSupport) -> dict[str, Declaration]:
    """Return the prebuilt table for ``support``."""
    return _TABLES[SystemSupport(support)]


def condition_met(
    declaration: Declaration,
    qualifier: Qualifier | str | None = None,
    context: SystemContext | None = None,
    *,
    macos: str | None = None,
) -> bool:
    """Route a declaration to its evaluator.

    Args:
        declaration: Table entry being evaluated.
        qualifier: ``or_newer`` / ``or_older`` for macOS-release entries.
        context: System to evaluate against (default: active context).
        macos: macOS spec for the ``on_system`` entry.

    Raises:
        InvalidConditionError: If the condition or its arguments are malformed.
    """
    if declaration.kind == ConditionKind.ARCH:
        return arch_condition_met(declaration.condition, context)
    if declaration.kind == ConditionKind.BASE_OS:
        return base_os_condition_met(declaration.condition, context)
    if declaration.kind == ConditionKind.MACOS_VERSION:
        return os_condition_met(declaration.condition, qualifier, context)
    if macos is None:
        raise InvalidConditionError("system", None, "`on_system` requires a macos spec")
    return system_condition_met(BaseOS.LINUX, macos, context)


@dataclass
class ManifestContext:
    """Per-manifest bookkeeping while its declarations are evaluated.

    ``on_system_blocks_exist`` is set as soon as any ``on_*`` block is
    declared, met or not. ``called_in_on_system_block`` is True only
    while a block body is running.
    """

    support: SystemSupport = SystemSupport.MACOS_AND_LINUX
    on_system_blocks_exist: bool = False
    called_in_on_system_block: bool = False
    evaluated: list[str] = field(default_factory=list)  # blocks that ran

    def __post_init__(self) -> None:
        self.support = SystemSupport(self.support)


class OnSystem:
    """Declaration surface bound to one manifest."""

    def __init__(
        self,
        manifest: ManifestContext | None = None,
        context: SystemContext | None = None,
    ) -> None:
        self.manifest = manifest if manifest is not None else ManifestContext()
        self.context = context
        self._table = declaration_table(self.manifest.support)

    @property
    def declarations(self) -> list[str]:
        """Names available to this manifest."""
        return sorted(self._table)

    def declare(
        self,
        name: str,
        block: Callable[[], Any],
        qualifier: Qualifier | str | None = None,
    ) -> Any:
        """Run ``block`` if the ``name`` condition holds.

        Returns:
            The block's result, or None when the condition is not met.

        Raises:
            InvalidConditionError: If ``name`` is not available to this
                manifest, or the qualifier is malformed.
        """
        declaration = self._lookup(name)
        if declaration.kind == ConditionKind.SYSTEM:
            raise InvalidConditionError(
                "system", name, "use on_system(linux, macos=..., block=...)",
            )
        if qualifier is not None and declaration.kind != ConditionKind.MACOS_VERSION:
            raise InvalidConditionError(
                "OS `or_*`", qualifier, f"`{name}` does not take a qualifier",
            )

        self.manifest.on_system_blocks_exist = True
        if not condition_met(declaration, qualifier, self.context):
            return None
        return self._run(declaration, block)

    def on_system(
        self,
        linux: BaseOS | str,
        *,
        macos: str,
        block: Callable[[], Any],
    ) -> Any:
        """Run ``block`` on Linux or when the ``macos`` spec holds."""
        declaration = self._lookup(SYSTEM_DECLARATION)
        self.manifest.on_system_blocks_exist = True
        if not system_condition_met(linux, macos, self.context):
            return None
        return self._run(declaration, block)

    def _lookup(self, name: str) -> Declaration:
        declaration = self._table.get(name)
        if declaration is None:
            raise InvalidConditionError(
                "declaration", name,
                f"not available for {self.manifest.support.value} manifests",
            )
        return declaration

    def _run(self, declaration: Declaration, block: Callable[[], Any]) -> Any:
        logger.debug("Running %s block", declaration.name)
        self.manifest.evaluated.append(declaration.name)
        self.manifest.called_in_on_system_block = True
        try:
            return block()
        finally:
            self.manifest.called_in_on_system_block = False

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached for attributes not found normally: on_arm, on_sonoma, ...
        if name.startswith("_") or name == SYSTEM_DECLARATION:
            raise AttributeError(name)
        table = self.__dict__.get("_table", {})
        if name not in table:
            raise AttributeError(
                f"{type(self).__name__!s} has no declaration {name!r}"
            )

        def _declared(block: Callable[[], Any], qualifier: Qualifier | str | None = None) -> Any:
            return self.declare(name, block, qualifier)

        _declared.__name__ = name
        return _declared

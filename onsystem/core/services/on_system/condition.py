"""
L3 Condition evaluation — does an on-system condition hold?

Evaluates arch, base-OS and macOS-version conditions against a
``SystemContext``. Pure: reads the context, never changes it.
When no context is passed, the active (possibly simulated) one is used.
"""

from __future__ import annotations

import logging

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.domain.errors import InvalidConditionError
from onsystem.core.domain.macos_version import MacOSVersion
from onsystem.core.models.system import Architecture, BaseOS, Qualifier, SystemContext
from onsystem.core.services.on_system import simulate_system

logger = logging.getLogger(__name__)

ARCH_OPTIONS: tuple[str, ...] = tuple(a.value for a in Architecture)
BASE_OS_OPTIONS: tuple[str, ...] = tuple(b.value for b in BaseOS)
QUALIFIER_OPTIONS: tuple[str, ...] = tuple(q.value for q in Qualifier)

DECLARATION_PREFIX = "on_"


def _context(context: SystemContext | None) -> SystemContext:
    return context if context is not None else simulate_system.get_system_context()


def _value(name: object) -> object:
    """Enum member → its string value; anything else unchanged."""
    return name.value if isinstance(name, (Architecture, BaseOS, Qualifier)) else name


def arch_condition_met(
    arch: Architecture | str,
    context: SystemContext | None = None,
) -> bool:
    """Whether the current architecture is ``arch``.

    Raises:
        InvalidConditionError: If ``arch`` is not ``intel`` or ``arm``.
    """
    arch = _value(arch)
    if arch not in ARCH_OPTIONS:
        raise InvalidConditionError("arch", arch)

    ctx = _context(context)
    met = Architecture(arch) == ctx.current_arch()
    logger.debug("arch condition %s → %s (current: %s)", arch, met, ctx.arch.value)
    return met


def base_os_condition_met(
    base_os: BaseOS | str,
    context: SystemContext | None = None,
) -> bool:
    """Whether the system is running or simulating ``base_os``.

    Honours simulate-macOS-on-Linux the same way ``os_condition_met`` does.

    Raises:
        InvalidConditionError: If ``base_os`` is not ``macos`` or ``linux``.
    """
    base_os = _value(base_os)
    if base_os not in BASE_OS_OPTIONS:
        raise InvalidConditionError("base OS", base_os)
    return os_condition_met(base_os, context=context)


def os_condition_met(
    os_name: BaseOS | str,
    qualifier: Qualifier | str | None = None,
    context: SystemContext | None = None,
) -> bool:
    """Whether an OS condition (base OS or macOS release) holds.

    Precedence:
        1. simulate-macOS-on-Linux: ``linux`` is never met, ``macos`` and
           every macOS release always are.
        2. ``macos`` / ``linux`` → base-OS check.
        3. Unknown release symbol or qualifier → ``InvalidConditionError``.
        4. Running or simulating Linux → not met.
        5. Compare releases: ``or_newer`` is ``>=``, ``or_older`` is ``<=``,
           no qualifier is ``==``.

    Args:
        os_name: ``"macos"``, ``"linux"``, or a release symbol such as
                 ``"big_sur"``.
        qualifier: ``"or_newer"``, ``"or_older"``, or ``None``.
        context: System to evaluate against (default: active context).

    Raises:
        InvalidConditionError: For an unknown OS name or qualifier.
        SystemDetectionError: If the current macOS release is unknown.
    """
    os_name = _value(os_name)
    qualifier = _value(qualifier)
    ctx = _context(context)

    if ctx.simulate_macos_on_linux_enabled():
        if os_name == BaseOS.LINUX.value:
            logger.debug("OS condition linux → False (simulating macOS on Linux)")
            return False
        if os_name == BaseOS.MACOS.value or os_name in MACOS_VERSIONS:
            logger.debug("OS condition %s → True (simulating macOS on Linux)", os_name)
            return True

    if os_name in BASE_OS_OPTIONS:
        met = ctx.simulating_or_running_on(os_name)
        logger.debug("base OS condition %s → %s (current: %s)", os_name, met, ctx.os)
        return met

    if os_name not in MACOS_VERSIONS:
        raise InvalidConditionError("OS", os_name)

    if qualifier is not None and qualifier not in QUALIFIER_OPTIONS:
        raise InvalidConditionError("OS `or_*`", qualifier)

    if ctx.simulating_or_running_on(BaseOS.LINUX):
        logger.debug("OS condition %s → False (running on Linux)", os_name)
        return False

    requested = MacOSVersion.from_symbol(os_name)
    current = ctx.current_os_version()

    if qualifier == Qualifier.OR_NEWER.value:
        met = current >= requested
    elif qualifier == Qualifier.OR_OLDER.value:
        met = current <= requested
    else:
        met = current == requested

    logger.debug(
        "OS condition %s%s → %s (current: %s)",
        os_name, f" {qualifier}" if qualifier else "", met, ctx.os,
    )
    return met


def condition_from_declaration(name: str) -> str:
    """Strip the ``on_`` prefix: ``"on_big_sur"`` → ``"big_sur"``."""
    if name.startswith(DECLARATION_PREFIX):
        return name[len(DECLARATION_PREFIX):]
    return name


def parse_macos_spec(spec: str) -> tuple[str, str | None]:
    """Split a macOS spec into release symbol and qualifier.

    ``"big_sur_or_newer"`` → ``("big_sur", "or_newer")``
    ``"sonoma"``           → ``("sonoma", None)``

    Pure split: the qualifier is validated by ``os_condition_met``, after
    the simulate-macOS-on-Linux short-circuit.
    """
    spec = str(_value(spec))
    if "_or_" not in spec:
        return spec, None

    version, _, rest = spec.partition("_or_")
    return version, f"or_{rest}"


def system_condition_met(
    linux: BaseOS | str,
    macos: str,
    context: SystemContext | None = None,
) -> bool:
    """Composite check: the macOS spec holds, or the system is Linux.

    Args:
        linux: Must be ``"linux"``; the only non-macOS branch supported.
        macos: Release symbol, optionally suffixed with ``_or_newer`` /
               ``_or_older`` (e.g. ``"big_sur_or_newer"``).

    Raises:
        InvalidConditionError: If ``linux`` is anything but ``"linux"``,
            or ``macos`` is not a valid spec.
    """
    if _value(linux) != BaseOS.LINUX.value:
        raise InvalidConditionError(
            "system", linux, "the first argument to `on_system` must be `linux`",
        )

    ctx = _context(context)
    os_version, qualifier = parse_macos_spec(macos)
    return os_condition_met(os_version, qualifier, ctx) or os_condition_met(
        BaseOS.LINUX, context=ctx,
    )

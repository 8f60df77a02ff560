"""
CLI commands for evaluating on-system conditions.

Thin wrappers over ``onsystem.core.services.on_system``.

Exit codes: 0 = condition met, 1 = not met, 2 = invalid condition.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from typing import Any

import click

from onsystem.core.data.macos_versions import MACOS_VERSIONS
from onsystem.core.models.system import Architecture, BaseOS, SystemContext

EXIT_MET = 0
EXIT_NOT_MET = 1
EXIT_INVALID = 2

OS_CHOICES = [BaseOS.LINUX.value, BaseOS.MACOS.value, *MACOS_VERSIONS]
ARCH_CHOICES = [a.value for a in Architecture]


def simulation_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Add --os / --arch / --simulate-macos-on-linux to a command."""
    fn = click.option(
        "--simulate-macos-on-linux",
        "macos_on_linux",
        is_flag=True,
        help="Treat every macOS condition as met and linux as not met.",
    )(fn)
    fn = click.option(
        "--arch", "arch", type=click.Choice(ARCH_CHOICES), default=None,
        help="Simulate this architecture.",
    )(fn)
    fn = click.option(
        "--os", "os_name", type=click.Choice(OS_CHOICES), default=None,
        help="Simulate this OS (linux, macos, or a macOS release).",
    )(fn)
    return fn


def _apply_simulation(
    os_name: str | None,
    arch: str | None,
    macos_on_linux: bool | None,
) -> SystemContext:
    from onsystem.core.services.on_system import simulate_system

    # An unset flag must not override a configured simulate_macos_on_linux
    macos_on_linux = True if macos_on_linux else None
    if os_name is None and arch is None and macos_on_linux is None:
        return simulate_system.get_system_context()
    return simulate_system.simulate(
        os=os_name, arch=arch, simulate_macos_on_linux=macos_on_linux,
    )


def _report(
    label: str,
    met: bool,
    context: SystemContext,
    as_json: bool,
    extra: dict | None = None,
) -> None:
    if as_json:
        payload = {"condition": label, "met": met, **(extra or {}), "context": context.to_dict()}
        click.echo(json.dumps(payload, indent=2))
    elif met:
        click.secho(f"✅ {label}: met", fg="green")
    else:
        click.secho(f"❌ {label}: not met", fg="yellow")
    sys.exit(EXIT_MET if met else EXIT_NOT_MET)


def _invalid(error: Exception, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps({"error": str(error)}, indent=2))
    else:
        click.secho(f"❌ {error}", fg="red", err=True)
    sys.exit(EXIT_INVALID)


# ── check ───────────────────────────────────────────────────────


@click.command()
@click.argument("condition")
@click.option("--or-newer", is_flag=True, help="Also met on newer macOS releases.")
@click.option("--or-older", is_flag=True, help="Also met on older macOS releases.")
@simulation_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def check(
    condition: str,
    or_newer: bool,
    or_older: bool,
    os_name: str | None,
    arch: str | None,
    macos_on_linux: bool | None,
    as_json: bool,
) -> None:
    """Evaluate one condition: an arch, a base OS, or a macOS release.

    CONDITION may carry the on_ prefix (on_arm) or an embedded
    qualifier (big_sur_or_newer).
    """
    from onsystem.core.domain.errors import InvalidConditionError, SystemDetectionError
    from onsystem.core.services.on_system.condition import (
        condition_from_declaration,
        parse_macos_spec,
    )
    from onsystem.core.services.on_system.dispatch import (
        SYSTEM_DECLARATION,
        ConditionKind,
        SystemSupport,
        condition_met,
        declaration_table,
    )

    if or_newer and or_older:
        raise click.UsageError("--or-newer and --or-older are mutually exclusive.")
    qualifier = "or_newer" if or_newer else "or_older" if or_older else None

    try:
        context = _apply_simulation(os_name, arch, macos_on_linux)
        name = condition_from_declaration(condition.strip().lower())
        if "_or_" in name:
            if qualifier is not None:
                raise click.UsageError("Use either --or-newer/--or-older or an _or_ suffix, not both.")
            name, parsed = parse_macos_spec(name)
            qualifier = parsed

        table = declaration_table(SystemSupport.MACOS_AND_LINUX)
        declaration = table.get(f"on_{name}")
        if declaration is None or declaration.name == SYSTEM_DECLARATION:
            raise InvalidConditionError("OS", name)
        if qualifier is not None and declaration.kind != ConditionKind.MACOS_VERSION:
            raise InvalidConditionError(
                "OS `or_*`", qualifier, f"`{name}` does not take a qualifier",
            )

        met = condition_met(declaration, qualifier, context)
    except (InvalidConditionError, SystemDetectionError) as e:
        _invalid(e, as_json)
        return

    label = f"{name} {qualifier}" if qualifier else name
    _report(label, met, context, as_json, {"qualifier": qualifier})


# ── system ──────────────────────────────────────────────────────


@click.command("system")
@click.option("--macos", "macos_spec", required=True,
              help="macOS release, optionally with _or_newer/_or_older (e.g. big_sur_or_newer).")
@click.option("--linux", "linux", default=BaseOS.LINUX.value, show_default=True,
              help="Non-macOS branch; only 'linux' is supported.")
@simulation_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def system_cmd(
    macos_spec: str,
    linux: str,
    os_name: str | None,
    arch: str | None,
    macos_on_linux: bool | None,
    as_json: bool,
) -> None:
    """Evaluate on_system: met on Linux, or when the macOS spec holds."""
    from onsystem.core.domain.errors import InvalidConditionError, SystemDetectionError
    from onsystem.core.services.on_system.condition import system_condition_met

    try:
        context = _apply_simulation(os_name, arch, macos_on_linux)
        met = system_condition_met(linux, macos_spec, context)
    except (InvalidConditionError, SystemDetectionError) as e:
        _invalid(e, as_json)
        return

    _report(f"on_system({linux}, macos: {macos_spec})", met, context, as_json)

"""
onsystem — CLI entrypoint.

Usage:
    onsystem --help
    onsystem context
    onsystem check arm
    onsystem check big_sur --or-newer --os sonoma
    onsystem system --macos catalina_or_older
    onsystem versions
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from onsystem import __version__
from onsystem.core.observability.logging_config import resolve_level, setup_logging_from_env
from onsystem.ui.cli.conditions import check, system_cmd


@click.group()
@click.version_option(version=__version__, prog_name="onsystem")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to onsystem.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """onsystem — evaluate OS/architecture conditions for package manifests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    from onsystem.core.config.loader import ConfigError, apply_config, load_config

    try:
        config = load_config(ctx.obj["config_path"])
        apply_config(config)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)
    ctx.obj["config"] = config


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def context(ctx: click.Context, as_json: bool) -> None:
    """Show the system that conditions are evaluated against."""
    from onsystem.core.domain.errors import InvalidConditionError
    from onsystem.core.services.on_system import simulate_system

    try:
        system = simulate_system.get_system_context()
    except InvalidConditionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    result = {**system.to_dict(), "simulated": simulate_system.is_simulating()}
    config = ctx.obj.get("config")
    if config is not None and config.source:
        result["config"] = config.source

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    click.secho("\n🖥️  System context", fg="cyan", bold=True)
    if result["simulated"]:
        click.secho("   (simulated)", fg="yellow")
    click.echo(f"   Arch:     {result['arch']}")
    click.echo(f"   Base OS:  {result['base_os']}")
    if result["base_os"] == "macos":
        version = result["macos_version"] or "unknown"
        click.echo(f"   Release:  {result['os']} ({version})")
    if result["simulate_macos_on_linux"]:
        click.echo("   Simulating macOS on Linux: yes")
    if "config" in result and not ctx.obj.get("quiet"):
        click.echo(f"   Config:   {result['config']}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def versions(as_json: bool) -> None:
    """List known macOS releases, newest first."""
    from onsystem.core.data.macos_versions import MACOS_VERSIONS

    if as_json:
        click.echo(json.dumps(
            [{"symbol": s, "version": v} for s, v in MACOS_VERSIONS.items()],
            indent=2,
        ))
        return

    for symbol, version in MACOS_VERSIONS.items():
        click.echo(f"{symbol:<12} {version}")


cli.add_command(check)
cli.add_command(system_cmd)


def main() -> None:
    """Console-script entry point."""
    cli()


if __name__ == "__main__":
    main()

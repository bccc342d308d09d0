"""
CLI interface for FlagGate.

Inspect a definitions file against a platform level and application version,
evaluate single rules, or serve the debug panel.
"""
from pathlib import Path
from typing import Optional

import click

from flaggate.config import Settings, configure_logging, get_settings
from flaggate.engine.conditions import LevelEvaluator, VersionEvaluator
from flaggate.errors import CacheLoadError
from flaggate.features import FlagRegistry, JsonFileDefinitionLoader


def _yes_no(value: Optional[bool]) -> str:
    if value is None:
        return "-"
    return "yes" if value else "no"


def build_registry(app_settings: Settings, definitions_file: Optional[Path]) -> FlagRegistry:
    """Create a registry seeded from a definitions file instead of the cache."""
    registry = FlagRegistry(settings=app_settings.model_copy(update={"cache_enabled": False}))
    if definitions_file is not None:
        try:
            registry.save_many(JsonFileDefinitionLoader(definitions_file).load())
        except CacheLoadError as e:
            raise click.ClickException(e.message)
    return registry


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL for this run",
)
@click.pass_context
def cli(ctx, log_level: Optional[str]):
    """FlagGate - runtime feature flags gated by platform level and app version"""
    overrides = {"log_level": log_level} if log_level else {}
    ctx.obj = get_settings(**overrides)
    configure_logging(ctx.obj)


@cli.command()
@click.argument(
    "definitions_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--level", type=int, default=None, help="Platform level to check")
@click.option("--version", "app_version", default=None, help="Application version to check")
@click.pass_obj
def check(
    app_settings: Settings,
    definitions_file: Path,
    level: Optional[int],
    app_version: Optional[str],
):
    """Show every flag in a definitions file and whether it is supported."""
    registry = build_registry(app_settings, definitions_file)

    level = level if level is not None else app_settings.platform_level
    app_version = app_version or app_settings.host_version

    definitions = registry.get_all()
    if not definitions:
        click.echo("No features available")
        return

    click.echo(f"\nFeatures ({len(definitions)}), level={level}, version={app_version}")
    click.echo("-" * 70)
    for definition in definitions:
        level_ok = (
            registry.is_supported_level(definition.name, level) if level is not None else None
        )
        version_ok = (
            registry.is_supported_version(definition.name, app_version)
            if app_version is not None
            else None
        )
        status_icon = "✓" if definition.enabled else "○"
        click.echo(f"{status_icon} {definition.name}")
        click.echo(f"    enabled:   {_yes_no(definition.enabled)}")
        click.echo(f"    levels:    {definition.condition.supported_levels or 'any'}")
        click.echo(f"    versions:  {definition.condition.supported_versions or 'any'}")
        click.echo(f"    supported: level={_yes_no(level_ok)} version={_yes_no(version_ok)}")

    click.echo(
        f"\n{len(registry.get_enabled())} enabled, {len(registry.get_disabled())} disabled"
    )


@cli.command("eval-level")
@click.argument("rule")
@click.argument("level", type=int)
def eval_level(rule: str, level: int):
    """Evaluate one platform level RULE against LEVEL."""
    click.echo("true" if LevelEvaluator().evaluate(rule, level) else "false")


@cli.command("eval-version")
@click.argument("rule")
@click.argument("app_version", metavar="VERSION")
def eval_version(rule: str, app_version: str):
    """Evaluate one application version RULE against VERSION."""
    click.echo("true" if VersionEvaluator().evaluate(rule, app_version) else "false")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.option(
    "--definitions",
    "definitions_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file of definitions to register at start-up",
)
@click.pass_obj
def serve(app_settings: Settings, host: str, port: int, definitions_file: Optional[Path]):
    """Run the debug panel HTTP server."""
    import uvicorn

    from flaggate.main import create_app

    if definitions_file is not None:
        registry = build_registry(app_settings, definitions_file)
    else:
        registry = FlagRegistry(settings=app_settings)

    click.echo(f"Serving {app_settings.app_name} on http://{host}:{port}")
    uvicorn.run(create_app(registry, app_settings), host=host, port=port)


if __name__ == "__main__":
    cli()

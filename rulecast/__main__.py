import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from rulecast.agents.catalog import AgentCatalog, PathEnvironment
from rulecast.config.loader import load_config
from rulecast.engine import SyncEngine
from rulecast.errors import RulecastError
from rulecast.tui.renderers import SyncConsoleUI


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[
            RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
        ],
    )


def _engine_from_obj(obj: Dict[str, Any]) -> SyncEngine:
    try:
        config = load_config(path=obj["config_path"], project_root=obj["project_root"])
    except RulecastError as exc:
        raise click.ClickException(str(exc))
    catalog = AgentCatalog(environment=obj["environment"])
    return SyncEngine(config, catalog=catalog)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to rulecast.yaml.",
)
@click.option(
    "--project-paths",
    is_flag=True,
    default=False,
    help="Keep home-relative agent paths inside the project.",
)
@click.option("-v", "--verbose", is_flag=True, default=False)
@click.pass_context
def cli(
    ctx: click.Context, config_path: Optional[Path], project_paths: bool, verbose: bool
) -> None:
    """Distribute agent rules from one source of truth."""
    _configure_logging(verbose)
    ctx.obj = {
        "config_path": config_path,
        "project_root": None if config_path else Path.cwd(),
        "environment": PathEnvironment.PROJECT if project_paths else PathEnvironment.HOME,
    }


@cli.command(help="Distribute rules, directories and MCP files; prune stale output.")
@click.pass_obj
def sync(obj: Dict[str, Any]) -> None:
    ui = SyncConsoleUI(Console())
    engine = _engine_from_obj(obj)
    try:
        result = asyncio.run(engine.sync())
    except RulecastError as exc:
        raise click.ClickException(str(exc))
    ui.render_sync_result(result)


@cli.command(help="Remove every generated file and the .gitignore block.")
@click.pass_obj
def clean(obj: Dict[str, Any]) -> None:
    ui = SyncConsoleUI(Console())
    engine = _engine_from_obj(obj)
    ui.render_clean(engine.clean())


@cli.command(help="List every path the configuration generates.")
@click.pass_obj
def paths(obj: Dict[str, Any]) -> None:
    ui = SyncConsoleUI(Console())
    engine = _engine_from_obj(obj)
    ui.render_paths(engine.collect_generated_paths())


@cli.command(help="Validate configuration and rule sources.")
@click.pass_obj
def validate(obj: Dict[str, Any]) -> None:
    ui = SyncConsoleUI(Console())
    engine = _engine_from_obj(obj)
    missing = engine.missing_sources()
    ui.render_validation(missing)
    if missing:
        raise click.exceptions.Exit(1)


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

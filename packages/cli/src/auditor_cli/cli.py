"""CLI entry point for auditor.

Commands:
  show       — load a file's review state and comments and print them
  mark       — label a line range Reviewed / Modified / Ignored, or clear it
  transform  — ask the service to recompute a file's classification
  comment    — add, list and delete line comments
  info       — overview of every file the service knows about
  priority   — set a file's audit priority
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console

from auditor_cli.commands.comment import comment_group
from auditor_cli.commands.info import info_cmd, priority_cmd
from auditor_cli.commands.mark import mark_cmd, transform_cmd
from auditor_cli.commands.show import show_cmd

console = Console()


def _build_service(config: dict):
    """Instantiate the Audit State Service client from config.

    This factory lives in cli.py so neither auditor_core nor auditor_service
    know about the CLI config format.
    """
    from auditor_service.http import HttpAuditService

    return HttpAuditService(endpoint=config["endpoint"], timeout=float(config.get("timeout", 10.0)))


@click.group()
@click.version_option(
    version=importlib.metadata.version("auditor"),
    prog_name="auditor",
)
@click.option(
    "--config",
    "config_path",
    default=".auditor.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="AUDITOR_CONFIG",
)
@click.option("--endpoint", default=None, help="Audit State Service base URL. Overrides config file.")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and sync decisions.")
@click.pass_context
def main(ctx: click.Context, config_path: str, endpoint: str | None, verbose: bool):
    """Track line-level audit state and review comments against an audit service."""
    from auditor_core.config import load_config
    from auditor_core.errors import ConfigError

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path, cli_overrides={"endpoint": endpoint})
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    ctx.obj["config"] = config
    ctx.obj["service"] = _build_service(config)


main.add_command(show_cmd)
main.add_command(mark_cmd)
main.add_command(transform_cmd)
main.add_command(comment_group)
main.add_command(info_cmd)
main.add_command(priority_cmd)

"""CLI entry point for codemedic.

Commands:
  chat  — open a chat session bound to a project folder
  init  — interactive setup wizard that writes .codemedic.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from codemedic_cli.commands.chat import chat_cmd
from codemedic_cli.commands.init import init_cmd

console = Console()


@click.group()
@click.version_option(
    version=importlib.metadata.version("codemedic"),
    prog_name="codemedic",
)
@click.option(
    "--config",
    "config_path",
    default=".codemedic.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODEMEDIC_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Coding-only AI assistant that reviews your project and applies fixes on request."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(chat_cmd)
main.add_command(init_cmd)

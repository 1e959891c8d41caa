"""init command — interactive setup wizard.

Writes .codemedic.yml so `codemedic chat` picks the provider and exclude
patterns up without flags. The API key is normally left to the environment;
storing it in the file is offered but not the default.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

from codemedic_core.config import API_KEY_ENV, DEFAULT_CONFIG

console = Console()


@click.command("init")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Where to write the configuration file. Defaults to the global --config value.",
)
@click.pass_context
def init_cmd(ctx, config_path: str | None):
    """Set up codemedic for this project.

    Creates .codemedic.yml with the chosen provider and any extra paths to
    leave out of reviews.
    """
    if config_path is None:
        config_path = ctx.obj.get("config_path", ".codemedic.yml") if ctx.obj else ".codemedic.yml"

    console.print("\n[bold cyan]codemedic init[/bold cyan] — project setup wizard\n")

    path = Path(config_path)
    if path.exists() and not click.confirm(f"{config_path} already exists. Overwrite?", default=False):
        console.print("[yellow]Aborted. Existing configuration left unchanged.[/yellow]")
        return

    provider = click.prompt(
        "AI provider",
        type=click.Choice(list(API_KEY_ENV)),
        default=DEFAULT_CONFIG["model"],
    )
    exclude_raw = click.prompt(
        "Extra paths to exclude from reviews (comma-separated, blank for none)",
        default="",
        show_default=False,
    )
    exclude = [p.strip() for p in exclude_raw.split(",") if p.strip()]

    config: dict = {"model": provider}
    if exclude:
        config["exclude"] = exclude

    env_var = API_KEY_ENV[provider]
    if click.confirm(f"Store the API key in {config_path}? (not recommended for shared repos)", default=False):
        config["api_key"] = click.prompt("API key", hide_input=True)

    with open(path, "w") as f:
        yaml.safe_dump(config, f, sort_keys=False)
    console.print(f"\n[green]Wrote {config_path}[/green]")

    if "api_key" not in config:
        console.print(f"Set [bold]{env_var}[/bold] in your environment before running `codemedic chat`.")

"""chat command — interactive session against a project folder."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from codemedic_core.config import API_KEY_ENV, get_api_key, load_config
from codemedic_core.errors import NoWorkspaceError
from codemedic_core.session import USER_MESSAGE, Session
from codemedic_core.workspace import LocalWorkspace

console = Console()

EXIT_COMMANDS = {"/exit", "/quit"}


def _render(envelope: dict) -> None:
    console.print(Panel(envelope.get("text", ""), title="CodeMedic", title_align="left", border_style="cyan"))


@click.command("chat")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project folder to review and fix.",
)
@click.option(
    "--model",
    type=click.Choice(["gemini", "anthropic", "openai"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.pass_context
def chat_cmd(ctx, root: Path, model: str | None):
    """Chat about code, or ask CodeMedic to review and fix the project.

    Ask for a review ("check my code for bugs") to get proposed fixes; answer
    "yes" or "apply" to write them, "no" to discard. Type /exit to quit.

    \b
    Required environment variable (one of):
      GEMINI_API_KEY       Required when using --model gemini (default)
      ANTHROPIC_API_KEY    Required when using --model anthropic
      OPENAI_API_KEY       Required when using --model openai
    """
    config_path = ctx.obj.get("config_path", ".codemedic.yml") if ctx.obj else ".codemedic.yml"
    config = load_config(config_path, cli_overrides={"model": model})

    if not get_api_key(config):
        env_var = API_KEY_ENV.get(config["model"], "an API key")
        console.print(f"[yellow]CodeMedic requires an API key. Set {env_var} or add api_key to {config_path}.[/yellow]")
        if click.confirm("Run the setup wizard now?", default=False):
            from codemedic_cli.commands.init import init_cmd

            ctx.invoke(init_cmd, config_path=config_path)
        return

    try:
        workspace = LocalWorkspace(root)
    except NoWorkspaceError as e:
        raise click.UsageError(str(e))

    session = Session(config, workspace, post=_render)
    console.print(f"[bold cyan]CodeMedic Chat[/bold cyan] [dim]{workspace.root.resolve()}[/dim]")
    console.print("[dim]Type /exit to quit. Ctrl-C cancels a running request.[/dim]\n")

    try:
        while True:
            try:
                text = click.prompt("You", prompt_suffix=" › ", default="", show_default=False)
            except (EOFError, click.Abort):
                break
            if text.strip().lower() in EXIT_COMMANDS:
                break
            try:
                session.handle({"type": USER_MESSAGE, "text": text})
            except KeyboardInterrupt:
                session.cancel()
                console.print("[yellow]Request cancelled.[/yellow]")
    finally:
        session.close()
        console.print("[dim]Session closed.[/dim]")

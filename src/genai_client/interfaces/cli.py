from __future__ import annotations

import typer
from rich.console import Console

from genai_client.errors import GenerativeAIError
from genai_client.interfaces.commands.files import files_app
from genai_client.interfaces.commands.model import count_tokens, embed, generate
from genai_client.logger import configure_logging

app = typer.Typer(help="Command line client for the Generative Language API.")
app.command("generate")(generate)
app.command("count-tokens")(count_tokens)
app.command("embed")(embed)
app.add_typer(files_app, name="files")

err_console = Console(stderr=True)


def main() -> None:
    """Entrypoint for the CLI application."""
    configure_logging()
    try:
        app()
    except GenerativeAIError as exc:
        err_console.print(str(exc), style="red", markup=False, soft_wrap=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()

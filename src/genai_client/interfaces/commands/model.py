from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from genai_client.generative.client import GenerativeAI
from genai_client.generative.model import GenerativeModel
from genai_client.generative.response import response_text
from genai_client.media.files import read_inline_part
from genai_client.models import ModelParams, Part
from genai_client.settings import settings

console = Console()

MODEL_OPTION: str | None = typer.Option(None, help="Model name; defaults to GENAI_MODEL.")
SYSTEM_OPTION: str | None = typer.Option(None, "--system", help="System instruction.")
ATTACH_OPTION: list[Path] | None = typer.Option(
    None,
    "--attach",
    exists=True,
    readable=True,
    dir_okay=False,
    help="File to send inline with the prompt; may be repeated.",
    show_default=False,
)


def _model(model: str | None, system_instruction: str | None = None) -> GenerativeModel:
    params = ModelParams(model=model or settings.default_model, system_instruction=system_instruction)
    return GenerativeAI().get_generative_model(params)


def _prompt_parts(prompt: str, attachments: list[Path] | None) -> list[str | Part]:
    parts: list[str | Part] = [prompt]
    parts.extend(read_inline_part(path) for path in attachments or [])
    return parts


def generate(
    prompt: str,
    model: str | None = MODEL_OPTION,
    system: str | None = SYSTEM_OPTION,
    attach: list[Path] | None = ATTACH_OPTION,
) -> None:
    """Generate a response for a prompt."""
    with console.status("Generating...", spinner="dots"):
        response = _model(model, system).generate_content(_prompt_parts(prompt, attach))
    console.print(response_text(response))


def count_tokens(
    prompt: str,
    model: str | None = MODEL_OPTION,
    attach: list[Path] | None = ATTACH_OPTION,
) -> None:
    """Count the tokens a prompt would use."""
    response = _model(model).count_tokens(_prompt_parts(prompt, attach))
    console.print(f"total_tokens: {response.total_tokens}")


def embed(
    text: str,
    model: str = typer.Option("text-embedding-004", help="Embedding model name."),
) -> None:
    """Print the embedding vector of a text."""
    response = _model(model).embed_content(text)
    values = response.embedding.values
    console.print(f"dimensions: {len(values)}")
    console.print(values[:8])

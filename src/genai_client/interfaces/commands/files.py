from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from genai_client.files.manager import FileManager
from genai_client.generative.client import GenerativeAI
from genai_client.media.files import guess_mime_type
from genai_client.models import FileMetadata

files_app = typer.Typer(help="Manage files uploaded to the files API.")
console = Console()

FILE_ARGUMENT = typer.Argument(
    ...,
    exists=True,
    readable=True,
    dir_okay=False,
    help="Path of the file to upload.",
)


def _manager() -> FileManager:
    return GenerativeAI().get_file_manager()


@files_app.command("upload")
def upload(
    file_path: Path = FILE_ARGUMENT,
    mime_type: str | None = typer.Option(None, help="MIME type; guessed from the file name when omitted."),
    display_name: str | None = typer.Option(None, help="Human readable name."),
    name: str | None = typer.Option(None, help="Resource name, e.g. 'my-file' or 'files/my-file'."),
) -> None:
    """Upload a file."""
    try:
        resolved_mime_type = mime_type or guess_mime_type(file_path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--mime-type") from exc
    metadata = FileMetadata(mime_type=resolved_mime_type, display_name=display_name, name=name)
    with console.status("Uploading...", spinner="dots"):
        result = _manager().upload_file(file_path, metadata)
    console.print(f"Uploaded file {result.file.display_name or result.file.name} as: {result.file.uri}")


@files_app.command("list")
def list_files(
    page_size: int | None = typer.Option(None, min=1, help="Maximum files per page."),
    page_token: str | None = typer.Option(None, help="Token from a previous page."),
) -> None:
    """List uploaded files."""
    result = _manager().list_files(page_size=page_size, page_token=page_token)
    table = Table("name", "display name", "mime type", "state")
    for file in result.files:
        table.add_row(file.name, file.display_name or "", file.mime_type, file.state.value)
    console.print(table)
    if result.next_page_token:
        console.print(f"next page token: {result.next_page_token}")


@files_app.command("get")
def get_file(file_id: str) -> None:
    """Show metadata for one file."""
    result = _manager().get_file(file_id)
    console.print_json(data=result.to_payload())


@files_app.command("delete")
def delete_file(file_id: str) -> None:
    """Delete one file."""
    _manager().delete_file(file_id)
    console.print(f"Deleted {file_id}")

"""CLI implementation for filecontent."""

import json
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer

from . import open_client
from .config import ClientConfig
from .core.model import FileContentError
from .io import BACKENDS
from .logging_config import setup_logging
from .transfer import upload_in_chunks

app = typer.Typer(add_completion=False, help="Transfer file content to and from the API endpoint.")


def _emit(obj: dict) -> None:
    json.dump(obj, sys.stdout, indent=2)
    sys.stdout.write("\n")


@contextmanager
def _client(ctx: typer.Context):
    """Open the client for one command and turn library errors into exit code 1."""
    try:
        with open_client(ctx.obj["config"], backend=ctx.obj["backend"]) as client:
            yield client
    except FileContentError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@contextmanager
def _sink(output: Optional[Path]):
    if output is None:
        yield sys.stdout.buffer
        sys.stdout.flush()
    else:
        with open(output, "wb") as f:
            yield f


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(None, "--endpoint", envvar="FILECONTENT_API_ENDPOINT",
                                           help="API endpoint base URL"),
    token: Optional[str] = typer.Option(None, "--token", envvar="FILECONTENT_TOKEN",
                                        help="Bearer token"),
    insecure: bool = typer.Option(False, "--insecure", help="Skip TLS certificate verification"),
    cacert: Optional[Path] = typer.Option(None, "--cacert", exists=True, dir_okay=False,
                                          help="CA bundle used to verify the endpoint"),
    backend: str = typer.Option("requests", "--backend", help=f"Transport: {', '.join(BACKENDS)}"),
    verbose: int = typer.Option(0, "-v", "--verbose", count=True, help="-v for INFO, -vv for DEBUG"),
):
    """Transfer file content to and from the API endpoint."""
    if backend not in BACKENDS:
        raise typer.BadParameter(f"expected one of {', '.join(BACKENDS)}", param_hint="--backend")
    if verbose:
        setup_logging("DEBUG" if verbose > 1 else "INFO")
    verify = False if insecure else (str(cacert) if cacert else None)
    try:
        config = ClientConfig.from_env(api_endpoint=endpoint, auth_token=token, verify=verify)
    except FileContentError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    ctx.obj = {"config": config, "backend": backend}


@app.command()
def get(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write content to PATH instead of stdout"),
):
    """Download the whole content of a file."""
    with _client(ctx) as client, _sink(output) as sink:
        etag = client.get_file_content(file_id, sink)
    typer.echo(json.dumps({"file_id": file_id, "etag": etag}), err=output is None)


@app.command()
def put(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file to upload"),
    etag: str = typer.Option(..., "--etag", help="ETag of the content being replaced"),
):
    """Replace the whole content of a file in one request."""
    with _client(ctx) as client, open(path, "rb") as f:
        new_etag = client.upload_file_content(file_id, etag, f)
    _emit({"file_id": file_id, "etag": new_etag})


@app.command()
def etag(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
):
    """Print the current ETag of a file."""
    with _client(ctx) as client:
        current = client.get_file_content_etag(file_id)
    _emit({"file_id": file_id, "etag": current})


@app.command()
def check(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
    etag: str = typer.Argument(..., help="ETag to compare"),
):
    """Exit 0 when ETAG is still current, 2 when the content changed."""
    with _client(ctx) as client:
        up_to_date = client.is_file_content_up_to_date(file_id, etag)
    _emit({"file_id": file_id, "etag": etag, "up_to_date": up_to_date})
    if not up_to_date:
        raise typer.Exit(code=2)


@app.command("range")
def range_(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
    start: int = typer.Argument(..., min=0, help="First byte, inclusive"),
    end: int = typer.Argument(..., min=0, help="Last byte, inclusive"),
    etag: str = typer.Option(..., "--etag", help="ETag of the content being read"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write bytes to PATH instead of stdout"),
):
    """Download an inclusive byte range of a file."""
    with _client(ctx) as client, _sink(output) as sink:
        written = client.get_file_content_range(file_id, etag, sink, start, end)
    typer.echo(json.dumps({"file_id": file_id, "bytes_written": written}), err=output is None)


@app.command()
def upload(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file to upload"),
    etag: str = typer.Option(..., "--etag", help="ETag of the content being replaced"),
    chunk_size: int = typer.Option(1024 * 1024, "--chunk-size", min=1, help="Bytes per chunk"),
    upload_id: Optional[str] = typer.Option(None, "--upload-id", help="Resume this upload session"),
):
    """Upload a file through a chunked upload session."""
    total_length = os.path.getsize(path)
    with _client(ctx) as client, open(path, "rb") as f:
        result = upload_in_chunks(client, file_id, etag, f, total_length, chunk_size,
                                  upload_id=upload_id)
    _emit({"file_id": file_id, "etag": result.etag, "upload_id": result.upload_id,
           "chunks_sent": result.chunks_sent, "bytes_sent": result.bytes_sent})


@app.command()
def progress(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="File identifier"),
    upload_id: str = typer.Argument(..., help="Upload session identifier"),
    etag: str = typer.Option(..., "--etag", help="ETag the session was started with"),
):
    """Print the highest byte committed by an upload session."""
    with _client(ctx) as client:
        committed = client.get_chunked_upload_progress(file_id, etag, upload_id)
    _emit({"file_id": file_id, "upload_id": upload_id, "committed": committed})


if __name__ == "__main__":
    app()

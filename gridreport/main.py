from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from . import config
from .errors import ReportError
from .fonts import compile_font, compiled_dir, prepare_compiled_path
from .layout import render_layout
from .render.preview import render_preview
from .storage import preview_path

app = typer.Typer(help="Place text on PDF pages by grid coordinates")
logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def build(
    layout: Path = typer.Argument(..., help="JSON layout file"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    preview: bool = typer.Option(False, "--preview", help="Also render the first page to PNG"),
) -> None:
    if out:
        config.set_out_dir(out)
    try:
        pdf_path = render_layout(layout, out_dir=out)
    except (ReportError, FileNotFoundError, ValueError) as exc:
        logger.error("Could not build %s: %s", layout, exc)
        typer.echo(f"FAILED: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"PDF: {pdf_path}")
    if preview:
        png_path = render_preview(pdf_path, preview_path(pdf_path.stem, base_dir=pdf_path.parent))
        typer.echo(f"PREVIEW: {png_path}")


@app.command("compile-font")
def compile_font_command(
    filename: str = typer.Argument(..., help="Font file name inside the font directory"),
    font_dir: Optional[Path] = typer.Option(None, "--font-dir", help="Font source directory"),
    encoding: str = typer.Option(config.DEFAULT_ENCODING, "--encoding", help="Single byte encoding"),
) -> None:
    source = font_dir or config.FONT_DIR
    if not (source / filename).exists():
        typer.echo(f"Source font file not found: {source / filename}", err=True)
        raise typer.Exit(code=1)
    target = prepare_compiled_path(compiled_dir(source))
    try:
        compiled = compile_font(source, target, filename, encoding)
    except ReportError as exc:
        typer.echo(f"FAILED: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"COMPILED: {target / compiled}")


@app.command()
def encodings() -> None:
    for name in config.supported_encodings():
        typer.echo(name)


if __name__ == "__main__":
    app()

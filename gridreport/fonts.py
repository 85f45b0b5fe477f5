from __future__ import annotations

import base64
import binascii
import logging
import os
from pathlib import Path

from . import config
from .errors import EncodingUnsupportedError, FontCompileError
from .render.makefont import make_font

logger = logging.getLogger(__name__)


def strip_ext(filename: str) -> str:
    return filename[: len(filename) - len(Path(filename).suffix)]


def compiled_dir(font_source_path: Path) -> Path:
    return Path(font_source_path) / config.COMPILED_DIRNAME


def prepare_compiled_path(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        path.mkdir(parents=True)
        os.chmod(path, config.COMPILED_DIR_MODE)
        logger.debug("Created font cache %s", path)
    return path


def is_compiled_file(compiled_path: Path, filename: str) -> bool:
    """Font descriptors and encoding maps both live in the compiled path."""
    return (Path(compiled_path) / filename).exists()


def is_sourced_font(source_path: Path, filename: str) -> bool:
    return (Path(source_path) / filename).exists()


def compile_encoding(compiled_path: Path, encoding: str) -> Path:
    filename = Path(compiled_path) / f"{encoding}.map"
    if is_compiled_file(compiled_path, filename.name):
        return filename
    encodings = config.load_encodings()
    if encoding not in encodings:
        raise EncodingUnsupportedError(f"Encoding not supported: {encoding}")
    try:
        data = base64.b64decode(encodings[encoding], validate=True)
    except binascii.Error as exc:
        raise FontCompileError(f"Packaged map for {encoding} is corrupt: {exc}") from exc
    try:
        with filename.open("wb") as handle:
            handle.write(data)
    except OSError:
        filename.unlink(missing_ok=True)
        raise
    logger.debug("Wrote encoding map %s", filename)
    return filename


def compile_font(source_path: Path, compiled_path: Path, filename: str, encoding: str) -> str:
    """
    Compile filename from source_path into compiled_path unless a descriptor
    is already cached. Returns the descriptor's file name.
    """
    compiled_filename = strip_ext(filename) + ".json"
    if is_compiled_file(compiled_path, compiled_filename):
        logger.debug("Using cached font %s", compiled_filename)
        return compiled_filename
    encoding_filename = compile_encoding(compiled_path, encoding)
    make_font(Path(source_path) / filename, encoding_filename, Path(compiled_path))
    return compiled_filename

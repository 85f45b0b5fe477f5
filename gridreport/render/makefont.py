from __future__ import annotations

import json
import logging
import struct
from pathlib import Path
from typing import Dict

from reportlab.pdfbase.ttfonts import TTFError, TTFontFile

from ..errors import FontCompileError

logger = logging.getLogger(__name__)


def read_encoding_map(encoding_file: Path) -> Dict[int, int]:
    """
    Parse a character map with one "!XX U+YYYY [glyph]" entry per line into
    {byte: codepoint}.
    """
    mapping: Dict[int, int] = {}
    with encoding_file.open("r", encoding="ascii") as handle:
        for number, raw in enumerate(handle, start=1):
            line = raw.strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) < 2 or not parts[0].startswith("!") or not parts[1].startswith("U+"):
                raise FontCompileError(f"{encoding_file.name}:{number}: malformed map entry {line!r}")
            try:
                mapping[int(parts[0][1:], 16)] = int(parts[1][2:], 16)
            except ValueError as exc:
                raise FontCompileError(f"{encoding_file.name}:{number}: {exc}") from exc
    return mapping


def _text(value) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def make_font(font_file: Path, encoding_file: Path, dest_dir: Path, embed: bool = True) -> Path:
    """
    Compile a TrueType font into a JSON descriptor in dest_dir.

    The descriptor records the source file, the single byte encoding it was
    compiled for, vertical metrics and the advance width (1/1000 em) of every
    byte of the encoding. Bytes whose character the font lacks are listed
    under "missing"; "map" keeps the byte -> codepoint table so a document
    can measure and substitute text without the map file.
    """
    font_file = Path(font_file)
    encoding_file = Path(encoding_file)
    if not font_file.exists():
        raise FontCompileError(f"Font file not found: {font_file}")
    if not encoding_file.exists():
        raise FontCompileError(f"Encoding map not found: {encoding_file}")

    mapping = read_encoding_map(encoding_file)
    try:
        face = TTFontFile(str(font_file))
    except (TTFError, OSError, struct.error) as exc:
        raise FontCompileError(f"Could not parse {font_file.name}: {exc}") from exc

    widths: Dict[str, int] = {}
    missing = []
    for byte, codepoint in sorted(mapping.items()):
        if codepoint not in face.charToGlyph:
            missing.append(f"{byte:02X}")
            continue
        widths[f"{byte:02X}"] = int(round(face.charWidths.get(codepoint, face.defaultWidth)))

    descriptor = {
        "name": _text(face.name),
        "file": str(font_file.resolve()),
        "encoding": encoding_file.stem,
        "embed": embed,
        "ascent": face.ascent,
        "descent": face.descent,
        "cap_height": face.capHeight,
        "bbox": list(face.bbox),
        "default_width": face.defaultWidth,
        "widths": widths,
        "missing": missing,
        "map": {f"{byte:02X}": codepoint for byte, codepoint in sorted(mapping.items())},
    }

    output = Path(dest_dir) / f"{font_file.stem}.json"
    try:
        output.write_text(json.dumps(descriptor, indent=2), encoding="utf-8")
    except OSError as exc:
        raise FontCompileError(f"Could not write {output}: {exc}") from exc
    if missing:
        logger.info("%s lacks %d character(s) of %s", font_file.name, len(missing), encoding_file.stem)
    logger.info("Compiled %s -> %s", font_file.name, output)
    return output

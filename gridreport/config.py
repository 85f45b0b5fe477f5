from __future__ import annotations

from pathlib import Path
from typing import Dict, List
import json
import os


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
FONT_DIR = Path(os.environ.get("GRIDREPORT_FONT_DIR", BASE_DIR / "fonts"))
ENCODINGS_PATH = Path(__file__).resolve().parent / "assets" / "encodings.json"

COMPILED_DIRNAME = "_compiled"
COMPILED_DIR_MODE = 0o775
DEFAULT_ENCODING = "cp1252"


def load_encodings() -> Dict[str, str]:
    """Base64 encoded character maps keyed by encoding name."""
    with ENCODINGS_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def supported_encodings() -> List[str]:
    return sorted(load_encodings())


def set_out_dir(path: Path) -> None:
    global OUT_DIR
    OUT_DIR = path

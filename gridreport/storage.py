from __future__ import annotations

import hashlib
import re
from pathlib import Path

from slugify import slugify

from . import config


def slug_from_title(title: str) -> str:
    slug = slugify(title)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        slug = hashlib.md5(title.encode("utf-8")).hexdigest()[:12]
    if ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated from title")
    return slug


def output_dir(base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    root.mkdir(parents=True, exist_ok=True)
    return root


def report_path(title: str, base_dir: Path | None = None) -> Path:
    return output_dir(base_dir) / f"{slug_from_title(title)}.pdf"



def preview_path(title: str, page: int = 1, base_dir: Path | None = None) -> Path:
    return output_dir(base_dir) / f"{slug_from_title(title)}_preview_{page}.png"

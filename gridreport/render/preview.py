from __future__ import annotations

import logging
from pathlib import Path

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int) -> None:
    page = doc.load_page(page_index)

    # 72dpi base; zoom until the short side reaches min_px
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(1.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_preview(pdf_path: Path, out_path: Path, page_index: int = 0, min_px: int = 1200) -> Path:
    with fitz.open(pdf_path) as doc:
        if not 0 <= page_index < doc.page_count:
            raise IndexError(f"{pdf_path} has no page {page_index + 1}")
        _render_page_to_png(doc, page_index, out_path, min_px)
    logger.info("Rendered preview %s", out_path)
    return out_path

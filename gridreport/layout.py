from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Type

from . import config
from .constants import ALIGNMENT_CODES, Align, Orientation, PageSize, Unit
from .errors import ConfigurationError
from .render.document import Document
from .report import DocumentFactory, Report
from .storage import report_path

logger = logging.getLogger(__name__)

GRID_DEFAULTS = {
    "orientation": "portrait",
    "page_size": "letter",
    "unit": "pt",
    "margin": 36,
    "columns": 12,
    "gutter": 12,
    "line_height": 12,
}
DEFAULT_ALIGN = ["left", "top"]
ALIGN_NAMES = {flag.name.lower(): flag for flag, _ in ALIGNMENT_CODES}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def load_layout(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Layout not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        layout = json.load(handle)
    if not isinstance(layout, dict):
        raise ConfigurationError(f"Layout must be a JSON object: {path}")
    return layout


def parse_enum(enum_cls: Type, value) -> Optional[int]:
    """Accept enum names in any case or raw integers (kept as given)."""
    if _is_int(value):
        return value
    try:
        return enum_cls[str(value).strip().upper()]
    except KeyError:
        return None


def parse_alignment(value) -> Optional[int]:
    """Accept an int, "left|top", "left top" or ["left", "top"]."""
    if _is_int(value):
        return value
    if isinstance(value, str):
        value = value.replace("|", " ").split()
    if not isinstance(value, list):
        return None
    result = Align(0)
    for name in value:
        flag = ALIGN_NAMES.get(str(name).strip().lower())
        if flag is None:
            return None
        result |= flag
    return int(result)


def _section(layout: dict, key: str, kind: type, errors: List[str]):
    value = layout.get(key, kind())
    if not isinstance(value, kind):
        errors.append(f"'{key}' must be a {'list' if kind is list else 'mapping'}")
        return kind()
    return value


def validate_layout(layout: dict) -> List[str]:
    errors: List[str] = []

    grid = _section(layout, "grid", dict, errors)
    for key, enum_cls in (("orientation", Orientation), ("page_size", PageSize), ("unit", Unit)):
        if key in grid and parse_enum(enum_cls, grid[key]) is None:
            errors.append(f"Unknown grid {key}: {grid[key]}")
    for key in ("margin", "gutter", "line_height"):
        if key in grid and not _is_number(grid[key]):
            errors.append(f"Grid {key} must be a number")
    if "columns" in grid and not _is_int(grid["columns"]):
        errors.append("Grid columns must be an integer")

    for font in _section(layout, "fonts", list, errors):
        if not isinstance(font, dict) or not font.get("file"):
            errors.append(f"Font entries need a 'file': {font}")

    styles = _section(layout, "styles", dict, errors)
    for name, style in styles.items():
        if not isinstance(style, dict) or not style.get("family"):
            errors.append(f"Style {name} needs a 'family'")
            continue
        if "size" in style and not _is_number(style["size"]):
            errors.append(f"Style {name} size must be a number")
        if parse_alignment(style.get("align", DEFAULT_ALIGN)) is None:
            errors.append(f"Style {name} has an unknown alignment: {style.get('align')}")

    blocks = _section(layout, "blocks", dict, errors)
    for name, block in blocks.items():
        if not isinstance(block, dict) or not all(_is_int(block.get(key)) for key in ("width", "height")):
            errors.append(f"Block {name} needs integer 'width' and 'height'")

    for number, page in enumerate(_section(layout, "pages", list, errors), start=1):
        if not isinstance(page, list):
            errors.append(f"Page {number} must be a list of content items")
            continue
        for item in page:
            if not isinstance(item, dict):
                errors.append(f"Page {number}: content items must be mappings")
                continue
            if not _is_int(item.get("x")):
                errors.append(f"Page {number}: item needs an integer 'x'")
            if "y" in item and not _is_int(item["y"]):
                errors.append(f"Page {number}: 'y' must be an integer")
            if item.get("block") not in blocks:
                errors.append(f"Page {number}: unknown block {item.get('block')}")
            if item.get("style") not in styles:
                errors.append(f"Page {number}: unknown style {item.get('style')}")
    return errors


def place_items(report: Report, items: Iterable[dict]) -> int:
    """
    Place items on the current page. An item without "y" goes below the
    previous one, using the line estimate of Report.content(). Every item
    takes at least its block height, so empty text still holds its rows.
    Returns the next free row.
    """
    row = 1
    for item in items:
        y = item.get("y", row)
        lines = report.content(item["x"], y, item["block"], item["style"], str(item.get("text", "")))
        row = y + max(lines, report.get_block(item["block"]).height)
    return row


def build_report(
    layout: dict,
    base_dir: Optional[Path] = None,
    document_factory: DocumentFactory = Document,
) -> Report:
    errors = validate_layout(layout)
    if errors:
        raise ConfigurationError("Invalid layout: " + "; ".join(errors))
    base_dir = base_dir or Path.cwd()
    report = Report(document_factory=document_factory)

    fonts = layout.get("fonts", [])
    if fonts or "font_dir" in layout:
        font_dir = Path(layout.get("font_dir", config.FONT_DIR))
        if not font_dir.is_absolute():
            font_dir = base_dir / font_dir
        report.set_font_path(font_dir)

    grid = {**GRID_DEFAULTS, **layout.get("grid", {})}
    report.set_grid(
        parse_enum(Orientation, grid["orientation"]),
        parse_enum(PageSize, grid["page_size"]),
        parse_enum(Unit, grid["unit"]),
        float(grid["margin"]),
        grid["columns"],
        float(grid["gutter"]),
        float(grid["line_height"]),
    )

    for font in fonts:
        family = report.add_font(font["file"], font.get("encoding", config.DEFAULT_ENCODING))
        logger.info("Loaded font family %s", family)
    for name, style in layout.get("styles", {}).items():
        report.add_style(
            name,
            style["family"],
            style.get("style", ""),
            float(style.get("size", 12)),
            parse_alignment(style.get("align", DEFAULT_ALIGN)),
        )
    for name, block in layout.get("blocks", {}).items():
        report.add_block(name, block["width"], block["height"])

    for page in layout.get("pages", []):
        report.add_page()
        place_items(report, page)
    return report


def render_layout(
    layout_path: Path,
    out_dir: Optional[Path] = None,
    document_factory: DocumentFactory = Document,
) -> Path:
    layout = load_layout(layout_path)
    report = build_report(layout, base_dir=layout_path.parent, document_factory=document_factory)
    title = str(layout.get("title") or layout_path.stem)
    return report.output(report_path(title, base_dir=out_dir))

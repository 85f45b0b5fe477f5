from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from reportlab.lib.pagesizes import A3, A4, A5, LEGAL, LETTER, landscape, portrait
from reportlab.lib.units import cm, inch, mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from ..errors import ConfigurationError, FontCacheError, UnknownNameError

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Capabilities a Report needs from the drawing backend."""

    def add_page(self) -> None: ...

    def set_font(self, family: str, style: str = "", size: float = 0) -> None: ...

    def set_xy(self, x: float, y: float) -> None: ...

    def multi_cell(
        self,
        w: float,
        h: float,
        text: str,
        border: str = "",
        align: str = "",
        fill: bool = False,
    ) -> None: ...

    def get_string_width(self, text: str) -> float: ...

    def add_font(self, family: str, style: str, path: str) -> None: ...

    def set_font_location(self, path: Path) -> None: ...

    def set_margins(self, left: float, top: float, right: Optional[float] = None) -> None: ...

    def get_page_size(self) -> Tuple[float, float]: ...

    def output(self, path: Path) -> Path: ...


UNIT_SCALE: Dict[str, float] = {
    "pt": 1.0,
    "mm": mm,
    "cm": cm,
    "in": inch,
}

PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "a3": A3,
    "a4": A4,
    "a5": A5,
    "letter": LETTER,
    "legal": LEGAL,
}

# family -> {style: reportlab name}
CORE_FONTS: Dict[str, Dict[str, str]] = {
    "helvetica": {
        "": "Helvetica",
        "B": "Helvetica-Bold",
        "I": "Helvetica-Oblique",
        "BI": "Helvetica-BoldOblique",
    },
    "times": {
        "": "Times-Roman",
        "B": "Times-Bold",
        "I": "Times-Italic",
        "BI": "Times-BoldItalic",
    },
    "courier": {
        "": "Courier",
        "B": "Courier-Bold",
        "I": "Courier-Oblique",
        "BI": "Courier-BoldOblique",
    },
    "symbol": {"": "Symbol"},
    "zapfdingbats": {"": "ZapfDingbats"},
}
CORE_FONTS["arial"] = CORE_FONTS["helvetica"]

# drawn in place of characters a compiled font cannot encode
REPLACEMENT_CHAR = "?"


def _normalize_style(style: str) -> str:
    style = (style or "").upper().replace("U", "")
    return ("B" if "B" in style else "") + ("I" if "I" in style else "")


def _descriptor_widths(descriptor: dict) -> Dict[str, float]:
    """Character -> advance width (1/1000 em) for every byte the font can draw."""
    widths = descriptor["widths"]
    return {
        chr(int(codepoint)): float(widths[byte])
        for byte, codepoint in descriptor["map"].items()
        if byte in widths
    }


class Document:
    """
    Top-left origin drawing surface on a reportlab canvas.

    All coordinates and sizes are in the document unit; the canvas works in
    points with a bottom-left origin, so every draw call is converted here.
    """

    def __init__(
        self,
        orientation: str = "Portrait",
        unit: str = "mm",
        size: str = "A4",
        font_dir: Optional[Path] = None,
    ) -> None:
        self.k = UNIT_SCALE.get((unit or "mm").lower(), mm)
        page = PAGE_SIZES.get((size or "A4").lower(), A4)
        if (orientation or "P").upper().startswith("L"):
            page = landscape(page)
        else:
            page = portrait(page)
        self.w_pt, self.h_pt = page
        self.w = self.w_pt / self.k
        self.h = self.h_pt / self.k

        margin = 10 * mm / self.k
        self.l_margin = margin
        self.t_margin = margin
        self.r_margin = margin
        self.c_margin = margin / 10
        self.x = self.l_margin
        self.y = self.t_margin

        self.font_dir = Path(font_dir) if font_dir else None
        self.fonts: Dict[str, str] = {}
        # reportlab name -> widths of fonts compiled for a single byte encoding
        self.encoded_fonts: Dict[str, Dict[str, float]] = {}
        self.font_name: Optional[str] = None
        self.font_size_pt = 12.0
        self.fill_color: Tuple[float, float, float] = (0.9, 0.9, 0.9)

        self.page = 0
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=page)
        self._saved = False

    @property
    def font_size(self) -> float:
        return self.font_size_pt / self.k

    def set_margins(self, left: float, top: float, right: Optional[float] = None) -> None:
        self.l_margin = left
        self.t_margin = top
        self.r_margin = left if right is None else right

    def set_font_location(self, path: Path) -> None:
        self.font_dir = Path(path)

    def get_page_size(self) -> Tuple[float, float]:
        return self.w, self.h

    def add_page(self) -> None:
        if self._saved:
            raise ConfigurationError("Document already written; no more pages can be added")
        if self.page > 0:
            self._canvas.showPage()
        self.page += 1
        self.x = self.l_margin
        self.y = self.t_margin
        # reportlab resets the graphics state on every new page
        if self.font_name:
            self._canvas.setFont(self.font_name, self.font_size_pt)

    def add_font(self, family: str, style: str, path: str) -> None:
        descriptor_path = Path(path)
        if not descriptor_path.is_absolute() and self.font_dir is not None:
            descriptor_path = self.font_dir / descriptor_path
        try:
            descriptor = json.loads(descriptor_path.read_text(encoding="utf-8"))
        except (FileNotFoundError, json.JSONDecodeError) as exc:
            raise FontCacheError(f"Could not read compiled font {descriptor_path}: {exc}") from exc

        style = _normalize_style(style)
        name = f"{family}-{style}" if style else family
        try:
            widths = _descriptor_widths(descriptor)
            pdfmetrics.registerFont(TTFont(name, descriptor["file"]))
        except (KeyError, TypeError, ValueError, AttributeError, OSError, TTFError) as exc:
            raise FontCacheError(f"Compiled font {descriptor_path} points to an unusable font: {exc}") from exc
        self.fonts[family.lower() + style] = name
        self.encoded_fonts[name] = widths
        logger.debug("Registered font %s (%s) from %s", name, descriptor.get("encoding"), descriptor_path)

    def _resolve_font(self, family: str, style: str) -> str:
        key = family.lower() + style
        if key in self.fonts:
            return self.fonts[key]
        core = CORE_FONTS.get(family.lower(), {})
        if style in core:
            return core[style]
        raise UnknownNameError(f"Undefined font: {family} {style}".strip())

    def set_font(self, family: str, style: str = "", size: float = 0) -> None:
        self.font_name = self._resolve_font(family, _normalize_style(style))
        if size:
            self.font_size_pt = float(size)
        if self.page > 0:
            self._canvas.setFont(self.font_name, self.font_size_pt)

    def set_xy(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def encode_text(self, text: str) -> str:
        """
        Replace characters the current compiled font cannot encode. Core fonts
        and fonts without a descriptor pass text through unchanged.
        """
        widths = self.encoded_fonts.get(self.font_name or "")
        if widths is None:
            return text
        replacement = REPLACEMENT_CHAR if REPLACEMENT_CHAR in widths else ""
        return "".join(char if char in widths or char == "\n" else replacement for char in text)

    def get_string_width(self, text: str) -> float:
        if self.font_name is None:
            raise ConfigurationError("No font selected; call set_font first")
        widths = self.encoded_fonts.get(self.font_name)
        if widths is None:
            return pdfmetrics.stringWidth(text, self.font_name, self.font_size_pt) / self.k
        total = sum(widths.get(char, 0.0) for char in self.encode_text(text))
        return total * self.font_size_pt / 1000 / self.k

    def split_lines(self, text: str, width: float) -> List[str]:
        """Break text at spaces, or inside words wider than the cell."""
        limit = width - 2 * self.c_margin
        lines: List[str] = []
        for paragraph in text.split("\n"):
            current = ""
            for word in paragraph.split(" "):
                candidate = word if not current else f"{current} {word}"
                if self.get_string_width(candidate) <= limit:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                current = ""
                for char in word:
                    if current and self.get_string_width(current + char) > limit:
                        lines.append(current)
                        current = ""
                    current += char
            lines.append(current)
        return lines

    def _baseline(self, top: float, h: float, valign: str) -> float:
        if valign == "T":
            return top + self.font_size * 0.8
        if valign == "B":
            return top + h - self.font_size * 0.2
        return top + 0.5 * h + 0.3 * self.font_size

    def multi_cell(
        self,
        w: float,
        h: float,
        text: str,
        border: str = "",
        align: str = "",
        fill: bool = False,
    ) -> None:
        """
        Draw text wrapped to width w, one line every h units, starting at the
        current position. The cursor ends below the block at the left margin.
        """
        if self.page == 0:
            x, y = self.x, self.y
            self.add_page()
            self.set_xy(x, y)
        if w == 0:
            w = self.w - self.r_margin - self.x
        align = (align or "").upper()
        halign = next((code for code in "LCR" if code in align), "L")
        valign = next((code for code in "TMB" if code in align), "M")

        lines = self.split_lines(self.encode_text(text), w)
        x, top = self.x, self.y
        total = h * len(lines)
        canv = self._canvas

        if fill:
            canv.saveState()
            canv.setFillColorRGB(*self.fill_color)
            canv.rect(x * self.k, (self.h - top - total) * self.k, w * self.k, total * self.k, stroke=0, fill=1)
            canv.restoreState()

        for index, line in enumerate(lines):
            width = self.get_string_width(line)
            if halign == "R":
                tx = x + w - self.c_margin - width
            elif halign == "C":
                tx = x + (w - width) / 2
            else:
                tx = x + self.c_margin
            baseline = self._baseline(top + index * h, h, valign)
            canv.drawString(tx * self.k, (self.h - baseline) * self.k, line)

        self._draw_border(border, x, top, w, total)
        self.x = self.l_margin
        self.y = top + total

    def _draw_border(self, border: str, x: float, top: float, w: float, h: float) -> None:
        if not border or border == "0":
            return
        sides = "LTRB" if border == "1" else border.upper()
        k = self.k
        left, right = x * k, (x + w) * k
        upper, lower = (self.h - top) * k, (self.h - top - h) * k
        canv = self._canvas
        if "L" in sides:
            canv.line(left, upper, left, lower)
        if "T" in sides:
            canv.line(left, upper, right, upper)
        if "R" in sides:
            canv.line(right, upper, right, lower)
        if "B" in sides:
            canv.line(left, lower, right, lower)

    def output(self, path: Path) -> Path:
        if self.page == 0:
            self.add_page()
        if not self._saved:
            self._canvas.save()
            self._saved = True
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self._buffer.getvalue())
        logger.info("Wrote %d page(s) to %s", self.page, path)
        return path

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Dict, Optional

from .errors import ConfigurationError, FontCacheError, FontSourceError, UnknownNameError
from .fonts import (
    compile_font,
    compiled_dir,
    is_compiled_file,
    is_sourced_font,
    prepare_compiled_path,
    strip_ext,
)
from .grid import Block, Grid
from .render.document import Document, Renderer
from .style import Style

logger = logging.getLogger(__name__)

DocumentFactory = Callable[..., Renderer]


class Report:
    """
    Holds the grid, styles and blocks of one PDF and places content on it.

    A report is built by one producer, in order:

        report = Report()
        report.set_font_path(Path("fonts"))
        report.set_grid(Orientation.PORTRAIT, PageSize.LETTER, Unit.PT, 36, 12, 12, 12)
        report.add_font("OpenSans-Bold.ttf", "cp1252")
        report.add_style("header", "OpenSans-Bold", "", 24, Align.CENTER | Align.TOP)
        report.add_block("full", 12, 2)
        report.add_page()
        lines = report.content(1, 1, "full", "header", "Quarterly Summary")
    """

    def __init__(self, document_factory: DocumentFactory = Document) -> None:
        self.grid = Grid()
        self.pdf: Optional[Renderer] = None
        self.styles: Dict[str, Style] = {}
        self.blocks: Dict[str, Block] = {}
        self.font_source_path: Optional[Path] = None
        self.font_compiled_path: Optional[Path] = None
        self.document_factory = document_factory

    def _require_pdf(self) -> Renderer:
        if self.pdf is None:
            raise ConfigurationError("set_grid must be called before drawing")
        return self.pdf

    def set_grid(
        self,
        orientation: int,
        page_size: int,
        unit: int,
        margin: float,
        column_count: int,
        gutter_width: float,
        line_height: float,
    ) -> None:
        """Set the page and grid specification. Must precede content()."""
        self.grid = Grid(
            orientation=orientation,
            page_size=page_size,
            unit=unit,
            column_count=column_count,
            gutter_width=gutter_width,
            margin=margin,
            line_height=line_height,
        )
        self.pdf = self.document_factory(
            self.grid.convert_orientation(),
            self.grid.convert_unit(),
            self.grid.convert_page_size(),
            self.font_compiled_path,
        )
        self.pdf.set_margins(margin, margin, margin)
        self.grid.page_width, self.grid.page_height = self.pdf.get_page_size()
        self.grid.calculate_columns()
        logger.debug(
            "Grid %d columns of %.2f with %.2f gutters on %.2fx%.2f",
            self.grid.column_count,
            self.grid.column_width,
            self.grid.gutter_width,
            self.grid.page_width,
            self.grid.page_height,
        )

    def set_font_path(self, font_source_path: Path) -> None:
        self.font_source_path = Path(font_source_path)
        self.font_compiled_path = compiled_dir(self.font_source_path)
        prepare_compiled_path(self.font_compiled_path)
        if self.pdf is not None:
            self.pdf.set_font_location(self.font_compiled_path)

    def add_style(
        self,
        name: str,
        font_family: str,
        font_style: str,
        font_size: float,
        alignment: int,
    ) -> None:
        self.styles[name] = Style(
            font_family=font_family,
            font_style=font_style,
            font_size=font_size,
            alignment=alignment,
        )

    def add_block(self, name: str, width: int, height: int) -> None:
        """width and height are a number of columns and of line heights."""
        self.blocks[name] = Block(width=width, height=height)

    def get_block(self, name: str) -> Block:
        try:
            return self.blocks[name]
        except KeyError:
            raise UnknownNameError(f"Could not find block name in Report: {name}") from None

    def get_style(self, name: str) -> Style:
        try:
            return self.styles[name]
        except KeyError:
            raise UnknownNameError(f"Could not find style name in Report: {name}") from None

    def add_font(self, filename: str, encoding: str) -> str:
        """
        Compile filename from the font source path for encoding and register
        it. The file name without its extension becomes the font family:

            report.add_font("OpenSans-Bold.ttf", "cp1252")
            report.add_style("header", "OpenSans-Bold", "", 64, Align.TOP | Align.LEFT)

        A ".json" file name registers an already compiled font from the cache.
        """
        if self.font_source_path is None or self.font_compiled_path is None:
            raise ConfigurationError("set_font_path must be called before add_font")
        pdf = self._require_pdf()
        prepare_compiled_path(self.font_compiled_path)
        family = strip_ext(filename)

        if Path(filename).suffix == ".json":
            if not is_compiled_file(self.font_compiled_path, filename):
                raise FontCacheError(f"Cache font file not found: {filename}")
            compiled_filename = filename
        else:
            if not is_sourced_font(self.font_source_path, filename):
                raise FontSourceError(f"Source font file not found: {filename}")
            compiled_filename = compile_font(
                self.font_source_path,
                self.font_compiled_path,
                filename,
                encoding,
            )
        pdf.add_font(family, "", str(self.font_compiled_path / compiled_filename))
        return family

    def add_page(self) -> None:
        self._require_pdf().add_page()

    def content(self, x: int, y: int, block_name: str, style_name: str, content: str) -> int:
        """
        Place content at grid column x, row y using the named block and style.

        Returns the number of rows (line heights) the text is estimated to
        take, so following content can be placed below it. The estimate
        assumes the renderer wraps at the cell width and ignores word breaks.
        """
        block = self.get_block(block_name)
        style = self.get_style(style_name)
        pdf = self._require_pdf()

        point = self.grid.get_point(x, y)
        cell = self.grid.get_cell(block)

        pdf.set_font(style.font_family, style.font_style, style.font_size)
        pdf.set_xy(point.x, point.y)
        pdf.multi_cell(cell.width, cell.height, content, "", style.convert_alignment(), False)

        line_count = 0
        for line in content.split("\n"):
            line_count += math.ceil(pdf.get_string_width(line) / cell.width)
        line_count *= block.height
        logger.debug("Placed %s/%s at (%d, %d): %d line(s)", block_name, style_name, x, y, line_count)
        return line_count

    def output(self, path: Path) -> Path:
        return self._require_pdf().output(Path(path))

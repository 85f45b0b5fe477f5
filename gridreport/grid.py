from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .constants import ORIENTATION_NAMES, PAGE_SIZE_NAMES, UNIT_NAMES, Orientation, PageSize, Unit
from .errors import ConfigurationError


class Point(NamedTuple):
    x: float
    y: float


class Cell(NamedTuple):
    width: float
    height: float


@dataclass(frozen=True)
class Block:
    """
    Footprint of a placement in grid units.

    width is the number of columns spanned (the gutters between them are
    included), height is a multiple of Grid.line_height.
    """

    width: int
    height: int


@dataclass
class Grid:
    """
    Page and grid specification used to turn spreadsheet-like (column, row)
    coordinates into page coordinates in the grid unit.
    """

    column_count: int = 0
    column_width: float = 0.0
    gutter_count: int = 0
    gutter_width: float = 0.0
    line_height: float = 0.0
    margin: float = 0.0
    orientation: int = Orientation.PORTRAIT
    page_width: float = 0.0
    page_height: float = 0.0
    page_size: int = PageSize.A4
    unit: int = Unit.PT

    def calculate_columns(self) -> None:
        if self.column_count == 0 or self.gutter_width == 0:
            raise ConfigurationError("Incomplete parameters to calculate grid columns")
        self.gutter_count = self.column_count - 1
        width = self.page_width
        width -= self.margin * 2
        width -= self.gutter_count * self.gutter_width
        self.column_width = width / self.column_count

    def get_cell(self, block: Block) -> Cell:
        width = self.column_width * block.width
        width += self.gutter_width * (block.width - 1)
        return Cell(width, self.line_height * block.height)

    def get_point(self, x: int, y: int) -> Point:
        px = self.margin
        px += self.column_width * (x - 1)
        px += self.gutter_width * (x - 1)
        py = self.margin + self.line_height * (y - 1)
        return Point(px, py)

    # Values outside the enumerations convert to "" without raising.
    def convert_orientation(self) -> str:
        return ORIENTATION_NAMES.get(self.orientation, "")

    def convert_page_size(self) -> str:
        return PAGE_SIZE_NAMES.get(self.page_size, "")

    def convert_unit(self) -> str:
        return UNIT_NAMES.get(self.unit, "")

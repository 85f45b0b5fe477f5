from __future__ import annotations

import unittest

from gridreport.constants import Orientation, PageSize, Unit
from gridreport.errors import ConfigurationError
from gridreport.grid import Block, Cell, Grid, Point


def letter_grid() -> Grid:
    grid = Grid(
        column_count=12,
        gutter_width=12.0,
        line_height=12.0,
        margin=36.0,
        orientation=Orientation.PORTRAIT,
        page_width=612.0,
        page_height=792.0,
        page_size=PageSize.LETTER,
        unit=Unit.PT,
    )
    grid.calculate_columns()
    return grid


class GridTests(unittest.TestCase):
    def test_calculate_columns_requires_gutter(self) -> None:
        grid = Grid(column_count=6, margin=20.0, page_width=240.0)
        with self.assertRaises(ConfigurationError):
            grid.calculate_columns()

        grid.gutter_width = 10.0
        grid.calculate_columns()
        self.assertEqual(grid.gutter_count, 5)
        self.assertEqual(grid.column_width, 25.0)

    def test_calculate_columns_requires_columns(self) -> None:
        grid = Grid(gutter_width=10.0, margin=20.0, page_width=240.0)
        with self.assertRaises(ConfigurationError):
            grid.calculate_columns()

    def test_letter_column_width(self) -> None:
        self.assertEqual(letter_grid().column_width, 34.0)
        self.assertEqual(letter_grid().gutter_count, 11)

    def test_columns_fill_page_width(self) -> None:
        for columns in (1, 2, 3, 7, 12, 16):
            for gutter in (0.5, 6.0, 12.0):
                for margin in (0.0, 18.0, 36.0):
                    grid = Grid(column_count=columns, gutter_width=gutter, margin=margin, page_width=595.28)
                    grid.calculate_columns()
                    total = grid.column_width * columns + gutter * (columns - 1) + 2 * margin
                    self.assertAlmostEqual(total, 595.28, places=9)

    def test_get_cell(self) -> None:
        cell = letter_grid().get_cell(Block(5, 2))
        self.assertEqual(cell, Cell(218.0, 24.0))

    def test_get_cell_single_column_has_no_gutter(self) -> None:
        cell = letter_grid().get_cell(Block(1, 1))
        self.assertEqual(cell.width, 34.0)
        self.assertEqual(cell.height, 12.0)

    def test_get_point(self) -> None:
        point = letter_grid().get_point(3, 3)
        self.assertEqual(point, Point(128.0, 60.0))

    def test_get_point_origin_is_margin(self) -> None:
        self.assertEqual(letter_grid().get_point(1, 1), Point(36.0, 36.0))

    def test_convert_orientation(self) -> None:
        grid = Grid(orientation=Orientation.PORTRAIT)
        self.assertEqual(grid.convert_orientation(), "Portrait")
        grid.orientation = Orientation.LANDSCAPE
        self.assertEqual(grid.convert_orientation(), "Landscape")
        grid.orientation = -1
        self.assertEqual(grid.convert_orientation(), "")

    def test_convert_unit(self) -> None:
        expected = {Unit.PT: "pt", Unit.MM: "mm", Unit.CM: "cm", Unit.IN: "in"}
        for unit, token in expected.items():
            self.assertEqual(Grid(unit=unit).convert_unit(), token)
        self.assertEqual(Grid(unit=-1).convert_unit(), "")
        self.assertEqual(Grid(unit=99).convert_unit(), "")

    def test_convert_page_size(self) -> None:
        expected = {
            PageSize.A3: "A3",
            PageSize.A4: "A4",
            PageSize.A5: "A5",
            PageSize.LETTER: "Letter",
            PageSize.LEGAL: "Legal",
        }
        for size, token in expected.items():
            self.assertEqual(Grid(page_size=size).convert_page_size(), token)
        self.assertEqual(Grid(page_size=-1).convert_page_size(), "")


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from pathlib import Path

import pytest

from gridreport.constants import Orientation, PageSize, Unit
from gridreport.report import Report


class DummyDocument:
    """Records every call; measures text at a fixed width per character."""

    char_width = 6.0

    def __init__(self, orientation: str = "", unit: str = "", size: str = "", font_dir=None) -> None:
        self.args = (orientation, unit, size, font_dir)
        self.calls: list[tuple] = []
        self.page_size = (612.0, 792.0)

    def set_margins(self, left: float, top: float, right: float | None = None) -> None:
        self.calls.append(("set_margins", left, top, right))

    def get_page_size(self) -> tuple[float, float]:
        return self.page_size

    def set_font_location(self, path: Path) -> None:
        self.calls.append(("set_font_location", path))

    def add_page(self) -> None:
        self.calls.append(("add_page",))

    def add_font(self, family: str, style: str, path: str) -> None:
        self.calls.append(("add_font", family, style, path))

    def set_font(self, family: str, style: str = "", size: float = 0) -> None:
        self.calls.append(("set_font", family, style, size))

    def set_xy(self, x: float, y: float) -> None:
        self.calls.append(("set_xy", x, y))

    def multi_cell(self, w, h, text, border="", align="", fill=False) -> None:  # noqa: ANN001 - test helper
        self.calls.append(("multi_cell", w, h, text, border, align, fill))

    def get_string_width(self, text: str) -> float:
        return len(text) * self.char_width

    def output(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"%PDF-dummy")
        self.calls.append(("output", path))
        return path

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def dummy_report() -> Report:
    report = Report(document_factory=DummyDocument)
    report.set_grid(Orientation.PORTRAIT, PageSize.LETTER, Unit.PT, 36.0, 12, 12.0, 12.0)
    return report

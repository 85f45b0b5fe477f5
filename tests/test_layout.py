from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from gridreport.constants import Align, Orientation, PageSize, Unit
from gridreport.errors import ConfigurationError
from gridreport.layout import build_report, load_layout, parse_alignment, parse_enum, render_layout, validate_layout

from conftest import DummyDocument


def sample_layout() -> dict:
    return {
        "title": "Quarterly Summary",
        "grid": {"orientation": "portrait", "page_size": "letter", "unit": "pt", "margin": 36, "columns": 12, "gutter": 12, "line_height": 12},
        "styles": {
            "header": {"family": "Helvetica", "style": "B", "size": 24, "align": ["center", "top"]},
            "body": {"family": "Times", "size": 10, "align": "left|middle"},
        },
        "blocks": {
            "full": {"width": 12, "height": 2},
            "half": {"width": 6, "height": 1},
        },
        "pages": [
            [
                {"x": 1, "y": 1, "block": "full", "style": "header", "text": "Quarterly Summary"},
                {"x": 1, "block": "half", "style": "body", "text": "Revenue"},
                {"x": 1, "block": "half", "style": "body", "text": "Costs"},
            ],
            [
                {"x": 7, "y": 4, "block": "half", "style": "body", "text": "Notes"},
            ],
        ],
    }


class LayoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_parse_enum(self) -> None:
        self.assertEqual(parse_enum(PageSize, "letter"), PageSize.LETTER)
        self.assertEqual(parse_enum(Unit, " MM "), Unit.MM)
        self.assertEqual(parse_enum(Orientation, 1), Orientation.LANDSCAPE)
        self.assertIsNone(parse_enum(PageSize, "tabloid"))

    def test_parse_alignment(self) -> None:
        self.assertEqual(parse_alignment(["left", "top"]), Align.LEFT | Align.TOP)
        self.assertEqual(parse_alignment("right|bottom"), Align.RIGHT | Align.BOTTOM)
        self.assertEqual(parse_alignment("center middle"), Align.CENTER | Align.MIDDLE)
        self.assertEqual(parse_alignment(18), 18)
        self.assertIsNone(parse_alignment(["left", "sideways"]))
        self.assertIsNone(parse_alignment(None))

    def test_valid_layout_has_no_errors(self) -> None:
        self.assertEqual(validate_layout(sample_layout()), [])

    def test_validate_layout_reports_problems(self) -> None:
        layout = sample_layout()
        layout["grid"]["page_size"] = "tabloid"
        layout["styles"]["body"]["align"] = "diagonal"
        layout["blocks"]["half"]["width"] = "six"
        layout["pages"][0].append({"x": 1, "block": "missing", "style": "header"})
        errors = validate_layout(layout)
        self.assertTrue(any("page_size" in error for error in errors))
        self.assertTrue(any("alignment" in error for error in errors))
        self.assertTrue(any("Block half" in error for error in errors))
        self.assertTrue(any("unknown block missing" in error for error in errors))

    def test_build_report_rejects_invalid_layout(self) -> None:
        layout = sample_layout()
        layout["pages"] = "not pages"
        with self.assertRaises(ConfigurationError):
            build_report(layout, base_dir=self.root, document_factory=DummyDocument)

    def test_items_without_row_flow_below_previous(self) -> None:
        report = build_report(sample_layout(), base_dir=self.root, document_factory=DummyDocument)
        positions = [call[1:] for call in report.pdf.calls if call[0] == "set_xy"]
        # header takes 2 rows, each body line 1 row; row n sits at 36 + 12 * (n - 1)
        self.assertEqual(positions[0], (36.0, 36.0))
        self.assertEqual(positions[1], (36.0, 60.0))
        self.assertEqual(positions[2], (36.0, 72.0))
        self.assertEqual(positions[3], (312.0, 72.0))
        self.assertEqual(report.pdf.names().count("add_page"), 2)
        self.assertEqual(report.styles["body"].alignment, Align.LEFT | Align.MIDDLE)

    def test_empty_item_still_takes_its_rows(self) -> None:
        layout = sample_layout()
        layout["pages"] = [
            [
                {"x": 1, "y": 1, "block": "half", "style": "body", "text": ""},
                {"x": 1, "block": "half", "style": "body", "text": "next"},
            ]
        ]
        report = build_report(layout, base_dir=self.root, document_factory=DummyDocument)
        positions = [call[1:] for call in report.pdf.calls if call[0] == "set_xy"]
        self.assertEqual(positions, [(36.0, 36.0), (36.0, 48.0)])

    def test_load_layout(self) -> None:
        path = self.root / "layout.json"
        path.write_text(json.dumps(sample_layout()), encoding="utf-8")
        self.assertEqual(load_layout(path)["title"], "Quarterly Summary")
        with self.assertRaises(FileNotFoundError):
            load_layout(self.root / "missing.json")
        path.write_text("[]", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            load_layout(path)

    def test_render_layout_writes_slugged_pdf(self) -> None:
        path = self.root / "layout.json"
        path.write_text(json.dumps(sample_layout()), encoding="utf-8")
        out = self.root / "out"
        pdf_path = render_layout(path, out_dir=out)
        self.assertEqual(pdf_path, out / "quarterly-summary.pdf")
        self.assertTrue(pdf_path.read_bytes().startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from enum import IntEnum, IntFlag
from types import MappingProxyType
from typing import Mapping, Tuple


class Orientation(IntEnum):
    PORTRAIT = 0
    LANDSCAPE = 1


class PageSize(IntEnum):
    A3 = 0
    A4 = 1
    A5 = 2
    LETTER = 3
    LEGAL = 4


class Unit(IntEnum):
    PT = 0
    MM = 1
    CM = 2
    IN = 3


class Align(IntFlag):
    LEFT = 1 << 1
    CENTER = 1 << 2
    RIGHT = 1 << 3
    TOP = 1 << 4
    MIDDLE = 1 << 5
    BOTTOM = 1 << 6


# Order matters: codes are emitted in this order.
ALIGNMENT_CODES: Tuple[Tuple[Align, str], ...] = (
    (Align.LEFT, "L"),
    (Align.CENTER, "C"),
    (Align.RIGHT, "R"),
    (Align.TOP, "T"),
    (Align.MIDDLE, "M"),
    (Align.BOTTOM, "B"),
)

ORIENTATION_NAMES: Mapping[int, str] = MappingProxyType(
    {
        Orientation.PORTRAIT: "Portrait",
        Orientation.LANDSCAPE: "Landscape",
    }
)

PAGE_SIZE_NAMES: Mapping[int, str] = MappingProxyType(
    {
        PageSize.A3: "A3",
        PageSize.A4: "A4",
        PageSize.A5: "A5",
        PageSize.LETTER: "Letter",
        PageSize.LEGAL: "Legal",
    }
)

UNIT_NAMES: Mapping[int, str] = MappingProxyType(
    {
        Unit.PT: "pt",
        Unit.MM: "mm",
        Unit.CM: "cm",
        Unit.IN: "in",
    }
)


def alignment_code(alignment: int) -> str:
    return "".join(code for flag, code in ALIGNMENT_CODES if alignment & flag)

from __future__ import annotations

from dataclasses import dataclass

from .constants import alignment_code


@dataclass(frozen=True)
class Style:
    """
    Font and alignment used for a placement. Every content call names a style;
    even a one point size difference needs its own entry.
    """

    font_family: str
    font_style: str
    font_size: float
    alignment: int

    def convert_alignment(self) -> str:
        return alignment_code(self.alignment)

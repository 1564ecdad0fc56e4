"""
catalog/section_length.py - Pole section length model.

The section of a pole at a given level grows linearly with the level:

    length_cm = start_section_length_cm + (level - 1) * section_length_add_by_level_cm

Pole geometry is catalogued in centimeters; the result is returned in
millimeters to be compared with screw lengths. Sections on the pole's
strong side are scaled by the pole's strong_side_section_multiplier.

Inputs are validated upstream (level within the pole's capacity), so the
model never fails.
"""

from __future__ import annotations
from typing import Optional

from .enums import TensionLevel
from .models import UtilityPole

MM_PER_CM = 10.0


def section_length_mm(
    pole: UtilityPole,
    tension: TensionLevel,
    level: int,
    strong_side: Optional[TensionLevel] = None,
) -> float:
    """
    Physical length of a pole section.

    Args:
        pole: Utility pole being dressed
        tension: Tension side of the section
        level: 1-based level index on that side
        strong_side: Tension side mounted across the pole's strong face,
            or None when no side gets the multiplier

    Returns:
        Section length in millimeters
    """
    length_cm = (
        pole.start_section_length_cm(tension)
        + (level - 1) * pole.section_length_add_by_level_cm(tension)
    )
    length_mm = length_cm * MM_PER_CM
    if strong_side is not None and tension == strong_side:
        length_mm *= pole.strong_side_section_multiplier
    return length_mm


class SectionLengthModel:
    """Section length model bound to a deployment's strong side."""

    def __init__(self, strong_side: Optional[TensionLevel] = TensionLevel.MEDIUM):
        self.strong_side = strong_side

    def length_mm(self, pole: UtilityPole, tension: TensionLevel, level: int) -> float:
        return section_length_mm(pole, tension, level, self.strong_side)

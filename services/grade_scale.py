"""
services/grade_scale.py

Letter grade <-> grade point lookup. The bands belong to a college and are
passed in; the defaults below are only used to seed a new college.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

TEN_POINT = "TEN_POINT"
FOUR_POINT = "FOUR_POINT"
GRADING_SCALES = (TEN_POINT, FOUR_POINT)


@dataclass(frozen=True)
class GradeBand:
    letter: str
    grade_point: float
    min_percentage: float


_DEFAULT_BANDS = {
    TEN_POINT: [
        GradeBand("O", 10, 90),
        GradeBand("A+", 9, 80),
        GradeBand("A", 8, 70),
        GradeBand("B+", 7, 60),
        GradeBand("B", 6, 50),
        GradeBand("C", 5, 45),
        GradeBand("P", 4, 40),
        GradeBand("F", 0, 0),
    ],
    FOUR_POINT: [
        GradeBand("A", 4, 90),
        GradeBand("B", 3, 80),
        GradeBand("C", 2, 70),
        GradeBand("D", 1, 60),
        GradeBand("F", 0, 0),
    ],
}

_SCALE_MAX = {TEN_POINT: 10.0, FOUR_POINT: 4.0}


def default_bands(scale: str) -> List[GradeBand]:
    try:
        return list(_DEFAULT_BANDS[scale])
    except KeyError as exc:
        raise ValueError(f"Unsupported grading scale: {scale}") from exc


def scale_max(scale: str) -> float:
    try:
        return _SCALE_MAX[scale]
    except KeyError as exc:
        raise ValueError(f"Unsupported grading scale: {scale}") from exc


def grade_for_percentage(percentage: float, bands: Iterable[GradeBand]) -> Tuple[str, float]:
    ordered = sorted(bands, key=lambda b: b.min_percentage, reverse=True)
    if not ordered:
        return "F", 0.0

    for band in ordered:
        if percentage >= band.min_percentage:
            return band.letter, float(band.grade_point)

    lowest = ordered[-1]
    return lowest.letter, float(lowest.grade_point)


def point_for_letter(letter: str, bands: Iterable[GradeBand]) -> Optional[float]:
    wanted = letter.strip().upper()
    for band in bands:
        if band.letter.upper() == wanted:
            return float(band.grade_point)
    return None

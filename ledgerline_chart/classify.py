from __future__ import annotations

from typing import Literal

from ledgerline_chart.config import SegmentColors

Band = Literal["above_goal", "between_goal_and_zero", "below_zero"]

BANDS: tuple[Band, ...] = ("above_goal", "between_goal_and_zero", "below_zero")


def classify_value(value: float, goal_reference: float = 0.0) -> Band:
    """Place a value in exactly one band; equality resolves to the higher band.

    Only point markers and tooltip accents are colored by band. Line strokes
    keep a single neutral color.
    """

    if value >= goal_reference:
        return "above_goal"
    if value >= 0:
        return "between_goal_and_zero"
    return "below_zero"


def band_color(band: Band, colors: SegmentColors) -> str:
    if band == "above_goal":
        return colors.above_goal
    if band == "between_goal_and_zero":
        return colors.between_goal_and_zero
    return colors.below_zero


def color_for_value(value: float, goal_reference: float, colors: SegmentColors) -> str:
    return band_color(classify_value(value, goal_reference), colors)

import math
from typing import List

from app.evaluation.schemas.prompt import ParameterPoint
from app.evaluation.text import round_places


class ParameterRangeError(ValueError):
    """Raised when a parameter range or variation count breaks the grid preconditions."""


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def generate_parameter_combinations(
    temp_min: float,
    temp_max: float,
    top_p_min: float,
    top_p_max: float,
    count: int,
) -> List[ParameterPoint]:
    """Evenly spaced (temperature, top_p) pairs covering both ranges.

    A single variation sits at the midpoint of each range. Otherwise a square
    grid of ceil(sqrt(count)) steps per parameter is walked row-major
    (temperature outer, top_p inner) and cut off after ``count`` points.
    Values are rounded to 2 decimals and clamped back into their range.
    """
    if count < 1:
        raise ParameterRangeError(f"count must be at least 1, got {count}")
    if temp_min > temp_max:
        raise ParameterRangeError("Temperature min cannot be greater than max")
    if top_p_min > top_p_max:
        raise ParameterRangeError("Top P min cannot be greater than max")

    if count == 1:
        return [
            ParameterPoint(
                temperature=_clamp(round_places((temp_min + temp_max) / 2), temp_min, temp_max),
                top_p=_clamp(round_places((top_p_min + top_p_max) / 2), top_p_min, top_p_max),
            )
        ]

    steps = math.ceil(math.sqrt(count))
    temp_step = (temp_max - temp_min) / max(1, steps - 1)
    top_p_step = (top_p_max - top_p_min) / max(1, steps - 1)

    points: List[ParameterPoint] = []
    for i in range(steps):
        for j in range(steps):
            if len(points) >= count:
                return points
            points.append(
                ParameterPoint(
                    temperature=_clamp(round_places(temp_min + i * temp_step), temp_min, temp_max),
                    top_p=_clamp(round_places(top_p_min + j * top_p_step), top_p_min, top_p_max),
                )
            )
    return points[:count]

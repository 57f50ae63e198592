import math
from dataclasses import replace
from typing import Sequence
from ..constants import DECIMALS
from ..emission_factors import get_emission_factor
from ..exceptions import EmptyRouteError
from ..models import TransportSegment, RouteTotals


def f3(x: float) -> str:
    """
    Format a float with a fixed number of decimal places (DECIMALS).
    """
    return f"{x:.{DECIMALS}f}"


def round_half_up(x: float) -> int:
    """
    Round to the nearest integer, halves away from -inf (2.5 -> 3, -2.5 -> -2).
    Python's round() would send 2.5 to 2.
    """
    return int(math.floor(x + 0.5))


def clamp(x: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, x))


def calculate_segment_emissions(segment: TransportSegment) -> float:
    """
    Carbon emissions of one segment (kg CO2e):
        distance * emission_factor(mode, distance band)
    Pure: only reads the segment's mode and distance.
    """
    return segment.distance * get_emission_factor(segment.mode, None, segment.distance)


def with_computed_emissions(segment: TransportSegment) -> TransportSegment:
    """
    Return a new segment rebuilt from the segment's primary fields, so that the
    carried carbon_emission is freshly derived.
    """
    return replace(segment)


def aggregate_route(segments: Sequence[TransportSegment]) -> RouteTotals:
    """
    Reduce a non-empty list of segments to route totals.
    The carbon footprint is recomputed from each segment, never read from input.
    Raises EmptyRouteError for a route without legs.
    """
    if not segments:
        raise EmptyRouteError("A route must contain at least one transport segment")

    total_carbon = 0.0
    total_distance = 0.0
    total_duration = 0.0
    total_cost = 0.0
    for s in segments:
        total_carbon += calculate_segment_emissions(s)
        total_distance += s.distance
        total_duration += s.duration
        total_cost += s.cost

    return RouteTotals(
        total_distance=total_distance,
        total_duration=total_duration,
        total_cost=total_cost,
        total_carbon_footprint=total_carbon,
    )

"""
Sustainability scoring.

A route's score (0-100, higher = more sustainable) is the weighted sum of four
sub-scores:

  carbon      (0.6)  emissions per km relative to an average car
  efficiency  (0.2)  distance-weighted energy efficiency of the modes used
  renewable   (0.1)  distance-weighted share of renewable energy of the modes
  congestion  (0.1)  distance-weighted contribution to reducing road traffic

Everything here is a pure function of the segment list.
"""
import logging
from types import MappingProxyType
from typing import Mapping, Sequence

from .constants import (
    TransportMode,
    WEIGHT_CARBON_FOOTPRINT, WEIGHT_EFFICIENCY,
    WEIGHT_RENEWABLE_ENERGY, WEIGHT_CONGESTION_REDUCTION,
)
from .emission_factors import CAR_REFERENCE_FACTOR, require_all_modes
from .exceptions import EmptyRouteError
from .models import TransportSegment, ScoreBreakdown
from .utils.calculations import aggregate_route, clamp, round_half_up

logger = logging.getLogger(__name__)

if abs(
    WEIGHT_CARBON_FOOTPRINT + WEIGHT_EFFICIENCY + WEIGHT_RENEWABLE_ENERGY + WEIGHT_CONGESTION_REDUCTION - 1.0
) > 1e-9:
    raise RuntimeError("Sustainability weights must sum to 1.0")

# ============================================================================
# PER-MODE SUB-SCORE TABLES
# ============================================================================

MODE_EFFICIENCY_SCORES: Mapping[TransportMode, float] = MappingProxyType({
    TransportMode.TRAIN: 85,
    TransportMode.BUS: 70,
    TransportMode.CAR: 40,
    TransportMode.PLANE: 20,
    TransportMode.METRO: 90,
    TransportMode.BIKE: 100,
    TransportMode.WALK: 100,
})

RENEWABLE_ENERGY_SCORES: Mapping[TransportMode, float] = MappingProxyType({
    TransportMode.TRAIN: 70,   # many rail networks run on renewable electricity
    TransportMode.BUS: 30,     # some electric buses
    TransportMode.CAR: 20,     # some electric cars
    TransportMode.PLANE: 5,
    TransportMode.METRO: 75,
    TransportMode.BIKE: 100,
    TransportMode.WALK: 100,
})

CONGESTION_REDUCTION_SCORES: Mapping[TransportMode, float] = MappingProxyType({
    TransportMode.TRAIN: 90,
    TransportMode.BUS: 80,
    TransportMode.CAR: 10,     # private cars add to congestion
    TransportMode.PLANE: 50,   # neutral for road traffic
    TransportMode.METRO: 95,
    TransportMode.BIKE: 100,
    TransportMode.WALK: 100,
})

require_all_modes(MODE_EFFICIENCY_SCORES, "MODE_EFFICIENCY_SCORES")
require_all_modes(RENEWABLE_ENERGY_SCORES, "RENEWABLE_ENERGY_SCORES")
require_all_modes(CONGESTION_REDUCTION_SCORES, "CONGESTION_REDUCTION_SCORES")


# ============================================================================
# SUB-SCORES
# ============================================================================

def carbon_score(total_carbon_footprint: float, total_distance: float) -> float:
    """
    100 for zero emissions, 0 at (or above) the emissions of an average car.
    A zero-distance route has zero emissions per km and so scores 100.
    """
    carbon_per_km = total_carbon_footprint / total_distance if total_distance > 0 else 0.0
    return clamp(100.0 - (carbon_per_km / CAR_REFERENCE_FACTOR) * 100.0, 0.0, 100.0)


def mode_weighted_score(
    segments: Sequence[TransportSegment], table: Mapping[TransportMode, float]
) -> float:
    """
    Distance-weighted average of a per-mode score over the segments.
    Returns 0 if there are no segments or the total distance is 0.
    """
    if not segments:
        return 0.0
    total_distance = sum(s.distance for s in segments)
    if total_distance == 0:
        return 0.0
    weighted = sum(table[s.mode] * s.distance for s in segments)
    return weighted / total_distance


def efficiency_score(segments: Sequence[TransportSegment]) -> float:
    return mode_weighted_score(segments, MODE_EFFICIENCY_SCORES)


def renewable_energy_score(segments: Sequence[TransportSegment]) -> float:
    return mode_weighted_score(segments, RENEWABLE_ENERGY_SCORES)


def congestion_reduction_score(segments: Sequence[TransportSegment]) -> float:
    return mode_weighted_score(segments, CONGESTION_REDUCTION_SCORES)


# ============================================================================
# FINAL SCORE
# ============================================================================

def score_breakdown(segments: Sequence[TransportSegment]) -> ScoreBreakdown:
    """
    Compute all four sub-scores and the final weighted score for a route.
    Emissions are recomputed from the segments. Raises EmptyRouteError for an
    empty list.
    """
    if not segments:
        raise EmptyRouteError("Cannot score a route without transport segments")

    totals = aggregate_route(segments)

    carbon = carbon_score(totals.total_carbon_footprint, totals.total_distance)
    efficiency = efficiency_score(segments)
    renewable = renewable_energy_score(segments)
    congestion = congestion_reduction_score(segments)

    weighted = (
        carbon * WEIGHT_CARBON_FOOTPRINT
        + efficiency * WEIGHT_EFFICIENCY
        + renewable * WEIGHT_RENEWABLE_ENERGY
        + congestion * WEIGHT_CONGESTION_REDUCTION
    )
    score = int(clamp(round_half_up(weighted), 0, 100))

    logger.debug(
        f"Score {score}: carbon={carbon:.2f}, efficiency={efficiency:.2f}, "
        f"renewable={renewable:.2f}, congestion={congestion:.2f}"
    )

    return ScoreBreakdown(
        carbon=carbon,
        efficiency=efficiency,
        renewable=renewable,
        congestion=congestion,
        score=score,
    )


def calculate_sustainability_score(segments: Sequence[TransportSegment]) -> int:
    """Sustainability score of a route, an integer in [0, 100]."""
    return score_breakdown(segments).score

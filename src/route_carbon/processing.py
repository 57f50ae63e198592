"""
Route batch processing.

Turns partially specified route candidates into fully scored RouteOption values,
ranks them and applies travel preferences. Each candidate is processed on its
own: a malformed candidate is logged and dropped without affecting the others.
"""
import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .audit import audit_logger
from .comparison import compare_with_conventional_travel, get_sustainability_insights
from .emission_factors import get_emission_factor
from .exceptions import RouteCarbonError
from .models import (
    RouteCandidate, RouteOption, TransportSegment, TravelPreferences, BatchResult
)
from .scoring import calculate_sustainability_score
from .utils.calculations import aggregate_route, with_computed_emissions
from .utils.input_helpers import (
    parse_segment, parse_route_candidate, format_and_clean_report_dataframe, segments_as_dicts
)

logger = logging.getLogger(__name__)

CandidateLike = Union[RouteCandidate, RouteOption, dict]


def _as_candidate(candidate: CandidateLike) -> RouteCandidate:
    if isinstance(candidate, RouteCandidate):
        return candidate
    if isinstance(candidate, RouteOption):
        return RouteCandidate(
            transport_modes=list(candidate.transport_modes),
            id=candidate.id,
            name=candidate.name,
            origin=candidate.origin,
            destination=candidate.destination,
        )
    if isinstance(candidate, dict):
        return parse_route_candidate(candidate)
    raise TypeError(f"Unsupported route candidate type: {type(candidate).__name__}")


def _check_supplied_total(route_id: str, label: str, supplied: Optional[float], computed: float):
    if supplied is not None and not math.isclose(supplied, computed, rel_tol=1e-6, abs_tol=1e-9):
        logger.debug(f"{route_id}: supplied {label} {supplied} replaced by recomputed {computed}")


def _audit_segments(route_id: str, segments: Sequence[TransportSegment]):
    if not audit_logger.enabled:
        return
    for i, s in enumerate(segments, 1):
        audit_logger.log_calculation(
            context=f"Segment {i} ({s.mode.value}) of {route_id}",
            formula="Distance(km) * EF(mode, distance band)",
            variables={
                "Distance_km": s.distance,
                "EF": get_emission_factor(s.mode, None, s.distance),
            },
            result=s.carbon_emission,
            unit="kgCO2e",
        )


def build_route_option(candidate: CandidateLike, index: int = 0) -> RouteOption:
    """
    Rebuild every segment, aggregate the totals and score the route.
    Caller-supplied emissions, totals and score are never used.
    """
    candidate = _as_candidate(candidate)
    route_id = candidate.id or f"route-{index}"
    name = candidate.name or f"Route {index + 1}"

    segments = tuple(with_computed_emissions(parse_segment(s)) for s in candidate.transport_modes)
    totals = aggregate_route(segments)
    score = calculate_sustainability_score(segments)

    _check_supplied_total(route_id, "total distance", candidate.total_distance, totals.total_distance)
    _check_supplied_total(route_id, "total duration", candidate.total_duration, totals.total_duration)
    _check_supplied_total(route_id, "total cost", candidate.total_cost, totals.total_cost)
    _check_supplied_total(
        route_id, "carbon footprint", candidate.total_carbon_footprint, totals.total_carbon_footprint
    )
    _audit_segments(route_id, segments)

    return RouteOption(
        id=route_id,
        name=name,
        origin=candidate.origin,
        destination=candidate.destination,
        transport_modes=segments,
        total_duration=totals.total_duration,
        total_distance=totals.total_distance,
        total_cost=totals.total_cost,
        total_carbon_footprint=totals.total_carbon_footprint,
        sustainability_score=score,
    )


def rank_routes(routes: Iterable[RouteOption]) -> List[RouteOption]:
    """Most sustainable first; equal scores keep their input order."""
    return sorted(routes, key=lambda r: r.sustainability_score, reverse=True)


def _process(candidates: Sequence[CandidateLike]) -> Tuple[List[RouteOption], List[Tuple[str, str]]]:
    routes = []
    rejected = []
    for index, candidate in enumerate(candidates):
        try:
            routes.append(build_route_option(candidate, index))
        except (RouteCarbonError, ValueError, TypeError) as e:
            label = getattr(candidate, "id", None)
            if label is None and isinstance(candidate, dict):
                label = candidate.get("id")
            label = label or f"route-{index}"
            logger.error(f"Skipping route candidate {label}: {e}")
            rejected.append((str(label), str(e)))
    return rank_routes(routes), rejected


def process_route_options(candidates: Sequence[CandidateLike]) -> List[RouteOption]:
    """
    Score every candidate and return them ranked by sustainability score.
    Invalid candidates are dropped. An empty input gives an empty list.
    """
    routes, _ = _process(candidates)
    return routes


def filter_routes_by_preferences(
    routes: Iterable[RouteOption], preferences: Optional[TravelPreferences]
) -> List[RouteOption]:
    """
    Drop routes over the time or budget limit (or using modes outside the
    preferred set) and order the rest: by score when sustainability is
    prioritized, otherwise fastest first.
    """
    routes = list(routes)
    if preferences is None:
        return rank_routes(routes)

    if preferences.max_travel_time is not None:
        routes = [r for r in routes if r.total_duration <= preferences.max_travel_time]
    if preferences.budget_limit is not None:
        routes = [r for r in routes if r.total_cost <= preferences.budget_limit]
    if preferences.preferred_transport_modes:
        allowed = set(preferences.preferred_transport_modes)
        routes = [r for r in routes if set(r.modes) <= allowed]

    if preferences.prioritize_sustainability:
        return rank_routes(routes)
    return sorted(routes, key=lambda r: r.total_duration)


def most_sustainable_route(routes: Iterable[RouteOption]) -> Optional[RouteOption]:
    ranked = rank_routes(routes)
    return ranked[0] if ranked else None


def plan_summary(
    candidates: Sequence[CandidateLike], preferences: Optional[TravelPreferences] = None
) -> BatchResult:
    """
    Score, filter and order a batch, and compare the route listed first with driving.
    That is the most sustainable route, or the fastest one when sustainability is
    not prioritized.
    """
    routes, rejected = _process(candidates)
    routes = filter_routes_by_preferences(routes, preferences)
    if not routes:
        logger.warning("No routes left after scoring and preference filtering.")
        return BatchResult(routes=[], rejected=rejected)

    lead = routes[0]
    return BatchResult(
        routes=routes,
        top_comparison=compare_with_conventional_travel(lead),
        insights=get_sustainability_insights(lead),
        rejected=rejected,
    )


# ============================================================================
# TABULAR OUTPUT
# ============================================================================

def routes_to_dataframe(routes: Sequence[RouteOption]) -> pd.DataFrame:
    """One report row per route, in the given order, with the car comparison."""
    rows = []
    for rank, r in enumerate(routes, 1):
        comparison = compare_with_conventional_travel(r)
        rows.append({
            "Rank": rank,
            "Route ID": r.id,
            "Route Name": r.name,
            "Modes": " > ".join(m.value for m in r.modes),
            "Segments": len(r.transport_modes),
            "Total Distance (km)": r.total_distance,
            "Total Duration (min)": r.total_duration,
            "Total Cost": r.total_cost,
            "Total Emissions (kgCO2e)": r.total_carbon_footprint,
            "Sustainability Score": r.sustainability_score,
            "Conventional Footprint (kgCO2e)": comparison.conventional_footprint,
            "Savings (kgCO2e)": comparison.savings_amount,
            "Savings (%)": comparison.savings_percentage,
        })
    return format_and_clean_report_dataframe(pd.DataFrame(rows))


def segments_to_dataframe(routes: Sequence[RouteOption]) -> pd.DataFrame:
    """One row per segment across all routes."""
    rows = []
    for r in routes:
        rows.extend(segments_as_dicts(r))
    return pd.DataFrame(rows)

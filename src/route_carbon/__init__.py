from .constants import TransportMode
from .models import (
    Location,
    TransportSegment,
    RouteCandidate,
    RouteOption,
    RouteTotals,
    ScoreBreakdown,
    ComparisonData,
    TravelPreferences,
    BatchResult,
)
from .emission_factors import get_emission_factor, available_variants
from .utils.calculations import calculate_segment_emissions, aggregate_route
from .scoring import calculate_sustainability_score, score_breakdown
from .comparison import (
    compare_with_conventional_travel,
    get_sustainability_insights,
    format_carbon_footprint,
)
from .processing import (
    build_route_option,
    process_route_options,
    rank_routes,
    filter_routes_by_preferences,
    most_sustainable_route,
    plan_summary,
)
from .exceptions import (
    RouteCarbonError,
    UnknownTransportModeError,
    UnknownVariantError,
    RouteValidationError,
    InvalidSegmentError,
    EmptyRouteError,
    ConfigurationError,
)

__all__ = [
    "TransportMode",
    "Location",
    "TransportSegment",
    "RouteCandidate",
    "RouteOption",
    "RouteTotals",
    "ScoreBreakdown",
    "ComparisonData",
    "TravelPreferences",
    "BatchResult",
    "get_emission_factor",
    "available_variants",
    "calculate_segment_emissions",
    "aggregate_route",
    "calculate_sustainability_score",
    "score_breakdown",
    "compare_with_conventional_travel",
    "get_sustainability_insights",
    "format_carbon_footprint",
    "build_route_option",
    "process_route_options",
    "rank_routes",
    "filter_routes_by_preferences",
    "most_sustainable_route",
    "plan_summary",
    "RouteCarbonError",
    "UnknownTransportModeError",
    "UnknownVariantError",
    "RouteValidationError",
    "InvalidSegmentError",
    "EmptyRouteError",
    "ConfigurationError",
]

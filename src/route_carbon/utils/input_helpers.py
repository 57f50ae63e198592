import logging
import math
import pandas as pd
from typing import Any, Dict, List, Mapping, Optional

import colorama
from colorama import Fore, Style, Back

from ..models import Location, TransportSegment, RouteCandidate, RouteOption, ComparisonData
from ..constants import DECIMALS
from ..exceptions import InvalidSegmentError, RouteValidationError
from .calculations import f3

colorama.init(autoreset=True)

logger = logging.getLogger(__name__)

# Style Constants
C_HEADER = Fore.CYAN + Style.BRIGHT
C_ERROR = Fore.RED
C_SUCCESS = Fore.GREEN
C_WARN = Fore.YELLOW
C_RESET = Style.RESET_ALL

# Tabular segment input: one row per segment
SEGMENT_REQUIRED_COLUMNS = ["route_id", "mode", "distance_km", "duration_min"]

# Report column order
REPORT_COLUMNS = [
    "Rank",
    "Route ID",
    "Route Name",
    "Modes",
    "Segments",
    "Total Distance (km)",
    "Total Duration (min)",
    "Total Cost",
    "Total Emissions (kgCO2e)",
    "Sustainability Score",
    "Conventional Footprint (kgCO2e)",
    "Savings (kgCO2e)",
    "Savings (%)",
]


def print_header(text: str):
    """Print a styled header."""
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _first(mapping: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present (and not NaN) in the mapping."""
    for k in keys:
        if k in mapping and not _is_missing(mapping[k]):
            return mapping[k]
    return None


def _to_float(name: str, value: Any, default: Optional[float] = None) -> float:
    if _is_missing(value):
        if default is None:
            raise InvalidSegmentError(f"Missing required segment field '{name}'")
        return default
    if isinstance(value, bool):
        raise InvalidSegmentError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidSegmentError(f"{name} must be a number, got {value!r}")


def parse_location(data: Any) -> Optional[Location]:
    """
    Accepts a Location, a {"lat", "lon"} mapping or the
    {"address", "coordinates": {"lat", "lng"}} shape. Returns None if absent.
    """
    if data is None or isinstance(data, Location):
        return data
    if not isinstance(data, Mapping):
        raise RouteValidationError(f"Invalid location: {data!r}")
    coords = data.get("coordinates", data)
    lat = _first(coords, "lat", "latitude")
    lon = _first(coords, "lon", "lng", "longitude")
    if lat is None or lon is None:
        raise RouteValidationError(f"Location is missing coordinates: {data!r}")
    lat, lon = float(lat), float(lon)
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise RouteValidationError(f"Coordinates out of range: {lat}, {lon}")
    return Location(lat=lat, lon=lon, address=data.get("address"))


def parse_segment(data: Any) -> TransportSegment:
    """
    Build a TransportSegment from a mapping (snake_case or camelCase keys).
    Any supplied carbon emission is ignored.
    """
    if isinstance(data, TransportSegment):
        return data
    if not isinstance(data, Mapping):
        raise InvalidSegmentError(f"Segment must be a mapping, got {type(data).__name__}")

    mode = _first(data, "mode")
    if mode is None:
        raise InvalidSegmentError("Missing required segment field 'mode'")
    provider = _first(data, "provider")

    return TransportSegment(
        mode=mode,
        distance=_to_float("distance", _first(data, "distance", "distance_km")),
        duration=_to_float("duration", _first(data, "duration", "duration_min")),
        cost=_to_float("cost", _first(data, "cost"), default=0.0),
        provider=str(provider) if provider is not None else None,
        transit_details=_first(data, "transit_details", "transitDetails"),
    )


def parse_route_candidate(data: Mapping[str, Any]) -> RouteCandidate:
    """
    Build a RouteCandidate from an upstream mapping. Segments are kept as given
    and parsed when the route is built.
    """
    segments = _first(data, "transport_modes", "transportModes")
    if segments is None:
        segments = []
    if not isinstance(segments, (list, tuple)):
        raise RouteValidationError("transport_modes must be a list of segments")

    def _opt_float(*keys):
        value = _first(data, *keys)
        return float(value) if value is not None else None

    route_id = _first(data, "id")
    name = _first(data, "name")
    return RouteCandidate(
        transport_modes=list(segments),
        id=str(route_id) if route_id is not None else None,
        name=str(name) if name is not None else None,
        origin=parse_location(data.get("origin")),
        destination=parse_location(data.get("destination")),
        total_duration=_opt_float("total_duration", "totalDuration"),
        total_distance=_opt_float("total_distance", "totalDistance"),
        total_cost=_opt_float("total_cost", "totalCost"),
        total_carbon_footprint=_opt_float("total_carbon_footprint", "totalCarbonFootprint"),
        sustainability_score=_opt_float("sustainability_score", "sustainabilityScore"),
    )


def candidates_from_dataframe(df: pd.DataFrame) -> List[RouteCandidate]:
    """
    Group segment rows into route candidates.
    Required columns: route_id, mode, distance_km, duration_min.
    Optional: route_name, cost, provider.
    Routes keep the order of their first row; segments keep row order.
    Rows without a route_id raise RouteValidationError.
    """
    missing = [c for c in SEGMENT_REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise RouteValidationError(f"Segment table missing column(s): {', '.join(missing)}")

    ids = df["route_id"]
    blank = ids.isna() | (ids.astype(str).str.strip() == "")
    if blank.any():
        bad_rows = ", ".join(str(i) for i in df.index[blank])
        raise RouteValidationError(f"Segment row(s) without a route_id: {bad_rows}")

    candidates = []
    for route_id, rows in df.groupby("route_id", sort=False):
        segments = [row.to_dict() for _, row in rows.iterrows()]
        name = None
        if "route_name" in rows.columns:
            names = rows["route_name"].dropna()
            if not names.empty:
                name = str(names.iloc[0])
        candidates.append(RouteCandidate(transport_modes=segments, id=str(route_id), name=name))

    logger.info(f"Loaded {len(candidates)} candidate routes from {len(df)} segment rows")
    return candidates


def format_and_clean_report_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """
    Put report columns in a fixed order (extra columns are kept at the end),
    add any missing report columns, replace NaNs and round numeric values.
    """
    df = df.copy()
    for col in REPORT_COLUMNS:
        if col not in df.columns:
            df[col] = 0.0 if col not in ("Route ID", "Route Name", "Modes") else ""

    extra = [c for c in df.columns if c not in REPORT_COLUMNS]
    df = df[REPORT_COLUMNS + extra]

    numeric_cols = df.select_dtypes(include="number").columns
    df[numeric_cols] = df[numeric_cols].fillna(0.0).round(DECIMALS)
    df = df.fillna("")
    return df


def print_route_overview(route: RouteOption, comparison: Optional[ComparisonData] = None):
    """
    Console summary for one scored route.
    """
    print(f"\n{Back.BLACK}{C_HEADER}{'='*60}")
    print(f"   ROUTE: {route.name.upper()} ({route.id})")
    print(f"{'='*60}{Style.RESET_ALL}")

    print(f"\n{C_HEADER}Segments:{C_RESET}")
    for i, s in enumerate(route.transport_modes, 1):
        print(f"  {i}. {s.mode.value:<6} {s.distance:>9.1f} km {s.duration:>7.0f} min   {f3(s.carbon_emission)} kg CO2e")

    print(f"{'-'*60}")
    print(f"  Distance : {route.total_distance:.1f} km")
    print(f"  Duration : {route.total_duration:.0f} min")
    print(f"  Cost     : {route.total_cost:.2f}")
    print(f"  {Style.BRIGHT}Emissions: {C_SUCCESS}{f3(route.total_carbon_footprint)}{C_RESET} {Style.BRIGHT}kg CO2e{C_RESET}")
    print(f"  Score    : {route.sustainability_score}/100")

    if comparison is not None:
        colour = C_SUCCESS if comparison.savings_amount >= 0 else C_WARN
        print(f"\n{C_HEADER}Versus {comparison.conventional_method}:{C_RESET}")
        print(f"  Conventional: {f3(comparison.conventional_footprint)} kg CO2e")
        print(f"  {colour}{comparison.savings} ({comparison.savings_percentage}%){C_RESET}")
    print(f"{'='*60}\n")


def segments_as_dicts(route: RouteOption) -> List[Dict[str, Any]]:
    return [
        {
            "route_id": route.id,
            "mode": s.mode.value,
            "distance_km": s.distance,
            "duration_min": s.duration,
            "cost": s.cost,
            "carbon_emission_kg": s.carbon_emission,
            "provider": s.provider,
        }
        for s in route.transport_modes
    ]

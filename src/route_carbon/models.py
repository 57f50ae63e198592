import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .constants import TransportMode, CONVENTIONAL_METHOD
from .emission_factors import get_emission_factor, parse_transport_mode
from .exceptions import InvalidSegmentError


def _non_negative(name: str, value: Any) -> float:
    """Validate a numeric segment field and return it as float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidSegmentError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidSegmentError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise InvalidSegmentError(f"{name} must be non-negative, got {value!r}")
    return value


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    address: Optional[str] = None


@dataclass(frozen=True)
class TransportSegment:
    """
    One atomic leg of a journey.
    - distance: km
    - duration: minutes
    - cost: currency units
    carbon_emission (kg CO2e) is derived from mode and distance on construction
    and cannot be passed in.
    """
    mode: TransportMode
    distance: float
    duration: float
    cost: float = 0.0
    provider: Optional[str] = None
    transit_details: Optional[Mapping[str, Any]] = field(default=None, compare=False)
    carbon_emission: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "mode", parse_transport_mode(self.mode))
        object.__setattr__(self, "distance", _non_negative("distance", self.distance))
        object.__setattr__(self, "duration", _non_negative("duration", self.duration))
        object.__setattr__(self, "cost", _non_negative("cost", self.cost))
        object.__setattr__(
            self,
            "carbon_emission",
            self.distance * get_emission_factor(self.mode, None, self.distance),
        )


@dataclass
class RouteCandidate:
    """
    Partially specified route as supplied by an upstream route-discovery step.
    Carbon values, score and totals, if present, are informational only and are
    always recomputed from the segments.
    """
    transport_modes: List[Union[TransportSegment, Dict[str, Any]]]
    id: Optional[str] = None
    name: Optional[str] = None
    origin: Optional[Location] = None
    destination: Optional[Location] = None
    total_duration: Optional[float] = None
    total_distance: Optional[float] = None
    total_cost: Optional[float] = None
    total_carbon_footprint: Optional[float] = None
    sustainability_score: Optional[float] = None


@dataclass(frozen=True)
class RouteTotals:
    total_distance: float
    total_duration: float
    total_cost: float
    total_carbon_footprint: float


@dataclass(frozen=True)
class RouteOption:
    """
    Fully scored route. Aggregates always equal the sums over transport_modes.
    """
    id: str
    name: str
    transport_modes: Tuple[TransportSegment, ...]
    total_duration: float
    total_distance: float
    total_cost: float
    total_carbon_footprint: float
    sustainability_score: int
    origin: Optional[Location] = None
    destination: Optional[Location] = None

    @property
    def modes(self) -> Tuple[TransportMode, ...]:
        return tuple(s.mode for s in self.transport_modes)


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Sub-scores (0-100 each) and the final weighted score.
    """
    carbon: float
    efficiency: float
    renewable: float
    congestion: float
    score: int


@dataclass(frozen=True)
class ComparisonData:
    conventional_footprint: float
    savings: str
    savings_amount: float
    savings_percentage: int
    conventional_method: str = CONVENTIONAL_METHOD


@dataclass(frozen=True)
class TravelPreferences:
    prioritize_sustainability: bool = True
    max_travel_time: Optional[float] = None
    budget_limit: Optional[float] = None
    preferred_transport_modes: Tuple[TransportMode, ...] = ()

    def __post_init__(self):
        if self.max_travel_time is not None and self.max_travel_time <= 0:
            raise ValueError("max_travel_time must be a positive number")
        if self.budget_limit is not None and self.budget_limit <= 0:
            raise ValueError("budget_limit must be a positive number")
        object.__setattr__(
            self,
            "preferred_transport_modes",
            tuple(parse_transport_mode(m) for m in self.preferred_transport_modes),
        )


@dataclass
class BatchResult:
    """
    Outcome of planning a batch of candidates.
    """
    routes: List[RouteOption]
    top_comparison: Optional[ComparisonData] = None
    insights: List[str] = field(default_factory=list)
    rejected: List[Tuple[str, str]] = field(default_factory=list)

"""
Emission factor table.

Per-mode base coefficients plus named variants, in kg CO2e per km. The table is
built once at import from constants.py and exposed read-only.
"""
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .constants import (
    TransportMode,
    EMISSIONFACTOR_CAR, EMISSIONFACTOR_CAR_PETROL, EMISSIONFACTOR_CAR_DIESEL,
    EMISSIONFACTOR_CAR_HYBRID, EMISSIONFACTOR_CAR_ELECTRIC,
    EMISSIONFACTOR_TRAIN, EMISSIONFACTOR_TRAIN_HIGH_SPEED, EMISSIONFACTOR_TRAIN_REGIONAL,
    EMISSIONFACTOR_TRAIN_INTERCITY,
    EMISSIONFACTOR_BUS, EMISSIONFACTOR_BUS_CITY, EMISSIONFACTOR_BUS_INTERCITY,
    EMISSIONFACTOR_BUS_ELECTRIC,
    EMISSIONFACTOR_PLANE, EMISSIONFACTOR_PLANE_DOMESTIC, EMISSIONFACTOR_PLANE_SHORT_HAUL,
    EMISSIONFACTOR_PLANE_LONG_HAUL, EMISSIONFACTOR_PLANE_BUSINESS_CLASS,
    EMISSIONFACTOR_PLANE_FIRST_CLASS,
    EMISSIONFACTOR_METRO, EMISSIONFACTOR_BIKE, EMISSIONFACTOR_WALK,
    FLIGHT_DOMESTIC_MAX_KM, FLIGHT_SHORT_HAUL_MAX_KM,
)
from .exceptions import UnknownTransportModeError, UnknownVariantError


class ModeFactors:
    """Base factor and named variants for one transport mode."""

    __slots__ = ("base", "variants")

    def __init__(self, base: float, variants: Optional[Mapping[str, float]] = None):
        self.base = base
        self.variants = MappingProxyType(dict(variants or {}))

    def __repr__(self) -> str:
        return f"ModeFactors(base={self.base}, variants={dict(self.variants)})"


def require_all_modes(table: Mapping[TransportMode, object], name: str) -> None:
    """Fail at import time if a per-mode table does not cover every TransportMode."""
    missing = [m.value for m in TransportMode if m not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for transport mode(s): {', '.join(missing)}")


EMISSION_FACTORS: Mapping[TransportMode, ModeFactors] = MappingProxyType({
    TransportMode.CAR: ModeFactors(EMISSIONFACTOR_CAR, {
        "petrol": EMISSIONFACTOR_CAR_PETROL,
        "diesel": EMISSIONFACTOR_CAR_DIESEL,
        "hybrid": EMISSIONFACTOR_CAR_HYBRID,
        "electric": EMISSIONFACTOR_CAR_ELECTRIC,
    }),
    TransportMode.TRAIN: ModeFactors(EMISSIONFACTOR_TRAIN, {
        "high_speed": EMISSIONFACTOR_TRAIN_HIGH_SPEED,
        "regional": EMISSIONFACTOR_TRAIN_REGIONAL,
        "intercity": EMISSIONFACTOR_TRAIN_INTERCITY,
    }),
    TransportMode.BUS: ModeFactors(EMISSIONFACTOR_BUS, {
        "city": EMISSIONFACTOR_BUS_CITY,
        "intercity": EMISSIONFACTOR_BUS_INTERCITY,
        "electric": EMISSIONFACTOR_BUS_ELECTRIC,
    }),
    TransportMode.PLANE: ModeFactors(EMISSIONFACTOR_PLANE, {
        "domestic": EMISSIONFACTOR_PLANE_DOMESTIC,
        "short_haul": EMISSIONFACTOR_PLANE_SHORT_HAUL,
        "long_haul": EMISSIONFACTOR_PLANE_LONG_HAUL,
        "business_class": EMISSIONFACTOR_PLANE_BUSINESS_CLASS,
        "first_class": EMISSIONFACTOR_PLANE_FIRST_CLASS,
    }),
    TransportMode.METRO: ModeFactors(EMISSIONFACTOR_METRO),
    TransportMode.BIKE: ModeFactors(EMISSIONFACTOR_BIKE),
    TransportMode.WALK: ModeFactors(EMISSIONFACTOR_WALK),
})

require_all_modes(EMISSION_FACTORS, "EMISSION_FACTORS")

# Reference for the carbon sub-score and the conventional comparison
CAR_REFERENCE_FACTOR = EMISSION_FACTORS[TransportMode.CAR].base


def parse_transport_mode(mode: Union[TransportMode, str]) -> TransportMode:
    """
    Coerce a mode name (e.g. "train", "TRAIN") to a TransportMode.
    Raises UnknownTransportModeError for anything outside the enumeration.
    """
    if isinstance(mode, TransportMode):
        return mode
    if isinstance(mode, str):
        try:
            return TransportMode(mode.strip().lower())
        except ValueError:
            pass
    raise UnknownTransportModeError(f"Unknown transport mode: {mode!r}")


def flight_variant_for_distance(distance: float) -> str:
    """
    Distance band for a flight:
      < 500 km          -> domestic   (takeoff/landing dominates, highest per km)
      500 km - 1500 km  -> short_haul
      >= 1500 km        -> long_haul  (cruise dominates, lowest per km)
    """
    if distance < FLIGHT_DOMESTIC_MAX_KM:
        return "domestic"
    if distance < FLIGHT_SHORT_HAUL_MAX_KM:
        return "short_haul"
    return "long_haul"


def get_emission_factor(
    mode: Union[TransportMode, str],
    variant: Optional[str] = None,
    distance: Optional[float] = None,
) -> float:
    """
    Return the emission factor (kg CO2e/km) for a mode.

    For planes without an explicit variant the variant is picked from a positive
    distance band. Other modes return their base factor unless a variant is
    requested.
    """
    mode = parse_transport_mode(mode)
    factors = EMISSION_FACTORS[mode]

    if mode is TransportMode.PLANE and variant is None and distance:
        variant = flight_variant_for_distance(distance)

    if variant is None:
        return factors.base
    if variant not in factors.variants:
        raise UnknownVariantError(
            f"Unknown emission factor variant {variant!r} for mode '{mode.value}'. "
            f"Available: {', '.join(factors.variants) or 'none'}"
        )
    return factors.variants[variant]


def available_variants(mode: Union[TransportMode, str]) -> Tuple[str, ...]:
    return tuple(EMISSION_FACTORS[parse_transport_mode(mode)].variants)

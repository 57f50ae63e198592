import math
from enum import Enum
from .config import load_excel_config
from .exceptions import ConfigurationError

# ============================================================================
# SETTINGS & CONSTANTS
# ============================================================================

# Overrides are optional: every parameter has a built-in default.
_config = load_excel_config()


def _get(key, default):
    if key not in _config:
        return default
    raw = _config[key]
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Parameter '{key}' must be numeric, got {raw!r}")
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"Parameter '{key}' must be a finite non-negative number, got {raw!r}")
    return value


# Emission factors, kg CO2e per km.
# Public transport and planes are per passenger; cars are per vehicle.

# Car
EMISSIONFACTOR_CAR = _get("EMISSIONFACTOR_CAR", 0.21)
EMISSIONFACTOR_CAR_PETROL = _get("EMISSIONFACTOR_CAR_PETROL", 0.24)
EMISSIONFACTOR_CAR_DIESEL = _get("EMISSIONFACTOR_CAR_DIESEL", 0.27)
EMISSIONFACTOR_CAR_HYBRID = _get("EMISSIONFACTOR_CAR_HYBRID", 0.12)
EMISSIONFACTOR_CAR_ELECTRIC = _get("EMISSIONFACTOR_CAR_ELECTRIC", 0.05)

# Train
EMISSIONFACTOR_TRAIN = _get("EMISSIONFACTOR_TRAIN", 0.041)
EMISSIONFACTOR_TRAIN_HIGH_SPEED = _get("EMISSIONFACTOR_TRAIN_HIGH_SPEED", 0.028)
EMISSIONFACTOR_TRAIN_REGIONAL = _get("EMISSIONFACTOR_TRAIN_REGIONAL", 0.048)
EMISSIONFACTOR_TRAIN_INTERCITY = _get("EMISSIONFACTOR_TRAIN_INTERCITY", 0.035)

# Bus
EMISSIONFACTOR_BUS = _get("EMISSIONFACTOR_BUS", 0.089)
EMISSIONFACTOR_BUS_CITY = _get("EMISSIONFACTOR_BUS_CITY", 0.105)
EMISSIONFACTOR_BUS_INTERCITY = _get("EMISSIONFACTOR_BUS_INTERCITY", 0.078)
EMISSIONFACTOR_BUS_ELECTRIC = _get("EMISSIONFACTOR_BUS_ELECTRIC", 0.032)

# Plane (economy unless stated, 82% load factor)
EMISSIONFACTOR_PLANE = _get("EMISSIONFACTOR_PLANE", 0.255)
EMISSIONFACTOR_PLANE_DOMESTIC = _get("EMISSIONFACTOR_PLANE_DOMESTIC", 0.285)
EMISSIONFACTOR_PLANE_SHORT_HAUL = _get("EMISSIONFACTOR_PLANE_SHORT_HAUL", 0.255)
EMISSIONFACTOR_PLANE_LONG_HAUL = _get("EMISSIONFACTOR_PLANE_LONG_HAUL", 0.195)
EMISSIONFACTOR_PLANE_BUSINESS_CLASS = _get("EMISSIONFACTOR_PLANE_BUSINESS_CLASS", 0.510)
EMISSIONFACTOR_PLANE_FIRST_CLASS = _get("EMISSIONFACTOR_PLANE_FIRST_CLASS", 0.765)

# Metro and active travel
EMISSIONFACTOR_METRO = _get("EMISSIONFACTOR_METRO", 0.028)
EMISSIONFACTOR_BIKE = _get("EMISSIONFACTOR_BIKE", 0.0)
EMISSIONFACTOR_WALK = _get("EMISSIONFACTOR_WALK", 0.0)

# Flight distance bands (km)
FLIGHT_DOMESTIC_MAX_KM = 500.0
FLIGHT_SHORT_HAUL_MAX_KM = 1500.0

# Sustainability score weights
WEIGHT_CARBON_FOOTPRINT = 0.6
WEIGHT_EFFICIENCY = 0.2
WEIGHT_RENEWABLE_ENERGY = 0.1
WEIGHT_CONGESTION_REDUCTION = 0.1

# Conventional travel reference
CONVENTIONAL_METHOD = "Private Car (Petrol)"

# Reporting
DECIMALS = int(_get("DECIMALS", 3))

# ============================================================================
# TYPES (Code constructs, not excel parameters)
# ============================================================================


class TransportMode(str, Enum):
    CAR = "car"
    TRAIN = "train"
    BUS = "bus"
    PLANE = "plane"
    METRO = "metro"
    BIKE = "bike"
    WALK = "walk"


PUBLIC_TRANSPORT_MODES = frozenset({TransportMode.TRAIN, TransportMode.BUS, TransportMode.METRO})

from typing import List

from .constants import CONVENTIONAL_METHOD, PUBLIC_TRANSPORT_MODES
from .emission_factors import CAR_REFERENCE_FACTOR
from .models import RouteOption, ComparisonData
from .utils.calculations import round_half_up


def conventional_footprint(total_distance: float) -> float:
    """Footprint of driving the same distance in an average car (kg CO2e)."""
    return total_distance * CAR_REFERENCE_FACTOR


def compare_with_conventional_travel(route: RouteOption) -> ComparisonData:
    """
    Compare a scored route with driving the same distance.
    savings_percentage is signed: negative means the route emits more than the car.
    """
    conventional = conventional_footprint(route.total_distance)
    actual = route.total_carbon_footprint
    savings = conventional - actual
    savings_percentage = round_half_up((savings / conventional) * 100) if conventional > 0 else 0

    if savings > 0:
        savings_text = f"{savings:.2f} kg CO2e saved"
    elif savings < 0:
        savings_text = f"{abs(savings):.2f} kg CO2e additional emissions"
    else:
        savings_text = "No difference in emissions"

    return ComparisonData(
        conventional_method=CONVENTIONAL_METHOD,
        conventional_footprint=conventional,
        savings=savings_text,
        savings_amount=savings,
        savings_percentage=savings_percentage,
    )


def get_sustainability_insights(route: RouteOption) -> List[str]:
    """
    Short rule-based observations about a route: how it compares with driving and
    whether it uses public transport.
    """
    insights = []
    pct = compare_with_conventional_travel(route).savings_percentage

    if pct > 50:
        insights.append(f"Excellent choice! This route reduces emissions by {pct}% compared to driving.")
    elif pct > 20:
        insights.append(f"Good environmental choice with {pct}% lower emissions than driving.")
    elif pct > 0:
        insights.append(f"Slightly better for the environment with {pct}% lower emissions.")
    elif pct < 0:
        insights.append("This route has higher emissions than driving. Consider alternative transport modes.")

    if any(s.mode in PUBLIC_TRANSPORT_MODES for s in route.transport_modes):
        insights.append("Using public transport helps reduce traffic congestion and air pollution.")

    return insights


def format_carbon_footprint(kg: float) -> str:
    if kg < 1:
        return f"{round_half_up(kg * 1000)}g CO2e"
    return f"{kg:.1f}kg CO2e"

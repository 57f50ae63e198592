import dataclasses

import pytest

from route_carbon import TransportMode, TransportSegment
from route_carbon.emission_factors import (
    get_emission_factor, available_variants, flight_variant_for_distance, parse_transport_mode
)
from route_carbon.exceptions import (
    UnknownTransportModeError, UnknownVariantError, InvalidSegmentError, RouteValidationError
)
from route_carbon.utils.calculations import (
    calculate_segment_emissions, with_computed_emissions, round_half_up
)


def seg(mode, distance, duration=60.0, cost=0.0):
    return TransportSegment(mode=mode, distance=distance, duration=duration, cost=cost)


def test_car_segment_emissions():
    print("Testing car segment (100 km x 0.21)...")
    s = seg(TransportMode.CAR, 100.0)
    assert s.carbon_emission == pytest.approx(21.0)
    assert calculate_segment_emissions(s) == s.carbon_emission


def test_train_segment_emissions():
    s = seg(TransportMode.TRAIN, 100.0)
    assert s.carbon_emission == pytest.approx(4.1)


def test_flight_band_selection():
    print("Testing flight distance bands...")
    short = seg(TransportMode.PLANE, 400.0)
    long = seg(TransportMode.PLANE, 2000.0)

    assert short.carbon_emission == pytest.approx(400.0 * 0.285)
    assert long.carbon_emission == pytest.approx(2000.0 * 0.195)
    # Short flights pollute more per km
    assert short.carbon_emission / short.distance > long.carbon_emission / long.distance


def test_flight_band_boundaries():
    assert get_emission_factor("plane", distance=499.9) == 0.285
    assert get_emission_factor("plane", distance=500.0) == 0.255
    assert get_emission_factor("plane", distance=1499.9) == 0.255
    assert get_emission_factor("plane", distance=1500.0) == 0.195
    assert flight_variant_for_distance(10.0) == "domestic"


def test_plane_without_distance_uses_base():
    assert get_emission_factor(TransportMode.PLANE) == 0.255
    assert get_emission_factor(TransportMode.PLANE, distance=0.0) == 0.255
    assert get_emission_factor(TransportMode.PLANE, distance=0.1) == 0.285


def test_explicit_variant_wins_over_distance_band():
    assert get_emission_factor(TransportMode.PLANE, "business_class", 2000.0) == 0.510
    assert get_emission_factor(TransportMode.CAR, "electric") == 0.05
    assert get_emission_factor(TransportMode.BUS, "intercity") == 0.078


def test_non_plane_modes_ignore_distance():
    assert get_emission_factor(TransportMode.CAR, distance=5.0) == 0.21
    assert get_emission_factor(TransportMode.CAR, distance=5000.0) == 0.21


def test_unknown_mode_fails_fast():
    with pytest.raises(UnknownTransportModeError):
        get_emission_factor("hovercraft")
    with pytest.raises(UnknownTransportModeError):
        seg("teleport", 10.0)
    with pytest.raises(ValueError):
        parse_transport_mode(42)


def test_unknown_variant_fails_fast():
    with pytest.raises(UnknownVariantError):
        get_emission_factor(TransportMode.TRAIN, "steam")
    with pytest.raises(UnknownVariantError):
        get_emission_factor(TransportMode.WALK, "fast")


def test_available_variants():
    assert "long_haul" in available_variants("plane")
    assert available_variants(TransportMode.METRO) == ()


def test_zero_distance_segment():
    s = seg(TransportMode.PLANE, 0.0)
    assert s.carbon_emission == 0.0
    assert calculate_segment_emissions(s) == 0.0


def test_zero_emission_modes():
    assert seg(TransportMode.WALK, 3.0).carbon_emission == 0.0
    assert seg(TransportMode.BIKE, 12.0).carbon_emission == 0.0


def test_mode_string_is_coerced():
    s = seg("Train", 10.0)
    assert s.mode is TransportMode.TRAIN


def test_negative_values_rejected():
    with pytest.raises(InvalidSegmentError):
        seg(TransportMode.CAR, -1.0)
    with pytest.raises(InvalidSegmentError):
        seg(TransportMode.CAR, 1.0, duration=-5.0)
    with pytest.raises(InvalidSegmentError):
        seg(TransportMode.CAR, 1.0, cost=-0.01)
    # validation errors are ValueErrors too
    with pytest.raises(RouteValidationError):
        seg(TransportMode.CAR, float("nan"))
    with pytest.raises(InvalidSegmentError):
        seg(TransportMode.CAR, "10")


def test_emission_is_not_settable():
    s = seg(TransportMode.CAR, 10.0)
    with pytest.raises(TypeError):
        TransportSegment(mode=TransportMode.CAR, distance=10.0, duration=5.0, carbon_emission=0.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.carbon_emission = 0.0


def test_replace_recomputes_emission():
    s = seg(TransportMode.TRAIN, 10.0)
    longer = dataclasses.replace(s, distance=20.0)
    assert longer.carbon_emission == pytest.approx(2 * s.carbon_emission)


def test_segment_calculation_is_idempotent():
    s = seg(TransportMode.BUS, 37.5)
    first = calculate_segment_emissions(s)
    second = calculate_segment_emissions(s)
    assert first == second
    assert with_computed_emissions(s) == s
    assert with_computed_emissions(s) is not s


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(80.476) == 80
    assert round_half_up(-2.5) == -2
    assert round_half_up(-35.71) == -36


if __name__ == "__main__":
    test_car_segment_emissions()
    test_train_segment_emissions()
    test_flight_band_selection()
    test_flight_band_boundaries()
    test_zero_distance_segment()
    print("PASS")

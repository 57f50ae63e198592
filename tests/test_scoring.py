import pytest

from route_carbon import TransportMode, TransportSegment
from route_carbon.exceptions import EmptyRouteError
from route_carbon.scoring import (
    calculate_sustainability_score, score_breakdown, carbon_score, mode_weighted_score,
    MODE_EFFICIENCY_SCORES,
)
from route_carbon.utils.calculations import aggregate_route


def seg(mode, distance, duration=60.0, cost=0.0):
    return TransportSegment(mode=mode, distance=distance, duration=duration, cost=cost)


def test_car_only_route():
    print("Testing car-only route score...")
    segments = [seg(TransportMode.CAR, 100.0)]
    b = score_breakdown(segments)
    assert b.carbon == pytest.approx(0.0, abs=1e-9)
    assert b.efficiency == 40
    assert b.renewable == 20
    assert b.congestion == 10
    assert b.score == 11


def test_train_only_route():
    segments = [seg(TransportMode.TRAIN, 100.0)]
    b = score_breakdown(segments)
    assert b.carbon == pytest.approx(100 - (0.041 / 0.21) * 100)
    assert b.score == 81
    assert calculate_sustainability_score(segments) == 81


def test_active_travel_scores_full_marks():
    assert calculate_sustainability_score([seg(TransportMode.WALK, 2.0)]) == 100
    assert calculate_sustainability_score([seg(TransportMode.BIKE, 8.0), seg(TransportMode.WALK, 1.0)]) == 100


def test_mixed_route():
    segments = [seg(TransportMode.TRAIN, 80.0), seg(TransportMode.CAR, 20.0)]
    totals = aggregate_route(segments)
    assert totals.total_carbon_footprint == pytest.approx(80 * 0.041 + 20 * 0.21)
    assert totals.total_carbon_footprint == segments[0].carbon_emission + segments[1].carbon_emission
    assert totals.total_duration == 120.0

    b = score_breakdown(segments)
    assert b.efficiency == pytest.approx(76.0)
    assert b.renewable == pytest.approx(60.0)
    assert b.congestion == pytest.approx(74.0)
    assert b.score == 67


def test_zero_distance_route():
    # No distance: carbon sub-score is 100, distance-weighted sub-scores are 0
    b = score_breakdown([seg(TransportMode.CAR, 0.0, duration=0.0)])
    assert b.carbon == 100
    assert b.efficiency == 0
    assert b.score == 60


def test_high_emission_flight_is_clamped():
    b = score_breakdown([seg(TransportMode.PLANE, 400.0)])
    assert b.carbon == 0.0
    assert 0 <= b.score <= 100
    assert b.score <= calculate_sustainability_score([seg(TransportMode.CAR, 400.0)])


def test_empty_route_rejected():
    with pytest.raises(EmptyRouteError):
        calculate_sustainability_score([])
    with pytest.raises(EmptyRouteError):
        aggregate_route([])


def test_score_bounds_and_type():
    routes = [
        [seg(TransportMode.PLANE, 5000.0)],
        [seg(TransportMode.BUS, 12.0), seg(TransportMode.METRO, 4.0)],
        [seg(TransportMode.CAR, 1.0), seg(TransportMode.WALK, 0.5)],
    ]
    for segments in routes:
        score = calculate_sustainability_score(segments)
        assert isinstance(score, int)
        assert 0 <= score <= 100


def test_score_is_deterministic():
    segments = [seg(TransportMode.BUS, 33.3), seg(TransportMode.TRAIN, 71.2)]
    assert calculate_sustainability_score(segments) == calculate_sustainability_score(list(segments))


def test_more_driving_lowers_score():
    greener = [seg(TransportMode.TRAIN, 60.0), seg(TransportMode.CAR, 40.0)]
    dirtier = [seg(TransportMode.TRAIN, 40.0), seg(TransportMode.CAR, 60.0)]
    assert calculate_sustainability_score(greener) > calculate_sustainability_score(dirtier)


def test_carbon_score_limits():
    assert carbon_score(0.0, 0.0) == 100
    assert carbon_score(0.0, 50.0) == 100
    assert carbon_score(50.0 * 0.21, 50.0) == pytest.approx(0.0, abs=1e-9)
    assert carbon_score(1000.0, 10.0) == 0


def test_mode_weighted_score_is_distance_weighted():
    segments = [seg(TransportMode.TRAIN, 30.0), seg(TransportMode.PLANE, 10.0)]
    assert mode_weighted_score(segments, MODE_EFFICIENCY_SCORES) == pytest.approx((85 * 30 + 20 * 10) / 40)
    assert mode_weighted_score([], MODE_EFFICIENCY_SCORES) == 0.0


if __name__ == "__main__":
    test_car_only_route()
    test_train_only_route()
    test_mixed_route()
    test_zero_distance_route()
    print("PASS")

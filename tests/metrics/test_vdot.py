"""Tests for the VDOT fitness model."""

import pytest

from training_intelligence.exceptions import ErrorCode, InvalidRaceResultError
from training_intelligence.metrics.vdot import (
    MAX_VDOT,
    MIN_VDOT,
    RaceDistance,
    calculate_vdot_from_race,
    equivalent_race_times,
    estimate_vdot_from_easy_pace,
    pace_zones,
    predict_time,
    resolve_distance,
    score_from_result,
)


class TestScoreFromResult:
    """Tests for score_from_result function."""

    def test_20_minute_5k(self):
        """Test the reference 5K in 20:00."""
        assert score_from_result(5000, 1200) == pytest.approx(49.8, abs=0.1)

    def test_rounded_to_one_decimal(self):
        vdot = score_from_result(10000, 2700)
        assert vdot == round(vdot, 1)

    def test_faster_time_scores_higher(self):
        assert score_from_result(5000, 1140) > score_from_result(5000, 1200)

    def test_clamps_low(self):
        """A 5K walked in an hour clamps to the floor."""
        assert score_from_result(5000, 3600) == MIN_VDOT

    def test_clamps_high(self):
        """An impossible 10-minute 5K clamps to the ceiling."""
        assert score_from_result(5000, 600) == MAX_VDOT

    def test_rejects_non_positive_distance(self):
        with pytest.raises(InvalidRaceResultError) as exc_info:
            score_from_result(0, 1200)
        assert exc_info.value.code == ErrorCode.INVALID_RACE_RESULT
        assert exc_info.value.details["field"] == "distance"

    def test_rejects_non_positive_time(self):
        with pytest.raises(InvalidRaceResultError) as exc_info:
            score_from_result(5000, -5)
        assert exc_info.value.details["field"] == "time"


class TestPredictTime:
    """Tests for predict_time function."""

    def test_recovers_race_time(self):
        """Predicting the race a VDOT came from lands near the original time."""
        vdot = score_from_result(5000, 1200)
        assert abs(predict_time(vdot, 5000) - 1200) <= 10

    def test_marathon_prediction_is_plausible(self):
        # VDOT 50 is roughly a 3:10 marathoner
        predicted = predict_time(50, 42195)
        assert 3 * 3600 <= predicted <= 3 * 3600 + 20 * 60

    def test_longer_distance_takes_longer(self):
        assert predict_time(45, 10000) > predict_time(45, 5000)

    def test_higher_vdot_is_faster(self):
        assert predict_time(55, 21097) < predict_time(45, 21097)

    def test_returns_whole_seconds(self):
        predicted = predict_time(48.3, 15000)
        assert predicted == int(predicted)


class TestPaceZones:
    """Tests for the pace ladder."""

    def test_ladder_is_slowest_to_fastest(self):
        paces = [pace for _, pace in pace_zones(50).as_list()]
        assert all(slower > faster for slower, faster in zip(paces, paces[1:]))

    def test_ten_zones(self):
        names = [name for name, _ in pace_zones(50).as_list()]
        assert names[0] == "recovery"
        assert names[-1] == "repetition"
        assert len(names) == 10

    def test_higher_vdot_means_faster_paces(self):
        zones_40 = pace_zones(40)
        zones_60 = pace_zones(60)
        assert zones_60.easy < zones_40.easy
        assert zones_60.threshold < zones_40.threshold

    def test_easy_pace_is_reasonable(self):
        # VDOT 50 easy running is somewhere between 8:00 and 10:00 per mile
        assert 480 <= pace_zones(50).easy <= 600

    def test_get_by_name(self):
        zones = pace_zones(50)
        assert zones.get("tempo") == zones.tempo
        assert zones.get("not_a_zone") is None

    def test_to_dict_formats_paces(self):
        data = pace_zones(50).to_dict()
        assert set(data["easy"]) == {"pace_sec_per_mile", "pace_formatted"}
        assert data["easy"]["pace_formatted"].endswith("/mi")


class TestRaceDistance:
    """Tests for RaceDistance parsing."""

    @pytest.mark.parametrize("label,expected", [
        ("5k", RaceDistance.FIVE_K),
        ("10K", RaceDistance.TEN_K),
        ("Half Marathon", RaceDistance.HALF_MARATHON),
        ("half-marathon", RaceDistance.HALF_MARATHON),
        ("marathon", RaceDistance.MARATHON),
    ])
    def test_from_string(self, label, expected):
        assert RaceDistance.from_string(label) == expected

    def test_from_string_unknown(self):
        assert RaceDistance.from_string("ultra") is None

    def test_from_meters_within_tolerance(self):
        assert RaceDistance.from_meters(42200) == RaceDistance.MARATHON
        assert RaceDistance.from_meters(21100) == RaceDistance.HALF_MARATHON

    def test_from_meters_no_match(self):
        assert RaceDistance.from_meters(30000) is None

    def test_quoted_miles(self):
        assert RaceDistance.MARATHON.miles == 26.2
        assert RaceDistance.HALF_MARATHON.miles == 13.1


class TestResolveDistance:
    """Tests for resolve_distance function."""

    def test_label(self):
        assert resolve_distance("marathon") == (42195.0, "Marathon")

    def test_raw_meters(self):
        assert resolve_distance("8000") == (8000.0, "8.00K")

    def test_unknown_label(self):
        with pytest.raises(InvalidRaceResultError):
            resolve_distance("very far")

    def test_negative_meters(self):
        with pytest.raises(InvalidRaceResultError):
            resolve_distance("-100")


class TestCalculateVdotFromRace:
    """Tests for the full VDOT calculation."""

    def test_full_result(self):
        result = calculate_vdot_from_race("5K", "20:00")

        assert result.vdot == pytest.approx(49.8, abs=0.1)
        assert result.race_distance == "5K"
        assert result.race_time_sec == 1200
        assert result.race_time_formatted == "20:00"
        assert result.pace_zones == pace_zones(result.vdot)
        assert "Marathon" in result.race_predictions

    def test_to_dict(self):
        data = calculate_vdot_from_race("half", "1:35:00").to_dict()
        assert data["race_distance"] == "Half Marathon"
        assert data["race_time_sec"] == 5700
        assert "threshold" in data["pace_zones"]


class TestEquivalentRaceTimes:
    """Tests for equivalent_race_times function."""

    def test_covers_every_distance(self):
        predictions = equivalent_race_times(50)
        assert set(predictions) == {d.display_name for d in RaceDistance}

    def test_times_increase_with_distance(self):
        predictions = equivalent_race_times(50)
        assert predictions["5K"]["time_sec"] < predictions["10K"]["time_sec"] < predictions["Marathon"]["time_sec"]


class TestEstimateVdotFromEasyPace:
    """Tests for estimate_vdot_from_easy_pace function."""

    def test_faster_easy_pace_higher_vdot(self):
        assert estimate_vdot_from_easy_pace(480) > estimate_vdot_from_easy_pace(600)

    def test_within_bounds(self):
        assert MIN_VDOT <= estimate_vdot_from_easy_pace(540) <= MAX_VDOT

    def test_rejects_non_positive(self):
        with pytest.raises(InvalidRaceResultError):
            estimate_vdot_from_easy_pace(0)

"""Tests for race time predictions and readiness."""

from datetime import date

import pytest

from run_analytics.analysis.race import (
    PeriodMode,
    PeriodSelection,
    RaceDistance,
    calculate_readiness_score,
    fitness_multiplier,
    freshness_multiplier,
    is_quality_run,
    predict_race_times,
    readiness_band,
    resolve_period_windows,
    riegel_formula,
)
from run_analytics.metrics.fitness import calculate_training_load_history
from run_analytics.metrics.load import activities_to_daily_loads


TODAY = date(2024, 6, 30)


class TestRiegelFormula:
    """Tests for the Riegel formula."""

    def test_5k_to_10k(self):
        """A 20 minute 5K extrapolates to about 41:42."""
        predicted = riegel_formula(1200, 5000, 10000)
        assert predicted == pytest.approx(1200 * 2 ** 1.06)
        assert predicted == pytest.approx(2501.9, abs=0.1)

    def test_same_distance(self):
        assert riegel_formula(1500, 5000, 5000) == pytest.approx(1500)

    def test_shorter_distance(self):
        """Extrapolating down gives a faster average pace."""
        predicted = riegel_formula(3000, 10000, 5000)
        assert predicted < 1500

    @pytest.mark.parametrize("distance", [0, -5000])
    def test_non_positive_distance(self, distance):
        with pytest.raises(ValueError, match="Distance must be positive"):
            riegel_formula(1200, distance, 5000)


class TestRaceDistance:
    """Tests for RaceDistance."""

    @pytest.mark.parametrize(
        "text,expected",
        [("5k", RaceDistance.FIVE_K), ("10K", RaceDistance.TEN_K), ("half-marathon", RaceDistance.HALF_MARATHON)],
    )
    def test_from_string(self, text, expected):
        assert RaceDistance.from_string(text) == expected

    def test_unknown_distance(self):
        assert RaceDistance.from_string("marathon") is None

    def test_meters(self):
        assert RaceDistance.HALF_MARATHON.meters == 21097.5
        assert RaceDistance.HALF_MARATHON.display_name == "Half Marathon"


class TestPeriodWindows:
    """Tests for resolve_period_windows."""

    def test_all_time(self):
        """Last 90 days against the 90 days before."""
        windows = resolve_period_windows(PeriodSelection(), TODAY)
        assert windows.current_start == date(2024, 4, 1)
        assert windows.current_end == TODAY
        assert windows.previous_end == date(2024, 3, 31)
        assert windows.previous_start == date(2024, 1, 1)

    def test_past_month(self):
        windows = resolve_period_windows(PeriodSelection(PeriodMode.MONTH, 2024, 3), TODAY)
        assert (windows.current_start, windows.current_end) == (date(2024, 3, 1), date(2024, 3, 31))
        assert (windows.previous_start, windows.previous_end) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_january_compares_with_december(self):
        windows = resolve_period_windows(PeriodSelection(PeriodMode.MONTH, 2024, 1), TODAY)
        assert (windows.previous_start, windows.previous_end) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_current_month_ends_today(self):
        windows = resolve_period_windows(PeriodSelection(PeriodMode.MONTH, 2024, 6), date(2024, 6, 15))
        assert windows.current_end == date(2024, 6, 15)

    def test_past_year(self):
        windows = resolve_period_windows(PeriodSelection(PeriodMode.YEAR, 2023), TODAY)
        assert (windows.current_start, windows.current_end) == (date(2023, 1, 1), date(2023, 12, 31))
        assert (windows.previous_start, windows.previous_end) == (date(2022, 1, 1), date(2022, 12, 31))

    def test_current_year_ends_today(self):
        windows = resolve_period_windows(PeriodSelection(PeriodMode.YEAR, 2024), TODAY)
        assert windows.current_end == TODAY

    def test_month_mode_without_month_is_all_time(self):
        windows = resolve_period_windows(PeriodSelection(PeriodMode.MONTH, 2024), TODAY)
        assert windows == resolve_period_windows(PeriodSelection(), TODAY)


class TestMultipliers:
    """Tests for fitness and freshness adjustments."""

    @pytest.mark.parametrize("ctl,expected", [(45, 0.98), (30, 0.99), (15, 1.0), (5, 1.02)])
    def test_fitness(self, ctl, expected):
        assert fitness_multiplier(ctl) == expected

    @pytest.mark.parametrize(
        "tsb,expected",
        [(20, 0.985), (10, 0.99), (0, 1.0), (-10, 1.015), (-20, 1.03)],
    )
    def test_freshness(self, tsb, expected):
        assert freshness_multiplier(tsb) == expected


class TestQualityRuns:
    """Tests for quality session detection."""

    def test_high_heart_rate(self, make_activity):
        run = make_activity(distance=6000, moving_time=1800, average_heartrate=160)
        assert is_quality_run(run, 185, None)

    def test_too_short(self, make_activity):
        run = make_activity(distance=4000, moving_time=1200, average_heartrate=175)
        assert not is_quality_run(run, 185, None)

    def test_high_suffer_score(self, make_activity):
        run = make_activity(distance=6000, moving_time=1800, suffer_score=55)
        assert is_quality_run(run, 185, None)

    def test_fast_relative_to_period(self, make_activity):
        """3% quicker than the period average counts."""
        run = make_activity(distance=6000, moving_time=1800)  # 3.33 m/s
        assert is_quality_run(run, 185, 3.2)
        assert not is_quality_run(run, 185, 3.3)


class TestReadiness:
    """Tests for the readiness score."""

    def test_maximum(self):
        assert calculate_readiness_score(40, 8, 6, 16) == 100

    def test_untrained(self):
        """Only the freshness component scores: (1 - 8/25) * 25 = 17."""
        assert calculate_readiness_score(0, 0, 0, 0) == 17

    def test_components_capped(self):
        assert calculate_readiness_score(80, 8, 20, 40) == 100

    @pytest.mark.parametrize("score,band", [(75, "ready"), (74, "building"), (55, "building"), (54, "base")])
    def test_bands(self, score, band):
        assert readiness_band(score) == band


class TestPredictRaceTimes:
    """Tests for predict_race_times."""

    def test_no_activities(self):
        assert predict_race_times([], PeriodSelection(), TODAY) is None

    def test_only_non_runs(self, make_activity):
        ride = make_activity(day="2024-06-20", activity_type="Ride")
        assert predict_race_times([ride], PeriodSelection(), TODAY) is None

    def test_no_runs_in_current_window(self, make_activity):
        old_run = make_activity(day="2024-02-01")
        assert predict_race_times([old_run], PeriodSelection(), TODAY) is None

    def test_predictions(self, make_activity):
        run = make_activity(day="2024-06-20", distance=5000, moving_time=1500)
        report = predict_race_times([run], PeriodSelection(), TODAY)

        assert [p.name for p in report.predictions] == ["5K", "10K", "Half Marathon"]
        adjustment = fitness_multiplier(report.ctl) * freshness_multiplier(report.tsb)
        five_k, ten_k, half = report.predictions
        assert five_k.time_sec == pytest.approx(1500 * adjustment)
        assert ten_k.time_sec == pytest.approx(riegel_formula(1500, 5000, 10000) * adjustment)
        assert half.pace_m_per_s == pytest.approx(21097.5 / half.time_sec)
        assert not report.has_previous_period
        assert five_k.delta_sec is None
        assert not five_k.is_faster

    def test_low_fitness_slows_predictions(self, make_activity):
        """A single run leaves CTL under 10, so times are 2% slower."""
        run = make_activity(day="2024-06-20", distance=5000, moving_time=1500)
        report = predict_race_times([run], PeriodSelection(), TODAY)
        assert report.ctl < 10
        assert fitness_multiplier(report.ctl) == 1.02

    def test_reference_is_longest_run(self, make_activity):
        runs = [
            make_activity(day="2024-06-20", distance=5000, moving_time=1500),
            make_activity(day="2024-06-25", distance=10000, moving_time=3300),
        ]
        report = predict_race_times(runs, PeriodSelection(), TODAY)
        adjustment = fitness_multiplier(report.ctl) * freshness_multiplier(report.tsb)
        assert report.predictions[1].time_sec == pytest.approx(3300 * adjustment)

    def test_untimed_longest_run_not_used(self, make_activity):
        """A longer run without moving time cannot be the reference."""
        runs = [
            make_activity(day="2024-06-20", distance=5000, moving_time=1500),
            make_activity(day="2024-06-25", distance=21000, moving_time=0),
        ]
        report = predict_race_times(runs, PeriodSelection(), TODAY)
        adjustment = fitness_multiplier(report.ctl) * freshness_multiplier(report.tsb)
        assert report.predictions[0].time_sec == pytest.approx(1500 * adjustment)

    def test_no_timed_run(self, make_activity):
        """Distance on one run and time on another is not a usable reference."""
        runs = [
            make_activity(day="2024-06-20", distance=5000, moving_time=0),
            make_activity(day="2024-06-25", distance=0, moving_time=1800),
        ]
        assert predict_race_times(runs, PeriodSelection(), TODAY) is None

    def test_untimed_previous_run_gives_no_delta(self, make_activity):
        runs = [
            make_activity(day="2024-03-15", distance=10000, moving_time=0),
            make_activity(day="2024-06-20", distance=5000, moving_time=1500),
        ]
        report = predict_race_times(runs, PeriodSelection(), TODAY)
        assert report.has_previous_period
        assert all(p.delta_sec is None for p in report.predictions)
        assert not any(p.is_faster for p in report.predictions)

    def test_delta_against_previous_period(self, make_activity):
        runs = [
            make_activity(day="2024-03-15", distance=5000, moving_time=1600),
            make_activity(day="2024-06-20", distance=5000, moving_time=1500),
        ]
        report = predict_race_times(runs, PeriodSelection(), TODAY)
        five_k = report.predictions[0]
        assert report.has_previous_period
        assert five_k.delta_sec == pytest.approx(five_k.time_sec - 1600)
        assert five_k.is_faster

    def test_month_period(self, make_activity):
        runs = [
            make_activity(day="2024-03-10", distance=8000, moving_time=2600),
            make_activity(day="2024-05-10", distance=20000, moving_time=7000),
        ]
        period = PeriodSelection(PeriodMode.MONTH, 2024, 3)
        report = predict_race_times(runs, period, TODAY)
        adjustment = fitness_multiplier(report.ctl) * freshness_multiplier(report.tsb)
        expected = riegel_formula(2600, 8000, 5000) * adjustment
        assert report.predictions[0].time_sec == pytest.approx(expected)
        assert report.windows.current_end == date(2024, 3, 31)

    def test_readiness_fields(self, make_activity):
        runs = [
            make_activity(day="2024-06-20", distance=6000, moving_time=1800, average_heartrate=165),
            make_activity(day="2024-06-25", distance=16000, moving_time=5600, average_heartrate=140),
        ]
        report = predict_race_times(runs, PeriodSelection(), TODAY)
        assert report.quality_runs == 1
        assert report.longest_recent_run_km == pytest.approx(16)
        assert report.readiness_score == calculate_readiness_score(
            report.ctl, report.tsb, 1, 16
        )
        assert report.readiness_band == readiness_band(report.readiness_score)

    def test_to_dict(self, make_activity):
        run = make_activity(day="2024-06-20")
        data = predict_race_times([run], PeriodSelection(), TODAY).to_dict()
        assert len(data["predictions"]) == 3
        assert data["predictions"][0]["name"] == "5K"
        assert "readiness_score" in data

    def test_fitness_uses_whole_history(self, make_activity, daily_runs):
        """Load from before the viewed month still counts toward CTL and TSB."""
        history = daily_runs(date(2024, 2, 1), date(2024, 5, 31), suffer_score=60)
        june_run = make_activity(day="2024-06-10", suffer_score=60)
        activities = history + [june_run]
        period = PeriodSelection(PeriodMode.MONTH, 2024, 6)

        report = predict_race_times(activities, period, TODAY)

        start, end = date(2024, 6, 1), date(2024, 6, 30)
        full = calculate_training_load_history(
            activities_to_daily_loads(activities, 185, 60), start, end
        )
        window_only = calculate_training_load_history(
            activities_to_daily_loads([june_run], 185, 60), start, end
        )
        assert report.ctl == full[-1].ctl
        assert report.tsb == full[-1].tsb
        assert report.ctl > 20
        assert window_only[-1].ctl < 5

"""Tests for the health insights engine."""
from dataclasses import replace
from datetime import date, timedelta

import pytest

from lifeadmin.schemas.enums import DebtTrend, Direction, InsightType, Strength
from lifeadmin.services.health_insights import (
    DailySample,
    build_dashboard,
    build_health_insights,
    build_sleep_analysis,
    compute_correlations,
    compute_records_and_streaks,
    compute_sleep_debt,
    compute_weekday_patterns,
    compute_workout_correlation,
    prepare_samples,
)

START = date(2024, 5, 1)


def make_days(start: date = START, **series) -> list[DailySample]:
    """One sample per day; each keyword is a list of values for that field."""
    length = max(len(values) for values in series.values())
    return [
        DailySample(
            day=start + timedelta(days=i),
            **{name: values[i] if i < len(values) else None for name, values in series.items()},
        )
        for i in range(length)
    ]


class TestPrepareSamples:

    def test_sorts_oldest_first(self):
        days = make_days(sleep_score=[70, 80, 90])
        prepared = prepare_samples(reversed(days))
        assert [s.sleep_score for s in prepared] == [70, 80, 90]

    def test_drops_malformed_days(self):
        samples = [
            DailySample(day="2024-05-01", sleep_score=70),
            DailySample(day="yesterday", sleep_score=80),
        ]
        prepared = prepare_samples(samples)
        assert len(prepared) == 1
        assert prepared[0].day == date(2024, 5, 1)

    def test_does_not_mutate_input(self):
        sample = DailySample(day="2024-05-01", sleep_score=70)
        prepare_samples([sample])
        assert sample.day == "2024-05-01"


class TestCorrelations:

    def test_sleep_predicts_next_day_readiness(self):
        sleep = [60 + 3 * i for i in range(10)]
        readiness = [None] + sleep[:-1]
        result = compute_correlations(make_days(sleep_score=sleep, readiness_score=readiness))

        assert len(result) == 1
        corr = result[0]
        assert corr.metric1 == "Sleep Score"
        assert corr.metric2 == "Next-Day Readiness"
        assert corr.coefficient == pytest.approx(1.0)
        assert corr.strength == Strength.STRONG
        assert corr.direction == Direction.POSITIVE
        assert corr.sample_size == 9
        assert "strongly predicts" in corr.insight

    def test_insufficient_pairs_omitted(self):
        """Five paired points is below the minimum, so nothing is reported."""
        days = make_days(
            sleep_score=[70, 75, 80, 85, 90, 95],
            readiness_score=[70, 72, 78, 83, 88, 93],
            activity_score=[60, 65, 70, 75, 80, 85],
            steps=[5000, 6000, 7000, 8000, 9000, 10000],
        )
        assert compute_correlations(days) == []

    def test_missing_values_reduce_pairs(self):
        sleep = [60 + 3 * i for i in range(10)]
        readiness = [None] + sleep[:-1]
        readiness[4] = None
        result = compute_correlations(make_days(sleep_score=sleep, readiness_score=readiness))
        assert result[0].sample_size == 8

    def test_steps_activity_same_day(self):
        steps = [4000, 6000, 8000, 10000, 12000, 9000, 7000]
        activity = [55, 65, 75, 85, 95, 80, 70]
        result = compute_correlations(make_days(steps=steps, activity_score=activity))

        assert [c.metric1 for c in result] == ["Steps"]
        assert result[0].sample_size == 7
        assert result[0].strength == Strength.STRONG


class TestWorkoutCorrelation:

    def _days(self):
        # Readiness is 80 the day after each workout and 70 otherwise
        readiness = [70, 80, 70, 80, 70, 80, 70, 80, 70, 70]
        return make_days(readiness_score=readiness)

    def test_readiness_higher_after_workouts(self):
        workouts = [START + timedelta(days=i) for i in (0, 2, 4, 6)]
        corr = compute_workout_correlation(self._days(), workouts)

        assert corr is not None
        assert corr.metric1 == "Workout"
        assert corr.coefficient == pytest.approx(1.0)
        assert corr.direction == Direction.POSITIVE
        assert corr.sample_size == 9
        assert "10 points higher" in corr.insight

    def test_too_few_workouts(self):
        workouts = [START, START + timedelta(days=2)]
        assert compute_workout_correlation(self._days(), workouts) is None

    def test_accepts_string_dates(self):
        workouts = [(START + timedelta(days=i)).isoformat() for i in (0, 2, 4, 6)]
        assert compute_workout_correlation(self._days(), workouts) is not None

    @pytest.mark.parametrize(
        "shift, coefficient, direction, text",
        [
            (15, 1.0, Direction.POSITIVE, "15 points higher"),
            (-15, -1.0, Direction.NEGATIVE, "drops 15 points"),
            (-3, -0.3, Direction.NEGATIVE, "drops 3 points"),
            (3, 0.3, Direction.POSITIVE, "3 points higher"),
            (2, 0.2, Direction.POSITIVE, "slightly (+2 points)"),
            (-2, -0.2, Direction.NEGATIVE, "slightly (-2 points)"),
            (1, 0.1, None, "don't noticeably change"),
            (0, 0.0, Direction.NEUTRAL, "don't noticeably change"),
        ],
    )
    def test_insight_bands(self, shift, coefficient, direction, text):
        # Day-after-workout readiness is 70 + shift, every other day 70
        readiness = [70, 70 + shift] * 4 + [70, 70]
        workouts = [START + timedelta(days=i) for i in (0, 2, 4, 6)]
        corr = compute_workout_correlation(make_days(readiness_score=readiness), workouts)

        assert corr is not None
        assert corr.coefficient == pytest.approx(coefficient)
        assert text in corr.insight
        if direction is not None:
            assert corr.direction == direction

    def test_large_difference_is_clamped_and_strong(self):
        readiness = [70, 95] * 4 + [70, 70]
        workouts = [START + timedelta(days=i) for i in (0, 2, 4, 6)]
        corr = compute_workout_correlation(make_days(readiness_score=readiness), workouts)

        assert corr.coefficient == 1.0
        assert corr.strength == Strength.STRONG
        assert "25 points higher" in corr.insight


class TestWeekdayPatterns:
    # 2024-06-02 is a Sunday
    SUNDAY = date(2024, 6, 2)

    def test_best_and_worst_days(self):
        sleep = []
        for _ in range(2):
            sleep += [90, 70, 70, 60, 70, 70, 70]
        analysis = compute_weekday_patterns(make_days(self.SUNDAY, sleep_score=sleep))

        assert len(analysis.patterns) == 7
        assert analysis.patterns[0].day_name == "Sunday"
        assert analysis.patterns[0].day_number == 0
        assert analysis.patterns[0].sample_size == 2

        sleep_insights = {i.type: i for i in analysis.insights if i.metric == "Sleep"}
        assert sleep_insights[InsightType.BEST].day_name == "Sunday"
        assert sleep_insights[InsightType.BEST].value == 90
        assert sleep_insights[InsightType.WORST].day_name == "Wednesday"
        assert sleep_insights[InsightType.WORST].value == 60

    def test_single_weekday_has_no_worst(self):
        days = [
            DailySample(day=self.SUNDAY, sleep_score=80),
            DailySample(day=self.SUNDAY + timedelta(days=7), sleep_score=84),
        ]
        analysis = compute_weekday_patterns(days)

        assert [p.day_name for p in analysis.patterns] == ["Sunday"]
        assert [i.type for i in analysis.insights] == [InsightType.BEST]

    def test_small_samples_give_no_insights(self):
        analysis = compute_weekday_patterns(make_days(self.SUNDAY, sleep_score=[80, 70, 60]))
        assert len(analysis.patterns) == 3
        assert analysis.insights == []


class TestRecordsAndStreaks:

    def test_alternating_sleep_scores(self):
        """Alternating 85/55 ending on a bad night: no current streak, best of 1."""
        days = make_days(sleep_score=[85, 55] * 5)
        result = compute_records_and_streaks(days)

        sleep = next(s for s in result.streaks if s.type == "sleep_80")
        assert sleep.current_streak == 0
        assert sleep.best_streak == 1
        assert sleep.is_active is False
        assert sleep.last_achieved == START + timedelta(days=8)
        assert all(r.type != "longest_sleep_streak" for r in result.records)

    def test_first_maximum_wins(self):
        result = compute_records_and_streaks(make_days(sleep_score=[80, 90, 90]))
        record = next(r for r in result.records if r.type == "highest_sleep")
        assert record.value == 90
        assert record.date == START + timedelta(days=1)

    def test_longest_sleep_streak_record(self):
        result = compute_records_and_streaks(make_days(sleep_score=[85, 85, 85, 50]))
        record = next(r for r in result.records if r.type == "longest_sleep_streak")
        assert record.value == 3

    def test_step_streak(self):
        result = compute_records_and_streaks(make_days(steps=[12000, 8000, 10000, 11000]))
        steps = next(s for s in result.streaks if s.type == "steps_10k")
        assert steps.current_streak == 2
        assert steps.best_streak == 2

    def test_missing_day_does_not_break_streak(self):
        """Streaks run over stored samples; a day with no record is skipped, not a miss."""
        days = make_days(sleep_score=[85, 86])
        days[1] = replace(days[1], day=days[1].day + timedelta(days=2))

        sleep = next(s for s in compute_records_and_streaks(days).streaks if s.type == "sleep_80")
        assert sleep.current_streak == 2
        assert sleep.last_achieved == START + timedelta(days=3)

    def test_empty_window(self):
        result = compute_records_and_streaks([])
        assert result.records == []
        assert [s.type for s in result.streaks] == ["sleep_80", "readiness_80", "steps_10k"]
        assert all(s.current_streak == 0 for s in result.streaks)


class TestSleepDebt:

    def test_accrues_below_threshold(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[65, 65]))
        assert debt.current_debt == pytest.approx(2.0)
        assert debt.days_in_debt == 2
        assert debt.last_good_night is None
        assert debt.weekly_avg_score == 65
        assert debt.recommended_rest == 0

    def test_good_night_pays_back_and_resets(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[65, 65, 95]))
        assert debt.current_debt == pytest.approx(0.0)
        assert debt.days_in_debt == 0
        assert debt.last_good_night == START + timedelta(days=2)

    def test_never_negative(self):
        scores = [95, 100, 60, 99, 40, 100, 100, 75, 30, 90]
        for n in range(1, len(scores) + 1):
            assert compute_sleep_debt(make_days(sleep_total_sleep=scores[:n])).current_debt >= 0

    def test_surplus_does_not_carry_over(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[95, 65]))
        assert debt.current_debt == pytest.approx(1.0)
        assert debt.days_in_debt == 1
        assert debt.last_good_night == START

    def test_recommended_rest(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[35] * 10))
        assert debt.current_debt == pytest.approx(40.0)
        assert debt.recommended_rest == 3

    def test_increasing_trend(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[75, 75, 75, 75, 50, 50, 50, 50]))
        assert debt.debt_trend == DebtTrend.INCREASING

    def test_decreasing_trend(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[50, 50, 50, 50, 80, 80, 80, 80]))
        assert debt.debt_trend == DebtTrend.DECREASING

    def test_missing_days_skipped(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[None, 65, None]))
        assert debt.days_in_debt == 1
        assert debt.weekly_avg_score == 65
        assert debt.debt_trend == DebtTrend.STABLE

    def test_weekly_average_uses_last_seven(self):
        debt = compute_sleep_debt(make_days(sleep_total_sleep=[0, 0, 0] + [80] * 7))
        assert debt.weekly_avg_score == 80

    def test_no_data(self):
        debt = compute_sleep_debt([])
        assert debt.current_debt == 0
        assert debt.debt_trend == DebtTrend.STABLE


class TestInsightsBundle:

    def test_summary_statistics_exclude_missing(self):
        days = make_days(sleep_score=[80, None, 90], readiness_score=[70, 75, None])
        insights = build_health_insights(days)
        assert insights.total_days == 3
        assert insights.avg_sleep == 85
        assert insights.avg_readiness == 72.5
        assert insights.avg_activity == 0.0

    def test_idempotent(self):
        sleep = [60 + (i * 7) % 30 for i in range(21)]
        days = make_days(sleep_score=sleep, readiness_score=list(reversed(sleep)), steps=[9000 + i * 200 for i in range(21)])
        snapshot = [replace(d) for d in days]

        first = build_health_insights(days)
        second = build_health_insights(days)
        assert first == second
        assert days == snapshot


class TestSleepAnalysis:

    def test_breakdown_and_averages(self):
        days = make_days(
            date(2024, 6, 2),
            sleep_score=[80, 90],
            sleep_timing=[60, 70],
            sleep_total_sleep=[70, 80],
        )
        analysis = build_sleep_analysis(days)

        assert len(analysis.breakdown) == 2
        assert analysis.breakdown[0].score == 80
        assert analysis.averages["score"] == 85
        assert "deep_sleep" not in analysis.averages
        assert analysis.timing[0].day_of_week == 0
        assert analysis.weekday_timing_avg == {"Sunday": 60, "Monday": 70}
        assert analysis.debt.days_in_debt == 0


class TestDashboard:

    def test_latest_and_trailing_average(self):
        days = make_days(sleep_score=[50] + [80] * 9, readiness_score=[None] * 9 + [75])
        dashboard = build_dashboard(days)

        assert dashboard.latest_day == START + timedelta(days=9)
        assert dashboard.sleep_score == 80
        assert dashboard.readiness_score == 75
        # Window is the latest day and the seven before it
        assert dashboard.avg_sleep_score_7d == 80
        assert dashboard.avg_readiness_7d == 75
        assert dashboard.avg_activity_7d == 0.0

    def test_empty(self):
        dashboard = build_dashboard([])
        assert dashboard.latest_day is None
        assert dashboard.avg_sleep_score_7d == 0.0

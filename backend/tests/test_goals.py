"""Tests for goal progress, the goals overview and the weekly review."""
from datetime import date, timedelta

import pytest

from lifeadmin.schemas.enums import GoalType
from lifeadmin.services.goals import (
    GoalProgress,
    GoalSpec,
    compute_goal_progress,
    compute_goals_overview,
    compute_weekly_summary,
)
from lifeadmin.services.health_insights import DailySample, Streak

# Saturday; the current week started Monday 2024-05-27
TODAY = date(2024, 6, 1)
MONDAY = date(2024, 5, 27)


def days_from(start: date, **series) -> list[DailySample]:
    length = max(len(values) for values in series.values())
    return [
        DailySample(
            day=start + timedelta(days=i),
            **{name: values[i] for name, values in series.items()},
        )
        for i in range(length)
    ]


class TestDailyGoalProgress:

    def test_partial_progress(self):
        goal = GoalSpec(GoalType.STEP_GOAL, 10000)
        progress = compute_goal_progress(goal, 5000, [], TODAY)
        assert progress.progress == 50
        assert progress.met is False
        assert progress.current_value == 5000

    def test_progress_capped_at_100(self):
        goal = GoalSpec(GoalType.STEP_GOAL, 10000)
        progress = compute_goal_progress(goal, 15000, [], TODAY)
        assert progress.progress == 100
        assert progress.met is True

    def test_missing_today_value(self):
        goal = GoalSpec(GoalType.SLEEP_SCORE, 80)
        progress = compute_goal_progress(goal, None, [], TODAY)
        assert progress.progress == 0
        assert progress.met is False

    def test_streak_over_history(self):
        goal = GoalSpec(GoalType.SLEEP_SCORE, 80)
        history = days_from(TODAY - timedelta(days=4), sleep_score=[85, 70, 81, 90, 82])
        progress = compute_goal_progress(goal, 82, history, TODAY)

        assert progress.current_streak == 3
        assert progress.best_streak == 3
        assert progress.last_achieved == TODAY

    def test_future_days_ignored(self):
        goal = GoalSpec(GoalType.READINESS_SCORE, 80)
        history = days_from(TODAY, readiness_score=[85, 90])
        progress = compute_goal_progress(goal, 85, history, TODAY)
        assert progress.current_streak == 1

    def test_goal_type_coerced_from_string(self):
        goal = GoalSpec("step_goal", 10000)
        assert goal.goal_type is GoalType.STEP_GOAL


class TestWorkoutGoalProgress:

    def test_counts_current_week(self):
        goal = GoalSpec(GoalType.WORKOUT_FREQUENCY, 3)
        workouts = [MONDAY, MONDAY + timedelta(days=2), MONDAY + timedelta(days=4), MONDAY - timedelta(days=1)]
        progress = compute_goal_progress(goal, None, [], TODAY, workouts)

        assert progress.weekly_count == 3
        assert progress.current_value == 3
        assert progress.progress == 100
        assert progress.met is True

    def test_same_day_counted_once(self):
        goal = GoalSpec(GoalType.WORKOUT_FREQUENCY, 2)
        progress = compute_goal_progress(goal, None, [], TODAY, [MONDAY, MONDAY])
        assert progress.weekly_count == 1
        assert progress.progress == 50

    def test_week_streak(self):
        goal = GoalSpec(GoalType.WORKOUT_FREQUENCY, 3)
        last_week = MONDAY - timedelta(days=7)
        workouts = [last_week + timedelta(days=i) for i in (0, 2, 4)]
        workouts += [MONDAY + timedelta(days=i) for i in (0, 2, 4)]
        progress = compute_goal_progress(goal, None, [], TODAY, workouts)

        assert progress.current_streak == 2
        assert progress.best_streak == 2
        assert progress.last_achieved == MONDAY

    def test_unfinished_week_does_not_break_streak(self):
        goal = GoalSpec(GoalType.WORKOUT_FREQUENCY, 3)
        last_week = MONDAY - timedelta(days=7)
        workouts = [last_week + timedelta(days=i) for i in (0, 2, 4)] + [MONDAY]
        progress = compute_goal_progress(goal, None, [], TODAY, workouts)

        assert progress.met is False
        assert progress.current_streak == 1

    def test_no_workouts(self):
        goal = GoalSpec(GoalType.WORKOUT_FREQUENCY, 3)
        progress = compute_goal_progress(goal, None, [], TODAY, [])
        assert progress.weekly_count == 0
        assert progress.current_streak == 0


class TestGoalsOverview:

    def test_daily_and_weekly_tallies(self):
        goals = [
            GoalSpec(GoalType.STEP_GOAL, 10000),
            GoalSpec(GoalType.WORKOUT_FREQUENCY, 3),
            GoalSpec(GoalType.SLEEP_SCORE, 80, active=False),
        ]
        # Monday..Saturday, goal met on three days including today
        samples = days_from(MONDAY, steps=[12000, 5000, 11000, 3000, 4000, 10000])
        workouts = [MONDAY, MONDAY + timedelta(days=1), MONDAY + timedelta(days=3)]

        overview = compute_goals_overview(goals, samples, workouts, TODAY)

        assert [g.goal.goal_type for g in overview.goals] == [GoalType.STEP_GOAL, GoalType.WORKOUT_FREQUENCY]
        assert overview.todays_total == 2
        assert overview.todays_met == 2
        assert overview.weekly_total == 7
        assert overview.weekly_met == 4

    def test_no_goals(self):
        overview = compute_goals_overview([], [], [], TODAY)
        assert overview.goals == []
        assert overview.todays_total == 0


class TestWeeklySummary:
    WEEK = date(2024, 5, 20)

    def test_deltas_and_highlights(self):
        week = days_from(self.WEEK, sleep_score=[80] * 7, readiness_score=[60] * 7, steps=[20000] * 7)
        previous = days_from(self.WEEK - timedelta(days=7), sleep_score=[70] * 7, readiness_score=[70] * 7, steps=[5000] * 7)
        summary = compute_weekly_summary(week, previous, 2, [], self.WEEK)

        assert summary.week_end == date(2024, 5, 26)
        assert summary.avg_sleep == 80
        assert summary.sleep_delta == pytest.approx(10)
        assert summary.readiness_delta == pytest.approx(-10)
        assert summary.steps_delta == pytest.approx(15000)
        assert summary.total_steps == 140000
        assert summary.highlights == ["Sleep score up 10 points from last week"]
        assert summary.lowlights == ["Readiness down 10 points from last week"]
        assert summary.workout_count == 2

    def test_small_swings_ignored(self):
        week = days_from(self.WEEK, sleep_score=[75] * 7)
        previous = days_from(self.WEEK - timedelta(days=7), sleep_score=[71] * 7)
        summary = compute_weekly_summary(week, previous, 0, [], self.WEEK)
        assert summary.highlights == []
        assert summary.lowlights == []

    def test_no_previous_week(self):
        week = days_from(self.WEEK, sleep_score=[80] * 7)
        summary = compute_weekly_summary(week, [], 0, [], self.WEEK)
        assert summary.sleep_delta == 0
        assert summary.highlights == []

    def test_best_and_worst_days(self):
        week = days_from(self.WEEK, sleep_score=[70, 90, 60, 80, None, 90, 75], readiness_score=[65, 70, 88, 80, 70, 60, 88])
        summary = compute_weekly_summary(week, [], 0, [], self.WEEK)

        assert summary.best_sleep_day == self.WEEK + timedelta(days=1)
        assert summary.best_sleep_score == 90
        assert summary.worst_sleep_day == self.WEEK + timedelta(days=2)
        assert summary.worst_sleep_score == 60
        assert summary.best_readiness_day == self.WEEK + timedelta(days=2)

    def test_worst_day_tie_takes_earliest(self):
        week = days_from(self.WEEK, sleep_score=[70, 60, 80, 60])
        summary = compute_weekly_summary(week, [], 0, [], self.WEEK)

        assert summary.worst_sleep_day == self.WEEK + timedelta(days=1)
        assert summary.worst_sleep_score == 60

    def test_goal_tally_and_active_streaks(self):
        goals = [
            GoalProgress(goal=GoalSpec(GoalType.STEP_GOAL, 10000), met=True),
            GoalProgress(goal=GoalSpec(GoalType.SLEEP_SCORE, 80), met=False),
        ]
        streaks = [
            Streak(type="sleep_80", current_streak=3, best_streak=5, is_active=True),
            Streak(type="steps_10k", current_streak=0, best_streak=2, is_active=False),
        ]
        summary = compute_weekly_summary([], [], 0, goals, self.WEEK, streaks=streaks)

        assert summary.goals_met == 1
        assert summary.goals_total == 2
        assert [s.type for s in summary.active_streaks] == ["sleep_80"]

    def test_empty_week(self):
        summary = compute_weekly_summary([], [], 0, [], self.WEEK)
        assert summary.avg_sleep == 0.0
        assert summary.best_sleep_day is None
        assert summary.active_streaks == []

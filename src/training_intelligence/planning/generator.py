"""
Periodized plan generator.

Walks the weeks between the plan start and the goal race in order,
advancing through base, build, peak and taper, and fills each day of
each week by priority:

1. The goal race and the days leading into it
2. Intermediate (B/C) races with their mini-taper and recovery day
3. Rest days
4. Medium-long run (optional), long run, quality sessions
5. Easy runs
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..config import Settings, get_settings
from ..exceptions import InsufficientTimeError, PlanValidationError
from ..metrics.vdot import METERS_PER_MILE, PaceZones, RaceDistance, predict_time
from ..models.athlete import DAYS_ORDER, IntermediateRace, PlanRequest
from ..models.plans import (
    PHASE_ORDER,
    Aggressiveness,
    PhaseSummary,
    PlannedWorkout,
    PlanSummary,
    TrainingPhase,
    TrainingPlan,
    TrainingWeek,
    WorkoutCategory,
)
from ..utils.formatting import round_half_up
from .rules import (
    HALF_CLASS_M,
    MARATHON_CLASS_M,
    DEFAULT_PROGRESSION,
    ProgressionConfig,
    RunType,
    WeeklyStructure,
    down_week_flags,
    mileage_progression,
    phase_boundaries,
    phase_split,
    phase_weeks,
    weekly_structure,
)
from .selection import (
    COMFORT_SUBSTITUTIONS,
    available_minutes_for_day,
    effective_workout_type,
    experience_progression,
    long_run_type,
    recovery_adjustments,
    time_constrained_distance,
    workout_type_for_phase,
)
from .templates import get_workout_template


logger = logging.getLogger(__name__)


MINIMUM_PLAN_WEEKS = 4

LONG_RUN_FRACTION = 0.30
TAPER_LONG_RUN_FRACTION = 0.25
LONG_RUN_CAPS: Tuple[Tuple[float, float], ...] = (
    (MARATHON_CLASS_M, 22),
    (HALF_CLASS_M, 16),
    (0, 12),
)

MIN_EASY_MILES = 2.0
MAX_EASY_MILES = 9.0
QUALITY_EXTRA_MILES = 2.0

# Goal race week
SHAKEOUT_MILES = 2.0
PRE_RACE_EASY_MILES = 2.5
TUNE_UP_DAY = "tuesday"
MARATHON_TUNE_UP_MILES = 8.0
TUNE_UP_MILES = 6.0
RACE_WEEK_EASY_CAP = 5.0
RACE_WEEK_DAYS = 7

# Intermediate race mini-taper
MINI_TAPER_SHAKEOUT_MILES = 2.5
MINI_TAPER_EASY_MILES = 4.0
POST_RACE_RECOVERY_MILES = 3.0
PROXIMITY_EASY_MILES = 4.0
LONG_RUN_RACE_BUFFER_DAYS = 2

MLR_FRACTION = 0.65
MLR_MIN_MILES = 8.0


# ============================================================================
# Text tables
# ============================================================================

INTENSITY_DISTRIBUTIONS: Mapping[TrainingPhase, Mapping[str, int]] = MappingProxyType({
    TrainingPhase.BASE: MappingProxyType({"easy": 85, "moderate": 10, "hard": 5}),
    TrainingPhase.BUILD: MappingProxyType({"easy": 80, "moderate": 12, "hard": 8}),
    TrainingPhase.PEAK: MappingProxyType({"easy": 75, "moderate": 15, "hard": 10}),
    TrainingPhase.TAPER: MappingProxyType({"easy": 80, "moderate": 15, "hard": 5}),
})

QUALITY_RATIONALE: Mapping[TrainingPhase, str] = MappingProxyType({
    TrainingPhase.BASE: "Light speedwork to maintain running economy without excessive stress",
    TrainingPhase.BUILD: "Building lactate threshold and race-specific fitness",
    TrainingPhase.PEAK: "Sharpening and fine-tuning race pace",
    TrainingPhase.TAPER: "Keeping legs snappy while tapering volume",
})

EASY_RATIONALE = "Recovery running to support adaptation from harder workouts"
MLR_RATIONALE = "Mid-week mileage builder at comfortable effort, key for marathon preparation."
DOWNGRADE_RATIONALE = "Converted to an easy run to keep a recovery day between key workouts."

RACE_DAY_RATIONALE = "This is what you've been training for!"
SHAKEOUT_RATIONALE = "Keep legs fresh while staying loose for tomorrow's race."
PRE_RACE_EASY_RATIONALE = "Rest and recovery before race day."
TUNE_UP_RATIONALE = "Final sharpening workout to dial in race pace."
RACE_WEEK_EASY_RATIONALE = "Maintain fitness while prioritizing freshness."
MINI_TAPER_SHAKEOUT_RATIONALE = "Light shakeout before tune-up race."
MINI_TAPER_EASY_RATIONALE = "Stay fresh for upcoming tune-up race."
POST_RACE_RATIONALE = "Recovery from tune-up race."
PROXIMITY_RATIONALE = "Long run replaced due to upcoming race proximity."

QUALITY_ALTERNATIVES: Mapping[TrainingPhase, Tuple[str, ...]] = MappingProxyType({
    TrainingPhase.BASE: ("classic_fartlek", "short_hill_repeats", "structured_fartlek", "easy_run_strides"),
    TrainingPhase.BUILD: ("steady_tempo", "cruise_intervals", "threshold_intervals", "long_intervals_1000m"),
    TrainingPhase.PEAK: ("progressive_tempo", "goal_pace_tempo", "mile_repeats", "cruise_intervals"),
    TrainingPhase.TAPER: ("steady_tempo", "easy_run_strides", "general_aerobic"),
})

LONG_RUN_ALTERNATIVES: Mapping[TrainingPhase, Tuple[str, ...]] = MappingProxyType({
    TrainingPhase.BASE: ("easy_long_run", "medium_long_run", "general_aerobic"),
    TrainingPhase.BUILD: ("easy_long_run", "progression_long_run", "alternating_pace_long_run"),
    TrainingPhase.PEAK: ("marathon_pace_long_run", "progression_long_run", "cutdown_long_run"),
    TrainingPhase.TAPER: ("easy_long_run", "medium_long_run"),
})

EASY_ALTERNATIVES: Tuple[str, ...] = ("recovery_run", "general_aerobic", "easy_run_strides")

MAX_ALTERNATIVES = 3


def long_run_rationale(phase: TrainingPhase, race_distance_m: float) -> str:
    if phase == TrainingPhase.BASE:
        return "Building aerobic endurance and teaching the body to burn fat efficiently"
    if phase == TrainingPhase.BUILD:
        return "Developing endurance while introducing race-pace elements"
    if phase == TrainingPhase.PEAK:
        if race_distance_m >= MARATHON_CLASS_M:
            return "Simulating race conditions and practicing fueling strategy"
        return "Maintaining endurance while staying fresh for race day"
    return "Keeping the legs moving while allowing recovery before race day"


def phase_description(phase: TrainingPhase, race_distance_m: float) -> str:
    """Focus text for a phase, tailored to the race distance."""
    if phase == TrainingPhase.BASE:
        return "Build aerobic foundation with easy running, strides, and light fartlek work"
    if phase == TrainingPhase.BUILD:
        if race_distance_m >= MARATHON_CLASS_M:
            return "Progressive intensity with tempo runs and marathon-pace development"
        if race_distance_m >= HALF_CLASS_M:
            return "Tempo and threshold work to build lactate tolerance"
        return "VO2max and tempo work to build speed endurance"
    if phase == TrainingPhase.PEAK:
        if race_distance_m >= MARATHON_CLASS_M:
            return "Race-specific workouts and marathon pace simulation"
        if race_distance_m >= HALF_CLASS_M:
            return "Sharpen with half marathon pace and threshold work"
        return "Peak fitness with race-pace sharpening"
    return "Reduce volume while maintaining intensity; arrive fresh and ready"


def week_focus(phase: TrainingPhase, week_in_phase: int) -> str:
    """One-line focus for a week."""
    if phase == TrainingPhase.BASE:
        if week_in_phase == 0:
            return "Establishing baseline with easy aerobic running"
        if week_in_phase == 1:
            return "Building aerobic capacity with longer easy runs"
        return "Continuing aerobic development with fartlek and hills"
    if phase == TrainingPhase.BUILD:
        if week_in_phase == 0:
            return "Introducing tempo work"
        if week_in_phase < 3:
            return "Progressive tempo and threshold development"
        return "Building race-specific fitness"
    if phase == TrainingPhase.PEAK:
        if week_in_phase == 0:
            return "Sharpening with race-pace work"
        return "Fine-tuning and maintaining peak fitness"
    if week_in_phase == 0:
        return "Beginning taper - reducing volume"
    return "Final preparation for race day"


# ============================================================================
# Calendar helpers
# ============================================================================

def first_plan_monday(start_date: date) -> date:
    """First Monday on or after the start date."""
    return start_date + timedelta(days=(7 - start_date.weekday()) % 7)


def available_weeks(start_date: date, race_date: date) -> int:
    """Whole weeks between the start date and the race, before any Monday alignment."""
    return (race_date - start_date).days // 7


def count_plan_weeks(start_date: date, race_date: date) -> int:
    """
    Monday-based weeks from the first plan Monday through race week.

    Can be zero or negative when the race falls before the first Monday.
    """
    first_monday = first_plan_monday(start_date)
    race_week_monday = race_date - timedelta(days=race_date.weekday())
    return (race_week_monday - first_monday).days // 7 + 1


def long_run_cap(race_distance_m: float) -> float:
    for min_distance, cap in LONG_RUN_CAPS:
        if race_distance_m >= min_distance:
            return cap
    return LONG_RUN_CAPS[-1][1]


def race_distance_miles(race_distance_m: float) -> float:
    """Quoted race miles for standard distances, else converted."""
    standard = RaceDistance.from_meters(race_distance_m)
    if standard is not None:
        return standard.miles
    return round_half_up(race_distance_m / METERS_PER_MILE, 1)


def race_distance_label(race_distance_m: float) -> str:
    standard = RaceDistance.from_meters(race_distance_m)
    if standard is not None:
        return standard.display_name
    return f"{race_distance_m / 1000:g}K"


# ============================================================================
# Generator
# ============================================================================

@dataclass
class _WeekPlan:
    """Per-week targets shared by every day of the week."""
    week_number: int
    phase: TrainingPhase
    week_in_phase: int
    is_down_week: bool
    target_mileage: float
    long_run_miles: float
    easy_miles: float
    quality_miles: float
    quality_quota: int
    mlr_index: Optional[int] = None
    mlr_miles: float = 0.0
    quality_scheduled: int = 0


class PlanGenerator:
    """
    Deterministic plan builder.

    A generator holds no state between calls; the same request always
    produces the same plan.
    """

    def __init__(
        self,
        progression: ProgressionConfig = DEFAULT_PROGRESSION,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._progression = progression
        self._settings = settings or get_settings()
        self._logger = logger or logging.getLogger(__name__)

    def generate(self, request: PlanRequest) -> TrainingPlan:
        """
        Generate a complete plan for a request.

        Raises:
            PlanValidationError: If the race is not after the start date
            InsufficientTimeError: If fewer than four weeks remain before the race
        """
        # model_copy(update=...) skips the request validators
        if request.race_date <= request.start_date:
            raise PlanValidationError(
                f"Race date {request.race_date.isoformat()} must be after start date "
                f"{request.start_date.isoformat()}",
                field="race_date",
            )

        weeks_available = available_weeks(request.start_date, request.race_date)
        total_weeks = count_plan_weeks(request.start_date, request.race_date)
        if weeks_available < MINIMUM_PLAN_WEEKS or total_weeks < MINIMUM_PLAN_WEEKS:
            raise InsufficientTimeError(max(min(weeks_available, total_weeks), 0), MINIMUM_PLAN_WEEKS)

        distance_m = request.race_distance_m
        weeks_by_phase = phase_weeks(phase_split(distance_m), total_weeks, distance_m)
        label = request.race_distance_label or race_distance_label(distance_m)

        self._logger.info(
            f"Generating {total_weeks}-week plan for {label} on {request.race_date.isoformat()} "
            f"(base={weeks_by_phase[TrainingPhase.BASE]}, build={weeks_by_phase[TrainingPhase.BUILD]}, "
            f"peak={weeks_by_phase[TrainingPhase.PEAK]}, taper={weeks_by_phase[TrainingPhase.TAPER]})"
        )

        profile = request.athlete_profile
        aggressiveness = request.aggressiveness
        if experience_progression(profile).conservative_mileage and aggressiveness != Aggressiveness.CONSERVATIVE:
            self._logger.info("Limited running history: using conservative mileage progression")
            aggressiveness = Aggressiveness.CONSERVATIVE

        mileages = mileage_progression(
            request.current_weekly_mileage,
            request.peak_weekly_mileage,
            total_weeks,
            weeks_by_phase,
            aggressiveness,
            self._progression,
        )
        reduction = recovery_adjustments(profile).volume_reduction_percent
        if reduction:
            mileages = [round_half_up(m * (1 - reduction / 100)) for m in mileages]

        down_weeks = down_week_flags(weeks_by_phase, aggressiveness, self._progression)
        structure = weekly_structure(
            request.runs_per_week,
            request.preferred_long_run_day,
            request.preferred_quality_days,
            request.required_rest_days,
            request.quality_sessions_per_week,
        )

        zones = request.resolved_pace_zones()
        intermediate = {
            race.race_date: race
            for race in request.intermediate_races
            if request.start_date <= race.race_date < request.race_date
        }

        builder = _PlanBuilder(request, structure, zones, intermediate, self._settings)
        first_monday = first_plan_monday(request.start_date)
        boundaries = phase_boundaries(weeks_by_phase)

        weeks: List[TrainingWeek] = []
        phase_idx = 0
        week_in_phase = 0
        for i in range(total_weeks):
            week_number = i + 1
            # Forward-only phase advance
            if week_number > boundaries[phase_idx][1]:
                while week_number > boundaries[phase_idx][1]:
                    phase_idx += 1
                week_in_phase = 0
            phase = boundaries[phase_idx][0]

            week_plan = builder.plan_week(
                week_number, phase, week_in_phase, down_weeks[i], mileages[i]
            )
            self._logger.debug(
                f"Week {week_number}: {phase.value} (week {week_in_phase + 1}), "
                f"{week_plan.target_mileage} mi, down_week={week_plan.is_down_week}"
            )

            start = first_monday + timedelta(weeks=i)
            weeks.append(TrainingWeek(
                week_number=week_number,
                start_date=start,
                end_date=start + timedelta(days=6),
                phase=phase,
                week_in_phase=week_in_phase,
                target_mileage=week_plan.target_mileage,
                long_run_miles=week_plan.long_run_miles,
                quality_sessions=week_plan.quality_quota,
                focus=week_focus(phase, week_in_phase),
                is_down_week=week_plan.is_down_week,
                workouts=builder.build_days(start, week_plan),
            ))
            week_in_phase += 1

        self._enforce_hard_easy(weeks, builder)
        for week in weeks:
            week.quality_sessions = sum(1 for w in week.workouts if w.category == WorkoutCategory.QUALITY)
            week.long_run_miles = sum(
                w.target_distance_miles or 0 for w in week.workouts if w.category == WorkoutCategory.LONG
            )

        phases = [
            PhaseSummary(
                phase=phase,
                weeks=weeks_by_phase[phase],
                focus=phase_description(phase, distance_m),
                intensity_distribution=dict(INTENSITY_DISTRIBUTIONS[phase]),
            )
            for phase in PHASE_ORDER
        ]

        return TrainingPlan(
            race_date=request.race_date,
            race_distance_m=distance_m,
            race_distance_label=label,
            total_weeks=total_weeks,
            phases=phases,
            weeks=weeks,
            summary=summarize_plan(weeks),
            race_name=request.race_name,
            vdot=request.vdot,
        )

    def _enforce_hard_easy(self, weeks: List[TrainingWeek], builder: "_PlanBuilder") -> None:
        """Downgrade the second of two back-to-back key workouts to an easy run."""
        slots = [(week, idx) for week in weeks for idx in range(len(week.workouts))]
        for (prev_week, prev_idx), (week, idx) in zip(slots, slots[1:]):
            previous = prev_week.workouts[prev_idx]
            current = week.workouts[idx]
            if not (previous.is_key_workout and current.is_key_workout):
                continue
            if (current.date - previous.date).days != 1:
                continue

            if previous.is_race and current.is_race:
                # Both stay races; the one that is not the goal race loses key status
                if current.date == builder.race_date:
                    target_week, target_idx = prev_week, prev_idx
                else:
                    target_week, target_idx = week, idx
                race = target_week.workouts[target_idx]
                self._logger.warning(
                    f"Back-to-back races on {previous.date.isoformat()} and "
                    f"{current.date.isoformat()}: {race.name} on {race.date.isoformat()} "
                    f"no longer counted as a key workout"
                )
                target_week.workouts[target_idx] = replace(race, is_key_workout=False)
                continue

            if current.is_race or current.category == WorkoutCategory.LONG:
                if previous.is_race:
                    target_week, target_idx = week, idx
                else:
                    target_week, target_idx = prev_week, prev_idx
            else:
                target_week, target_idx = week, idx

            workout = target_week.workouts[target_idx]
            self._logger.warning(
                f"Back-to-back key workouts on {previous.date.isoformat()} and "
                f"{current.date.isoformat()}: {workout.template_id} on "
                f"{workout.date.isoformat()} downgraded to easy"
            )
            target_week.workouts[target_idx] = builder.downgrade_to_easy(workout)


def summarize_plan(weeks: List[TrainingWeek]) -> PlanSummary:
    """Totals across all weeks of a plan."""
    if not weeks:
        return PlanSummary(0.0, 0, 0.0, 0, 0)
    peak_week = max(weeks, key=lambda w: (w.target_mileage, -w.week_number))
    return PlanSummary(
        total_miles=round_half_up(sum(w.target_mileage for w in weeks), 1),
        peak_mileage_week=peak_week.week_number,
        peak_mileage=peak_week.target_mileage,
        quality_sessions_total=sum(w.quality_sessions for w in weeks),
        long_runs_total=sum(1 for w in weeks if w.long_run_miles > 0),
    )


class _PlanBuilder:
    """Day-level workout construction for a single request."""

    def __init__(
        self,
        request: PlanRequest,
        structure: WeeklyStructure,
        zones: Optional[PaceZones],
        intermediate: Dict[date, IntermediateRace],
        settings: Settings,
    ) -> None:
        self.request = request
        self.structure = structure
        self.zones = zones
        self.intermediate = intermediate
        self.profile = request.athlete_profile
        self.race_date = request.race_date
        self.distance_m = request.race_distance_m
        self.rest_days = set(request.required_rest_days)
        self.easy_pace = zones.easy if zones else settings.default_easy_pace

    # ------------------------------------------------------------------
    # Week targets
    # ------------------------------------------------------------------

    def plan_week(
        self,
        week_number: int,
        phase: TrainingPhase,
        week_in_phase: int,
        is_down_week: bool,
        target_mileage: float,
    ) -> _WeekPlan:
        structure = self.structure
        cap = long_run_cap(self.distance_m)
        fraction = TAPER_LONG_RUN_FRACTION if phase == TrainingPhase.TAPER else LONG_RUN_FRACTION

        long_miles = 0.0
        if structure.long_run_index is not None:
            long_miles = min(round_half_up(target_mileage * fraction), cap)
            current_long = self.request.current_long_run_miles
            if phase != TrainingPhase.TAPER and current_long:
                long_miles = max(long_miles, min(current_long, cap))

        quota = self._quality_quota(is_down_week)

        remaining = target_mileage - long_miles
        run_days = sum(
            1 for d in structure.days if d.run_type not in (RunType.REST, RunType.LONG)
        )
        easy_days = max(1, run_days - quota)
        quality_estimate = quota * (remaining / max(1, run_days) + QUALITY_EXTRA_MILES)
        easy_miles = min(round_half_up((remaining - quality_estimate) / easy_days), MAX_EASY_MILES)
        easy_miles = max(easy_miles, MIN_EASY_MILES)

        week = _WeekPlan(
            week_number=week_number,
            phase=phase,
            week_in_phase=week_in_phase,
            is_down_week=is_down_week,
            target_mileage=target_mileage,
            long_run_miles=long_miles,
            easy_miles=easy_miles,
            quality_miles=easy_miles + QUALITY_EXTRA_MILES,
            quality_quota=quota,
        )

        if self.profile is not None and self.profile.mlr_preference and not is_down_week:
            self._place_medium_long(week)
        return week

    def _quality_quota(self, is_down_week: bool) -> int:
        quota = self.request.quality_sessions_per_week
        if quota == 0:
            return 0
        if is_down_week:
            quota = max(1, quota - 1)
        if recovery_adjustments(self.profile).extra_rest_day:
            quota = max(1, quota - 1)
        return min(quota, len(self.structure.quality_days))

    def _place_medium_long(self, week: _WeekPlan) -> None:
        long_idx = self.structure.long_run_index
        if long_idx is None:
            return
        easy_indices = self.structure.indices_of(RunType.EASY)
        if not easy_indices:
            return

        def distance_from_long(idx: int) -> int:
            gap = abs(idx - long_idx)
            return min(gap, 7 - gap)

        mlr_idx = max(easy_indices, key=distance_from_long)
        long_miles = week.long_run_miles
        miles = max(
            min(round_half_up(long_miles * MLR_FRACTION), long_miles - 2),
            min(MLR_MIN_MILES, long_miles - 2),
        )
        if miles >= MLR_MIN_MILES:
            week.mlr_index = mlr_idx
            week.mlr_miles = miles

    # ------------------------------------------------------------------
    # Days
    # ------------------------------------------------------------------

    def build_days(self, week_start: date, week: _WeekPlan) -> List[PlannedWorkout]:
        workouts = []
        for idx in range(7):
            workout = self._workout_for_day(week_start + timedelta(days=idx), idx, week)
            if workout is not None:
                workouts.append(workout)
        return workouts

    def _workout_for_day(self, day: date, idx: int, week: _WeekPlan) -> Optional[PlannedWorkout]:
        day_name = DAYS_ORDER[idx]
        is_rest_day = day_name in self.rest_days
        days_to_race = (self.race_date - day).days

        if days_to_race == 0:
            return self._goal_race(day)
        if 0 < days_to_race <= RACE_WEEK_DAYS:
            if is_rest_day:
                return None
            return self._race_week_day(day, days_to_race, week)

        b_race = self.intermediate.get(day)
        if b_race is not None:
            return self._intermediate_race(day, b_race, week.phase)
        mini_taper = self._mini_taper(day)
        if mini_taper is not None:
            if is_rest_day:
                return None
            template_id, category, miles, rationale = mini_taper
            return self._workout(template_id, day, category, miles, rationale, week.phase, is_key=False)

        if days_to_race < 0 or is_rest_day:
            return None

        run_type = self.structure.run_type(idx)
        if run_type == RunType.REST:
            return None

        if week.mlr_index == idx:
            return self._workout(
                "medium_long_run", day, WorkoutCategory.EASY, week.mlr_miles,
                MLR_RATIONALE, week.phase, is_key=False,
            )

        if run_type == RunType.LONG:
            if self._race_within(day, LONG_RUN_RACE_BUFFER_DAYS):
                return self._workout(
                    "easy_run", day, WorkoutCategory.EASY, PROXIMITY_EASY_MILES,
                    PROXIMITY_RATIONALE, week.phase, is_key=False,
                )
            template_id = long_run_type(week.phase, week.week_in_phase, self.distance_m)
            return self._workout(
                template_id, day, WorkoutCategory.LONG, week.long_run_miles,
                long_run_rationale(week.phase, self.distance_m), week.phase, is_key=True,
            )

        if run_type == RunType.QUALITY and week.quality_scheduled < week.quality_quota:
            week.quality_scheduled += 1
            base_type = workout_type_for_phase(
                week.phase, week.week_in_phase, self.distance_m, week.quality_scheduled
            )
            template_id = effective_workout_type(base_type, week.phase, week.week_in_phase, self.profile)
            return self._workout(
                template_id, day, WorkoutCategory.QUALITY, week.quality_miles,
                QUALITY_RATIONALE[week.phase], week.phase, is_key=True,
            )

        miles = time_constrained_distance(
            week.easy_miles, available_minutes_for_day(self.profile, idx), self.easy_pace
        )
        return self._workout(
            "easy_run", day, WorkoutCategory.EASY, miles, EASY_RATIONALE, week.phase, is_key=False,
        )

    def _goal_race(self, day: date) -> PlannedWorkout:
        miles = race_distance_miles(self.distance_m)
        pace = None
        if self.request.vdot is not None:
            pace = int(round_half_up(predict_time(self.request.vdot, self.distance_m) / miles))
        workout = self._workout(
            "race_day", day, WorkoutCategory.RACE, miles, RACE_DAY_RATIONALE,
            TrainingPhase.TAPER, is_key=True, target_pace=pace,
        )
        if self.request.race_name:
            workout = replace(workout, name=self.request.race_name)
        return workout

    def _race_week_day(self, day: date, days_to_race: int, week: _WeekPlan) -> PlannedWorkout:
        if days_to_race == 1:
            return self._workout(
                "shakeout_run", day, WorkoutCategory.EASY, SHAKEOUT_MILES,
                SHAKEOUT_RATIONALE, week.phase, is_key=False,
            )
        if days_to_race == 2:
            return self._workout(
                "easy_run", day, WorkoutCategory.EASY, PRE_RACE_EASY_MILES,
                PRE_RACE_EASY_RATIONALE, week.phase, is_key=False,
            )
        if 3 <= days_to_race <= 5 and DAYS_ORDER[day.weekday()] == TUNE_UP_DAY:
            if self.distance_m >= MARATHON_CLASS_M:
                miles, zone = MARATHON_TUNE_UP_MILES, "marathon"
            elif self.distance_m >= HALF_CLASS_M:
                miles, zone = TUNE_UP_MILES, "half_marathon"
            else:
                miles, zone = TUNE_UP_MILES, "tempo"
            return self._workout(
                "race_pace_tune_up", day, WorkoutCategory.QUALITY, miles,
                TUNE_UP_RATIONALE, week.phase, is_key=True, zone=zone,
            )
        miles = round_half_up(min(RACE_WEEK_EASY_CAP, week.target_mileage / 5), 1)
        return self._workout(
            "easy_run", day, WorkoutCategory.EASY, miles,
            RACE_WEEK_EASY_RATIONALE, week.phase, is_key=False,
        )

    def _intermediate_race(self, day: date, race: IntermediateRace, phase: TrainingPhase) -> PlannedWorkout:
        miles = race_distance_miles(race.distance_m)
        pace = None
        if self.request.vdot is not None:
            pace = int(round_half_up(predict_time(self.request.vdot, race.distance_m) / miles))
        label = race.distance_label or race_distance_label(race.distance_m)
        workout = self._workout(
            "tune_up_race", day, WorkoutCategory.RACE, miles,
            f"{race.priority.value} race: {race.name} ({label}). Treat it as a hard effort inside the training block.",
            phase, is_key=True, target_pace=pace,
        )
        return replace(workout, name=race.name)

    def _mini_taper(self, day: date) -> Optional[Tuple[str, WorkoutCategory, float, str]]:
        """(template, category, miles, rationale) when the day borders an intermediate race."""
        if day + timedelta(days=1) in self.intermediate:
            return "shakeout_run", WorkoutCategory.EASY, MINI_TAPER_SHAKEOUT_MILES, MINI_TAPER_SHAKEOUT_RATIONALE
        if day + timedelta(days=2) in self.intermediate:
            return "easy_run", WorkoutCategory.EASY, MINI_TAPER_EASY_MILES, MINI_TAPER_EASY_RATIONALE
        if day - timedelta(days=1) in self.intermediate:
            return "recovery_run", WorkoutCategory.RECOVERY, POST_RACE_RECOVERY_MILES, POST_RACE_RATIONALE
        return None

    def _race_within(self, day: date, days: int) -> bool:
        for offset in range(1, days + 1):
            upcoming = day + timedelta(days=offset)
            if upcoming == self.race_date or upcoming in self.intermediate:
                return True
        return False

    # ------------------------------------------------------------------
    # Workout construction
    # ------------------------------------------------------------------

    def _workout(
        self,
        template_id: str,
        day: date,
        category: WorkoutCategory,
        miles: float,
        rationale: str,
        phase: TrainingPhase,
        is_key: bool,
        zone: Optional[str] = None,
        target_pace: Optional[int] = None,
    ) -> PlannedWorkout:
        template = get_workout_template(template_id)
        zone = zone or template.pace_zone
        if target_pace is None and self.zones is not None:
            target_pace = self.zones.get(zone)

        duration = None
        if target_pace and miles:
            duration = int(round_half_up(miles * target_pace / 60))

        return PlannedWorkout(
            date=day,
            day_of_week=DAYS_ORDER[day.weekday()],
            category=category,
            template_id=template.id,
            name=template.name,
            description=template.description,
            rationale=rationale,
            is_key_workout=is_key,
            target_distance_miles=miles,
            target_duration_minutes=duration,
            target_pace=target_pace,
            target_zone=zone,
            alternatives=self._alternatives(template.id, category, phase),
            structure=template.structure,
        )

    def _alternatives(self, template_id: str, category: WorkoutCategory, phase: TrainingPhase) -> List[str]:
        if category == WorkoutCategory.RACE:
            return []
        if category == WorkoutCategory.QUALITY:
            substitution = COMFORT_SUBSTITUTIONS.get(template_id)
            options = substitution.alternatives if substitution else QUALITY_ALTERNATIVES[phase]
        elif category == WorkoutCategory.LONG:
            options = LONG_RUN_ALTERNATIVES[phase]
        else:
            options = EASY_ALTERNATIVES
        return [t for t in options if t != template_id][:MAX_ALTERNATIVES]

    def downgrade_to_easy(self, workout: PlannedWorkout) -> PlannedWorkout:
        template = get_workout_template("easy_run")
        miles = min(workout.target_distance_miles or MIN_EASY_MILES, MAX_EASY_MILES)
        pace = self.zones.easy if self.zones else None
        return replace(
            workout,
            category=WorkoutCategory.EASY,
            template_id=template.id,
            name=template.name,
            description=template.description,
            rationale=DOWNGRADE_RATIONALE,
            is_key_workout=False,
            target_distance_miles=miles,
            target_duration_minutes=int(round_half_up(miles * pace / 60)) if pace else None,
            target_pace=pace,
            target_zone=template.pace_zone,
            alternatives=list(EASY_ALTERNATIVES),
            structure=template.structure,
        )


def generate_plan(request: PlanRequest, logger: Optional[logging.Logger] = None) -> TrainingPlan:
    """Generate a plan with default progression constants."""
    return PlanGenerator(logger=logger).generate(request)

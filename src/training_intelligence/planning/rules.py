"""
Scheduling rules for periodized plans.

Pure rule tables and functions: how a plan's weeks split into phases,
how weekly mileage progresses through them, and which days of a week
carry the long run, quality sessions and easy runs.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..models.athlete import DAYS_ORDER
from ..models.plans import PHASE_ORDER, Aggressiveness, TrainingPhase
from ..utils.formatting import round_half_up


MARATHON_CLASS_M = 40000
HALF_CLASS_M = 20000
TEN_K_CLASS_M = 10000


# ============================================================================
# Phase distribution
# ============================================================================

@dataclass(frozen=True)
class PhaseSplit:
    """Share of the plan given to each phase."""
    base: float
    build: float
    peak: float
    taper: float

    def to_dict(self) -> Dict[str, float]:
        return {"base": self.base, "build": self.build, "peak": self.peak, "taper": self.taper}


# Longer races need proportionally more base and less build/peak
PHASE_SPLITS: Tuple[Tuple[float, PhaseSplit], ...] = (
    (MARATHON_CLASS_M, PhaseSplit(base=0.30, build=0.40, peak=0.15, taper=0.15)),
    (HALF_CLASS_M, PhaseSplit(base=0.25, build=0.45, peak=0.15, taper=0.15)),
    (TEN_K_CLASS_M, PhaseSplit(base=0.20, build=0.50, peak=0.15, taper=0.15)),
    (0, PhaseSplit(base=0.20, build=0.50, peak=0.20, taper=0.10)),
)

MIN_PEAK_WEEKS = 2
MAX_PEAK_WEEKS = 4


def phase_split(race_distance_m: float) -> PhaseSplit:
    """Phase percentages for a race distance band (>=40k, >=20k, >=10k, else)."""
    for min_distance, split in PHASE_SPLITS:
        if race_distance_m >= min_distance:
            return split
    return PHASE_SPLITS[-1][1]


def max_taper_weeks(race_distance_m: float, total_weeks: int) -> int:
    """Taper cap: 3 weeks for marathon-class, 2 for half, at most 2 otherwise."""
    if race_distance_m >= MARATHON_CLASS_M:
        return 3
    if race_distance_m >= HALF_CLASS_M:
        return 2
    return min(2, math.ceil(total_weeks * 0.1))


def phase_weeks(
    split: PhaseSplit,
    total_weeks: int,
    race_distance_m: float,
) -> Dict[TrainingPhase, int]:
    """
    Whole weeks per phase.

    Taper is capped by race distance and floored at 1; peak is clamped to
    2-4; build takes its base:build share of what remains (at least 2);
    base takes the rest (at least 1). On very short plans the floors can
    overshoot, in which case build, then peak, then base give weeks back
    so the phases always sum to total_weeks.
    """
    taper = min(
        max_taper_weeks(race_distance_m, total_weeks),
        max(1, int(round_half_up(total_weeks * split.taper))),
    )
    peak = min(MAX_PEAK_WEEKS, max(MIN_PEAK_WEEKS, int(round_half_up(total_weeks * split.peak))))

    remaining = total_weeks - taper - peak
    build = max(2, int(round_half_up(remaining * (split.build / (split.base + split.build)))))
    base = max(1, remaining - build)

    weeks = {
        TrainingPhase.BASE: base,
        TrainingPhase.BUILD: build,
        TrainingPhase.PEAK: peak,
        TrainingPhase.TAPER: taper,
    }

    overshoot = sum(weeks.values()) - total_weeks
    for phase in (TrainingPhase.BUILD, TrainingPhase.PEAK, TrainingPhase.BASE):
        while overshoot > 0 and weeks[phase] > 1:
            weeks[phase] -= 1
            overshoot -= 1

    return weeks


def phase_boundaries(weeks: Mapping[TrainingPhase, int]) -> List[Tuple[TrainingPhase, int]]:
    """Cumulative last week number of each phase, in phase order."""
    boundaries = []
    cumulative = 0
    for phase in PHASE_ORDER:
        cumulative += weeks[phase]
        boundaries.append((phase, cumulative))
    return boundaries


# ============================================================================
# Mileage progression
# ============================================================================

def _default_taper_schedules() -> Mapping[int, Tuple[float, ...]]:
    return MappingProxyType({
        1: (0.50,),
        2: (0.75, 0.50),
        3: (0.80, 0.65, 0.50),
        4: (0.85, 0.75, 0.60, 0.50),
    })


@dataclass(frozen=True)
class ProgressionConfig:
    """Volume progression constants keyed by aggressiveness."""
    increase_rates: Mapping[Aggressiveness, float] = field(default_factory=lambda: MappingProxyType({
        Aggressiveness.CONSERVATIVE: 0.08,
        Aggressiveness.MODERATE: 0.10,
        Aggressiveness.AGGRESSIVE: 0.12,
    }))
    down_week_frequency: Mapping[Aggressiveness, int] = field(default_factory=lambda: MappingProxyType({
        Aggressiveness.CONSERVATIVE: 3,
        Aggressiveness.MODERATE: 4,
        Aggressiveness.AGGRESSIVE: 4,
    }))
    down_week_reduction: Mapping[Aggressiveness, float] = field(default_factory=lambda: MappingProxyType({
        Aggressiveness.CONSERVATIVE: 0.30,
        Aggressiveness.MODERATE: 0.25,
        Aggressiveness.AGGRESSIVE: 0.20,
    }))
    base_cap_fraction: float = 0.85
    build_end_fraction: float = 0.95
    taper_schedules: Mapping[int, Tuple[float, ...]] = field(default_factory=_default_taper_schedules)
    long_taper_start: float = 0.90
    long_taper_end: float = 0.50

    def taper_schedule(self, taper_weeks: int) -> Tuple[float, ...]:
        """Fraction of peak volume for each taper week."""
        if taper_weeks <= 0:
            return ()
        if taper_weeks in self.taper_schedules:
            return self.taper_schedules[taper_weeks]
        span = self.long_taper_start - self.long_taper_end
        return tuple(
            round_half_up(self.long_taper_start - (i / (taper_weeks - 1)) * span, 2)
            for i in range(taper_weeks)
        )


DEFAULT_PROGRESSION = ProgressionConfig()


def down_week_flags(
    weeks: Mapping[TrainingPhase, int],
    aggressiveness: Aggressiveness,
    config: ProgressionConfig = DEFAULT_PROGRESSION,
) -> List[bool]:
    """
    Which weeks of the plan are reduced-volume down weeks.

    Every Nth week across base/build/peak is a down week, except the last
    peak week. Taper weeks are never down weeks.
    """
    frequency = config.down_week_frequency[aggressiveness]
    flags: List[bool] = []
    weeks_since_down = 0

    for phase in (TrainingPhase.BASE, TrainingPhase.BUILD, TrainingPhase.PEAK):
        for i in range(weeks[phase]):
            weeks_since_down += 1
            is_last_peak = phase == TrainingPhase.PEAK and i == weeks[phase] - 1
            if weeks_since_down >= frequency and not is_last_peak:
                flags.append(True)
                weeks_since_down = 0
            else:
                flags.append(False)

    flags.extend([False] * weeks[TrainingPhase.TAPER])
    return flags


def mileage_progression(
    start_mileage: float,
    peak_mileage: float,
    total_weeks: int,
    weeks: Mapping[TrainingPhase, int],
    aggressiveness: Aggressiveness,
    config: ProgressionConfig = DEFAULT_PROGRESSION,
) -> List[float]:
    """
    Target mileage for every week of the plan.

    Base grows geometrically (8/10/12% a week) up to 85% of peak; build
    climbs linearly to 95% of peak; peak holds; taper steps down from peak
    on a fixed schedule. Down weeks cut the current volume by 30/25/20%
    without advancing the progression.

    Returns:
        total_weeks whole-mile values
    """
    increase_rate = config.increase_rates[aggressiveness]
    reduction = config.down_week_reduction[aggressiveness]
    flags = down_week_flags(weeks, aggressiveness, config)

    mileages: List[float] = []
    current = float(start_mileage)
    week_idx = 0

    for _ in range(weeks[TrainingPhase.BASE]):
        if flags[week_idx]:
            mileages.append(round_half_up(current * (1 - reduction)))
        else:
            mileages.append(round_half_up(current))
            current = min(peak_mileage * config.base_cap_fraction, current * (1 + increase_rate))
        week_idx += 1

    build_start = current
    build_end = peak_mileage * config.build_end_fraction
    increment = (build_end - build_start) / max(1, weeks[TrainingPhase.BUILD] - 1)
    for i in range(weeks[TrainingPhase.BUILD]):
        if flags[week_idx]:
            mileages.append(round_half_up(current * (1 - reduction)))
        else:
            current = build_start + increment * i
            mileages.append(round_half_up(current))
        week_idx += 1

    for _ in range(weeks[TrainingPhase.PEAK]):
        if flags[week_idx]:
            mileages.append(round_half_up(peak_mileage * (1 - reduction)))
        else:
            mileages.append(round_half_up(peak_mileage))
        week_idx += 1

    for factor in config.taper_schedule(weeks[TrainingPhase.TAPER]):
        mileages.append(round_half_up(peak_mileage * factor))

    # Phase weeks always sum to total_weeks; guard callers passing a mismatch
    if len(mileages) < total_weeks:
        mileages.extend([mileages[-1] if mileages else float(start_mileage)] * (total_weeks - len(mileages)))
    return mileages[:total_weeks]


# ============================================================================
# Weekly structure
# ============================================================================

class RunType(str, Enum):
    """What a day of the weekly template holds."""
    REST = "rest"
    EASY = "easy"
    LONG = "long"
    QUALITY = "quality"


@dataclass
class DayAssignment:
    day_of_week: str
    run_type: RunType = RunType.REST
    is_key_workout: bool = False


@dataclass
class WeeklyStructure:
    """Day-by-day template reused for every week of a plan."""
    days: List[DayAssignment]
    long_run_day: str
    quality_days: List[str]
    rest_days: List[str]

    def run_type(self, day_index: int) -> RunType:
        return self.days[day_index].run_type

    def indices_of(self, run_type: RunType) -> List[int]:
        return [i for i, d in enumerate(self.days) if d.run_type == run_type]

    @property
    def long_run_index(self) -> Optional[int]:
        indices = self.indices_of(RunType.LONG)
        return indices[0] if indices else None

    @property
    def run_days(self) -> int:
        return sum(1 for d in self.days if d.run_type != RunType.REST)


# Fallback quality days: Tue, Thu, Wed, Fri
QUALITY_FALLBACK_INDICES = (1, 3, 2, 4)


def day_index(day: str) -> int:
    return DAYS_ORDER.index(day.lower())


def weekly_structure(
    runs_per_week: int,
    long_run_day: str,
    preferred_quality_days: Sequence[str],
    rest_days: Sequence[str],
    quality_sessions: int,
) -> WeeklyStructure:
    """
    Assign each day of the week a run type.

    The long run goes on its preferred day unless that is a rest day.
    Quality sessions go on preferred days first, then Tue/Thu/Wed/Fri,
    never on a rest day or next to the long run. Remaining days fill
    with easy runs until runs_per_week is reached.
    """
    rest = {d.lower() for d in rest_days}
    long_idx = day_index(long_run_day)
    days = [DayAssignment(day_of_week=d) for d in DAYS_ORDER]

    long_placed = long_run_day.lower() not in rest
    if long_placed:
        days[long_idx].run_type = RunType.LONG
        days[long_idx].is_key_workout = True

    day_before_long = (long_idx - 1) % 7
    day_after_long = (long_idx + 1) % 7
    blocked = {long_idx, day_before_long, day_after_long}

    quality_days: List[str] = []

    def _place_quality(idx: int) -> None:
        days[idx].run_type = RunType.QUALITY
        days[idx].is_key_workout = True
        quality_days.append(DAYS_ORDER[idx])

    for day in preferred_quality_days:
        if len(quality_days) >= quality_sessions:
            break
        idx = day_index(day)
        if DAYS_ORDER[idx] in rest or idx in blocked or days[idx].run_type == RunType.QUALITY:
            continue
        _place_quality(idx)

    for idx in QUALITY_FALLBACK_INDICES:
        if len(quality_days) >= quality_sessions:
            break
        if days[idx].run_type != RunType.REST or DAYS_ORDER[idx] in rest or idx in blocked:
            continue
        _place_quality(idx)

    run_days = (1 if long_placed else 0) + len(quality_days)
    for idx, day in enumerate(days):
        if run_days >= runs_per_week:
            break
        if day.run_type == RunType.REST and DAYS_ORDER[idx] not in rest:
            day.run_type = RunType.EASY
            run_days += 1

    # The day before the long run is never a hard day
    if days[day_before_long].run_type == RunType.QUALITY:
        days[day_before_long].run_type = RunType.EASY
        days[day_before_long].is_key_workout = False
        quality_days.remove(DAYS_ORDER[day_before_long])

    return WeeklyStructure(
        days=days,
        long_run_day=long_run_day.lower(),
        quality_days=quality_days,
        rest_days=sorted(rest, key=DAYS_ORDER.index),
    )


def adjacent_hard_days(structure: WeeklyStructure) -> List[Tuple[str, str]]:
    """Pairs of key days that fall back to back, including Sunday->Monday."""
    pairs = []
    for idx in range(7):
        nxt = (idx + 1) % 7
        if structure.days[idx].is_key_workout and structure.days[nxt].is_key_workout:
            pairs.append((DAYS_ORDER[idx], DAYS_ORDER[nxt]))
    return pairs


def validate_hard_easy_pattern(structure: WeeklyStructure) -> bool:
    """True when no two key days are adjacent, counting the week wrap."""
    return not adjacent_hard_days(structure)


def effort_distribution(structure: WeeklyStructure) -> Dict[str, int]:
    """Share of run days that are easy vs hard (the 80/20 check)."""
    easy = sum(1 for d in structure.days if d.run_type != RunType.REST and not d.is_key_workout)
    hard = sum(1 for d in structure.days if d.run_type != RunType.REST and d.is_key_workout)
    total = easy + hard
    if total == 0:
        return {"easy_percent": 100, "hard_percent": 0}
    return {
        "easy_percent": int(round_half_up(easy / total * 100)),
        "hard_percent": int(round_half_up(hard / total * 100)),
    }

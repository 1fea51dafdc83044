"""
Workout Templates

A library of running workout templates based on proven coaching
methodologies. The plan generator draws names, descriptions and
structures from here; the execution scorer reads the structures back to
compare planned against executed work volume.

The library is immutable. Look templates up by id.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..exceptions import WorkoutTemplateNotFoundError
from ..models.plans import StructureSegment, TrainingPhase


BASE = TrainingPhase.BASE
BUILD = TrainingPhase.BUILD
PEAK = TrainingPhase.PEAK
TAPER = TrainingPhase.TAPER


@dataclass(frozen=True)
class WorkoutTemplate:
    """A reusable workout definition."""
    id: str
    name: str
    category: str  # long, tempo, threshold, vo2max, fartlek, hills, easy, recovery, medium_long, race_specific, race
    description: str
    purpose: str
    phases: Tuple[TrainingPhase, ...]
    structure: Tuple[StructureSegment, ...]
    pace_zone: str
    intensity_level: str  # easy, moderate, hard, very_hard
    is_key_workout: bool
    typical_min_miles: float = 0.0
    typical_max_miles: float = 0.0

    def is_appropriate_for(self, phase: TrainingPhase) -> bool:
        return phase in self.phases


def _seg(segment_type: str, **kwargs) -> StructureSegment:
    return StructureSegment(segment_type=segment_type, **kwargs)


_TEMPLATES: Tuple[WorkoutTemplate, ...] = (
    # ==================== Long Runs ====================
    WorkoutTemplate(
        id="easy_long_run",
        name="Easy Long Run",
        category="long",
        description="Steady-state long run at conversational pace. Focus on time on feet and aerobic development.",
        purpose="Build endurance, improve fat utilization, develop mental toughness.",
        phases=(BASE, BUILD, PEAK),
        structure=(_seg("steady", pace="easy", notes="1-2 min slower than marathon pace"),),
        pace_zone="easy",
        intensity_level="moderate",
        is_key_workout=True,
        typical_min_miles=12,
        typical_max_miles=22,
    ),
    WorkoutTemplate(
        id="progression_long_run",
        name="Progression Long Run",
        category="long",
        description="Start easy, gradually increase pace throughout, finishing at or near marathon pace.",
        purpose="Teaches pacing discipline and builds confidence at goal pace when fatigued.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("steady", percentage=60, pace="easy"),
            _seg("steady", percentage=25, pace="general_aerobic"),
            _seg("steady", percentage=15, pace="marathon", notes="Final miles at MP or faster"),
        ),
        pace_zone="easy",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=14,
        typical_max_miles=20,
    ),
    WorkoutTemplate(
        id="marathon_pace_long_run",
        name="Marathon Pace Long Run",
        category="long",
        description="Long run with extended segments at marathon pace. Key race-specific workout.",
        purpose="Race-specific endurance. Practice race-day fueling at goal pace.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=3, pace="easy"),
            _seg("work", distance_miles=8, pace="marathon", notes="Continuous MP segment"),
            _seg("cooldown", distance_miles=2, pace="easy"),
        ),
        pace_zone="marathon",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=13,
        typical_max_miles=18,
    ),
    WorkoutTemplate(
        id="alternating_pace_long_run",
        name="Alternating Pace Long Run",
        category="long",
        description="Alternate between marathon pace and easy pace every 1-2 miles.",
        purpose="Builds pace control and resilience to surges.",
        phases=(PEAK,),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=5, work_distance_miles=1.5, pace="marathon", rest_minutes=3),
            _seg("cooldown", distance_miles=2, pace="easy"),
        ),
        pace_zone="marathon",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=14,
        typical_max_miles=18,
    ),
    WorkoutTemplate(
        id="marathon_simulation",
        name="Marathon Simulation",
        category="long",
        description="Extended run with the majority at marathon pace. Dress rehearsal for race day.",
        purpose="Final confidence builder for fueling, pacing, gear and mental strategy.",
        phases=(PEAK,),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("work", distance_miles=12, pace="marathon", notes="Practice exact race-day fueling"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="marathon",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=15,
        typical_max_miles=18,
    ),
    # ==================== Tempo & Threshold ====================
    WorkoutTemplate(
        id="steady_tempo",
        name="Steady Tempo Run",
        category="tempo",
        description="Continuous run at comfortably hard effort. Short phrases, not conversation.",
        purpose="Improves lactate threshold, running economy and mental toughness.",
        phases=(BASE, BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("work", distance_miles=4, pace="tempo"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="tempo",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=5,
        typical_max_miles=10,
    ),
    WorkoutTemplate(
        id="progressive_tempo",
        name="Progressive Tempo",
        category="tempo",
        description="Tempo that starts moderate and finishes at threshold.",
        purpose="Develops the ability to close strong. Simulates negative-split racing.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("work", distance_miles=2, pace="half_marathon"),
            _seg("work", distance_miles=2, pace="tempo"),
            _seg("work", distance_miles=1, pace="threshold"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="tempo",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=7,
        typical_max_miles=10,
    ),
    WorkoutTemplate(
        id="cruise_intervals",
        name="Cruise Intervals",
        category="tempo",
        description="Threshold-pace repeats with short recovery.",
        purpose="More total volume at threshold without excessive fatigue.",
        phases=(BASE, BUILD),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=3, work_distance_miles=2, pace="threshold", rest_minutes=1),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="threshold",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=8,
        typical_max_miles=11,
    ),
    WorkoutTemplate(
        id="threshold_intervals",
        name="Threshold Intervals",
        category="threshold",
        description="Hard intervals at threshold pace, roughly one-hour race pace.",
        purpose="Maximises time at lactate threshold.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=4, work_distance_miles=1.5, pace="threshold", rest_minutes=1.5),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="threshold",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=8,
        typical_max_miles=11,
    ),
    # ==================== VO2max / Speed ====================
    WorkoutTemplate(
        id="short_intervals_400m",
        name="400m Repeats",
        category="vo2max",
        description="Fast 400m repeats at 5K pace or slightly faster.",
        purpose="Develops VO2max, leg speed and running economy.",
        phases=(BASE, BUILD),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy", notes="Include strides"),
            _seg("intervals", repeats=8, work_distance_meters=400, pace="interval", rest_minutes=1.5),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="interval",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=5,
        typical_max_miles=8,
    ),
    WorkoutTemplate(
        id="long_intervals_1000m",
        name="1000m Repeats",
        category="vo2max",
        description="Classic VO2max workout at 5K pace with slightly shorter recovery.",
        purpose="Primary VO2max development workout.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy", notes="Include strides"),
            _seg("intervals", repeats=5, work_distance_meters=1000, pace="interval", rest_minutes=2.5),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="interval",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=7,
        typical_max_miles=10,
    ),
    WorkoutTemplate(
        id="yasso_800s",
        name="Yasso 800s",
        category="vo2max",
        description="800m repeats in minutes:seconds equal to your marathon goal hours:minutes.",
        purpose="Marathon fitness benchmark.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=10, work_distance_meters=800, pace="interval", notes="Equal rest to work time"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="interval",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=8,
        typical_max_miles=10,
    ),
    WorkoutTemplate(
        id="ladder_workout",
        name="Ladder Workout",
        category="vo2max",
        description="Intervals of increasing then decreasing distance.",
        purpose="Variety in speed work across several intensities.",
        phases=(BUILD,),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("ladder", distance_meters=3600, pace="interval", notes="400-800-1200-800-400, jog equal distance"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="interval",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=7,
        typical_max_miles=9,
    ),
    WorkoutTemplate(
        id="mile_repeats",
        name="Mile Repeats",
        category="vo2max",
        description="Long VO2max intervals at 5K-10K pace.",
        purpose="Develops the ability to sustain hard effort.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=4, work_distance_miles=1, pace="vo2max", rest_minutes=3),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="vo2max",
        intensity_level="very_hard",
        is_key_workout=True,
        typical_min_miles=8,
        typical_max_miles=10,
    ),
    # ==================== Fartlek & Hills ====================
    WorkoutTemplate(
        id="classic_fartlek",
        name="Classic Fartlek",
        category="fartlek",
        description="Unstructured speed play with varied fast and easy segments by feel.",
        purpose="Speed and aerobic capacity without the stress of structured intervals.",
        phases=(BASE, BUILD),
        structure=(
            _seg("warmup", distance_miles=1.5, pace="easy"),
            _seg("fartlek", duration_minutes=20, notes="Alternate 1-3 min hard with 1-2 min easy"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="tempo",
        intensity_level="moderate",
        is_key_workout=False,
        typical_min_miles=5,
        typical_max_miles=8,
    ),
    WorkoutTemplate(
        id="structured_fartlek",
        name="Structured Fartlek",
        category="fartlek",
        description="Fartlek with defined on/off intervals.",
        purpose="Structured alternative to track work.",
        phases=(BASE, BUILD),
        structure=(
            _seg("warmup", distance_miles=1.5, pace="easy"),
            _seg("intervals", repeats=6, work_duration_minutes=3, pace="tempo", rest_minutes=2),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="tempo",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=6,
        typical_max_miles=9,
    ),
    WorkoutTemplate(
        id="short_hill_repeats",
        name="Short Hill Repeats",
        category="hills",
        description="Short, steep hill repeats to build power and running economy.",
        purpose="Leg strength and power with low impact.",
        phases=(BASE, BUILD),
        structure=(
            _seg("warmup", distance_miles=1.5, pace="easy"),
            _seg("hills", repeats=8, work_duration_minutes=1, notes="Jog down for recovery"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="vo2max",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=5,
        typical_max_miles=7,
    ),
    WorkoutTemplate(
        id="long_hill_repeats",
        name="Long Hill Repeats",
        category="hills",
        description="Longer 2-4 minute hill repeats at threshold effort.",
        purpose="Combines threshold work with strength building.",
        phases=(BUILD,),
        structure=(
            _seg("warmup", distance_miles=1.5, pace="easy"),
            _seg("hills", repeats=5, work_duration_minutes=3, notes="Threshold effort, jog down"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="threshold",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=6,
        typical_max_miles=9,
    ),
    # ==================== Easy & Recovery ====================
    WorkoutTemplate(
        id="easy_run",
        name="Easy Run",
        category="easy",
        description="Comfortable, conversational pace. The foundation of any training program.",
        purpose="Builds aerobic base and accumulates mileage safely.",
        phases=(BASE, BUILD, PEAK, TAPER),
        structure=(_seg("steady", pace="easy"),),
        pace_zone="easy",
        intensity_level="easy",
        is_key_workout=False,
        typical_min_miles=3,
        typical_max_miles=8,
    ),
    WorkoutTemplate(
        id="recovery_run",
        name="Recovery Run",
        category="recovery",
        description="Very easy jog the day after a hard workout or race.",
        purpose="Promotes blood flow for recovery without adding training stress.",
        phases=(BASE, BUILD, PEAK, TAPER),
        structure=(_seg("steady", pace="recovery"),),
        pace_zone="recovery",
        intensity_level="easy",
        is_key_workout=False,
        typical_min_miles=2,
        typical_max_miles=5,
    ),
    WorkoutTemplate(
        id="easy_run_strides",
        name="Easy Run with Strides",
        category="easy",
        description="Easy run followed by 4-6 short accelerations to maintain leg turnover.",
        purpose="Maintains leg speed without fatigue. Great for taper weeks.",
        phases=(BASE, BUILD, PEAK, TAPER),
        structure=(
            _seg("steady", pace="easy"),
            _seg("strides", repeats=5, notes="20 s accelerations, 60 s easy"),
        ),
        pace_zone="easy",
        intensity_level="easy",
        is_key_workout=False,
        typical_min_miles=4,
        typical_max_miles=7,
    ),
    WorkoutTemplate(
        id="general_aerobic",
        name="General Aerobic Run",
        category="easy",
        description="Slightly faster than easy, but still comfortable.",
        purpose="Productive mileage without high stress.",
        phases=(BASE, BUILD, PEAK),
        structure=(_seg("steady", pace="general_aerobic"),),
        pace_zone="general_aerobic",
        intensity_level="easy",
        is_key_workout=False,
        typical_min_miles=5,
        typical_max_miles=10,
    ),
    # ==================== Medium-Long ====================
    WorkoutTemplate(
        id="medium_long_run",
        name="Medium-Long Run",
        category="medium_long",
        description="Midweek longer run that bridges easy runs and the weekend long run.",
        purpose="Adds volume and a second endurance stimulus.",
        phases=(BASE, BUILD, PEAK),
        structure=(_seg("steady", pace="general_aerobic"),),
        pace_zone="general_aerobic",
        intensity_level="moderate",
        is_key_workout=False,
        typical_min_miles=10,
        typical_max_miles=15,
    ),
    WorkoutTemplate(
        id="medium_long_pickup",
        name="Medium-Long with Pickup",
        category="medium_long",
        description="Medium-long run finishing with moderate effort miles.",
        purpose="Gentle stimulus on a volume-building run.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("steady", percentage=70, pace="easy"),
            _seg("steady", percentage=30, pace="general_aerobic"),
        ),
        pace_zone="general_aerobic",
        intensity_level="moderate",
        is_key_workout=False,
        typical_min_miles=10,
        typical_max_miles=14,
    ),
    # ==================== Race-Specific ====================
    WorkoutTemplate(
        id="marathon_pace_intervals",
        name="Marathon Pace Intervals",
        category="race_specific",
        description="Repeated miles at marathon pace with short recovery.",
        purpose="Locks in marathon pace.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=5, work_distance_miles=1, pace="marathon", rest_minutes=1),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="marathon",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=8,
        typical_max_miles=12,
    ),
    WorkoutTemplate(
        id="half_marathon_pace_workout",
        name="Half Marathon Pace Workout",
        category="race_specific",
        description="Extended segments at half marathon pace.",
        purpose="Race-specific endurance for the half marathon.",
        phases=(BUILD, PEAK),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=3, work_distance_miles=2, pace="half_marathon", rest_minutes=2),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="half_marathon",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=9,
        typical_max_miles=12,
    ),
    WorkoutTemplate(
        id="goal_pace_tempo",
        name="Goal Pace Tempo",
        category="race_specific",
        description="Continuous run at goal race pace.",
        purpose="Final confirmation that goal pace feels right.",
        phases=(PEAK,),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("work", distance_miles=4, pace="marathon"),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="marathon",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=7,
        typical_max_miles=10,
    ),
    WorkoutTemplate(
        id="cutdown_long_run",
        name="Cutdown Long Run",
        category="race_specific",
        description="Long run where each segment gets faster, ending at marathon pace or faster.",
        purpose="Simulates a negative split on tired legs.",
        phases=(PEAK,),
        structure=(
            _seg("steady", distance_miles=4, pace="easy"),
            _seg("steady", distance_miles=4, pace="general_aerobic"),
            _seg("steady", distance_miles=4, pace="marathon"),
            _seg("steady", distance_miles=2, pace="half_marathon"),
        ),
        pace_zone="marathon",
        intensity_level="hard",
        is_key_workout=True,
        typical_min_miles=14,
        typical_max_miles=18,
    ),
    # ==================== Race Week ====================
    WorkoutTemplate(
        id="race_day",
        name="Race Day",
        category="race",
        description="Goal race. Trust your training.",
        purpose="The race the plan builds towards.",
        phases=(TAPER,),
        structure=(),
        pace_zone="race",
        intensity_level="very_hard",
        is_key_workout=True,
    ),
    WorkoutTemplate(
        id="tune_up_race",
        name="Tune-Up Race",
        category="race",
        description="Intermediate race inside the training block.",
        purpose="Race practice and a fitness check.",
        phases=(BASE, BUILD, PEAK),
        structure=(),
        pace_zone="race",
        intensity_level="very_hard",
        is_key_workout=True,
    ),
    WorkoutTemplate(
        id="shakeout_run",
        name="Shakeout Run",
        category="easy",
        description="Short, very easy run to stay loose before a race.",
        purpose="Keeps legs fresh while staying loose.",
        phases=(BASE, BUILD, PEAK, TAPER),
        structure=(_seg("steady", pace="easy"), _seg("strides", repeats=4)),
        pace_zone="easy",
        intensity_level="easy",
        is_key_workout=False,
        typical_min_miles=2,
        typical_max_miles=3,
    ),
    WorkoutTemplate(
        id="race_pace_tune_up",
        name="Race Pace Tune-Up",
        category="tempo",
        description="Short race-pace segments to dial in goal pace during race week.",
        purpose="Final sharpening without accumulating fatigue.",
        phases=(TAPER,),
        structure=(
            _seg("warmup", distance_miles=2, pace="easy"),
            _seg("intervals", repeats=2, work_distance_miles=2, pace="marathon", rest_minutes=2),
            _seg("cooldown", distance_miles=1, pace="easy"),
        ),
        pace_zone="marathon",
        intensity_level="moderate",
        is_key_workout=True,
        typical_min_miles=6,
        typical_max_miles=8,
    ),
)


WORKOUT_TEMPLATES: Mapping[str, WorkoutTemplate] = MappingProxyType(
    {template.id: template for template in _TEMPLATES}
)


def find_workout_template(template_id: str) -> Optional[WorkoutTemplate]:
    """Get a template by id, or None."""
    return WORKOUT_TEMPLATES.get(template_id)


def get_workout_template(template_id: str) -> WorkoutTemplate:
    """
    Get a template by id.

    Raises:
        WorkoutTemplateNotFoundError: If the id is not in the library
    """
    template = WORKOUT_TEMPLATES.get(template_id)
    if template is None:
        raise WorkoutTemplateNotFoundError(template_id)
    return template


def templates_for_phase(phase: TrainingPhase) -> List[WorkoutTemplate]:
    """Templates appropriate for a training phase."""
    return [t for t in _TEMPLATES if t.is_appropriate_for(phase)]


def templates_by_category(category: str) -> List[WorkoutTemplate]:
    """Templates in a category."""
    return [t for t in _TEMPLATES if t.category == category]


def key_workout_templates() -> List[WorkoutTemplate]:
    """Templates flagged as key (quality) workouts."""
    return [t for t in _TEMPLATES if t.is_key_workout]


def structure_work_miles(structure: Tuple[StructureSegment, ...]) -> Dict[str, object]:
    """
    Total planned "work" distance in a structure.

    Interval segments count repeats x work distance, or repeats x
    duration / 6 (six-minute miles) when only a duration is given.
    Work and steady segments count their own distance.

    Returns:
        Dict with total_work_miles and the first work pace zone (or None)
    """
    total = 0.0
    work_pace: Optional[str] = None

    for seg in structure:
        if seg.segment_type == "intervals":
            repeats = seg.repeats or 1
            if seg.work_distance_meters:
                total += seg.work_distance_meters / 1609.34 * repeats
            elif seg.work_distance_miles:
                total += seg.work_distance_miles * repeats
            elif seg.work_duration_minutes:
                total += seg.work_duration_minutes / 6 * repeats
            if seg.pace:
                work_pace = seg.pace
        elif seg.segment_type in ("work", "steady"):
            if seg.distance_miles:
                total += seg.distance_miles
            elif seg.distance_meters:
                total += seg.distance_meters / 1609.34
            if seg.pace and work_pace is None:
                work_pace = seg.pace

    return {"total_work_miles": total, "work_pace": work_pace}

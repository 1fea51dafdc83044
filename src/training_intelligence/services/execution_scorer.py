"""
Execution scoring service for comparing a completed workout to its plan.

This service:
- Scores pace accuracy against a weather-adjusted target
- Scores time spent in the workout's target intensity zone
- Scores completion, crediting equivalent interval structures
  (e.g. 3x1200m run for a planned 4x1000m)
- Scores pacing consistency across work segments
- Generates diagnosis, suggestion, highlights and concerns
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import Settings, get_settings
from ..models.execution import (
    CompletedWorkout,
    ExecutionScore,
    ExecutionScoreComponents,
    ReferencePaces,
    TrainingStimulusComparison,
    WeatherSnapshot,
    WorkoutSegment,
)
from ..models.plans import PlannedWorkout, WorkoutCategory
from ..planning.templates import find_workout_template, structure_work_miles
from ..utils.formatting import round_half_up


logger = logging.getLogger(__name__)


# Neutral scores when a component cannot be measured
NEUTRAL_PACE_SCORE = 75
NEUTRAL_ZONE_SCORE = 75
NEUTRAL_COMPLETION_SCORE = 85
NEUTRAL_CONSISTENCY_SCORE = 80
FEW_WORK_SEGMENTS_SCORE = 85

DEFAULT_WORK_PACE = 360  # 6:00/mi when the plan has no target pace
MISSING_WORK_PACE_DEVIATION = 0.5

PRAISE_THRESHOLD = 90
CONCERN_THRESHOLD = 70
COMPLETION_CONCERN_THRESHOLD = 80
FULL_COMPLETION_PCT = 95

EASY_SEGMENT_TYPES = frozenset({"warmup", "cooldown", "recovery"})
WORK_SEGMENT_TYPES = frozenset({"work", "interval"})
STEADY_SEGMENT_TYPES = frozenset({"work", "interval", "steady"})

# Template pace zone -> scoring zone for quality sessions
QUALITY_ZONE_MAP = {
    "tempo": "tempo",
    "half_marathon": "tempo",
    "threshold": "threshold",
    "vo2max": "vo2max",
    "interval": "vo2max",
    "repetition": "vo2max",
    "marathon": "aerobic",
    "general_aerobic": "aerobic",
}


@dataclass(frozen=True)
class StimulusTolerance:
    """Bands within which a different interval structure counts as equivalent."""
    volume_min: float = 0.8
    volume_max: float = 1.2
    pace_tolerance: float = 0.075
    match_threshold: float = 0.85

    @classmethod
    def from_settings(cls, settings: Settings) -> "StimulusTolerance":
        return cls(
            volume_min=settings.stimulus_volume_min,
            volume_max=settings.stimulus_volume_max,
            pace_tolerance=settings.stimulus_pace_tolerance,
        )


DEFAULT_STIMULUS_TOLERANCE = StimulusTolerance()


# ============================================================================
# Pure helpers
# ============================================================================

def weather_adjustment_percent(weather: Optional[WeatherSnapshot]) -> float:
    """Percent slowdown of target pace for heat, cold, wind and humidity."""
    if weather is None:
        return 0.0

    percent = 0.0
    temp = weather.feels_like_f if weather.feels_like_f is not None else weather.temp_f
    if temp is not None:
        if temp > 75:
            percent += (temp - 75) * 0.5
        elif temp > 65:
            percent += (temp - 65) * 0.2
        elif temp < 35:
            percent += (35 - temp) * 0.3

    if weather.wind_mph and weather.wind_mph > 10:
        percent += (weather.wind_mph - 10) * 0.2

    if weather.humidity and temp and temp > 70 and weather.humidity > 60:
        percent += (weather.humidity - 60) * 0.05

    return percent


def adjust_target_pace(
    target_pace: float,
    weather: Optional[WeatherSnapshot],
    category: WorkoutCategory,
) -> float:
    """Weather-adjusted target. Easy and recovery runs get the full adjustment, others half."""
    multiplier = 1.0 if category in (WorkoutCategory.EASY, WorkoutCategory.RECOVERY) else 0.5
    percent = weather_adjustment_percent(weather)
    return round_half_up(target_pace * (1 + (percent / 100) * multiplier))


def pace_deviation_score(deviation: float) -> int:
    """Map a fractional pace deviation onto 0-100."""
    if deviation <= 0.02:
        return 100
    if deviation <= 0.05:
        return int(round_half_up(100 - (deviation - 0.02) * 333))
    if deviation <= 0.10:
        return int(round_half_up(90 - (deviation - 0.05) * 400))
    if deviation <= 0.20:
        return int(round_half_up(70 - (deviation - 0.10) * 200))
    return max(20, int(round_half_up(50 - (deviation - 0.20) * 100)))


def target_zone(planned: PlannedWorkout) -> str:
    """Scoring zone for a planned workout."""
    category = planned.category
    if category == WorkoutCategory.EASY:
        return "easy"
    if category == WorkoutCategory.RECOVERY:
        return "recovery"
    if category == WorkoutCategory.LONG:
        return "easy_aerobic"
    if category == WorkoutCategory.RACE:
        return "race"

    zone = planned.target_zone
    if zone is None:
        template = find_workout_template(planned.template_id)
        zone = template.pace_zone if template else None
    return QUALITY_ZONE_MAP.get(zone, "easy")


def is_in_zone(pace: float, zone: str, segment_type: str, paces: ReferencePaces) -> bool:
    """Whether a segment pace sits in the band for its zone."""
    easy, tempo, threshold = paces.easy, paces.tempo, paces.threshold

    # Warmup, cooldown and recovery jogs must be easy or slower
    if segment_type in EASY_SEGMENT_TYPES:
        return pace >= easy * 0.95

    if zone in ("easy", "recovery"):
        return pace >= easy * 0.9
    if zone == "easy_aerobic":
        return easy * 0.85 <= pace <= easy * 1.1
    if zone == "aerobic":
        return tempo * 1.1 <= pace <= easy * 0.95
    if zone == "tempo":
        return tempo * 0.95 <= pace <= tempo * 1.05
    if zone == "threshold":
        return threshold * 0.95 <= pace <= threshold * 1.05
    if zone == "vo2max":
        return pace <= threshold * 0.95
    return True


def completion_from_ratio(completion_pct: float) -> int:
    if completion_pct >= FULL_COMPLETION_PCT:
        return 100
    if completion_pct >= 50:
        return int(round_half_up(completion_pct))
    return int(round_half_up(completion_pct * 0.8))


def actual_work_volume(segments: Sequence[WorkoutSegment]) -> Tuple[float, float]:
    """(total work miles, average work pace) across work/interval segments."""
    total_miles = 0.0
    total_seconds = 0.0
    for seg in segments:
        if seg.segment_type not in WORK_SEGMENT_TYPES:
            continue
        total_miles += seg.distance_miles or 0
        total_seconds += seg.duration_seconds or 0

    avg_pace = total_seconds / total_miles if total_miles > 0 and total_seconds > 0 else 0.0
    return total_miles, avg_pace


def compare_training_stimulus(
    planned: PlannedWorkout,
    segments: Optional[Sequence[WorkoutSegment]],
    tolerance: StimulusTolerance = DEFAULT_STIMULUS_TOLERANCE,
) -> Optional[TrainingStimulusComparison]:
    """
    Compare planned and executed work for a structured workout.

    Equivalence needs the work-volume ratio inside the tolerance band and
    the average work pace within the pace tolerance of target, so a
    4x1000m session run as 3x1200m still counts.

    Returns:
        None when the plan has no structure, no segments were recorded,
        or the structure carries no measurable work
    """
    if not planned.structure or not segments:
        return None

    planned_miles = float(structure_work_miles(planned.structure)["total_work_miles"])
    if planned_miles == 0:
        return None

    actual_miles, actual_pace = actual_work_volume(segments)

    ratio = actual_miles / planned_miles
    band = (tolerance.volume_max - tolerance.volume_min) / 2
    if tolerance.volume_min <= ratio <= tolerance.volume_max:
        volume_match = 1 - abs(1 - ratio) / band * 0.3
    else:
        volume_match = max(0.0, 1 - abs(1 - ratio))

    target_pace = planned.target_pace or DEFAULT_WORK_PACE
    if actual_pace > 0:
        deviation = abs(actual_pace - target_pace) / target_pace
    else:
        deviation = MISSING_WORK_PACE_DEVIATION
    pace_match = max(0.0, 1 - deviation * 2)

    equivalent = (
        tolerance.volume_min <= ratio <= tolerance.volume_max
        and deviation <= tolerance.pace_tolerance
    )

    if equivalent:
        explanation = (
            f"Completed {actual_miles:.1f}mi of work vs {planned_miles:.1f}mi planned, "
            f"equivalent training stimulus achieved"
        )
    elif volume_match >= 0.7 and pace_match >= tolerance.match_threshold:
        explanation = (
            f"Work volume slightly different ({actual_miles:.1f}mi vs {planned_miles:.1f}mi) "
            f"but pace on target"
        )
    elif pace_match >= tolerance.match_threshold:
        explanation = "Pace was excellent but volume differed significantly"
    else:
        explanation = "Both volume and pace differed from plan"

    return TrainingStimulusComparison(
        planned_work_miles=planned_miles,
        actual_work_miles=actual_miles,
        volume_match=volume_match,
        planned_work_pace=target_pace,
        actual_work_pace=actual_pace,
        pace_match=pace_match,
        structure_equivalent=equivalent,
        explanation=explanation,
    )


# ============================================================================
# Service
# ============================================================================

class ExecutionScorer:
    """
    Service for scoring how well a workout was executed.

    Stateless apart from its reference paces and tolerance bands; the same
    inputs always produce the same score.
    """

    def __init__(
        self,
        reference_paces: Optional[ReferencePaces] = None,
        tolerance: Optional[StimulusTolerance] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the execution scorer.

        Args:
            reference_paces: Default easy/tempo/threshold paces for zone bands
            tolerance: Stimulus equivalence tolerances
            logger: Optional logger instance
        """
        settings = get_settings()
        self.reference_paces = reference_paces or ReferencePaces.from_settings(settings)
        self.tolerance = tolerance or StimulusTolerance.from_settings(settings)
        self._logger = logger or logging.getLogger(__name__)

    def score(
        self,
        actual: CompletedWorkout,
        planned: PlannedWorkout,
        segments: Optional[Sequence[WorkoutSegment]] = None,
        weather: Optional[WeatherSnapshot] = None,
        reference_paces: Optional[ReferencePaces] = None,
    ) -> ExecutionScore:
        """
        Score a completed workout against its plan.

        Args:
            actual: The executed workout summary
            planned: The planned workout
            segments: Optional laps or detected segments
            weather: Optional conditions during the run
            reference_paces: Athlete paces overriding the service defaults

        Returns:
            ExecutionScore with components and feedback
        """
        paces = reference_paces or self.reference_paces
        stimulus = compare_training_stimulus(planned, segments, self.tolerance)

        components = ExecutionScoreComponents(
            pace_accuracy=self.pace_accuracy(actual, planned, weather),
            zone_adherence=self.zone_adherence(actual, planned, segments, paces),
            completion_rate=self.completion_rate(actual, planned, stimulus),
            consistency=self.consistency(segments),
        )

        overall = int(round_half_up(sum(
            score * ExecutionScoreComponents.WEIGHTS[name]
            for name, score in components.as_dict().items()
        )))

        self._logger.debug(
            f"Execution score {overall} for {planned.template_id} on {planned.date.isoformat()}: "
            f"{components.as_dict()}, stimulus_equivalent="
            f"{stimulus.structure_equivalent if stimulus else None}"
        )

        highlights, concerns = self._component_feedback(components, actual, planned, stimulus)
        return ExecutionScore(
            overall=overall,
            components=components,
            diagnosis=self._diagnosis(overall, weather),
            suggestion=self._suggestion(components, actual, planned),
            highlights=highlights,
            concerns=concerns,
            stimulus=stimulus,
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def pace_accuracy(
        self,
        actual: CompletedWorkout,
        planned: PlannedWorkout,
        weather: Optional[WeatherSnapshot] = None,
    ) -> int:
        if not actual.avg_pace or not planned.target_pace:
            return NEUTRAL_PACE_SCORE
        target = adjust_target_pace(planned.target_pace, weather, planned.category)
        return pace_deviation_score(abs(actual.avg_pace - target) / target)

    def zone_adherence(
        self,
        actual: CompletedWorkout,
        planned: PlannedWorkout,
        segments: Optional[Sequence[WorkoutSegment]] = None,
        paces: Optional[ReferencePaces] = None,
    ) -> int:
        paces = paces or self.reference_paces
        zone = target_zone(planned)

        if not segments:
            return self._zone_from_average_pace(actual.avg_pace, zone, paces)

        time_in_zone = 0.0
        total_time = 0.0
        for seg in segments:
            if not seg.duration_seconds or not seg.pace:
                continue
            total_time += seg.duration_seconds
            if is_in_zone(seg.pace, zone, seg.segment_type, paces):
                time_in_zone += seg.duration_seconds

        if total_time == 0:
            return NEUTRAL_ZONE_SCORE
        return int(round_half_up(time_in_zone / total_time * 100))

    @staticmethod
    def _zone_from_average_pace(avg_pace: Optional[float], zone: str, paces: ReferencePaces) -> int:
        if not avg_pace:
            return NEUTRAL_ZONE_SCORE
        if zone in ("easy", "recovery", "easy_aerobic"):
            if avg_pace < paces.easy * 0.85:
                return 60
            if avg_pace >= paces.easy * 0.9:
                return 95
            return 80
        if zone in ("tempo", "threshold"):
            if avg_pace > paces.tempo * 1.1:
                return 60
            if avg_pace < paces.tempo * 0.85:
                return 70
            return 90
        return 80

    def completion_rate(
        self,
        actual: CompletedWorkout,
        planned: PlannedWorkout,
        stimulus: Optional[TrainingStimulusComparison] = None,
    ) -> int:
        basic = self._basic_completion(actual, planned)
        if stimulus is None or stimulus.planned_work_miles <= 0:
            return basic

        stimulus_score = stimulus.volume_match * 0.6 + stimulus.pace_match * 0.4
        if stimulus.structure_equivalent:
            return int(round_half_up(95 + stimulus_score * 5))
        return int(round_half_up(basic * 0.4 + stimulus_score * 100 * 0.6))

    @staticmethod
    def _basic_completion(actual: CompletedWorkout, planned: PlannedWorkout) -> int:
        if planned.target_distance_miles and actual.distance_miles:
            return completion_from_ratio(actual.distance_miles / planned.target_distance_miles * 100)
        if planned.target_duration_minutes and actual.duration_minutes:
            return completion_from_ratio(actual.duration_minutes / planned.target_duration_minutes * 100)
        return NEUTRAL_COMPLETION_SCORE

    def consistency(self, segments: Optional[Sequence[WorkoutSegment]] = None) -> int:
        if not segments or len(segments) < 3:
            return NEUTRAL_CONSISTENCY_SCORE

        steady = [s for s in segments if s.segment_type in STEADY_SEGMENT_TYPES]
        if len(steady) < 2:
            return FEW_WORK_SEGMENTS_SCORE

        paces = [s.pace for s in steady if s.pace and s.pace > 0]
        if len(paces) < 2:
            return NEUTRAL_CONSISTENCY_SCORE

        mean = sum(paces) / len(paces)
        variance = sum((p - mean) ** 2 for p in paces) / len(paces)
        cv = math.sqrt(variance) / mean

        if cv < 0.03:
            return int(round_half_up(95 + (0.03 - cv) * 166))
        if cv < 0.05:
            return int(round_half_up(85 + (0.05 - cv) * 500))
        if cv < 0.08:
            return int(round_half_up(70 + (0.08 - cv) * 500))
        return max(30, int(round_half_up(70 - (cv - 0.08) * 500)))

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    @staticmethod
    def _component_feedback(
        components: ExecutionScoreComponents,
        actual: CompletedWorkout,
        planned: PlannedWorkout,
        stimulus: Optional[TrainingStimulusComparison],
    ) -> Tuple[List[str], List[str]]:
        highlights: List[str] = []
        concerns: List[str] = []

        if components.pace_accuracy >= PRAISE_THRESHOLD:
            highlights.append("Excellent pace control")
        elif components.pace_accuracy < CONCERN_THRESHOLD and actual.avg_pace and planned.target_pace:
            if actual.avg_pace < planned.target_pace:
                concerns.append("Ran faster than target pace")
            else:
                concerns.append("Ran slower than target pace")

        if components.zone_adherence >= PRAISE_THRESHOLD:
            highlights.append("Stayed in target training zone")
        elif components.zone_adherence < CONCERN_THRESHOLD:
            concerns.append("Spent significant time outside target zone")

        if stimulus is not None and stimulus.structure_equivalent:
            highlights.append("Training stimulus achieved despite different structure")
        elif components.completion_rate >= FULL_COMPLETION_PCT:
            highlights.append("Completed full workout")
        elif stimulus is not None and stimulus.volume_match >= 0.8:
            highlights.append("Similar work volume completed")
        elif components.completion_rate < COMPLETION_CONCERN_THRESHOLD:
            concerns.append("Cut workout short")

        if components.consistency >= PRAISE_THRESHOLD:
            highlights.append("Very consistent pacing")
        elif components.consistency < CONCERN_THRESHOLD:
            concerns.append("Pace varied significantly")

        return highlights, concerns

    @staticmethod
    def _diagnosis(overall: int, weather: Optional[WeatherSnapshot]) -> str:
        if overall >= 90:
            diagnosis = "Excellent execution. You nailed this workout."
        elif overall >= 80:
            diagnosis = "Solid execution with minor areas to refine."
        elif overall >= 70:
            diagnosis = "Decent effort but room for improvement."
        elif overall >= 60:
            diagnosis = "Workout deviated from plan - consider what affected execution."
        else:
            diagnosis = "Challenging day. Sometimes the body needs different than planned."

        if weather is not None:
            if weather.temp_f is not None and weather.temp_f > 80:
                diagnosis += " Hot conditions likely affected performance."
            elif weather.wind_mph is not None and weather.wind_mph > 15:
                diagnosis += " Strong wind made this tougher than usual."
        return diagnosis

    @staticmethod
    def _suggestion(
        components: ExecutionScoreComponents,
        actual: CompletedWorkout,
        planned: PlannedWorkout,
    ) -> str:
        lowest = components.lowest()
        if lowest == "pace_accuracy":
            if actual.avg_pace and planned.target_pace:
                if actual.avg_pace < planned.target_pace:
                    return "Try starting more conservatively next time to better hit target pace."
                return "Review target pace - it may need adjustment based on current fitness."
            return "Focus on hitting target pace more precisely."
        if lowest == "zone_adherence":
            return "Use a watch or app to monitor effort and stay in the right zone throughout."
        if lowest == "completion_rate":
            return "If you need to cut short, prioritize completing the key portions of the workout."
        return "Try to start slightly slower and maintain even effort throughout."


def compute_execution_score(
    actual: CompletedWorkout,
    planned: PlannedWorkout,
    segments: Optional[Sequence[WorkoutSegment]] = None,
    weather: Optional[WeatherSnapshot] = None,
    reference_paces: Optional[ReferencePaces] = None,
) -> ExecutionScore:
    """Score a workout with the shared scorer instance."""
    return get_execution_scorer().score(actual, planned, segments, weather, reference_paces)


# ============================================================================
# Factory function for dependency injection
# ============================================================================

_execution_scorer: Optional[ExecutionScorer] = None


def get_execution_scorer() -> ExecutionScorer:
    """Get or create the execution scorer singleton."""
    global _execution_scorer
    if _execution_scorer is None:
        _execution_scorer = ExecutionScorer()
    return _execution_scorer


def reset_execution_scorer() -> None:
    """Reset the execution scorer singleton (for testing)."""
    global _execution_scorer
    _execution_scorer = None

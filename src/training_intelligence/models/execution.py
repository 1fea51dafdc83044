"""Data models for scoring completed workouts against the plan."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..metrics.vdot import PaceZones


@dataclass
class CompletedWorkout:
    """Summary of an executed workout from the activity log."""
    distance_miles: Optional[float] = None
    duration_minutes: Optional[float] = None
    avg_pace: Optional[float] = None  # seconds per mile
    avg_hr: Optional[int] = None
    workout_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompletedWorkout":
        """Create from a dictionary (e.g. a JSON activity record)."""
        return cls(
            distance_miles=data.get("distance_miles"),
            duration_minutes=data.get("duration_minutes"),
            avg_pace=data.get("avg_pace"),
            avg_hr=data.get("avg_hr"),
            workout_type=data.get("workout_type"),
        )


@dataclass
class WorkoutSegment:
    """A lap or detected segment of an executed workout."""
    segment_type: str  # warmup, work, interval, recovery, steady, cooldown
    distance_miles: Optional[float] = None
    duration_seconds: Optional[float] = None
    pace: Optional[float] = None  # seconds per mile
    avg_hr: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutSegment":
        return cls(
            segment_type=data.get("segment_type", "steady"),
            distance_miles=data.get("distance_miles"),
            duration_seconds=data.get("duration_seconds"),
            pace=data.get("pace"),
            avg_hr=data.get("avg_hr"),
        )


@dataclass
class WeatherSnapshot:
    """Conditions during the workout (Fahrenheit, mph, percent)."""
    temp_f: Optional[float] = None
    feels_like_f: Optional[float] = None
    humidity: Optional[float] = None
    wind_mph: Optional[float] = None
    conditions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherSnapshot":
        return cls(
            temp_f=data.get("temp_f"),
            feels_like_f=data.get("feels_like_f"),
            humidity=data.get("humidity"),
            wind_mph=data.get("wind_mph"),
            conditions=data.get("conditions"),
        )


@dataclass
class ReferencePaces:
    """Athlete reference paces (sec/mile) that define the zone bands."""
    easy: float = 540
    tempo: float = 450
    threshold: float = 420

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReferencePaces":
        return cls(
            easy=settings.default_easy_pace,
            tempo=settings.default_tempo_pace,
            threshold=settings.default_threshold_pace,
        )

    @classmethod
    def from_zones(cls, zones: PaceZones) -> "ReferencePaces":
        return cls(easy=zones.easy, tempo=zones.tempo, threshold=zones.threshold)


@dataclass
class ExecutionScoreComponents:
    """The four weighted sub-scores, each 0-100."""
    pace_accuracy: int
    zone_adherence: int
    completion_rate: int
    consistency: int

    WEIGHTS = {
        "pace_accuracy": 0.30,
        "zone_adherence": 0.25,
        "completion_rate": 0.25,
        "consistency": 0.20,
    }

    def as_dict(self) -> Dict[str, int]:
        return {
            "pace_accuracy": self.pace_accuracy,
            "zone_adherence": self.zone_adherence,
            "completion_rate": self.completion_rate,
            "consistency": self.consistency,
        }

    def lowest(self) -> str:
        """Name of the weakest component (first in weight order on ties)."""
        scores = self.as_dict()
        return min(scores, key=lambda name: scores[name])


@dataclass
class TrainingStimulusComparison:
    """Planned vs executed work volume and pace for structured workouts."""
    planned_work_miles: float
    actual_work_miles: float
    volume_match: float
    planned_work_pace: float
    actual_work_pace: float
    pace_match: float
    structure_equivalent: bool
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "planned_work_miles": round(self.planned_work_miles, 2),
            "actual_work_miles": round(self.actual_work_miles, 2),
            "volume_match": round(self.volume_match, 3),
            "planned_work_pace": self.planned_work_pace,
            "actual_work_pace": round(self.actual_work_pace, 1),
            "pace_match": round(self.pace_match, 3),
            "structure_equivalent": self.structure_equivalent,
            "explanation": self.explanation,
        }


@dataclass
class ExecutionScore:
    """Overall execution score with generated feedback."""
    overall: int
    components: ExecutionScoreComponents
    diagnosis: str
    suggestion: str
    highlights: List[str] = field(default_factory=list)
    concerns: List[str] = field(default_factory=list)
    stimulus: Optional[TrainingStimulusComparison] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "overall": self.overall,
            "components": self.components.as_dict(),
            "diagnosis": self.diagnosis,
            "suggestion": self.suggestion,
            "highlights": list(self.highlights),
            "concerns": list(self.concerns),
            "stimulus": self.stimulus.to_dict() if self.stimulus else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionScore":
        """Rebuild a stored score. Stimulus detail is not restored."""
        components = data.get("components", {})
        return cls(
            overall=int(data.get("overall", 0)),
            components=ExecutionScoreComponents(
                pace_accuracy=int(components.get("pace_accuracy", 0)),
                zone_adherence=int(components.get("zone_adherence", 0)),
                completion_rate=int(components.get("completion_rate", 0)),
                consistency=int(components.get("consistency", 0)),
            ),
            diagnosis=data.get("diagnosis", ""),
            suggestion=data.get("suggestion", ""),
            highlights=list(data.get("highlights", [])),
            concerns=list(data.get("concerns", [])),
        )

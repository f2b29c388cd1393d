from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Tier(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    # Declared for callers that already store it; the scoring ladder never returns it.
    CRITICAL = "CRITICAL"


class AssessmentKind(str, Enum):
    SUMMATIVE = "Summative"
    INTERNAL_ASSESSMENT = "IA"
    FORMATIVE = "Formative"


class ExtendedEssayStatus(str, Enum):
    NOT_STARTED = "Not Started"
    OUTLINE = "Outline"
    FIRST_DRAFT = "First Draft"
    FINAL = "Final"
    SUBMITTED = "Submitted"


class TheoryOfKnowledgeStatus(str, Enum):
    DEVELOPING = "Developing"
    DRAFT = "Draft"
    FINAL = "Final"


class ExperienceProgramStatus(str, Enum):
    BEHIND = "Behind"
    ON_TRACK = "On Track"
    COMPLETED = "Completed"


@dataclass(frozen=True)
class GradeRecord:
    subject: str
    value: int  # 1-7, 7 is best
    kind: AssessmentKind


@dataclass(frozen=True)
class CoreProgress:
    extended_essay: ExtendedEssayStatus
    theory_of_knowledge: TheoryOfKnowledgeStatus
    experience_program: ExperienceProgramStatus


@dataclass(frozen=True)
class StudentProfile:
    attendance_rate: float
    core: CoreProgress
    grades: tuple[GradeRecord, ...] = ()


@dataclass(frozen=True)
class WeightConfiguration:
    """Percentage weights per factor plus the two tier thresholds.

    Weights are not required to sum to 100 and thresholds are not checked for
    ordering here; see `agent.validation` for an optional boundary check.
    """

    attendance: float
    academics: float
    internal_assessments: float
    extended_essay: float
    theory_of_knowledge: float
    experience_program: float
    medium_threshold: int
    high_threshold: int

    def as_dict(self) -> dict[str, float | int]:
        return {
            "attendance": self.attendance,
            "academics": self.academics,
            "internal_assessments": self.internal_assessments,
            "extended_essay": self.extended_essay,
            "theory_of_knowledge": self.theory_of_knowledge,
            "experience_program": self.experience_program,
            "medium_threshold": self.medium_threshold,
            "high_threshold": self.high_threshold,
        }


@dataclass(frozen=True)
class FactorContribution:
    factor: str
    risk: float
    weight: float
    contribution: float


@dataclass(frozen=True)
class ScoringResult:
    score: int
    tier: Tier
    factors: tuple[FactorContribution, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class RosterStudent:
    student_id: str
    name: str
    year_group: int | None
    profile: StudentProfile


@dataclass(frozen=True)
class ScoredStudent:
    student: RosterStudent
    result: ScoringResult

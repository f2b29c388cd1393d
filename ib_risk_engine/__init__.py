from ib_risk_engine.agent.models import (
    AssessmentKind,
    CoreProgress,
    ExperienceProgramStatus,
    ExtendedEssayStatus,
    GradeRecord,
    ScoringResult,
    StudentProfile,
    TheoryOfKnowledgeStatus,
    Tier,
    WeightConfiguration,
)
from ib_risk_engine.agent.risk_calculator import classify, score

__all__ = [
    "AssessmentKind",
    "CoreProgress",
    "ExperienceProgramStatus",
    "ExtendedEssayStatus",
    "GradeRecord",
    "ScoringResult",
    "StudentProfile",
    "TheoryOfKnowledgeStatus",
    "Tier",
    "WeightConfiguration",
    "classify",
    "score",
]

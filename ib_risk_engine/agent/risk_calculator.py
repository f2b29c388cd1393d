from __future__ import annotations

import logging
import math
from typing import Iterable

from ib_risk_engine.agent.models import (
    AssessmentKind,
    ExperienceProgramStatus,
    ExtendedEssayStatus,
    FactorContribution,
    GradeRecord,
    ScoringResult,
    StudentProfile,
    TheoryOfKnowledgeStatus,
    Tier,
    WeightConfiguration,
)


logger = logging.getLogger(__name__)

# Attendance at or above this rate carries no risk.
ATTENDANCE_TARGET = 95.0
# Percentage points below target at which attendance risk saturates.
ATTENDANCE_SPAN = 15.0

NEUTRAL_GRADE_RISK = 50.0

EXTENDED_ESSAY_RISK: dict[ExtendedEssayStatus, float] = {
    ExtendedEssayStatus.NOT_STARTED: 100.0,
    ExtendedEssayStatus.OUTLINE: 75.0,
    ExtendedEssayStatus.FIRST_DRAFT: 40.0,
    ExtendedEssayStatus.FINAL: 10.0,
    ExtendedEssayStatus.SUBMITTED: 0.0,
}

THEORY_OF_KNOWLEDGE_RISK: dict[TheoryOfKnowledgeStatus, float] = {
    TheoryOfKnowledgeStatus.DEVELOPING: 80.0,
    TheoryOfKnowledgeStatus.DRAFT: 40.0,
    TheoryOfKnowledgeStatus.FINAL: 0.0,
}

EXPERIENCE_PROGRAM_RISK: dict[ExperienceProgramStatus, float] = {
    ExperienceProgramStatus.BEHIND: 100.0,
    ExperienceProgramStatus.ON_TRACK: 20.0,
    ExperienceProgramStatus.COMPLETED: 0.0,
}


def clamp_score(score: int) -> int:
    return max(0, min(100, score))


def round_half_up(value: float) -> int:
    # Trim float noise first so 5.4999999999999996 rounds like 5.5.
    return int(math.floor(round(value, 9) + 0.5))


def attendance_risk(attendance_rate: float) -> float:
    risk = max(0.0, (ATTENDANCE_TARGET - attendance_rate) / ATTENDANCE_SPAN) * 100
    return min(100.0, risk)


def grade_risk(grades: Iterable[GradeRecord], kind: AssessmentKind) -> float:
    """Risk from the mean of the grades of one assessment kind on the 1-7 scale.

    No grades of that kind means no evidence either way, so the neutral
    midpoint is returned.
    """

    values = [g.value for g in grades if g.kind == kind]
    if not values:
        return NEUTRAL_GRADE_RISK
    mean = sum(values) / len(values)
    return ((7 - mean) / 6) * 100


def extended_essay_risk(status: ExtendedEssayStatus) -> float:
    return EXTENDED_ESSAY_RISK[status]


def theory_of_knowledge_risk(status: TheoryOfKnowledgeStatus) -> float:
    return THEORY_OF_KNOWLEDGE_RISK[status]


def experience_program_risk(status: ExperienceProgramStatus) -> float:
    return EXPERIENCE_PROGRAM_RISK[status]


def factor_breakdown(student: StudentProfile, weights: WeightConfiguration) -> tuple[FactorContribution, ...]:
    rows = (
        ("attendance", attendance_risk(student.attendance_rate), weights.attendance),
        ("academics", grade_risk(student.grades, AssessmentKind.SUMMATIVE), weights.academics),
        (
            "internal_assessments",
            grade_risk(student.grades, AssessmentKind.INTERNAL_ASSESSMENT),
            weights.internal_assessments,
        ),
        ("extended_essay", extended_essay_risk(student.core.extended_essay), weights.extended_essay),
        (
            "theory_of_knowledge",
            theory_of_knowledge_risk(student.core.theory_of_knowledge),
            weights.theory_of_knowledge,
        ),
        (
            "experience_program",
            experience_program_risk(student.core.experience_program),
            weights.experience_program,
        ),
    )
    return tuple(
        FactorContribution(factor=name, risk=risk, weight=weight, contribution=risk * weight / 100)
        for name, risk, weight in rows
    )


def classify(score: int, weights: WeightConfiguration) -> Tier:
    """Map a score onto a tier; a score equal to a threshold lands in that tier.

    High is checked first, so inverted thresholds (medium > high) still resolve
    deterministically, with Medium partly or fully unreachable.
    """

    if score >= weights.high_threshold:
        return Tier.HIGH
    if score >= weights.medium_threshold:
        return Tier.MEDIUM
    return Tier.LOW


def score(student: StudentProfile, weights: WeightConfiguration) -> ScoringResult:
    """Compute the weighted risk score (no ML).

    Each factor is turned into a 0-100 risk, multiplied by its percentage
    weight and summed:
      - attendance: 0 at >= 95%, rising linearly, saturating at 80%
      - academics / internal assessments: mean grade on the 1-7 scale,
        50 when there are no grades of that kind
      - extended essay, theory of knowledge, experience program: fixed
        lookup per status

    Returns:
      - score in [0, 100], rounded half-up
      - tier in {LOW, MEDIUM, HIGH}
      - factors: per-factor risk, weight and contribution
    """

    factors = factor_breakdown(student, weights)
    weighted_sum = sum(f.contribution for f in factors)
    # Clamp before rounding; extreme negative weights can drive the sum to -inf.
    value = clamp_score(round_half_up(max(0.0, min(100.0, weighted_sum))))
    tier = classify(value, weights)
    logger.debug("weighted_sum=%.4f score=%s tier=%s", weighted_sum, value, tier.value)
    return ScoringResult(score=value, tier=tier, factors=factors)

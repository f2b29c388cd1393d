from __future__ import annotations

import pytest

from ib_risk_engine.agent.models import (
    AssessmentKind,
    CoreProgress,
    ExperienceProgramStatus,
    ExtendedEssayStatus,
    GradeRecord,
    RosterStudent,
    StudentProfile,
    TheoryOfKnowledgeStatus,
    WeightConfiguration,
)


def make_weights(**overrides) -> WeightConfiguration:
    values = {
        "attendance": 20,
        "academics": 30,
        "internal_assessments": 0,
        "extended_essay": 10,
        "theory_of_knowledge": 10,
        "experience_program": 10,
        "medium_threshold": 40,
        "high_threshold": 70,
    }
    values.update(overrides)
    return WeightConfiguration(**values)


def make_profile(
    attendance: float = 95.0,
    summative: tuple[int, ...] = (),
    ias: tuple[int, ...] = (),
    ee: ExtendedEssayStatus = ExtendedEssayStatus.SUBMITTED,
    tok: TheoryOfKnowledgeStatus = TheoryOfKnowledgeStatus.FINAL,
    cas: ExperienceProgramStatus = ExperienceProgramStatus.COMPLETED,
) -> StudentProfile:
    grades = tuple(GradeRecord(f"Subject {i}", v, AssessmentKind.SUMMATIVE) for i, v in enumerate(summative)) + tuple(
        GradeRecord(f"IA {i}", v, AssessmentKind.INTERNAL_ASSESSMENT) for i, v in enumerate(ias)
    )
    return StudentProfile(
        attendance_rate=attendance,
        grades=grades,
        core=CoreProgress(extended_essay=ee, theory_of_knowledge=tok, experience_program=cas),
    )


@pytest.fixture
def weights() -> WeightConfiguration:
    return make_weights()


@pytest.fixture
def struggling_profile() -> StudentProfile:
    return make_profile(
        attendance=72.5,
        summative=(2, 3),
        ee=ExtendedEssayStatus.OUTLINE,
        tok=TheoryOfKnowledgeStatus.DEVELOPING,
        cas=ExperienceProgramStatus.BEHIND,
    )


@pytest.fixture
def thriving_profile() -> StudentProfile:
    return make_profile(
        attendance=98.2,
        summative=(6, 7),
        ee=ExtendedEssayStatus.FINAL,
        tok=TheoryOfKnowledgeStatus.FINAL,
        cas=ExperienceProgramStatus.ON_TRACK,
    )


@pytest.fixture
def roster(struggling_profile, thriving_profile) -> list[RosterStudent]:
    critical = make_profile(
        attendance=50.0,
        summative=(1,),
        ee=ExtendedEssayStatus.NOT_STARTED,
        tok=TheoryOfKnowledgeStatus.DEVELOPING,
        cas=ExperienceProgramStatus.BEHIND,
    )
    return [
        RosterStudent("MB1001", "Alex Thompson", 13, struggling_profile),
        RosterStudent("MB1002", "Sarah Jenkins", 13, thriving_profile),
        RosterStudent("MB1003", "Priya Nair", 12, critical),
    ]

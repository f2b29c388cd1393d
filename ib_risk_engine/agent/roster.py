from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, TypeVar

import pandas as pd

from ib_risk_engine.agent.models import (
    AssessmentKind,
    CoreProgress,
    ExperienceProgramStatus,
    ExtendedEssayStatus,
    GradeRecord,
    RosterStudent,
    StudentProfile,
    TheoryOfKnowledgeStatus,
)


E = TypeVar("E", bound=Enum)


class RosterError(ValueError):
    pass


def _norm(label: str) -> str:
    return "".join(ch for ch in label.lower() if ch.isalnum())


def _is_missing(value: object) -> bool:
    # Empty CSV cells arrive as NaN.
    return value is None or (isinstance(value, float) and pd.isna(value))


def parse_label(enum_cls: type[E], raw: object, student_id: str, field: str) -> E:
    """Resolve an export label ("On Track", "ON_TRACK", "on-track") to an enum member."""

    if isinstance(raw, enum_cls):
        return raw
    if _is_missing(raw):
        raise RosterError(f"Student {student_id}: missing '{field}'")

    key = _norm(str(raw))
    for member in enum_cls:
        if key in (_norm(member.value), _norm(member.name)):
            return member
    raise RosterError(f"Student {student_id}: unknown {field} '{raw}'")


def _parse_grade(raw: dict[str, Any], student_id: str) -> GradeRecord:
    if not isinstance(raw, dict):
        raise RosterError(f"Student {student_id}: grade entry must be an object")
    try:
        number = float(raw["grade"])
    except KeyError:
        raise RosterError(f"Student {student_id}: grade entry missing 'grade'")
    except (TypeError, ValueError):
        raise RosterError(f"Student {student_id}: non-numeric grade {raw.get('grade')!r}")
    if not number.is_integer():
        raise RosterError(f"Student {student_id}: grade must be a whole number, got {raw['grade']!r}")
    value = int(number)
    return GradeRecord(
        subject=str(raw.get("subject", "")),
        value=value,
        kind=parse_label(AssessmentKind, raw.get("type"), student_id, "assessment type"),
    )


def parse_student(record: dict[str, Any]) -> RosterStudent:
    """Build a RosterStudent from one bridge/JSON roster record."""

    raw_id = record.get("id")
    student_id = "" if _is_missing(raw_id) else str(raw_id).strip()
    if not student_id:
        raise RosterError("Roster record without 'id'")

    raw_attendance = record.get("attendanceRate")
    if _is_missing(raw_attendance):
        raise RosterError(f"Student {student_id}: missing 'attendanceRate'")
    try:
        attendance = float(raw_attendance)
    except (TypeError, ValueError):
        raise RosterError(f"Student {student_id}: non-numeric attendanceRate {raw_attendance!r}")
    if pd.isna(attendance):
        raise RosterError(f"Student {student_id}: missing 'attendanceRate'")

    core = record.get("core") or {}
    if not isinstance(core, dict):
        raise RosterError(f"Student {student_id}: 'core' must be an object")

    grades = record.get("grades") or []
    if not isinstance(grades, list):
        raise RosterError(f"Student {student_id}: 'grades' must be a list")

    year = record.get("yearGroup")
    try:
        year_group = None if _is_missing(year) else int(year)
    except (TypeError, ValueError):
        raise RosterError(f"Student {student_id}: non-numeric yearGroup {year!r}")

    profile = StudentProfile(
        attendance_rate=attendance,
        grades=tuple(_parse_grade(g, student_id) for g in grades),
        core=CoreProgress(
            extended_essay=parse_label(ExtendedEssayStatus, core.get("ee"), student_id, "ee"),
            theory_of_knowledge=parse_label(TheoryOfKnowledgeStatus, core.get("tok"), student_id, "tok"),
            experience_program=parse_label(ExperienceProgramStatus, core.get("cas"), student_id, "cas"),
        ),
    )
    return RosterStudent(
        student_id=student_id,
        name=str(record.get("name") or ""),
        year_group=year_group,
        profile=profile,
    )


def parse_roster(records: Iterable[dict[str, Any]]) -> list[RosterStudent]:
    return [parse_student(r) for r in records]


def _csv_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for _, row in df.iterrows():
        raw_grades = row.get("grades")
        if raw_grades is None or (not isinstance(raw_grades, str) and pd.isna(raw_grades)) or not str(raw_grades).strip():
            grades: list[Any] = []
        else:
            try:
                grades = json.loads(raw_grades)
            except json.JSONDecodeError as e:
                raise RosterError(f"Student {row.get('id')}: grades column is not valid JSON: {e}")
        records.append(
            {
                "id": row.get("id"),
                "name": "" if pd.isna(row.get("name")) else row.get("name"),
                "yearGroup": row.get("yearGroup"),
                "attendanceRate": row.get("attendanceRate"),
                "grades": grades,
                "core": {"ee": row.get("ee"), "tok": row.get("tok"), "cas": row.get("cas")},
            }
        )
    return records


def load_roster(path: Path) -> list[RosterStudent]:
    """Read a roster file: a JSON array (or {"students": [...]}) or a flat CSV."""

    path = Path(path)
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype={"id": str})
        return parse_roster(_csv_records(df))

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("students", [])
    if not isinstance(data, list):
        raise RosterError(f"{path}: expected a list of students")
    return parse_roster(data)

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from ib_risk_engine.agent.models import RosterStudent, ScoredStudent, Tier, WeightConfiguration
from ib_risk_engine.agent.risk_calculator import round_half_up, score


REPORTED_TIERS = (Tier.LOW, Tier.MEDIUM, Tier.HIGH)


@dataclass
class RunResult:
    processed: int
    outputs_path: Path
    summary: dict[str, Any]


def score_roster(students: Iterable[RosterStudent], weights: WeightConfiguration) -> list[ScoredStudent]:
    """Score every student from scratch against one weighting profile.

    Call again whenever the weights or the roster change; nothing is carried
    over between runs. Output order follows input order.
    """

    return [ScoredStudent(student=s, result=score(s.profile, weights)) for s in students]


def _tier_counts(df: pd.DataFrame) -> dict[str, int]:
    counts = df["tier"].value_counts() if not df.empty else pd.Series(dtype=int)
    return {t.value: int(counts.get(t.value, 0)) for t in REPORTED_TIERS}


def cohort_summary(scored: list[ScoredStudent]) -> dict[str, Any]:
    df = pd.DataFrame(
        [
            {
                "id": s.student.student_id,
                "name": s.student.name,
                "year_group": s.student.year_group,
                "score": s.result.score,
                "tier": s.result.tier.value,
            }
            for s in scored
        ],
        columns=["id", "name", "year_group", "score", "tier"],
    )

    by_year: dict[str, dict[str, Any]] = {}
    for year, group in df.dropna(subset=["year_group"]).groupby("year_group"):
        by_year[str(int(year))] = {
            "count": int(len(group)),
            "avg_score": round_half_up(group["score"].mean()),
            "tiers": _tier_counts(group),
        }

    high = df[df["tier"] == Tier.HIGH.value].sort_values(["score", "id"], ascending=[False, True])

    return {
        "total": int(len(df)),
        "tiers": _tier_counts(df),
        "by_year_group": by_year,
        "high_risk": [
            {"id": r["id"], "name": r["name"], "score": int(r["score"])} for _, r in high.iterrows()
        ],
    }


def _student_out(s: ScoredStudent) -> dict[str, Any]:
    return {
        "id": s.student.student_id,
        "name": s.student.name,
        "yearGroup": s.student.year_group,
        "score": s.result.score,
        "tier": s.result.tier.value,
        "factors": [asdict(f) for f in s.result.factors],
    }


def run_scoring(
    *,
    students: list[RosterStudent],
    weights: WeightConfiguration,
    outputs_path: Path,
    as_of: datetime | None = None,
) -> RunResult:
    as_of = as_of or datetime.now(timezone.utc)

    if not students:
        raise ValueError("No students to score. Check the roster file or bridge export.")

    scored = score_roster(students, weights)
    summary = cohort_summary(scored)

    out = {
        "as_of": as_of.replace(microsecond=0).isoformat(),
        "weights": weights.as_dict(),
        "summary": summary,
        "students": [_student_out(s) for s in scored],
    }

    outputs_path.parent.mkdir(parents=True, exist_ok=True)
    outputs_path.write_text(json.dumps(out, ensure_ascii=False, indent=2), encoding="utf-8")

    logging.info(
        "Scored %s students (HIGH=%s MEDIUM=%s LOW=%s); wrote %s",
        len(scored),
        summary["tiers"]["HIGH"],
        summary["tiers"]["MEDIUM"],
        summary["tiers"]["LOW"],
        outputs_path,
    )
    return RunResult(processed=len(scored), outputs_path=outputs_path, summary=summary)

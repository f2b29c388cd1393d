from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ib_risk_engine.agent.models import WeightConfiguration


PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, default))


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    weight_attendance: float = _env_float("RISK_WEIGHT_ATTENDANCE", 20)
    weight_academics: float = _env_float("RISK_WEIGHT_ACADEMICS", 30)
    weight_internal_assessments: float = _env_float("RISK_WEIGHT_IAS", 20)
    weight_extended_essay: float = _env_float("RISK_WEIGHT_EE", 10)
    weight_theory_of_knowledge: float = _env_float("RISK_WEIGHT_TOK", 10)
    weight_experience_program: float = _env_float("RISK_WEIGHT_CAS", 10)
    threshold_medium: int = _env_int("RISK_THRESHOLD_MEDIUM", 40)
    threshold_high: int = _env_int("RISK_THRESHOLD_HIGH", 70)
    strict_weights: bool = _env_bool("RISK_STRICT_WEIGHTS")

    bridge_url: str | None = os.getenv("BRIDGE_URL") or None
    bridge_api_key: str | None = os.getenv("BRIDGE_API_KEY") or None
    bridge_domain: str = os.getenv("BRIDGE_DOMAIN", "yourschool.managebac.com")
    bridge_folder_id: str | None = os.getenv("BRIDGE_FOLDER_ID") or None
    bridge_sync_on_start: bool = _env_bool("BRIDGE_SYNC_ON_START")

    roster_path: Path = PROJECT_ROOT / "data" / "students.json"

    outputs_dir: Path = PROJECT_ROOT / "outputs"
    logs_dir: Path = PROJECT_ROOT / "logs"

    def default_weights(self) -> WeightConfiguration:
        return WeightConfiguration(
            attendance=self.weight_attendance,
            academics=self.weight_academics,
            internal_assessments=self.weight_internal_assessments,
            extended_essay=self.weight_extended_essay,
            theory_of_knowledge=self.weight_theory_of_knowledge,
            experience_program=self.weight_experience_program,
            medium_threshold=self.threshold_medium,
            high_threshold=self.threshold_high,
        )


settings = Settings()

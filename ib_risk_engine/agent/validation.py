from __future__ import annotations

import logging

from ib_risk_engine.agent.models import WeightConfiguration


logger = logging.getLogger(__name__)

WEIGHT_FIELDS = (
    "attendance",
    "academics",
    "internal_assessments",
    "extended_essay",
    "theory_of_knowledge",
    "experience_program",
)


class WeightConfigError(ValueError):
    pass


def validate_weights(weights: WeightConfiguration, strict: bool = False) -> list[str]:
    """Check a weighting profile before it is handed to the engine.

    The engine accepts any configuration; this only reports the ones that
    probably were not intended. With `strict=True` any issue raises a single
    `WeightConfigError` carrying all of them.
    """

    issues: list[str] = []

    for name in WEIGHT_FIELDS:
        value = getattr(weights, name)
        if value < 0:
            issues.append(f"Weight '{name}' is negative ({value}).")

    total = sum(getattr(weights, name) for name in WEIGHT_FIELDS)
    if abs(total - 100) > 1e-9:
        issues.append(f"Weights sum to {total:g}, not 100.")

    for name in ("medium_threshold", "high_threshold"):
        value = getattr(weights, name)
        if not 0 <= value <= 100:
            issues.append(f"Threshold '{name}' is outside 0-100 ({value}).")

    if weights.medium_threshold > weights.high_threshold:
        issues.append(
            f"medium_threshold ({weights.medium_threshold}) is above high_threshold "
            f"({weights.high_threshold}); MEDIUM will be partly unreachable."
        )

    if issues and strict:
        raise WeightConfigError("; ".join(issues))

    for issue in issues:
        logger.warning("Weight configuration: %s", issue)
    return issues

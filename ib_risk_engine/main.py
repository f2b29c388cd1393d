from __future__ import annotations

import logging
from pathlib import Path

from ib_risk_engine.agent.agent_loop import run_scoring
from ib_risk_engine.agent.roster import load_roster, parse_roster
from ib_risk_engine.agent.validation import validate_weights
from ib_risk_engine.bridge.bridge_client import BridgeClient
from ib_risk_engine.config.settings import settings


def setup_logging(logs_dir: Path) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / "engine.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.FileHandler(log_path, encoding="utf-8"), logging.StreamHandler()],
    )


def main() -> int:
    setup_logging(settings.logs_dir)

    weights = settings.default_weights()
    validate_weights(weights, strict=settings.strict_weights)

    bridge = BridgeClient(
        url=settings.bridge_url,
        folder_id=settings.bridge_folder_id,
        api_key=settings.bridge_api_key,
        domain=settings.bridge_domain,
    )
    if bridge.is_configured() and settings.bridge_sync_on_start:
        students = parse_roster(bridge.sync())
    elif bridge.is_configured():
        students = parse_roster(bridge.fetch_latest())
    else:
        logging.info("Bridge not configured; reading %s", settings.roster_path)
        students = load_roster(settings.roster_path)

    result = run_scoring(
        students=students,
        weights=weights,
        outputs_path=settings.outputs_dir / "risk_scores.json",
    )

    logging.info("Done. Processed=%s", result.processed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

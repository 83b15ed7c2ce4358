"""
Pre-trade checklist and behavioral guardrails.

The quality score is the share of checklist items satisfied before entry.
Guardrails log warnings but never block a trade from being recorded.
"""

import logging
from typing import Dict, Iterable, List, Optional

from alphaone.core.config import Config
from alphaone.core.models import Trade

logger = logging.getLogger(__name__)


DEFAULT_CHECKLIST: List[Dict[str, str]] = [
    {"id": "trend", "text": "Is the higher timeframe trend aligned?"},
    {"id": "sr", "text": "Price at key Support or Resistance level?"},
    {"id": "signal", "text": "Valid candlestick entry signal present?"},
    {"id": "sl", "text": "Stop Loss protected by market structure?"},
    {"id": "rr", "text": "Risk-to-Reward ratio at least 1:2?"},
    {"id": "news", "text": "No high-impact news in next 30 mins?"},
    {"id": "mind", "text": "Mental state calm (No FOMO/Revenge)?"},
]


class GuardrailWarning:
    """A guardrail warning message."""

    def __init__(self, category: str, message: str):
        self.category = category
        self.message = message

    def __str__(self) -> str:
        return f"[{self.category}] {self.message}"


def get_checklist(config: Optional[Config] = None) -> List[Dict[str, str]]:
    """Active checklist items (template from config, else built-in)."""
    if config is not None and config.checklist_items:
        return config.checklist_items
    return DEFAULT_CHECKLIST


def quality_score(checked: Iterable[str], items: Optional[List[Dict[str, str]]] = None) -> int:
    """
    Discipline score 0-100 from satisfied checklist item ids.

    Ids not on the checklist are ignored.
    """
    items = items if items is not None else DEFAULT_CHECKLIST
    if not items:
        return 0

    known = {item["id"] for item in items}
    satisfied = known.intersection(checked)

    return round(len(satisfied) / len(items) * 100)


def check_quality_score(config: Config, trade: Trade) -> Optional[GuardrailWarning]:
    """
    Check the trade's checklist score.

    Warns if score < min_quality_score.
    """
    if trade.score is None:
        return GuardrailWarning(
            "CHECKLIST_MISSING",
            "Trade has no checklist score. Run the checklist before entry."
        )

    if trade.score < config.min_quality_score:
        return GuardrailWarning(
            "LOW_QUALITY",
            f"Checklist score {trade.score} is below {config.min_quality_score}. "
            f"Was this an A+ setup?"
        )

    return None


def check_strategy_tag(trade: Trade) -> Optional[GuardrailWarning]:
    """Warns if the trade has no strategy tag."""
    if not trade.strategy.strip():
        return GuardrailWarning(
            "NO_STRATEGY",
            "Trade has no strategy tag. Name the setup you traded."
        )

    return None


def check_risk_defined(trade: Trade) -> Optional[GuardrailWarning]:
    """Warns if no risk amount was recorded."""
    if trade.risk <= 0:
        return GuardrailWarning(
            "RISK_UNDEFINED",
            "Risk was not defined for this trade."
        )

    return None


def run_all_guardrails(config: Config, trade: Trade) -> List[GuardrailWarning]:
    """
    Run all guardrail checks for a trade.

    Returns list of warnings (empty if none).
    """
    checks = [
        check_quality_score(config, trade),
        check_strategy_tag(trade),
        check_risk_defined(trade),
    ]
    warnings = [w for w in checks if w]

    for warning in warnings:
        logger.warning(f"Guardrail: {warning}")

    return warnings

import logging
from typing import Optional, Tuple

from ..policies.verdict import ModerationItem, Verdict
from .patterns import ORDERED_RULES, CategoryRule

logger = logging.getLogger(__name__)


def match_rule(text: str, rules: Tuple[CategoryRule, ...] = ORDERED_RULES) -> Optional[CategoryRule]:
    """Return the highest-priority rule matching ``text``, or None."""
    raw = text or ""
    lowered = raw.lower()
    for rule in rules:
        if rule.matches(raw, lowered):
            return rule
    return None


def precheck(item: ModerationItem) -> Optional[Verdict]:
    """Fast-path decision without calling the generator.

    Returns a complete Verdict on the first matching category, or None to
    defer the item to the generative stage.
    """
    rule = match_rule(item.text)
    if rule is None:
        return None
    logger.info("precheck_hit", extra={"tag": rule.tag.value, "verdict": rule.verdict.value, "item_type": item.type.value})
    return Verdict(
        verdict=rule.verdict,
        policy_tags=[rule.tag],
        rationale=rule.rationale,
        safe_suggestion=rule.suggestion,
    )

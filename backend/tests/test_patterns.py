import pytest

from backend.app.policies.verdict import PolicyTag, VerdictLabel
from backend.app.safety.patterns import ORDERED_RULES, PATTERN_LIBRARY, CategoryRule, ordered_rules


def test_library_order_is_severe_first():
    tags = [r.tag for r in ORDERED_RULES]
    assert tags == [
        PolicyTag.PII,
        PolicyTag.SEXUAL,
        PolicyTag.VIOLENCE,
        PolicyTag.HATE,
        PolicyTag.ILLEGAL,
        PolicyTag.SELF_HARM,
        PolicyTag.BULLYING,
        PolicyTag.PROFANITY,
    ]


def test_block_rules_precede_soft_block_rules():
    severities = [r.verdict.severity for r in ORDERED_RULES]
    assert severities == sorted(severities, reverse=True)


def test_suggestions_only_on_soft_block():
    for rule in PATTERN_LIBRARY:
        if rule.verdict == VerdictLabel.SOFT_BLOCK:
            assert rule.suggestion
        else:
            assert rule.suggestion is None


def test_only_pii_reads_raw_text():
    assert [r.tag for r in PATTERN_LIBRARY if r.raw_text] == [PolicyTag.PII]


def test_duplicate_priorities_rejected():
    clash = CategoryRule(
        priority=ORDERED_RULES[0].priority,
        tag=PolicyTag.SPAM,
        verdict=VerdictLabel.SOFT_BLOCK,
        rationale="Spam.",
        patterns=(),
        suggestion="Please don't repeat the same message.",
    )
    with pytest.raises(ValueError):
        ordered_rules(PATTERN_LIBRARY + (clash,))


def test_ordered_rules_sorts_by_priority():
    shuffled = tuple(reversed(PATTERN_LIBRARY))
    assert ordered_rules(shuffled) == ORDERED_RULES

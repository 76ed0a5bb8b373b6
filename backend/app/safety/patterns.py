from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ..policies.verdict import PolicyTag, VerdictLabel


@dataclass(frozen=True)
class CategoryRule:
    """One precheck category: its patterns and the decision it produces.

    Rules are evaluated in ascending ``priority``; the first match wins.
    ``raw_text`` rules see the original text so digit/punctuation structure
    survives, all others see the lowercased text.
    """

    priority: int
    tag: PolicyTag
    verdict: VerdictLabel
    rationale: str
    patterns: Tuple[re.Pattern, ...]
    suggestion: Optional[str] = None
    raw_text: bool = False

    def matches(self, raw: str, lowered: str) -> bool:
        text = raw if self.raw_text else lowered
        return any(p.search(text) for p in self.patterns)


def _words(*terms: str) -> Tuple[re.Pattern, ...]:
    return (re.compile(r"\b(" + "|".join(terms) + r")\b"),)


PII_PATTERNS: Tuple[re.Pattern, ...] = (
    # ASCII: only Latin digits count as phone/address digits
    # street address: "221 Baker Street", "12 Elm Rd"
    re.compile(r"\b\d{2,4}\s+[A-Za-z0-9 .'-]+(Street|St|Road|Rd|Ave|Avenue|Blvd|Lane|Ln)\b", re.I | re.ASCII),
    # phone number: 555-123-4567, 555.123.4567, 555 123 456
    re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{3,4}\b", re.ASCII),
    re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.I | re.ASCII),
)


PATTERN_LIBRARY: Tuple[CategoryRule, ...] = (
    CategoryRule(
        priority=10,
        tag=PolicyTag.PII,
        verdict=VerdictLabel.BLOCK,
        rationale="PII detected.",
        patterns=PII_PATTERNS,
        raw_text=True,
    ),
    CategoryRule(
        priority=20,
        tag=PolicyTag.SEXUAL,
        verdict=VerdictLabel.BLOCK,
        rationale="Sexual/explicit.",
        patterns=_words("onlyfans", "nude", "nudes", "send pics", "sext", "hookup", "explicit"),
    ),
    CategoryRule(
        priority=30,
        tag=PolicyTag.VIOLENCE,
        verdict=VerdictLabel.BLOCK,
        rationale="Violence.",
        patterns=_words("kill", "stab", "shoot", "knock.*out", "bomb", "beat.*up"),
    ),
    CategoryRule(
        priority=40,
        tag=PolicyTag.HATE,
        verdict=VerdictLabel.BLOCK,
        rationale="Hate/extremism.",
        patterns=_words("terrorist", "nazi", "white power", "go back to", "racial slur"),
    ),
    CategoryRule(
        priority=50,
        tag=PolicyTag.ILLEGAL,
        verdict=VerdictLabel.BLOCK,
        rationale="Illegal activity.",
        patterns=_words("drugs for sale", "buy weed", "fake id", "steal", "shoplift"),
    ),
    CategoryRule(
        priority=60,
        tag=PolicyTag.SELF_HARM,
        verdict=VerdictLabel.SOFT_BLOCK,
        rationale="Self-harm tone.",
        patterns=_words("kill myself", "suicide", "self-harm", "cutting"),
        suggestion="I’m sorry you’re hurting. Would you like to talk to a trusted adult or get help?",
    ),
    CategoryRule(
        priority=70,
        tag=PolicyTag.BULLYING,
        verdict=VerdictLabel.SOFT_BLOCK,
        rationale="Unkind/insulting.",
        patterns=_words("stupid", "dumb", "loser", "idiot", "kill yourself", "kys"),
        suggestion="Try a kinder version, e.g., “That was tough. Want help practicing?”",
    ),
    CategoryRule(
        priority=80,
        tag=PolicyTag.PROFANITY,
        verdict=VerdictLabel.SOFT_BLOCK,
        rationale="Profanity.",
        patterns=_words("fuck", "shit", "bitch", "asshole", "slut", "dick", "cunt"),
        suggestion="Please rephrase without profanity.",
    ),
)


def ordered_rules(rules: Tuple[CategoryRule, ...] = PATTERN_LIBRARY) -> Tuple[CategoryRule, ...]:
    """Return rules sorted by priority, rejecting ambiguous orderings."""
    priorities = [r.priority for r in rules]
    if len(set(priorities)) != len(priorities):
        raise ValueError(f"precheck rules must have distinct priorities: {sorted(priorities)}")
    return tuple(sorted(rules, key=lambda r: r.priority))


ORDERED_RULES = ordered_rules()

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

# Closed vocabularies. Adding a member here changes the precheck library,
# the prompt's OUTPUT SCHEMA block and the validator in one place.


class ItemType(str, Enum):
    CHAT = "chat"
    VIDEO_TITLE = "video_title"
    VIDEO_CAPTION = "video_caption"
    VIDEO_FRAME_AUTO = "video_frame_auto"


class VerdictLabel(str, Enum):
    ALLOW = "allow"
    SOFT_BLOCK = "soft_block"
    BLOCK = "block"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    VerdictLabel.ALLOW: 0,
    VerdictLabel.SOFT_BLOCK: 1,
    VerdictLabel.BLOCK: 2,
}


class PolicyTag(str, Enum):
    BULLYING = "bullying"
    HATE = "hate"
    SEXUAL = "sexual"
    SELF_HARM = "self_harm"
    VIOLENCE = "violence"
    PII = "pii"
    PROFANITY = "profanity"
    ILLEGAL = "illegal"
    SPAM = "spam"
    THEOLOGY = "theology"


RATIONALE_MAX_CHARS = 280
SUGGESTION_MAX_CHARS = 500


class ModerationItem(BaseModel):
    """A single piece of user-generated text submitted for moderation."""

    model_config = ConfigDict(frozen=True)

    type: ItemType
    text: StrictStr


class Verdict(BaseModel):
    """Structured moderation decision.

    The same model is used for precheck results and for validating
    generated output, so both paths share one contract.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    verdict: VerdictLabel
    policy_tags: List[PolicyTag]
    rationale: StrictStr = Field(max_length=RATIONALE_MAX_CHARS)
    safe_suggestion: Optional[StrictStr] = Field(..., max_length=SUGGESTION_MAX_CHARS)

    @field_validator("policy_tags")
    @classmethod
    def _unique_tags(cls, v: List[PolicyTag]) -> List[PolicyTag]:
        seen = set()
        for tag in v:
            if tag in seen:
                raise ValueError(f"duplicate policy tag: {tag.value}")
            seen.add(tag)
        return v

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")

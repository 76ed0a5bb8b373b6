from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import json
import logging
import math

from ..policies.validator import validate_verdict
from ..policies.verdict import ModerationItem, Verdict
from ..safety.guard import precheck
from .errors import GenerationParseError, ModerationError, SchemaViolationError, UpstreamUnavailableError
from .prompt import MAX_ITEM_CHARS, build_prompt
from .providers import TextGenerator
from .sanitize import extract_json

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text}")
    return value


def loads_strict(text: str) -> Any:
    """json.loads limited to RFC 8259: no NaN, no Infinity, no overflowing floats."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


class ModerationState(str, Enum):
    RECEIVED = "received"
    PRECHECKED = "prechecked"
    FAST_VERDICT = "fast_verdict"
    AWAITING_GENERATION = "awaiting_generation"
    SANITIZING = "sanitizing"
    VALIDATING = "validating"
    RESOLVED = "resolved"
    REJECTED = "rejected"


@dataclass
class ModerationResult:
    state: ModerationState
    verdict: Optional[Verdict] = None
    error: Optional[ModerationError] = None
    path: str = "precheck"
    trail: List[ModerationState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == ModerationState.RESOLVED

    @property
    def status_code(self) -> int:
        if self.ok:
            return 200
        return self.error.status_code if self.error else 500

    def payload(self) -> Dict[str, Any]:
        if self.ok and self.verdict is not None:
            return self.verdict.to_payload()
        if self.error is not None:
            return self.error.payload()
        return {"error": "Moderation failed"}


class Orchestrator:
    """Precheck, then (only if nothing fired) one generation attempt.

    The generator is the only non-deterministic collaborator and is injected,
    so everything else here runs without network access.
    """

    def __init__(self, generator: TextGenerator, max_item_chars: int = MAX_ITEM_CHARS):
        self.generator = generator
        self.max_item_chars = max_item_chars

    def run(self, item: ModerationItem) -> ModerationResult:
        trail: List[ModerationState] = [ModerationState.RECEIVED]

        # 1) deterministic fast path
        quick = precheck(item)
        trail.append(ModerationState.PRECHECKED)
        if quick is not None:
            trail += [ModerationState.FAST_VERDICT, ModerationState.RESOLVED]
            return ModerationResult(ModerationState.RESOLVED, verdict=quick, path="precheck", trail=trail)

        # 2) generative stage, single attempt
        try:
            trail.append(ModerationState.AWAITING_GENERATION)
            prompt = build_prompt(item.type, item.text, self.max_item_chars)
            raw = self._generate(prompt)

            trail.append(ModerationState.SANITIZING)
            candidate = extract_json(raw)

            trail.append(ModerationState.VALIDATING)
            verdict = self._parse_and_validate(raw, candidate)
        except ModerationError as e:
            trail.append(ModerationState.REJECTED)
            logger.warning(
                "moderation_rejected",
                extra={"error_kind": type(e).__name__, "status": e.status_code, "item_type": item.type.value},
            )
            return ModerationResult(ModerationState.REJECTED, error=e, path="generated", trail=trail)

        trail.append(ModerationState.RESOLVED)
        logger.info(
            "moderation_resolved",
            extra={"verdict": verdict.verdict.value, "tags": [t.value for t in verdict.policy_tags], "path": "generated"},
        )
        return ModerationResult(ModerationState.RESOLVED, verdict=verdict, path="generated", trail=trail)

    def _generate(self, prompt: str) -> str:
        try:
            return self.generator.generate(prompt)
        except ModerationError:
            raise
        except Exception as e:
            # Providers outside the registry still map onto the error taxonomy
            logger.error("generation_failed", extra={"error_kind": type(e).__name__}, exc_info=True)
            raise UpstreamUnavailableError(f"{type(e).__name__}: {e}") from e

    @staticmethod
    def _parse_and_validate(raw: str, candidate: str) -> Verdict:
        try:
            obj = loads_strict(candidate)
        except (ValueError, RecursionError) as e:
            logger.warning("generation_not_json", extra={"reason": str(e), "raw_head": raw[:300]})
            raise GenerationParseError(raw, str(e)) from e

        verdict, errs = validate_verdict(obj)
        if verdict is None:
            logger.warning("generation_schema_violation", extra={"details": errs})
            raise SchemaViolationError(obj, errs)
        return verdict

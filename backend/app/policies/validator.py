from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .verdict import Verdict


def _format_error(err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
    return f"{loc}: {err.get('msg', 'invalid')}"


def validate_verdict(obj: Any) -> Tuple[Optional[Verdict], List[str]]:
    """Check a parsed JSON value against the Verdict contract.

    Returns (verdict, errors). On failure verdict is None and errors lists
    every violation found; nothing is repaired and nothing is raised.
    """
    if not isinstance(obj, dict):
        return None, [f"<root>: expected a JSON object, got {type(obj).__name__}"]

    try:
        verdict = Verdict.model_validate(obj)
    except ValidationError as ve:
        return None, [_format_error(e) for e in ve.errors()]

    return verdict, []

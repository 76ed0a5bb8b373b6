import json

import pytest

from backend.app.orchestration.sanitize import extract_json

VERDICT = {"verdict": "allow", "policy_tags": [], "rationale": "No concerns.", "safe_suggestion": None}


@pytest.mark.parametrize(
    "wrapper",
    [
        "Sure! ```json {} ``` Thanks",
        "```json\n{}\n```",
        "  {}  ",
        "Here you go:\n{}\nLet me know if you need more.",
    ],
)
def test_extracts_wrapped_object(wrapper):
    raw = wrapper.replace("{}", json.dumps(VERDICT))
    assert json.loads(extract_json(raw)) == VERDICT


def test_extracts_array():
    assert json.loads(extract_json('result: ["pii", "spam"] done')) == ["pii", "spam"]


def test_no_brackets_returns_trimmed_input():
    assert extract_json("   I cannot help with that.  ") == "I cannot help with that."


def test_opening_without_closing_returns_trimmed_input():
    assert extract_json(' {"verdict": "allow" ') == '{"verdict": "allow"'


def test_empty_and_none():
    assert extract_json("") == ""
    assert extract_json(None) == ""


def test_last_closer_wins_even_if_noise_follows():
    # heuristic, not a parser: trailing brackets in prose are included
    out = extract_json('{"a": 1} and then [x]')
    assert out == '{"a": 1} and then [x]'

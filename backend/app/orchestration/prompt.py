from ..policies.verdict import ItemType, PolicyTag, VerdictLabel

MAX_ITEM_CHARS = 8000


CONSTITUTION = """
CONSTITUTION:
- Love, respect, humility, honesty; no bullying or insults.
- Purity and safety; no sexualized or grooming content.
- Peacemaking; no threats or glorification of violence.
- No hate, discrimination, or extremism.
- Protect privacy; no PII exchange.
- No self-harm encouragement; surface supportive language.
""".strip()


def _alternatives(enum_cls) -> str:
    return " | ".join(f'"{m.value}"' for m in enum_cls)


def schema_description() -> str:
    return (
        "OUTPUT SCHEMA:\n"
        "{\n"
        f'  "verdict": {_alternatives(VerdictLabel)},\n'
        f'  "policy_tags": [ {_alternatives(PolicyTag)} ],\n'
        '  "rationale": "short string for moderators",\n'
        '  "safe_suggestion": "string or null"\n'
        "}"
    )


def escape_item_text(text: str, limit: int = MAX_ITEM_CHARS) -> str:
    # Escape first, then cap, so the embedded field never exceeds the limit
    return (text or "").replace('"', '\\"')[:limit]


def build_prompt(item_type: ItemType, text: str, limit: int = MAX_ITEM_CHARS) -> str:
    """Render the single system instruction sent to the generator.

    Pure: identical input always yields the identical string.
    """
    type_value = item_type.value if isinstance(item_type, ItemType) else str(item_type)
    return (
        "You enforce a faith-guided, youth-safe chat/video policy. Review the ITEM below.\n"
        "Return strict JSON only, no prose, no code fences.\n"
        "\n"
        f"{CONSTITUTION}\n"
        "\n"
        f"{schema_description()}\n"
        "\n"
        "ITEM:\n"
        f'type: "{type_value}"\n'
        f'text: "{escape_item_text(text, limit)}"'
    )

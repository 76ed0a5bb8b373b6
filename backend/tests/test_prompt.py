from backend.app.orchestration.prompt import MAX_ITEM_CHARS, build_prompt, escape_item_text, schema_description
from backend.app.policies.verdict import ItemType, PolicyTag


def test_prompt_embeds_constitution_schema_and_item():
    p = build_prompt(ItemType.VIDEO_CAPTION, "a calm lake at sunset")
    assert "CONSTITUTION:" in p
    assert "Peacemaking" in p
    assert "Protect privacy" in p
    assert "OUTPUT SCHEMA:" in p
    assert 'type: "video_caption"' in p
    assert p.endswith('text: "a calm lake at sunset"')


def test_schema_description_lists_every_tag():
    desc = schema_description()
    for tag in PolicyTag:
        assert f'"{tag.value}"' in desc
    assert '"allow" | "soft_block" | "block"' in desc


def test_quotes_are_escaped():
    p = build_prompt(ItemType.CHAT, 'he said "hi"')
    assert 'text: "he said \\"hi\\""' in p


def test_text_is_capped():
    long = "a" * (MAX_ITEM_CHARS + 500)
    assert len(escape_item_text(long)) == MAX_ITEM_CHARS
    p = build_prompt(ItemType.CHAT, long)
    assert "a" * (MAX_ITEM_CHARS + 1) not in p


def test_builder_is_deterministic():
    assert build_prompt(ItemType.CHAT, "hello") == build_prompt(ItemType.CHAT, "hello")


def test_custom_limit():
    p = build_prompt(ItemType.CHAT, "abcdef", limit=3)
    assert p.endswith('text: "abc"')

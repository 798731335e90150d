from src.jsonsplice.jsonops import contains_key_deep


def test_contains_key_deep_finds_nested_keys():
    doc = '{"a": [{"b": {"c": 1}}]}'
    assert contains_key_deep(doc, "a")
    assert contains_key_deep(doc, "c")
    assert not contains_key_deep(doc, "d")


def test_contains_key_deep_ignores_values_and_invalid_json():
    assert not contains_key_deep('{"a": "b"}', "b")
    assert not contains_key_deep('["b"]', "b")
    assert not contains_key_deep("{not json", "a")
    assert contains_key_deep(b'{"a": 1}', "a")

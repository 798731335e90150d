from src.jsonsplice.jsonops.key_checker import (
    encode_key,
    enclosing_object,
    key_exists_at_depth,
    key_exists_beside,
    key_exists_in_array_objects,
    key_exists_in_enclosing_object,
    key_exists_in_object,
    quote_key,
)
from src.jsonsplice.jsonops.line_scanner import Position

DOC = [
    "{",
    '  "id": 1,',
    '  "settings": {',
    '    "theme": "dark",',
    '    "nested": {',
    '      "id": 2',
    "    }",
    "  },",
    '  "users": [',
    '    {"name": "a"},',
    '    {"name": "b", "meta": {"role": "x"}}',
    "  ]",
    "}",
]


def test_encode_and_quote_key():
    assert encode_key('say "hi"') == 'say \\"hi\\"'
    assert quote_key("naïve") == '"naïve"'


def test_key_exists_at_depth_root_level_only():
    assert key_exists_at_depth(DOC, "id", 0, 1)
    assert key_exists_at_depth(DOC, "settings", 0, 1)
    assert not key_exists_at_depth(DOC, "theme", 0, 1)
    assert not key_exists_at_depth(DOC, "missing", 0, 1)


def test_key_exists_at_depth_stops_at_object_end():
    # from the settings opener, `users` sits outside the scope
    assert key_exists_at_depth(DOC, "theme", 2, 1, from_column=14)
    assert not key_exists_at_depth(DOC, "users", 2, 1, from_column=14)
    assert not key_exists_at_depth(DOC, "id", 2, 1, from_column=14)


def test_enclosing_object_finds_innermost_brace():
    assert enclosing_object(DOC, Position(5, 6)) == Position(4, 14)
    assert enclosing_object(DOC, Position(3, 4)) == Position(2, 14)
    assert enclosing_object(DOC, Position(1, 2)) == Position(0, 0)


def test_key_exists_in_object_is_direct_members_only():
    assert key_exists_in_object(DOC, Position(2, 14), "nested")
    assert not key_exists_in_object(DOC, Position(2, 14), "id")


def test_sibling_checks():
    assert key_exists_beside(DOC, Position(3, 4), "nested")
    assert not key_exists_beside(DOC, Position(3, 4), "users")
    assert key_exists_in_enclosing_object(DOC, 5, "id")
    assert not key_exists_in_enclosing_object(DOC, 5, "theme")


def test_key_exists_in_array_objects_searches_all_depths():
    assert key_exists_in_array_objects(DOC, "name", 8)
    assert key_exists_in_array_objects(DOC, "role", 8)
    assert not key_exists_in_array_objects(DOC, "theme", 8)

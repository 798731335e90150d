import pytest

from src.jsonsplice.jsonops import InvalidPayloadError, rename_key

PROFILE_DOC = """{
  "firstName": "Al",
  "friends": [
    {"firstName": "Bo", "tag": "firstName"},
    {"firstName" : "Cy"}
  ]
}"""


def test_rename_touches_keys_not_values():
    out, count = rename_key('{"firstName": "Al", "nickname": "firstName"}', "firstName", "first_name")
    assert out == '{"first_name": "Al", "nickname": "firstName"}'
    assert count == 1


def test_rename_every_nesting_level_and_keeps_spacing():
    out, count = rename_key(PROFILE_DOC, "firstName", "first_name")
    assert count == 3
    assert out == PROFILE_DOC.replace('"firstName": "Al"', '"first_name": "Al"').replace(
        '{"firstName": "Bo"', '{"first_name": "Bo"'
    ).replace('{"firstName" : "Cy"}', '{"first_name" : "Cy"}')


def test_rename_round_trip_restores_document():
    renamed, forward = rename_key(PROFILE_DOC, "firstName", "given")
    restored, backward = rename_key(renamed, "given", "firstName")
    assert restored == PROFILE_DOC
    assert forward == backward == 3


def test_rename_without_matches_returns_document_unchanged():
    out, count = rename_key(PROFILE_DOC, "lastName", "surname")
    assert out == PROFILE_DOC
    assert count == 0


def test_rename_ignores_key_like_text_after_escaped_quote():
    doc = '{"note": "x\\"id\\": 1", "id": 2}'
    out, count = rename_key(doc, "id", "uid")
    assert count == 1
    assert out == '{"note": "x\\"id\\": 1", "uid": 2}'


def test_rename_handles_keys_needing_escapes():
    out, count = rename_key('{"a.b": 1, "a+b": 2}', "a.b", "dotted")
    assert out == '{"dotted": 1, "a+b": 2}'
    assert count == 1


@pytest.mark.parametrize(
    ("old_key", "new_key", "message"),
    [
        ("", "x", "old key cannot be empty"),
        ("x", "", "new key cannot be empty"),
        ("x", "x", "cannot be the same"),
    ],
)
def test_rename_rejects_bad_keys(old_key: str, new_key: str, message: str):
    with pytest.raises(InvalidPayloadError, match=message):
        rename_key("{}", old_key, new_key)


def test_rename_key_with_colon_on_next_line():
    out, count = rename_key('{\n  "old"\n  : 1,\n  "keep": "old"\n}', "old", "new")
    assert count == 1
    assert out == '{\n  "new"\n  : 1,\n  "keep": "old"\n}'


def test_rename_across_lines_keeps_crlf():
    out, count = rename_key('{\r\n  "old"\r\n    :\r\n  2\r\n}', "old", "new")
    assert count == 1
    assert out == '{\r\n  "new"\r\n    :\r\n  2\r\n}'

import json

import pytest

from src.jsonsplice.jsonops import (
    DuplicateKeyError,
    InvalidPayloadError,
    MalformedDocumentError,
    TargetNotFoundError,
    insert_object_after_all_occurrences,
)

PACKAGE_DOC = """{
\t\t"name": "test",
\t\t"version": "1.0.0",
\t\t"scripts": {
\t\t\t"start": "node index.js",
\t\t\t"test": "jest"
\t\t},
\t\t"dependencies": {
\t\t\t"express": "^4.18.0"
\t\t}
\t}"""

SERVERS_DOC = """{
  "servers": [
    {
      "name": "a",
      "port": 80
    },
    {
      "name": "b",
      "port": 81
    },
    {
      "name": "c",
      "port": 82
    }
  ]
}"""


def test_compact_document_gets_inline_sibling_for_every_occurrence():
    out = insert_object_after_all_occurrences('{"a":{"b":1},"c":{"b":2}}', "b", "x", "5")
    assert out == '{"a":{"b":1, "x": 5},"c":{"b":2, "x": 5}}'
    assert json.loads(out) == {"a": {"b": 1, "x": 5}, "c": {"b": 2, "x": 5}}


def test_new_key_after_last_member_adds_comma_to_target_line():
    out = insert_object_after_all_occurrences(PACKAGE_DOC, "test", "build", '"webpack --mode production"')
    lines = out.split("\n")
    assert lines[5:8] == [
        '\t\t\t"test": "jest",',
        '\t\t\t"build": "webpack --mode production"',
        "\t\t},",
    ]
    assert json.loads(out)["scripts"]["build"] == "webpack --mode production"


def test_existing_sibling_is_rejected():
    with pytest.raises(DuplicateKeyError, match="object with key 'start' already exists"):
        insert_object_after_all_occurrences(PACKAGE_DOC, "test", "start", '"npm start"')


def test_same_key_in_other_object_is_not_a_duplicate():
    out = insert_object_after_all_occurrences(PACKAGE_DOC, "express", "react", '"^16.0.0"')
    lines = out.split("\n")
    assert lines[8:10] == ['\t\t\t"express": "^4.18.0",', '\t\t\t"react": "^16.0.0"']
    assert json.loads(out)["dependencies"] == {"express": "^4.18.0", "react": "^16.0.0"}


def test_duplicate_check_can_be_disabled():
    out = insert_object_after_all_occurrences(PACKAGE_DOC, "test", "start", '"npm start"', check_duplicates=False)
    assert '\t\t\t"start": "npm start"' in out.split("\n")


def test_object_inserted_after_every_occurrence():
    out = insert_object_after_all_occurrences(SERVERS_DOC, "port", "tls", '{"enabled": true}')
    assert out.count('"tls":') == 3
    assert out.split("\n")[3:9] == [
        '      "name": "a",',
        '      "port": 80,',
        '      "tls": {',
        '        "enabled": true',
        "      }",
        "    },",
    ]
    servers = json.loads(out)["servers"]
    assert [server["tls"] for server in servers] == [{"enabled": True}] * 3


def test_target_followed_by_comma_keeps_comma_on_block():
    doc = '{\n  "a": {\n    "x": 1\n  },\n  "b": 2\n}'
    out = insert_object_after_all_occurrences(doc, "a", "n", '{"y": 2}')
    assert out == '{\n  "a": {\n    "x": 1\n  },\n  "n": {\n    "y": 2\n  },\n  "b": 2\n}'


def test_inline_sibling_between_members_on_one_line():
    out = insert_object_after_all_occurrences('{"a": 1, "b": 2}', "a", "n", '{"k": [1, 2]}')
    assert out == '{"a": 1, "n": {"k": [1, 2]}, "b": 2}'


def test_crlf_preserved():
    doc = '{\r\n  "a": 1\r\n}'
    out = insert_object_after_all_occurrences(doc, "a", "b", "true")
    assert out == '{\r\n  "a": 1,\r\n  "b": true\r\n}'


def test_string_values_matching_target_are_ignored():
    out = insert_object_after_all_occurrences('{\n  "k": "id",\n  "id": 1\n}', "id", "n", "0")
    assert json.loads(out) == {"k": "id", "id": 1, "n": 0}


def test_errors():
    with pytest.raises(InvalidPayloadError, match="invalid JSON for new object"):
        insert_object_after_all_occurrences(PACKAGE_DOC, "test", "x", "{nope")
    with pytest.raises(TargetNotFoundError, match="target key 'missing' not found"):
        insert_object_after_all_occurrences(PACKAGE_DOC, "missing", "x", "1")
    with pytest.raises(MalformedDocumentError):
        insert_object_after_all_occurrences('{\n  "a": {\n    "x": 1\n', "a", "n", "1")


@pytest.mark.parametrize("new_object_json", ["NaN", '{"v": Infinity}', '{"v": -1e999}'])
def test_non_standard_json_objects_are_rejected(new_object_json: str):
    with pytest.raises(InvalidPayloadError, match="invalid JSON for new object"):
        insert_object_after_all_occurrences(PACKAGE_DOC, "test", "x", new_object_json)

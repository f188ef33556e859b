"""
Tests for mutation request parsing.
"""

from agentfs.entities.mutation import (
    CreateRequest,
    DeleteRequest,
    EditMode,
    EditRequest,
    ReadRequest,
    UnknownRequest,
    request_from_dict,
)


class TestEditMode:
    def test_parse_accepts_values_and_aliases(self):
        assert EditMode.parse("replace") is EditMode.REPLACE
        assert EditMode.parse("FIND_REPLACE") is EditMode.FIND_REPLACE
        assert EditMode.parse(EditMode.APPEND) is EditMode.APPEND
        assert EditMode.parse("rewrite") is None


class TestRequestFromDict:
    def test_create_overwrites(self):
        request = request_from_dict({"action": "create", "path": "a.txt", "content": "x"})
        assert request == CreateRequest(path="a.txt", content="x", overwrite=True)

    def test_read_and_delete(self):
        assert request_from_dict({"action": "read", "path": "a"}) == ReadRequest("a")
        assert request_from_dict({"action": "DELETE", "path": "a"}) == DeleteRequest("a")

    def test_edit_defaults_to_replace(self):
        request = request_from_dict({"action": "edit", "path": "a", "content": "new"})
        assert request == EditRequest(path="a", mode=EditMode.REPLACE, new_content="new")

    def test_find_replace_uses_content_when_replace_missing(self):
        request = request_from_dict(
            {"action": "edit", "path": "a", "mode": "find-replace", "search": "x", "content": "y"}
        )
        assert isinstance(request, EditRequest)
        assert request.search_text == "x"
        assert request.replace_text == "y"

    def test_insert_line_is_parsed(self):
        request = request_from_dict(
            {"action": "edit", "path": "a", "mode": "insert", "content": "l", "line": "2"}
        )
        assert request.line_index == 2

    def test_unknown_edit_mode(self):
        request = request_from_dict({"action": "edit", "path": "a", "mode": "rewrite"})
        assert request == UnknownRequest(action="edit:rewrite", path="a")

    def test_unknown_action(self):
        assert request_from_dict({"action": "chmod", "path": "a"}) == UnknownRequest("chmod", "a")
        assert request_from_dict({}).action == "<missing>"

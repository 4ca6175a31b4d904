"""Tests for specmount.tags."""

from __future__ import annotations

from specmount.tags import normalize_tags


class TestNormalizeTags:
    """Test ordering of the document's tag list."""

    def test_sorts_by_name(self) -> None:
        doc = {"tags": [{"name": "b"}, {"name": "a"}]}
        normalize_tags(doc)
        assert doc["tags"] == [{"name": "a"}, {"name": "b"}]

    def test_ordinal_comparison(self) -> None:
        doc = {"tags": [{"name": "b"}, {"name": "B"}, {"name": "a"}, {"name": "é"}]}
        normalize_tags(doc)
        assert [t["name"] for t in doc["tags"]] == ["B", "a", "b", "é"]

    def test_keeps_other_tag_fields(self) -> None:
        doc = {
            "tags": [
                {"name": "users", "description": "User ops"},
                {"name": "admin", "externalDocs": {"url": "https://example.com"}},
            ]
        }
        normalize_tags(doc)
        assert doc["tags"][0] == {"name": "admin", "externalDocs": {"url": "https://example.com"}}
        assert doc["tags"][1]["description"] == "User ops"

    def test_stable_for_shared_names(self) -> None:
        doc = {"tags": [{"name": "x", "n": 1}, {"name": "a"}, {"name": "x", "n": 2}]}
        normalize_tags(doc)
        assert doc["tags"] == [{"name": "a"}, {"name": "x", "n": 1}, {"name": "x", "n": 2}]

    def test_nameless_tags_sort_first(self) -> None:
        doc = {"tags": [{"name": "a"}, {"description": "no name"}]}
        normalize_tags(doc)
        assert doc["tags"][0] == {"description": "no name"}

    def test_missing_tags_is_noop(self) -> None:
        doc = {"openapi": "3.0.3"}
        normalize_tags(doc)
        assert doc == {"openapi": "3.0.3"}

    def test_non_list_tags_is_noop(self) -> None:
        doc = {"tags": {"name": "a"}}
        normalize_tags(doc)
        assert doc == {"tags": {"name": "a"}}

    def test_original_list_object_untouched(self) -> None:
        tags = [{"name": "b"}, {"name": "a"}]
        doc = {"tags": tags}
        normalize_tags(doc)
        assert tags == [{"name": "b"}, {"name": "a"}]
        assert doc["tags"] is not tags

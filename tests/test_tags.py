"""Tests for the tag normalization helpers."""
import pytest

from notegeek.utils.tags import format_tag, validate_tags


class TestFormatTag:
    def test_replaces_whitespace_with_underscore(self):
        assert format_tag("hello world") == "hello_world"

    def test_trims_and_collapses_runs(self):
        assert format_tag("  a  b  ") == "a_b"
        assert format_tag("a\t \nb") == "a_b"

    @pytest.mark.parametrize("tag", ["work", "parent/child", "snake_case", "kebab-case", "CamelCase9"])
    def test_valid_tags_are_unchanged(self, tag):
        assert format_tag(tag) == tag
        assert format_tag(format_tag(tag)) == format_tag(tag)

    @pytest.mark.parametrize("tag", ["bad!", "no@symbols", "no.dots", "émoji"])
    def test_rejects_disallowed_characters(self, tag):
        with pytest.raises(ValueError, match="can only contain"):
            format_tag(tag)

    @pytest.mark.parametrize("tag", ["", "   ", "\t"])
    def test_rejects_empty(self, tag):
        with pytest.raises(ValueError, match="cannot be empty"):
            format_tag(tag)

    @pytest.mark.parametrize("tag", [None, 42, ["a"]])
    def test_rejects_non_strings(self, tag):
        with pytest.raises(ValueError, match="must be a string"):
            format_tag(tag)


class TestValidateTags:
    def test_dedupes_in_first_seen_order(self):
        assert validate_tags(["a", "a", "b"]) == ["a", "b"]
        assert validate_tags(["b", "a", "b"]) == ["b", "a"]

    def test_dedupes_after_formatting(self):
        assert validate_tags(["my tag", "my_tag", " my  tag "]) == ["my_tag"]

    def test_empty_list(self):
        assert validate_tags([]) == []

    def test_rejects_non_list(self):
        with pytest.raises(ValueError, match="must be an array"):
            validate_tags("a,b")

    def test_propagates_tag_errors(self):
        with pytest.raises(ValueError, match="can only contain"):
            validate_tags(["fine", "not fine!"])

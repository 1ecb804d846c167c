"""Tests for tag helpers."""

from buyer_leads.tags import parse_tags, stringify_tags


class TestParseTags:
    """Tests for parse_tags."""

    def test_json_list(self) -> None:
        assert parse_tags('["premium", " urgent "]') == ["premium", "urgent"]

    def test_comma_separated(self) -> None:
        assert parse_tags("premium, urgent,,") == ["premium", "urgent"]

    def test_empty(self) -> None:
        assert parse_tags(None) == []
        assert parse_tags("") == []

    def test_json_scalar_treated_as_text(self) -> None:
        assert parse_tags("42") == ["42"]


class TestStringifyTags:
    """Tests for stringify_tags."""

    def test_json(self) -> None:
        assert stringify_tags(["hot", "nri"]) == '["hot", "nri"]'

    def test_round_trip(self) -> None:
        assert parse_tags(stringify_tags(["a", "b, c"])) == ["a", "b, c"]

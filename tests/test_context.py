"""Tests for placeholder substitution into a concrete context."""

from __future__ import annotations

import copy
import re
from datetime import datetime, timezone

import pytest

from primavera import ContextBuilder, FlowConfig, InvalidPatternError, build_context
from primavera.flow.context import is_placeholder, substitute


class TestIsPlaceholder:
    """Tests for placeholder detection."""

    @pytest.mark.parametrize("value", ["$data", "$data.source", "$data.a.b[0]"])
    def test_placeholders(self, value):
        assert is_placeholder(value) is True

    @pytest.mark.parametrize("value", ["$database", "data.source", "Test", 5, None, "x$data.y"])
    def test_not_placeholders(self, value):
        assert is_placeholder(value) is False

    def test_custom_marker(self):
        assert is_placeholder("$msg.id", "$msg") is True
        assert is_placeholder("$data.id", "$msg") is False


class TestBuildContext:
    """Tests for build_context."""

    def test_substitutes_payload_field(self):
        assert build_context({"domain": "$data.source"}, {"source": "Test"}) == {"domain": "Test"}

    def test_literals_kept(self):
        context = build_context({"domain": "Test", "action": "$data.action"}, {"action": "Do"})
        assert context == {"domain": "Test", "action": "Do"}

    def test_nested_path(self):
        payload = {"order": {"items": [{"sku": "X1"}]}}
        assert build_context({"sku": "$data.order.items[0].sku"}, payload) == {"sku": "X1"}

    def test_whole_payload(self):
        payload = {"id": 1}
        context = build_context({"message": "$data"}, payload)

        assert context == {"message": {"id": 1}}
        assert context["message"] is not payload

    def test_missing_path_becomes_none(self):
        context = build_context({"domain": "$data.missing"}, {"source": "Test"})
        assert context == {"domain": None}
        assert "domain" in context

    def test_does_not_mutate_inputs(self):
        template = {"domain": "$data.source", "meta": {"tags": ["a"]}}
        payload = {"source": "Test", "nested": {"values": [1, 2]}}
        template_before = copy.deepcopy(template)
        payload_before = copy.deepcopy(payload)

        context = build_context(template, payload)
        context["meta"]["tags"].append("b")

        assert template == template_before
        assert payload == payload_before

    def test_result_shares_no_structure_with_payload(self):
        payload = {"source": {"name": "Test"}}
        context = build_context({"source": "$data.source"}, payload)

        context["source"]["name"] = "Changed"

        assert payload["source"]["name"] == "Test"

    def test_deterministic(self):
        template = {"domain": "$data.source", "action": "Do"}
        payload = {"source": "Test"}

        assert build_context(template, payload) == build_context(template, payload)

    def test_non_json_values_preserved(self):
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        matcher = re.compile("^T")
        context = build_context(
            {"at": "$data.at", "tags": "$data.tags", "domain": matcher},
            {"at": stamp, "tags": {"x", "y"}},
        )

        assert context["at"] == stamp
        assert context["tags"] == {"x", "y"}
        assert context["domain"].pattern == "^T"

    def test_non_string_values_untouched(self):
        assert build_context({"count": 3, "flag": True}, {}) == {"count": 3, "flag": True}

    def test_non_mapping_template_rejected(self):
        with pytest.raises(InvalidPatternError):
            build_context(["$data.source"], {})  # type: ignore[arg-type]

    def test_object_payload(self):
        class Message:
            def __init__(self):
                self.source = "Test"

        assert build_context({"domain": "$data.source"}, Message()) == {"domain": "Test"}

    def test_substitute(self):
        assert substitute("$data.a", {"a": 1}) == 1
        assert substitute("$data", {"a": 1}) == {"a": 1}


class TestContextBuilder:
    """Tests for the configured builder."""

    def test_default_marker(self):
        builder = ContextBuilder()
        assert builder.marker == "$data"
        assert builder.build({"domain": "$data.source"}, {"source": "Test"}) == {"domain": "Test"}

    def test_from_config(self):
        builder = ContextBuilder.from_config(FlowConfig(placeholder_marker="$msg"))

        context = builder({"domain": "$msg.source", "other": "$data.source"}, {"source": "Test"})

        assert context == {"domain": "Test", "other": "$data.source"}

    def test_repr(self):
        assert repr(ContextBuilder("$msg")) == "ContextBuilder(marker='$msg')"

"""Tests for JSON salvage of raw model responses."""

import json

import pytest

from app.pricelist.services.salvage import (
    NON_JSON_ERROR,
    SalvageFail,
    SalvageOk,
    SalvageStage,
    iter_top_level_arrays,
    salvage,
    sanitize,
)
from app.pricelist.services.salvage.scanner import TYPOGRAPHIC_QUOTES, split_strings

MESSY_RESPONSES = [
    "```json\n{items: [{ModelCode: 'A1', ModelDescription: 'x',}]}\n```",
    "Here is the JSON:\n{\u201ca\u201d: \u201cb\u201d, // c\n 'd': True,}",
    "{\"a\": \"x\ty\", 'b': None}",
    "\ufeff{\"a\": 1}\u00a0",
    "not json at all",
    "items: [{\"ModelCode\": \"A1\"}]",
    "\"\u201c//",
    "\u201cunterminated // tail",
    "'\u201c//",
    "{\u201curl\u201d: \u201chttp://x.io/a\u201d, \u201cModelCode\u201d: \u201cA1\u201d}",
    "Here\u2019s the JSON: {\u2018a\u2019: \u2018b\u2019} // done",
    "{\u201ca\u201d: \u201cit\u2019s // ok\u201d}",
    "{\"quote\": \"He said \u201chi\u201d // ok\"}",
]


class TestScanner:
    """Tests for string-aware text splitting."""

    def test_split_strings(self):
        chunks = split_strings("{\"a\": 'b'}")
        assert chunks == [
            (False, "{"),
            (True, '"a"'),
            (False, ": "),
            (True, "'b'"),
            (False, "}"),
        ]

    def test_escaped_quote_stays_inside_string(self):
        chunks = split_strings(r'"say \"hi\"" x')
        assert chunks == [(True, r'"say \"hi\""'), (False, " x")]

    def test_curly_quotes_as_delimiters(self):
        chunks = split_strings("{\u201ca\u201d: \u2018b\u2019}", TYPOGRAPHIC_QUOTES)
        assert chunks == [
            (False, "{"),
            (True, "\u201ca\u201d"),
            (False, ": "),
            (True, "\u2018b\u2019"),
            (False, "}"),
        ]

    def test_curly_quote_inside_ascii_string_is_content(self):
        chunks = split_strings('"a \u201cb" c', TYPOGRAPHIC_QUOTES)
        assert chunks == [(True, '"a \u201cb"'), (False, " c")]


class TestSanitize:
    """Tests for the ordered textual repairs."""

    def test_strips_code_fences(self):
        assert sanitize('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_lead_in(self):
        assert sanitize('Here is the JSON: {"a": 1}') == '{"a": 1}'

    def test_removes_comments_outside_strings(self):
        cleaned = sanitize('{"a": 1, // note\n"b": 2 /* x */}')
        assert json.loads(cleaned) == {"a": 1, "b": 2}

    def test_keeps_comment_markers_inside_strings(self):
        assert sanitize('{"url": "http://x.io/a"}') == '{"url": "http://x.io/a"}'

    def test_normalizes_curly_quotes_and_spaces(self):
        assert sanitize("{\u201ca\u201d:\u00a0\u201cb\u201d}") == '{"a": "b"}'

    def test_keeps_comment_markers_inside_curly_strings(self):
        raw = "{\u201curl\u201d: \u201chttp://x.io/a\u201d, \u201cModelCode\u201d: \u201cA1\u201d}"
        assert sanitize(raw) == '{"url": "http://x.io/a", "ModelCode": "A1"}'

    def test_curly_value_with_comment_marker_survives(self):
        cleaned = sanitize("{\u201ca\u201d: \u201cit\u2019s // ok\u201d}")
        assert json.loads(cleaned) == {"a": "it\u2019s // ok"}

    def test_curly_quotes_inside_ascii_string_are_kept(self):
        raw = '{"quote": "He said \u201chi\u201d // ok"}'
        assert sanitize(raw) == raw

    def test_curly_apostrophe_lead_in(self):
        cleaned = sanitize("Here\u2019s the JSON: {\u2018a\u2019: \u2018b\u2019} // done")
        assert json.loads(cleaned) == {"a": "b"}

    def test_removes_trailing_commas(self):
        assert sanitize("[1, 2,]") == "[1, 2]"
        assert sanitize('{"a": [1,],}') == '{"a": [1]}'

    def test_translates_python_and_js_literals(self):
        cleaned = sanitize(
            '{"a": True, "b": None, "c": NaN, "d": -Infinity, "e": "None left"}'
        )
        assert cleaned == '{"a": true, "b": null, "c": null, "d": null, "e": "None left"}'

    def test_wraps_bare_items_key(self):
        cleaned = sanitize('items: [{"ModelCode": "A1"}]')
        assert json.loads(cleaned) == {"items": [{"ModelCode": "A1"}]}

    def test_quotes_bare_keys(self):
        cleaned = sanitize('{ModelCode: "A1", $ref: 2}')
        assert json.loads(cleaned) == {"ModelCode": "A1", "$ref": 2}

    def test_converts_single_quoted_strings(self):
        cleaned = sanitize("{'a': 'say \"hi\"'}")
        assert json.loads(cleaned) == {"a": 'say "hi"'}

    def test_escapes_control_characters_in_strings(self):
        cleaned = sanitize('{"a": "line1\nline2\ttab\x01"}')
        assert cleaned == '{"a": "line1\\nline2\\ttab\\u0001"}'
        assert json.loads(cleaned) == {"a": "line1\nline2\ttab\x01"}

    def test_leaves_whitespace_between_tokens(self):
        assert sanitize('{\n"a": 1}') == '{\n"a": 1}'

    @pytest.mark.parametrize("raw", MESSY_RESPONSES)
    def test_idempotent(self, raw: str):
        """Test that sanitizing twice equals sanitizing once."""
        once = sanitize(raw)
        assert sanitize(once) == once


class TestSalvage:
    """Tests for the staged parse pipeline."""

    def test_unquoted_keys_and_single_quotes(self):
        result = salvage("{items: [{ModelCode: 'A1', ModelDescription: 'x',}]}")

        assert isinstance(result, SalvageOk)
        assert result.ok
        assert result.value == {"items": [{"ModelCode": "A1", "ModelDescription": "x"}]}

    def test_curly_quoted_url(self):
        result = salvage(
            "{\u201curl\u201d: \u201chttp://x.io/a\u201d, \u201cModelCode\u201d: \u201cA1\u201d}"
        )

        assert isinstance(result, SalvageOk)
        assert result.value == {"url": "http://x.io/a", "ModelCode": "A1"}

    def test_fenced_trailing_comma_parses_directly(self):
        raw = (
            "```json\n"
            '{"items": [{"ModelCode": "A1", "ModelDescription": "x"},]}\n'
            "```"
        )
        result = salvage(raw)

        assert isinstance(result, SalvageOk)
        assert result.stage == SalvageStage.DIRECT
        assert result.value["items"][0]["ModelCode"] == "A1"

    def test_object_slice(self):
        result = salvage('Result follows {"a": 1} thanks')

        assert isinstance(result, SalvageOk)
        assert result.stage == SalvageStage.OBJECT_SLICE
        assert result.value == {"a": 1}

    def test_array_slice_returns_bare_list(self):
        result = salvage("Rows: [1, 2, 3] end")

        assert isinstance(result, SalvageOk)
        assert result.stage == SalvageStage.ARRAY_SLICE
        assert result.value == [1, 2, 3]

    def test_items_array_is_wrapped(self):
        raw = (
            'Note [draft] {"items": [{"ModelCode": "A1", "ModelDescription": "x"}], '
            '"total": oops}'
        )
        result = salvage(raw)

        assert isinstance(result, SalvageOk)
        assert result.stage == SalvageStage.ITEMS_ARRAY
        assert result.value == {"items": [{"ModelCode": "A1", "ModelDescription": "x"}]}

    def test_failure_reports_all_stages(self):
        raw = "I could not find any rows."
        result = salvage(raw)

        assert isinstance(result, SalvageFail)
        assert not result.ok
        assert result.stages_tried == tuple(SalvageStage)
        assert result.final_stage == SalvageStage.ITEMS_ARRAY
        assert result.cleaned_text == sanitize(raw)

    def test_failure_diagnostic(self):
        raw = "I could not find any rows."
        result = salvage(raw)

        diagnostic = result.to_diagnostic(raw, prefix_chars=5)

        assert diagnostic["error"] == NON_JSON_ERROR
        assert diagnostic["detail"] == "I cou"
        assert diagnostic["debug"]["cleanedPrefix"] == "I cou"
        assert diagnostic["debug"]["stagesTried"] == [
            "direct",
            "object-slice",
            "array-slice",
            "items-array",
        ]
        assert diagnostic["debug"]["finalStage"] == "items-array"

    @pytest.mark.parametrize("raw", ["", "{{{{[[[", "]]]}}}", "```", None])
    def test_never_raises(self, raw):
        result = salvage(raw)
        assert isinstance(result, SalvageFail)


class TestTopLevelArrays:
    """Tests for outermost bracket span detection."""

    def test_ignores_brackets_in_strings(self):
        spans = list(iter_top_level_arrays('["a]", [1, 2]] [3]'))
        assert spans == ['["a]", [1, 2]]', "[3]"]

    def test_unclosed_array_yields_nothing(self):
        assert list(iter_top_level_arrays("[1, 2")) == []

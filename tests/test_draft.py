# tests/test_draft.py
"""Tests for listing the placeholders a template needs."""

from txtempl.core.draft import Placeholder, draft, draft_seed
from txtempl.core.lexer import lex
from txtempl.core.parser import render
from txtempl.core.variables import VariableKind, VariableStore


class TestDraft:
    def test_lists_each_placeholder_once_in_order(self):
        tokens = lex("Hi {name}, ${greeting:Hello} $sig bye {name}")
        assert draft(tokens) == [
            Placeholder("name", VariableKind.KEY),
            Placeholder("greeting", VariableKind.OPTION, "Hello"),
            Placeholder("sig", VariableKind.CONSTANT),
        ]

    def test_header_is_skipped(self):
        tokens = lex("name: x\nend-of-settings!\n{a}")
        assert draft(tokens) == [Placeholder("a", VariableKind.KEY)]

    def test_literal_dollars_and_stray_braces_are_not_placeholders(self):
        assert draft(lex("$ 5 } {  $name")) == []

    def test_same_name_in_two_kinds_is_listed_twice(self):
        placeholders = draft(lex("{x} $x y"))
        assert [(p.name, p.kind) for p in placeholders] == [("x", VariableKind.KEY), ("x", VariableKind.CONSTANT)]


class TestDraftSeed:
    def test_skeleton_groups_by_table(self):
        seed = draft_seed(lex("Hi {name}, ${greeting:Hello} $sig bye"))
        assert seed == {
            "constants": {"greeting": "Hello", "sig": ""},
            "options": {"greeting": "greeting"},
            "keys": {"name": ""},
        }

    def test_filled_skeleton_renders_without_diagnostics(self):
        tokens = lex("Hi {name}, ${greeting:Hello} $sig bye")
        seed = draft_seed(tokens)
        seed["keys"]["name"] = "Ada"
        seed["constants"]["sig"] = "Bob"
        result = render(tokens, VariableStore.from_mappings(**seed))
        assert result.text == "Hi Ada, Hello Bob bye"
        assert result.ok

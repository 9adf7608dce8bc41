# tests/test_parser.py
"""Tests for settings ingestion and placeholder rendering."""

import pytest

from txtempl.core.lexer import lex
from txtempl.core.parser import DiagnosticKind, TokenCursor, render, render_template
from txtempl.core.tokens import Token, TokenKind
from txtempl.core.variables import Variable, VariableKind, VariableStore


def store(**tables):
    return VariableStore.from_mappings(**tables)


class TestTokenCursor:
    """The cursor never reads past either end of the token list."""

    def test_peek_past_end_returns_none(self):
        cursor = TokenCursor([Token(TokenKind.TEXT, "a")])
        assert cursor.peek() == Token(TokenKind.TEXT, "a")
        assert cursor.peek(1) is None
        assert cursor.peek(-1) is None

    def test_match_requires_every_kind(self):
        cursor = TokenCursor(lex("{name"))
        assert cursor.match(TokenKind.LBRACE, TokenKind.TEXT) is not None
        assert cursor.match(TokenKind.LBRACE, TokenKind.TEXT, TokenKind.RBRACE) is None

    def test_advance_and_at_end(self):
        cursor = TokenCursor(lex("{a}"))
        cursor.advance(3)
        assert cursor.at_end


class TestPlainText:
    """Text without placeholders passes through untouched."""

    def test_round_trip_of_plain_text(self):
        result = render_template("Just some text.\nWith two lines.")
        assert result.text == "Just some text.\nWith two lines."
        assert result.ok

    def test_stray_punctuation_is_kept(self):
        result = render_template("a: b } { {} $")
        assert result.text == "a: b } { {} $"
        assert result.diagnostics == []

    def test_empty_template(self):
        result = render([])
        assert result.text == ""
        assert result.ok


class TestSettings:
    """Header lines become SETTING variables and are not rendered."""

    def test_settings_parse(self):
        result = render_template("lang: de\nend-of-settings!\nHi")
        assert result.text == "Hi"
        assert result.store.get("lang", VariableKind.SETTING) == Variable(VariableKind.SETTING, "de")
        assert result.language == "de"

    def test_multiple_settings(self):
        result = render_template("lang: fr\ntone : formal \nend-of-settings!\nBonjour")
        assert result.settings == {"lang": "fr", "tone": "formal"}
        assert result.text == "Bonjour"

    def test_malformed_lines_are_skipped(self):
        template = "lang de\ntitle: Hello World\nok: yes\n: orphan\nend-of-settings!\nX"
        result = render_template(template)
        assert result.settings == {"ok": "yes"}
        assert result.text == "X"
        assert result.ok

    def test_last_setting_line_without_newline_before_marker_is_ignored(self):
        result = render_template("a: b end-of-settings!\nbody")
        assert result.settings == {}
        assert result.text == "body"

    def test_no_header_means_no_settings(self):
        result = render_template("lang: de\nHi")
        assert result.settings == {}
        assert result.text == "lang: de\nHi"

    def test_unterminated_header_renders_as_text(self):
        template = "x: y\nnot end-of-settings!x\n"
        result = render_template(template)
        assert result.text == template
        assert result.settings == {}

    def test_setting_does_not_shadow_key_of_same_name(self):
        seed = store(keys={"city": "Berlin"})
        result = render_template("city: Rome\nend-of-settings!\n{city}", seed)
        assert result.text == "Berlin"
        assert result.settings == {"city": "Rome"}

    def test_seed_store_is_not_mutated(self):
        seed = store(keys={"city": "Berlin"})
        render_template("lang: de\nend-of-settings!\n{city}", seed)
        assert len(seed) == 1
        assert ("lang", VariableKind.SETTING) not in seed


class TestKeys:
    """{name} and {name:default} placeholders."""

    def test_key_substitution(self):
        result = render_template("Welcome to {city}!", store(keys={"city": "Berlin"}))
        assert result.text == "Welcome to Berlin!"
        assert result.ok

    def test_key_identifier_is_trimmed(self):
        result = render_template("{ city }", store(keys={"city": "Berlin"}))
        assert result.text == "Berlin"

    def test_unresolved_key_preserved(self):
        result = render_template("{city}")
        assert result.text == "{city}"
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.UNRESOLVED_KEY
        assert diagnostic.identifier == "city"
        assert diagnostic.position == 0

    def test_unresolved_key_keeps_original_spacing(self):
        assert render_template("x { city } y").text == "x { city } y"

    def test_key_lookup_ignores_other_kinds(self):
        seed = store(constants={"city": "Paris"}, options={"city": "city"})
        result = render_template("{city}", seed)
        assert result.text == "{city}"
        assert result.diagnostics[0].kind == DiagnosticKind.UNRESOLVED_KEY

    def test_key_default_used_when_missing(self):
        result = render_template("Hi {name:friend}!")
        assert result.text == "Hi friend!"
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.KEY_DEFAULT_USED]

    def test_key_default_ignored_when_present(self):
        result = render_template("Hi {name:friend}!", store(keys={"name": "Ada"}))
        assert result.text == "Hi Ada!"
        assert result.ok

    def test_nested_braces(self):
        result = render_template("{{name}}", store(keys={"name": "v"}))
        assert result.text == "{v}"

    def test_truncated_key_is_literal(self):
        result = render_template("Hello {name")
        assert result.text == "Hello {name"
        assert result.ok

    def test_diagnostic_position_is_token_index(self):
        result = render_template("ab {x}")
        assert result.diagnostics[0].position == 1


class TestOptions:
    """${name} and ${name:default} resolve through a constant."""

    def test_option_indirection(self):
        seed = store(options={"name": "color"}, constants={"color": "blue"})
        result = render_template("${name}", seed)
        assert result.text == "blue"
        assert result.ok

    def test_option_default_fallback(self):
        result = render_template("${name:red}")
        assert result.text == "red"
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].kind == DiagnosticKind.OPTION_DEFAULT_USED

    def test_option_default_is_trimmed(self):
        assert render_template("<${ name : red }>").text == "<red>"

    def test_option_default_ignored_when_resolved(self):
        seed = store(options={"name": "color"}, constants={"color": "blue"})
        result = render_template("${name:red}", seed)
        assert result.text == "blue"
        assert result.ok

    def test_missing_target_constant_uses_default(self):
        result = render_template("${name:red}", store(options={"name": "color"}))
        assert result.text == "red"
        assert result.diagnostics[0].kind == DiagnosticKind.OPTION_DEFAULT_USED
        assert "color" in result.diagnostics[0].message

    def test_missing_target_constant_without_default_is_literal(self):
        result = render_template("x ${name} y", store(options={"name": "color"}))
        assert result.text == "x ${name} y"
        assert result.diagnostics[0].kind == DiagnosticKind.UNRESOLVED_OPTION_TARGET

    def test_unresolved_option_is_literal(self):
        result = render_template("x ${name} y")
        assert result.text == "x ${name} y"
        assert result.diagnostics[0].kind == DiagnosticKind.UNRESOLVED_OPTION

    def test_option_name_is_not_a_constant_lookup(self):
        result = render_template("${color}", store(constants={"color": "blue"}))
        assert result.text == "${color}"

    def test_truncated_option_is_literal(self):
        result = render_template("${name:red")
        assert result.text == "${name:red"
        assert result.ok


class TestConstants:
    """$name followed by a space."""

    def test_constant_substitution_keeps_remainder(self):
        seed = store(constants={"elternteil": "Mutter"})
        result = render_template("Mein $elternteil ist doof", seed)
        assert result.text == "Mein Mutter ist doof"
        assert result.ok

    def test_unresolved_constant_is_literal(self):
        result = render_template("Mein $elternteil ist doof")
        assert result.text == "Mein $elternteil ist doof"
        assert result.diagnostics[0].kind == DiagnosticKind.UNRESOLVED_CONSTANT
        assert result.diagnostics[0].identifier == "elternteil"

    @pytest.mark.parametrize("template", ["$name", "Hi $name", "$ name", "$", "$name\nnext"])
    def test_dollar_without_space_delimited_identifier_is_literal(self, template):
        result = render_template(template, store(constants={"name": "X"}))
        assert result.text == template
        assert result.ok

    def test_constant_lookup_ignores_keys(self):
        result = render_template("$city is", store(keys={"city": "Berlin"}))
        assert result.text == "$city is"
        assert len(result.diagnostics) == 1


class TestFullTemplates:
    """Mixed templates with a header and several placeholder forms."""

    def test_header_option_default_and_constant(self):
        template = "lang: de \nend-of-settings!\nHallo ich bin ${name:Peter} Lustig.\nMein $elternteil ist doof"
        result = render_template(template, store(constants={"elternteil": "Mutter"}))
        assert result.text == "Hallo ich bin Peter Lustig.\nMein Mutter ist doof"
        assert result.language == "de"
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.OPTION_DEFAULT_USED]

    def test_all_forms_resolved(self):
        seed = store(
            keys={"name": "Ada"},
            options={"greeting": "formal"},
            constants={"formal": "Dear", "sender": "Bob"},
        )
        template = "${greeting} {name},\nthanks.\n$sender out"
        result = render_template(template, seed)
        assert result.text == "Dear Ada,\nthanks.\nBob out"
        assert result.ok

    def test_render_accepts_plain_mapping_seed(self):
        seed = {"city": Variable(VariableKind.KEY, "Berlin")}
        assert render(lex("{city}"), seed).text == "Berlin"

    def test_unresolved_placeholders_keep_all_text(self):
        template = "A {k} B ${o} C ${p:d} D $c e"
        result = render_template(template)
        assert result.text == "A {k} B ${o} C d D $c e"
        assert len(result.diagnostics) == 4


class TestLibraryUse:
    """Calling the API without configuring logging prints nothing."""

    def test_render_writes_nothing_to_stdout_or_stderr(self, capsys):
        result = render_template("Hi {x}")
        assert result.diagnostics[0].kind == DiagnosticKind.UNRESOLVED_KEY
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_unterminated_header_warning_is_not_printed(self, capsys):
        render_template("x: y\nnot end-of-settings!x\n")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_crlf_header_settings_are_read(self):
        result = render_template("lang: de\r\nend-of-settings!\r\nHi")
        assert result.text == "Hi"
        assert result.settings == {"lang": "de"}

"""Tests for identifier module."""

import pytest

from plugin_meta import constants
from plugin_meta.errors import InvalidIdentifierError
from plugin_meta.identifier import LENIENT, STRICT, check_id, default_grammar, get_grammar, validate


class TestStrictGrammar:
    """Tests for the default 2-64 character grammar."""

    def test_minimum_two_characters(self):
        assert not validate("a", STRICT)
        assert validate("ab", STRICT)
        assert validate("a0", STRICT)

    def test_must_start_with_letter(self):
        assert not validate("0a", STRICT)
        assert not validate("-a", STRICT)
        assert not validate("_a", STRICT)

    def test_no_uppercase(self):
        assert not validate("Ab", STRICT)
        assert not validate("aB", STRICT)

    def test_dash_and_underscore_allowed(self):
        assert validate("my-plugin_2", STRICT)
        assert validate("a_-", STRICT)

    def test_maximum_length(self):
        assert validate("a" * 64, STRICT)
        assert not validate("a" * 65, STRICT)

    def test_rejects_empty_and_non_strings(self):
        assert not validate("", STRICT)
        assert not validate(None, STRICT)
        assert not validate(42, STRICT)

    def test_trailing_newline_does_not_match(self):
        assert not validate("plugin\n", STRICT)

    def test_other_characters_rejected(self):
        assert not validate("my.plugin", STRICT)
        assert not validate("my plugin", STRICT)
        assert not validate("plügin", STRICT)


class TestLenientGrammar:
    """Tests for the 1-64 character grammar."""

    def test_single_character_accepted(self):
        assert validate("a", LENIENT)

    def test_other_rules_unchanged(self):
        assert not validate("", LENIENT)
        assert not validate("0", LENIENT)
        assert not validate("A", LENIENT)
        assert validate("a" * 64, LENIENT)
        assert not validate("a" * 65, LENIENT)


class TestGrammarLookup:
    """Tests for grammar configuration."""

    def test_get_grammar_by_name(self):
        assert get_grammar("strict") is STRICT
        assert get_grammar(" LENIENT ") is LENIENT

    def test_unknown_grammar(self):
        with pytest.raises(ValueError, match="Unknown id grammar"):
            get_grammar("loose")

    def test_default_grammar_follows_constant(self, monkeypatch):
        monkeypatch.setattr(constants, "DEFAULT_ID_GRAMMAR", "lenient")
        assert default_grammar() is LENIENT
        assert validate("a")

        monkeypatch.setattr(constants, "DEFAULT_ID_GRAMMAR", "strict")
        assert not validate("a")

    def test_invalid_bounds(self):
        from plugin_meta.identifier import IdGrammar

        with pytest.raises(ValueError):
            IdGrammar("broken", 0, 10)


class TestCheckId:
    """Tests for check_id."""

    def test_returns_valid_id(self):
        assert check_id("testplugin", STRICT) == "testplugin"

    def test_raises_with_context(self):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            check_id("Bad", STRICT)
        assert exc_info.value.plugin_id == "Bad"
        assert exc_info.value.grammar == "strict"
        assert "'Bad'" in str(exc_info.value)

    def test_empty_always_rejected(self):
        for grammar in (STRICT, LENIENT):
            with pytest.raises(InvalidIdentifierError):
                check_id("", grammar)

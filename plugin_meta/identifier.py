"""Plugin id grammars and validation."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from plugin_meta import constants
from plugin_meta.errors import InvalidIdentifierError


@dataclass(frozen=True)
class IdGrammar:
    """A named lexical grammar for plugin ids.

    Ids are lower case, start with an ASCII letter and continue with letters,
    digits, dashes or underscores. Grammars differ only in the allowed length.
    """

    name: str
    min_length: int
    max_length: int
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not 1 <= self.min_length <= self.max_length:
            raise ValueError(f"Invalid length bounds for grammar '{self.name}'")
        compiled = re.compile(
            rf"[a-z][a-z0-9_-]{{{self.min_length - 1},{self.max_length - 1}}}"
        )
        object.__setattr__(self, "pattern", compiled)

    def matches(self, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None


# At least 2 characters, at most 64.
STRICT = IdGrammar("strict", 2, 64)

# Single-character ids are allowed.
LENIENT = IdGrammar("lenient", 1, 64)

GRAMMARS: Dict[str, IdGrammar] = {g.name: g for g in (STRICT, LENIENT)}


def get_grammar(name: str) -> IdGrammar:
    """Look up a grammar by name (case-insensitive)."""
    grammar = GRAMMARS.get(name.strip().lower())
    if grammar is None:
        raise ValueError(
            f"Unknown id grammar '{name}', expected one of: {', '.join(GRAMMARS)}"
        )
    return grammar


def default_grammar() -> IdGrammar:
    """Grammar named by PLUGIN_META_ID_GRAMMAR."""
    return get_grammar(constants.DEFAULT_ID_GRAMMAR)


def validate(value: Any, grammar: Optional[IdGrammar] = None) -> bool:
    """Return whether ``value`` is a valid plugin id under ``grammar``."""
    return (grammar or default_grammar()).matches(value)


def check_id(value: Any, grammar: Optional[IdGrammar] = None) -> str:
    """Return ``value`` unchanged or raise InvalidIdentifierError."""
    grammar = grammar or default_grammar()
    if not grammar.matches(value):
        raise InvalidIdentifierError(value, grammar.name)
    return value

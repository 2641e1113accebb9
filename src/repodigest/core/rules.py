# src/repodigest/core/rules.py
"""
Name-matching rules for skip/priority lists.

A rule is either a literal name, a regular expression, or a gitignore-style
glob. All three are evaluated through Rule.matches so callers never need to
inspect what kind of rule they hold.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

import pathspec

from repodigest.errors import ConfigurationError

_GLOB_CHARS = set("*?[")


class RuleKind(Enum):
    LITERAL = "literal"
    REGEX = "regex"
    GLOB = "glob"


@dataclass(frozen=True)
class Rule:
    kind: RuleKind
    value: str
    _matcher: object = field(default=None, init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        if self.kind is RuleKind.REGEX:
            try:
                matcher = re.compile(self.value)
            except re.error as e:
                raise ConfigurationError(f"Invalid regex rule {self.value!r}: {e}") from e
        elif self.kind is RuleKind.GLOB:
            matcher = pathspec.GitIgnoreSpec.from_lines([self.value])
        else:
            matcher = None
        object.__setattr__(self, "_matcher", matcher)

    @classmethod
    def literal(cls, value: str) -> "Rule":
        return cls(RuleKind.LITERAL, value)

    @classmethod
    def regex(cls, pattern: str) -> "Rule":
        return cls(RuleKind.REGEX, pattern)

    @classmethod
    def glob(cls, pattern: str) -> "Rule":
        return cls(RuleKind.GLOB, pattern)

    @classmethod
    def parse(cls, text: str) -> "Rule":
        """
        Builds a rule from user input:
        're:<pattern>' is a regex, anything with glob characters is a glob,
        everything else is matched literally.
        """
        if text.startswith("re:"):
            return cls.regex(text[3:])
        if _GLOB_CHARS & set(text):
            return cls.glob(text)
        return cls.literal(text)

    def matches(self, name: str) -> bool:
        if self.kind is RuleKind.LITERAL:
            return name == self.value
        if self.kind is RuleKind.REGEX:
            return self._matcher.search(name) is not None
        return self._matcher.match_file(name)

    def __str__(self) -> str:
        if self.kind is RuleKind.REGEX:
            return f"re:{self.value}"
        return self.value


def matches_any(name: str, rules: Iterable[Rule]) -> bool:
    return any(rule.matches(name) for rule in rules)

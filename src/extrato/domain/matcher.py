"""Document matchers for classification rules.

CONTAINS is a case-insensitive substring test, REGEX a case-insensitive
``re.search``. Both run against the normalized document text. Accents are
compared as they are.
"""

import re
from typing import Iterable, Optional

from extrato.domain.entities import MatcherType, Rule, RuleMatch
from extrato.domain.errors import ValidationError


def validate_pattern(matcher_type: MatcherType | str, pattern: Optional[str]) -> str:
    """Check that a pattern can be used with a matcher type.

    Returns:
        The pattern with surrounding whitespace removed

    Raises:
        ValidationError: If the pattern is empty, the matcher type unknown, or
            a REGEX pattern does not compile
    """
    try:
        kind = MatcherType(matcher_type)
    except ValueError:
        raise ValidationError(f"Invalid matcher type '{matcher_type}'. Expected CONTAINS or REGEX")

    if pattern is None or not pattern.strip():
        raise ValidationError("Pattern cannot be empty")
    pattern = pattern.strip()

    if kind is MatcherType.REGEX:
        try:
            re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise ValidationError(f"Invalid regex pattern '{pattern}': {e}")
    return pattern


class DocumentMatcher:
    """Compiled matcher for one rule version."""

    def __init__(self, rule: Rule):
        self.rule = rule
        try:
            pattern = validate_pattern(rule.matcher_type, rule.pattern)
        except ValidationError as e:
            raise ValidationError(f"Rule #{rule.id} v{rule.version} '{rule.name}': {e}") from e
        if rule.matcher_type is MatcherType.REGEX:
            self._regex: Optional[re.Pattern[str]] = re.compile(pattern, re.IGNORECASE)
            self._needle = None
        else:
            self._regex = None
            self._needle = pattern.casefold()

    def matches(self, document: str) -> bool:
        """Test a normalized document against the rule pattern."""
        if not document:
            return False
        if self._regex is not None:
            return self._regex.search(document) is not None
        return self._needle in document.casefold()

    def rationale(self) -> str:
        """Explain a match in terms of the exact rule version."""
        rule = self.rule
        if rule.matcher_type is MatcherType.REGEX:
            how = f"matches regex '{rule.pattern}'"
        else:
            how = f"contains '{rule.pattern}'"
        return f"Rule #{rule.id} v{rule.version} '{rule.name}' matched: {how}"


class RuleMatcher:
    """Ordered set of rule matchers where the first match wins.

    Rules are evaluated in the order given; callers pass them already sorted
    by evaluation order.
    """

    def __init__(self, rules: Iterable[Rule]):
        self.matchers = [DocumentMatcher(rule) for rule in rules]

    def __len__(self) -> int:
        return len(self.matchers)

    def find_first_match(self, document: str) -> Optional[RuleMatch]:
        """Return the first matching rule, or None when nothing matches."""
        for matcher in self.matchers:
            if matcher.matches(document):
                return RuleMatch(rule=matcher.rule, rationale=matcher.rationale())
        return None

    def find_all_matches(self, document: str) -> list[RuleMatch]:
        """Return every matching rule in evaluation order."""
        return [
            RuleMatch(rule=m.rule, rationale=m.rationale())
            for m in self.matchers
            if m.matches(document)
        ]

"""
Platform level rule evaluation.

Evaluates integer range expressions against the host's platform revision.

Supported rule formats:
- ">=29"   current level is 29 or higher
- ">29"    current level is strictly higher than 29
- "<=33"   current level is 33 or lower
- "<33"    current level is strictly lower than 33
- "21-30"  current level is within the inclusive range [21, 30]
- "30"     current level is exactly 30

Invalid rules never match and are logged as warnings.
"""

import logging
import operator
import re
from typing import Callable, List, Sequence, Tuple

from flaggate.errors import RuleParseError

logger = logging.getLogger(__name__)

# Two-character operators must be tested before their one-character prefixes
COMPARISON_OPERATORS: List[Tuple[str, Callable[[object, object], bool]]] = [
    (">=", operator.ge),
    (">", operator.gt),
    ("<=", operator.le),
    ("<", operator.lt),
]

_INT_PATTERN = re.compile(r"[+-]?\d+")


def parse_level(text: str, rule: str) -> int:
    """Parse one integer operand of a level rule."""
    candidate = text.strip()
    if not _INT_PATTERN.fullmatch(candidate):
        raise RuleParseError(rule, f"'{candidate}' is not an integer")
    return int(candidate)


class LevelEvaluator:
    """Evaluate platform level rules. Stateless and safe to share across threads."""

    def evaluate(self, rule: str, current_level: int) -> bool:
        """
        Evaluate a single level rule against the current level.

        Args:
            rule: A rule string (e.g., ">=29", "21-30", "30")
            current_level: The platform level to test

        Returns:
            True if the rule matches, False if it does not or cannot be parsed.

        Example:
            >>> LevelEvaluator().evaluate("23-30", 29)
            True
        """
        try:
            return self._match(rule, current_level)
        except RuleParseError as e:
            logger.warning(f"Failed to evaluate level rule: {e.message}")
            return False

    def evaluate_any(self, rules: Sequence[str], current_level: int) -> bool:
        """True when no rules are given, otherwise True if any rule matches."""
        if not rules:
            return True
        return any(self.evaluate(rule, current_level) for rule in rules)

    def _match(self, rule: str, current_level: int) -> bool:
        condition = rule.strip()

        for symbol, compare in COMPARISON_OPERATORS:
            if condition.startswith(symbol):
                target = parse_level(condition[len(symbol):], rule)
                return compare(current_level, target)

        if "-" in condition:
            parts = condition.split("-")
            if len(parts) != 2:
                raise RuleParseError(rule, "range must have exactly two bounds")
            minimum = parse_level(parts[0], rule)
            maximum = parse_level(parts[1], rule)
            return minimum <= current_level <= maximum

        return current_level == parse_level(condition, rule)

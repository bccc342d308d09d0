"""
Application version rule evaluation.

Evaluates semantic version range expressions against the host application's
version string. Rules and versions are matched case-insensitively after
trimming.

Supported rule formats:
- ">=1.2.0", ">1.0.0", "<=3.0.0", "<2.5.0"   comparisons
- "1.0.0-2.0.0"                             inclusive range
- "2.0.0-beta"                              exact match

Versions take the form MAJOR(.N)*[-TAG]. Missing numeric components count
as zero, so "1.0" equals "1.0.0". A release ranks above every pre-release of
the same numeric version, and pre-release tags compare by plain string order
(alpha < beta < rc).

A range rule is split on its first hyphen only. The split is taken as a range
when both halves are versions; otherwise the whole rule is an exact match.
Because only the upper bound can carry a tag, a rule such as
"1.0.0-alpha-2.0.0" has no defined range reading and only ever matches the
literal string.
The reverse also holds: a tag that is itself a version, as in "1.0.0-1",
reads as the range [1.0.0, 1], so that rule never matches "1.0.0-1".
"""

import logging
import re
from itertools import zip_longest
from typing import Optional, Sequence, Tuple

from flaggate.engine.conditions.level import COMPARISON_OPERATORS
from flaggate.errors import RuleParseError

logger = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(r"\d+(\.\d+)*(-[0-9a-z][0-9a-z.\-]*)?")


def is_version(text: str) -> bool:
    """Check whether text is a well-formed (lower-cased) version string."""
    return _VERSION_PATTERN.fullmatch(text) is not None


def _split_version(version: str) -> Tuple[str, Optional[str]]:
    main, _, tag = version.partition("-")
    return main, (tag or None)


def _component(text: Optional[str]) -> int:
    try:
        return int(text) if text else 0
    except ValueError:
        return 0


def compare_versions(left: str, right: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if left < right, 0 if equal, 1 if left > right.
        Never raises: unparseable numeric components count as zero.
    """
    main_left, tag_left = _split_version(left.strip().lower())
    main_right, tag_right = _split_version(right.strip().lower())

    for part_left, part_right in zip_longest(main_left.split("."), main_right.split(".")):
        a, b = _component(part_left), _component(part_right)
        if a != b:
            return -1 if a < b else 1

    if tag_left == tag_right:
        return 0
    # A release outranks any pre-release of the same numeric version
    if tag_left is None:
        return 1
    if tag_right is None:
        return -1
    return -1 if tag_left < tag_right else 1


class VersionEvaluator:
    """Evaluate application version rules. Stateless and safe to share across threads."""

    def evaluate(self, rule: str, current_version: str) -> bool:
        """
        Evaluate a single version rule against the current version.

        Args:
            rule: A rule string (e.g., ">=2.0.0", "<3.0.0", "1.0.0-2.0.0-rc")
            current_version: The application version (e.g., "2.1.0")

        Returns:
            True if the rule matches, False if it does not or cannot be parsed.
        """
        try:
            return self._match(rule, current_version)
        except RuleParseError as e:
            logger.warning(f"Failed to evaluate version rule: {e.message}")
            return False

    def evaluate_any(self, rules: Sequence[str], current_version: str) -> bool:
        """True when no rules are given, otherwise True if any rule matches."""
        if not rules:
            return True
        return any(self.evaluate(rule, current_version) for rule in rules)

    def _match(self, rule: str, current_version: str) -> bool:
        condition = rule.strip().lower()
        current = current_version.strip().lower()

        for symbol, compare in COMPARISON_OPERATORS:
            if condition.startswith(symbol):
                target = condition[len(symbol):].strip()
                self._require_version(target, rule)
                self._require_version(current, rule)
                return compare(compare_versions(current, target), 0)

        if "-" in condition:
            minimum, _, maximum = (part.strip() for part in condition.partition("-"))
            if is_version(minimum) and is_version(maximum):
                self._require_version(current, rule)
                return (
                    compare_versions(current, minimum) >= 0
                    and compare_versions(current, maximum) <= 0
                )

        return current == condition

    @staticmethod
    def _require_version(text: str, rule: str) -> None:
        if not is_version(text):
            raise RuleParseError(rule, f"'{text}' is not a version")

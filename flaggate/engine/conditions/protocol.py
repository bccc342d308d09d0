"""
Protocol definition for condition rule evaluators.

Defines the interface that the level and version evaluators implement.
"""

from typing import Protocol, Sequence, TypeVar

ValueT = TypeVar("ValueT", contravariant=True)


class RuleEvaluator(Protocol[ValueT]):
    """
    Protocol for rule evaluation implementations.

    Both LevelEvaluator and VersionEvaluator implement this protocol,
    allowing the registry to check any rule list without knowing the
    rule grammar.
    """

    def evaluate(self, rule: str, current: ValueT) -> bool:
        """
        Check a single textual rule against the current value.

        Args:
            rule: The rule text (e.g., ">=29", "1.0.0-2.0.0")
            current: The runtime value to test

        Returns:
            True if the rule matches. A rule that cannot be parsed never
            matches; it does not raise.
        """
        ...

    def evaluate_any(self, rules: Sequence[str], current: ValueT) -> bool:
        """
        Check a rule list with OR semantics.

        Args:
            rules: Rule texts; an empty sequence means "no restriction"
            current: The runtime value to test

        Returns:
            True if the list is empty or any rule matches.
        """
        ...

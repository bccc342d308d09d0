"""
Condition evaluation for feature eligibility.

Two rule interpreters decide whether a runtime value satisfies a textual
range expression:
1. LevelEvaluator - integer platform levels (">=29", "21-30", "30")
2. VersionEvaluator - semantic application versions (">=1.0.0-rc", "1.0-2.0")

Both implement the RuleEvaluator protocol and are pure, so one instance can
be shared by every caller.
"""

from flaggate.engine.conditions.protocol import RuleEvaluator
from flaggate.engine.conditions.level import LevelEvaluator
from flaggate.engine.conditions.version import VersionEvaluator, compare_versions, is_version

__all__ = [
    # Protocol
    "RuleEvaluator",
    # Evaluators
    "LevelEvaluator",
    "VersionEvaluator",
    # Helpers
    "compare_versions",
    "is_version",
]

"""
Tests for application version comparison and rule evaluation.

Tests cover:
- Numeric component comparison with zero padding
- Pre-release precedence (alpha < beta < rc < release)
- Operator, range and exact rules
- Fail-closed handling of malformed rules
"""
import pytest

from flaggate.engine.conditions import VersionEvaluator, compare_versions, is_version


@pytest.fixture
def evaluator() -> VersionEvaluator:
    return VersionEvaluator()


class TestCompareVersions:
    """Tests for compare_versions."""

    def test_equal_versions(self):
        assert compare_versions("1.2.3", "1.2.3") == 0

    def test_missing_components_are_zero(self):
        """'1.0' and '1.0.0' should compare equal."""
        assert compare_versions("1.0", "1.0.0") == 0
        assert compare_versions("1", "1.0.0") == 0

    def test_components_compare_numerically(self):
        """'1.10.0' is newer than '1.9.0' (not a string comparison)."""
        assert compare_versions("1.10.0", "1.9.0") == 1
        assert compare_versions("1.9.0", "1.10.0") == -1

    def test_result_is_normalized(self):
        """Results are -1, 0 or 1 regardless of the gap."""
        assert compare_versions("5.0.0", "1.0.0") == 1
        assert compare_versions("1.0.0", "5.0.0") == -1

    def test_pre_release_before_release(self):
        """A pre-release ranks below the release of the same version."""
        assert compare_versions("1.0.0-alpha", "1.0.0") < 0
        assert compare_versions("1.0.0", "1.0.0-rc") > 0

    def test_pre_release_tags_order(self):
        """alpha < beta < rc for a fixed main version."""
        assert compare_versions("1.0.0-alpha", "1.0.0-beta") == -1
        assert compare_versions("1.0.0-beta", "1.0.0-rc") == -1
        assert compare_versions("1.0.0-rc", "1.0.0-alpha") == 1

    def test_main_version_dominates_tag(self):
        """A higher main version wins even against a release."""
        assert compare_versions("1.0.1-alpha", "1.0.0") == 1

    def test_case_insensitive(self):
        assert compare_versions("1.0.0-RC", "1.0.0-rc") == 0

    def test_unparseable_components_count_as_zero(self):
        """compare never raises; junk components are treated as 0."""
        assert compare_versions("1.x.0", "1.0.0") == 0
        assert compare_versions("", "0") == 0


class TestIsVersion:
    """Tests for the version shape check."""

    @pytest.mark.parametrize("text", ["1", "1.0", "1.0.0", "10.20.30-rc.1", "1.0.0-beta-2"])
    def test_valid(self, text):
        assert is_version(text)

    @pytest.mark.parametrize("text", ["", "v1.0", "1.", ".1", "1.0-", "alpha", "1..0"])
    def test_invalid(self, text):
        assert not is_version(text)


class TestReleaseRules:
    """Rule evaluation against release version 1.0.0."""

    CURRENT = "1.0.0"

    @pytest.mark.parametrize(
        "rule, expected",
        [
            (">=1.0.0", True),
            (">=1.0.1", False),
            (">0.9.0", True),
            ("<0.9.0", False),
            ("<=1.0.0", True),
            ("<=0.9.0", False),
            ("<1.0.1", True),
            ("<1.0.0", False),
            ("0.9.0-1.0.0", True),
            ("1.1.0-1.2.0", False),
            ("1.0.0", True),
            ("1.1.0", False),
        ],
    )
    def test_rule(self, evaluator, rule, expected):
        assert evaluator.evaluate(rule, self.CURRENT) is expected

    def test_padding_applies_to_operands(self, evaluator):
        """'>=1.0' is satisfied by 1.0.0."""
        assert evaluator.evaluate(">=1.0", self.CURRENT) is True

    def test_rule_is_trimmed_and_case_insensitive(self, evaluator):
        assert evaluator.evaluate("  >= 1.0.0-RC ", self.CURRENT) is True


class TestPreReleaseRules:
    """Rule evaluation with pre-release tags."""

    def test_alpha_satisfies_gte_alpha(self, evaluator):
        assert evaluator.evaluate(">=1.0.0-alpha", "1.0.0-alpha") is True

    def test_alpha_does_not_satisfy_gt_beta(self, evaluator):
        assert evaluator.evaluate(">1.0.0-beta", "1.0.0-alpha") is False

    def test_beta_satisfies_gt_alpha(self, evaluator):
        assert evaluator.evaluate(">1.0.0-alpha", "1.0.0-beta") is True

    def test_rc_satisfies_gte_beta(self, evaluator):
        assert evaluator.evaluate(">=1.0.0-beta", "1.0.0-rc") is True

    def test_release_satisfies_gte_rc(self, evaluator):
        assert evaluator.evaluate(">=1.0.0-rc", "1.0.0") is True

    def test_pre_release_below_release_bound(self, evaluator):
        assert evaluator.evaluate("<1.0.0", "1.0.0-rc") is True

    def test_exact_pre_release_match(self, evaluator):
        """A single tagged version is an exact rule, not a range."""
        assert evaluator.evaluate("1.0.0-beta", "1.0.0-beta") is True
        assert evaluator.evaluate("1.0.0-beta", "1.0.0-BETA") is True
        assert evaluator.evaluate("1.0.0-beta", "1.0.0") is False

    def test_range_with_tagged_upper_bound(self, evaluator):
        """Only the first hyphen splits a range, so the upper bound keeps its tag."""
        assert evaluator.evaluate("0.9.0-1.0.0-rc", "1.0.0-beta") is True
        assert evaluator.evaluate("0.9.0-1.0.0-rc", "1.0.0") is False

    def test_tagged_lower_bound_has_no_range_reading(self, evaluator):
        """
        '1.0.0-alpha-2.0.0' cannot be split into two versions on its first
        hyphen. Its range meaning is undefined; it only matches itself.
        """
        assert evaluator.evaluate("1.0.0-alpha-2.0.0", "1.5.0") is False
        assert evaluator.evaluate("1.0.0-alpha-2.0.0", "1.0.0-alpha-2.0.0") is True

    def test_numeric_tag_reads_as_range(self, evaluator):
        """
        '1.0.0-1' splits into two versions, so it is the range [1.0.0, 1]
        rather than the exact pre-release, which sorts below 1.0.0.
        """
        assert evaluator.evaluate("1.0.0-1", "1.0.0-1") is False
        assert evaluator.evaluate("1.0.0-1", "1.0.0") is True


class TestMalformedVersionRules:
    """Unparseable rules evaluate to False and never raise."""

    @pytest.mark.parametrize("rule", [">=abc", ">=", "<v2", ">1.0.0.", "<=1..0"])
    def test_malformed_operand(self, evaluator, rule):
        assert evaluator.evaluate(rule, "1.0.0") is False

    def test_malformed_current_version(self, evaluator):
        """An unusable current version never satisfies a comparison."""
        assert evaluator.evaluate(">=0.0.1", "latest") is False
        assert evaluator.evaluate("0.1.0-2.0.0", "latest") is False


class TestEvaluateAny:
    """Tests for OR-combination of version rules."""

    def test_empty_rules_always_match(self, evaluator):
        assert evaluator.evaluate_any([], "0.0.1") is True
        assert evaluator.evaluate_any([], "not-a-version") is True

    def test_any_rule_matches(self, evaluator):
        assert evaluator.evaluate_any(["<0.5.0", "1.0.0"], "1.0.0") is True

    def test_no_rule_matches(self, evaluator):
        assert evaluator.evaluate_any(["<0.5.0", ">=2.0.0"], "1.0.0") is False
